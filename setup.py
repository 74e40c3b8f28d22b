"""
Setup script for sarray-core

Pure-Python package in a src/ layout. Native backends are separate
distributions that advertise themselves under the ``sarray.backends``
entry-point group.
"""

from pathlib import Path
from setuptools import setup, find_packages


# Read version from src/sarray/__init__.py
def get_version():
    version_file = Path("src/sarray/__init__.py")
    if version_file.exists():
        for line in version_file.read_text().splitlines():
            if line.startswith("__version__"):
                return line.split("=")[1].strip().strip('"').strip("'")
    return "0.1.0"


# Read long description from README
def get_long_description():
    readme = Path("README.md")
    if readme.exists():
        return readme.read_text(encoding="utf-8")
    return ""


setup(
    name="sarray-core",
    version=get_version(),
    description="Strided N-dimensional arrays with shared-storage views and pluggable backends",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.24",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    zip_safe=True,
)
