"""
Global configuration for sarray.

Provides:
- Default element kind for factory functions
- Preferred backend name (``SARRAY_BACKEND``)
- Root seed for per-thread default random generators (``SARRAY_SEED``)
- Display settings
"""

from __future__ import annotations

import os
from typing import Optional, Union

from ._dtypes import DType, validate_dtype


def _env_backend() -> Optional[str]:
    value = os.environ.get('SARRAY_BACKEND', '').strip()
    return value or None


def _env_seed() -> Optional[int]:
    value = os.environ.get('SARRAY_SEED', '').strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"SARRAY_SEED must be an integer, got {value!r}") from None


# =============================================================================
# Global Configuration State
# =============================================================================

class _Config:
    """
    Global configuration singleton.

    Values are read from the environment once at import and on ``reset()``;
    afterwards they change only through the setters.
    """

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        """Restore defaults and re-read the environment."""
        self._default_dtype = DType.FLOAT64
        self._backend = _env_backend()
        self._seed = _env_seed()
        self._print_threshold = 6
        # Monotonic across resets so stale per-thread generators are detected
        self._generation = getattr(self, "_generation", -1) + 1

    @property
    def default_dtype(self) -> DType:
        """Element kind used when a factory call does not name one."""
        return self._default_dtype

    @default_dtype.setter
    def default_dtype(self, value: Union[DType, str, type]):
        dtype = validate_dtype(value)
        if dtype == DType.OBJECT:
            raise ValueError("Default dtype must be a primitive kind")
        self._default_dtype = dtype

    @property
    def backend(self) -> Optional[str]:
        """Preferred backend name, None for automatic selection."""
        return self._backend

    @backend.setter
    def backend(self, value: Optional[str]):
        self._backend = value or None

    @property
    def seed(self) -> Optional[int]:
        """Root seed for default generators, None for OS entropy."""
        return self._seed

    @seed.setter
    def seed(self, value: Optional[int]):
        if value is not None and (not isinstance(value, int) or value < 0):
            raise ValueError(f"Seed must be a non-negative integer, got {value!r}")
        self._seed = value
        # Per-thread generators compare against this to know they are stale
        self._generation += 1

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def print_threshold(self) -> int:
        """Number of elements after which ``repr`` abbreviates."""
        return self._print_threshold

    @print_threshold.setter
    def print_threshold(self, value: int):
        if value < 2:
            raise ValueError(f"print_threshold must be at least 2, got {value}")
        self._print_threshold = value


# Global config instance
_config = _Config()


# =============================================================================
# Public API
# =============================================================================

def get_config() -> _Config:
    """Get global configuration instance."""
    return _config


def set_default_dtype(dtype: Union[DType, str, type]) -> None:
    """
    Set the element kind used by factory functions without ``dtype``.

    Example:
        >>> sarray.set_default_dtype('int64')
        >>> sarray.zeros(3).dtype
        <DType.INT64: 2>
    """
    _config.default_dtype = dtype


def get_default_dtype() -> DType:
    return _config.default_dtype


def set_seed(seed: Optional[int]) -> None:
    """
    Seed the default random generators.

    Generators already created by other threads are replaced on their next
    use.
    """
    _config.seed = seed


__all__ = [
    'get_config',
    'set_default_dtype',
    'get_default_dtype',
    'set_seed',
]
