"""
Module-level convenience functions.

Each function forwards to the active backend (see ``get_backend``), so

    >>> sarray.zeros(2, 3)

is ``get_backend().get_array_factory().zeros(2, 3)``.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Union

import numpy as np

from ._array import Range, StridedArray
from ._backend import get_backend
from .api import ArrayFactory, ArrayRoutines, LinearAlgebraRoutines

__all__ = [
    'factory',
    'routines',
    'linalg',
    'array',
    'from_numpy',
    'zeros',
    'ones',
    'full',
    'eye',
    'diag',
    'arange',
    'linspace',
    'rand',
    'randn',
]


def factory() -> ArrayFactory:
    """Array factory of the active backend."""
    return get_backend().get_array_factory()


def routines() -> ArrayRoutines:
    """Array routines of the active backend."""
    return get_backend().get_array_routines()


def linalg() -> LinearAlgebraRoutines:
    """Linear algebra routines of the active backend."""
    return get_backend().get_linear_algebra_routines()


# =============================================================================
# Construction
# =============================================================================

def array(data: Any, dtype: Any = None) -> StridedArray:
    """
    Array from literal data.

    Nested sequences are read row-major, the way they are written:

        >>> a = sarray.array([[1, 2], [3, 4]])
        >>> a.get(0, 1)
        2
    """
    return factory().array(data, dtype)


def from_numpy(arr: np.ndarray) -> StridedArray:
    return factory().from_numpy(arr)


def zeros(*shape: int, dtype: Any = None) -> StridedArray:
    return factory().zeros(*shape, dtype=dtype)


def ones(*shape: int, dtype: Any = None) -> StridedArray:
    return factory().ones(*shape, dtype=dtype)


def full(shape: Union[int, Sequence[int]], value: Any, dtype: Any = None) -> StridedArray:
    return factory().full(shape, value, dtype)


def eye(n: int) -> StridedArray:
    return factory().eye(n)


def diag(x: StridedArray) -> StridedArray:
    return factory().diag(x)


def arange(*args: int) -> Range:
    """Read-only integer range; same arguments as the builtin ``range``."""
    return factory().range(*args)


def linspace(start: float, end: float, size: int) -> StridedArray:
    return factory().linspace(start, end, size)


def rand(*shape: int, rng: Optional[Union[np.random.Generator, int]] = None) -> StridedArray:
    """Uniform samples on (-1, 1)."""
    return factory().rand(*shape, rng=rng)


def randn(*shape: int, rng: Optional[Union[np.random.Generator, int]] = None) -> StridedArray:
    return factory().randn(*shape, rng=rng)


def randi(low: int, high: int, *shape: int,
          rng: Optional[Union[np.random.Generator, int]] = None) -> StridedArray:
    """Uniform integers on ``[low, high]``, both ends included."""
    return factory().randi(low, high, *shape, rng=rng)
