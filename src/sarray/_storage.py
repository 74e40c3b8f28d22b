"""
Typed backing storage.

A storage is a flat, fixed-size buffer of one element kind. It implements
only scalar access (``get``/``set`` at a buffer position); shape, stride and
offset live in the array descriptors that share it.

Numeric kinds are held in ctypes arrays; complex values are interleaved
``(real, imag)`` pairs of ``c_double``; references live in a Python list.
Two storages have no backing buffer at all: ``RangeStorage`` computes its
values and ``ConvertedStorage`` converts on the fly over another storage.
"""

from __future__ import annotations

import ctypes
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, List, Optional

import numpy as np

from ._dtypes import DType, converter
from ._errors import UnsupportedOperationError


# =============================================================================
# Storage Base
# =============================================================================

class Storage(ABC):
    """
    Flat buffer of ``size`` elements of kind ``dtype``.

    Positions are not bounds-checked here beyond what the underlying buffer
    does itself.
    """

    __slots__ = ("_dtype", "_size")

    read_only = False

    def __init__(self, dtype: DType, size: int):
        if size < 0:
            raise ValueError(f"Storage size must be non-negative, got {size}")
        self._dtype = dtype
        self._size = size

    @property
    def dtype(self) -> DType:
        return self._dtype

    @property
    def size(self) -> int:
        return self._size

    @abstractmethod
    def get(self, pos: int) -> Any:
        """Read the element at buffer position ``pos``."""

    @abstractmethod
    def set(self, pos: int, value: Any) -> None:
        """Write ``value`` (coerced to the element kind) at ``pos``."""

    @property
    def data(self) -> Any:
        """Raw buffer object, or None when the storage has none."""
        return None

    def as_numpy(self) -> Optional[np.ndarray]:
        """Zero-copy numpy view of the whole buffer, when one exists."""
        return None

    def sort_range(self, start: int, stop: int,
                   key: Optional[Callable[[Any], Any]] = None,
                   reverse: bool = False) -> None:
        """Sort the unit-stride run ``[start, stop)`` in place."""
        values = sorted((self.get(i) for i in range(start, stop)), key=key, reverse=reverse)
        for i, v in enumerate(values, start):
            self.set(i, v)

    def tolist(self) -> List[Any]:
        return [self.get(i) for i in range(self._size)]

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dtype={self._dtype.type_name}, size={self._size})"


# =============================================================================
# Concrete Storages
# =============================================================================

class CTypesStorage(Storage):
    """Numeric storage over a zero-initialized ctypes array."""

    __slots__ = ("_data", "_coerce")

    def __init__(self, dtype: DType, size: int):
        if dtype.ctype is None:
            raise TypeError(f"{dtype.type_name} has no ctypes representation")
        super().__init__(dtype, size)
        # ctypes zero-fills new arrays
        self._data = (dtype.ctype * size)()
        self._coerce = dtype.coerce

    def get(self, pos: int) -> Any:
        return self._data[pos]

    def set(self, pos: int, value: Any) -> None:
        self._data[pos] = self._coerce(value)

    @property
    def data(self) -> ctypes.Array:
        return self._data

    def as_numpy(self) -> np.ndarray:
        return np.ctypeslib.as_array(self._data) if self._size else np.empty(0, self._dtype.numpy_dtype)

    def sort_range(self, start, stop, key=None, reverse=False):
        # ctypes arrays support slice reads and writes of the same length
        self._data[start:stop] = sorted(self._data[start:stop], key=key, reverse=reverse)


class ComplexStorage(Storage):
    """Complex storage as interleaved ``(real, imag)`` doubles."""

    __slots__ = ("_data",)

    def __init__(self, size: int):
        super().__init__(DType.COMPLEX128, size)
        self._data = (ctypes.c_double * (2 * size))()

    def get(self, pos: int) -> complex:
        return complex(self._data[2 * pos], self._data[2 * pos + 1])

    def set(self, pos: int, value: Any) -> None:
        z = complex(value)
        self._data[2 * pos] = z.real
        self._data[2 * pos + 1] = z.imag

    @property
    def data(self) -> ctypes.Array:
        return self._data

    def as_numpy(self) -> np.ndarray:
        if not self._size:
            return np.empty(0, np.complex128)
        return np.ctypeslib.as_array(self._data).view(np.complex128)


class ObjectStorage(Storage):
    """Reference storage backed by a Python list."""

    __slots__ = ("_data",)

    def __init__(self, size: int):
        super().__init__(DType.OBJECT, size)
        self._data: List[Any] = [None] * size

    def get(self, pos: int) -> Any:
        return self._data[pos]

    def set(self, pos: int, value: Any) -> None:
        self._data[pos] = value

    @property
    def data(self) -> List[Any]:
        return self._data

    def sort_range(self, start, stop, key=None, reverse=False):
        self._data[start:stop] = sorted(self._data[start:stop], key=key, reverse=reverse)


class RangeStorage(Storage):
    """
    Computed integer storage: element ``i`` is ``start + i * step``.

    Read-only; every write raises UnsupportedOperationError.
    """

    __slots__ = ("_start", "_step")

    read_only = True

    def __init__(self, start: int, step: int, size: int, dtype: DType = DType.INT32):
        super().__init__(dtype, size)
        self._start = start
        self._step = step

    def get(self, pos: int) -> int:
        return self._start + pos * self._step

    def set(self, pos: int, value: Any) -> None:
        raise UnsupportedOperationError("Range is read-only")

    def sort_range(self, start, stop, key=None, reverse=False):
        raise UnsupportedOperationError("Range is read-only")


class ConvertedStorage(Storage):
    """
    Live converting window over another storage.

    Reads convert from the base kind, writes convert back, so no data is
    copied and writes remain visible through the base.
    """

    __slots__ = ("_base", "_to", "_back")

    def __init__(self, base: Storage, dtype: DType):
        super().__init__(dtype, base.size)
        self._base = base
        self._to = converter(base.dtype, dtype)
        self._back = converter(dtype, base.dtype)

    @property
    def base(self) -> Storage:
        return self._base

    @property
    def read_only(self) -> bool:
        return self._base.read_only

    def get(self, pos: int) -> Any:
        return self._to(self._base.get(pos))

    def set(self, pos: int, value: Any) -> None:
        self._base.set(pos, self._back(value))


# =============================================================================
# Allocation
# =============================================================================

def allocate(dtype: DType, size: int) -> Storage:
    """Allocate zero-initialized storage of ``size`` elements."""
    if dtype == DType.COMPLEX128:
        return ComplexStorage(size)
    if dtype == DType.OBJECT:
        return ObjectStorage(size)
    return CTypesStorage(dtype, size)


def from_values(dtype: DType, values: Iterable[Any]) -> Storage:
    """Allocate storage holding ``values`` in order."""
    values = list(values)
    storage = allocate(dtype, len(values))
    for i, v in enumerate(values):
        storage.set(i, v)
    return storage


def convert(storage: Storage, dtype: DType) -> Storage:
    """Storage reading ``storage`` as kind ``dtype`` (itself when kinds match)."""
    if storage.dtype == dtype:
        return storage
    if isinstance(storage, ConvertedStorage) and storage.base.dtype == dtype:
        return storage.base
    return ConvertedStorage(storage, dtype)


__all__ = [
    'Storage',
    'CTypesStorage',
    'ComplexStorage',
    'ObjectStorage',
    'RangeStorage',
    'ConvertedStorage',
    'allocate',
    'from_values',
    'convert',
]
