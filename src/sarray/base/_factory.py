"""
Pure-Python array factory.
"""

from __future__ import annotations

from functools import reduce
from itertools import product
from typing import Any, List, Optional, Sequence, Tuple, Union

import numpy as np

from .._array import Range, StridedArray, _shape_arg
from .._config import get_config
from .._dtypes import DType, infer_dtype, integral_dtype, promote_dtype, validate_dtype
from .._errors import ArgumentError, check_argument
from .._random import resolve_rng
from .._stride import linear_index
from ..api import ArrayFactory

__all__ = ['BaseArrayFactory']


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _flatten(data: Sequence[Any], path: Tuple[int, ...] = ()) -> Tuple[Tuple[int, ...], List[Any]]:
    """
    Shape and row-major values of nested literal data.

    Raises ArgumentError at the first empty or ragged row.
    """
    where = f" at {list(path)}" if path else ""
    if not data:
        raise ArgumentError(f"Empty row{where}")
    if not _is_sequence(data[0]):
        for i, value in enumerate(data):
            if _is_sequence(value):
                raise ArgumentError(f"Inconsistent nesting at {list(path + (i,))}")
        return (len(data),), list(data)

    inner: Optional[Tuple[int, ...]] = None
    values: List[Any] = []
    for i, row in enumerate(data):
        if not _is_sequence(row):
            raise ArgumentError(f"Inconsistent nesting at {list(path + (i,))}")
        shape, row_values = _flatten(row, path + (i,))
        if inner is None:
            inner = shape
        elif shape != inner:
            raise ArgumentError(
                f"Row {list(path + (i,))} has shape {shape}, expected {inner}")
        values.extend(row_values)
    return (len(data),) + inner, values


def _check_shape(shape: Tuple[int, ...]) -> Tuple[int, ...]:
    check_argument(len(shape) > 0, "Shape must have at least one dimension")
    for dim in shape:
        check_argument(dim > 0, "Dimensions must be positive, got %s", shape)
    return shape


class BaseArrayFactory(ArrayFactory):
    """
    Array factory over the pure-Python storages.

    Example:
        >>> f = BaseArrayFactory()
        >>> f.array([[1, 2], [3, 4]]).get(1, 0)
        3
        >>> f.range(0, 10, 3).flat()
        [0, 3, 6, 9]
    """

    # -------------------------------------------------------------------------
    # Literal Data
    # -------------------------------------------------------------------------

    def array(self, data: Any, dtype: Any = None) -> StridedArray:
        """
        Array from literal data.

        Args:
            data: Flat sequence (vector), nested row-major sequences (matrix
                or higher rank), a numpy array, or an existing array (copied)
            dtype: Element kind; inferred from the values when omitted

        Returns:
            New owner array

        Raises:
            ArgumentError: If a row is empty or rows differ in length
        """
        if isinstance(data, StridedArray):
            return data.copy() if dtype is None else data.astype(dtype)
        if isinstance(data, np.ndarray):
            out = self.from_numpy(data)
            return out if dtype is None else out.astype(dtype)
        check_argument(_is_sequence(data), "Expected a sequence, got %s", type(data).__name__)

        shape, values = _flatten(data)
        if dtype is None:
            kind = reduce(promote_dtype, (infer_dtype(v) for v in values))
        else:
            kind = validate_dtype(dtype)
        out = StridedArray.empty(shape, kind)
        store = out.storage
        # Literal data is row-major: last axis varies fastest
        for index, value in zip(product(*(range(d) for d in shape)), values):
            store.set(linear_index(0, shape, out.stride, index), value)
        return out

    def from_numpy(self, array: np.ndarray) -> StridedArray:
        """
        Copy of a numpy array, keeping its shape.

        Zero-dimensional input becomes a 1-element vector.
        """
        array = np.asarray(array)
        if array.ndim == 0:
            array = array.reshape(1)
        kind = DType.from_numpy(array.dtype)
        if array.dtype == np.uint64 and array.size:
            check_argument(int(array.max()) <= np.iinfo(np.int64).max,
                           "uint64 values above the int64 range cannot be stored")
        out = StridedArray.empty(array.shape, kind)
        buf = out.storage.as_numpy()
        if buf is not None:
            buf[:] = array.ravel(order="F").astype(kind.numpy_dtype, copy=False)
        else:
            for i, value in enumerate(array.ravel(order="F").tolist()):
                out.storage.set(i, value)
        return out

    # -------------------------------------------------------------------------
    # Allocation
    # -------------------------------------------------------------------------

    def new_array(self, shape: Sequence[int], dtype: Any = None) -> StridedArray:
        shape = _check_shape(_shape_arg(tuple(shape)))
        return StridedArray.empty(shape, validate_dtype(dtype, get_config().default_dtype))

    def zeros(self, *shape: int, dtype: Any = None) -> StridedArray:
        return self.new_array(shape, dtype)

    def ones(self, *shape: int, dtype: Any = None) -> StridedArray:
        out = self.new_array(shape, dtype)
        return out.assign(out.dtype.one)

    def full(self, shape: Union[int, Sequence[int]], value: Any, dtype: Any = None) -> StridedArray:
        if isinstance(shape, (int, np.integer)):
            shape = (shape,)
        out = self.new_array(shape, infer_dtype(value) if dtype is None else dtype)
        return out.assign(value)

    # -------------------------------------------------------------------------
    # Sequences
    # -------------------------------------------------------------------------

    def range(self, *args: int) -> Range:
        """
        Integer range, with the same argument forms as the builtin.

        ``size == ceil(|end - start| / |step|)``; a step pointing away from
        ``end`` raises ArgumentError.
        """
        if len(args) == 1:
            return Range(0, args[0], 1)
        if len(args) == 2:
            return Range(args[0], args[1], 1)
        if len(args) == 3:
            return Range(*args)
        raise ArgumentError(f"range() takes 1 to 3 arguments, got {len(args)}")

    def linspace(self, start: float, end: float, size: int) -> StridedArray:
        """``size`` evenly spaced values from ``start`` to ``end`` inclusive."""
        check_argument(size > 0, "Size must be positive, got %d", size)
        out = StridedArray.empty((size,), DType.FLOAT64)
        if size == 1:
            out.set(0, start)
            return out
        step = (end - start) / (size - 1)
        for i in range(size):
            out.set_element(i, start + i * step)
        return out

    def eye(self, n: int) -> StridedArray:
        out = self.double_array(n, n)
        out.get_diagonal().assign(1.0)
        return out

    def diag(self, x: StridedArray) -> StridedArray:
        """
        Diagonal matrix from a vector, or the diagonal view of a matrix.

        Raises:
            ArgumentError: If ``x`` is neither a vector nor a matrix
        """
        if x.is_vector:
            out = self.new_array((x.size, x.size), x.dtype)
            out.get_diagonal().assign(x)
            return out
        if x.is_matrix:
            return x.get_diagonal()
        raise ArgumentError(f"diag() expects a vector or a matrix, got {x.ndim}-d array")

    # -------------------------------------------------------------------------
    # Random
    # -------------------------------------------------------------------------

    def rand(self, *shape: int, rng: Union[np.random.Generator, int, None] = None) -> StridedArray:
        """
        Samples uniform on (-1, 1).

        Args:
            shape: Array shape
            rng: Generator or seed; this thread's default generator if None
        """
        out = self.new_array(shape, DType.FLOAT64)
        return out.assign(resolve_rng(rng).uniform(-1.0, 1.0, out.size))

    def randn(self, *shape: int, rng: Union[np.random.Generator, int, None] = None) -> StridedArray:
        """Standard normal samples; see ``rand`` for ``rng``."""
        out = self.new_array(shape, DType.FLOAT64)
        return out.assign(resolve_rng(rng).standard_normal(out.size))

    def randi(self, low: int, high: int, *shape: int,
              rng: Union[np.random.Generator, int, None] = None) -> StridedArray:
        """
        Integers drawn uniformly from ``[low, high]`` (both ends included).

        The kind is INT32 unless a bound needs INT64; see ``rand`` for ``rng``.
        """
        check_argument(low <= high, "Empty interval [%d, %d]", low, high)
        out = self.new_array(shape, integral_dtype(low, high))
        return out.assign(resolve_rng(rng).integers(low, high, size=out.size, endpoint=True).tolist())
