"""
Strided Array

A ``StridedArray`` couples a flat ``Storage`` with a view descriptor
``(offset, shape, stride, major_axis)``. Element ``(i0, ..., i{d-1})`` lives
at buffer position ``offset + sum(stride[k] * i_k)``.

Ownership:
    The array created together with its storage is the OWNER. Every array
    derived from it by view creation (``as_view``, ``transpose``,
    ``get_diagonal``, slicing, kind conversion, ...) is a VIEW sharing the
    same storage: writes through any of them are visible through all. A view
    keeps a strong reference to its root owner, so the storage stays alive
    while any view does.

Linear order:
    Traversal (iteration, ``map``, ``reduce``, ``assign``, ``flat``) is
    column-major: axis 0 varies fastest. A single integer passed to ``get``
    or ``set`` is a linear index in that order.

Example:
    >>> a = StridedArray.empty((2, 2))
    >>> d = a.get_diagonal()
    >>> _ = d.assign(1.0)
    >>> a.tolist()
    [[1.0, 0.0], [0.0, 1.0]]
"""

from __future__ import annotations

import operator
from enum import IntEnum
from itertools import product
from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from ._config import get_config
from ._dtypes import DType, infer_dtype, integral_dtype, promote_dtype, validate_dtype
from ._errors import (
    ArgumentError,
    IndexOutOfBoundsError,
    check_argument,
    check_index,
    check_size,
    check_state,
)
from ._storage import RangeStorage, Storage, allocate, convert
from ._stride import (
    compute_stride,
    linear_index,
    position_of,
    remove_axis,
    reverse,
    shape_size,
)

__all__ = ['Ownership', 'StridedArray', 'Range']


class Ownership(IntEnum):
    """
    Storage ownership status.
    """
    OWNED = 0   # Created together with its storage
    VIEW = 1    # Shares another array's storage


def _as_index(value: Any) -> int:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
        raise ArgumentError(f"Index must be an integer, got {value!r}")
    return int(value)


def _shape_arg(shape: Sequence[Any], infer: bool = False) -> Tuple[int, ...]:
    """Accept both ``f(2, 3)`` and ``f((2, 3))``; ``infer`` also admits ``-1``."""
    if len(shape) == 1 and isinstance(shape[0], (tuple, list)):
        shape = shape[0]
    shape = tuple(_as_index(d) for d in shape)
    for dim in shape:
        check_argument(dim >= 0 or (infer and dim == -1),
                       "Dimensions must be non-negative, got %s", shape)
    return shape


# =============================================================================
# Strided Array
# =============================================================================

class StridedArray:
    """
    Dense N-dimensional array over shared typed storage.

    Attributes:
        dtype (DType): Element kind
        shape (tuple): Per-axis sizes
        stride (tuple): Per-axis buffer steps
        offset (int): Buffer position of the first element
        size (int): Number of elements
        is_view (bool): Whether the array shares storage it does not own

    Failure semantics:
        - Index outside ``[0, shape[k])``: IndexOutOfBoundsError
        - Operands of different size: SizeMismatchError, raised before any
          element is written
        - Writing to read-only storage (a Range): UnsupportedOperationError
    """

    __slots__ = ("_storage", "_offset", "_shape", "_stride", "_major_axis", "_size", "_owner")

    def __init__(
        self,
        storage: Storage,
        offset: int = 0,
        shape: Optional[Sequence[int]] = None,
        stride: Optional[Sequence[int]] = None,
        major_axis: int = 0,
        owner: Optional["StridedArray"] = None,
    ):
        """
        Wrap ``storage`` with a view descriptor.

        Args:
            storage: Backing storage
            offset: Buffer position of element ``(0, ..., 0)``
            shape: Per-axis sizes (default: one axis spanning the storage)
            stride: Per-axis steps (default: column-major for ``shape``)
            major_axis: Axis whose stride is the major stride
            owner: Root owner when this array is a view, else None
        """
        shape = (storage.size,) if shape is None else tuple(int(d) for d in shape)
        stride = compute_stride(shape) if stride is None else tuple(int(s) for s in stride)
        check_argument(len(shape) > 0, "Array must have at least one dimension")
        check_argument(len(shape) == len(stride),
                       "Shape %s and stride %s differ in length", shape, stride)
        for dim in shape:
            check_argument(dim >= 0, "Negative dimension in shape %s", shape)
        for step in stride:
            check_argument(step >= 0, "Negative strides are not supported: %s", stride)
        check_argument(0 <= major_axis < len(shape), "Illegal major axis %d", major_axis)
        check_argument(offset >= 0, "Negative offset %d", offset)

        self._storage = storage
        self._offset = int(offset)
        self._shape = shape
        self._stride = stride
        self._major_axis = major_axis
        self._size = shape_size(shape)
        self._owner = owner

    @classmethod
    def empty(cls, shape: Union[int, Sequence[int]], dtype: Any = None) -> "StridedArray":
        """Owner array of ``shape`` with zero-initialized storage."""
        shape = _shape_arg((shape,) if isinstance(shape, (int, np.integer)) else tuple(shape))
        dtype = validate_dtype(dtype, get_config().default_dtype)
        return StridedArray(allocate(dtype, shape_size(shape)), 0, shape)

    # -------------------------------------------------------------------------
    # Descriptor
    # -------------------------------------------------------------------------

    @property
    def dtype(self) -> DType:
        return self._storage.dtype

    @property
    def storage(self) -> Storage:
        return self._storage

    @property
    def shape(self) -> Tuple[int, ...]:
        return self._shape

    @property
    def stride(self) -> Tuple[int, ...]:
        return self._stride

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def major_axis(self) -> int:
        return self._major_axis

    @property
    def major_stride(self) -> int:
        """Stride of the fastest-varying axis."""
        return self._stride[self._major_axis]

    @property
    def ndim(self) -> int:
        return len(self._shape)

    @property
    def size(self) -> int:
        return self._size

    @property
    def rows(self) -> int:
        check_state(self.is_matrix, "Array is not a matrix (shape=%s)", self._shape)
        return self._shape[0]

    @property
    def columns(self) -> int:
        check_state(self.is_matrix, "Array is not a matrix (shape=%s)", self._shape)
        return self._shape[1]

    @property
    def is_vector(self) -> bool:
        return len(self._shape) == 1

    @property
    def is_matrix(self) -> bool:
        return len(self._shape) == 2

    @property
    def is_square(self) -> bool:
        return self.is_matrix and self._shape[0] == self._shape[1]

    @property
    def is_contiguous(self) -> bool:
        """Whether elements are laid out densely in default column-major order."""
        return self._stride == compute_stride(self._shape)

    @property
    def is_view(self) -> bool:
        """True for any array that does not own its storage."""
        return self._owner is not None

    @property
    def ownership(self) -> Ownership:
        return Ownership.VIEW if self.is_view else Ownership.OWNED

    @property
    def _root(self) -> "StridedArray":
        return self if self._owner is None else self._owner

    def vectors(self, dim: int) -> int:
        """Number of 1-D slices along ``dim``."""
        self._check_dim(dim)
        return self._size // self._shape[dim] if self._shape[dim] else 0

    def _check_dim(self, dim: int) -> None:
        if dim < 0 or dim >= len(self._shape):
            raise ArgumentError(f"Dimension {dim} out of range for {len(self._shape)}-d array")

    # -------------------------------------------------------------------------
    # Element Access
    # -------------------------------------------------------------------------

    def _pos(self, index: int) -> int:
        if len(self._shape) == 1:
            return self._offset + index * self._stride[0]
        return position_of(index, self._offset, self._shape, self._stride)

    def _resolve(self, index: Sequence[Any]) -> int:
        n = len(index)
        if n == 1:
            i = _as_index(index[0])
            if i < 0 or i >= self._size:
                raise IndexOutOfBoundsError(f"Index {i} out of bounds [0, {self._size})")
            return self._pos(i)
        if n != len(self._shape):
            raise ArgumentError(f"Expected 1 or {len(self._shape)} indices, got {n}")
        pos = self._offset
        for axis in range(n):
            i = _as_index(index[axis])
            dim = self._shape[axis]
            if i < 0 or i >= dim:
                raise IndexOutOfBoundsError(
                    f"Index {i} out of bounds [0, {dim}) on axis {axis}")
            pos += i * self._stride[axis]
        return pos

    def _positions(self) -> Iterator[int]:
        """Buffer positions of all elements in linear order."""
        if self._size == 0:
            return
        inner_n, inner_s = self._shape[0], self._stride[0]
        outer_shape = reverse(self._shape[1:])
        outer_stride = reverse(self._stride[1:])
        for outer in product(*(range(d) for d in outer_shape)):
            base = self._offset
            for i, s in zip(outer, outer_stride):
                base += i * s
            for i in range(inner_n):
                yield base + i * inner_s

    def get(self, *index: int) -> Any:
        """
        Element at a linear index ``get(i)`` or a logical index ``get(i, j, ...)``.

        Raises:
            IndexOutOfBoundsError: If any index is outside its axis
            ArgumentError: If the number of indices is neither 1 nor ``ndim``
        """
        return self._storage.get(self._resolve(index))

    def set(self, *args: Any) -> None:
        """
        Write an element: ``set(i, value)`` or ``set(i, j, ..., value)``.

        The value is coerced to the element kind.
        """
        if len(args) < 2:
            raise ArgumentError("set() takes one or more indices followed by a value")
        *index, value = args
        self._storage.set(self._resolve(index), value)

    def get_element(self, index: int) -> Any:
        """Unchecked read at linear ``index``."""
        return self._storage.get(self._pos(index))

    def set_element(self, index: int, value: Any) -> None:
        """Unchecked write at linear ``index``."""
        self._storage.set(self._pos(index), value)

    def set_from(self, to_index: int, other: "StridedArray", from_index: int) -> None:
        """Copy ``other``'s element at ``from_index`` to ``to_index``."""
        self._storage.set(self._pos(to_index), other.get_element(from_index))

    def __getitem__(self, key: Any) -> Any:
        """
        Element or view access with Python indexing.

        A lone integer is a linear index; a tuple of ``ndim`` integers is a
        logical index; slices produce views. Negative integers count from
        the end of their axis; negative slice steps are not supported.
        """
        result = self._locate(key)
        if isinstance(result, int):
            return self._storage.get(result)
        return result

    def __setitem__(self, key: Any, value: Any) -> None:
        result = self._locate(key)
        if isinstance(result, int):
            self._storage.set(result, value)
        else:
            result.assign(value)

    def _locate(self, key: Any) -> Union[int, "StridedArray"]:
        """Buffer position for element keys, a view for slicing keys."""
        if not isinstance(key, tuple):
            key = (key,)
        if len(key) == 1 and not isinstance(key[0], slice):
            i = _as_index(key[0])
            if i < 0:
                i += self._size
            return self._resolve((i,))
        check_argument(len(key) <= len(self._shape),
                       "Too many indices (%d) for %d-d array", len(key), len(self._shape))
        key = key + (slice(None),) * (len(self._shape) - len(key))
        offset = self._offset
        shape: List[int] = []
        stride: List[int] = []
        for axis, (k, dim, step) in enumerate(zip(key, self._shape, self._stride)):
            if isinstance(k, slice):
                start, stop, inc = k.indices(dim)
                check_argument(inc > 0, "Negative slice steps are not supported")
                n = len(range(start, stop, inc))
                if n:
                    offset += start * step
                shape.append(n)
                stride.append(step * inc)
            else:
                i = _as_index(k)
                if i < 0:
                    i += dim
                if i < 0 or i >= dim:
                    raise IndexOutOfBoundsError(
                        f"Index {k} out of bounds [0, {dim}) on axis {axis}")
                offset += i * step
        if not shape:
            return offset
        return self._view(offset, shape, stride)

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def _view(self, offset: int, shape: Sequence[int], stride: Sequence[int],
              major_axis: int = 0) -> "StridedArray":
        return StridedArray(self._storage, offset, shape, stride, major_axis, owner=self._root)

    def as_view(self, offset: int, shape: Sequence[int], stride: Sequence[int],
                major_axis: int = 0) -> "StridedArray":
        """
        Zero-copy view over the same storage.

        The caller chooses the descriptor; it must address positions inside
        the storage for every valid logical index.
        """
        return self._view(offset, shape, stride, major_axis)

    def new_empty_array(self, *shape: Any) -> "StridedArray":
        """New, independent, zero-initialized array of the same element kind."""
        shape = _shape_arg(shape)
        return StridedArray(allocate(self.dtype, shape_size(shape)), 0, shape)

    def copy(self) -> "StridedArray":
        out = self.new_empty_array(*self._shape)
        out._assign_array(self)
        return out

    def reshape(self, *shape: Any) -> "StridedArray":
        """
        Array with the same elements in linear order and a new shape.

        One dimension may be ``-1`` and is inferred. Contiguous arrays are
        reshaped as views; others are copied first.

        Raises:
            SizeMismatchError: If the new shape holds a different number of elements
        """
        shape = list(_shape_arg(shape, infer=True))
        if shape.count(-1) > 1:
            raise ArgumentError("Only one dimension can be inferred")
        if -1 in shape:
            known = shape_size([d for d in shape if d != -1])
            check_argument(known > 0 and self._size % known == 0,
                           "Cannot infer dimension of %s for size %d", tuple(shape), self._size)
            shape[shape.index(-1)] = self._size // known
        check_size(self, shape_size(shape))
        if self.is_contiguous:
            return self._view(self._offset, shape, compute_stride(shape))
        return self.copy().reshape(*shape)

    def ravel(self) -> "StridedArray":
        return self.reshape(-1)

    def transpose(self) -> "StridedArray":
        """View with axes reversed."""
        return self._view(self._offset, reverse(self._shape), reverse(self._stride),
                          len(self._shape) - 1 - self._major_axis)

    @property
    def T(self) -> "StridedArray":
        return self.transpose()

    def select(self, dim: int, index: Optional[int] = None) -> "StridedArray":
        """
        View at a fixed ``index`` along ``dim``, with ``dim`` removed.

        ``select(i)`` selects along axis 0.
        """
        if index is None:
            dim, index = 0, dim
        self._check_dim(dim)
        check_argument(len(self._shape) > 1, "Cannot select from a 1-d array")
        check_index(index, self._shape[dim])
        return self._view(self._offset + index * self._stride[dim],
                          remove_axis(self._shape, dim), remove_axis(self._stride, dim))

    def get_vector(self, dim: int, index: int) -> "StridedArray":
        """
        The ``index``-th 1-D slice along ``dim``.

        Slices are numbered by the remaining axes in column-major order.
        """
        check_index(index, self.vectors(dim))
        offset = position_of(index, self._offset,
                             remove_axis(self._shape, dim), remove_axis(self._stride, dim))
        return self._view(offset, (self._shape[dim],), (self._stride[dim],))

    def set_vector(self, dim: int, index: int, vector: "StridedArray") -> None:
        self.get_vector(dim, index).assign(vector)

    def get_row(self, index: int) -> "StridedArray":
        check_state(self.is_matrix, "Array is not a matrix (shape=%s)", self._shape)
        return self.get_vector(1, index)

    def get_column(self, index: int) -> "StridedArray":
        check_state(self.is_matrix, "Array is not a matrix (shape=%s)", self._shape)
        return self.get_vector(0, index)

    def set_row(self, index: int, vector: "StridedArray") -> None:
        self.get_row(index).assign(vector)

    def set_column(self, index: int, vector: "StridedArray") -> None:
        self.get_column(index).assign(vector)

    def get_view(self, row_offset: int, col_offset: int, rows: int, cols: int) -> "StridedArray":
        """Block view of ``rows x cols`` starting at ``(row_offset, col_offset)``."""
        check_state(self.is_matrix, "Array is not a matrix (shape=%s)", self._shape)
        if (row_offset < 0 or col_offset < 0 or rows < 0 or cols < 0
                or row_offset + rows > self._shape[0] or col_offset + cols > self._shape[1]):
            raise IndexOutOfBoundsError(
                f"Block {rows}x{cols} at ({row_offset}, {col_offset}) "
                f"exceeds {self._shape[0]}x{self._shape[1]}")
        offset = self._offset + row_offset * self._stride[0] + col_offset * self._stride[1]
        return self._view(offset, (rows, cols), self._stride)

    def get_diagonal(self) -> "StridedArray":
        """Live view of the main diagonal."""
        check_state(self.is_matrix, "Array is not a matrix (shape=%s)", self._shape)
        return self._view(self._offset, (min(self._shape),),
                          (self._stride[0] + self._stride[1],))

    # -------------------------------------------------------------------------
    # Kind Conversion
    # -------------------------------------------------------------------------

    def as_dtype(self, dtype: Any) -> "StridedArray":
        """
        View reading this array as another element kind.

        Returns ``self`` when the kind already matches. Otherwise the result
        shares storage: reads convert, writes convert back.
        """
        dtype = validate_dtype(dtype)
        if dtype == self.dtype:
            return self
        return StridedArray(convert(self._storage, dtype), self._offset, self._shape,
                            self._stride, self._major_axis, owner=self._root)

    def as_double(self) -> "StridedArray":
        return self.as_dtype(DType.FLOAT64)

    def as_int(self) -> "StridedArray":
        return self.as_dtype(DType.INT32)

    def as_long(self) -> "StridedArray":
        return self.as_dtype(DType.INT64)

    def as_boolean(self) -> "StridedArray":
        return self.as_dtype(DType.BOOL)

    def as_complex(self) -> "StridedArray":
        return self.as_dtype(DType.COMPLEX128)

    def as_object(self) -> "StridedArray":
        return self.as_dtype(DType.OBJECT)

    def astype(self, dtype: Any) -> "StridedArray":
        """Independent copy converted to ``dtype``."""
        return self.as_dtype(dtype).copy()

    # -------------------------------------------------------------------------
    # Bulk Operations
    # -------------------------------------------------------------------------

    def __iter__(self) -> Iterator[Any]:
        get = self._storage.get
        for pos in self._positions():
            yield get(pos)

    def __len__(self) -> int:
        return self._shape[0]

    def flat(self) -> List[Any]:
        """Elements in linear order."""
        return list(self)

    def tolist(self) -> Any:
        """Nested lists, outermost level along axis 0."""
        get = self._storage.get
        ndim = len(self._shape)

        def build(prefix: Tuple[int, ...]) -> Any:
            if len(prefix) == ndim:
                return get(linear_index(self._offset, self._shape, self._stride, prefix))
            return [build(prefix + (i,)) for i in range(self._shape[len(prefix)])]

        return build(())

    def for_each(self, fn: Callable[[Any], Any]) -> None:
        for value in self:
            fn(value)

    def map(self, fn: Callable[[Any], Any], dtype: Any = None) -> "StridedArray":
        """
        New array holding ``fn(x)`` for every element.

        Args:
            fn: Element function
            dtype: Kind of the result (default: same as this array)
        """
        dtype = self.dtype if dtype is None else validate_dtype(dtype)
        out = StridedArray(allocate(dtype, self._size), 0, self._shape)
        store = out._storage
        for i, value in enumerate(self):
            store.set(i, fn(value))
        return out

    def reduce(self, init: Any, op: Callable[[Any, Any], Any],
               map_fn: Optional[Callable[[Any], Any]] = None) -> Any:
        """Left fold of ``op`` over the elements, starting from ``init``."""
        acc = init
        if map_fn is None:
            for value in self:
                acc = op(acc, value)
        else:
            for value in self:
                acc = op(acc, map_fn(value))
        return acc

    def reduce_vectors(self, dim: int, fn: Callable[["StridedArray"], Any],
                       dtype: Any = None) -> "StridedArray":
        """
        Apply ``fn`` to every 1-D slice along ``dim``.

        The result drops axis ``dim``; reducing a 1-d array gives shape ``(1,)``.
        """
        n = self.vectors(dim)
        dtype = self.dtype if dtype is None else validate_dtype(dtype)
        shape = remove_axis(self._shape, dim) or (1,)
        out = StridedArray(allocate(dtype, shape_size(shape)), 0, shape)
        for i in range(n):
            out._storage.set(i, fn(self.get_vector(dim, i)))
        return out

    def assign(self, value: Any) -> "StridedArray":
        """
        Overwrite every element in place.

        Args:
            value: An array of the same size, a flat sequence of the same
                size, a zero-argument callable producing each element, or a
                scalar written everywhere

        Returns:
            self
        """
        if isinstance(value, StridedArray):
            check_size(self, value)
            self._assign_array(value)
        elif isinstance(value, np.ndarray):
            values = value.ravel(order="F").tolist()
            check_size(self, len(values))
            self._write(values)
        elif isinstance(value, (list, tuple)) and self.dtype != DType.OBJECT:
            check_size(self, len(value))
            self._write(value)
        elif callable(value) and self.dtype != DType.OBJECT:
            setter = self._storage.set
            for pos in self._positions():
                setter(pos, value())
        else:
            setter = self._storage.set
            for pos in self._positions():
                setter(pos, value)
        return self

    def _write(self, values: Sequence[Any]) -> None:
        setter = self._storage.set
        for pos, v in zip(self._positions(), values):
            setter(pos, v)

    def _assign_array(self, other: "StridedArray") -> None:
        # Materialize first when both share a buffer; order may overlap
        if self.shares_storage(other):
            self._write(other.flat())
        else:
            self._write(other)

    def shares_storage(self, other: "StridedArray") -> bool:
        a = getattr(self._storage, "base", self._storage)
        b = getattr(other._storage, "base", other._storage)
        return a is b

    def update(self, fn: Callable[[Any], Any]) -> "StridedArray":
        """Replace every element ``x`` with ``fn(x)`` in place."""
        store = self._storage
        for pos in self._positions():
            store.set(pos, fn(store.get(pos)))
        return self

    def combine(self, other: "StridedArray", fn: Callable[[Any, Any], Any]) -> "StridedArray":
        """Replace every element ``x`` with ``fn(x, y)``, ``y`` from ``other``."""
        check_size(self, other)
        values = other.flat()
        store = self._storage
        for pos, y in zip(self._positions(), values):
            store.set(pos, fn(store.get(pos), y))
        return self

    def sort(self, key: Optional[Callable[[Any], Any]] = None,
             reverse: bool = False) -> "StridedArray":
        """
        Stable in-place sort in linear order.

        Owner vectors with unit stride sort the raw buffer directly; every
        other array gathers, sorts and writes back. Both give the same order.
        """
        if not self.is_view and self.is_vector and self._stride[0] == 1:
            self._storage.sort_range(self._offset, self._offset + self._size, key, reverse)
        else:
            self._write(sorted(self, key=key, reverse=reverse))
        return self

    # -------------------------------------------------------------------------
    # Raw Access / Interop
    # -------------------------------------------------------------------------

    def data(self) -> Any:
        """
        Raw buffer for owner, contiguous arrays.

        Views and computed arrays return their elements as a new list in
        linear order; writing to that list does not affect the array.
        """
        raw = self._storage.data
        if raw is not None and not self.is_view and self.is_contiguous:
            return raw
        return self.flat()

    def to_numpy(self) -> np.ndarray:
        """Copy into a numpy array of the same shape."""
        buf = self._storage.as_numpy()
        if buf is not None and self._size:
            item = buf.itemsize
            strided = np.lib.stride_tricks.as_strided(
                buf[self._offset:], shape=self._shape,
                strides=tuple(s * item for s in self._stride), writeable=False)
            return np.array(strided, copy=True)
        out = np.empty(self._size, dtype=self.dtype.numpy_dtype)
        for i, value in enumerate(self):
            out[i] = value
        return out.reshape(self._shape, order="F")

    def __array__(self, dtype=None, copy=None):
        arr = self.to_numpy()
        return arr if dtype is None else arr.astype(dtype)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def _binary(self, other: Any, op: Callable[[Any, Any], Any],
                floor: Optional[DType] = None, swap: bool = False,
                result: Optional[DType] = None) -> "StridedArray":
        if isinstance(other, StridedArray):
            check_size(self, other)
            dtype = promote_dtype(self.dtype, other.dtype)
            values = other.flat()
        else:
            dtype = promote_dtype(self.dtype, infer_dtype(other))
            values = None
        if dtype == DType.BOOL:
            dtype = DType.INT64
        if floor is not None and dtype != DType.OBJECT:
            dtype = promote_dtype(dtype, floor)
        if result is not None:
            dtype = result
        out = StridedArray(allocate(dtype, self._size), 0, self._shape)
        store = out._storage
        for i, x in enumerate(self):
            y = other if values is None else values[i]
            store.set(i, op(y, x) if swap else op(x, y))
        return out

    def __add__(self, other):
        return self._binary(other, operator.add)

    def __radd__(self, other):
        return self._binary(other, operator.add, swap=True)

    def __sub__(self, other):
        return self._binary(other, operator.sub)

    def __rsub__(self, other):
        return self._binary(other, operator.sub, swap=True)

    def __mul__(self, other):
        return self._binary(other, operator.mul)

    def __rmul__(self, other):
        return self._binary(other, operator.mul, swap=True)

    def __truediv__(self, other):
        return self._binary(other, operator.truediv, floor=DType.FLOAT64)

    def __rtruediv__(self, other):
        return self._binary(other, operator.truediv, floor=DType.FLOAT64, swap=True)

    def __neg__(self):
        dtype = DType.INT64 if self.dtype == DType.BOOL else self.dtype
        return self.map(operator.neg, dtype)

    def _compare(self, other: Any, op: Callable[[Any, Any], bool]) -> "StridedArray":
        return self._binary(other, op, result=DType.BOOL)

    def lt(self, other: Any) -> "StridedArray":
        """Element-wise ``self < other`` as a boolean array."""
        return self._compare(other, operator.lt)

    def gt(self, other: Any) -> "StridedArray":
        return self._compare(other, operator.gt)

    def le(self, other: Any) -> "StridedArray":
        return self._compare(other, operator.le)

    def ge(self, other: Any) -> "StridedArray":
        return self._compare(other, operator.ge)

    def eq(self, other: Any) -> "StridedArray":
        return self._compare(other, operator.eq)

    def mmul(self, other: "StridedArray", alpha: Any = 1) -> "StridedArray":
        """Matrix product ``alpha * self @ other`` through the active backend."""
        from ._backend import get_backend
        return get_backend().get_array_routines().dot(self, other, alpha)

    def __matmul__(self, other):
        return self.mmul(other)

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------

    def __repr__(self) -> str:
        threshold = get_config().print_threshold
        if self._size <= threshold:
            body = repr(self.tolist())
        else:
            values = self.flat()
            head = ", ".join(repr(v) for v in values[:threshold // 2])
            tail = ", ".join(repr(v) for v in values[-(threshold // 2):])
            body = f"[{head}, ..., {tail}]"
        view = ", view" if self.is_view else ""
        return (f"{type(self).__name__}({body}, shape={self._shape}, "
                f"dtype={self.dtype.type_name}{view})")


# =============================================================================
# Range
# =============================================================================

class Range(StridedArray):
    """
    Read-only integer sequence ``start, start + step, ...`` stopping before ``end``.

    A Range has no buffer; elements are computed on access. It is always a
    view, every write raises UnsupportedOperationError, and arrays derived
    from it by ``new_empty_array``/``copy`` are ordinary integer arrays:
    INT32, or INT64 when an element lies outside the int32 range.

    Example:
        >>> Range(0, 10, 3).flat()
        [0, 3, 6, 9]
    """

    __slots__ = ("_start", "_end", "_step")

    def __init__(self, start: int, end: int, step: int = 1):
        start, end, step = _as_index(start), _as_index(end), _as_index(step)
        check_argument(step != 0, "Range step must be non-zero")
        check_argument(not (start < end and step < 0) and not (start > end and step > 0),
                       "Illegal step %d for range from %d to %d", step, start, end)
        size = -(-abs(end - start) // abs(step))
        # Ranges past the int32 limits read and copy as INT64
        dtype = integral_dtype(start, start + max(size - 1, 0) * step)
        super().__init__(RangeStorage(start, step, size, dtype), 0, (size,))
        self._start = start
        self._end = end
        self._step = step

    @property
    def start(self) -> int:
        return self._start

    @property
    def end(self) -> int:
        return self._end

    @property
    def step(self) -> int:
        return self._step

    @property
    def is_view(self) -> bool:
        return True

    def contains(self, value: int) -> bool:
        if not self._size:
            return False
        offset = value - self._start
        return offset % self._step == 0 and 0 <= offset // self._step < self._size

    def __contains__(self, value: Any) -> bool:
        return isinstance(value, (int, np.integer)) and self.contains(int(value))

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Range):
            return NotImplemented
        return (self._start, self._step, self._size) == (other._start, other._step, other._size)

    def __hash__(self) -> int:
        return hash((self._start, self._step, self._size))

    def __repr__(self) -> str:
        return f"Range({self._start}, {self._end}, {self._step})"
