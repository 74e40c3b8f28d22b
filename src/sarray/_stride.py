"""
Index and stride arithmetic.

Pure functions mapping logical indices onto positions in a flat buffer.
Arrays are laid out column-major by default: axis 0 varies fastest, so a
``(2, 3)`` array has strides ``(1, 2)``.

None of these functions check bounds; the array layer validates indices
before calling into here.
"""

from __future__ import annotations

from typing import Sequence, Tuple


def compute_stride(shape: Sequence[int], initial: int = 1) -> Tuple[int, ...]:
    """
    Default (column-major) strides for ``shape``.

    Args:
        shape: Per-axis sizes
        initial: Stride of axis 0

    Returns:
        Tuple with ``stride[0] == initial`` and
        ``stride[i] == stride[i - 1] * shape[i - 1]``

    Examples:
        >>> compute_stride((2, 3, 4))
        (1, 2, 6)
    """
    stride = []
    step = initial
    for dim in shape:
        stride.append(step)
        step *= dim
    return tuple(stride)


def shape_size(shape: Sequence[int]) -> int:
    """Number of elements in an array of ``shape``."""
    size = 1
    for dim in shape:
        size *= dim
    return size


def linear_index(offset: int, shape: Sequence[int], stride: Sequence[int],
                 indices: Sequence[int]) -> int:
    """Buffer position of the logical index ``indices``."""
    pos = offset
    for k in range(len(shape)):
        pos += indices[k] * stride[k]
    return pos


def position_of(index: int, offset: int, shape: Sequence[int],
                stride: Sequence[int]) -> int:
    """
    Buffer position of the ``index``-th element in column-major order.

    The linear index is decomposed one axis at a time, fastest axis first.
    """
    pos = offset
    for k in range(len(shape)):
        dim = shape[k]
        sub = index // dim
        pos += (index - dim * sub) * stride[k]
        index = sub
    return pos


def unravel(index: int, shape: Sequence[int]) -> Tuple[int, ...]:
    """Logical index of the ``index``-th element in column-major order."""
    out = []
    for dim in shape:
        index, rem = divmod(index, dim)
        out.append(rem)
    return tuple(out)


def row_major(row: int, col: int, n_rows: int, n_cols: int) -> int:
    """Linear index of ``(row, col)`` in a row-major ``n_rows x n_cols`` layout."""
    return row * n_cols + col


def column_major(offset: int, row: int, col: int, n_rows: int, n_cols: int) -> int:
    """Linear index of ``(row, col)`` in a column-major ``n_rows x n_cols`` layout."""
    return offset + col * n_rows + row


def remove_axis(seq: Sequence[int], axis: int) -> Tuple[int, ...]:
    return tuple(seq[:axis]) + tuple(seq[axis + 1:])


def reverse(seq: Sequence[int]) -> Tuple[int, ...]:
    return tuple(reversed(seq))


__all__ = [
    'compute_stride',
    'shape_size',
    'linear_index',
    'position_of',
    'unravel',
    'row_major',
    'column_major',
    'remove_axis',
    'reverse',
]
