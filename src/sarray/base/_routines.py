"""
Pure-Python array routines.

Everything here works through the ``StridedArray`` contract (element
access, views, map/reduce), so it applies unchanged to every element kind
and to arbitrarily strided views.
"""

from __future__ import annotations

import bisect
import builtins
import cmath
import math
import operator
from typing import Any, Callable, List, Optional, Sequence, Union

import numpy as np

from .._array import StridedArray
from .._dtypes import DType, promote_dtype
from .._errors import (
    ArgumentError,
    NonConformantError,
    SizeMismatchError,
    check_argument,
    check_shape,
    check_size,
)
from .._random import resolve_rng
from .._stride import column_major, row_major
from ..api import ArrayRoutines, Op

__all__ = ['BaseArrayRoutines', 'EPS']

# Tolerance for recognizing small integral powers
EPS = 1e-10

_LONG_MAX = 2 ** 63 - 1
_LONG_MIN = -(2 ** 63)


def _acc_kind(dtype: DType) -> DType:
    """Kind holding sums and products of ``dtype`` elements."""
    return DType.INT64 if dtype == DType.BOOL else dtype


def _check_numeric(x: StridedArray, name: str) -> None:
    if x.dtype == DType.OBJECT:
        raise ArgumentError(f"{name}() requires a numeric array, got {x.dtype.type_name}")


def _check_real(x: StridedArray, name: str) -> None:
    if x.dtype in (DType.OBJECT, DType.COMPLEX128):
        raise ArgumentError(f"{name}() requires a real array, got {x.dtype.type_name}")


def _round_half_up(value: float) -> int:
    if math.isnan(value):
        return 0
    if math.isinf(value):
        return _LONG_MAX if value > 0 else _LONG_MIN
    return builtins.min(builtins.max(math.floor(value + 0.5), _LONG_MIN), _LONG_MAX)


def _fold_extreme(x: StridedArray, key: Optional[Callable[[Any], Any]],
                  keep: Callable[[Any, Any], bool]) -> Any:
    """
    Left fold keeping the current element only while ``keep(current, next)``.

    Ties move on to the later element. None for an empty array.
    """
    if x.size == 0:
        return None
    values = iter(x)
    best = next(values)
    best_key = best if key is None else key(best)
    for value in values:
        value_key = value if key is None else key(value)
        if not keep(best_key, value_key):
            best, best_key = value, value_key
    return best


def _arg_extreme(x: StridedArray, better: Callable[[Any, Any], bool], name: str) -> int:
    """Linear index of the first element no later element beats."""
    check_argument(x.size > 0, "%s() of an empty array", name)
    values = iter(x)
    best, index = next(values), 0
    for i, value in enumerate(values, 1):
        if better(value, best):
            best, index = value, i
    return index


def _check_axis(x: StridedArray, dim: int) -> None:
    check_argument(0 <= dim < x.ndim, "Axis %d out of range for %d-d array", dim, x.ndim)


def _as_matrix(x: StridedArray, row: bool) -> StridedArray:
    """Matrices unchanged; vectors as a single row (or column)."""
    if x.is_matrix:
        return x
    check_argument(x.is_vector, "Expected a vector or a matrix, got %d-d array", x.ndim)
    return x.reshape(1, x.size) if row else x.reshape(x.size, 1)


class BaseArrayRoutines(ArrayRoutines):
    """
    Reference implementation of ``ArrayRoutines``.

    Correctness first: kernels are straightforward loops with no blocking
    or vectorization. Argument checks always run before the first write.
    """

    # =========================================================================
    # Reductions
    # =========================================================================

    def sum(self, x: StridedArray, dim: Optional[int] = None) -> Any:
        """
        Sum of all elements, or of every vector along ``dim``.

        Examples:
            >>> r.sum(f.array([[1, 2], [3, 4]]), dim=0).flat()
            [4, 6]
        """
        if dim is not None:
            return x.reduce_vectors(dim, self.sum, _acc_kind(x.dtype))
        zero = 0 if x.dtype in (DType.BOOL, DType.OBJECT) else x.dtype.zero
        return x.reduce(zero, operator.add)

    def prod(self, x: StridedArray, dim: Optional[int] = None) -> Any:
        if dim is not None:
            return x.reduce_vectors(dim, self.prod, _acc_kind(x.dtype))
        one = 1 if x.dtype in (DType.BOOL, DType.OBJECT) else x.dtype.one
        return x.reduce(one, operator.mul)

    def mean(self, x: StridedArray, dim: Optional[int] = None) -> Any:
        """Arithmetic mean; NaN for an empty array."""
        _check_numeric(x, "mean")
        if dim is not None:
            kind = DType.COMPLEX128 if x.dtype == DType.COMPLEX128 else DType.FLOAT64
            return x.reduce_vectors(dim, self.mean, kind)
        if x.size == 0:
            return math.nan
        return self.sum(x) / x.size

    def var(self, x: StridedArray, dim: Optional[int] = None) -> Any:
        """
        Population variance.

        Uses Welford's streaming update, one pass and no catastrophic
        cancellation from a separate sum of squares.
        """
        _check_real(x, "var")
        if dim is not None:
            return x.reduce_vectors(dim, self.var, DType.FLOAT64)
        n = 0
        mean = 0.0
        m2 = 0.0
        for value in x:
            n += 1
            delta = value - mean
            mean += delta / n
            m2 += delta * (value - mean)
        return m2 / n if n else math.nan

    def std(self, x: StridedArray, dim: Optional[int] = None) -> Any:
        if dim is not None:
            return x.reduce_vectors(dim, self.std, DType.FLOAT64)
        return math.sqrt(self.var(x))

    def min(self, x: StridedArray, dim: Optional[int] = None,
            key: Optional[Callable[[Any], Any]] = None) -> Any:
        """
        Smallest element under natural order or ``key``.

        A comparator can be used through ``functools.cmp_to_key``. Among
        equally small elements the last one in linear order is returned.
        Returns None for an empty array.
        """
        if dim is not None:
            return x.reduce_vectors(dim, lambda v: self.min(v, key=key), x.dtype)
        return _fold_extreme(x, key, operator.lt)

    def max(self, x: StridedArray, dim: Optional[int] = None,
            key: Optional[Callable[[Any], Any]] = None) -> Any:
        """Largest element; see ``min`` (ties also resolve to the last)."""
        if dim is not None:
            return x.reduce_vectors(dim, lambda v: self.max(v, key=key), x.dtype)
        return _fold_extreme(x, key, operator.gt)

    def cumsum(self, x: StridedArray, dim: Optional[int] = None) -> StridedArray:
        """
        Prefix sums into a new array of the same shape.

        Without ``dim`` the sums run over the whole array in linear order;
        with ``dim`` they restart for every vector along that axis.
        """
        _check_numeric(x, "cumsum")
        out = StridedArray.empty(x.shape, _acc_kind(x.dtype))
        if dim is None:
            acc = 0
            for i, value in enumerate(x):
                acc += value
                out.set_element(i, acc)
            return out
        for i in range(x.vectors(dim)):
            src = x.get_vector(dim, i)
            dst = out.get_vector(dim, i)
            acc = 0
            for j, value in enumerate(src):
                acc += value
                dst.set_element(j, acc)
        return out

    # =========================================================================
    # Vector Algebra
    # =========================================================================

    def inner(self, x: StridedArray, y: StridedArray) -> Any:
        """Sum of ``x[i] * y[i]`` (no conjugation)."""
        check_size(x, y)
        acc = 0
        for a, b in zip(x, y):
            acc += a * b
        return acc

    def dotc(self, x: StridedArray, y: StridedArray) -> complex:
        """Sum of ``conj(x[i]) * y[i]``."""
        check_size(x, y)
        acc = 0j
        for a, b in zip(x, y):
            acc += complex(a).conjugate() * b
        return acc

    def norm2(self, x: StridedArray) -> float:
        """Euclidean norm; squared magnitudes for complex input."""
        _check_numeric(x, "norm2")
        if x.dtype == DType.COMPLEX128:
            return math.sqrt(x.reduce(0.0, operator.add, lambda z: z.real * z.real + z.imag * z.imag))
        return math.sqrt(x.reduce(0.0, operator.add, lambda v: v * v))

    def asum(self, x: StridedArray) -> Any:
        _check_numeric(x, "asum")
        return x.reduce(0, operator.add, abs)

    def iamax(self, x: StridedArray) -> int:
        """Index of the first element with the largest magnitude; -1 if empty."""
        _check_numeric(x, "iamax")
        best, best_index = -1.0, -1
        for i, value in enumerate(x):
            magnitude = abs(value)
            if magnitude > best:
                best, best_index = magnitude, i
        return best_index

    # =========================================================================
    # BLAS-like Kernels
    # =========================================================================

    def scal(self, alpha: Any, x: StridedArray) -> None:
        if alpha == 1:
            return
        x.update(lambda v: alpha * v)

    def axpy(self, alpha: Any, x: StridedArray, y: StridedArray) -> None:
        check_size(x, y)
        if alpha == 0:
            return
        y.combine(x, lambda b, a: alpha * a + b)

    def ger(self, alpha: Any, x: StridedArray, y: StridedArray, a: StridedArray) -> None:
        """
        Rank-1 write ``a[i, j] = alpha * x[i] * y[j]``.

        Raises:
            ArgumentError: If ``x`` or ``y`` is not a vector or ``a`` not a matrix
            SizeMismatchError: If ``x.size != a.rows`` or ``y.size != a.columns``
        """
        check_argument(x.is_vector and y.is_vector, "x and y must be vectors")
        check_argument(a.is_matrix, "a must be a matrix")
        if x.size != a.rows or y.size != a.columns:
            raise SizeMismatchError(
                f"Cannot write outer product of {x.size} and {y.size} "
                f"into {a.rows}x{a.columns}")
        ys = y.flat()
        for i, xi in enumerate(x):
            scaled = alpha * xi
            for j, yj in enumerate(ys):
                a.set(i, j, scaled * yj)

    def gemv(self, trans_a: Union[Op, bool], alpha: Any, a: StridedArray,
             x: StridedArray, beta: Any, y: StridedArray) -> None:
        """``y := alpha * op(a) @ x + beta * y``."""
        transpose = Op.of(trans_a).is_transpose
        check_argument(a.is_matrix, "a must be a matrix")
        rows, cols = a.shape
        if transpose:
            rows, cols = cols, rows
        if x.size != cols or y.size != rows:
            raise SizeMismatchError(
                f"Cannot multiply {rows}x{cols} by {x.size} into {y.size}")
        xs = x.flat()
        for i in range(rows):
            acc = 0
            for k in range(cols):
                acc += (a.get(k, i) if transpose else a.get(i, k)) * xs[k]
            y.set_element(i, alpha * acc if beta == 0 else alpha * acc + beta * y.get_element(i))

    def gemm(self, trans_a: Union[Op, bool], trans_b: Union[Op, bool], alpha: Any,
             a: StridedArray, b: StridedArray, beta: Any, c: StridedArray) -> None:
        """
        General matrix multiply ``c := alpha * op(a) @ op(b) + beta * c``.

        No transposed copy is made: operands are read through their linear
        index, addressed row-major when transposed and column-major
        otherwise. With ``beta == 0`` the previous contents of ``c`` are
        ignored.

        Args:
            trans_a: Op.KEEP or Op.TRANSPOSE (or a boolean) for ``a``
            trans_b: Same for ``b``
            alpha: Scale of the product
            a: Left operand
            b: Right operand
            beta: Scale of the previous ``c``
            c: Output, ``rows(op(a)) x cols(op(b))``

        Raises:
            NonConformantError: If ``cols(op(a)) != rows(op(b))`` or ``c``
                has the wrong shape; nothing is written
        """
        ta = Op.of(trans_a).is_transpose
        tb = Op.of(trans_b).is_transpose
        check_argument(a.is_matrix and b.is_matrix and c.is_matrix,
                       "gemm() operands must be matrices")
        this_rows, this_cols = a.shape
        if ta:
            this_rows, this_cols = this_cols, this_rows
        other_rows, other_cols = b.shape
        if tb:
            other_rows, other_cols = other_cols, other_rows
        if this_cols != other_rows:
            raise NonConformantError(this_rows, this_cols, other_rows, other_cols)
        if c.shape != (this_rows, other_cols):
            raise NonConformantError(
                this_rows, other_cols, c.rows, c.columns,
                f"Output of shape {c.rows}x{c.columns} cannot hold "
                f"{this_rows}x{this_cols} @ {other_rows}x{other_cols}")

        a_get = a.get_element
        b_get = b.get_element
        for row in range(this_rows):
            for col in range(other_cols):
                acc = 0
                for k in range(this_cols):
                    if ta:
                        ai = row_major(row, k, this_rows, this_cols)
                    else:
                        ai = column_major(0, row, k, this_rows, this_cols)
                    if tb:
                        bi = row_major(k, col, other_rows, other_cols)
                    else:
                        bi = column_major(0, k, col, other_rows, other_cols)
                    acc += a_get(ai) * b_get(bi)
                if beta == 0:
                    c.set(row, col, alpha * acc)
                else:
                    c.set(row, col, alpha * acc + beta * c.get(row, col))

    def copy(self, src: StridedArray, dst: StridedArray) -> None:
        """Element-wise copy in linear order; kinds may differ."""
        check_size(src, dst)
        for i in range(src.size):
            dst.set_from(i, src, i)

    def swap(self, a: StridedArray, b: StridedArray) -> None:
        check_size(a, b)
        for i in range(a.size):
            tmp = a.get_element(i)
            a.set_from(i, b, i)
            b.set_element(i, tmp)

    def dot(self, a: StridedArray, b: StridedArray, alpha: Any = 1) -> Any:
        """
        Product of vectors and matrices.

        Vector-vector gives ``alpha`` times the inner product; a matrix with
        a vector goes through ``gemv``; two matrices through ``gemm``.
        """
        if a.is_vector and b.is_vector:
            return alpha * self.inner(a, b)
        kind = promote_dtype(_acc_kind(a.dtype), _acc_kind(b.dtype))
        if a.is_matrix and b.is_vector:
            y = StridedArray.empty((a.rows,), kind)
            self.gemv(Op.KEEP, alpha, a, b, 0, y)
            return y
        a = _as_matrix(a, row=True)
        b = _as_matrix(b, row=False)
        if a.columns != b.rows:
            raise NonConformantError(a.rows, a.columns, b.rows, b.columns)
        c = StridedArray.empty((a.rows, b.columns), kind)
        self.gemm(Op.KEEP, Op.KEEP, alpha, a, b, 0, c)
        return c

    # =========================================================================
    # Element-wise Math
    # =========================================================================

    def _unary(self, x: StridedArray, name: str, real_fn: Callable[[Any], Any],
               complex_fn: Optional[Callable[[complex], Any]] = None,
               real_kind: DType = DType.FLOAT64,
               complex_kind: DType = DType.COMPLEX128) -> StridedArray:
        _check_numeric(x, name)
        if x.dtype == DType.COMPLEX128:
            if complex_fn is None:
                raise ArgumentError(f"{name}() is not defined for complex arrays")
            return x.map(complex_fn, complex_kind)
        # IEEE results (nan, inf) rather than domain errors
        with np.errstate(all="ignore"):
            return x.map(real_fn, real_kind)

    def sin(self, x: StridedArray) -> StridedArray:
        return self._unary(x, "sin", np.sin, cmath.sin)

    def cos(self, x: StridedArray) -> StridedArray:
        return self._unary(x, "cos", np.cos, cmath.cos)

    def tan(self, x: StridedArray) -> StridedArray:
        return self._unary(x, "tan", np.tan, cmath.tan)

    def asin(self, x: StridedArray) -> StridedArray:
        return self._unary(x, "asin", np.arcsin, cmath.asin)

    def acos(self, x: StridedArray) -> StridedArray:
        return self._unary(x, "acos", np.arccos, cmath.acos)

    def atan(self, x: StridedArray) -> StridedArray:
        return self._unary(x, "atan", np.arctan, cmath.atan)

    def sinh(self, x: StridedArray) -> StridedArray:
        return self._unary(x, "sinh", np.sinh, cmath.sinh)

    def cosh(self, x: StridedArray) -> StridedArray:
        return self._unary(x, "cosh", np.cosh, cmath.cosh)

    def tanh(self, x: StridedArray) -> StridedArray:
        return self._unary(x, "tanh", np.tanh, cmath.tanh)

    def exp(self, x: StridedArray) -> StridedArray:
        return self._unary(x, "exp", np.exp, cmath.exp)

    def log(self, x: StridedArray) -> StridedArray:
        """Natural logarithm; ``-inf`` at 0 and NaN for negative reals."""
        return self._unary(x, "log", np.log, cmath.log)

    def log2(self, x: StridedArray) -> StridedArray:
        return self._unary(x, "log2", np.log2, lambda z: cmath.log(z) / math.log(2))

    def log10(self, x: StridedArray) -> StridedArray:
        return self._unary(x, "log10", np.log10, cmath.log10)

    def sqrt(self, x: StridedArray) -> StridedArray:
        return self._unary(x, "sqrt", np.sqrt, cmath.sqrt)

    def cbrt(self, x: StridedArray) -> StridedArray:
        return self._unary(x, "cbrt", np.cbrt)

    def abs(self, x: StridedArray) -> StridedArray:
        """Absolute value; complex input gives magnitudes as FLOAT64."""
        kind = x.dtype if x.dtype != DType.BOOL else DType.INT64
        return self._unary(x, "abs", builtins.abs, builtins.abs,
                           real_kind=kind, complex_kind=DType.FLOAT64)

    def ceil(self, x: StridedArray) -> StridedArray:
        """Ceiling; complex input is rounded per component."""
        return self._unary(x, "ceil", np.ceil,
                           lambda z: complex(math.ceil(z.real), math.ceil(z.imag)))

    def floor(self, x: StridedArray) -> StridedArray:
        return self._unary(x, "floor", np.floor,
                           lambda z: complex(math.floor(z.real), math.floor(z.imag)))

    def round(self, x: StridedArray) -> StridedArray:
        """
        Round half up to INT64.

        NaN rounds to 0; infinities and out-of-range values saturate.
        """
        return self._unary(x, "round", _round_half_up, real_kind=DType.INT64)

    def signum(self, x: StridedArray) -> StridedArray:
        """Sign of reals; ``z / |z|`` (0 at 0) for complex input."""
        return self._unary(x, "signum", lambda v: np.sign(float(v)),
                           lambda z: z / abs(z) if z else 0j)

    def scalb(self, x: StridedArray, n: int) -> StridedArray:
        """``x * 2**n`` computed exactly."""
        return self._unary(x, "scalb", lambda v: np.ldexp(v, n))

    def pow(self, x: StridedArray, power: float) -> StridedArray:
        """
        Raise every element to ``power``.

        Exponents 2, 3 and 4 (within ``EPS``) use repeated multiplication;
        any other exponent the general power function.
        """
        if abs(power - 2) < EPS:
            fn = lambda v: v * v
        elif abs(power - 3) < EPS:
            fn = lambda v: v * v * v
        elif abs(power - 4) < EPS:
            def fn(v):
                sq = v * v
                return sq * sq
        elif x.dtype == DType.COMPLEX128:
            fn = lambda z: z ** power
        else:
            fn = lambda v: np.power(float(v), power)
        return self._unary(x, "pow", fn, fn)

    # =========================================================================
    # Structural
    # =========================================================================

    def trace(self, x: StridedArray) -> Any:
        """Sum of the main diagonal."""
        check_argument(x.is_matrix, "trace() requires a matrix, got %d-d array", x.ndim)
        return self.sum(x.get_diagonal())

    def take(self, x: StridedArray, n: int) -> StridedArray:
        """New vector with the first ``n`` elements of ``x`` in linear order."""
        check_argument(0 <= n <= x.size, "Cannot take %d of %d elements", n, x.size)
        out = StridedArray.empty((n,), x.dtype)
        for i in range(n):
            out.set_from(i, x, i)
        return out

    def vstack(self, arrays: Sequence[StridedArray]) -> StridedArray:
        """Stack matrices (vectors as single rows) on top of each other."""
        check_argument(len(arrays) > 0, "vstack() needs at least one array")
        blocks = [_as_matrix(a, row=True) for a in arrays]
        cols = blocks[0].columns
        for block in blocks:
            if block.columns != cols:
                raise SizeMismatchError(f"Column count differs ({block.columns} != {cols})")
        kind = blocks[0].dtype
        for block in blocks[1:]:
            kind = promote_dtype(kind, block.dtype)
        out = StridedArray.empty((sum(b.rows for b in blocks), cols), kind)
        row = 0
        for block in blocks:
            out.get_view(row, 0, block.rows, cols).assign(block)
            row += block.rows
        return out

    def hstack(self, arrays: Sequence[StridedArray]) -> StridedArray:
        """Place matrices (vectors as single columns) side by side."""
        check_argument(len(arrays) > 0, "hstack() needs at least one array")
        blocks = [_as_matrix(a, row=False) for a in arrays]
        rows = blocks[0].rows
        for block in blocks:
            if block.rows != rows:
                raise SizeMismatchError(f"Row count differs ({block.rows} != {rows})")
        kind = blocks[0].dtype
        for block in blocks[1:]:
            kind = promote_dtype(kind, block.dtype)
        out = StridedArray.empty((rows, sum(b.columns for b in blocks)), kind)
        col = 0
        for block in blocks:
            out.get_view(0, col, rows, block.columns).assign(block)
            col += block.columns
        return out

    def vsplit(self, x: StridedArray, parts: int) -> List[StridedArray]:
        """Split into ``parts`` row blocks, returned as views."""
        check_argument(x.is_matrix, "vsplit() requires a matrix")
        check_argument(parts > 0 and x.rows % parts == 0,
                       "Cannot split %d rows into %d parts", x.rows, parts)
        step = x.rows // parts
        return [x.get_view(i * step, 0, step, x.columns) for i in range(parts)]

    def hsplit(self, x: StridedArray, parts: int) -> List[StridedArray]:
        """Split into ``parts`` column blocks, returned as views."""
        check_argument(x.is_matrix, "hsplit() requires a matrix")
        check_argument(parts > 0 and x.columns % parts == 0,
                       "Cannot split %d columns into %d parts", x.columns, parts)
        step = x.columns // parts
        return [x.get_view(0, i * step, x.rows, step) for i in range(parts)]

    def repmat(self, x: StridedArray, r: int, c: int) -> StridedArray:
        """Tile ``x`` (a vector counts as one row) ``r`` times down and ``c`` across."""
        check_argument(r > 0 and c > 0, "Repetitions must be positive")
        block = _as_matrix(x, row=True)
        m, n = block.shape
        out = StridedArray.empty((m * r, n * c), block.dtype)
        for i in range(r):
            for j in range(c):
                out.get_view(i * m, j * n, m, n).assign(block)
        return out

    def shuffle(self, x: StridedArray,
                rng: Union[np.random.Generator, int, None] = None) -> None:
        """Permute the elements of ``x`` in place."""
        values = x.flat()
        order = resolve_rng(rng).permutation(len(values))
        for i, j in enumerate(order):
            x.set_element(i, values[j])

    def sort(self, x: StridedArray, key: Optional[Callable[[Any], Any]] = None,
             dim: Optional[int] = None, reverse: bool = False) -> StridedArray:
        """
        Sorted copy of ``x``.

        Without ``dim`` all elements are sorted in linear order; with
        ``dim`` every vector along that axis is sorted on its own.
        """
        out = x.copy()
        if dim is None:
            return out.sort(key, reverse)
        for i in range(out.vectors(dim)):
            out.get_vector(dim, i).sort(key, reverse)
        return out

    def transpose(self, x: StridedArray) -> StridedArray:
        return x.transpose()

    def repeat(self, x: StridedArray, n: int) -> StridedArray:
        """Vector with every element of ``x`` (linear order) repeated ``n`` times."""
        check_argument(n >= 0, "Repetitions must be non-negative, got %d", n)
        out = StridedArray.empty((x.size * n,), x.dtype)
        for i, value in enumerate(x):
            for j in range(n):
                out.set_element(i * n + j, value)
        return out

    def concatenate(self, arrays: Sequence[StridedArray], dim: int = 0) -> StridedArray:
        """
        Join arrays along ``dim``.

        All arrays must have the same rank and agree on every other axis.
        The result kind is the promotion of the input kinds.
        """
        check_argument(len(arrays) > 0, "concatenate() needs at least one array")
        first = arrays[0]
        _check_axis(first, dim)
        shape = list(first.shape)
        shape[dim] = 0
        kind = first.dtype
        for array in arrays:
            check_argument(array.ndim == first.ndim,
                           "Cannot concatenate %d-d and %d-d arrays", first.ndim, array.ndim)
            for axis in range(first.ndim):
                if axis != dim and array.shape[axis] != first.shape[axis]:
                    raise SizeMismatchError(
                        f"Shape {array.shape} does not match {first.shape} off axis {dim}")
            shape[dim] += array.shape[dim]
            kind = promote_dtype(kind, array.dtype)
        out = StridedArray.empty(tuple(shape), kind)
        position = 0
        for array in arrays:
            block = out.as_view(position * out.stride[dim], array.shape, out.stride)
            block.assign(array)
            position += array.shape[dim]
        return out

    def split(self, x: StridedArray, parts: int, dim: int = 0) -> List[StridedArray]:
        """Split into ``parts`` equal blocks along ``dim``, returned as views."""
        _check_axis(x, dim)
        check_argument(parts > 0 and x.shape[dim] % parts == 0,
                       "Cannot split %d elements along axis %d into %d parts",
                       x.shape[dim], dim, parts)
        shape = list(x.shape)
        shape[dim] //= parts
        step = x.stride[dim] * shape[dim]
        return [x.as_view(x.offset + i * step, shape, x.stride, x.major_axis)
                for i in range(parts)]

    def outer(self, a: StridedArray, b: StridedArray) -> StridedArray:
        """``a.size x b.size`` matrix ``out[i, j] = a[i] * b[j]`` (inputs flattened)."""
        _check_numeric(a, "outer")
        _check_numeric(b, "outer")
        kind = promote_dtype(_acc_kind(a.dtype), _acc_kind(b.dtype))
        out = StridedArray.empty((a.size, b.size), kind)
        self.ger(1, a if a.is_vector else a.ravel(), b if b.is_vector else b.ravel(), out)
        return out

    # =========================================================================
    # Selection and Search
    # =========================================================================

    def argmin(self, x: StridedArray, dim: Optional[int] = None) -> Any:
        """
        Linear index of the first smallest element.

        With ``dim`` an INT64 array of per-vector indices.

        Raises:
            ArgumentError: If ``x`` is empty
        """
        if dim is not None:
            return x.reduce_vectors(dim, self.argmin, DType.INT64)
        return _arg_extreme(x, operator.lt, "argmin")

    def argmax(self, x: StridedArray, dim: Optional[int] = None) -> Any:
        """Linear index of the first largest element; see ``argmin``."""
        if dim is not None:
            return x.reduce_vectors(dim, self.argmax, DType.INT64)
        return _arg_extreme(x, operator.gt, "argmax")

    def order(self, x: StridedArray, dim: Optional[int] = None,
              key: Optional[Callable[[Any], Any]] = None,
              reverse: bool = False) -> StridedArray:
        """
        Indices that would sort ``x`` (stable).

        Without ``dim`` a vector of linear indices; with ``dim`` an array of
        the same shape holding the order of every vector along that axis.

        Examples:
            >>> r.order(f.array([3.0, 1.0, 2.0])).flat()
            [1, 2, 0]
        """
        if dim is None:
            values = x.flat()
            sort_key = (lambda i: values[i]) if key is None else (lambda i: key(values[i]))
            indices = sorted(range(len(values)), key=sort_key, reverse=reverse)
            return StridedArray.empty((len(indices),), DType.INT64).assign(indices)
        _check_axis(x, dim)
        out = StridedArray.empty(x.shape, DType.INT64)
        for i in range(x.vectors(dim)):
            out.set_vector(dim, i, self.order(x.get_vector(dim, i), key=key, reverse=reverse))
        return out

    def where(self, condition: StridedArray, x: StridedArray, y: StridedArray) -> StridedArray:
        """New array taking ``x[i]`` where ``condition[i]`` holds, else ``y[i]``."""
        check_size(x, y)
        check_size(condition, x)
        out = StridedArray.empty(x.shape, promote_dtype(x.dtype, y.dtype))
        for i, (c, a, b) in enumerate(zip(condition, x, y)):
            out.set_element(i, a if c else b)
        return out

    def mask(self, x: StridedArray, mask: StridedArray, values: StridedArray) -> StridedArray:
        """Copy of ``x`` with ``values[i]`` written wherever ``mask[i]`` holds."""
        check_shape(x, mask)
        check_shape(x, values)
        out = x.copy()
        self.put_mask(out, mask, values)
        return out

    def put_mask(self, x: StridedArray, mask: StridedArray, values: StridedArray) -> None:
        """In place: ``x[i] = values[i]`` wherever ``mask[i]`` holds."""
        check_shape(x, mask)
        check_shape(x, values)
        for i, selected in enumerate(mask):
            if selected:
                x.set_from(i, values, i)

    def bisect_left(self, x: StridedArray, value: Any) -> int:
        """
        Insertion point for ``value`` keeping sorted ``x`` sorted.

        Equal elements already present stay to the right of the point.
        """
        return bisect.bisect_left(x.flat(), value)

    def bisect_right(self, x: StridedArray, value: Any) -> int:
        """Insertion point after any elements equal to ``value``."""
        return bisect.bisect_right(x.flat(), value)

    def binary_search(self, x: StridedArray, value: Any) -> int:
        """
        Index of ``value`` in sorted ``x``.

        When absent, ``-(insertion point) - 1``, so the result is negative
        exactly when the value is missing.
        """
        values = x.flat()
        i = bisect.bisect_left(values, value)
        if i < len(values) and values[i] == value:
            return i
        return -i - 1
