"""
Backend Interfaces

Abstract contracts every array backend implements. A backend bundles three
collaborators:

    ArrayBackend
    ├── ArrayFactory           - constructs arrays
    ├── ArrayRoutines          - reductions, vector algebra, BLAS-like kernels,
    │                            element-wise math
    └── LinearAlgebraRoutines  - decompositions and solvers (LAPACK style)

The pure-Python ``sarray.base`` backend implements all of them except the
linear-algebra numerics, which it leaves to native backends.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Sequence, Union

from ._dtypes import DType

if TYPE_CHECKING:
    import numpy as np

    from ._array import Range, StridedArray
    from .decomposition import (
        EigenDecomposition,
        LuDecomposition,
        QrDecomposition,
        SingularValueDecomposition,
    )

__all__ = [
    'Op',
    'ArrayFactory',
    'ArrayRoutines',
    'LinearAlgebraRoutines',
    'ArrayBackend',
]


class Op(Enum):
    """Operand transformation for matrix kernels."""
    KEEP = "n"
    TRANSPOSE = "t"

    @property
    def is_transpose(self) -> bool:
        return self is Op.TRANSPOSE

    @classmethod
    def of(cls, value: Union["Op", bool, str]) -> "Op":
        """Accept an Op, a boolean flag or a LAPACK character (``'n'``/``'t'``)."""
        if isinstance(value, Op):
            return value
        if isinstance(value, bool):
            return cls.TRANSPOSE if value else cls.KEEP
        if isinstance(value, str) and value.lower() in ("n", "t"):
            return cls(value.lower())
        raise ValueError(f"Cannot interpret {value!r} as a transpose flag")


# =============================================================================
# Factory
# =============================================================================

class ArrayFactory(ABC):
    """
    Constructs arrays.

    Shape arguments are accepted both spread (``zeros(2, 3)``) and as one
    tuple (``zeros((2, 3))``).
    """

    @abstractmethod
    def array(self, data: Any, dtype: Any = None) -> "StridedArray":
        """Array from flat or nested (row-major) literal data."""

    @abstractmethod
    def new_array(self, shape: Sequence[int], dtype: Any = None) -> "StridedArray":
        """Zero-initialized array of ``shape`` and kind ``dtype``."""

    @abstractmethod
    def from_numpy(self, array: "np.ndarray") -> "StridedArray":
        """Copy of a numpy array."""

    def double_array(self, *shape: int) -> "StridedArray":
        return self.new_array(shape, DType.FLOAT64)

    def int_array(self, *shape: int) -> "StridedArray":
        return self.new_array(shape, DType.INT32)

    def long_array(self, *shape: int) -> "StridedArray":
        return self.new_array(shape, DType.INT64)

    def boolean_array(self, *shape: int) -> "StridedArray":
        return self.new_array(shape, DType.BOOL)

    def complex_array(self, *shape: int) -> "StridedArray":
        return self.new_array(shape, DType.COMPLEX128)

    def reference_array(self, *shape: int) -> "StridedArray":
        return self.new_array(shape, DType.OBJECT)

    @abstractmethod
    def zeros(self, *shape: int, dtype: Any = None) -> "StridedArray":
        ...

    @abstractmethod
    def ones(self, *shape: int, dtype: Any = None) -> "StridedArray":
        ...

    @abstractmethod
    def full(self, shape: Sequence[int], value: Any, dtype: Any = None) -> "StridedArray":
        ...

    @abstractmethod
    def range(self, *args: int) -> "Range":
        """``range(end)``, ``range(start, end)`` or ``range(start, end, step)``."""

    @abstractmethod
    def linspace(self, start: float, end: float, size: int) -> "StridedArray":
        ...

    @abstractmethod
    def eye(self, n: int) -> "StridedArray":
        ...

    @abstractmethod
    def diag(self, x: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def rand(self, *shape: int, rng: Optional["np.random.Generator"] = None) -> "StridedArray":
        """Uniform samples on (-1, 1)."""

    @abstractmethod
    def randn(self, *shape: int, rng: Optional["np.random.Generator"] = None) -> "StridedArray":
        """Standard normal samples."""

    @abstractmethod
    def randi(self, low: int, high: int, *shape: int,
              rng: Optional["np.random.Generator"] = None) -> "StridedArray":
        """Uniform integers on ``[low, high]``, both ends included."""


# =============================================================================
# Routines
# =============================================================================

class ArrayRoutines(ABC):
    """
    Stateless numeric routines over arrays.

    Reductions take ``dim=None`` for a whole-array scalar result or an axis
    for a per-vector result with one dimension fewer.
    """

    # Reductions

    @abstractmethod
    def sum(self, x: "StridedArray", dim: Optional[int] = None) -> Any:
        ...

    @abstractmethod
    def prod(self, x: "StridedArray", dim: Optional[int] = None) -> Any:
        ...

    @abstractmethod
    def mean(self, x: "StridedArray", dim: Optional[int] = None) -> Any:
        ...

    @abstractmethod
    def var(self, x: "StridedArray", dim: Optional[int] = None) -> Any:
        """Population variance."""

    @abstractmethod
    def std(self, x: "StridedArray", dim: Optional[int] = None) -> Any:
        ...

    @abstractmethod
    def min(self, x: "StridedArray", dim: Optional[int] = None,
            key: Optional[Callable[[Any], Any]] = None) -> Any:
        """Smallest element, None for an empty array."""

    @abstractmethod
    def max(self, x: "StridedArray", dim: Optional[int] = None,
            key: Optional[Callable[[Any], Any]] = None) -> Any:
        """Largest element, None for an empty array."""

    @abstractmethod
    def cumsum(self, x: "StridedArray", dim: Optional[int] = None) -> "StridedArray":
        ...

    # Vector algebra

    @abstractmethod
    def inner(self, x: "StridedArray", y: "StridedArray") -> Any:
        ...

    @abstractmethod
    def norm2(self, x: "StridedArray") -> float:
        ...

    @abstractmethod
    def asum(self, x: "StridedArray") -> Any:
        ...

    @abstractmethod
    def iamax(self, x: "StridedArray") -> int:
        ...

    # BLAS-like kernels

    @abstractmethod
    def scal(self, alpha: Any, x: "StridedArray") -> None:
        """``x := alpha * x``."""

    @abstractmethod
    def axpy(self, alpha: Any, x: "StridedArray", y: "StridedArray") -> None:
        """``y := alpha * x + y``."""

    @abstractmethod
    def ger(self, alpha: Any, x: "StridedArray", y: "StridedArray", a: "StridedArray") -> None:
        """``a[i, j] := alpha * x[i] * y[j]``."""

    @abstractmethod
    def gemv(self, trans_a: Union[Op, bool], alpha: Any, a: "StridedArray",
             x: "StridedArray", beta: Any, y: "StridedArray") -> None:
        """``y := alpha * op(a) @ x + beta * y``."""

    @abstractmethod
    def gemm(self, trans_a: Union[Op, bool], trans_b: Union[Op, bool], alpha: Any,
             a: "StridedArray", b: "StridedArray", beta: Any, c: "StridedArray") -> None:
        """``c := alpha * op(a) @ op(b) + beta * c``."""

    @abstractmethod
    def copy(self, src: "StridedArray", dst: "StridedArray") -> None:
        ...

    @abstractmethod
    def swap(self, a: "StridedArray", b: "StridedArray") -> None:
        ...

    @abstractmethod
    def dot(self, a: "StridedArray", b: "StridedArray", alpha: Any = 1) -> "StridedArray":
        """``alpha * a @ b`` for vectors and matrices; backs ``StridedArray.mmul``."""

    @abstractmethod
    def dotc(self, x: "StridedArray", y: "StridedArray") -> Any:
        """Inner product with ``x`` conjugated."""

    # Element-wise math, each returning a new array

    @abstractmethod
    def sin(self, x: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def cos(self, x: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def tan(self, x: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def asin(self, x: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def acos(self, x: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def atan(self, x: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def sinh(self, x: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def cosh(self, x: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def tanh(self, x: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def exp(self, x: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def log(self, x: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def log2(self, x: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def log10(self, x: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def sqrt(self, x: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def cbrt(self, x: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def abs(self, x: "StridedArray") -> "StridedArray":
        """Magnitudes; complex input gives a FLOAT64 result."""

    @abstractmethod
    def ceil(self, x: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def floor(self, x: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def round(self, x: "StridedArray") -> "StridedArray":
        """Round half up."""

    @abstractmethod
    def signum(self, x: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def scalb(self, x: "StridedArray", n: int) -> "StridedArray":
        """``x * 2**n``."""

    @abstractmethod
    def pow(self, x: "StridedArray", power: float) -> "StridedArray":
        ...

    # Structural

    @abstractmethod
    def trace(self, x: "StridedArray") -> Any:
        ...

    @abstractmethod
    def take(self, x: "StridedArray", n: int) -> "StridedArray":
        """First ``n`` elements in linear order."""

    @abstractmethod
    def vstack(self, arrays: Sequence["StridedArray"]) -> "StridedArray":
        ...

    @abstractmethod
    def hstack(self, arrays: Sequence["StridedArray"]) -> "StridedArray":
        ...

    @abstractmethod
    def vsplit(self, x: "StridedArray", parts: int) -> List["StridedArray"]:
        ...

    @abstractmethod
    def hsplit(self, x: "StridedArray", parts: int) -> List["StridedArray"]:
        ...

    @abstractmethod
    def repmat(self, x: "StridedArray", r: int, c: int) -> "StridedArray":
        ...

    @abstractmethod
    def shuffle(self, x: "StridedArray", rng: Optional["np.random.Generator"] = None) -> None:
        """Permute ``x`` in place."""

    @abstractmethod
    def sort(self, x: "StridedArray", key: Optional[Callable[[Any], Any]] = None,
             dim: Optional[int] = None, reverse: bool = False) -> "StridedArray":
        """Sorted copy, whole array or per vector along ``dim``."""

    @abstractmethod
    def transpose(self, x: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def repeat(self, x: "StridedArray", n: int) -> "StridedArray":
        """Vector with every element repeated ``n`` times in place."""

    @abstractmethod
    def concatenate(self, arrays: Sequence["StridedArray"], dim: int = 0) -> "StridedArray":
        ...

    @abstractmethod
    def split(self, x: "StridedArray", parts: int, dim: int = 0) -> List["StridedArray"]:
        """Equal blocks along ``dim``, as views."""

    @abstractmethod
    def outer(self, a: "StridedArray", b: "StridedArray") -> "StridedArray":
        ...

    # Selection and search

    @abstractmethod
    def argmin(self, x: "StridedArray", dim: Optional[int] = None) -> Any:
        """Index of the first smallest element."""

    @abstractmethod
    def argmax(self, x: "StridedArray", dim: Optional[int] = None) -> Any:
        """Index of the first largest element."""

    @abstractmethod
    def order(self, x: "StridedArray", dim: Optional[int] = None,
              key: Optional[Callable[[Any], Any]] = None,
              reverse: bool = False) -> "StridedArray":
        """Stable sorting permutation."""

    @abstractmethod
    def where(self, condition: "StridedArray", x: "StridedArray",
              y: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def mask(self, x: "StridedArray", mask: "StridedArray",
             values: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def put_mask(self, x: "StridedArray", mask: "StridedArray", values: "StridedArray") -> None:
        ...

    @abstractmethod
    def bisect_left(self, x: "StridedArray", value: Any) -> int:
        ...

    @abstractmethod
    def bisect_right(self, x: "StridedArray", value: Any) -> int:
        ...

    @abstractmethod
    def binary_search(self, x: "StridedArray", value: Any) -> int:
        """Index of ``value``, or ``-(insertion point) - 1`` when absent."""


# =============================================================================
# Linear Algebra
# =============================================================================

class LinearAlgebraRoutines(ABC):
    """
    Decompositions and solvers.

    Low-level routines follow LAPACK conventions: matrices are factored in
    place, pivots and auxiliary results are written into caller-supplied
    output arrays, and the return value is LAPACK's ``info`` (0 on success,
    negative for an illegal argument, positive for a numerical failure such
    as an exactly singular factor).

    Shapes (``a`` is ``m x n``):
        getrf   a: m x n (overwritten by L and U), ipiv: min(m, n) INT32
        getri   a: n x n LU factor (overwritten by the inverse), ipiv: n
        gesv    a: n x n, ipiv: n, b: n x k (overwritten by the solution)
        gelsy   a: m x n, b: max(m, n) x k, jpvt: n; returns effective rank
        geqrf   a: m x n (overwritten by R and reflectors), tau: min(m, n)
        ormqr   c := op(Q) @ c or c @ op(Q) for side 'l' or 'r'
        syev    a: n x n symmetric (overwritten by eigenvectors if jobz='v'), w: n
        syevr   selected eigenpairs; returns the number found
        geev    a: n x n, wr/wi: n, vl/vr: n x n
        gesvd   s: min(m, n), u: m x m, vt: n x n
        gesdd   divide-and-conquer variant of gesvd
    """

    # High level

    @abstractmethod
    def lu(self, x: "StridedArray") -> "LuDecomposition":
        ...

    @abstractmethod
    def svd(self, x: "StridedArray") -> "SingularValueDecomposition":
        ...

    @abstractmethod
    def eig(self, x: "StridedArray") -> "EigenDecomposition":
        ...

    @abstractmethod
    def qr(self, x: "StridedArray") -> "QrDecomposition":
        ...

    @abstractmethod
    def inv(self, x: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def pinv(self, x: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def det(self, x: "StridedArray") -> float:
        ...

    @abstractmethod
    def rank(self, x: "StridedArray") -> int:
        ...

    @abstractmethod
    def solve(self, a: "StridedArray", b: "StridedArray") -> "StridedArray":
        ...

    @abstractmethod
    def lstsq(self, a: "StridedArray", b: "StridedArray") -> "StridedArray":
        ...

    # Low level

    @abstractmethod
    def getrf(self, a: "StridedArray", ipiv: "StridedArray") -> int:
        ...

    @abstractmethod
    def getri(self, a: "StridedArray", ipiv: "StridedArray") -> int:
        ...

    @abstractmethod
    def gesv(self, a: "StridedArray", ipiv: "StridedArray", b: "StridedArray") -> int:
        ...

    @abstractmethod
    def gelsy(self, a: "StridedArray", b: "StridedArray", jpvt: "StridedArray",
              rcond: float) -> int:
        ...

    @abstractmethod
    def geqrf(self, a: "StridedArray", tau: "StridedArray") -> int:
        ...

    @abstractmethod
    def ormqr(self, side: str, trans: Union[Op, bool], a: "StridedArray",
              tau: "StridedArray", c: "StridedArray") -> int:
        ...

    @abstractmethod
    def syev(self, jobz: str, uplo: str, a: "StridedArray", w: "StridedArray") -> int:
        ...

    @abstractmethod
    def syevr(self, jobz: str, range: str, uplo: str, a: "StridedArray", vl: float,
              vu: float, il: int, iu: int, abstol: float, w: "StridedArray",
              z: "StridedArray", isuppz: "StridedArray") -> int:
        ...

    @abstractmethod
    def geev(self, jobvl: str, jobvr: str, a: "StridedArray", wr: "StridedArray",
             wi: "StridedArray", vl: "StridedArray", vr: "StridedArray") -> int:
        ...

    @abstractmethod
    def gesvd(self, jobu: str, jobvt: str, a: "StridedArray", s: "StridedArray",
              u: "StridedArray", vt: "StridedArray") -> int:
        ...

    @abstractmethod
    def gesdd(self, jobz: str, a: "StridedArray", s: "StridedArray",
              u: "StridedArray", vt: "StridedArray") -> int:
        ...


# =============================================================================
# Backend
# =============================================================================

class ArrayBackend(ABC):
    """
    A selectable implementation of the three collaborators.

    The dispatcher picks the available backend with the highest priority.
    """

    @property
    def name(self) -> str:
        """Name used for explicit selection (``SARRAY_BACKEND``)."""
        return type(self).__name__

    @abstractmethod
    def is_available(self) -> bool:
        ...

    @abstractmethod
    def get_priority(self) -> int:
        ...

    @abstractmethod
    def get_array_factory(self) -> ArrayFactory:
        ...

    @abstractmethod
    def get_array_routines(self) -> ArrayRoutines:
        ...

    @abstractmethod
    def get_linear_algebra_routines(self) -> LinearAlgebraRoutines:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, priority={self.get_priority()})"
