"""
Linear algebra routines.

``AbstractLinearAlgebraRoutines`` implements the high-level operations
(``lu``, ``inv``, ``svd``, ...) once, on top of the LAPACK-style low-level
routines. A native backend only has to supply the low-level layer.

``BaseLinearAlgebraRoutines`` is the pure-Python backend's implementation:
it carries no numerics, so every low-level routine, and therefore every
high-level one, raises UnsupportedOperationError after its arguments pass
validation.
"""

from __future__ import annotations

import sys
from typing import Union

from .._array import StridedArray
from .._dtypes import DType
from .._errors import (
    ArgumentError,
    NumericalError,
    UnsupportedOperationError,
    check_argument,
)
from ..api import LinearAlgebraRoutines, Op
from ..decomposition import (
    EigenDecomposition,
    LuDecomposition,
    QrDecomposition,
    SingularValueDecomposition,
)

__all__ = [
    'AbstractLinearAlgebraRoutines',
    'BaseLinearAlgebraRoutines',
    'EPS',
    'MACHINE_EPSILON',
]

EPS = 1e-10
MACHINE_EPSILON = sys.float_info.epsilon


def _check_info(routine: str, info: int) -> None:
    if info < 0:
        raise ArgumentError(f"{routine}: illegal value in argument {-info}")
    if info > 0:
        raise NumericalError(f"{routine}: failed with info={info}")


def _check_matrix(x: StridedArray, square: bool = False) -> None:
    check_argument(x.is_matrix, "Expected a matrix, got %d-d array", x.ndim)
    if square:
        check_argument(x.is_square, "Expected a square matrix, got %dx%d", *x.shape)


def _matrix(rows: int, cols: int) -> StridedArray:
    return StridedArray.empty((rows, cols), DType.FLOAT64)


def _vector(n: int, dtype: DType = DType.FLOAT64) -> StridedArray:
    return StridedArray.empty((n,), dtype)


class AbstractLinearAlgebraRoutines(LinearAlgebraRoutines):
    """
    High-level linear algebra over the low-level routines.

    Inputs are never modified: every routine factors a FLOAT64 copy.
    """

    # =========================================================================
    # Decompositions
    # =========================================================================

    def lu(self, x: StridedArray) -> LuDecomposition:
        """
        LU factorization with partial pivoting.

        A singular matrix still yields a factorization; check
        ``is_non_singular`` before using it to solve.
        """
        _check_matrix(x)
        lu = x.astype(DType.FLOAT64)
        ipiv = _vector(min(x.shape), DType.INT32)
        info = self.getrf(lu, ipiv)
        if info < 0:
            _check_info("getrf", info)
        return LuDecomposition(lu, ipiv)

    def svd(self, x: StridedArray) -> SingularValueDecomposition:
        _check_matrix(x)
        m, n = x.shape
        a = x.astype(DType.FLOAT64)
        s = _vector(min(m, n))
        u = _matrix(m, m)
        vt = _matrix(n, n)
        _check_info("gesdd", self.gesdd("a", a, s, u, vt))
        return SingularValueDecomposition(s, u, vt)

    def eig(self, x: StridedArray) -> EigenDecomposition:
        """
        Eigenvalues and right eigenvectors of a general square matrix.

        Values and vectors are COMPLEX128 when any eigenvalue is complex,
        FLOAT64 otherwise.
        """
        _check_matrix(x, square=True)
        n = x.rows
        a = x.astype(DType.FLOAT64)
        wr, wi = _vector(n), _vector(n)
        vl, vr = _matrix(1, 1), _matrix(n, n)
        _check_info("geev", self.geev("n", "v", a, wr, wi, vl, vr))

        if all(v == 0 for v in wi):
            return EigenDecomposition(wr, vr)

        values = _vector(n, DType.COMPLEX128)
        vectors = StridedArray.empty((n, n), DType.COMPLEX128)
        j = 0
        while j < n:
            values.set(j, complex(wr.get(j), wi.get(j)))
            if wi.get(j) == 0:
                vectors.get_column(j).assign(vr.get_column(j))
                j += 1
                continue
            # Conjugate pair stored as real and imaginary parts in columns j, j + 1
            values.set(j + 1, complex(wr.get(j + 1), wi.get(j + 1)))
            for i in range(n):
                re, im = vr.get(i, j), vr.get(i, j + 1)
                vectors.set(i, j, complex(re, im))
                vectors.set(i, j + 1, complex(re, -im))
            j += 2
        return EigenDecomposition(values, vectors)

    def qr(self, x: StridedArray) -> QrDecomposition:
        _check_matrix(x)
        a = x.astype(DType.FLOAT64)
        tau = _vector(min(x.shape))
        _check_info("geqrf", self.geqrf(a, tau))
        return QrDecomposition(a, tau)

    # =========================================================================
    # Derived Operations
    # =========================================================================

    def inv(self, x: StridedArray) -> StridedArray:
        """
        Inverse of a square matrix.

        Raises:
            NumericalError: If the matrix is singular
        """
        _check_matrix(x, square=True)
        a = x.astype(DType.FLOAT64)
        ipiv = _vector(x.rows, DType.INT32)
        info = self.getrf(a, ipiv)
        if info > 0:
            raise NumericalError("Matrix is singular")
        _check_info("getrf", info)
        _check_info("getri", self.getri(a, ipiv))
        return a

    def pinv(self, x: StridedArray) -> StridedArray:
        """
        Moore-Penrose pseudo-inverse, ``V @ diag(1 / s) @ U^T``.

        Singular values below ``max(m, n) * max(s) * MACHINE_EPSILON`` are
        treated as zero.
        """
        _check_matrix(x)
        m, n = x.shape
        svd = self.svd(x)
        k = svd.s.size
        largest = max(svd.s) if k else 0.0
        tol = max(m, n) * largest * MACHINE_EPSILON
        out = _matrix(n, m)
        for i in range(n):
            for j in range(m):
                acc = 0.0
                for p in range(k):
                    sp = svd.s.get(p)
                    if sp > tol:
                        acc += svd.vt.get(p, i) * svd.u.get(j, p) / sp
                out.set(i, j, acc)
        return out

    def det(self, x: StridedArray) -> float:
        _check_matrix(x, square=True)
        return self.lu(x).determinant

    def rank(self, x: StridedArray) -> int:
        """Number of singular values above the pseudo-inverse tolerance."""
        _check_matrix(x)
        s = self.svd(x).s
        if not s.size:
            return 0
        tol = max(x.shape) * max(s) * MACHINE_EPSILON
        return sum(1 for v in s if v > tol)

    def solve(self, a: StridedArray, b: StridedArray) -> StridedArray:
        """
        Solution of ``a @ x = b`` for square ``a``.

        ``b`` may be a vector or a matrix with one right-hand side per column;
        the result has the same shape as ``b``.
        """
        _check_matrix(a, square=True)
        rhs = b.reshape(b.size, 1) if b.is_vector else b
        _check_matrix(rhs)
        check_argument(rhs.rows == a.rows,
                       "Right-hand side has %d rows, expected %d", rhs.rows, a.rows)
        lu = a.astype(DType.FLOAT64)
        out = rhs.astype(DType.FLOAT64)
        ipiv = _vector(a.rows, DType.INT32)
        info = self.gesv(lu, ipiv, out)
        if info > 0:
            raise NumericalError("Matrix is singular")
        _check_info("gesv", info)
        return out.reshape(b.size) if b.is_vector else out

    def lstsq(self, a: StridedArray, b: StridedArray) -> StridedArray:
        """Minimum-norm least-squares solution of ``a @ x = b``."""
        _check_matrix(a)
        rhs = b.reshape(b.size, 1) if b.is_vector else b
        _check_matrix(rhs)
        m, n = a.shape
        check_argument(rhs.rows == m, "Right-hand side has %d rows, expected %d", rhs.rows, m)
        k = rhs.columns
        work = _matrix(max(m, n), k)
        work.get_view(0, 0, m, k).assign(rhs)
        jpvt = _vector(n, DType.INT32)
        rank = self.gelsy(a.astype(DType.FLOAT64), work, jpvt, EPS)
        if rank < 0:
            _check_info("gelsy", rank)
        out = work.get_view(0, 0, n, k).copy()
        return out.reshape(n) if b.is_vector else out


class BaseLinearAlgebraRoutines(AbstractLinearAlgebraRoutines):
    """
    Linear algebra without numerics.

    Every low-level routine raises UnsupportedOperationError; select a
    backend that provides a native implementation to use them.
    """

    def _unsupported(self, routine: str):
        return UnsupportedOperationError(
            f"{routine}() requires a native linear algebra backend")

    def getrf(self, a: StridedArray, ipiv: StridedArray) -> int:
        raise self._unsupported("getrf")

    def getri(self, a: StridedArray, ipiv: StridedArray) -> int:
        raise self._unsupported("getri")

    def gesv(self, a: StridedArray, ipiv: StridedArray, b: StridedArray) -> int:
        raise self._unsupported("gesv")

    def gelsy(self, a: StridedArray, b: StridedArray, jpvt: StridedArray, rcond: float) -> int:
        raise self._unsupported("gelsy")

    def geqrf(self, a: StridedArray, tau: StridedArray) -> int:
        raise self._unsupported("geqrf")

    def ormqr(self, side: str, trans: Union[Op, bool], a: StridedArray,
              tau: StridedArray, c: StridedArray) -> int:
        raise self._unsupported("ormqr")

    def syev(self, jobz: str, uplo: str, a: StridedArray, w: StridedArray) -> int:
        raise self._unsupported("syev")

    def syevr(self, jobz, range, uplo, a, vl, vu, il, iu, abstol, w, z, isuppz) -> int:
        raise self._unsupported("syevr")

    def geev(self, jobvl: str, jobvr: str, a: StridedArray, wr: StridedArray,
             wi: StridedArray, vl: StridedArray, vr: StridedArray) -> int:
        raise self._unsupported("geev")

    def gesvd(self, jobu: str, jobvt: str, a: StridedArray, s: StridedArray,
              u: StridedArray, vt: StridedArray) -> int:
        raise self._unsupported("gesvd")

    def gesdd(self, jobz: str, a: StridedArray, s: StridedArray,
              u: StridedArray, vt: StridedArray) -> int:
        raise self._unsupported("gesdd")
