"""
Decomposition results.

Plain records returned by ``LinearAlgebraRoutines``. They hold the packed
factors exactly as the low-level routines produce them and derive the
convenient forms (triangular factors, permutation, determinant) on demand.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ._array import StridedArray
from ._dtypes import DType
from ._errors import check_state

__all__ = [
    'LuDecomposition',
    'SingularValueDecomposition',
    'EigenDecomposition',
    'QrDecomposition',
]


@dataclass
class LuDecomposition:
    """
    LU factorization ``P @ A = L @ U`` in packed LAPACK form.

    Attributes:
        lu: ``m x n`` matrix holding ``U`` on and above the diagonal and the
            unit-diagonal ``L`` below it
        pivots: 0-based row interchanges; row ``i`` was swapped with
            ``pivots[i]``
    """
    lu: StridedArray
    pivots: StridedArray
    _lower: Optional[StridedArray] = field(default=None, init=False, repr=False)
    _upper: Optional[StridedArray] = field(default=None, init=False, repr=False)

    @property
    def lower(self) -> StridedArray:
        """Unit lower-triangular factor, ``m x min(m, n)``."""
        if self._lower is None:
            m, n = self.lu.shape
            k = min(m, n)
            lower = StridedArray.empty((m, k), DType.FLOAT64)
            for i in range(m):
                for j in range(min(i + 1, k)):
                    lower.set(i, j, 1.0 if i == j else self.lu.get(i, j))
            self._lower = lower
        return self._lower

    @property
    def upper(self) -> StridedArray:
        """Upper-triangular factor, ``min(m, n) x n``."""
        if self._upper is None:
            m, n = self.lu.shape
            k = min(m, n)
            upper = StridedArray.empty((k, n), DType.FLOAT64)
            for i in range(k):
                for j in range(i, n):
                    upper.set(i, j, self.lu.get(i, j))
            self._upper = upper
        return self._upper

    @property
    def permutation(self) -> StridedArray:
        """Permutation matrix ``P`` with ``P @ A = L @ U``."""
        m = self.lu.shape[0]
        order = list(range(m))
        for i in range(self.pivots.size):
            p = self.pivots.get_element(i)
            order[i], order[p] = order[p], order[i]
        perm = StridedArray.empty((m, m), DType.FLOAT64)
        for i, row in enumerate(order):
            perm.set(i, row, 1.0)
        return perm

    @property
    def determinant(self) -> float:
        check_state(self.lu.is_square, "Matrix must be square")
        det = 1.0
        for i in range(self.lu.shape[0]):
            det *= self.lu.get(i, i)
            if self.pivots.get_element(i) != i:
                det = -det
        return det

    @property
    def is_non_singular(self) -> bool:
        check_state(self.lu.is_square, "Matrix must be square")
        return all(self.lu.get(i, i) != 0 for i in range(self.lu.shape[0]))


@dataclass
class SingularValueDecomposition:
    """``A = U @ diag(s) @ VT``."""
    s: StridedArray
    u: StridedArray
    vt: StridedArray

    def diagonal(self) -> StridedArray:
        """``s`` as an ``m x n`` rectangular diagonal matrix."""
        m, n = self.u.shape[0], self.vt.shape[0]
        out = StridedArray.empty((m, n), DType.FLOAT64)
        out.get_diagonal().assign(self.s)
        return out


@dataclass
class EigenDecomposition:
    """Eigenvalues and right eigenvectors (one per column)."""
    values: StridedArray
    vectors: StridedArray


@dataclass
class QrDecomposition:
    """
    QR factorization in packed LAPACK form.

    ``qr`` holds ``R`` on and above the diagonal and the Householder
    reflectors below it; ``tau`` holds the reflector scales.
    """
    qr: StridedArray
    tau: StridedArray

    @property
    def r(self) -> StridedArray:
        m, n = self.qr.shape
        k = min(m, n)
        r = StridedArray.empty((k, n), DType.FLOAT64)
        for i in range(k):
            for j in range(i, n):
                r.set(i, j, self.qr.get(i, j))
        return r
