"""
Pytest configuration and shared fixtures for sarray tests.
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

import sarray
from sarray import UnsupportedOperationError
from sarray._backend import reset_backend
from sarray.base import (
    AbstractLinearAlgebraRoutines,
    BaseArrayBackend,
    BaseArrayFactory,
    BaseArrayRoutines,
)


# =============================================================================
# Numpy-backed low-level linear algebra
# =============================================================================

class NumpyLinearAlgebraRoutines(AbstractLinearAlgebraRoutines):
    """Low-level LAPACK-style routines computed with numpy.

    Exercises the high-level layer of AbstractLinearAlgebraRoutines
    against known numerics.
    """

    def getrf(self, a, ipiv):
        m = a.to_numpy().astype(float)
        rows, cols = m.shape
        info = 0
        for k in range(min(rows, cols)):
            p = k + int(np.argmax(np.abs(m[k:, k])))
            ipiv.set(k, p)
            if m[p, k] == 0:
                if info == 0:
                    info = k + 1
                continue
            if p != k:
                m[[k, p]] = m[[p, k]]
            m[k + 1:, k] /= m[k, k]
            m[k + 1:, k + 1:] -= np.outer(m[k + 1:, k], m[k, k + 1:])
        a.assign(m)
        return info

    def getri(self, a, ipiv):
        lu = a.to_numpy()
        n = lu.shape[0]
        lower = np.tril(lu, -1) + np.eye(n)
        upper = np.triu(lu)
        perm = np.eye(n)
        for i in range(n):
            p = ipiv.get(i)
            perm[[i, p]] = perm[[p, i]]
        a.assign(np.linalg.inv(upper) @ np.linalg.inv(lower) @ perm)
        return 0

    def gesv(self, a, ipiv, b):
        original = a.to_numpy()
        info = self.getrf(a, ipiv)
        if info:
            return info
        b.assign(np.linalg.solve(original, b.to_numpy()))
        return 0

    def gelsy(self, a, b, jpvt, rcond):
        m, n = a.shape
        work = b.to_numpy()
        x, _, rank, _ = np.linalg.lstsq(a.to_numpy(), work[:m], rcond=rcond)
        work[:n] = x
        b.assign(work)
        return int(rank)

    def geqrf(self, a, tau):
        h, t = np.linalg.qr(a.to_numpy(), mode="raw")
        a.assign(h.T)
        tau.assign(t)
        return 0

    def ormqr(self, side, trans, a, tau, c):
        raise UnsupportedOperationError("ormqr")

    def syev(self, jobz, uplo, a, w):
        raise UnsupportedOperationError("syev")

    def syevr(self, jobz, range, uplo, a, vl, vu, il, iu, abstol, w, z, isuppz):
        raise UnsupportedOperationError("syevr")

    def geev(self, jobvl, jobvr, a, wr, wi, vl, vr):
        w, v = np.linalg.eig(a.to_numpy())
        wr.assign(w.real)
        wi.assign(w.imag)
        packed = v.real.copy()
        j = 0
        while j < len(w):
            if w[j].imag != 0:
                packed[:, j] = v[:, j].real
                packed[:, j + 1] = v[:, j].imag
                j += 2
            else:
                j += 1
        vr.assign(packed)
        return 0

    def gesvd(self, jobu, jobvt, a, s, u, vt):
        return self.gesdd(jobu, a, s, u, vt)

    def gesdd(self, jobz, a, s, u, vt):
        uu, ss, vvt = np.linalg.svd(a.to_numpy(), full_matrices=True)
        s.assign(ss)
        u.assign(uu)
        vt.assign(vvt)
        return 0


class NumpyBackend(BaseArrayBackend):
    """Base backend with numpy linear algebra, ranked above it."""

    def __init__(self, priority=0):
        super().__init__()
        self._priority = priority
        self._numpy_linalg = NumpyLinearAlgebraRoutines()

    @property
    def name(self):
        return "numpy-test"

    def get_priority(self):
        return self._priority

    def get_linear_algebra_routines(self):
        return self._numpy_linalg


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def clean_config():
    """Restore configuration and backend selection around every test."""
    sarray.get_config().reset()
    reset_backend()
    yield
    sarray.get_config().reset()
    reset_backend()


@pytest.fixture
def backend():
    return BaseArrayBackend()


@pytest.fixture
def factory():
    return BaseArrayFactory()


@pytest.fixture
def routines():
    return BaseArrayRoutines()


@pytest.fixture
def linalg(backend):
    """Linear algebra of the base backend (no numerics)."""
    return backend.get_linear_algebra_routines()


@pytest.fixture
def numpy_linalg():
    return NumpyLinearAlgebraRoutines()


@pytest.fixture
def rng():
    """Seeded generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def matrix_2x2(factory):
    """Matrix:
    [[1, 2],
     [3, 4]]
    """
    return factory.array([[1.0, 2.0], [3.0, 4.0]])


@pytest.fixture
def matrix_2x3(factory):
    """Matrix:
    [[1, 2, 3],
     [4, 5, 6]]
    """
    return factory.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])


@pytest.fixture
def strided_vector(factory):
    """Every other element of [5, 0, 3, 0, 4, 0, 1, 0], a non-contiguous view."""
    base = factory.array([5.0, 0.0, 3.0, 0.0, 4.0, 0.0, 1.0, 0.0])
    return base.as_view(0, (4,), (2,))
