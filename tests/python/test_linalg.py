"""
Tests for the linear algebra extension point and decomposition records.
"""

import numpy as np
import pytest

from sarray import (
    ArgumentError,
    DType,
    NumericalError,
    UnsupportedOperationError,
)
from sarray.base._linalg import _check_info


class TestBaseStubs:
    """Test that the base backend provides no numerics."""

    @pytest.mark.parametrize("name", ["lu", "svd", "qr", "pinv", "rank"])
    def test_high_level_unsupported(self, linalg, matrix_2x3, name):
        with pytest.raises(UnsupportedOperationError):
            getattr(linalg, name)(matrix_2x3)

    @pytest.mark.parametrize("name", ["eig", "inv", "det"])
    def test_square_unsupported(self, linalg, matrix_2x2, name):
        with pytest.raises(UnsupportedOperationError):
            getattr(linalg, name)(matrix_2x2)

    def test_solve_unsupported(self, linalg, matrix_2x2, factory):
        with pytest.raises(UnsupportedOperationError):
            linalg.solve(matrix_2x2, factory.array([1.0, 2.0]))

    def test_lstsq_unsupported(self, linalg, matrix_2x3, factory):
        with pytest.raises(UnsupportedOperationError):
            linalg.lstsq(matrix_2x3, factory.array([1.0, 2.0]))

    def test_low_level_unsupported(self, linalg, matrix_2x2, factory):
        ipiv = factory.int_array(2)
        with pytest.raises(UnsupportedOperationError, match="getrf"):
            linalg.getrf(matrix_2x2, ipiv)
        with pytest.raises(UnsupportedOperationError):
            linalg.gesvd("a", "a", matrix_2x2, factory.double_array(2),
                         factory.double_array(2, 2), factory.double_array(2, 2))
        with pytest.raises(UnsupportedOperationError):
            linalg.syev("v", "u", matrix_2x2, factory.double_array(2))
        with pytest.raises(UnsupportedOperationError):
            linalg.ormqr("l", False, matrix_2x2, factory.double_array(2), matrix_2x2)

    def test_validation_first(self, linalg, matrix_2x3):
        """Argument errors are reported before the missing numerics."""
        with pytest.raises(ArgumentError):
            linalg.inv(matrix_2x3)

    def test_rejects_vector(self, linalg, factory):
        with pytest.raises(ArgumentError):
            linalg.lu(factory.array([1.0, 2.0]))

    def test_input_untouched(self, linalg, matrix_2x2):
        with pytest.raises(UnsupportedOperationError):
            linalg.lu(matrix_2x2)
        assert matrix_2x2.tolist() == [[1.0, 2.0], [3.0, 4.0]]


class TestCheckInfo:

    def test_ok(self):
        _check_info("getrf", 0)

    def test_illegal_argument(self):
        with pytest.raises(ArgumentError, match="argument 3"):
            _check_info("getrf", -3)

    def test_numerical_failure(self):
        with pytest.raises(NumericalError):
            _check_info("gesdd", 1)


class TestLu:
    """Test LU through a numpy-backed low-level layer."""

    def test_reconstruct(self, numpy_linalg, factory):
        a_np = np.array([[2.0, 1.0, 1.0], [4.0, -6.0, 0.0], [-2.0, 7.0, 2.0]])
        lu = numpy_linalg.lu(factory.from_numpy(a_np))
        lower = lu.lower.to_numpy()
        upper = lu.upper.to_numpy()
        perm = lu.permutation.to_numpy()
        np.testing.assert_allclose(lower @ upper, perm @ a_np)
        np.testing.assert_allclose(np.diag(lower), 1.0)
        np.testing.assert_allclose(np.tril(upper, -1), 0.0)

    def test_determinant(self, numpy_linalg, matrix_2x2):
        assert numpy_linalg.det(matrix_2x2) == pytest.approx(-2.0)

    def test_non_singular(self, numpy_linalg, matrix_2x2, factory):
        assert numpy_linalg.lu(matrix_2x2).is_non_singular
        assert not numpy_linalg.lu(factory.array([[1.0, 2.0], [2.0, 4.0]])).is_non_singular

    def test_input_untouched(self, numpy_linalg, matrix_2x2):
        numpy_linalg.lu(matrix_2x2)
        assert matrix_2x2.tolist() == [[1.0, 2.0], [3.0, 4.0]]

    def test_integer_input(self, numpy_linalg, factory):
        assert numpy_linalg.det(factory.array([[2, 0], [0, 3]])) == pytest.approx(6.0)

    def test_rectangular(self, numpy_linalg, matrix_2x3):
        lu = numpy_linalg.lu(matrix_2x3)
        assert lu.lower.shape == (2, 2)
        assert lu.upper.shape == (2, 3)
        np.testing.assert_allclose(
            lu.lower.to_numpy() @ lu.upper.to_numpy(),
            lu.permutation.to_numpy() @ matrix_2x3.to_numpy())


class TestInverse:

    def test_inv(self, numpy_linalg, matrix_2x2):
        inv = numpy_linalg.inv(matrix_2x2)
        np.testing.assert_allclose(inv.to_numpy(), [[-2.0, 1.0], [1.5, -0.5]])

    def test_singular(self, numpy_linalg, factory):
        with pytest.raises(NumericalError):
            numpy_linalg.inv(factory.array([[1.0, 2.0], [2.0, 4.0]]))

    def test_singular_is_arithmetic_error(self, numpy_linalg, factory):
        with pytest.raises(ArithmeticError):
            numpy_linalg.inv(factory.array([[0.0, 0.0], [0.0, 0.0]]))

    def test_pinv_square(self, numpy_linalg, matrix_2x2):
        np.testing.assert_allclose(numpy_linalg.pinv(matrix_2x2).to_numpy(),
                                   [[-2.0, 1.0], [1.5, -0.5]], atol=1e-12)

    def test_pinv_rectangular(self, numpy_linalg, matrix_2x3):
        out = numpy_linalg.pinv(matrix_2x3)
        assert out.shape == (3, 2)
        np.testing.assert_allclose(out.to_numpy(), np.linalg.pinv(matrix_2x3.to_numpy()), atol=1e-12)


class TestSolve:

    def test_vector_rhs(self, numpy_linalg, matrix_2x2, factory):
        x = numpy_linalg.solve(matrix_2x2, factory.array([5.0, 11.0]))
        assert x.shape == (2,)
        assert x.flat() == pytest.approx([1.0, 2.0])

    def test_matrix_rhs(self, numpy_linalg, matrix_2x2, factory):
        b = factory.array([[5.0, 1.0], [11.0, 3.0]])
        x = numpy_linalg.solve(matrix_2x2, b)
        np.testing.assert_allclose(matrix_2x2.to_numpy() @ x.to_numpy(), b.to_numpy())

    def test_rhs_rows(self, numpy_linalg, matrix_2x2, factory):
        with pytest.raises(ArgumentError):
            numpy_linalg.solve(matrix_2x2, factory.array([1.0, 2.0, 3.0]))

    def test_singular(self, numpy_linalg, factory):
        with pytest.raises(NumericalError):
            numpy_linalg.solve(factory.array([[1.0, 2.0], [2.0, 4.0]]), factory.array([1.0, 1.0]))

    def test_lstsq_overdetermined(self, numpy_linalg, factory):
        a = factory.array([[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])
        b = factory.array([1.0, 1.0, 3.0])
        x = numpy_linalg.lstsq(a, b)
        expected = np.linalg.lstsq(a.to_numpy(), b.to_numpy(), rcond=None)[0]
        assert x.shape == (2,)
        assert x.flat() == pytest.approx(expected.tolist())

    def test_lstsq_underdetermined(self, numpy_linalg, factory):
        a = factory.array([[1.0, 1.0]])
        x = numpy_linalg.lstsq(a, factory.array([2.0]))
        assert x.flat() == pytest.approx([1.0, 1.0])


class TestSvdRank:

    def test_svd_reconstruct(self, numpy_linalg, matrix_2x3):
        svd = numpy_linalg.svd(matrix_2x3)
        assert svd.u.shape == (2, 2)
        assert svd.vt.shape == (3, 3)
        sigma = svd.diagonal()
        assert sigma.shape == (2, 3)
        np.testing.assert_allclose(
            svd.u.to_numpy() @ sigma.to_numpy() @ svd.vt.to_numpy(), matrix_2x3.to_numpy(), atol=1e-12)

    def test_singular_values_sorted(self, numpy_linalg, matrix_2x3):
        s = numpy_linalg.svd(matrix_2x3).s.flat()
        assert s == sorted(s, reverse=True)

    def test_rank(self, numpy_linalg, matrix_2x2, factory):
        assert numpy_linalg.rank(matrix_2x2) == 2
        assert numpy_linalg.rank(factory.array([[1.0, 2.0], [2.0, 4.0]])) == 1
        assert numpy_linalg.rank(factory.zeros(2, 3)) == 0


class TestEigQr:

    def test_eig_real(self, numpy_linalg, factory):
        eig = numpy_linalg.eig(factory.array([[2.0, 0.0], [0.0, 3.0]]))
        assert eig.values.dtype == DType.FLOAT64
        assert sorted(eig.values.flat()) == pytest.approx([2.0, 3.0])

    def test_eig_complex_pair(self, numpy_linalg, factory):
        a = factory.array([[0.0, -1.0], [1.0, 0.0]])
        eig = numpy_linalg.eig(a)
        assert eig.values.dtype == DType.COMPLEX128
        values = eig.values.to_numpy()
        assert sorted(values.imag.tolist()) == pytest.approx([-1.0, 1.0])
        vectors = eig.vectors.to_numpy()
        for j in range(2):
            np.testing.assert_allclose(a.to_numpy() @ vectors[:, j], values[j] * vectors[:, j], atol=1e-12)

    def test_eig_requires_square(self, numpy_linalg, matrix_2x3):
        with pytest.raises(ArgumentError):
            numpy_linalg.eig(matrix_2x3)

    def test_qr(self, numpy_linalg, factory):
        a_np = np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])
        qr = numpy_linalg.qr(factory.from_numpy(a_np))
        r = qr.r.to_numpy()
        assert r.shape == (2, 2)
        np.testing.assert_allclose(np.tril(r, -1), 0.0)
        np.testing.assert_allclose(r.T @ r, a_np.T @ a_np)
        assert qr.tau.size == 2
