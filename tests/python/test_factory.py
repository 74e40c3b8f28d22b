"""
Tests for the pure-Python array factory.
"""

import numpy as np
import pytest

from sarray import ArgumentError, DType, Range, StridedArray


class TestLiteralArrays:
    """Test array() from nested sequences."""

    def test_vector(self, factory):
        a = factory.array([1.0, 2.0, 3.0])
        assert a.shape == (3,)
        assert a.flat() == [1.0, 2.0, 3.0]

    def test_matrix_row_major_input(self, factory):
        a = factory.array([[1, 2, 3], [4, 5, 6]])
        assert a.shape == (2, 3)
        assert a.get(0, 2) == 3
        assert a.tolist() == [[1, 2, 3], [4, 5, 6]]

    def test_storage_is_column_major(self, factory):
        a = factory.array([[1, 2], [3, 4]])
        assert list(a.data()) == [1, 3, 2, 4]

    @pytest.mark.parametrize("data,expected", [
        ([True, False], DType.BOOL),
        ([1, 2], DType.INT64),
        ([1, 2.5], DType.FLOAT64),
        ([1, 2j], DType.COMPLEX128),
        (["a", 1], DType.OBJECT),
    ])
    def test_kind_inference(self, factory, data, expected):
        assert factory.array(data).dtype == expected

    def test_explicit_kind(self, factory):
        a = factory.array([1, 2], dtype="int")
        assert a.dtype == DType.INT32

    def test_ragged(self, factory):
        with pytest.raises(ArgumentError, match=r"\[1\]"):
            factory.array([[1, 2], [3]])

    def test_empty_row(self, factory):
        with pytest.raises(ArgumentError):
            factory.array([[1], []])

    def test_empty(self, factory):
        with pytest.raises(ArgumentError):
            factory.array([])

    def test_mixed_nesting(self, factory):
        with pytest.raises(ArgumentError):
            factory.array([[1, 2], 3])

    def test_not_a_sequence(self, factory):
        with pytest.raises(ArgumentError):
            factory.array(5)

    def test_copies_existing_array(self, factory, matrix_2x2):
        a = factory.array(matrix_2x2)
        a.set(0, 0, 10.0)
        assert matrix_2x2.get(0, 0) == 1.0

    def test_from_numpy(self, factory):
        arr = np.arange(6, dtype=np.int32).reshape(2, 3)
        a = factory.from_numpy(arr)
        assert a.dtype == DType.INT32
        assert a.tolist() == arr.tolist()

    def test_from_numpy_scalar(self, factory):
        assert factory.from_numpy(np.float64(2.5)).flat() == [2.5]

    def test_array_from_numpy_with_kind(self, factory):
        a = factory.array(np.array([1.5, 2.5]), dtype=DType.INT64)
        assert a.flat() == [1, 2]

    def test_from_numpy_unsigned(self, factory):
        a = factory.from_numpy(np.array([2 ** 32 - 1], dtype=np.uint32))
        assert a.dtype == DType.INT64
        assert a.flat() == [2 ** 32 - 1]

    def test_from_numpy_uint64_overflow(self, factory):
        with pytest.raises(ArgumentError):
            factory.from_numpy(np.array([2 ** 64 - 1], dtype=np.uint64))

    def test_range_past_int32(self, factory):
        r = factory.range(0, 2 ** 32, 2 ** 31)
        assert r.copy().get(1) == 2 ** 31


class TestAllocation:

    def test_new_array(self, factory):
        a = factory.new_array((2, 3), DType.INT64)
        assert a.shape == (2, 3)
        assert a.flat() == [0] * 6

    def test_typed_constructors(self, factory):
        assert factory.double_array(2).dtype == DType.FLOAT64
        assert factory.int_array(2).dtype == DType.INT32
        assert factory.long_array(2).dtype == DType.INT64
        assert factory.boolean_array(2).dtype == DType.BOOL
        assert factory.complex_array(2).dtype == DType.COMPLEX128
        assert factory.reference_array(2).dtype == DType.OBJECT

    def test_zeros(self, factory):
        z = factory.zeros(2, 2)
        assert z.flat() == [0.0] * 4

    def test_zeros_tuple_shape(self, factory):
        assert factory.zeros((2, 3)).shape == (2, 3)

    def test_ones(self, factory):
        assert factory.ones(3, dtype=DType.INT32).flat() == [1, 1, 1]

    def test_full(self, factory):
        f = factory.full((2, 2), 7)
        assert f.dtype == DType.INT64
        assert f.flat() == [7] * 4

    def test_full_int_shape(self, factory):
        assert factory.full(3, 0.5).flat() == [0.5] * 3

    def test_non_positive_dimension(self, factory):
        with pytest.raises(ArgumentError):
            factory.zeros(0, 3)
        with pytest.raises(ArgumentError):
            factory.zeros(-1)

    def test_default_kind_from_config(self, factory):
        from sarray import set_default_dtype
        set_default_dtype("long")
        assert factory.zeros(2).dtype == DType.INT64


class TestSequences:

    def test_range_forms(self, factory):
        assert factory.range(3).flat() == [0, 1, 2]
        assert factory.range(2, 5).flat() == [2, 3, 4]
        assert factory.range(0, 10, 3).flat() == [0, 3, 6, 9]
        assert isinstance(factory.range(3), Range)

    def test_range_arity(self, factory):
        with pytest.raises(ArgumentError):
            factory.range()

    def test_linspace(self, factory):
        assert factory.linspace(0.0, 1.0, 5).flat() == pytest.approx([0.0, 0.25, 0.5, 0.75, 1.0])

    def test_linspace_single(self, factory):
        assert factory.linspace(3.0, 9.0, 1).flat() == [3.0]

    def test_linspace_size(self, factory):
        with pytest.raises(ArgumentError):
            factory.linspace(0.0, 1.0, 0)


class TestEyeDiag:

    def test_eye(self, factory):
        e = factory.eye(3)
        for i in range(3):
            for j in range(3):
                assert e.get(i, j) == (1.0 if i == j else 0.0)

    def test_diag_of_eye(self, factory):
        assert factory.diag(factory.eye(3)).flat() == [1.0, 1.0, 1.0]

    def test_diag_of_matrix_is_view(self, factory, matrix_2x2):
        d = factory.diag(matrix_2x2)
        d.set(0, 9.0)
        assert matrix_2x2.get(0, 0) == 9.0

    def test_diag_of_vector(self, factory):
        m = factory.diag(factory.array([1, 2]))
        assert m.tolist() == [[1, 0], [0, 2]]
        assert m.dtype == DType.INT64

    def test_diag_of_tensor(self, factory):
        with pytest.raises(ArgumentError):
            factory.diag(StridedArray.empty((2, 2, 2)))


class TestRandom:
    """Test random arrays with injected and default generators."""

    def test_rand_range(self, factory, rng):
        a = factory.rand(100, rng=rng)
        assert all(-1.0 <= v < 1.0 for v in a)

    def test_rand_reproducible(self, factory):
        assert factory.rand(5, rng=1).flat() == factory.rand(5, rng=1).flat()

    def test_randn_shape(self, factory, rng):
        a = factory.randn(3, 4, rng=rng)
        assert a.shape == (3, 4)
        assert a.dtype == DType.FLOAT64

    def test_randn_moments(self, factory, rng):
        a = factory.randn(4000, rng=rng)
        values = np.asarray(a)
        assert abs(values.mean()) < 0.1
        assert abs(values.std() - 1.0) < 0.1

    def test_default_generator_seeded(self, factory):
        from sarray import set_seed
        set_seed(123)
        first = factory.rand(4).flat()
        set_seed(123)
        assert factory.rand(4).flat() == first

    def test_bad_rng(self, factory):
        with pytest.raises(TypeError):
            factory.rand(2, rng="seed")

    def test_randi_inclusive(self, factory, rng):
        a = factory.randi(0, 1, 200, rng=rng)
        assert a.dtype == DType.INT32
        assert set(a.flat()) == {0, 1}

    def test_randi_shape_reproducible(self, factory):
        a = factory.randi(1, 6, 2, 3, rng=4)
        assert a.shape == (2, 3)
        assert all(1 <= v <= 6 for v in a)
        assert a.flat() == factory.randi(1, 6, 2, 3, rng=4).flat()

    def test_randi_wide_bounds(self, factory, rng):
        assert factory.randi(0, 2 ** 40, 3, rng=rng).dtype == DType.INT64

    def test_randi_empty_interval(self, factory):
        with pytest.raises(ArgumentError):
            factory.randi(5, 4, 2)
