"""
Tests for read-only integer ranges.
"""

import pytest

from sarray import ArgumentError, DType, Range, UnsupportedOperationError


class TestRangeValues:

    def test_step_three(self):
        assert Range(0, 10, 3).flat() == [0, 3, 6, 9]

    def test_exact_end_excluded(self):
        assert Range(0, 9, 3).flat() == [0, 3, 6]

    def test_descending(self):
        assert Range(5, 0, -2).flat() == [5, 3, 1]

    def test_size_is_ceiling(self):
        assert Range(1, 8, 2).size == 4

    def test_empty(self):
        r = Range(3, 3)
        assert r.size == 0
        assert r.flat() == []

    def test_kind(self):
        assert Range(0, 3).dtype == DType.INT32

    def test_properties(self):
        r = Range(2, 11, 3)
        assert (r.start, r.end, r.step) == (2, 11, 3)


class TestRangeValidation:

    def test_zero_step(self):
        with pytest.raises(ArgumentError):
            Range(0, 5, 0)

    def test_wrong_direction(self):
        with pytest.raises(ArgumentError):
            Range(0, 5, -1)
        with pytest.raises(ArgumentError):
            Range(5, 0, 1)


class TestRangeReadOnly:
    """Test that ranges reject every mutation."""

    def test_always_view(self):
        assert Range(0, 3).is_view

    def test_set(self):
        with pytest.raises(UnsupportedOperationError):
            Range(0, 3).set(0, 10)

    def test_set_element(self):
        with pytest.raises(UnsupportedOperationError):
            Range(0, 3).set_element(1, 10)

    def test_assign(self):
        with pytest.raises(UnsupportedOperationError):
            Range(0, 3).assign(0)

    def test_sort(self):
        with pytest.raises(UnsupportedOperationError):
            Range(3, 0, -1).sort()

    def test_views_stay_read_only(self):
        with pytest.raises(UnsupportedOperationError):
            Range(0, 6).reshape(2, 3).set(0, 0, 1)

    def test_unsupported_is_not_implemented(self):
        with pytest.raises(NotImplementedError):
            Range(0, 3).set(0, 1)


class TestRangeDerived:
    """Test arrays derived from a range."""

    def test_copy_is_mutable(self):
        c = Range(0, 3).copy()
        c.set(0, 10)
        assert c.flat() == [10, 1, 2]
        assert not c.is_view
        assert c.dtype == DType.INT32

    def test_new_empty_array(self):
        e = Range(0, 3).new_empty_array(2)
        assert e.dtype == DType.INT32
        assert e.flat() == [0, 0]

    def test_map(self):
        assert Range(1, 4).map(lambda v: v * v).flat() == [1, 4, 9]

    def test_as_double(self):
        assert Range(0, 2).as_double().flat() == [0.0, 1.0]

    def test_data_is_materialized(self):
        assert Range(0, 3).data() == [0, 1, 2]


class TestRangeContains:

    def test_members(self):
        r = Range(0, 10, 3)
        assert 6 in r
        assert 7 not in r
        assert 10 not in r
        assert -3 not in r

    def test_descending(self):
        r = Range(5, 0, -2)
        assert r.contains(1)
        assert not r.contains(0)

    def test_non_integer(self):
        assert 3.0 not in Range(0, 5)


class TestRangeEquality:

    def test_equal(self):
        assert Range(0, 10, 3) == Range(0, 11, 3)
        assert hash(Range(0, 10, 3)) == hash(Range(0, 11, 3))

    def test_not_equal(self):
        assert Range(0, 10, 3) != Range(0, 10, 2)

    def test_repr(self):
        assert repr(Range(0, 10, 3)) == "Range(0, 10, 3)"


class TestRangeWidth:
    """Test that ranges past the int32 limits keep exact values."""

    def test_large_range_is_long(self):
        r = Range(0, 2 ** 32, 2 ** 31)
        assert r.dtype == DType.INT64
        assert r.get(1) == 2 ** 31

    def test_large_copy_agrees(self):
        r = Range(0, 2 ** 32, 2 ** 31)
        assert r.copy().flat() == r.flat() == [0, 2 ** 31]
        assert r.new_empty_array(1).dtype == DType.INT64

    def test_negative_bound(self):
        r = Range(-(2 ** 31) - 1, 0, 2 ** 30)
        assert r.dtype == DType.INT64
        assert r.copy().get(0) == -(2 ** 31) - 1

    def test_int32_limits_stay_int(self):
        r = Range(2 ** 31 - 2, 2 ** 31)
        assert r.dtype == DType.INT32
        assert r.copy().flat() == [2 ** 31 - 2, 2 ** 31 - 1]

    def test_beyond_int64_rejected(self):
        with pytest.raises(ArgumentError):
            Range(0, 2 ** 64, 2 ** 63)
