"""
Tests for the element kind system.
"""

import ctypes

import numpy as np
import pytest

from sarray import ArgumentError
from sarray._dtypes import (
    DType,
    converter,
    infer_dtype,
    integral_dtype,
    promote_dtype,
    validate_dtype,
)


class TestDTypeProperties:
    """Test per-kind metadata."""

    def test_itemsize(self):
        assert DType.FLOAT64.itemsize == 8
        assert DType.INT32.itemsize == 4
        assert DType.INT64.itemsize == 8
        assert DType.BOOL.itemsize == 1
        assert DType.COMPLEX128.itemsize == 16

    def test_zero(self):
        """Fresh storage reads as these values."""
        assert DType.FLOAT64.zero == 0.0
        assert DType.INT32.zero == 0
        assert DType.BOOL.zero is False
        assert DType.COMPLEX128.zero == 0j
        assert DType.OBJECT.zero is None

    def test_ctype(self):
        assert DType.FLOAT64.ctype is ctypes.c_double
        assert DType.INT32.ctype is ctypes.c_int32
        assert DType.COMPLEX128.ctype is None

    def test_numpy_dtype(self):
        assert DType.INT64.numpy_dtype == np.int64
        assert DType.COMPLEX128.numpy_dtype == np.complex128

    def test_coerce(self):
        assert DType.FLOAT64.coerce(3) == 3.0
        assert isinstance(DType.FLOAT64.coerce(3), float)
        assert DType.INT32.coerce(2.9) == 2
        assert DType.BOOL.coerce(5) is True

    def test_flags(self):
        assert DType.INT32.is_integral
        assert not DType.FLOAT64.is_integral
        assert DType.COMPLEX128.is_numeric
        assert not DType.OBJECT.is_numeric


class TestValidateDType:
    """Test dtype normalization."""

    @pytest.mark.parametrize("name,expected", [
        ("float64", DType.FLOAT64),
        ("double", DType.FLOAT64),
        ("int", DType.INT32),
        ("long", DType.INT64),
        ("boolean", DType.BOOL),
        ("complex", DType.COMPLEX128),
        ("reference", DType.OBJECT),
        ("INT64", DType.INT64),
    ])
    def test_names(self, name, expected):
        assert validate_dtype(name) == expected

    def test_python_types(self):
        assert validate_dtype(float) == DType.FLOAT64
        assert validate_dtype(int) == DType.INT64
        assert validate_dtype(bool) == DType.BOOL
        assert validate_dtype(complex) == DType.COMPLEX128
        assert validate_dtype(object) == DType.OBJECT

    def test_ctypes(self):
        assert validate_dtype(ctypes.c_int32) == DType.INT32

    def test_numpy(self):
        assert validate_dtype(np.dtype(np.int16)) == DType.INT32
        assert validate_dtype(np.float32) == DType.FLOAT64
        assert validate_dtype(np.dtype(np.uint64)) == DType.INT64

    def test_default(self):
        assert validate_dtype(None) == DType.FLOAT64
        assert validate_dtype(None, DType.INT32) == DType.INT32

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            validate_dtype("float16x")

    def test_unknown_type(self):
        with pytest.raises(TypeError):
            validate_dtype(3.5)


class TestPromotion:
    """Test kind inference and promotion."""

    def test_infer(self):
        assert infer_dtype(True) == DType.BOOL
        assert infer_dtype(1) == DType.INT64
        assert infer_dtype(1.0) == DType.FLOAT64
        assert infer_dtype(1j) == DType.COMPLEX128
        assert infer_dtype("a") == DType.OBJECT
        assert infer_dtype(np.float32(1)) == DType.FLOAT64

    def test_promote(self):
        assert promote_dtype(DType.INT32, DType.INT64) == DType.INT64
        assert promote_dtype(DType.INT64, DType.FLOAT64) == DType.FLOAT64
        assert promote_dtype(DType.FLOAT64, DType.COMPLEX128) == DType.COMPLEX128
        assert promote_dtype(DType.BOOL, DType.INT32) == DType.INT32

    def test_promote_object(self):
        assert promote_dtype(DType.FLOAT64, DType.OBJECT) == DType.OBJECT


class TestConverter:

    def test_identity(self):
        fn = converter(DType.INT32, DType.INT32)
        assert fn(7) == 7

    def test_complex_to_real(self):
        assert converter(DType.COMPLEX128, DType.FLOAT64)(3 + 4j) == 3.0
        assert converter(DType.COMPLEX128, DType.INT64)(3.7 + 4j) == 3

    def test_int_to_bool(self):
        assert converter(DType.INT64, DType.BOOL)(0) is False

    def test_complex_to_int_checks_range(self):
        with pytest.raises(ArgumentError):
            converter(DType.COMPLEX128, DType.INT32)(2.0 ** 40 + 1j)


class TestIntegerRange:
    """Test that integer kinds refuse values their cells would wrap."""

    @pytest.mark.parametrize("dtype,low,high", [
        (DType.INT32, -(2 ** 31), 2 ** 31 - 1),
        (DType.INT64, -(2 ** 63), 2 ** 63 - 1),
    ])
    def test_limits(self, dtype, low, high):
        assert dtype.coerce(low) == low
        assert dtype.coerce(high) == high
        with pytest.raises(ArgumentError):
            dtype.coerce(high + 1)
        with pytest.raises(ArgumentError):
            dtype.coerce(low - 1)

    def test_non_finite_float(self):
        with pytest.raises(ArgumentError):
            DType.INT64.coerce(float("inf"))
        with pytest.raises(ArgumentError):
            DType.INT32.coerce(float("nan"))

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            DType.INT32.coerce(2 ** 40)

    def test_integral_dtype(self):
        assert integral_dtype(0, 2 ** 31 - 1) == DType.INT32
        assert integral_dtype(0, 2 ** 31) == DType.INT64
        assert integral_dtype(-(2 ** 31) - 1) == DType.INT64
        with pytest.raises(ArgumentError):
            integral_dtype(2 ** 63)

    def test_unsigned_numpy_kinds(self):
        assert DType.from_numpy(np.uint16) == DType.INT32
        assert DType.from_numpy(np.uint32) == DType.INT64
