"""
sarray DTypes - Element Kind Definitions

Defines the element kinds an array can hold and the mapping from each kind
to its buffer representation:

- FLOAT64     double precision real (``c_double``)
- INT32       32-bit signed integer (``c_int32``)
- INT64       64-bit signed integer (``c_int64``)
- BOOL        boolean (``c_bool``)
- COMPLEX128  complex, stored as interleaved ``c_double`` pairs
- OBJECT      arbitrary Python references, stored in a list
"""

from __future__ import annotations

import ctypes
from ctypes import c_bool, c_double, c_int32, c_int64
from enum import IntEnum
from typing import Any, Callable, Dict, Optional, Type, Union

import numpy as np

from ._errors import ArgumentError


# =============================================================================
# Data Type Enumeration
# =============================================================================

class DType(IntEnum):
    """
    Element kinds supported by sarray.

    Each kind knows its ctypes representation (when it has one), its zero
    value and how to coerce an arbitrary Python value into it.
    """
    FLOAT64 = 0     # double
    INT32 = 1       # int
    INT64 = 2       # long
    BOOL = 3        # boolean
    COMPLEX128 = 4  # complex (two doubles per element)
    OBJECT = 5      # generic reference

    @property
    def itemsize(self) -> int:
        """Size in bytes of one element (0 for OBJECT)."""
        return _DTYPE_INFO[self]["size"]

    @property
    def ctype(self) -> Optional[Type]:
        """Corresponding ctypes scalar type, None when not directly mapped."""
        return _DTYPE_INFO[self]["ctype"]

    @property
    def type_name(self) -> str:
        """Human-readable name."""
        return _DTYPE_INFO[self]["name"]

    @property
    def zero(self) -> Any:
        """Value a freshly allocated element reads as."""
        return _DTYPE_INFO[self]["zero"]

    @property
    def one(self) -> Any:
        return _DTYPE_INFO[self]["one"]

    @property
    def numpy_dtype(self) -> np.dtype:
        return np.dtype(_DTYPE_INFO[self]["numpy"])

    @property
    def is_numeric(self) -> bool:
        return self not in (DType.BOOL, DType.OBJECT)

    @property
    def is_integral(self) -> bool:
        return self in (DType.INT32, DType.INT64)

    def coerce(self, value: Any) -> Any:
        """Convert ``value`` into this kind's Python representation."""
        return _DTYPE_INFO[self]["coerce"](value)

    @classmethod
    def from_ctype(cls, ctype: Type) -> "DType":
        """Get DType from ctypes type."""
        for dtype, info in _DTYPE_INFO.items():
            if info["ctype"] == ctype:
                return dtype
        raise ValueError(f"Unknown ctype: {ctype}")

    @classmethod
    def from_name(cls, name: str) -> "DType":
        """Get DType from string name."""
        name_lower = name.lower()
        for dtype, info in _DTYPE_INFO.items():
            if info["name"] == name_lower:
                return dtype
        aliases = {
            "double": cls.FLOAT64,
            "float": cls.FLOAT64,
            "real": cls.FLOAT64,
            "int": cls.INT32,
            "long": cls.INT64,
            "index": cls.INT64,
            "bool": cls.BOOL,
            "boolean": cls.BOOL,
            "complex": cls.COMPLEX128,
            "reference": cls.OBJECT,
            "ref": cls.OBJECT,
        }
        if name_lower in aliases:
            return aliases[name_lower]
        raise ValueError(f"Unknown dtype name: {name}")

    @classmethod
    def from_numpy(cls, dtype: Any) -> "DType":
        """Map a numpy dtype onto the closest element kind."""
        dtype = np.dtype(dtype)
        if dtype == np.bool_:
            return cls.BOOL
        if np.issubdtype(dtype, np.complexfloating):
            return cls.COMPLEX128
        if np.issubdtype(dtype, np.floating):
            return cls.FLOAT64
        if np.issubdtype(dtype, np.signedinteger):
            return cls.INT32 if dtype.itemsize <= 4 else cls.INT64
        if np.issubdtype(dtype, np.unsignedinteger):
            # uint32 needs a wider signed kind
            return cls.INT32 if dtype.itemsize < 4 else cls.INT64
        return cls.OBJECT


def _to_bool(value: Any) -> bool:
    return bool(value)


def _int_coercer(bits: int) -> Callable[[Any], int]:
    """Integer coercion that rejects values a ``bits``-wide cell would wrap."""
    low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1

    def coerce(value: Any) -> int:
        try:
            result = int(value)
        except (OverflowError, ValueError) as e:
            raise ArgumentError(f"Cannot store {value!r} as int{bits}: {e}") from None
        if not low <= result <= high:
            raise ArgumentError(f"{value!r} is out of range for int{bits} [{low}, {high}]")
        return result

    return coerce


def _identity(value: Any) -> Any:
    return value


# Type information table
_DTYPE_INFO: Dict[DType, Dict[str, Any]] = {
    DType.FLOAT64: {
        "ctype": c_double,
        "size": 8,
        "name": "float64",
        "zero": 0.0,
        "one": 1.0,
        "numpy": np.float64,
        "coerce": float,
    },
    DType.INT32: {
        "ctype": c_int32,
        "size": 4,
        "name": "int32",
        "zero": 0,
        "one": 1,
        "numpy": np.int32,
        "coerce": _int_coercer(32),
    },
    DType.INT64: {
        "ctype": c_int64,
        "size": 8,
        "name": "int64",
        "zero": 0,
        "one": 1,
        "numpy": np.int64,
        "coerce": _int_coercer(64),
    },
    DType.BOOL: {
        "ctype": c_bool,
        "size": 1,
        "name": "bool",
        "zero": False,
        "one": True,
        "numpy": np.bool_,
        "coerce": _to_bool,
    },
    DType.COMPLEX128: {
        "ctype": None,
        "size": 2 * ctypes.sizeof(c_double),
        "name": "complex128",
        "zero": 0j,
        "one": 1 + 0j,
        "numpy": np.complex128,
        "coerce": complex,
    },
    DType.OBJECT: {
        "ctype": None,
        "size": 0,
        "name": "object",
        "zero": None,
        "one": 1,
        "numpy": object,
        "coerce": _identity,
    },
}


# =============================================================================
# Type Mapping (Python type -> DType)
# =============================================================================

TYPE_MAP: Dict[type, DType] = {
    float: DType.FLOAT64,
    int: DType.INT64,
    bool: DType.BOOL,
    complex: DType.COMPLEX128,
}

CTYPE_MAP: Dict[Type, DType] = {
    c_double: DType.FLOAT64,
    c_int32: DType.INT32,
    c_int64: DType.INT64,
    c_bool: DType.BOOL,
}

# Numeric promotion order, narrowest first
_PROMOTION = (DType.BOOL, DType.INT32, DType.INT64, DType.FLOAT64, DType.COMPLEX128)


# =============================================================================
# Type Validation
# =============================================================================

def validate_dtype(dtype: Union[DType, str, Type, None],
                   default: DType = DType.FLOAT64) -> DType:
    """
    Validate and normalize a dtype argument.

    Args:
        dtype: Input dtype (DType enum, string name, ctypes type, Python
            type, numpy dtype, or None)
        default: Default dtype if None

    Returns:
        Validated DType
    """
    if dtype is None:
        return default
    if isinstance(dtype, DType):
        return dtype
    if isinstance(dtype, str):
        return DType.from_name(dtype)
    if dtype in CTYPE_MAP:
        return CTYPE_MAP[dtype]
    if dtype in TYPE_MAP:
        return TYPE_MAP[dtype]
    if dtype is object:
        return DType.OBJECT
    if isinstance(dtype, np.dtype) or (isinstance(dtype, type) and issubclass(dtype, np.generic)):
        return DType.from_numpy(dtype)
    raise TypeError(f"Cannot convert {dtype!r} to DType")


def promote_dtype(a: DType, b: DType) -> DType:
    """Smallest kind able to represent values of both ``a`` and ``b``."""
    if a == b:
        return a
    if a == DType.OBJECT or b == DType.OBJECT:
        return DType.OBJECT
    return max(a, b, key=_PROMOTION.index)


def infer_dtype(value: Any) -> DType:
    """Kind of a single Python scalar."""
    # bool is a subclass of int, check it first
    if isinstance(value, (bool, np.bool_)):
        return DType.BOOL
    if isinstance(value, (int, np.integer)):
        return DType.INT64
    if isinstance(value, (float, np.floating)):
        return DType.FLOAT64
    if isinstance(value, (complex, np.complexfloating)):
        return DType.COMPLEX128
    return DType.OBJECT


def integral_dtype(*values: int) -> DType:
    """
    Narrowest integer kind holding every value: INT32, else INT64.

    Raises:
        ArgumentError: If a value does not fit in 64 bits
    """
    for dtype in (DType.INT32, DType.INT64):
        try:
            for v in values:
                dtype.coerce(v)
        except ArgumentError:
            continue
        return dtype
    raise ArgumentError(f"Values {values} do not fit in int64")


def converter(source: DType, target: DType) -> Callable[[Any], Any]:
    """Function converting values of ``source`` kind into ``target`` kind."""
    if source == target:
        return _identity
    if target in (DType.INT32, DType.INT64) and source == DType.COMPLEX128:
        return lambda v: target.coerce(v.real)
    if target == DType.FLOAT64 and source == DType.COMPLEX128:
        return lambda v: v.real
    return target.coerce
