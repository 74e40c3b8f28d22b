"""
Error handling for sarray.

Every failure raised by the array engine is an ``SArrayError`` carrying a
numeric code from the table below. Subclasses also derive from the builtin
exception a Python caller would expect (``IndexError`` for bounds errors,
``ValueError`` for argument errors and so on), so both styles of handler
work.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Type


# =============================================================================
# Error Codes
# =============================================================================

SARRAY_OK = 0

# General errors (1-9)
SARRAY_ERROR_UNKNOWN = 1
SARRAY_ERROR_INTERNAL = 2

# Argument errors (10-19)
SARRAY_ERROR_INVALID_ARGUMENT = 10
SARRAY_ERROR_DIMENSION_MISMATCH = 11
SARRAY_ERROR_SIZE_MISMATCH = 12
SARRAY_ERROR_INDEX_OUT_OF_BOUNDS = 14

# State errors (20-29)
SARRAY_ERROR_ILLEGAL_STATE = 20

# Feature errors (40-49)
SARRAY_ERROR_UNSUPPORTED_OPERATION = 40
SARRAY_ERROR_BACKEND_UNAVAILABLE = 41

# Numerical errors (50-59)
SARRAY_ERROR_NUMERICAL = 50
SARRAY_ERROR_SINGULAR_MATRIX = 51


_ERROR_MESSAGES = {
    SARRAY_OK: "Success",
    SARRAY_ERROR_UNKNOWN: "Unknown error",
    SARRAY_ERROR_INTERNAL: "Internal error",
    SARRAY_ERROR_INVALID_ARGUMENT: "Invalid argument",
    SARRAY_ERROR_DIMENSION_MISMATCH: "Non-conformant dimensions",
    SARRAY_ERROR_SIZE_MISMATCH: "Size mismatch",
    SARRAY_ERROR_INDEX_OUT_OF_BOUNDS: "Index out of bounds",
    SARRAY_ERROR_ILLEGAL_STATE: "Illegal state",
    SARRAY_ERROR_UNSUPPORTED_OPERATION: "Unsupported operation",
    SARRAY_ERROR_BACKEND_UNAVAILABLE: "Backend unavailable",
    SARRAY_ERROR_NUMERICAL: "Numerical error",
    SARRAY_ERROR_SINGULAR_MATRIX: "Matrix is singular",
}


# =============================================================================
# Exception Classes
# =============================================================================

class SArrayError(Exception):
    """
    Base exception for all sarray errors.
    """

    code = SARRAY_ERROR_UNKNOWN

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        if code is not None:
            self.code = code
        if message is None:
            message = _ERROR_MESSAGES.get(self.code, f"Unknown error (code={self.code})")
        self.message = message
        super().__init__(message)

    @classmethod
    def from_code(cls, code: int, context: str = "") -> "SArrayError":
        """Create the exception matching ``code`` with optional context."""
        base_msg = _ERROR_MESSAGES.get(code, "Unknown error")
        msg = f"{context}: {base_msg}" if context else base_msg
        return _CODE_TO_CLASS.get(code, SArrayError)(msg, code)


class ArgumentError(SArrayError, ValueError):
    """Invalid argument: bad shape, ragged literal, bad rank, bad step."""
    code = SARRAY_ERROR_INVALID_ARGUMENT


class SizeMismatchError(ArgumentError):
    """Two operands that must have the same size (or shape) do not."""
    code = SARRAY_ERROR_SIZE_MISMATCH


class IndexOutOfBoundsError(SArrayError, IndexError):
    """Logical index outside ``[0, shape[k])`` on some axis."""
    code = SARRAY_ERROR_INDEX_OUT_OF_BOUNDS


class NonConformantError(SArrayError, ValueError):
    """
    Matrix operands do not conform for multiplication.

    Reports the effective dimensions of both operands.
    """
    code = SARRAY_ERROR_DIMENSION_MISMATCH

    def __init__(self, a_rows: int, a_cols: int, b_rows: int, b_cols: int,
                 message: Optional[str] = None):
        self.a_rows = a_rows
        self.a_cols = a_cols
        self.b_rows = b_rows
        self.b_cols = b_cols
        if message is None:
            message = (f"Non-conformant arguments: {a_rows}x{a_cols} "
                       f"and {b_rows}x{b_cols}")
        super().__init__(message)


class ArrayStateError(SArrayError, RuntimeError):
    """Operation not valid for the array's current shape or kind."""
    code = SARRAY_ERROR_ILLEGAL_STATE


class UnsupportedOperationError(SArrayError, NotImplementedError):
    """Mutating a read-only array, or a routine the backend does not provide."""
    code = SARRAY_ERROR_UNSUPPORTED_OPERATION


class BackendUnavailableError(SArrayError, RuntimeError):
    """No registered backend matches the request."""
    code = SARRAY_ERROR_BACKEND_UNAVAILABLE


class NumericalError(SArrayError, ArithmeticError):
    """A numerical routine failed (singular factor, no convergence)."""
    code = SARRAY_ERROR_NUMERICAL


_CODE_TO_CLASS: Dict[int, Type[SArrayError]] = {
    SARRAY_ERROR_INVALID_ARGUMENT: ArgumentError,
    SARRAY_ERROR_SIZE_MISMATCH: SizeMismatchError,
    SARRAY_ERROR_INDEX_OUT_OF_BOUNDS: IndexOutOfBoundsError,
    SARRAY_ERROR_ILLEGAL_STATE: ArrayStateError,
    SARRAY_ERROR_UNSUPPORTED_OPERATION: UnsupportedOperationError,
    SARRAY_ERROR_BACKEND_UNAVAILABLE: BackendUnavailableError,
    SARRAY_ERROR_NUMERICAL: NumericalError,
    SARRAY_ERROR_SINGULAR_MATRIX: NumericalError,
}


# =============================================================================
# Checks
# =============================================================================

def check_argument(condition: bool, message: str = "", *args: Any) -> None:
    """Raise ArgumentError with ``message % args`` unless ``condition``."""
    if not condition:
        raise ArgumentError(message % args if args else (message or None))


def check_state(condition: bool, message: str = "", *args: Any) -> None:
    """Raise ArrayStateError with ``message % args`` unless ``condition``."""
    if not condition:
        raise ArrayStateError(message % args if args else (message or None))


def check_size(a: Any, b: Any) -> None:
    """
    Raise SizeMismatchError unless both operands have the same size.

    Operands may be arrays (anything with ``size``) or plain integers.
    """
    size_a = a if isinstance(a, int) else a.size
    size_b = b if isinstance(b, int) else b.size
    if size_a != size_b:
        raise SizeMismatchError(f"Size does not match ({size_a} != {size_b})")


def check_shape(a: Any, b: Any) -> None:
    """Raise SizeMismatchError unless both arrays have the same shape."""
    if tuple(a.shape) != tuple(b.shape):
        raise SizeMismatchError(
            f"Shape does not match ({_fmt(a.shape)} != {_fmt(b.shape)})")


def check_index(index: int, size: int) -> None:
    """Raise IndexOutOfBoundsError unless ``0 <= index < size``."""
    if index < 0 or index >= size:
        raise IndexOutOfBoundsError(f"Index {index} out of bounds [0, {size})")


def _fmt(shape: Sequence[int]) -> str:
    return "x".join(str(d) for d in shape)


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    'SARRAY_OK',
    'SARRAY_ERROR_UNKNOWN',
    'SARRAY_ERROR_INTERNAL',
    'SARRAY_ERROR_INVALID_ARGUMENT',
    'SARRAY_ERROR_DIMENSION_MISMATCH',
    'SARRAY_ERROR_SIZE_MISMATCH',
    'SARRAY_ERROR_INDEX_OUT_OF_BOUNDS',
    'SARRAY_ERROR_ILLEGAL_STATE',
    'SARRAY_ERROR_UNSUPPORTED_OPERATION',
    'SARRAY_ERROR_BACKEND_UNAVAILABLE',
    'SARRAY_ERROR_NUMERICAL',
    'SARRAY_ERROR_SINGULAR_MATRIX',
    'SArrayError',
    'ArgumentError',
    'SizeMismatchError',
    'IndexOutOfBoundsError',
    'NonConformantError',
    'ArrayStateError',
    'UnsupportedOperationError',
    'BackendUnavailableError',
    'NumericalError',
    'check_argument',
    'check_state',
    'check_size',
    'check_shape',
    'check_index',
]
