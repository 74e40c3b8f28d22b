"""
sarray - Strided Array Engine

Dense N-dimensional arrays over shared, typed storage, with zero-copy views
and a pluggable backend for numeric routines.

Arrays:
    StridedArray: Array over a flat buffer with a view descriptor
        (offset, shape, stride); column-major by default
    Range: Read-only computed integer sequence

Backends:
    ArrayBackend bundles an ArrayFactory, ArrayRoutines and
    LinearAlgebraRoutines. The pure-Python ``base`` backend is always
    available; others register through ``register_backend`` or the
    ``sarray.backends`` entry-point group.

Usage:
    >>> import sarray
    >>> a = sarray.array([[1.0, 2.0], [3.0, 4.0]])
    >>> a.get_diagonal().flat()
    [1.0, 4.0]

    # Views share storage
    >>> col = a.get_column(1)
    >>> col.set(0, 9.0)
    >>> a.get(0, 1)
    9.0

    # Routines of the active backend
    >>> r = sarray.routines()
    >>> r.sum(a)
    17.0
"""

__version__ = "0.1.0"

from ._dtypes import DType, validate_dtype, promote_dtype, infer_dtype
from ._errors import (
    SArrayError,
    ArgumentError,
    SizeMismatchError,
    IndexOutOfBoundsError,
    NonConformantError,
    ArrayStateError,
    UnsupportedOperationError,
    BackendUnavailableError,
    NumericalError,
)
from ._config import get_config, set_default_dtype, get_default_dtype, set_seed
from ._array import StridedArray, Range, Ownership
from .api import Op, ArrayFactory, ArrayRoutines, LinearAlgebraRoutines, ArrayBackend
from .decomposition import (
    LuDecomposition,
    SingularValueDecomposition,
    EigenDecomposition,
    QrDecomposition,
)
from ._backend import (
    register_backend,
    unregister_backend,
    available_backends,
    get_backend,
    reset_backend,
)
from .arrays import (
    factory,
    routines,
    linalg,
    array,
    from_numpy,
    zeros,
    ones,
    full,
    eye,
    diag,
    arange,
    linspace,
    rand,
    randn,
    randi,
)

# Shorthand element kinds
float64 = DType.FLOAT64
int32 = DType.INT32
int64 = DType.INT64
bool_ = DType.BOOL
complex128 = DType.COMPLEX128
object_ = DType.OBJECT

__all__ = [
    # Version
    '__version__',
    # Element kinds
    'DType',
    'float64',
    'int32',
    'int64',
    'bool_',
    'complex128',
    'object_',
    'validate_dtype',
    'promote_dtype',
    'infer_dtype',
    # Errors
    'SArrayError',
    'ArgumentError',
    'SizeMismatchError',
    'IndexOutOfBoundsError',
    'NonConformantError',
    'ArrayStateError',
    'UnsupportedOperationError',
    'BackendUnavailableError',
    'NumericalError',
    # Configuration
    'get_config',
    'set_default_dtype',
    'get_default_dtype',
    'set_seed',
    # Arrays
    'StridedArray',
    'Range',
    'Ownership',
    # Interfaces
    'Op',
    'ArrayFactory',
    'ArrayRoutines',
    'LinearAlgebraRoutines',
    'ArrayBackend',
    # Decompositions
    'LuDecomposition',
    'SingularValueDecomposition',
    'EigenDecomposition',
    'QrDecomposition',
    # Backend selection
    'register_backend',
    'unregister_backend',
    'available_backends',
    'get_backend',
    'reset_backend',
    # Convenience functions
    'factory',
    'routines',
    'linalg',
    'array',
    'from_numpy',
    'zeros',
    'ones',
    'full',
    'eye',
    'diag',
    'arange',
    'linspace',
    'rand',
    'randn',
    'randi',
]
