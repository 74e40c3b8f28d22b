"""
Pure-Python backend: factory, routines and linear-algebra stubs.
"""

from ._backend import BaseArrayBackend, LOWEST_PRIORITY
from ._factory import BaseArrayFactory
from ._linalg import AbstractLinearAlgebraRoutines, BaseLinearAlgebraRoutines
from ._routines import BaseArrayRoutines

__all__ = [
    'BaseArrayBackend',
    'BaseArrayFactory',
    'BaseArrayRoutines',
    'AbstractLinearAlgebraRoutines',
    'BaseLinearAlgebraRoutines',
    'LOWEST_PRIORITY',
]
