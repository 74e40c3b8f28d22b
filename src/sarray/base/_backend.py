"""
The pure-Python backend.
"""

from __future__ import annotations

from typing import Optional

from ..api import ArrayBackend
from ._factory import BaseArrayFactory
from ._linalg import BaseLinearAlgebraRoutines
from ._routines import BaseArrayRoutines

__all__ = ['BaseArrayBackend', 'LOWEST_PRIORITY']

# Any other backend outranks this one
LOWEST_PRIORITY = -(2 ** 31)


class BaseArrayBackend(ArrayBackend):
    """
    Universal fallback backend.

    Always available, lowest priority. Its linear algebra routines raise
    UnsupportedOperationError; everything else is fully implemented.
    Collaborators are created on first request and reused.
    """

    def __init__(self):
        self._factory: Optional[BaseArrayFactory] = None
        self._routines: Optional[BaseArrayRoutines] = None
        self._linalg: Optional[BaseLinearAlgebraRoutines] = None

    @property
    def name(self) -> str:
        return "base"

    def is_available(self) -> bool:
        return True

    def get_priority(self) -> int:
        return LOWEST_PRIORITY

    def get_array_factory(self) -> BaseArrayFactory:
        if self._factory is None:
            self._factory = BaseArrayFactory()
        return self._factory

    def get_array_routines(self) -> BaseArrayRoutines:
        if self._routines is None:
            self._routines = BaseArrayRoutines()
        return self._routines

    def get_linear_algebra_routines(self) -> BaseLinearAlgebraRoutines:
        if self._linalg is None:
            self._linalg = BaseLinearAlgebraRoutines()
        return self._linalg
