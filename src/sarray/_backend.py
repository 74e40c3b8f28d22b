"""
Backend Registry and Selection

Keeps the set of known ``ArrayBackend`` instances and picks the one to use:

1. An explicitly requested name (``get_backend("name")``)
2. Otherwise the configured preference (``SARRAY_BACKEND``), when it is
   registered and available
3. Otherwise the available backend with the highest priority

The pure-Python ``base`` backend is registered at import and is always
available with the lowest priority, so selection never comes up empty.
Third-party backends are discovered from the ``sarray.backends`` entry-point
group on first selection, or registered directly:

    @register_backend
    class NativeBackend(ArrayBackend):
        ...

Selection is cached until ``reset_backend()`` or a registry change.
"""

from __future__ import annotations

import logging
import threading
from importlib.metadata import entry_points
from typing import Dict, List, Optional, Type, Union

from ._config import get_config
from ._errors import BackendUnavailableError
from .api import ArrayBackend
from .base import BaseArrayBackend

logger = logging.getLogger("sarray.backend")

ENTRY_POINT_GROUP = "sarray.backends"


# =============================================================================
# Registry
# =============================================================================

class BackendRegistry:
    """
    Registry of array backends keyed by name.
    """

    def __init__(self):
        self._backends: Dict[str, ArrayBackend] = {}
        self._selected: Optional[ArrayBackend] = None
        self._discovered = False
        self._lock = threading.RLock()

    def register(self, backend: ArrayBackend, replace: bool = False) -> ArrayBackend:
        """
        Register a backend instance.

        Raises:
            ValueError: If the name is taken and ``replace`` is False
        """
        if not isinstance(backend, ArrayBackend):
            raise TypeError(f"Expected an ArrayBackend, got {type(backend).__name__}")
        with self._lock:
            if backend.name in self._backends and not replace:
                raise ValueError(f"Backend {backend.name!r} is already registered")
            self._backends[backend.name] = backend
            self._selected = None
        logger.debug("Registered backend %r (priority %d)", backend.name, backend.get_priority())
        return backend

    def unregister(self, name: str) -> None:
        with self._lock:
            if self._backends.pop(name, None) is not None:
                self._selected = None
                logger.debug("Unregistered backend %r", name)

    def get(self, name: str) -> Optional[ArrayBackend]:
        with self._lock:
            return self._backends.get(name)

    def names(self) -> List[str]:
        with self._lock:
            return list(self._backends)

    def discover(self) -> None:
        """Load backends advertised under the ``sarray.backends`` entry points."""
        with self._lock:
            if self._discovered:
                return
            self._discovered = True
        for ep in entry_points(group=ENTRY_POINT_GROUP):
            try:
                obj = ep.load()
                backend = obj() if isinstance(obj, type) else obj
                if backend.name not in self.names():
                    self.register(backend)
                    logger.info("✓ Loaded backend %r from %s", backend.name, ep.value)
            except Exception as e:
                logger.warning(f"✗ Loading backend entry point {ep.name!r} failed: {e}")

    def available(self) -> List[ArrayBackend]:
        """Available backends, highest priority first."""
        self.discover()
        with self._lock:
            backends = list(self._backends.values())
        usable = [b for b in backends if b.is_available()]
        return sorted(usable, key=lambda b: b.get_priority(), reverse=True)

    def select(self, name: Optional[str] = None) -> ArrayBackend:
        """
        Resolve the backend to use.

        Args:
            name: Explicit backend name; None for the configured or best one

        Raises:
            BackendUnavailableError: If ``name`` is unknown or unavailable,
                or no backend is available at all
        """
        if name is not None:
            self.discover()
            backend = self.get(name)
            if backend is None or not backend.is_available():
                raise BackendUnavailableError(f"Backend {name!r} is not available")
            return backend

        with self._lock:
            if self._selected is not None:
                return self._selected

        backend = None
        preferred = get_config().backend
        if preferred is not None:
            self.discover()
            backend = self.get(preferred)
            if backend is None or not backend.is_available():
                logger.warning("Configured backend %r is not available, "
                               "falling back to automatic selection", preferred)
                backend = None
        if backend is None:
            candidates = self.available()
            if not candidates:
                raise BackendUnavailableError("No array backend is available")
            backend = candidates[0]

        with self._lock:
            self._selected = backend
        logger.debug("Selected backend %r", backend.name)
        return backend

    def reset(self) -> None:
        """Forget the cached selection."""
        with self._lock:
            self._selected = None


# Global registry
_registry = BackendRegistry()
_registry.register(BaseArrayBackend())


# =============================================================================
# Public API
# =============================================================================

def register_backend(backend: Union[ArrayBackend, Type[ArrayBackend], None] = None,
                     *, replace: bool = False):
    """
    Register a backend instance, or a backend class (instantiated with no
    arguments). Usable as a plain or parametrized class decorator.

    Example:
        >>> @register_backend
        ... class NativeBackend(ArrayBackend):
        ...     ...
    """
    def decorator(target):
        _registry.register(target() if isinstance(target, type) else target, replace=replace)
        return target

    if backend is None:
        return decorator
    return decorator(backend)


def unregister_backend(name: str) -> None:
    _registry.unregister(name)


def available_backends() -> List[ArrayBackend]:
    """Available backends, highest priority first."""
    return _registry.available()


def get_backend(name: Optional[str] = None) -> ArrayBackend:
    """The named backend, or the selected default one."""
    return _registry.select(name)


def reset_backend() -> None:
    """Re-run selection on the next ``get_backend()`` call."""
    _registry.reset()


def get_registry() -> BackendRegistry:
    return _registry


__all__ = [
    'BackendRegistry',
    'ENTRY_POINT_GROUP',
    'register_backend',
    'unregister_backend',
    'available_backends',
    'get_backend',
    'reset_backend',
    'get_registry',
]
