"""
Random generator handles.

Factory functions take an explicit ``rng`` (a ``numpy.random.Generator`` or
an integer seed). When none is given each thread lazily gets its own
default generator, so concurrent callers never share generator state.

Default generators are spawned from one root ``SeedSequence``, seeded from
the configured seed (``SARRAY_SEED`` / ``set_seed``) or OS entropy. Changing
the seed invalidates every thread's default generator.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional, Union

import numpy as np

from ._config import get_config

logger = logging.getLogger("sarray.random")

_local = threading.local()
_lock = threading.Lock()
_root: Optional[np.random.SeedSequence] = None
_root_generation = -1


def _spawn_seed() -> np.random.SeedSequence:
    global _root, _root_generation
    config = get_config()
    with _lock:
        if _root is None or _root_generation != config.generation:
            _root = np.random.SeedSequence(config.seed)
            _root_generation = config.generation
        return _root.spawn(1)[0]


def default_rng() -> np.random.Generator:
    """This thread's default generator, created on first use."""
    generation = get_config().generation
    generator = getattr(_local, "generator", None)
    if generator is None or _local.generation != generation:
        generator = np.random.default_rng(_spawn_seed())
        _local.generator = generator
        _local.generation = generation
        logger.debug("Created default generator for thread %s",
                     threading.current_thread().name)
    return generator


def resolve_rng(rng: Union[np.random.Generator, int, None] = None) -> np.random.Generator:
    """
    Normalize an ``rng`` argument.

    Args:
        rng: A Generator (used as is), an integer seed (a fresh Generator),
            or None (this thread's default generator)
    """
    if rng is None:
        return default_rng()
    if isinstance(rng, np.random.Generator):
        return rng
    if isinstance(rng, (int, np.integer)) and not isinstance(rng, bool):
        return np.random.default_rng(int(rng))
    raise TypeError(f"Expected a numpy Generator or an integer seed, got {rng!r}")


__all__ = ['default_rng', 'resolve_rng']
