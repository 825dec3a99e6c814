"""Process-wide cache of compiled token patterns.

Lookups read the dict without locking; a miss takes the lock, re-checks,
and compiles. Patterns are never evicted.
"""

from __future__ import annotations

import logging
import re
import threading
from typing import NamedTuple

from syncat.stylesheet.errors import PatternError

__all__ = ["get_or_compile", "cache_info", "clear_cache", "CacheInfo"]

logger = logging.getLogger(__name__)

_CACHE: dict[str, re.Pattern[str]] = {}
_LOCK = threading.Lock()
_compiles = 0


class CacheInfo(NamedTuple):
    size: int
    compiles: int


def get_or_compile(pattern: str) -> re.Pattern[str]:
    """Return the compiled regex for *pattern*, compiling it on first use.

    Raises :class:`PatternError` if the pattern is not a valid regex.
    """
    compiled = _CACHE.get(pattern)
    if compiled is not None:
        return compiled

    global _compiles
    with _LOCK:
        compiled = _CACHE.get(pattern)
        if compiled is not None:
            return compiled
        try:
            compiled = re.compile(pattern)
        except re.error as exc:
            raise PatternError(
                f"Invalid token pattern /{pattern}/: {exc}", pattern=pattern
            ) from exc
        _compiles += 1
        logger.debug("compiled token pattern /%s/", pattern)
        return _CACHE.setdefault(pattern, compiled)


def cache_info() -> CacheInfo:
    return CacheInfo(size=len(_CACHE), compiles=_compiles)


def clear_cache() -> None:
    """Forget every compiled pattern. Intended for tests."""
    global _compiles
    with _LOCK:
        _CACHE.clear()
        _compiles = 0
