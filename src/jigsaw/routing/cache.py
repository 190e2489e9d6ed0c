"""Rendered-route cache.

Entries are keyed by route pattern plus the bound parameters, live for a
fixed time measured from creation, and are evicted lazily on lookup.
``clear()`` wipes everything; it runs on every template or component
change because the cache cannot know which routes used which component.
"""

import logging
import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass

logger = logging.getLogger("jigsaw.routing")

DEFAULT_TTL = 5 * 60.0


def cache_key(pattern: str, params: Mapping[str, str] | None = None) -> str:
    """Build the cache key for a pattern and its parameters.

    Parameters are joined as ``key=value&...`` in the mapping's own order::

        cache_key("/users/:id", {"id": "7"})  # "/users/:id?id=7"
        cache_key("/about")                   # "/about"
    """
    if not params:
        return pattern
    query = "&".join(f"{key}={value}" for key, value in params.items())
    return f"{pattern}?{query}"


@dataclass(frozen=True, slots=True)
class CacheEntry:
    content: str
    created_at: float


class RouteCache:
    """In-memory, time-boxed route output cache.

    *clock* defaults to ``time.monotonic``; tests inject their own.
    """

    __slots__ = ("_clock", "_entries", "_lock", "ttl")

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def is_expired(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.created_at > self.ttl

    def get(self, pattern: str, params: Mapping[str, str] | None = None) -> str | None:
        """Return cached content, or ``None`` on a miss or an expired entry."""
        key = cache_key(pattern, params)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self.is_expired(entry):
                del self._entries[key]
                logger.debug("Cache entry expired: %s", key)
                return None
            return entry.content

    def put(self, pattern: str, params: Mapping[str, str] | None, content: str) -> None:
        key = cache_key(pattern, params)
        with self._lock:
            self._entries[key] = CacheEntry(content=content, created_at=self._clock())

    def clear(self) -> None:
        """Drop every entry, unconditionally."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
