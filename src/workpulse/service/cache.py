"""Caller-side result cache with TTL and invalidation by key.

Lives outside the engine: the engine never caches. Callers key entries by
(snapshot version, filter set) and inject a cache instance where needed.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any, TypeVar

from workpulse.aggregation.filters import FilterDescriptor
from workpulse.models.respondent import Snapshot
from workpulse.utils.hashing import hash_filters

logger = logging.getLogger(__name__)

T = TypeVar("T")

CacheKey = tuple[str, str]


def cache_key(snapshot: Snapshot, filters: FilterDescriptor | None = None) -> CacheKey:
    """(snapshot version, filter hash); the content fingerprint stands in for a missing version."""
    return (snapshot.version or snapshot.fingerprint(), hash_filters(filters))


class ResultCache:
    """Time-boxed in-memory cache of analytics results."""

    def __init__(self, ttl_seconds: float = 600.0, clock: Callable[[], float] = time.monotonic) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[CacheKey, tuple[float, Any]] = {}

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, key: CacheKey) -> Any | None:
        """Cached value, or None if absent or expired (expired entries are dropped)."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def put(self, key: CacheKey, value: Any) -> None:
        self._entries[key] = (self._clock() + self._ttl, value)

    def get_or_compute(self, key: CacheKey, compute: Callable[[], T]) -> T:
        """Return the cached value or compute, store and return it."""
        cached = self.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached
        logger.debug("Cache miss for %s", key)
        value = compute()
        self.put(key, value)
        return value

    def invalidate(self, key: CacheKey) -> bool:
        """Drop one entry. Returns True if it existed."""
        return self._entries.pop(key, None) is not None

    def invalidate_version(self, version: str) -> int:
        """Drop every entry for one snapshot version. Returns the count removed."""
        stale = [k for k in self._entries if k[0] == version]
        for k in stale:
            del self._entries[k]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
