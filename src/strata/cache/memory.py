"""In-process cache backend.

Suitable for single-instance development deployments and tests. The map is
bounded: once ``max_entries`` is reached the least recently used entry is
evicted. Expired entries are dropped when read and purged on every write.

For shared caching across instances, use RedisCache instead.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable

from strata.cache.base import Cache

DEFAULT_MAX_ENTRIES = 10_000


class MemoryCache(Cache):
    """LRU-bounded dictionary cache with per-entry expiry."""

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._clock = clock
        self.max_entries = max_entries
        self._entries: OrderedDict[str, tuple[bytes, float | None]] = OrderedDict()

    async def get(self, key: str) -> bytes | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return value

    async def set(self, key: str, value: bytes, ttl: int | None = None) -> None:
        now = self._clock()
        self._purge_expired(now)
        self._entries[key] = (value, now + ttl if ttl is not None else None)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def _purge_expired(self, now: float) -> None:
        expired = [
            key
            for key, (_, expires_at) in self._entries.items()
            if expires_at is not None and now >= expires_at
        ]
        for key in expired:
            del self._entries[key]
