"""Abstract cache interface used by the accessors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable


class Cache(ABC):
    """Key-value cache with optional per-entry TTL (seconds).

    Implementations raise CacheUnavailableError for any backend failure.
    """

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Return the stored value or None when the key is absent."""

    @abstractmethod
    async def set(self, key: str, value: bytes, ttl: int | None = None) -> None:
        """Store a value, replacing any previous one."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a key; removing an absent key is not an error."""

    async def set_many(self, items: Iterable[tuple[str, bytes]], ttl: int | None = None) -> int:
        """Store several values. Returns the number written."""
        count = 0
        for key, value in items:
            await self.set(key, value, ttl)
            count += 1
        return count

    async def ping(self) -> bool:
        """Check backend connectivity."""
        return True
