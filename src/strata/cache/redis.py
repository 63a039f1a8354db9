"""Redis cache implementation for Strata.

Provides async Redis operations for caching canonical entity bytes.
Uses redis-py async client for connection pooling. Every failure, including
socket timeouts, is reported as CacheUnavailableError so callers can treat
the cache as best-effort.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, cast

import redis.asyncio as redis
from redis.exceptions import RedisError

from strata.cache.base import Cache
from strata.config import settings
from strata.errors import CacheUnavailableError

if TYPE_CHECKING:
    from redis.asyncio import Redis

# Module-level connection pool
_redis_client: Redis | None = None

_TRANSPORT_ERRORS = (RedisError, OSError, TimeoutError)


async def get_redis() -> Redis:
    """Get or create the Redis client.

    Uses connection pooling for efficient connection management.
    """
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(  # type: ignore[no-untyped-call]
            settings.redis_url,
            decode_responses=False,  # We're storing bytes
            socket_timeout=settings.cache_socket_timeout,
            socket_connect_timeout=settings.cache_socket_timeout,
        )
    return _redis_client


async def close_redis() -> None:
    """Close Redis connections."""
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None


class RedisCache(Cache):
    """Key-value cache backed by Redis.

    Values are opaque bytes; a ttl of None stores the entry without expiry.
    """

    def __init__(self, client: Redis):
        self.client = client

    async def get(self, key: str) -> bytes | None:
        try:
            return cast(bytes | None, await self.client.get(key))
        except _TRANSPORT_ERRORS as e:
            raise CacheUnavailableError("get", key, e) from e

    async def set(self, key: str, value: bytes, ttl: int | None = None) -> None:
        try:
            await self.client.set(key, value, ex=ttl)
        except _TRANSPORT_ERRORS as e:
            raise CacheUnavailableError("set", key, e) from e

    async def delete(self, key: str) -> None:
        try:
            await self.client.delete(key)
        except _TRANSPORT_ERRORS as e:
            raise CacheUnavailableError("delete", key, e) from e

    async def set_many(self, items: Iterable[tuple[str, bytes]], ttl: int | None = None) -> int:
        """Write several entries in one pipeline.

        Returns the number of entries written.
        """
        count = 0
        try:
            async with self.client.pipeline(transaction=False) as pipe:
                for key, value in items:
                    pipe.set(key, value, ex=ttl)
                    count += 1
                if count:
                    await pipe.execute()
        except _TRANSPORT_ERRORS as e:
            raise CacheUnavailableError("set_many", None, e) from e
        return count

    async def ping(self) -> bool:
        """Check Redis connectivity."""
        try:
            return bool(await self.client.ping())
        except _TRANSPORT_ERRORS as e:
            raise CacheUnavailableError("ping", None, e) from e
