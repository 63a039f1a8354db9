"""Cache layer for Strata.

Provides the key-value cache behind both accessors:
- Redis backend for shared deployments
- In-process backend for development and tests
- Deterministic "<entity>:<id>" key schema
"""

from strata.cache.base import Cache
from strata.cache.keys import CacheKeys
from strata.cache.memory import MemoryCache
from strata.cache.redis import RedisCache, close_redis, get_redis
from strata.config import settings

_memory_cache: MemoryCache | None = None


async def get_cache() -> Cache:
    """Return the cache backend selected by ``settings.cache_backend``."""
    global _memory_cache
    if settings.cache_backend == "memory":
        if _memory_cache is None:
            _memory_cache = MemoryCache(max_entries=settings.memory_cache_max_entries)
        return _memory_cache
    return RedisCache(await get_redis())


__all__ = [
    "Cache",
    "CacheKeys",
    "MemoryCache",
    "RedisCache",
    "close_redis",
    "get_cache",
    "get_redis",
]
