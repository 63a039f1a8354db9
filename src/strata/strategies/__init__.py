"""Caching strategies layered over a relational store."""

from strata.strategies.base import CachedAccessor
from strata.strategies.cache_aside import DEFAULT_CACHE_ASIDE_TTL, CacheAsideAccessor
from strata.strategies.write_through import WriteThroughAccessor

__all__ = [
    "DEFAULT_CACHE_ASIDE_TTL",
    "CacheAsideAccessor",
    "CachedAccessor",
    "WriteThroughAccessor",
]
