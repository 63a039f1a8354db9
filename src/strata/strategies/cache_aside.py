"""Cache-aside (lazy loading) accessor.

- Read: cache first; a miss loads from the store and caches the record with
  a TTL.
- Write: update the store, then delete the cache entry. The entry is never
  rewritten, so a write cannot leave a wrong value cached; the next read
  repopulates it.

State per key: absent -> cached (read miss) -> absent (write, delete or TTL
expiry).
"""

from __future__ import annotations

import logging
from typing import Any

from strata.cache.base import Cache
from strata.observability.instrumentation import Instrumentation
from strata.persistence.base import ModelT, Store
from strata.strategies.base import CachedAccessor

logger = logging.getLogger(__name__)

# 30 minutes
DEFAULT_CACHE_ASIDE_TTL = 1800


class CacheAsideAccessor(CachedAccessor[ModelT]):
    """Invalidate-on-write accessor with TTL-bounded staleness."""

    def __init__(
        self,
        store: Store[ModelT],
        cache: Cache,
        ttl: int = DEFAULT_CACHE_ASIDE_TTL,
        instrumentation: Instrumentation | None = None,
        refresh_ttl_on_hit: bool = False,
    ):
        super().__init__(store, cache, ttl=ttl, instrumentation=instrumentation)
        self.refresh_ttl_on_hit = refresh_ttl_on_hit

    async def on_cache_hit(self, key: str, entity: ModelT) -> None:
        # Re-store the canonical form so frequently read entries keep a full TTL
        if self.refresh_ttl_on_hit:
            await self._cache_set(key, entity)

    async def create(self, entity: ModelT) -> ModelT:
        """Insert into the store. The cache is filled by the first read."""
        saved = await self._store_call("create", self.store.create(self.prepare_create(entity)))
        logger.info(f"Created {self.key_prefix} {getattr(saved, 'id', None)}")
        return saved

    async def update(self, identifier: int, changes: Any) -> ModelT:
        """Persist ``changes`` and invalidate the cached copy."""
        saved = await self._persist_update(identifier, changes)
        key = self.cache_key(identifier)
        if await self._cache_delete(key):
            logger.info(f"Cache invalidated for {key}")
        return saved
