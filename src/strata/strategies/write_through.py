"""Write-through accessor.

- Write: update the store (system of record), then mirror the persisted
  record into the cache. Cache writes never fail the operation.
- Read: cache first; a miss or failed cache read falls back to the store and
  repopulates the cache.

State per key: absent -> cached (create, read miss, list) -> cached
(overwrite on update) -> absent (delete). Entries expire only when a TTL is
configured.
"""

from __future__ import annotations

import logging
from typing import Any

from strata.cache.base import Cache
from strata.observability.instrumentation import Instrumentation
from strata.persistence.base import ModelT, Store
from strata.strategies.base import CachedAccessor

logger = logging.getLogger(__name__)


class WriteThroughAccessor(CachedAccessor[ModelT]):
    """Store-then-cache accessor; ``ttl=None`` keeps entries until overwritten."""

    def __init__(
        self,
        store: Store[ModelT],
        cache: Cache,
        ttl: int | None = None,
        instrumentation: Instrumentation | None = None,
    ):
        super().__init__(store, cache, ttl=ttl, instrumentation=instrumentation)

    async def create(self, entity: ModelT) -> ModelT:
        saved = await self._store_call("create", self.store.create(self.prepare_create(entity)))
        identifier = getattr(saved, "id")
        await self._cache_set(self.cache_key(identifier), saved)
        logger.info(f"Created {self.key_prefix} {identifier} in store and cache")
        return saved

    async def update(self, identifier: int, changes: Any) -> ModelT:
        saved = await self._persist_update(identifier, changes)
        await self._cache_set(self.cache_key(identifier), saved)
        logger.info(f"Write-through update complete for {self.key_prefix} {identifier}")
        return saved

    async def list_all(self) -> list[ModelT]:
        """Return every stored record, warming the cache as a side effect.

        The result always reflects the store, never the cache.
        """
        entities = await self._store_call("find_all", self.store.find_all())
        cached = await self._cache_set_many(entities)
        logger.debug(f"Cached {cached} of {len(entities)} {self.key_prefix} records")
        return entities
