"""Shared machinery for the cache-aside and write-through accessors.

Both strategies sit between a Store (system of record) and a Cache holding
derived, possibly stale copies keyed as ``<entity>:<id>``. They differ only in
what a write does to the cache; reads and deletes behave the same.

Every cache call is best-effort: a CacheUnavailableError is logged, counted
and swallowed, and a failed read counts as a miss. Store failures always
propagate. Store writes happen before the matching cache action, so the cache
never holds a value the store has not persisted.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Iterable
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import ValidationError

from strata.cache.base import Cache
from strata.cache.keys import CacheKeys
from strata.core.canonicalize import canonical_bytes_from_model, model_from_bytes
from strata.errors import CacheUnavailableError, EntityNotFoundError
from strata.observability.instrumentation import Instrumentation
from strata.persistence.base import ModelT, Store

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CachedAccessor(ABC, Generic[ModelT]):
    """Read/delete path common to both caching strategies.

    Subclasses set ``entity`` (display name), ``key_prefix`` and ``model``, and
    implement ``apply_changes`` for their update semantics.
    """

    entity: ClassVar[str]
    key_prefix: ClassVar[str]
    model: type[ModelT]

    def __init__(
        self,
        store: Store[ModelT],
        cache: Cache,
        ttl: int | None = None,
        instrumentation: Instrumentation | None = None,
    ):
        self.store = store
        self.cache = cache
        self.ttl = ttl
        self.instrumentation = instrumentation or Instrumentation()

    def cache_key(self, identifier: int | str) -> str:
        return CacheKeys.for_entity(self.key_prefix, identifier)

    # -------------------------------------------------------------------------
    # Operations shared by both strategies
    # -------------------------------------------------------------------------

    async def read(self, identifier: int) -> ModelT:
        """Cache first; on miss load from the store and repopulate the cache."""
        key = self.cache_key(identifier)
        cached = await self._cache_get(key)
        if cached is not None:
            await self.on_cache_hit(key, cached)
            return cached

        entity = await self._load(identifier)
        await self._cache_set(key, entity)
        return entity

    async def delete(self, identifier: int) -> None:
        """Delete from the store, then evict the cache entry."""
        if not await self._store_call("exists_by_id", self.store.exists_by_id(identifier)):
            raise EntityNotFoundError(self.entity, identifier)

        await self._store_call("delete_by_id", self.store.delete_by_id(identifier))
        await self._cache_delete(self.cache_key(identifier))
        logger.info(f"Deleted {self.key_prefix} {identifier} from store and cache")

    # -------------------------------------------------------------------------
    # Strategy hooks
    # -------------------------------------------------------------------------

    async def on_cache_hit(self, key: str, entity: ModelT) -> None:
        """Called after a successful cache read."""

    def prepare_create(self, entity: ModelT) -> ModelT:
        """Return the record to insert for a create."""
        return entity

    @abstractmethod
    def apply_changes(self, current: ModelT, changes: Any) -> ModelT:
        """Return the record that an update with ``changes`` should persist."""

    async def _persist_update(self, identifier: int, changes: Any) -> ModelT:
        """Load, apply ``changes`` and save; the caller decides the cache action."""
        current = await self._load(identifier)
        updated = self.apply_changes(current, changes)
        return await self._store_call("save", self.store.save(updated))

    # -------------------------------------------------------------------------
    # Store helpers (failures propagate)
    # -------------------------------------------------------------------------

    async def _store_call(self, operation: str, call: Awaitable[T]) -> T:
        with self.instrumentation.measure("store", operation, self.key_prefix) as timing:
            result = await call
        logger.debug(
            f"Store {operation} for {self.key_prefix} took {timing.elapsed_ms:.2f} ms"
        )
        return result

    async def _load(self, identifier: int) -> ModelT:
        entity = await self._store_call("find_by_id", self.store.find_by_id(identifier))
        if entity is None:
            raise EntityNotFoundError(self.entity, identifier)
        return entity

    # -------------------------------------------------------------------------
    # Cache helpers (best-effort)
    # -------------------------------------------------------------------------

    def _cache_failed(self, operation: str, error: CacheUnavailableError) -> None:
        self.instrumentation.record_cache_failure(self.key_prefix, operation)
        logger.warning(f"Ignoring cache failure, continuing with store: {error}")

    async def _cache_get(self, key: str) -> ModelT | None:
        """Return the cached entity, or None on miss, failure or unreadable entry."""
        try:
            with self.instrumentation.measure("cache", "get", self.key_prefix) as timing:
                raw = await self.cache.get(key)
        except CacheUnavailableError as e:
            self._cache_failed("get", e)
            self.instrumentation.record_miss(self.key_prefix)
            return None

        if raw is None:
            self.instrumentation.record_miss(self.key_prefix)
            logger.debug(f"Cache miss for {key} ({timing.elapsed_ms:.2f} ms)")
            return None

        try:
            entity = model_from_bytes(self.model, raw)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable cache entry {key}: {e.error_count()} errors")
            self.instrumentation.record_miss(self.key_prefix)
            await self._cache_delete(key)
            return None

        self.instrumentation.record_hit(self.key_prefix)
        logger.debug(f"Cache hit for {key} ({timing.elapsed_ms:.2f} ms)")
        return entity

    async def _cache_set(self, key: str, entity: ModelT) -> bool:
        try:
            with self.instrumentation.measure("cache", "set", self.key_prefix):
                await self.cache.set(key, canonical_bytes_from_model(entity), self.ttl)
        except CacheUnavailableError as e:
            self._cache_failed("set", e)
            return False
        return True

    async def _cache_delete(self, key: str) -> bool:
        try:
            with self.instrumentation.measure("cache", "delete", self.key_prefix):
                await self.cache.delete(key)
        except CacheUnavailableError as e:
            self._cache_failed("delete", e)
            return False
        return True

    async def _cache_set_many(self, entities: Iterable[ModelT]) -> int:
        """Write a batch; entities without an id are skipped."""
        items = [
            (self.cache_key(entity_id), canonical_bytes_from_model(entity))
            for entity in entities
            if (entity_id := getattr(entity, "id", None)) is not None
        ]
        if not items:
            return 0
        try:
            with self.instrumentation.measure("cache", "set_many", self.key_prefix):
                return await self.cache.set_many(items, self.ttl)
        except CacheUnavailableError as e:
            self._cache_failed("set_many", e)
            return 0
