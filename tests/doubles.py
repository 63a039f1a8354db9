"""Test doubles for the store, cache and instrumentation collaborators.

Each double records the calls it receives and can be told to fail specific
operations, so tests can assert exactly which collaborator calls a strategy
made.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Generic

from strata.cache.memory import MemoryCache
from strata.errors import CacheUnavailableError, StoreUnavailableError
from strata.observability.instrumentation import Instrumentation, Timing
from strata.persistence.base import ModelT, Store


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryStore(Store[ModelT], Generic[ModelT]):
    """Dictionary-backed store that assigns sequential ids."""

    def __init__(self, entity: str = "Entity"):
        self.entity = entity
        self.rows: dict[int, ModelT] = {}
        self.calls: list[str] = []
        self.failing: set[str] = set()
        self._next_id = 1

    def seed(self, entity: ModelT) -> ModelT:
        """Insert a record directly, bypassing call recording."""
        identifier = getattr(entity, "id")
        self.rows[identifier] = entity
        self._next_id = max(self._next_id, identifier + 1)
        return entity

    def _record(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.failing:
            raise StoreUnavailableError(operation, self.entity)

    async def create(self, entity: ModelT) -> ModelT:
        self._record("create")
        saved = entity.model_copy(update={"id": self._next_id})
        self.rows[self._next_id] = saved
        self._next_id += 1
        return saved

    async def find_by_id(self, identifier: int) -> ModelT | None:
        self._record("find_by_id")
        return self.rows.get(identifier)

    async def save(self, entity: ModelT) -> ModelT:
        self._record("save")
        identifier = getattr(entity, "id")
        self.rows[identifier] = entity
        return entity

    async def exists_by_id(self, identifier: int) -> bool:
        self._record("exists_by_id")
        return identifier in self.rows

    async def delete_by_id(self, identifier: int) -> None:
        self._record("delete_by_id")
        self.rows.pop(identifier, None)

    async def find_all(self) -> list[ModelT]:
        self._record("find_all")
        return [self.rows[key] for key in sorted(self.rows)]


class FlakyCache(MemoryCache):
    """In-memory cache that records calls and fails on demand."""

    def __init__(self, clock: FakeClock | None = None, max_entries: int = 10_000):
        super().__init__(clock=clock or FakeClock(), max_entries=max_entries)
        self.calls: list[tuple[str, str | None]] = []
        self.failing: set[str] = set()

    def _record(self, operation: str, key: str | None) -> None:
        self.calls.append((operation, key))
        if operation in self.failing:
            raise CacheUnavailableError(operation, key)

    def operations(self, operation: str) -> list[str | None]:
        """Keys passed to one kind of operation, in call order."""
        return [key for op, key in self.calls if op == operation]

    def keys(self) -> list[str]:
        """Keys currently held, including expired ones not yet evicted."""
        return list(self._entries)

    def ttl(self, key: str) -> float | None:
        """Remaining lifetime of a key in seconds, None when it never expires."""
        entry = self._entries.get(key)
        if entry is None or entry[1] is None:
            return None
        return max(entry[1] - self._clock(), 0.0)

    async def get(self, key: str) -> bytes | None:
        self._record("get", key)
        return await super().get(key)

    async def set(self, key: str, value: bytes, ttl: int | None = None) -> None:
        self._record("set", key)
        await super().set(key, value, ttl)

    async def delete(self, key: str) -> None:
        self._record("delete", key)
        await super().delete(key)

    async def set_many(self, items: Iterable[tuple[str, bytes]], ttl: int | None = None) -> int:
        self._record("set_many", None)
        count = 0
        for key, value in items:
            await MemoryCache.set(self, key, value, ttl)
            count += 1
        return count

    async def ping(self) -> bool:
        self._record("ping", None)
        return True


class RecordingInstrumentation(Instrumentation):
    """Keeps every measurement for assertions."""

    def __init__(self) -> None:
        self.timings: list[Timing] = []
        self.hits: list[str] = []
        self.misses: list[str] = []
        self.failures: list[tuple[str, str]] = []

    def observe(self, timing: Timing) -> None:
        self.timings.append(timing)

    def record_hit(self, entity: str) -> None:
        self.hits.append(entity)

    def record_miss(self, entity: str) -> None:
        self.misses.append(entity)

    def record_cache_failure(self, entity: str, operation: str) -> None:
        self.failures.append((entity, operation))

    def layers(self, layer: str) -> list[str]:
        return [t.operation for t in self.timings if t.layer == layer]
