"""Abstract store interface used by the accessors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)


class Store(ABC, Generic[ModelT]):
    """System of record for one entity type.

    Implementations raise StoreUnavailableError for backend failures.
    """

    @abstractmethod
    async def create(self, entity: ModelT) -> ModelT:
        """Insert a new record and return it with its assigned id."""

    @abstractmethod
    async def find_by_id(self, identifier: int) -> ModelT | None:
        """Return the record or None."""

    @abstractmethod
    async def save(self, entity: ModelT) -> ModelT:
        """Upsert by id and return the persisted record."""

    @abstractmethod
    async def exists_by_id(self, identifier: int) -> bool:
        """Check whether a record exists."""

    @abstractmethod
    async def delete_by_id(self, identifier: int) -> None:
        """Remove a record; removing an absent id is a no-op."""

    @abstractmethod
    async def find_all(self) -> list[ModelT]:
        """Return every record ordered by id."""
