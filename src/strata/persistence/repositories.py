"""Repository pattern for product and order persistence.

Each repository maps one Pydantic model onto one table. Writes commit before
returning, so a cache write that follows never refers to an uncommitted row.
Any SQLAlchemy or connection failure is rolled back and re-raised as
StoreUnavailableError.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from strata.core.model import Order, Product
from strata.errors import StoreUnavailableError
from strata.persistence.base import ModelT, Store
from strata.persistence.tables import Base, OrderTable, ProductTable

TableT = TypeVar("TableT", bound=Base)


class SqlRepository(Store[ModelT], Generic[ModelT, TableT]):
    """Base repository with common CRUD operations."""

    entity: ClassVar[str]
    model: type[ModelT]
    table: type[TableT]
    # Columns written on insert only
    insert_only: ClassVar[frozenset[str]] = frozenset()

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def _operation(self, name: str) -> AsyncIterator[None]:
        try:
            yield
        except (SQLAlchemyError, OSError) as e:
            await self.session.rollback()
            raise StoreUnavailableError(name, self.entity, e) from e

    def _to_model(self, row: TableT) -> ModelT:
        return self.model.model_validate(row, from_attributes=True)

    def _columns(self, entity: ModelT) -> dict[str, Any]:
        return entity.model_dump(exclude={"id"})

    # -------------------------------------------------------------------------
    # Read operations
    # -------------------------------------------------------------------------

    async def find_by_id(self, identifier: int) -> ModelT | None:
        async with self._operation("find_by_id"):
            row = await self.session.get(self.table, identifier)
        return self._to_model(row) if row is not None else None

    async def exists_by_id(self, identifier: int) -> bool:
        stmt = select(self.table.id).where(self.table.id == identifier)  # type: ignore[attr-defined]
        async with self._operation("exists_by_id"):
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none() is not None

    async def find_all(self) -> list[ModelT]:
        stmt = select(self.table).order_by(self.table.id)  # type: ignore[attr-defined]
        async with self._operation("find_all"):
            result = await self.session.execute(stmt)
            rows = result.scalars().all()
        return [self._to_model(row) for row in rows]

    # -------------------------------------------------------------------------
    # Write operations
    # -------------------------------------------------------------------------

    async def create(self, entity: ModelT) -> ModelT:
        row = self.table(**self._columns(entity))
        async with self._operation("create"):
            self.session.add(row)
            await self.session.commit()
        return self._to_model(row)

    async def save(self, entity: ModelT) -> ModelT:
        identifier = getattr(entity, "id", None)
        if identifier is None:
            return await self.create(entity)

        async with self._operation("save"):
            row = await self.session.get(self.table, identifier)
            if row is None:
                row = self.table(id=identifier, **self._columns(entity))
                self.session.add(row)
            else:
                for column, value in self._columns(entity).items():
                    if column not in self.insert_only:
                        setattr(row, column, value)
            await self.session.commit()
        return self._to_model(row)

    async def delete_by_id(self, identifier: int) -> None:
        stmt = delete(self.table).where(self.table.id == identifier)  # type: ignore[attr-defined]
        async with self._operation("delete_by_id"):
            await self.session.execute(stmt)
            await self.session.commit()


class ProductRepository(SqlRepository[Product, ProductTable]):
    """Repository for catalog products."""

    entity = "Product"
    model = Product
    table = ProductTable


class OrderRepository(SqlRepository[Order, OrderTable]):
    """Repository for order records."""

    entity = "Order"
    model = Order
    table = OrderTable
    insert_only = frozenset({"created_at"})
