"""Global pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import AsyncIterator
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from strata.core.model import Order, Product
from strata.persistence.tables import Base
from strata.services import OrderService, ProductService
from tests.doubles import FakeClock, FlakyCache, InMemoryStore, RecordingInstrumentation


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> FlakyCache:
    return FlakyCache(clock=clock)


@pytest.fixture
def instrumentation() -> RecordingInstrumentation:
    return RecordingInstrumentation()


@pytest.fixture
def product_store() -> InMemoryStore[Product]:
    return InMemoryStore("Product")


@pytest.fixture
def order_store() -> InMemoryStore[Order]:
    return InMemoryStore("Order")


@pytest.fixture
def product_service(
    product_store: InMemoryStore[Product],
    cache: FlakyCache,
    instrumentation: RecordingInstrumentation,
) -> ProductService:
    """Cache-aside accessor with the 30 minute TTL."""
    return ProductService(product_store, cache, ttl=1800, instrumentation=instrumentation)


@pytest.fixture
def order_service(
    order_store: InMemoryStore[Order],
    cache: FlakyCache,
    instrumentation: RecordingInstrumentation,
) -> OrderService:
    """Write-through accessor without TTL."""
    return OrderService(order_store, cache, ttl=None, instrumentation=instrumentation)


@pytest.fixture
def widget_order() -> Order:
    return Order(customer_name="A", product="widget", quantity=2, price=Decimal("9.99"))


@pytest.fixture
async def db_engine() -> AsyncIterator[AsyncEngine]:
    """In-memory SQLite shared by every session of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()
