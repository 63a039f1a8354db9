"""Fixtures for API tests: the SQLite store and an in-memory cache."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from strata.api.app import create_app
from strata.api.deps import get_instrumentation
from strata.cache import get_cache
from strata.persistence.db import get_session
from tests.doubles import FlakyCache, RecordingInstrumentation


@pytest.fixture
def app(db_engine: AsyncEngine, cache: FlakyCache, instrumentation: RecordingInstrumentation) -> FastAPI:
    """Application wired to the test store and cache."""
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def get_test_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    async def get_test_cache() -> FlakyCache:
        return cache

    app = create_app()
    app.dependency_overrides[get_session] = get_test_session
    app.dependency_overrides[get_cache] = get_test_cache
    app.dependency_overrides[get_instrumentation] = lambda: instrumentation
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as client:
        yield client
