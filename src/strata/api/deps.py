"""FastAPI dependencies wiring accessors to the store and cache."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from strata.cache import Cache, get_cache
from strata.config import settings
from strata.observability.instrumentation import Instrumentation, TelemetryInstrumentation
from strata.persistence.db import get_session
from strata.persistence.repositories import OrderRepository, ProductRepository
from strata.services import OrderService, ProductService

# Identifiers are BIGINT in the store
MAX_ENTITY_ID = 2**63 - 1

EntityId = Annotated[int, Path(ge=1, le=MAX_ENTITY_ID, description="Store-assigned identifier")]

_instrumentation: Instrumentation | None = None


def get_instrumentation() -> Instrumentation:
    """Shared instrumentation; measurement only when metrics are disabled."""
    global _instrumentation
    if _instrumentation is None:
        _instrumentation = (
            TelemetryInstrumentation() if settings.enable_metrics else Instrumentation()
        )
    return _instrumentation


async def get_product_service(
    session: AsyncSession = Depends(get_session),
    cache: Cache = Depends(get_cache),
    instrumentation: Instrumentation = Depends(get_instrumentation),
) -> ProductService:
    """Cache-aside accessor for the current request."""
    return ProductService(
        ProductRepository(session),
        cache,
        ttl=settings.cache_aside_ttl,
        instrumentation=instrumentation,
        refresh_ttl_on_hit=settings.refresh_ttl_on_hit,
    )


async def get_order_service(
    session: AsyncSession = Depends(get_session),
    cache: Cache = Depends(get_cache),
    instrumentation: Instrumentation = Depends(get_instrumentation),
) -> OrderService:
    """Write-through accessor for the current request."""
    return OrderService(
        OrderRepository(session),
        cache,
        ttl=settings.write_through_ttl,
        instrumentation=instrumentation,
    )
