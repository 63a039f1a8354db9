"""FastAPI application factory for Strata.

Creates the application with:
- Product endpoints served through the cache-aside accessor
- Order endpoints served through the write-through accessor
- Health probes and Prometheus metrics
- Lifecycle management for database and cache connections
- OpenTelemetry tracing and correlation IDs
- Consistent error bodies
- ORJSON for fast JSON serialization
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

from fastapi import FastAPI
from fastapi.responses import ORJSONResponse
from starlette.types import ExceptionHandler

from strata.api.errors import (
    ApiError,
    api_exception_handler,
    generic_exception_handler,
    not_found_exception_handler,
    store_unavailable_exception_handler,
)
from strata.api.middleware import CorrelationMiddleware
from strata.api.routers import health, orders, products
from strata.api.routers import metrics as metrics_router
from strata.cache import close_redis, get_cache
from strata.config import settings
from strata.errors import EntityNotFoundError, StoreUnavailableError
from strata.observability import configure_logging
from strata.observability.metrics import MetricsMiddleware, get_metrics
from strata.observability.tracing import TracingMiddleware, setup_tracing, shutdown_tracing
from strata.persistence.db import close_db, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle.

    On startup: configure logging, tracing and metrics, create tables, open
    the cache connection. On shutdown: close cache and database connections
    and flush traces.
    """
    configure_logging(
        json_format=settings.env != "dev",
        level=settings.log_level,
    )
    setup_tracing()
    get_metrics()

    logger.info(f"Starting Strata ({settings.env}, cache backend: {settings.cache_backend})")
    await init_db()
    await get_cache()
    logger.info("Strata startup complete")

    yield

    logger.info("Shutting down Strata")
    await close_redis()
    await close_db()
    shutdown_tracing()
    logger.info("Strata shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Strata",
        description="Cache-aside and write-through caching over a relational store",
        version="0.1.0",
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    # CorrelationMiddleware is innermost so every other layer sees the request id
    app.add_middleware(CorrelationMiddleware)
    if settings.enable_metrics:
        app.add_middleware(MetricsMiddleware)
    if settings.enable_tracing:
        app.add_middleware(TracingMiddleware)

    app.add_exception_handler(ApiError, cast(ExceptionHandler, api_exception_handler))
    app.add_exception_handler(
        EntityNotFoundError, cast(ExceptionHandler, not_found_exception_handler)
    )
    app.add_exception_handler(
        StoreUnavailableError, cast(ExceptionHandler, store_unavailable_exception_handler)
    )
    app.add_exception_handler(Exception, cast(ExceptionHandler, generic_exception_handler))

    app.include_router(health.router)
    if settings.enable_metrics:
        app.include_router(metrics_router.router)

    app.include_router(products.router)
    app.include_router(orders.router)

    return app
