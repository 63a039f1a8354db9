"""Health check endpoints for Strata.

- /health/live  - Liveness probe (always OK while the process runs)
- /health/ready - Readiness probe (store and cache connectivity)

The cache is best-effort for every accessor, so an unreachable cache only
degrades readiness; an unreachable store makes the service unready.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from strata.cache import get_cache
from strata.persistence.db import health_check as db_health_check

router = APIRouter(tags=["health"])

CHECK_TIMEOUT = 5.0


class HealthStatus(str, Enum):
    """Health check status."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    """Health status of a single component."""

    name: str
    status: HealthStatus
    latency_ms: float
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "name": self.name,
            "status": self.status.value,
            "latency_ms": round(self.latency_ms, 2),
        }
        if self.message:
            result["message"] = self.message
        return result


async def check_database() -> ComponentHealth:
    """Check store connectivity."""
    start = time.monotonic()
    try:
        healthy = await asyncio.wait_for(db_health_check(), timeout=CHECK_TIMEOUT)
        message = None if healthy else "Database check failed"
    except asyncio.TimeoutError:
        healthy, message = False, "Database check timed out"
    return ComponentHealth(
        name="database",
        status=HealthStatus.HEALTHY if healthy else HealthStatus.UNHEALTHY,
        latency_ms=(time.monotonic() - start) * 1000,
        message=message,
    )


async def check_cache() -> ComponentHealth:
    """Check cache connectivity; failures only degrade the service."""
    start = time.monotonic()
    try:
        cache = await get_cache()
        healthy = await asyncio.wait_for(cache.ping(), timeout=CHECK_TIMEOUT)
        message = None if healthy else "Cache check failed"
    except asyncio.TimeoutError:
        healthy, message = False, "Cache check timed out"
    except Exception as e:
        healthy, message = False, str(e)
    return ComponentHealth(
        name="cache",
        status=HealthStatus.HEALTHY if healthy else HealthStatus.DEGRADED,
        latency_ms=(time.monotonic() - start) * 1000,
        message=message,
    )


@router.get("/health/live")
async def live() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


@router.get("/health/ready")
async def ready() -> JSONResponse:
    """Readiness probe.

    Returns 200 when the store is reachable (status "degraded" if the cache
    is not), 503 when the store is unreachable.
    """
    components = await asyncio.gather(check_database(), check_cache())

    if any(c.status == HealthStatus.UNHEALTHY for c in components):
        overall = HealthStatus.UNHEALTHY
    elif any(c.status == HealthStatus.DEGRADED for c in components):
        overall = HealthStatus.DEGRADED
    else:
        overall = HealthStatus.HEALTHY

    return JSONResponse(
        content={
            "status": overall.value,
            "components": [c.to_dict() for c in components],
        },
        status_code=503 if overall == HealthStatus.UNHEALTHY else 200,
    )
