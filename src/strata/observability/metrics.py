"""Prometheus metrics for Strata.

Provides metrics collection and exposure:
- HTTP request metrics (latency, count)
- Cache metrics (hits, misses, failures, latency)
- Store metrics (operation latency)

Usage:
    from strata.observability.metrics import get_metrics

    metrics = get_metrics()
    metrics.cache_hits_total.labels(entity="order").inc()
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from prometheus_client import REGISTRY, Counter, Gauge, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from strata.config import settings

if TYPE_CHECKING:
    from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

_NUMERIC_SEGMENT = re.compile(r"^\d+$")


@dataclass
class MetricsRegistry:
    """Registry for Prometheus metrics.

    Every metric stays None while metrics are disabled.
    """

    # HTTP metrics
    http_requests_total: Any = None
    http_request_duration_seconds: Any = None
    http_requests_in_progress: Any = None

    # Cache metrics
    cache_hits_total: Any = None
    cache_misses_total: Any = None
    cache_failures_total: Any = None
    cache_operation_duration_seconds: Any = None

    # Store metrics
    store_operation_duration_seconds: Any = None

    _initialized: bool = field(default=False, repr=False)
    _registry: Any = field(default=None, repr=False)

    def initialize(self) -> None:
        """Initialize Prometheus metrics."""
        if self._initialized:
            return

        if not settings.enable_metrics:
            logger.info("Metrics are disabled")
            self._initialized = True
            return

        self._registry = REGISTRY

        self.http_requests_total = Counter(
            "strata_http_requests_total",
            "Total HTTP requests",
            ["method", "path", "status"],
        )
        self.http_request_duration_seconds = Histogram(
            "strata_http_request_duration_seconds",
            "HTTP request latency in seconds",
            ["method", "path"],
            buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
        )
        self.http_requests_in_progress = Gauge(
            "strata_http_requests_in_progress",
            "HTTP requests currently in progress",
            ["method"],
        )

        self.cache_hits_total = Counter(
            "strata_cache_hits_total",
            "Cache hits",
            ["entity"],
        )
        self.cache_misses_total = Counter(
            "strata_cache_misses_total",
            "Cache misses",
            ["entity"],
        )
        self.cache_failures_total = Counter(
            "strata_cache_failures_total",
            "Cache operations that failed and were ignored",
            ["entity", "operation"],
        )
        self.cache_operation_duration_seconds = Histogram(
            "strata_cache_operation_duration_seconds",
            "Cache operation latency in seconds",
            ["entity", "operation"],
            buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1),
        )

        self.store_operation_duration_seconds = Histogram(
            "strata_store_operation_duration_seconds",
            "Store operation latency in seconds",
            ["entity", "operation"],
            buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
        )

        self._initialized = True
        logger.info("Prometheus metrics initialized")

    def generate_latest(self) -> bytes:
        """Generate Prometheus metrics in exposition format."""
        if self._registry is None:
            return b"# Metrics disabled\n"
        return generate_latest(self._registry)


# Global metrics registry
metrics_registry = MetricsRegistry()


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry.

    Initializes metrics on first access.
    """
    if not metrics_registry._initialized:
        metrics_registry.initialize()
    return metrics_registry


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware for HTTP request metrics.

    Records:
    - Request count by method, path, status
    - Request duration histogram
    - Requests in progress gauge
    """

    def __init__(self, app: "ASGIApp") -> None:
        super().__init__(app)
        self.metrics = get_metrics()

    async def dispatch(self, request: Request, call_next: Callable[[Request], Any]) -> Response:
        if request.url.path.startswith("/health") or request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        path = normalize_path(request.url.path)

        if self.metrics.http_requests_in_progress:
            self.metrics.http_requests_in_progress.labels(method=method).inc()

        start_time = time.perf_counter()
        status_code = 500  # Default in case of exception

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration = time.perf_counter() - start_time

            if self.metrics.http_requests_total:
                self.metrics.http_requests_total.labels(
                    method=method,
                    path=path,
                    status=status_code,
                ).inc()

            if self.metrics.http_request_duration_seconds:
                self.metrics.http_request_duration_seconds.labels(
                    method=method,
                    path=path,
                ).observe(duration)

            if self.metrics.http_requests_in_progress:
                self.metrics.http_requests_in_progress.labels(method=method).dec()


def normalize_path(path: str) -> str:
    """Replace numeric identifiers with a placeholder to bound label cardinality.

    Examples:
        /products/5 -> /products/{id}
        /api/orders/42 -> /api/orders/{id}
    """
    parts = [
        "{id}" if _NUMERIC_SEGMENT.match(part) else part for part in path.strip("/").split("/")
    ]
    return "/" + "/".join(parts)
