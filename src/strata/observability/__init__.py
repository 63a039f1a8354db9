"""Observability module for Strata.

Provides tracing, metrics, and structured logging:
- OpenTelemetry tracing with OTLP export
- Prometheus metrics
- Accessor instrumentation (cache/store latency, hit/miss counters)
- JSON structured logging with correlation IDs
"""

from strata.observability.instrumentation import (
    Instrumentation,
    TelemetryInstrumentation,
    Timing,
)
from strata.observability.logging import (
    configure_logging,
    correlation_id_var,
    request_id_var,
)
from strata.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    metrics_registry,
)
from strata.observability.tracing import (
    TracingMiddleware,
    get_tracer,
    setup_tracing,
    shutdown_tracing,
)

__all__ = [
    # Logging
    "configure_logging",
    "request_id_var",
    "correlation_id_var",
    # Tracing
    "setup_tracing",
    "shutdown_tracing",
    "get_tracer",
    "TracingMiddleware",
    # Metrics
    "metrics_registry",
    "get_metrics",
    "MetricsMiddleware",
    # Accessor instrumentation
    "Instrumentation",
    "TelemetryInstrumentation",
    "Timing",
]
