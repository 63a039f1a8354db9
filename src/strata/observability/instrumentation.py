"""Instrumentation injected into the cache accessors.

Accessors report cache hits and misses, swallowed cache failures and the
duration of every cache and store call through an ``Instrumentation``
instance. The base class only measures; ``TelemetryInstrumentation`` exports
the measurements to Prometheus and wraps each call in an OpenTelemetry span.
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Literal

from opentelemetry.trace import StatusCode

from strata.observability.metrics import MetricsRegistry, get_metrics
from strata.observability.tracing import get_tracer

Layer = Literal["cache", "store"]


@dataclass
class Timing:
    """Duration of one cache or store call, filled in when the call ends."""

    layer: Layer
    operation: str
    entity: str
    seconds: float = 0.0

    @property
    def elapsed_ms(self) -> float:
        return self.seconds * 1000


class Instrumentation:
    """Measures calls without exporting anything."""

    @contextmanager
    def measure(self, layer: Layer, operation: str, entity: str) -> Iterator[Timing]:
        timing = Timing(layer=layer, operation=operation, entity=entity)
        start = time.perf_counter()
        try:
            yield timing
        finally:
            timing.seconds = time.perf_counter() - start
            self.observe(timing)

    def observe(self, timing: Timing) -> None:
        pass

    def record_hit(self, entity: str) -> None:
        pass

    def record_miss(self, entity: str) -> None:
        pass

    def record_cache_failure(self, entity: str, operation: str) -> None:
        pass


class TelemetryInstrumentation(Instrumentation):
    """Exports measurements to Prometheus and OpenTelemetry."""

    def __init__(self, metrics: MetricsRegistry | None = None):
        self.metrics = metrics or get_metrics()
        self.tracer = get_tracer("strata.strategies")

    @contextmanager
    def measure(self, layer: Layer, operation: str, entity: str) -> Iterator[Timing]:
        with self.tracer.start_as_current_span(f"{layer}.{operation}") as span:
            span.set_attribute("strata.entity", entity)
            try:
                with super().measure(layer, operation, entity) as timing:
                    yield timing
            except Exception as e:
                span.record_exception(e)
                span.set_status(StatusCode.ERROR, str(e))
                raise

    def observe(self, timing: Timing) -> None:
        histogram = (
            self.metrics.cache_operation_duration_seconds
            if timing.layer == "cache"
            else self.metrics.store_operation_duration_seconds
        )
        if histogram:
            histogram.labels(entity=timing.entity, operation=timing.operation).observe(
                timing.seconds
            )

    def record_hit(self, entity: str) -> None:
        if self.metrics.cache_hits_total:
            self.metrics.cache_hits_total.labels(entity=entity).inc()

    def record_miss(self, entity: str) -> None:
        if self.metrics.cache_misses_total:
            self.metrics.cache_misses_total.labels(entity=entity).inc()

    def record_cache_failure(self, entity: str, operation: str) -> None:
        if self.metrics.cache_failures_total:
            self.metrics.cache_failures_total.labels(entity=entity, operation=operation).inc()
