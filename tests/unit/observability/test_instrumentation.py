"""Tests for accessor instrumentation and HTTP metrics helpers."""

import pytest
from prometheus_client import CollectorRegistry, Counter, Histogram

from strata.observability.instrumentation import Instrumentation, TelemetryInstrumentation
from strata.observability.metrics import MetricsRegistry, normalize_path


@pytest.fixture
def registry() -> CollectorRegistry:
    return CollectorRegistry()


@pytest.fixture
def metrics(registry: CollectorRegistry) -> MetricsRegistry:
    """Metrics bound to a private Prometheus registry."""
    labels = ["entity", "operation"]
    return MetricsRegistry(
        cache_hits_total=Counter("hits", "hits", ["entity"], registry=registry),
        cache_misses_total=Counter("misses", "misses", ["entity"], registry=registry),
        cache_failures_total=Counter("failures", "failures", labels, registry=registry),
        cache_operation_duration_seconds=Histogram("cache_seconds", "cache", labels, registry=registry),
        store_operation_duration_seconds=Histogram("store_seconds", "store", labels, registry=registry),
        _initialized=True,
        _registry=registry,
    )


class TestInstrumentation:
    """Test the measuring base class."""

    def test_measure_fills_timing(self) -> None:
        with Instrumentation().measure("cache", "get", "order") as timing:
            pass
        assert timing.seconds >= 0
        assert timing.elapsed_ms == timing.seconds * 1000

    def test_measure_records_on_error(self) -> None:
        """Timing is observed even when the call raises."""
        observed = []

        class Capture(Instrumentation):
            def observe(self, timing):
                observed.append(timing)

        with pytest.raises(RuntimeError):
            with Capture().measure("store", "save", "order"):
                raise RuntimeError("boom")

        assert [t.operation for t in observed] == ["save"]


class TestTelemetryInstrumentation:
    """Test Prometheus export."""

    def test_hits_and_misses_counted(self, metrics, registry) -> None:
        telemetry = TelemetryInstrumentation(metrics)

        telemetry.record_hit("product")
        telemetry.record_hit("product")
        telemetry.record_miss("order")

        assert registry.get_sample_value("hits_total", {"entity": "product"}) == 2
        assert registry.get_sample_value("misses_total", {"entity": "order"}) == 1

    def test_failures_counted(self, metrics, registry) -> None:
        TelemetryInstrumentation(metrics).record_cache_failure("order", "set")
        assert registry.get_sample_value("failures_total", {"entity": "order", "operation": "set"}) == 1

    def test_durations_split_by_layer(self, metrics, registry) -> None:
        """Cache and store calls land in separate histograms."""
        telemetry = TelemetryInstrumentation(metrics)

        with telemetry.measure("cache", "get", "order"):
            pass
        with telemetry.measure("store", "find_by_id", "order"):
            pass

        assert registry.get_sample_value("cache_seconds_count", {"entity": "order", "operation": "get"}) == 1
        assert (
            registry.get_sample_value("store_seconds_count", {"entity": "order", "operation": "find_by_id"})
            == 1
        )

    def test_disabled_metrics_are_ignored(self) -> None:
        """A registry with no metrics accepts every call."""
        telemetry = TelemetryInstrumentation(MetricsRegistry(_initialized=True))

        telemetry.record_hit("order")
        with telemetry.measure("cache", "set", "order"):
            pass


class TestNormalizePath:
    """Test metric label normalization."""

    def test_numeric_ids_replaced(self) -> None:
        assert normalize_path("/products/5") == "/products/{id}"
        assert normalize_path("/api/orders/42") == "/api/orders/{id}"

    def test_collection_paths_unchanged(self) -> None:
        assert normalize_path("/api/orders") == "/api/orders"
