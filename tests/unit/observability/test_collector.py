# SPDX-License-Identifier: Apache-2.0
"""
Unit tests for the observability collector module.

Tests cover:
- UnifiedMetricsCollector: Thread-safe metrics collection with Prometheus support
- Singleton pattern: get_metrics_collector, reset_metrics_collector
- Counter, Gauge, and Histogram operations
- Label cardinality protection
- Prometheus integration and HTTP server
"""

from __future__ import annotations

import threading
from unittest.mock import patch

import pytest
from prometheus_client import CollectorRegistry

from fleet_allocator.observability import MetricsCollectorProtocol
from fleet_allocator.observability.collector import (
    METRIC_DEFINITIONS,
    MetricDefinition,
    UnifiedMetricsCollector,
    get_metrics_collector,
    reset_metrics_collector,
)
from fleet_allocator.observability.constants import (
    ALLOCATION_LATENCY_SECONDS,
    RESERVATIONS_ACTIVE,
    RESERVATIONS_CREATED_TOTAL,
)


@pytest.fixture
def collector() -> UnifiedMetricsCollector:
    """Create a fresh collector without Prometheus."""
    return UnifiedMetricsCollector(enable_prometheus=False)


@pytest.fixture
def prom_collector() -> tuple[UnifiedMetricsCollector, CollectorRegistry]:
    """Create a collector bound to a private Prometheus registry."""
    registry = CollectorRegistry()
    return UnifiedMetricsCollector(enable_prometheus=True, registry=registry), registry


class TestMetricDefinitions:
    def test_predefined_metrics_exist(self) -> None:
        assert RESERVATIONS_CREATED_TOTAL in METRIC_DEFINITIONS
        assert RESERVATIONS_ACTIVE in METRIC_DEFINITIONS
        assert METRIC_DEFINITIONS[ALLOCATION_LATENCY_SECONDS].buckets

    def test_definition_defaults(self) -> None:
        defn = MetricDefinition(name="x_total", metric_type="counter", description="X")
        assert defn.label_names == ()
        assert defn.buckets is None

    def test_collector_satisfies_protocol(self, collector: UnifiedMetricsCollector) -> None:
        assert isinstance(collector, MetricsCollectorProtocol)


class TestCounterOperations:
    def test_inc_counter_accumulates(self, collector: UnifiedMetricsCollector) -> None:
        collector.inc_counter("test_counter", value=3)
        collector.inc_counter("test_counter", value=7)
        assert collector.get_metrics()["counters"]["test_counter"][""] == 10

    def test_inc_counter_with_labels(self, collector: UnifiedMetricsCollector) -> None:
        collector.inc_counter("test_counter", labels={"unit_type": "sedan"})
        collector.inc_counter("test_counter", labels={"unit_type": "van"})
        collector.inc_counter("test_counter", labels={"unit_type": "sedan"})

        counters = collector.get_metrics()["counters"]["test_counter"]
        assert counters == {"unit_type=sedan": 2, "unit_type=van": 1}

    def test_inc_counter_negative_value_raises(
        self, collector: UnifiedMetricsCollector
    ) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            collector.inc_counter("test_counter", value=-1)

    def test_inc_counter_updates_prometheus(self, prom_collector) -> None:
        collector, registry = prom_collector
        collector.inc_counter(RESERVATIONS_CREATED_TOTAL, labels={"unit_type": "sedan"})
        collector.inc_counter(RESERVATIONS_CREATED_TOTAL, labels={"unit_type": "sedan"})

        value = registry.get_sample_value(
            RESERVATIONS_CREATED_TOTAL, {"unit_type": "sedan"}
        )
        assert value == 2.0


class TestGaugeOperations:
    def test_set_inc_dec(self, collector: UnifiedMetricsCollector) -> None:
        collector.set_gauge("g", 5)
        collector.inc_gauge("g", 2)
        collector.dec_gauge("g")
        assert collector.get_metrics()["gauges"]["g"][""] == 6

    def test_gauge_updates_prometheus(self, prom_collector) -> None:
        collector, registry = prom_collector
        labels = {"unit_type": "van"}
        collector.inc_gauge(RESERVATIONS_ACTIVE, labels=labels)
        collector.inc_gauge(RESERVATIONS_ACTIVE, labels=labels)
        collector.dec_gauge(RESERVATIONS_ACTIVE, labels=labels)

        assert registry.get_sample_value(RESERVATIONS_ACTIVE, labels) == 1.0


class TestHistogramOperations:
    def test_histogram_summary(self, collector: UnifiedMetricsCollector) -> None:
        for value in (0.1, 0.2, 0.3):
            collector.observe_histogram("h", value)

        summary = collector.get_metrics()["histograms"]["h"][""]
        assert summary["count"] == 3
        assert summary["min"] == 0.1
        assert summary["max"] == 0.3
        assert summary["sum"] == pytest.approx(0.6)

    def test_histogram_updates_prometheus(self, prom_collector) -> None:
        collector, registry = prom_collector
        collector.observe_histogram(ALLOCATION_LATENCY_SECONDS, 0.0002)

        count = registry.get_sample_value(f"{ALLOCATION_LATENCY_SECONDS}_count")
        assert count == 1.0

    def test_observations_are_bounded(self, collector: UnifiedMetricsCollector) -> None:
        for _ in range(10001):
            collector.observe_histogram("h", 1.0)
        assert collector.get_metrics()["histograms"]["h"][""]["count"] == 5000


class TestSnapshots:
    def test_snapshot_is_copy(self, collector: UnifiedMetricsCollector) -> None:
        collector.inc_counter("c")
        snapshot = collector.get_metrics()
        collector.inc_counter("c")
        assert snapshot["counters"]["c"][""] == 1

    def test_flat_metrics(self, collector: UnifiedMetricsCollector) -> None:
        collector.inc_counter("c")
        collector.set_gauge("g", 2.5, labels={"unit_type": "suv"})

        flat = collector.get_flat_metrics()
        assert flat["c"] == 1
        assert flat["g{unit_type=suv}"] == 2.5

    def test_reset(self, collector: UnifiedMetricsCollector) -> None:
        collector.inc_counter("c")
        collector.set_gauge("g", 1)
        collector.observe_histogram("h", 1)

        collector.reset()

        assert collector.get_metrics() == {"counters": {}, "gauges": {}, "histograms": {}}


class TestCardinality:
    def test_drops_new_label_combinations_over_limit(
        self, collector: UnifiedMetricsCollector
    ) -> None:
        with patch.object(UnifiedMetricsCollector, "MAX_LABEL_COMBINATIONS", 2):
            collector.inc_counter("c", labels={"unit_type": "sedan"})
            collector.inc_counter("c", labels={"unit_type": "suv"})
            collector.inc_counter("c", labels={"unit_type": "van"})
            collector.inc_counter("c", labels={"unit_type": "sedan"})

        counters = collector.get_metrics()["counters"]["c"]
        assert counters == {"unit_type=sedan": 2, "unit_type=suv": 1}


class TestPrometheusRegistration:
    def test_metric_cached(self, prom_collector) -> None:
        collector, _ = prom_collector
        first = collector._get_or_create_prom(RESERVATIONS_CREATED_TOTAL, "counter")
        second = collector._get_or_create_prom(RESERVATIONS_CREATED_TOTAL, "counter")
        assert first is not None
        assert first is second

    def test_disabled_returns_none(self, collector: UnifiedMetricsCollector) -> None:
        assert collector._get_or_create_prom(RESERVATIONS_CREATED_TOTAL, "counter") is None

    def test_duplicate_registration_keeps_dict_metrics(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A second collector on the same registry falls back to dict metrics."""
        registry = CollectorRegistry()
        first = UnifiedMetricsCollector(enable_prometheus=True, registry=registry)
        second = UnifiedMetricsCollector(enable_prometheus=True, registry=registry)

        first.inc_counter(RESERVATIONS_CREATED_TOTAL, labels={"unit_type": "sedan"})
        second.inc_counter(RESERVATIONS_CREATED_TOTAL, labels={"unit_type": "sedan"})

        assert "Failed to create Prometheus counter" in caplog.text
        assert second.get_metrics()["counters"][RESERVATIONS_CREATED_TOTAL] == {
            "unit_type=sedan": 1
        }
        assert registry.get_sample_value(
            RESERVATIONS_CREATED_TOTAL, {"unit_type": "sedan"}
        ) == 1.0


class TestHTTPServer:
    def test_start_http_server(self, prom_collector) -> None:
        collector, registry = prom_collector
        with patch(
            "fleet_allocator.observability.collector.start_http_server"
        ) as mock_start:
            assert collector.start_http_server(port=9100) is True
            assert collector.start_http_server(port=9100) is True

        mock_start.assert_called_once_with(9100, addr="127.0.0.1", registry=registry)
        assert collector.server_running is True

    def test_start_http_server_failure(self, prom_collector) -> None:
        collector, _ = prom_collector
        with patch(
            "fleet_allocator.observability.collector.start_http_server",
            side_effect=OSError("Port in use"),
        ):
            assert collector.start_http_server() is False
        assert collector.server_running is False


class TestSingletonPattern:
    def teardown_method(self) -> None:
        reset_metrics_collector()

    def test_returns_same_instance(self) -> None:
        collector1 = get_metrics_collector(enable_prometheus=False)
        collector2 = get_metrics_collector(enable_prometheus=False)
        assert collector1 is collector2

    def test_reset_metrics_collector(self) -> None:
        collector1 = get_metrics_collector(enable_prometheus=False)
        collector1.inc_counter("test_counter")

        reset_metrics_collector()

        collector2 = get_metrics_collector(enable_prometheus=False)
        assert collector2 is not collector1
        assert "test_counter" not in collector2.get_metrics()["counters"]

    def test_concurrent_singleton_access(self) -> None:
        reset_metrics_collector()
        barrier = threading.Barrier(10)
        instances: list[UnifiedMetricsCollector] = []
        lock = threading.Lock()

        def fetch() -> None:
            barrier.wait()
            instance = get_metrics_collector(enable_prometheus=False)
            with lock:
                instances.append(instance)

        threads = [threading.Thread(target=fetch) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len({id(i) for i in instances}) == 1


class TestThreadSafety:
    def test_concurrent_counter_increments(self, collector: UnifiedMetricsCollector) -> None:
        num_threads, per_thread = 10, 500
        barrier = threading.Barrier(num_threads)

        def update() -> None:
            barrier.wait()
            for _ in range(per_thread):
                collector.inc_counter("c", labels={"unit_type": "sedan"})

        threads = [threading.Thread(target=update) for _ in range(num_threads)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        counters = collector.get_metrics()["counters"]["c"]
        assert counters["unit_type=sedan"] == num_threads * per_thread
