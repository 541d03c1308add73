# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Observability and metrics for the Fleet Allocator.

Classes:
    UnifiedMetricsCollector: Metrics collector supporting dict and Prometheus.

Protocols:
    MetricsCollectorProtocol: Protocol for metrics collection backends.

Functions:
    get_metrics_collector: Get the global metrics collector singleton.
    reset_metrics_collector: Reset the global metrics collector singleton.
"""

from .collector import (
    METRIC_DEFINITIONS,
    MetricDefinition,
    UnifiedMetricsCollector,
    get_metrics_collector,
    reset_metrics_collector,
)
from .constants import (
    ALLOCATION_LATENCY_SECONDS,
    LATENCY_BUCKETS,
    METRIC_PREFIX,
    REASON_INVALID_REQUEST,
    REASON_NO_AVAILABILITY,
    RESERVATIONS_ACTIVE,
    RESERVATIONS_CANCELLED_TOTAL,
    RESERVATIONS_CREATED_TOTAL,
    RESERVE_REJECTIONS_TOTAL,
    UNITS_TOTAL,
)
from .protocols import MetricsCollectorProtocol

__all__ = [
    "ALLOCATION_LATENCY_SECONDS",
    "LATENCY_BUCKETS",
    "METRIC_DEFINITIONS",
    "METRIC_PREFIX",
    "REASON_INVALID_REQUEST",
    "REASON_NO_AVAILABILITY",
    "RESERVATIONS_ACTIVE",
    "RESERVATIONS_CANCELLED_TOTAL",
    "RESERVATIONS_CREATED_TOTAL",
    "RESERVE_REJECTIONS_TOTAL",
    "UNITS_TOTAL",
    "MetricDefinition",
    "MetricsCollectorProtocol",
    "UnifiedMetricsCollector",
    "get_metrics_collector",
    "reset_metrics_collector",
]
