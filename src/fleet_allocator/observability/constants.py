# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Metric name constants following Prometheus naming conventions.

All metric names use the `fleet_alloc_` prefix.

Naming Conventions:
    - Counter metrics end with `_total`
    - Histogram metrics for time end with `_seconds`
    - Gauges use present-tense descriptive names

Label Best Practices:
    To prevent label cardinality explosion, use only:
    - `unit_type` - Unit category (categorical: sedan, suv, van)
    - `reason` - Rejection reason (enum: no_availability, invalid_request)

    NEVER use:
    - `reservation_id` - Unique per reservation (unbounded!)
    - `unit_id` - Unique per unit (unbounded for large fleets!)
    - `start` - Unique per request (unbounded!)

Usage:
    >>> from fleet_allocator.observability.constants import RESERVATIONS_CREATED_TOTAL
    >>> print(RESERVATIONS_CREATED_TOTAL)
    'fleet_alloc_reservations_created_total'
"""


# =============================================================================
# Global Prefix
# =============================================================================

METRIC_PREFIX = "fleet_alloc"
"""Prefix for all Prometheus metrics in this library."""


# =============================================================================
# Allocation Counters (engine.py)
# =============================================================================

RESERVATIONS_CREATED_TOTAL = f"{METRIC_PREFIX}_reservations_created_total"
"""Total reservations successfully recorded."""

RESERVATIONS_CANCELLED_TOTAL = f"{METRIC_PREFIX}_reservations_cancelled_total"
"""Total reservations removed by cancellation."""

RESERVE_REJECTIONS_TOTAL = f"{METRIC_PREFIX}_reserve_rejections_total"
"""Total reserve calls that did not produce a reservation."""


# =============================================================================
# State Gauges
# =============================================================================

RESERVATIONS_ACTIVE = f"{METRIC_PREFIX}_reservations_active"
"""Number of reservations currently in the ledger."""

UNITS_TOTAL = f"{METRIC_PREFIX}_units_total"
"""Number of units in the registry."""


# =============================================================================
# Latency
# =============================================================================

ALLOCATION_LATENCY_SECONDS = f"{METRIC_PREFIX}_allocation_latency_seconds"
"""Time spent inside reserve, lock wait included (histogram)."""


# =============================================================================
# Label values
# =============================================================================

REASON_NO_AVAILABILITY = "no_availability"
REASON_INVALID_REQUEST = "invalid_request"


# =============================================================================
# Histogram Buckets
# =============================================================================

LATENCY_BUCKETS = [
    0.00001,
    0.00005,
    0.0001,
    0.0005,
    0.001,
    0.005,
    0.01,
    0.05,
    0.1,
    0.5,
    1.0,
]
"""Buckets for in-memory allocation latency (10us to 1s)."""


__all__ = [
    "ALLOCATION_LATENCY_SECONDS",
    "LATENCY_BUCKETS",
    "METRIC_PREFIX",
    "REASON_INVALID_REQUEST",
    "REASON_NO_AVAILABILITY",
    "RESERVATIONS_ACTIVE",
    "RESERVATIONS_CANCELLED_TOTAL",
    "RESERVATIONS_CREATED_TOTAL",
    "RESERVE_REJECTIONS_TOTAL",
    "UNITS_TOTAL",
]
