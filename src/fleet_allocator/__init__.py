# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Fleet Allocator - Thread-safe allocation of typed units to time intervals.

This library books a fixed inventory of typed units (cars, vans, ...) for
day-granular, half-open intervals and guarantees that no unit is ever booked
twice for overlapping time, even with many threads calling in at once.

Key Features:
    - Deterministic first-free-unit allocation in registry order
    - Half-open intervals: back-to-back bookings never conflict
    - Tagged reserve results instead of exceptions for expected outcomes
    - Idempotent cancellation
    - Prometheus metrics through a unified collector

Quick Start:
    >>> from datetime import datetime
    >>> from fleet_allocator import AllocationEngine, UnitType
    >>>
    >>> engine = AllocationEngine({UnitType.SEDAN: 1})
    >>> result = engine.reserve(UnitType.SEDAN, datetime(2026, 3, 1, 10), 3)
    >>> result.reservation.end
    datetime.datetime(2026, 3, 4, 10, 0)
    >>> engine.reserve(UnitType.SEDAN, datetime(2026, 3, 1, 10), 3).status
    <ReserveStatus.NO_AVAILABILITY: 'no_availability'>

Main Exports:
    - AllocationEngine, EngineConfig: Core allocation components
    - UnitRegistry, ReservationLedger: Inventory and booking state
    - Interval, Reservation, ReserveResult, ReserveStatus, Unit, UnitType: Types
    - FleetAllocatorError and subclasses: Exceptions

Version: 1.0.0
"""

__version__ = "1.0.0"

from .config import EngineConfig
from .engine import AllocationEngine
from .exceptions import (
    ConfigurationError,
    FleetAllocatorError,
    NoAvailabilityError,
    ReservationValidationError,
)
from .ledger import ReservationLedger
from .observability import (
    MetricsCollectorProtocol,
    UnifiedMetricsCollector,
    get_metrics_collector,
    reset_metrics_collector,
)
from .registry import UnitRegistry
from .types import (
    SEDAN,
    SUV,
    UNIT_TYPES,
    VAN,
    Interval,
    Reservation,
    ReserveResult,
    ReserveStatus,
    Unit,
    UnitType,
    overlaps,
)

__all__ = [
    "SEDAN",
    "SUV",
    "UNIT_TYPES",
    "VAN",
    # Engine
    "AllocationEngine",
    # Exceptions
    "ConfigurationError",
    "EngineConfig",
    "FleetAllocatorError",
    # Types
    "Interval",
    # Observability
    "MetricsCollectorProtocol",
    "NoAvailabilityError",
    "Reservation",
    # State
    "ReservationLedger",
    "ReservationValidationError",
    "ReserveResult",
    "ReserveStatus",
    "UnifiedMetricsCollector",
    "Unit",
    "UnitRegistry",
    "UnitType",
    "get_metrics_collector",
    "overlaps",
    "reset_metrics_collector",
]
