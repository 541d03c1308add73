# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Exception classes for the fleet allocator library.

This module defines the exception hierarchy used throughout the library.
All exceptions inherit from FleetAllocatorError, making it easy to catch
all allocator-related exceptions with a single except clause.

Note that ``AllocationEngine.reserve`` reports validation failures and
missing availability through a ``ReserveResult`` rather than raising. The
exceptions below are raised at construction time, by ``Reservation`` itself,
and by the ``reserve_or_raise`` convenience wrapper.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any


class FleetAllocatorError(Exception):
    """Base exception for all fleet allocator errors.

    Example:
        try:
            engine.reserve_or_raise(UnitType.SEDAN, start, 3)
        except FleetAllocatorError as e:
            logger.error(f"Allocation failed: {e}")
    """

    pass


class ConfigurationError(FleetAllocatorError):
    """Raised when the inventory configuration is invalid.

    This is a programming-contract violation detected while the engine is
    being built, never during normal operation.

    Common causes include:
    - A negative unit count for a type
    - A non-integer unit count
    - A type key that is not a known ``UnitType``

    Example:
        try:
            engine = AllocationEngine({UnitType.SEDAN: -1})
        except ConfigurationError as e:
            logger.error(f"Invalid inventory: {e}")
            raise SystemExit(1)
    """

    pass


class ReservationValidationError(FleetAllocatorError):
    """Raised when a reservation request or record is malformed.

    Attributes:
        field: Name of the offending input (``unit_type``, ``start``,
            ``days``, ``unit_id``). May be None if not attributable.
        value: The rejected value.
    """

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        super().__init__(message)
        self.field = field
        self.value = value


class NoAvailabilityError(FleetAllocatorError):
    """Raised when no unit of the requested type is free for the interval.

    Only ``AllocationEngine.reserve_or_raise`` raises this; ``reserve``
    returns a ``NO_AVAILABILITY`` result instead. The ledger is never
    modified when this is raised.

    Attributes:
        unit_type: The requested unit type.
        start: Requested interval start.
        days: Requested duration in days.

    Example:
        try:
            reservation = engine.reserve_or_raise(UnitType.SUV, start, 2)
        except NoAvailabilityError as e:
            # Caller decides whether to try another interval
            suggest_alternatives(e.unit_type, e.start)
    """

    def __init__(
        self,
        message: str = "No units available for the requested dates",
        unit_type: Any = None,
        start: datetime | None = None,
        days: int | None = None,
    ):
        super().__init__(message)
        self.unit_type = unit_type
        self.start = start
        self.days = days


__all__ = [
    "ConfigurationError",
    "FleetAllocatorError",
    "NoAvailabilityError",
    "ReservationValidationError",
]
