# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Allocation engine: assigns free units to reservation requests.

The engine combines a read-only ``UnitRegistry`` with a ``ReservationLedger``.
``reserve`` scans the units of the requested type in registry order and books
the first one whose existing reservations do not overlap the requested
interval. The scan and the insert run under the ledger lock as a single
critical section, so two concurrent callers can never both see the same unit
as free and book it for overlapping intervals.

Example:
    >>> engine = AllocationEngine({UnitType.SEDAN: 2, UnitType.SUV: 1})
    >>> result = engine.reserve(UnitType.SEDAN, datetime(2026, 3, 1, 10), 3)
    >>> result.ok
    True
    >>> engine.available_count(UnitType.SEDAN, datetime(2026, 3, 2), 1)
    1
    >>> engine.cancel(result.reservation.reservation_id)
    True
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from .config import EngineConfig
from .exceptions import NoAvailabilityError, ReservationValidationError
from .ledger import ReservationLedger
from .observability.collector import get_metrics_collector
from .observability.constants import (
    ALLOCATION_LATENCY_SECONDS,
    REASON_INVALID_REQUEST,
    REASON_NO_AVAILABILITY,
    RESERVATIONS_ACTIVE,
    RESERVATIONS_CANCELLED_TOTAL,
    RESERVATIONS_CREATED_TOTAL,
    RESERVE_REJECTIONS_TOTAL,
    UNITS_TOTAL,
)
from .observability.protocols import MetricsCollectorProtocol
from .registry import UnitRegistry
from .types.interval import Interval
from .types.reservation import Reservation
from .types.result import ReserveResult, ReserveStatus
from .types.unit import UnitType

logger = logging.getLogger(__name__)


class AllocationEngine:
    """
    Thread-safe allocator of units to time-bounded reservations.

    The engine holds no state of its own beyond references to its registry,
    ledger and metrics collector. All mutation goes through the ledger under
    ``ledger.lock``; read queries that combine several ledger reads take the
    same lock so they never observe a half-applied ``reserve`` or ``cancel``.
    """

    def __init__(
        self,
        inventory: Mapping[UnitType | str, int] | EngineConfig | None = None,
        metrics: MetricsCollectorProtocol | None = None,
    ):
        """
        Initialize the engine.

        Args:
            inventory: Type -> unit count mapping, or a full ``EngineConfig``
            metrics: Optional metrics collector. Defaults to the global
                collector unless metrics are disabled in the config.

        Raises:
            ConfigurationError: If the inventory is invalid
        """
        if isinstance(inventory, EngineConfig):
            config = inventory
        else:
            config = EngineConfig(inventory=dict(inventory or {}))
        self._config = config

        self._registry = UnitRegistry(config.inventory)
        self._ledger = ReservationLedger()

        if not config.metrics_enabled:
            self._metrics: MetricsCollectorProtocol | None = None
        elif metrics is not None:
            self._metrics = metrics
        else:
            self._metrics = get_metrics_collector(
                enable_prometheus=config.enable_prometheus
            )

        if self._metrics is not None:
            for unit_type in self._registry.types():
                self._metrics.set_gauge(
                    UNITS_TOTAL,
                    self._registry.count_of_type(unit_type),
                    labels={"unit_type": unit_type.value},
                )

        logger.info(
            "AllocationEngine initialized with %d units (%s)",
            len(self._registry),
            ", ".join(
                f"{t.value}={self._registry.count_of_type(t)}"
                for t in self._registry.types()
            )
            or "empty",
        )

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def registry(self) -> UnitRegistry:
        return self._registry

    @property
    def ledger(self) -> ReservationLedger:
        return self._ledger

    # === Validation ===

    @staticmethod
    def _validate(unit_type: Any, start: Any, days: Any) -> UnitType:
        """
        Check request inputs without touching any state.

        Returns:
            The resolved ``UnitType``

        Raises:
            ReservationValidationError: On the first malformed input
        """
        if unit_type is None:
            raise ReservationValidationError(
                "unit_type is required", field="unit_type", value=unit_type
            )
        resolved = UnitType.coerce(unit_type)
        if resolved is None:
            raise ReservationValidationError(
                f"Unknown unit type: {unit_type!r}", field="unit_type", value=unit_type
            )
        if not isinstance(start, datetime):
            raise ReservationValidationError(
                f"start must be a datetime, got {start!r}", field="start", value=start
            )
        if isinstance(days, bool) or not isinstance(days, int):
            raise ReservationValidationError(
                f"days must be an integer, got {days!r}", field="days", value=days
            )
        if days <= 0:
            raise ReservationValidationError(
                f"days must be positive, got {days}", field="days", value=days
            )
        try:
            Interval(start, days).bounds()
        except OverflowError as e:
            raise ReservationValidationError(
                f"start + {days} days is outside the supported date range",
                field="days",
                value=days,
            ) from e
        return resolved

    # === Allocation ===

    def reserve(self, unit_type: UnitType | str, start: datetime, days: int) -> ReserveResult:
        """
        Book the first free unit of ``unit_type`` for ``[start, start + days)``.

        Args:
            unit_type: Requested type (member or its string value)
            start: Interval start
            days: Duration in whole days, strictly positive

        Returns:
            A ``ReserveResult``: RESERVED with the new reservation,
            NO_AVAILABILITY if every unit of the type is booked, or
            INVALID_REQUEST if an input was malformed. Only RESERVED
            changes the ledger.
        """
        began = time.perf_counter()

        try:
            resolved = self._validate(unit_type, start, days)
        except ReservationValidationError as e:
            logger.debug("Rejected reserve request: %s", e)
            known = UnitType.coerce(unit_type)
            label = known.value if known is not None else "unknown"
            self._record_rejection(label, REASON_INVALID_REQUEST)
            return ReserveResult.invalid(str(e), field=e.field)

        interval = Interval(start, days)
        reservation: Reservation | None = None

        with self._ledger.lock:
            for unit in self._registry.units_of_type(resolved):
                if self._ledger.is_free(unit.unit_id, interval):
                    reservation = Reservation(
                        unit_id=unit.unit_id,
                        unit_type=resolved,
                        start=start,
                        days=days,
                    )
                    self._ledger.insert(reservation)
                    self._set_active_gauge(resolved)
                    break

        if self._metrics is not None:
            self._metrics.observe_histogram(
                ALLOCATION_LATENCY_SECONDS, time.perf_counter() - began
            )

        if reservation is None:
            logger.debug(
                "No %s available for %s + %d days",
                resolved.value,
                start.isoformat(),
                days,
            )
            self._record_rejection(resolved.value, REASON_NO_AVAILABILITY)
            return ReserveResult.no_availability(
                f"No {resolved.value} units available for the requested dates"
            )

        logger.debug(
            "Reserved unit %s (%s) for %s + %d days: reservation_id=%s",
            reservation.unit_id,
            resolved.value,
            start.isoformat(),
            days,
            reservation.reservation_id,
        )
        if self._metrics is not None:
            labels = {"unit_type": resolved.value}
            self._metrics.inc_counter(RESERVATIONS_CREATED_TOTAL, labels=labels)
        return ReserveResult.reserved(reservation)

    def reserve_or_raise(
        self, unit_type: UnitType | str, start: datetime, days: int
    ) -> Reservation:
        """
        Like ``reserve`` but return the reservation or raise.

        Raises:
            ReservationValidationError: If an input was malformed
            NoAvailabilityError: If no unit of the type is free
        """
        result = self.reserve(unit_type, start, days)
        if result.status is ReserveStatus.INVALID_REQUEST:
            raise ReservationValidationError(result.reason or "", field=result.field)
        if result.reservation is None:
            raise NoAvailabilityError(
                result.reason or "No units available for the requested dates",
                unit_type=UnitType.coerce(unit_type),
                start=start,
                days=days,
            )
        return result.reservation

    def cancel(self, reservation_id: str) -> bool:
        """
        Cancel a reservation (idempotent).

        Returns:
            True if the reservation existed and was removed, False otherwise
        """
        with self._ledger.lock:
            reservation = self._ledger.pop(reservation_id)
            if reservation is not None:
                self._set_active_gauge(reservation.unit_type)
        if reservation is None:
            logger.debug("Cancel for unknown reservation_id=%s", reservation_id)
            return False

        logger.debug(
            "Cancelled reservation_id=%s on unit %s",
            reservation_id,
            reservation.unit_id,
        )
        if self._metrics is not None:
            labels = {"unit_type": reservation.unit_type.value}
            self._metrics.inc_counter(RESERVATIONS_CANCELLED_TOTAL, labels=labels)
        return True

    # === Queries ===

    def available_count(self, unit_type: UnitType | str, start: datetime, days: int) -> int:
        """
        Count units of ``unit_type`` free for ``[start, start + days)``.

        Computed from live state on every call.

        Raises:
            ReservationValidationError: If an input was malformed
        """
        resolved = self._validate(unit_type, start, days)
        interval = Interval(start, days)
        with self._ledger.lock:
            return sum(
                1
                for unit in self._registry.units_of_type(resolved)
                if self._ledger.is_free(unit.unit_id, interval)
            )

    def is_available(self, unit_type: UnitType | str, start: datetime, days: int) -> bool:
        """Return True if at least one unit of the type is free for the interval."""
        resolved = self._validate(unit_type, start, days)
        interval = Interval(start, days)
        with self._ledger.lock:
            return any(
                self._ledger.is_free(unit.unit_id, interval)
                for unit in self._registry.units_of_type(resolved)
            )

    def total_count(self, unit_type: UnitType | str) -> int:
        """
        Number of units of ``unit_type`` in the registry.

        Raises:
            ReservationValidationError: If ``unit_type`` is not a known type
        """
        resolved = UnitType.coerce(unit_type)
        if resolved is None:
            raise ReservationValidationError(
                f"Unknown unit type: {unit_type!r}", field="unit_type", value=unit_type
            )
        return self._registry.count_of_type(resolved)

    def get_reservation(self, reservation_id: str) -> Reservation | None:
        return self._ledger.get(reservation_id)

    def reservations_for_unit(self, unit_id: str) -> list[Reservation]:
        """Active reservations on ``unit_id``; empty for unknown units."""
        return self._ledger.by_unit(unit_id)

    def all_reservations(self) -> list[Reservation]:
        return self._ledger.all()

    def get_stats(self) -> dict[str, Any]:
        """
        Consistent snapshot of inventory and bookings.

        Returns:
            Dict with ``total_reservations`` and a ``types`` mapping of
            type value -> ``{"total_units": int, "active_reservations": int}``
        """
        with self._ledger.lock:
            return {
                "total_units": len(self._registry),
                "total_reservations": len(self._ledger),
                "types": {
                    unit_type.value: {
                        "total_units": self._registry.count_of_type(unit_type),
                        "active_reservations": self._ledger.count_for_type(unit_type),
                    }
                    for unit_type in self._registry.types()
                },
            }

    def _set_active_gauge(self, unit_type: UnitType) -> None:
        # Caller holds the ledger lock so the gauge tracks ledger order.
        if self._metrics is not None:
            self._metrics.set_gauge(
                RESERVATIONS_ACTIVE,
                self._ledger.count_for_type(unit_type),
                labels={"unit_type": unit_type.value},
            )

    def _record_rejection(self, unit_type_label: str, reason: str) -> None:
        if self._metrics is not None:
            self._metrics.inc_counter(
                RESERVE_REJECTIONS_TOTAL,
                labels={"unit_type": unit_type_label, "reason": reason},
            )


__all__ = ["AllocationEngine"]
