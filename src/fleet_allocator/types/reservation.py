# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Reservation record binding one unit to one interval."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from ..exceptions import ReservationValidationError
from .interval import Interval
from .unit import UnitType


def _new_reservation_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Reservation:
    """
    Immutable record of a unit booked for ``[start, start + days)``.

    Reservations are created by ``AllocationEngine`` after a successful
    availability check and are only ever removed from the ledger by
    cancellation; they are never modified.

    Attributes:
        unit_id: Identifier of the booked unit (lookup only)
        unit_type: Type of the booked unit, denormalized for queries
        start: Interval start
        days: Duration in whole days, strictly positive
        reservation_id: Opaque unique identifier
        created_at: UTC time the record was created

    Raises:
        ReservationValidationError: If ``unit_id`` is empty, ``unit_type`` is
            not a ``UnitType``, ``start`` is not a datetime, ``days`` is not
            a positive integer, or the booking would end outside the
            supported date range.
    """

    unit_id: str
    unit_type: UnitType
    start: datetime
    days: int
    reservation_id: str = field(default_factory=_new_reservation_id)
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), compare=False
    )

    def __post_init__(self) -> None:
        if not isinstance(self.unit_id, str) or not self.unit_id:
            raise ReservationValidationError(
                "unit_id must be a non-empty string", field="unit_id", value=self.unit_id
            )
        if not isinstance(self.unit_type, UnitType):
            raise ReservationValidationError(
                f"unit_type must be a UnitType, got {self.unit_type!r}",
                field="unit_type",
                value=self.unit_type,
            )
        if not isinstance(self.start, datetime):
            raise ReservationValidationError(
                f"start must be a datetime, got {self.start!r}",
                field="start",
                value=self.start,
            )
        if isinstance(self.days, bool) or not isinstance(self.days, int) or self.days <= 0:
            raise ReservationValidationError(
                f"days must be a positive integer, got {self.days!r}",
                field="days",
                value=self.days,
            )
        try:
            self.interval.bounds()
        except OverflowError as e:
            raise ReservationValidationError(
                f"start + {self.days} days is outside the supported date range",
                field="days",
                value=self.days,
            ) from e

    @property
    def interval(self) -> Interval:
        return Interval(self.start, self.days)

    @property
    def end(self) -> datetime:
        """Exclusive end of the booking (``start + days``)."""
        return self.interval.end

    def overlaps(self, start: datetime, days: int) -> bool:
        """Return True if this booking conflicts with ``[start, start + days)``."""
        return self.interval.overlaps(Interval(start, days))


__all__ = ["Reservation"]
