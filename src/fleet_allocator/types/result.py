# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Result types for reservation attempts.

``AllocationEngine.reserve`` returns a ``ReserveResult`` instead of raising,
so callers can branch on the outcome:

    >>> result = engine.reserve(UnitType.SEDAN, start, 3)
    >>> match result.status:
    ...     case ReserveStatus.RESERVED:
    ...         confirm(result.reservation)
    ...     case ReserveStatus.NO_AVAILABILITY:
    ...         offer_other_dates()
    ...     case ReserveStatus.INVALID_REQUEST:
    ...         reject(result.reason)
"""

from dataclasses import dataclass
from enum import Enum

from .reservation import Reservation


class ReserveStatus(Enum):
    """
    Outcome of a reservation attempt.

    * **RESERVED**: A unit was allocated and recorded
    * **NO_AVAILABILITY**: Request was valid but every unit of the type is booked
    * **INVALID_REQUEST**: Request was rejected before any state was read
    """

    RESERVED = "reserved"
    NO_AVAILABILITY = "no_availability"
    INVALID_REQUEST = "invalid_request"


@dataclass(frozen=True)
class ReserveResult:
    """
    Tagged outcome of ``AllocationEngine.reserve``.

    Attributes:
        status: Which outcome occurred
        reservation: The recorded reservation, only set when RESERVED
        reason: Human-readable explanation for the non-RESERVED outcomes
        field: Offending input name for INVALID_REQUEST
    """

    status: ReserveStatus
    reservation: Reservation | None = None
    reason: str | None = None
    field: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is ReserveStatus.RESERVED

    @classmethod
    def reserved(cls, reservation: Reservation) -> "ReserveResult":
        return cls(ReserveStatus.RESERVED, reservation=reservation)

    @classmethod
    def no_availability(cls, reason: str) -> "ReserveResult":
        return cls(ReserveStatus.NO_AVAILABILITY, reason=reason)

    @classmethod
    def invalid(cls, reason: str, field: str | None = None) -> "ReserveResult":
        return cls(ReserveStatus.INVALID_REQUEST, reason=reason, field=field)


__all__ = ["ReserveResult", "ReserveStatus"]
