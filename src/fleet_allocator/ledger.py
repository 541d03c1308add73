# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""ReservationLedger for tracking active reservations with per-unit indexing."""

import logging
import threading

from .types.interval import Interval
from .types.reservation import Reservation
from .types.unit import UnitType

logger = logging.getLogger(__name__)


class ReservationLedger:
    """
    Holds every active reservation.

    Primary storage: Dict[reservation_id, Reservation]
    Secondary index: Dict[unit_id, Dict[reservation_id, Reservation]]

    Entries are never modified after insertion; removal by id is the only
    state transition.

    CONCURRENCY NOTE:
    Every method takes ``self.lock`` (a reentrant lock), so single calls are
    atomic. A caller that needs several calls to be atomic together, such
    as the engine's check-then-insert, holds ``ledger.lock`` around them.
    Listings return copies, never live views.
    """

    def __init__(self) -> None:
        # Primary storage - keyed by reservation id
        self._reservations: dict[str, Reservation] = {}

        # Secondary index for lookup by unit id. Inner dicts keep insertion
        # order so per-unit listings are stable.
        self._by_unit: dict[str, dict[str, Reservation]] = {}

        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        """Reentrant lock guarding all ledger state."""
        return self._lock

    def is_free(self, unit_id: str, interval: Interval) -> bool:
        """
        Check whether ``unit_id`` has no reservation overlapping ``interval``.

        Args:
            unit_id: The unit to check
            interval: The requested span

        Returns:
            True if no existing reservation on the unit overlaps the interval
        """
        with self._lock:
            entries = self._by_unit.get(unit_id)
            if not entries:
                return True
            return not any(r.interval.overlaps(interval) for r in entries.values())

    def insert(self, reservation: Reservation) -> None:
        """
        Record a reservation.

        Overlap checking is the caller's job; the ledger only stores.

        Args:
            reservation: A well-formed reservation with a fresh id
        """
        with self._lock:
            self._reservations[reservation.reservation_id] = reservation

            if reservation.unit_id not in self._by_unit:
                self._by_unit[reservation.unit_id] = {}
            self._by_unit[reservation.unit_id][reservation.reservation_id] = reservation

            logger.debug(
                "Inserted reservation: reservation_id=%s, unit_id=%s, start=%s, days=%d",
                reservation.reservation_id,
                reservation.unit_id,
                reservation.start.isoformat(),
                reservation.days,
            )

    def remove_by_id(self, reservation_id: str) -> bool:
        """
        Remove a reservation (idempotent).

        Args:
            reservation_id: The reservation to remove

        Returns:
            True if an entry was removed, False if none matched
        """
        return self.pop(reservation_id) is not None

    def pop(self, reservation_id: str) -> Reservation | None:
        """Remove and return a reservation, or None if absent."""
        with self._lock:
            reservation = self._reservations.pop(reservation_id, None)
            if reservation is None:
                return None

            # Update secondary index
            entries = self._by_unit.get(reservation.unit_id)
            if entries is not None:
                entries.pop(reservation_id, None)
                if not entries:
                    del self._by_unit[reservation.unit_id]

            logger.debug(
                "Removed reservation: reservation_id=%s, unit_id=%s",
                reservation_id,
                reservation.unit_id,
            )
            return reservation

    def get(self, reservation_id: str) -> Reservation | None:
        with self._lock:
            return self._reservations.get(reservation_id)

    def by_unit(self, unit_id: str) -> list[Reservation]:
        """Snapshot of the unit's active reservations in insertion order."""
        with self._lock:
            return list(self._by_unit.get(unit_id, {}).values())

    def all(self) -> list[Reservation]:
        """Snapshot of every active reservation in insertion order."""
        with self._lock:
            return list(self._reservations.values())

    def count_for_type(self, unit_type: UnitType) -> int:
        with self._lock:
            return sum(1 for r in self._reservations.values() if r.unit_type is unit_type)

    def __len__(self) -> int:
        with self._lock:
            return len(self._reservations)

    def __contains__(self, reservation_id: object) -> bool:
        with self._lock:
            return reservation_id in self._reservations
