"""Tests for the Reservation record."""

from datetime import datetime, timezone

import pytest

from fleet_allocator.exceptions import ReservationValidationError
from fleet_allocator.types import Interval, Reservation, UnitType


class TestReservation:
    def test_creation_with_defaults(self):
        before = datetime.now(timezone.utc)
        reservation = Reservation(
            unit_id="car-1",
            unit_type=UnitType.SEDAN,
            start=datetime(2026, 3, 1, 10),
            days=3,
        )
        after = datetime.now(timezone.utc)

        assert reservation.reservation_id
        assert reservation.unit_id == "car-1"
        assert reservation.unit_type is UnitType.SEDAN
        assert before <= reservation.created_at <= after

    def test_end_and_interval(self):
        reservation = Reservation("car-1", UnitType.SEDAN, datetime(2026, 3, 1, 10), 3)
        assert reservation.end == datetime(2026, 3, 4, 10)
        assert reservation.interval == Interval(datetime(2026, 3, 1, 10), 3)

    def test_ids_are_unique(self):
        start = datetime(2026, 3, 1)
        ids = {Reservation("car-1", UnitType.SEDAN, start, 1).reservation_id for _ in range(50)}
        assert len(ids) == 50

    def test_overlaps(self):
        reservation = Reservation("car-1", UnitType.SEDAN, datetime(2026, 3, 1), 3)
        assert reservation.overlaps(datetime(2026, 3, 2), 1)
        assert not reservation.overlaps(datetime(2026, 3, 4), 2)

    def test_is_immutable(self):
        reservation = Reservation("car-1", UnitType.SEDAN, datetime(2026, 3, 1), 3)
        with pytest.raises(AttributeError):
            reservation.days = 10  # type: ignore[misc]

    @pytest.mark.parametrize("days", [0, -1, 1.5, True, None])
    def test_rejects_bad_days(self, days):
        with pytest.raises(ReservationValidationError) as exc_info:
            Reservation("car-1", UnitType.SEDAN, datetime(2026, 3, 1), days)
        assert exc_info.value.field == "days"

    def test_rejects_end_past_datetime_range(self):
        with pytest.raises(ReservationValidationError) as exc_info:
            Reservation("car-1", UnitType.SEDAN, datetime(2026, 3, 1), 3_000_000)
        assert exc_info.value.field == "days"

    @pytest.mark.parametrize("unit_id", ["", None])
    def test_rejects_empty_unit_id(self, unit_id):
        with pytest.raises(ReservationValidationError) as exc_info:
            Reservation(unit_id, UnitType.SEDAN, datetime(2026, 3, 1), 1)
        assert exc_info.value.field == "unit_id"

    def test_rejects_missing_type(self):
        with pytest.raises(ReservationValidationError) as exc_info:
            Reservation("car-1", None, datetime(2026, 3, 1), 1)  # type: ignore[arg-type]
        assert exc_info.value.field == "unit_type"

    def test_rejects_missing_start(self):
        with pytest.raises(ReservationValidationError) as exc_info:
            Reservation("car-1", UnitType.SEDAN, None, 1)  # type: ignore[arg-type]
        assert exc_info.value.field == "start"
