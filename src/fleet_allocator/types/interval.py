# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Half-open time intervals measured in whole days.

An interval covers ``[start, start + days)``. Two intervals overlap iff each
starts before the other ends, so a booking that ends exactly when the next
one starts does not conflict with it.

Comparisons run on UTC wall-clock time: aware timestamps are shifted to UTC
and stripped of their tzinfo, naive timestamps are taken to already be UTC.
This lets naive and aware bookings share one ledger.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta


def _utc_naive(moment: datetime) -> datetime:
    offset = moment.utcoffset()
    if offset is None:
        return moment
    return (moment - offset).replace(tzinfo=None)


@dataclass(frozen=True)
class Interval:
    """
    A half-open span ``[start, start + days)``.

    Attributes:
        start: Inclusive start timestamp
        days: Length in whole days
    """

    start: datetime
    days: int

    @classmethod
    def from_days(cls, start: datetime, days: int) -> "Interval":
        return cls(start=start, days=days)

    @property
    def end(self) -> datetime:
        """Exclusive end timestamp."""
        return self.start + timedelta(days=self.days)

    def bounds(self) -> tuple[datetime, datetime]:
        """
        ``(start, end)`` as naive UTC timestamps.

        Raises:
            OverflowError: If either bound falls outside the datetime range
        """
        return _utc_naive(self.start), _utc_naive(self.end)

    def overlaps(self, other: "Interval") -> bool:
        return overlaps(self, other)

    def contains(self, instant: datetime) -> bool:
        start, end = self.bounds()
        return start <= _utc_naive(instant) < end


def overlaps(a: Interval, b: Interval) -> bool:
    """Return True iff ``a`` and ``b`` share at least one instant."""
    a_start, a_end = a.bounds()
    b_start, b_end = b.bounds()
    return a_start < b_end and b_start < a_end


__all__ = ["Interval", "overlaps"]
