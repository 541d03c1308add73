# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Type definitions and constants."""

from .interval import Interval, overlaps
from .reservation import Reservation
from .result import ReserveResult, ReserveStatus
from .unit import SEDAN, SUV, UNIT_TYPES, VAN, Unit, UnitType

__all__ = [
    # Interval model
    "Interval",
    # Reservations
    "Reservation",
    "ReserveResult",
    "ReserveStatus",
    "SEDAN",
    "SUV",
    "UNIT_TYPES",
    # Units
    "Unit",
    "UnitType",
    "VAN",
    "overlaps",
]
