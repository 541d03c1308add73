# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
# fleet_allocator/types/unit.py
"""
Unit types and the allocatable unit record.

Constants:
    SEDAN, SUV, VAN: Standard unit categories
    UNIT_TYPES: Frozenset of all standard types

Example:
    >>> from fleet_allocator import UnitType
    >>> UnitType("sedan") is UnitType.SEDAN
    True
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum


class UnitType(str, Enum):
    """
    Closed set of allocatable unit categories.

    Members are ``str`` subclasses so they compare equal to their values and
    serialize naturally (``UnitType.SEDAN == "sedan"``).
    """

    SEDAN = "sedan"
    SUV = "suv"
    VAN = "van"

    @classmethod
    def coerce(cls, value: object) -> "UnitType | None":
        """Return the member for ``value`` (member or its string value), else None."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                return None
        return None


SEDAN = UnitType.SEDAN
SUV = UnitType.SUV
VAN = UnitType.VAN

UNIT_TYPES = frozenset(UnitType)


def _new_unit_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Unit:
    """
    One physical, allocatable instance of a unit type.

    Attributes:
        unit_type: Category of the unit
        unit_id: Opaque identifier, generated at creation and never changed
    """

    unit_type: UnitType
    unit_id: str = field(default_factory=_new_unit_id)


__all__ = ["SEDAN", "SUV", "UNIT_TYPES", "VAN", "Unit", "UnitType"]
