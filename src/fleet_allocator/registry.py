# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""UnitRegistry: the fixed inventory of allocatable units."""

import logging
from collections.abc import Iterator, Mapping

from .exceptions import ConfigurationError
from .types.unit import Unit, UnitType

logger = logging.getLogger(__name__)


class UnitRegistry:
    """
    Read-only inventory of units, grouped by type.

    Primary storage: Dict[UnitType, Tuple[Unit, ...]] in creation order
    Secondary index: Dict[unit_id, Unit]

    The per-type order is the allocation tie-break: the engine always picks
    the first free unit in this order, so it never changes after
    construction. Because nothing mutates the registry after ``__init__``
    returns, it needs no lock.
    """

    def __init__(self, inventory: Mapping[UnitType, int]):
        """
        Materialize units from a type -> count mapping.

        Args:
            inventory: Number of units to create for each type

        Raises:
            ConfigurationError: If a key is not a UnitType or a count is
                negative or not an integer
        """
        units_by_type: dict[UnitType, tuple[Unit, ...]] = {}
        units_by_id: dict[str, Unit] = {}

        for key, count in inventory.items():
            unit_type = UnitType.coerce(key)
            if unit_type is None:
                raise ConfigurationError(f"Unknown unit type in inventory: {key!r}")
            if isinstance(count, bool) or not isinstance(count, int):
                raise ConfigurationError(
                    f"Unit count for {unit_type.value} must be an integer, got {count!r}"
                )
            if count < 0:
                raise ConfigurationError(
                    f"Unit count for {unit_type.value} must be non-negative, got {count}"
                )

            units = tuple(Unit(unit_type) for _ in range(count))
            units_by_type[unit_type] = units_by_type.get(unit_type, ()) + units
            for unit in units:
                units_by_id[unit.unit_id] = unit

        self._units_by_type = units_by_type
        self._units_by_id = units_by_id

        logger.debug(
            "UnitRegistry built: %s",
            ", ".join(f"{t.value}={len(u)}" for t, u in units_by_type.items()) or "empty",
        )

    def units_of_type(self, unit_type: UnitType) -> tuple[Unit, ...]:
        """Return units of ``unit_type`` in creation order (empty if none)."""
        return self._units_by_type.get(unit_type, ())

    def count_of_type(self, unit_type: UnitType) -> int:
        return len(self._units_by_type.get(unit_type, ()))

    def get(self, unit_id: str) -> Unit | None:
        return self._units_by_id.get(unit_id)

    def types(self) -> tuple[UnitType, ...]:
        """Return the configured types, including those with zero units."""
        return tuple(self._units_by_type)

    def __contains__(self, unit_id: object) -> bool:
        return unit_id in self._units_by_id

    def __iter__(self) -> Iterator[Unit]:
        for units in self._units_by_type.values():
            yield from units

    def __len__(self) -> int:
        return len(self._units_by_id)
