# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Engine Configuration for Fleet Allocator

This module provides the configuration class for the allocation engine,
covering the starting inventory and metrics settings.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from .exceptions import ConfigurationError
from .types.unit import UnitType


@dataclass
class EngineConfig:
    """
    Configuration for the allocation engine.

    Inventory keys may be ``UnitType`` members or their string values; they
    are normalized to ``UnitType`` during validation.
    """

    # === Inventory ===

    inventory: Mapping[UnitType | str, int] = field(default_factory=dict)
    """Number of units to create per type. Zero is allowed."""

    # === Metrics and Monitoring ===

    metrics_enabled: bool = True
    """Enable metrics collection."""

    enable_prometheus: bool = True
    """Register metrics with prometheus_client (used by the default collector)."""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        normalized: dict[UnitType, int] = {}
        for key, count in self.inventory.items():
            unit_type = UnitType.coerce(key)
            if unit_type is None:
                raise ConfigurationError(f"Unknown unit type in inventory: {key!r}")
            if unit_type in normalized:
                raise ConfigurationError(
                    f"Unit type {unit_type.value} is listed more than once"
                )
            if isinstance(count, bool) or not isinstance(count, int):
                raise ConfigurationError(
                    f"Unit count for {unit_type.value} must be an integer, got {count!r}"
                )
            if count < 0:
                raise ConfigurationError(
                    f"Unit count for {unit_type.value} must be non-negative, got {count}"
                )
            normalized[unit_type] = count
        self.inventory = normalized

    @property
    def total_units(self) -> int:
        return sum(self.inventory.values())


__all__ = ["EngineConfig"]
