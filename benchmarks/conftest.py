"""
Shared fixtures for benchmark tests.
"""

from datetime import datetime

import pytest

from fleet_allocator import AllocationEngine, UnifiedMetricsCollector, UnitType


@pytest.fixture
def benchmark_collector():
    return UnifiedMetricsCollector(enable_prometheus=False)


@pytest.fixture
def large_fleet(benchmark_collector):
    """Engine with a fleet large enough that scans are not trivially short."""
    return AllocationEngine(
        {UnitType.SEDAN: 200, UnitType.SUV: 100, UnitType.VAN: 50},
        metrics=benchmark_collector,
    )


@pytest.fixture
def base_start():
    return datetime(2026, 1, 1, 9, 0)
