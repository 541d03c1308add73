"""Shared fixtures for fleet allocator unit tests."""

from datetime import datetime

import pytest

from fleet_allocator import AllocationEngine, UnifiedMetricsCollector, UnitType


@pytest.fixture
def collector():
    """Isolated collector with Prometheus registration disabled."""
    return UnifiedMetricsCollector(enable_prometheus=False)


@pytest.fixture
def make_engine(collector):
    """Factory building engines that report to the isolated collector."""

    def _make(inventory=None):
        return AllocationEngine(inventory or {UnitType.SEDAN: 1}, metrics=collector)

    return _make


@pytest.fixture
def march_first():
    return datetime(2026, 3, 1, 10, 0)
