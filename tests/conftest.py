"""Shared pytest configuration and fixtures for fleet tests.

This module provides:
- Custom markers for test categorization
- Shared engine fixtures
- Environment-driven knobs for the scheduler tests
"""

import logging
import os
import pytest
from pathlib import Path

from dronefleet.core import EngineConfig, FleetEngine

logger = logging.getLogger(__name__)

# Project root for imports
PROJECT_ROOT = Path(__file__).parent.parent


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Pure Python tests, synchronous ticks only")
    config.addinivalue_line("markers", "sim: Tests driving the background tick scheduler")
    config.addinivalue_line("markers", "slow: Tests that take a long time")


@pytest.fixture
def num_units() -> int:
    """Get unit count from environment."""
    return int(os.environ.get("FLEET_NUM_UNITS", "3"))


@pytest.fixture
def timeout_multiplier() -> float:
    """Get timeout multiplier from environment.

    Use --timeout-multiplier=N with run_tests.py to stretch wall-clock waits.
    """
    return float(os.environ.get("FLEET_TIMEOUT_MULTIPLIER", "1.0"))


@pytest.fixture
def engine_config() -> EngineConfig:
    """Default engine configuration (100 ms ticks, speed 1.0)."""
    return EngineConfig()


@pytest.fixture
def engine(engine_config) -> FleetEngine:
    """Empty fleet engine."""
    return FleetEngine(engine_config)


@pytest.fixture
def populated_engine(engine, num_units) -> FleetEngine:
    """Engine with units u1..uN on the ground along the x axis."""
    for i in range(num_units):
        engine.add_unit(f"u{i + 1}", i * 5.0, 0.0, 0.0)
    return engine


def pytest_collection_modifyitems(config, items):
    """Auto-add markers based on test location."""
    for item in items:
        if "tests/unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)

        if "tests/simulation" in str(item.fspath):
            item.add_marker(pytest.mark.sim)
