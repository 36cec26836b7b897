"""Pytest configuration and shared fixtures for routing and arbitrage tests.

This module provides:
- Pytest markers for test categorization
- Shared pool snapshots and graphs
- Scan settings tuned for tiny raw-unit reserves
"""

import pytest

from amm_arbitrage.config import ScanSettings
from amm_arbitrage.core.graph import PoolGraph
from amm_arbitrage.core.pool import Pool
from tests.fixtures.pool_fixtures import (
    build_graph,
    matched_pools,
    parallel_pools,
    triangle_pools,
)


# ============================================================================
# Pytest Hooks
# ============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "economic: Core economic property tests (profit, fees, ranking)"
    )
    config.addinivalue_line(
        "markers", "edge_case: Edge case and stress tests with extreme inputs"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests spanning multiple components"
    )
    config.addinivalue_line(
        "markers", "slow: Tests taking more than 5 seconds to run"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on location and name."""
    for item in items:
        if "edge_case" in item.nodeid or "edge_case" in item.name:
            item.add_marker(pytest.mark.edge_case)

        if any(keyword in item.nodeid for keyword in ["scanner", "cli", "determinism"]):
            item.add_marker(pytest.mark.integration)

        if any(keyword in item.nodeid for keyword in ["scanner", "optimizer", "tightener"]):
            item.add_marker(pytest.mark.economic)


# ============================================================================
# Pool Fixtures
# ============================================================================


@pytest.fixture
def triangle() -> list[Pool]:
    """Mispriced triangle ERG/A, A/B, ERG/B in raw units."""
    return triangle_pools()


@pytest.fixture
def triangle_graph(triangle) -> PoolGraph:
    return build_graph(triangle)


@pytest.fixture
def matched() -> list[Pool]:
    """Fairly priced triangle: no arbitrage beyond fee noise."""
    return matched_pools()


@pytest.fixture
def matched_graph(matched) -> PoolGraph:
    return build_graph(matched)


@pytest.fixture
def parallel_graph() -> PoolGraph:
    """Two identical ERG/A pools."""
    return build_graph(parallel_pools())


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture
def raw_settings() -> ScanSettings:
    """No network fee and unit search precision, for raw-unit reserves."""
    return ScanSettings(per_hop_fee=0, precision=1)


@pytest.fixture
def fixed_seed() -> int:
    """Fixed random seed for deterministic tests."""
    return 42
