"""Test fixtures for routing and arbitrage tests."""

from tests.fixtures.pool_fixtures import (
    ERG,
    NANO,
    build_graph,
    matched_pools,
    native_pool,
    parallel_pools,
    snapshot_document,
    token_pool,
    triangle_pools,
)

__all__ = [
    "ERG",
    "NANO",
    "build_graph",
    "matched_pools",
    "native_pool",
    "parallel_pools",
    "snapshot_document",
    "token_pool",
    "triangle_pools",
]
