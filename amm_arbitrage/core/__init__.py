"""Core pool math and value types."""

from amm_arbitrage.core.pool import NATIVE_TOKEN_ID, Edge, Path, Pool, PoolKind
from amm_arbitrage.core.graph import PoolGraph
from amm_arbitrage.core.swap_math import forward_output, inverse_input

__all__ = [
    "NATIVE_TOKEN_ID",
    "Edge",
    "Path",
    "Pool",
    "PoolKind",
    "PoolGraph",
    "forward_output",
    "inverse_input",
]
