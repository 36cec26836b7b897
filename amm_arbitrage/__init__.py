"""AMM routing and circular arbitrage engine."""

from amm_arbitrage.core.pool import Pool, PoolKind
from amm_arbitrage.core.graph import PoolGraph
from amm_arbitrage.config import ScanSettings
from amm_arbitrage.arbitrage.scanner import ArbitrageScanner, ArbSnapshot, CircularArb
from amm_arbitrage.routing.router import SmartRouter

__all__ = [
    "Pool",
    "PoolKind",
    "PoolGraph",
    "ScanSettings",
    "ArbitrageScanner",
    "ArbSnapshot",
    "CircularArb",
    "SmartRouter",
]
