"""Circular arbitrage detection."""

from amm_arbitrage.arbitrage.optimizer import ProfitOptimizer
from amm_arbitrage.arbitrage.scanner import ArbitrageScanner, ArbSnapshot, CircularArb
from amm_arbitrage.arbitrage.tightener import TightenResult, tighten

__all__ = [
    "ProfitOptimizer",
    "ArbitrageScanner",
    "ArbSnapshot",
    "CircularArb",
    "TightenResult",
    "tighten",
]
