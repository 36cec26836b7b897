"""Synthetic market snapshots."""

from amm_arbitrage.market.synthetic import SyntheticMarket

__all__ = [
    "SyntheticMarket",
]
