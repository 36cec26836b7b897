"""Path finding, route quoting and point-to-point routing."""

from amm_arbitrage.routing.oracle import OracleArbSnapshot, OracleArbWindow, oracle_arb_snapshot
from amm_arbitrage.routing.paths import find_cycles, find_paths
from amm_arbitrage.routing.quoter import (
    HopQuote,
    RouteQuote,
    SlippageQuote,
    make_slippage_quote,
    quote_route,
    quote_route_reverse,
)
from amm_arbitrage.routing.router import RoutesResponse, SmartRouter

__all__ = [
    "OracleArbSnapshot",
    "OracleArbWindow",
    "oracle_arb_snapshot",
    "find_cycles",
    "find_paths",
    "HopQuote",
    "RouteQuote",
    "SlippageQuote",
    "make_slippage_quote",
    "quote_route",
    "quote_route_reverse",
    "RoutesResponse",
    "SmartRouter",
]
