"""Below-oracle windows: how much can be bought cheaper than a reference rate.

For every path from the source token to the target token, a binary search finds
the largest input whose effective rate (target per source, raw units) still
meets the oracle rate. Constant-product routes get worse as the input grows, so
everything up to that input is bought below the oracle price.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from amm_arbitrage.config import DEFAULT_PRECISION
from amm_arbitrage.core.graph import PoolGraph
from amm_arbitrage.core.pool import NATIVE_TOKEN_ID, Path
from amm_arbitrage.core.swap_math import HUNDRED
from amm_arbitrage.routing.paths import find_paths
from amm_arbitrage.routing.quoter import RouteQuote, quote_route

logger = logging.getLogger(__name__)

BREAKEVEN_ITERATIONS = 40
DEFAULT_MIN_OUTPUT = 10
SPOT_SAMPLE_DIVISOR = 10


@dataclass(frozen=True)
class OracleArbWindow:
    """One route's below-oracle window."""
    path_label: str
    hops: int
    pool_ids: tuple[str, ...]
    spot_rate: Decimal
    discount_pct: Decimal  # positive when the route is cheaper than the oracle
    rate_at_max: Decimal
    max_input: int
    output_at_max: int
    price_impact_at_max: Decimal
    route: RouteQuote


@dataclass(frozen=True)
class OracleArbSnapshot:
    oracle_rate: Decimal
    windows: tuple[OracleArbWindow, ...]
    total_output: int
    total_input: int


def breakeven_route(
    path: Path,
    oracle_rate: Decimal,
    max_bound: int,
    precision: int = DEFAULT_PRECISION,
    max_iterations: int = BREAKEVEN_ITERATIONS,
) -> Optional[RouteQuote]:
    """Route at the largest input in ``[0, max_bound]`` whose rate meets ``oracle_rate``.

    Unquotable inputs count as below the oracle, so thin routes converge to
    the range where they both quote and beat it. None if no sampled input did.
    """
    lo, hi = 0, max_bound
    best = None
    for _ in range(max_iterations):
        if hi <= lo + precision:
            break
        mid = lo + (hi - lo) // 2
        route = quote_route(path, mid)
        if route is not None and route.effective_rate >= oracle_rate:
            best = route
            lo = mid
        else:
            hi = mid
    return best


def oracle_arb_snapshot(
    graph: PoolGraph,
    target: str,
    oracle_rate: Decimal,
    source: str = NATIVE_TOKEN_ID,
    max_hops: int = 3,
    min_output: int = DEFAULT_MIN_OUTPUT,
    precision: int = DEFAULT_PRECISION,
) -> OracleArbSnapshot:
    """All routes from ``source`` to ``target`` that beat ``oracle_rate``.

    Args:
        graph: Pool graph for one reserves snapshot
        target: Token being bought
        oracle_rate: Reference price as raw target units per raw source unit
        source: Token being spent
        max_hops: Maximum route length
        min_output: Windows delivering less than this are dropped as dust
        precision: Binary search stops once the bracket is this narrow

    Returns:
        OracleArbSnapshot with windows sorted by output at breakeven, descending
    """
    oracle_rate = Decimal(oracle_rate)
    if oracle_rate <= 0:
        return OracleArbSnapshot(oracle_rate, (), 0, 0)

    windows = []
    for path in find_paths(graph, source, target, max_hops):
        best = breakeven_route(path, oracle_rate, path[0].reserves_in, precision)
        if best is None or best.total_output == 0:
            continue

        # Marginal rate near the start of the window
        sample = max(best.total_input // SPOT_SAMPLE_DIVISOR, precision)
        spot = quote_route(path, sample)
        spot_rate = spot.effective_rate if spot is not None else best.effective_rate

        windows.append(OracleArbWindow(
            path_label=best.path_label,
            hops=best.hop_count,
            pool_ids=best.pool_ids,
            spot_rate=spot_rate,
            discount_pct=(spot_rate - oracle_rate) / oracle_rate * HUNDRED,
            rate_at_max=best.effective_rate,
            max_input=best.total_input,
            output_at_max=best.total_output,
            price_impact_at_max=best.total_price_impact,
            route=best,
        ))

    windows = [w for w in windows if w.output_at_max >= min_output]
    windows.sort(key=lambda w: w.output_at_max, reverse=True)
    logger.debug(
        "%s -> %s below oracle %s: %d windows", source, target, oracle_rate, len(windows)
    )
    return OracleArbSnapshot(
        oracle_rate=oracle_rate,
        windows=tuple(windows),
        total_output=sum(w.output_at_max for w in windows),
        total_input=sum(w.max_input for w in windows),
    )
