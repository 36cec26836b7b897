"""Circular arbitrage scanner over a pool graph."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from amm_arbitrage.arbitrage.optimizer import ProfitOptimizer
from amm_arbitrage.arbitrage.tightener import tighten
from amm_arbitrage.config import DEFAULT_SETTINGS, ScanSettings
from amm_arbitrage.core.graph import PoolGraph
from amm_arbitrage.core.pool import Path, Pool
from amm_arbitrage.core.swap_math import HUNDRED
from amm_arbitrage.routing.paths import find_cycles
from amm_arbitrage.routing.quoter import RouteQuote, quote_route

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CircularArb:
    """One profitable cycle at its optimized input."""
    path_label: str
    hops: int
    pool_ids: tuple[str, ...]
    optimal_input: int
    output: int
    gross_profit: int
    tx_fee: int
    net_profit: int
    profit_pct: Decimal
    price_impact: Decimal  # percent
    tightened: bool
    route: RouteQuote


@dataclass(frozen=True)
class ArbSnapshot:
    """Ranked scan result, best net profit first."""
    windows: tuple[CircularArb, ...]
    total_net_profit: int
    scan_time_ms: Decimal

    def __len__(self) -> int:
        return len(self.windows)


class ArbitrageScanner:
    """Finds every profitable cycle through the base token.

    For each cycle: search the profit-maximizing input, quote there, tighten
    the route backwards, then charge the fixed per-hop fee. Cycles only read
    the shared graph, so they are evaluated independently on a thread pool
    when ``n_workers > 1``. Results are merged in cycle order before ranking,
    which keeps the output independent of scheduling.
    """

    def __init__(self, settings: ScanSettings = DEFAULT_SETTINGS):
        self.settings = settings
        self.optimizer = ProfitOptimizer(
            max_iterations=settings.max_iterations,
            precision=settings.precision,
        )

    def evaluate_cycle(self, cycle: Path) -> Optional[CircularArb]:
        """Optimize, quote and tighten one cycle; None when nothing is tradable.

        The minimum net profit filter is applied by :meth:`scan`, not here.
        """
        lo = self.settings.min_input
        hi = min(cycle[0].reserves_in, self.settings.max_input)
        amount_in = self.optimizer.optimize(cycle, lo, hi)
        if amount_in is None:
            logger.debug("Skipping cycle with empty search range (%d, %d)", lo, hi)
            return None

        forward = quote_route(cycle, amount_in)
        if forward is None:
            logger.debug("Skipping cycle unquotable at %d", amount_in)
            return None

        result = tighten(cycle, forward)
        route = result.route
        hops = len(cycle)
        gross = route.total_output - route.total_input
        tx_fee = self.settings.per_hop_fee * hops
        net = gross - tx_fee
        return CircularArb(
            path_label=route.path_label,
            hops=hops,
            pool_ids=route.pool_ids,
            optimal_input=route.total_input,
            output=route.total_output,
            gross_profit=gross,
            tx_fee=tx_fee,
            net_profit=net,
            profit_pct=Decimal(net) / Decimal(route.total_input) * HUNDRED,
            price_impact=route.total_price_impact,
            tightened=result.tightened,
            route=route,
        )

    def scan(
        self,
        graph: PoolGraph,
        max_hops: Optional[int] = None,
        min_net_profit: Optional[int] = None,
    ) -> ArbSnapshot:
        """Scan all cycles through ``settings.base_token``.

        Args:
            graph: Pool graph for one reserves snapshot
            max_hops: Override for ``settings.max_hops``
            min_net_profit: Override for ``settings.min_net_profit``

        Returns:
            ArbSnapshot sorted by net profit, descending
        """
        start = time.perf_counter()
        max_hops = self.settings.max_hops if max_hops is None else max_hops
        min_net_profit = self.settings.min_net_profit if min_net_profit is None else min_net_profit

        cycles = find_cycles(graph, self.settings.base_token, max_hops)
        if self.settings.n_workers > 1 and len(cycles) > 1:
            with ThreadPoolExecutor(max_workers=self.settings.n_workers) as executor:
                evaluated = list(executor.map(self.evaluate_cycle, cycles))
        else:
            evaluated = [self.evaluate_cycle(cycle) for cycle in cycles]

        windows = [arb for arb in evaluated if arb is not None and arb.net_profit >= min_net_profit]
        windows.sort(key=lambda arb: arb.net_profit, reverse=True)
        total = sum(arb.net_profit for arb in windows)
        elapsed_ms = Decimal(str(round((time.perf_counter() - start) * 1000, 3)))

        logger.info(
            "Scanned %d cycles from %s: %d windows, total net profit %d (%s ms)",
            len(cycles), self.settings.base_token, len(windows), total, elapsed_ms,
        )
        return ArbSnapshot(
            windows=tuple(windows),
            total_net_profit=total,
            scan_time_ms=elapsed_ms,
        )

    def scan_pools(self, pools: Iterable[Pool]) -> ArbSnapshot:
        """Build a graph with ``settings.min_liquidity`` and scan it."""
        graph = PoolGraph.build(pools, min_liquidity=self.settings.min_liquidity)
        return self.scan(graph)
