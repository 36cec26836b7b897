"""Point-to-point smart router with order splitting and depth analysis."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from amm_arbitrage.config import DEFAULT_PRECISION
from amm_arbitrage.core.graph import DEFAULT_MAX_POOLS_PER_PAIR, PoolGraph
from amm_arbitrage.core.pool import NATIVE_TOKEN_ID, Edge, Path, Pool
from amm_arbitrage.core.swap_math import DEFAULT_SLIPPAGE_PERCENT, HUNDRED
from amm_arbitrage.routing.oracle import DEFAULT_MIN_OUTPUT, OracleArbSnapshot, oracle_arb_snapshot
from amm_arbitrage.routing.paths import find_paths
from amm_arbitrage.routing.quoter import (
    RouteQuote,
    SlippageQuote,
    make_slippage_quote,
    quote_route,
    quote_route_reverse,
)

logger = logging.getLogger(__name__)

PERMILLE = 1000
MAX_SPLIT_ROUTES = 3
MULTI_SPLIT_STEP = 10  # permille, i.e. 1%
MULTI_SPLIT_ROUNDS = 5
MIN_SPLIT_IMPROVEMENT_PERCENT = Decimal("0.5")

# Price impact tiers as fractions of the input reserves.
IMPACT_TIERS = (Decimal("0.005"), Decimal("0.01"), Decimal("0.02"), Decimal("0.05"), Decimal("0.10"))


@dataclass(frozen=True)
class SplitAllocation:
    route_index: int
    fraction: Decimal
    input_amount: int
    output_amount: int


@dataclass(frozen=True)
class SplitRoute:
    allocations: tuple[SplitAllocation, ...]
    total_output: int
    total_input: int


@dataclass(frozen=True)
class SplitAllocationDetail:
    route: RouteQuote
    fraction: Decimal
    input_amount: int
    output_amount: int


@dataclass(frozen=True)
class SplitRouteDetail:
    """A split that beats the best single route, with full route details."""
    allocations: tuple[SplitAllocationDetail, ...]
    total_output: int
    total_input: int
    improvement_pct: Decimal


@dataclass(frozen=True)
class DepthTiers:
    """Largest input per price impact tier for one edge.

    ``tiers`` holds ``(impact_percent, max_input)`` pairs.
    """
    pool_id: str
    token_in: str
    token_out: str
    tiers: tuple[tuple[Decimal, int], ...]


@dataclass(frozen=True)
class RoutesResponse:
    routes: tuple[SlippageQuote, ...]
    depth_tiers: tuple[DepthTiers, ...]
    split: Optional[SplitRouteDetail]


def _output_or_zero(path: Path, amount_in: int) -> int:
    if amount_in <= 0:
        return 0
    route = quote_route(path, amount_in)
    return route.total_output if route is not None else 0


def _inputs_for(fractions: Sequence[int], total_input: int) -> list[int]:
    """Turn permille fractions into integer inputs that sum to ``total_input``."""
    inputs = [total_input * f // PERMILLE for f in fractions]
    dust = total_input - sum(inputs)
    if dust:
        for k, f in enumerate(fractions):
            if f > 0:
                inputs[k] += dust
                break
    return inputs


class SmartRouter:
    """Finds the best routes between two tokens.

    Enumerates all simple paths up to ``max_hops``, quotes them and ranks
    them. For large orders an optional split across the top 2-3 routes is
    searched numerically, since no closed form exists once routes share
    intermediate tokens and fees compound over several hops.
    """

    def __init__(
        self,
        max_hops: int = 3,
        max_routes: int = 5,
        max_pools_per_pair: Optional[int] = DEFAULT_MAX_POOLS_PER_PAIR,
        slippage_percent: Decimal = DEFAULT_SLIPPAGE_PERCENT,
    ):
        if max_hops < 1:
            raise ValueError(f"max_hops must be >= 1, got {max_hops}")
        if max_routes < 1:
            raise ValueError(f"max_routes must be >= 1, got {max_routes}")
        self.max_hops = max_hops
        self.max_routes = max_routes
        self.max_pools_per_pair = max_pools_per_pair
        self.slippage_percent = Decimal(slippage_percent)

    def build_graph(self, pools: Iterable[Pool], min_liquidity: int = 0) -> PoolGraph:
        """Build a graph pruned to this router's per-pair limit."""
        return PoolGraph.build(
            pools,
            min_liquidity=min_liquidity,
            max_pools_per_pair=self.max_pools_per_pair,
        )

    def find_best_routes(
        self, graph: PoolGraph, source: str, target: str, amount_in: int
    ) -> list[RouteQuote]:
        """Quote every path for ``amount_in``; best output first."""
        paths = find_paths(graph, source, target, self.max_hops)
        routes = [r for r in (quote_route(p, amount_in) for p in paths) if r is not None]
        routes.sort(key=lambda r: r.total_output, reverse=True)
        logger.debug(
            "%s -> %s: %d paths, %d quotable", source, target, len(paths), len(routes)
        )
        return routes[: self.max_routes]

    def find_best_routes_by_output(
        self, graph: PoolGraph, source: str, target: str, desired_output: int
    ) -> list[RouteQuote]:
        """Cheapest routes delivering at least ``desired_output``; lowest input first."""
        paths = find_paths(graph, source, target, self.max_hops)
        routes = [
            r for r in (quote_route_reverse(p, desired_output) for p in paths) if r is not None
        ]
        routes.sort(key=lambda r: r.total_input)
        return routes[: self.max_routes]

    def optimize_split(
        self, paths: Sequence[Path], total_input: int, max_splits: int = 2
    ) -> SplitRoute:
        """Split ``total_input`` across the first ``max_splits`` paths.

        Two routes are searched exhaustively on a permille grid. Three routes
        use coordinate refinement in 1% steps.

        Args:
            paths: Candidate paths, best single route first
            total_input: Amount to distribute
            max_splits: Number of routes to consider (capped at 3)

        Returns:
            SplitRoute; allocations with zero input are omitted
        """
        n = min(max_splits, len(paths), MAX_SPLIT_ROUTES)
        if n <= 1:
            output = _output_or_zero(paths[0], total_input) if paths else 0
            return SplitRoute(
                allocations=(SplitAllocation(0, Decimal(1), total_input, output),),
                total_output=output,
                total_input=total_input,
            )
        if n == 2:
            fractions = self._split_two(paths, total_input)
        else:
            fractions = self._split_multi(paths[:n], total_input)
        return self._allocate(paths, fractions, total_input)

    def _split_two(self, paths: Sequence[Path], total_input: int) -> list[int]:
        best_total = 0
        best_permille = PERMILLE
        for permille in range(PERMILLE + 1):
            input_a = total_input * permille // PERMILLE
            total = (
                _output_or_zero(paths[0], input_a)
                + _output_or_zero(paths[1], total_input - input_a)
            )
            if total > best_total:
                best_total = total
                best_permille = permille
        return [best_permille, PERMILLE - best_permille]

    def _split_multi(self, paths: Sequence[Path], total_input: int) -> list[int]:
        n = len(paths)
        fractions = [PERMILLE // n] * n
        fractions[0] += PERMILLE - sum(fractions)

        def total_for(candidate: list[int]) -> int:
            inputs = _inputs_for(candidate, total_input)
            return sum(_output_or_zero(p, amt) for p, amt in zip(paths, inputs))

        best_total = total_for(fractions)
        for _ in range(MULTI_SPLIT_ROUNDS):
            for i in range(n):
                others = [j for j in range(n) if j != i]
                other_sum = sum(fractions[j] for j in others)
                for f in range(0, PERMILLE + 1, MULTI_SPLIT_STEP):
                    candidate = list(fractions)
                    candidate[i] = f
                    remaining = PERMILLE - f
                    # Rescale the other routes to fill what route i leaves over.
                    for j in others[:-1]:
                        share = (
                            remaining * fractions[j] // other_sum
                            if other_sum
                            else remaining // len(others)
                        )
                        candidate[j] = share
                    candidate[others[-1]] = remaining - sum(candidate[j] for j in others[:-1])
                    total = total_for(candidate)
                    if total > best_total:
                        best_total = total
                        fractions = candidate
                        other_sum = sum(fractions[j] for j in others)
        return fractions

    def _allocate(
        self, paths: Sequence[Path], fractions: list[int], total_input: int
    ) -> SplitRoute:
        inputs = _inputs_for(fractions, total_input)
        allocations = []
        for k, (fraction, amount) in enumerate(zip(fractions, inputs)):
            if amount <= 0:
                continue
            allocations.append(SplitAllocation(
                route_index=k,
                fraction=Decimal(fraction) / PERMILLE,
                input_amount=amount,
                output_amount=_output_or_zero(paths[k], amount),
            ))
        return SplitRoute(
            allocations=tuple(allocations),
            total_output=sum(a.output_amount for a in allocations),
            total_input=total_input,
        )

    def optimize_split_detailed(
        self,
        graph: PoolGraph,
        source: str,
        target: str,
        total_input: int,
        max_splits: int = 2,
    ) -> Optional[SplitRouteDetail]:
        """Best split over the top-ranked paths, if it is worth splitting.

        Returns None unless the split improves on the best single route by
        at least 0.5% and uses at least two routes.
        """
        paths = find_paths(graph, source, target, self.max_hops)
        ranked = []
        for path in paths:
            route = quote_route(path, total_input)
            if route is not None:
                ranked.append((route.total_output, path))
        ranked.sort(key=lambda item: item[0], reverse=True)
        if not ranked or ranked[0][0] == 0:
            return None

        n = min(max_splits, len(ranked), MAX_SPLIT_ROUTES)
        if n < 2:
            return None

        best_single = ranked[0][0]
        top_paths = [path for _, path in ranked[:n]]
        split = self.optimize_split(top_paths, total_input, n)

        improvement = Decimal(split.total_output - best_single) / Decimal(best_single) * HUNDRED
        if improvement < MIN_SPLIT_IMPROVEMENT_PERCENT:
            return None

        details = []
        for alloc in split.allocations:
            route = quote_route(top_paths[alloc.route_index], alloc.input_amount)
            if route is not None:
                details.append(SplitAllocationDetail(
                    route=route,
                    fraction=alloc.fraction,
                    input_amount=alloc.input_amount,
                    output_amount=alloc.output_amount,
                ))
        if len(details) < 2:
            return None

        logger.debug("Split across %d routes improves output by %.3f%%", len(details), improvement)
        return SplitRouteDetail(
            allocations=tuple(details),
            total_output=split.total_output,
            total_input=split.total_input,
            improvement_pct=improvement,
        )

    @staticmethod
    def depth_tiers(edge: Edge) -> DepthTiers:
        """Max input per impact tier: ``reserves_in * impact / (1 - impact)``."""
        tiers = tuple(
            (impact * HUNDRED, int(edge.reserves_in * impact / (1 - impact)))
            for impact in IMPACT_TIERS
        )
        return DepthTiers(
            pool_id=edge.pool_id,
            token_in=edge.token_in,
            token_out=edge.token_out,
            tiers=tiers,
        )

    def all_depth_tiers(self, graph: PoolGraph, token: str) -> list[DepthTiers]:
        return [self.depth_tiers(edge) for edge in graph.edges_from(token)]

    def find_routes(
        self,
        graph: PoolGraph,
        source: str,
        target: str,
        amount_in: int,
        max_splits: int = 2,
    ) -> RoutesResponse:
        """Best routes, depth tiers of the source token, and an optional split."""
        routes = self.find_best_routes(graph, source, target, amount_in)
        return RoutesResponse(
            routes=tuple(make_slippage_quote(r, self.slippage_percent) for r in routes),
            depth_tiers=tuple(self.all_depth_tiers(graph, source)),
            split=self.optimize_split_detailed(graph, source, target, amount_in, max_splits),
        )

    def oracle_arb_snapshot(
        self,
        graph: PoolGraph,
        target: str,
        oracle_rate: Decimal,
        source: str = NATIVE_TOKEN_ID,
        min_output: int = DEFAULT_MIN_OUTPUT,
        precision: int = DEFAULT_PRECISION,
    ) -> OracleArbSnapshot:
        """Below-oracle windows for every route up to this router's ``max_hops``."""
        return oracle_arb_snapshot(
            graph, target, oracle_rate,
            source=source,
            max_hops=self.max_hops,
            min_output=min_output,
            precision=precision,
        )
