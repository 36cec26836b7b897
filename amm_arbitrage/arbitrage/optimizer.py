"""Trade size search for a single cycle."""

from dataclasses import dataclass
from typing import Optional

from amm_arbitrage.config import DEFAULT_MAX_ITERATIONS, DEFAULT_PRECISION
from amm_arbitrage.core.pool import Path
from amm_arbitrage.routing.quoter import quote_route


@dataclass(frozen=True)
class ProfitOptimizer:
    """Integer ternary search for the input maximizing ``output - input``.

    The profit curve of a constant product cycle rises while the price gap
    dominates and falls once price impact takes over, so it is treated as
    unimodal. Integer rounding can create small plateaus; on ties the search
    keeps the larger candidate. This is an approximation, not a guaranteed
    global optimum.
    """
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    precision: int = DEFAULT_PRECISION

    def profit(self, cycle: Path, amount_in: int) -> Optional[int]:
        """Gross profit at ``amount_in``, or None where the cycle cannot be quoted."""
        route = quote_route(cycle, amount_in)
        if route is None:
            return None
        return route.total_output - amount_in

    def optimize(self, cycle: Path, lo: int, hi: int) -> Optional[int]:
        """Return the best input in ``[lo, hi]``, or None if the range is empty.

        Only the scalar is returned; callers re-quote at it for the final numbers.
        """
        if hi <= lo:
            return None

        precision = max(self.precision, 1)
        for _ in range(self.max_iterations):
            if hi - lo <= precision:
                break
            third = max((hi - lo) // 3, 1)
            m1 = lo + third
            m2 = hi - third
            p1 = self.profit(cycle, m1)
            p2 = self.profit(cycle, m2)
            if p1 is None or (p2 is not None and p1 <= p2):
                lo = m1
            else:
                hi = m2
        return (lo + hi) // 2
