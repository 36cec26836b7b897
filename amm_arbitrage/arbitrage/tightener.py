"""Reverse tightening of a forward-quoted route.

Forward quoting floors every hop, so the input chosen by the optimizer can
carry slack: a smaller input may still reach the same final output. Walking
the hops backwards with the ceiling-rounded inverse swap finds the minimal
input for that output.
"""

import logging
from dataclasses import dataclass

from amm_arbitrage.core.pool import Path
from amm_arbitrage.routing.quoter import RouteQuote, quote_route, required_input

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TightenResult:
    route: RouteQuote
    tightened: bool


def tighten(path: Path, route: RouteQuote) -> TightenResult:
    """Re-derive the minimal input for ``route.total_output`` along ``path``.

    The returned route always comes from a fresh forward quote, so its input,
    output and per-hop detail are consistent. If any hop cannot be inverted,
    or the re-quote would fall short, the forward route is returned unchanged.
    """
    target = route.total_output
    amount_in = required_input(path, target)
    if amount_in is None:
        logger.debug("Tightening unavailable for %s; keeping forward route", route.path_label)
        return TightenResult(route, False)

    if amount_in >= route.total_input:
        return TightenResult(route, False)

    tightened = quote_route(path, amount_in)
    if tightened is None or tightened.total_output < target:
        logger.debug("Tightened re-quote fell short for %s", route.path_label)
        return TightenResult(route, False)

    return TightenResult(tightened, True)
