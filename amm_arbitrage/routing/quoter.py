"""Route quoting: chain swap math across the hops of a path."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from amm_arbitrage.core import swap_math
from amm_arbitrage.core.pool import Edge, Path, PoolKind


@dataclass(frozen=True)
class HopQuote:
    """One hop of a quoted route."""
    pool_id: str
    kind: PoolKind
    token_in: str
    token_out: str
    display_name: str
    input_amount: int
    output_amount: int
    price_impact: Decimal  # percent
    fee_amount: int  # in units of token_in
    fee_num: int
    fee_den: int
    reserves_in: int
    reserves_out: int
    label_in: str = ""
    label_out: str = ""


@dataclass(frozen=True)
class RouteQuote:
    """A path evaluated at one input amount."""
    hops: tuple[HopQuote, ...]
    total_input: int
    total_output: int
    total_price_impact: Decimal  # percent, compounded over hops
    total_fees: int  # sum of per-hop fee amounts
    effective_rate: Decimal

    @property
    def path_label(self) -> str:
        if not self.hops:
            return ""
        labels = [self.hops[0].label_in]
        labels.extend(hop.label_out for hop in self.hops)
        return " → ".join(labels)

    @property
    def pool_ids(self) -> tuple[str, ...]:
        return tuple(hop.pool_id for hop in self.hops)

    @property
    def hop_count(self) -> int:
        return len(self.hops)


@dataclass(frozen=True)
class SlippageQuote:
    route: RouteQuote
    min_output: int
    slippage_percent: Decimal


def _hop(edge: Edge, amount_in: int, amount_out: int) -> HopQuote:
    return HopQuote(
        pool_id=edge.pool_id,
        kind=edge.kind,
        token_in=edge.token_in,
        token_out=edge.token_out,
        display_name=edge.display_name,
        input_amount=amount_in,
        output_amount=amount_out,
        price_impact=swap_math.price_impact(
            edge.reserves_in, edge.reserves_out, amount_in, amount_out,
            edge.fee_num, edge.fee_den,
        ),
        fee_amount=swap_math.fee_amount(amount_in, edge.fee_num, edge.fee_den),
        fee_num=edge.fee_num,
        fee_den=edge.fee_den,
        reserves_in=edge.reserves_in,
        reserves_out=edge.reserves_out,
        label_in=edge.label_in,
        label_out=edge.label_out,
    )


def quote_route(path: Path, amount_in: int) -> Optional[RouteQuote]:
    """Quote ``path`` forward from ``amount_in``.

    Each hop's output is the next hop's input. Returns None as soon as any hop
    cannot produce a positive output.
    """
    if not path or amount_in <= 0:
        return None

    hops = []
    current = amount_in
    for edge in path:
        out = swap_math.forward_output(
            edge.reserves_in, edge.reserves_out, current, edge.fee_num, edge.fee_den
        )
        if not out:
            return None
        hops.append(_hop(edge, current, out))
        current = out

    return RouteQuote(
        hops=tuple(hops),
        total_input=amount_in,
        total_output=current,
        total_price_impact=swap_math.compound_impact([h.price_impact for h in hops]),
        total_fees=sum(h.fee_amount for h in hops),
        effective_rate=swap_math.effective_rate(amount_in, current),
    )


def required_input(path: Path, desired_output: int) -> Optional[int]:
    """Minimal input at the head of ``path`` that delivers ``desired_output``.

    Walks the hops backwards with the inverse swap. None if any hop cannot
    deliver what the hop after it needs.
    """
    if not path or desired_output <= 0:
        return None

    needed = desired_output
    for edge in reversed(path):
        needed = swap_math.inverse_input(
            edge.reserves_in, edge.reserves_out, needed, edge.fee_num, edge.fee_den
        )
        if needed is None:
            return None
    return needed


def quote_route_reverse(path: Path, desired_output: int) -> Optional[RouteQuote]:
    """Quote the cheapest input for ``desired_output`` along ``path``.

    The reported numbers all come from a forward quote at the required input,
    so ``total_output >= desired_output``.
    """
    amount_in = required_input(path, desired_output)
    if amount_in is None:
        return None
    return quote_route(path, amount_in)


def make_slippage_quote(
    route: RouteQuote,
    slippage_percent: Decimal = swap_math.DEFAULT_SLIPPAGE_PERCENT,
) -> SlippageQuote:
    return SlippageQuote(
        route=route,
        min_output=swap_math.apply_slippage(route.total_output, slippage_percent),
        slippage_percent=Decimal(slippage_percent),
    )
