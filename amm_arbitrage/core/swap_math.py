"""Constant product swap math on integer reserves.

Uses the fee-on-input model: only ``(fee_den - fee_num) / fee_den`` of the
input reaches the reserves, and the constant product holds on that net amount:

    out = floor(in * g * R_out / (R_in * fee_den + in * g)),   g = fee_den - fee_num

Forward quotes always floor (the pool never pays out more than it owes) and
inverse quotes always ceil (the trader never under-pays). Both return ``None``
when the trade is infeasible instead of raising, so search loops can treat
infeasibility as ordinary control flow.

Python ints are arbitrary precision, so the intermediate products never overflow.
"""

from decimal import Decimal
from typing import Optional

HUNDRED = Decimal("100")
DEFAULT_SLIPPAGE_PERCENT = Decimal("0.5")


def _valid_fee(fee_num: int, fee_den: int) -> bool:
    return fee_den > 0 and 0 <= fee_num < fee_den


def forward_output(
    reserves_in: int,
    reserves_out: int,
    amount_in: int,
    fee_num: int,
    fee_den: int,
) -> Optional[int]:
    """Output amount for selling ``amount_in`` into the pool, rounded down.

    Args:
        reserves_in: Reserves of the token being sold to the pool
        reserves_out: Reserves of the token being bought from the pool
        amount_in: Gross input amount (fee included)
        fee_num: Fee numerator (fraction of input charged)
        fee_den: Fee denominator

    Returns:
        Floored output amount (may be 0 for dust inputs), or None if the
        inputs are out of domain
    """
    if amount_in <= 0 or reserves_in <= 0 or reserves_out <= 0:
        return None
    if not _valid_fee(fee_num, fee_den):
        return None

    net_in = amount_in * (fee_den - fee_num)
    numerator = net_in * reserves_out
    denominator = reserves_in * fee_den + net_in
    return numerator // denominator


def inverse_input(
    reserves_in: int,
    reserves_out: int,
    amount_out: int,
    fee_num: int,
    fee_den: int,
) -> Optional[int]:
    """Minimal input that yields at least ``amount_out``, rounded up.

    Solves ``in * g * (R_out - out) >= out * R_in * fee_den`` for the smallest
    integer ``in``, so ``forward_output(..., inverse_input(..., y), ...) >= y``.

    Returns:
        Required gross input, or None if ``amount_out`` is not positive or
        would drain the pool (``amount_out >= reserves_out``)
    """
    if amount_out <= 0 or reserves_in <= 0 or reserves_out <= 0:
        return None
    if amount_out >= reserves_out:
        return None
    if not _valid_fee(fee_num, fee_den):
        return None

    numerator = amount_out * reserves_in * fee_den
    denominator = (reserves_out - amount_out) * (fee_den - fee_num)
    return -(-numerator // denominator)


def spot_rate(reserves_in: int, reserves_out: int, fee_num: int, fee_den: int) -> Decimal:
    """Marginal output per unit input at zero trade size, fee included."""
    if reserves_in <= 0 or fee_den <= 0:
        return Decimal("0")
    return (Decimal(reserves_out) * (fee_den - fee_num)) / (Decimal(reserves_in) * fee_den)


def effective_rate(amount_in: int, amount_out: int) -> Decimal:
    """Realized output per unit input."""
    if amount_in <= 0:
        return Decimal("0")
    return Decimal(amount_out) / Decimal(amount_in)


def price_impact(
    reserves_in: int,
    reserves_out: int,
    amount_in: int,
    amount_out: int,
    fee_num: int,
    fee_den: int,
) -> Decimal:
    """Degradation of the realized rate versus the spot rate, in percent.

    Only the trade-size effect is measured: the spot rate already has the fee
    applied, so a dust trade reports ~0% impact.
    """
    if amount_in <= 0 or amount_out <= 0:
        return Decimal("0")
    spot = spot_rate(reserves_in, reserves_out, fee_num, fee_den)
    if spot == 0:
        return Decimal("0")
    impact = (1 - effective_rate(amount_in, amount_out) / spot) * HUNDRED
    return max(impact, Decimal("0"))


def compound_impact(impacts: list[Decimal]) -> Decimal:
    """Combine per-hop impacts (percent): 1 - prod(1 - impact_k)."""
    remaining = Decimal("1")
    for impact in impacts:
        remaining *= 1 - impact / HUNDRED
    return (1 - remaining) * HUNDRED


def fee_amount(amount_in: int, fee_num: int, fee_den: int) -> int:
    """Portion of the input retained as the pool fee, rounded down."""
    if amount_in <= 0 or fee_den <= 0:
        return 0
    return amount_in * fee_num // fee_den


def apply_slippage(amount: int, slippage_percent: Decimal = DEFAULT_SLIPPAGE_PERCENT) -> int:
    """Minimum acceptable output after a slippage tolerance, rounded down."""
    factor = 1 - Decimal(slippage_percent) / HUNDRED
    return max(int(Decimal(amount) * factor), 0)
