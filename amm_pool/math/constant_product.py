"""Constant product pricing: x * y = k.

The fee is deducted from the input before pricing and the whole input is
kept by the pool, so k grows with every swap. All division floors, which
biases every quote slightly in the pool's favor.
"""

from amm_pool.constants import FEE_DENOMINATOR, FEE_NUMERATOR, PRICE_SCALE
from amm_pool.safe_int import S


def amount_in_after_fee(
    amount_in: int,
    fee_numerator: int = FEE_NUMERATOR,
    fee_denominator: int = FEE_DENOMINATOR,
) -> int:
    """Part of the input that participates in pricing.

    Formula: amount_in * (den - num) // den

    For the default 0.30% fee, an input of 100 prices as 99 and any input
    below 2 prices as 0.

    Args:
        amount_in: Gross input amount
        fee_numerator: Fee numerator (default 30)
        fee_denominator: Fee denominator (default 10000)

    Returns:
        Input amount net of the fee, rounded down
    """
    fee_multiplier = S(fee_denominator) - S(fee_numerator)
    return (S(amount_in) * fee_multiplier // S(fee_denominator)).value


def get_amount_out(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    fee_numerator: int = FEE_NUMERATOR,
    fee_denominator: int = FEE_DENOMINATOR,
) -> int:
    """Calculate output amount using constant product formula.

    Formula: amount_out = in_with_fee * res_out // (res_in + in_with_fee)

    This is the largest amount_out for which
    (res_in + in_with_fee) * (res_out - amount_out) >= res_in * res_out.

    Args:
        amount_in: Gross input amount
        reserve_in: Reserve of the input asset
        reserve_out: Reserve of the output asset
        fee_numerator: Fee numerator (default 30)
        fee_denominator: Fee denominator (default 10000)

    Returns:
        Output amount, or 0 when the input or either reserve is empty
    """
    if amount_in <= 0:
        return 0
    if reserve_in <= 0 or reserve_out <= 0:
        return 0

    amount_in_with_fee = S(amount_in_after_fee(amount_in, fee_numerator, fee_denominator))
    numerator = amount_in_with_fee * S(reserve_out)
    denominator = S(reserve_in) + amount_in_with_fee

    return (numerator // denominator).value


def spot_price(reserve_base: int, reserve_quote: int, price_scale: int = PRICE_SCALE) -> int:
    """Price of one unit of the base asset in quote units, scaled by price_scale.

    Returns 0 when either reserve is empty.
    """
    if reserve_base <= 0 or reserve_quote <= 0:
        return 0
    return (S(reserve_quote) * S(price_scale) // S(reserve_base)).value


def constant_product(reserve1: int, reserve2: int) -> int:
    """The invariant k = reserve1 * reserve2."""
    return (S(reserve1) * S(reserve2)).value
