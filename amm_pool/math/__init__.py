"""Pure integer math for the constant-product pool."""

from amm_pool.math.constant_product import (
    amount_in_after_fee,
    constant_product,
    get_amount_out,
    spot_price,
)

__all__ = [
    "amount_in_after_fee",
    "constant_product",
    "get_amount_out",
    "spot_price",
]
