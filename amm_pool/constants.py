"""Protocol constants for the constant-product pool.

Centralizes the fee and price-scaling parameters shared by the engine,
the configuration layer and the HTTP service.
"""

# Swap fee as a fraction (30 / 10000 = 0.30%)
# The fee is taken from the input and stays in the pool
FEE_NUMERATOR = 30
FEE_DENOMINATOR = 10_000

# Spot price scaling factor (1e18 for precision)
# Used to express fractional prices as integers
PRICE_SCALE = 10**18

# Maximum uint256 value; reserves and amounts must fit in it
UINT256_MAX = 2**256 - 1
