"""Pydantic models for pool API requests and responses.

Amounts travel as uint256 decimal strings; field names are camelCase on
the wire.
"""

from pydantic import BaseModel, Field

from amm_pool.models.types import Address, Uint256


class SwapRequest(BaseModel):
    """Exact-input swap of token_in for the pool's other asset."""

    token_in: Address = Field(alias="tokenIn", description="Asset sold to the pool.")
    amount_in: Uint256 = Field(alias="amountIn", description="Gross input amount.")

    model_config = {"populate_by_name": True}


class SwapResponse(BaseModel):
    token_in: Address = Field(alias="tokenIn")
    token_out: Address = Field(alias="tokenOut")
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}


class LiquidityRequest(BaseModel):
    """Amounts of both assets to deposit or withdraw."""

    amount1: Uint256 = Field(description="Amount of the first pool asset.")
    amount2: Uint256 = Field(description="Amount of the second pool asset.")


class AuthorityRequest(BaseModel):
    new_authority: Address = Field(alias="newAuthority")

    model_config = {"populate_by_name": True}


class ReservesResponse(BaseModel):
    reserve1: Uint256
    reserve2: Uint256


class EmergencyWithdrawResponse(BaseModel):
    """Amounts actually swept; reserves are zero afterwards."""

    amount1: Uint256
    amount2: Uint256


class PriceResponse(BaseModel):
    token: Address
    price: Uint256 = Field(description="Other asset per unit of token, scaled by priceScale.")
    price_scale: Uint256 = Field(alias="priceScale")

    model_config = {"populate_by_name": True}


class QuoteResponse(BaseModel):
    token_in: Address = Field(alias="tokenIn")
    token_out: Address = Field(alias="tokenOut")
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}


class PoolState(BaseModel):
    """Static configuration and current reserves of the pool."""

    address: Address
    token1: Address
    token2: Address
    authority: Address
    reserve1: Uint256
    reserve2: Uint256
    fee_numerator: int = Field(alias="feeNumerator")
    fee_denominator: int = Field(alias="feeDenominator")

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    error: str = Field(description="Error class name, e.g. InsufficientLiquidity.")
    detail: str
