"""API endpoints for the pool."""

from functools import lru_cache

import structlog
from fastapi import APIRouter, Depends, Header, Query

from amm_pool.config import ServiceSettings
from amm_pool.factory import create_pool_from_settings
from amm_pool.models.api import (
    AuthorityRequest,
    EmergencyWithdrawResponse,
    ErrorResponse,
    LiquidityRequest,
    PoolState,
    PriceResponse,
    QuoteResponse,
    ReservesResponse,
    SwapRequest,
    SwapResponse,
)
from amm_pool.models.types import ADDRESS_PATTERN, normalize_address
from amm_pool.pool import Pool, Reserves

logger = structlog.get_logger()

# Documented bodies for rejected pool operations, see main.ERROR_STATUS
ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    400: {"model": ErrorResponse, "description": "Invalid amount or insufficient liquidity"},
    403: {"model": ErrorResponse, "description": "Caller is not the pool authority"},
    404: {"model": ErrorResponse, "description": "Token is not one of the pool's assets"},
    409: {"model": ErrorResponse, "description": "Pool is busy with a nested call"},
    502: {"model": ErrorResponse, "description": "An asset ledger rejected a transfer"},
}

router = APIRouter(prefix="/pool", responses=ERROR_RESPONSES)


@lru_cache(maxsize=1)
def get_default_pool() -> Pool:
    """Process-wide pool built from AMM_* environment variables."""
    return create_pool_from_settings(ServiceSettings.from_env())


def get_pool() -> Pool:
    """Dependency provider for the pool instance.

    Override this in tests to inject a prepared pool:
        app.dependency_overrides[get_pool] = lambda: pool

    Returns:
        The pool the endpoints operate on.
    """
    return get_default_pool()


def _reserves_response(reserves: Reserves) -> ReservesResponse:
    return ReservesResponse(reserve1=str(reserves.reserve1), reserve2=str(reserves.reserve2))


@router.get("")
def pool_state(pool: Pool = Depends(get_pool)) -> PoolState:
    """Assets, authority, fee and current reserves."""
    reserve1, reserve2 = pool.reserves()
    return PoolState(
        address=pool.address,
        token1=pool.token1,
        token2=pool.token2,
        authority=pool.authority,
        reserve1=str(reserve1),
        reserve2=str(reserve2),
        fee_numerator=pool.config.fee_numerator,
        fee_denominator=pool.config.fee_denominator,
    )


@router.get("/reserves")
def reserves(pool: Pool = Depends(get_pool)) -> ReservesResponse:
    return _reserves_response(pool.reserves())


@router.get("/price/{token}")
def price(token: str, pool: Pool = Depends(get_pool)) -> PriceResponse:
    """Spot price of token in units of the other asset."""
    return PriceResponse(
        token=normalize_address(token),
        price=str(pool.spot_price(token)),
        price_scale=str(pool.config.price_scale),
    )


@router.get("/quote/{token_in}")
def quote(
    token_in: str,
    amount_in: int = Query(alias="amountIn", ge=0),
    pool: Pool = Depends(get_pool),
) -> QuoteResponse:
    """Output a swap would yield now, without executing it."""
    amount_out = pool.quote(token_in, amount_in)
    return QuoteResponse(
        token_in=normalize_address(token_in),
        token_out=pool.get_token_out(token_in),
        amount_in=str(amount_in),
        amount_out=str(amount_out),
    )


@router.post("/swap")
def swap(
    request: SwapRequest,
    caller: str = Header(alias="X-Caller", pattern=ADDRESS_PATTERN),
    pool: Pool = Depends(get_pool),
) -> SwapResponse:
    """Execute an exact-input swap for the caller.

    Error Handling:
        - Pool errors: mapped to 4xx/5xx by the application's exception handler
        - Invalid request schema: 422 Validation Error (Pydantic)
    """
    result = pool.swap(caller, request.token_in, int(request.amount_in))
    return SwapResponse(
        token_in=result.token_in,
        token_out=result.token_out,
        amount_in=str(result.amount_in),
        amount_out=str(result.amount_out),
    )


@router.post("/liquidity/add")
def add_liquidity(
    request: LiquidityRequest,
    caller: str = Header(alias="X-Caller", pattern=ADDRESS_PATTERN),
    pool: Pool = Depends(get_pool),
) -> ReservesResponse:
    reserves = pool.add_liquidity(caller, int(request.amount1), int(request.amount2))
    return _reserves_response(reserves)


@router.post("/liquidity/remove")
def remove_liquidity(
    request: LiquidityRequest,
    caller: str = Header(alias="X-Caller", pattern=ADDRESS_PATTERN),
    pool: Pool = Depends(get_pool),
) -> ReservesResponse:
    reserves = pool.remove_liquidity(caller, int(request.amount1), int(request.amount2))
    return _reserves_response(reserves)


@router.post("/emergency-withdraw")
def emergency_withdraw(
    caller: str = Header(alias="X-Caller", pattern=ADDRESS_PATTERN),
    pool: Pool = Depends(get_pool),
) -> EmergencyWithdrawResponse:
    """Sweep the pool's ledger balances to the authority and zero the reserves."""
    logger.warning("emergency_withdraw_requested", pool=pool.address, caller=caller)
    amount1, amount2 = pool.emergency_withdraw(caller)
    return EmergencyWithdrawResponse(amount1=str(amount1), amount2=str(amount2))


@router.post("/authority")
def transfer_authority(
    request: AuthorityRequest,
    caller: str = Header(alias="X-Caller", pattern=ADDRESS_PATTERN),
    pool: Pool = Depends(get_pool),
) -> PoolState:
    pool.transfer_authority(caller, request.new_authority)
    return pool_state(pool)
