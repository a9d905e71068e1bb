"""Pydantic models for the pool HTTP API."""

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
from amm_pool.models.types import Address, Uint256, normalize_address

__all__ = [
    "Address",
    "AuthorityRequest",
    "EmergencyWithdrawResponse",
    "ErrorResponse",
    "LiquidityRequest",
    "PoolState",
    "PriceResponse",
    "QuoteResponse",
    "ReservesResponse",
    "SwapRequest",
    "SwapResponse",
    "Uint256",
    "normalize_address",
]
