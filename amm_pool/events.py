"""Notifications emitted by the pool after each successful mutation."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import asdict, dataclass
from typing import Any, ClassVar


@dataclass(frozen=True)
class PoolEvent:
    """Base class for pool notifications."""

    name: ClassVar[str] = "pool_event"

    def to_dict(self) -> dict[str, Any]:
        """Event fields plus its name, for logging and JSON responses."""
        return {"event": self.name, **asdict(self)}


@dataclass(frozen=True)
class LiquidityAdded(PoolEvent):
    name: ClassVar[str] = "liquidity_added"

    provider: str
    amount1: int
    amount2: int


@dataclass(frozen=True)
class LiquidityRemoved(PoolEvent):
    name: ClassVar[str] = "liquidity_removed"

    provider: str
    amount1: int
    amount2: int


@dataclass(frozen=True)
class TokensSwapped(PoolEvent):
    name: ClassVar[str] = "tokens_swapped"

    trader: str
    token_in: str
    token_out: str
    amount_in: int
    amount_out: int


@dataclass(frozen=True)
class EmergencyWithdrawn(PoolEvent):
    """Amounts actually swept; reserves are zero afterwards regardless."""

    name: ClassVar[str] = "emergency_withdrawn"

    recipient: str
    amount1: int
    amount2: int


@dataclass(frozen=True)
class AuthorityTransferred(PoolEvent):
    name: ClassVar[str] = "authority_transferred"

    previous_authority: str
    new_authority: str


# Listeners receive every event after the pool has committed it
EventListener = Callable[[PoolEvent], None]
