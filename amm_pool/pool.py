"""Two-asset constant-product pool engine.

Every state-mutating operation follows the same discipline:
validate inputs, compute the effect from the current reserves, move the
external assets, commit the new reserves, emit a notification. Transfers
that completed before a failure are reversed, so a rejected call leaves
neither reserves nor balances changed.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import NamedTuple

import structlog

from amm_pool.config import DEFAULT_POOL_CONFIG, PoolConfig
from amm_pool.errors import (
    InsufficientAmount,
    InsufficientLiquidity,
    InvalidAmount,
    InvalidToken,
    TransferFailed,
    Unauthorized,
    ZeroAmount,
)
from amm_pool.events import (
    AuthorityTransferred,
    EmergencyWithdrawn,
    EventListener,
    LiquidityAdded,
    LiquidityRemoved,
    PoolEvent,
    TokensSwapped,
)
from amm_pool.guard import ReentrancyGuard, non_reentrant
from amm_pool.ledger import AssetLedger, LedgerError
from amm_pool.math.constant_product import get_amount_out, spot_price
from amm_pool.models.types import normalize_address
from amm_pool.safe_int import S

logger = structlog.get_logger()


class Reserves(NamedTuple):
    """Committed reserve snapshot, replaced as a whole on every commit."""

    reserve1: int
    reserve2: int


@dataclass(frozen=True)
class SwapResult:
    """Result of an executed swap."""

    amount_in: int
    amount_out: int
    token_in: str
    token_out: str


@dataclass(frozen=True)
class _Transfer:
    """One asset movement between the pool and an account."""

    ledger: AssetLedger
    inbound: bool
    account: str
    amount: int

    def reversed(self) -> _Transfer:
        return _Transfer(self.ledger, not self.inbound, self.account, self.amount)


class Pool:
    """Constant-product pool over two assets.

    Reserves start at zero. The authority seeds, withdraws and drains
    liquidity; anyone may swap once both reserves are positive.

    Args:
        asset1: Ledger of the first asset
        asset2: Ledger of the second asset (must differ from asset1)
        authority: Identity allowed to run privileged operations
        address: The pool's custody account on both ledgers
        config: Fee and price-scale parameters
    """

    def __init__(
        self,
        asset1: AssetLedger,
        asset2: AssetLedger,
        authority: str,
        address: str,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
    ) -> None:
        if asset1 is None or asset2 is None:
            raise ValueError("Both pool assets are required")
        if normalize_address(asset1.address) == normalize_address(asset2.address):
            raise ValueError(f"Pool assets must be distinct: {asset1.address}")
        if not authority:
            raise ValueError("Pool authority is required")

        self.asset1 = asset1
        self.asset2 = asset2
        self.token1 = normalize_address(asset1.address)
        self.token2 = normalize_address(asset2.address)
        self.address = normalize_address(address)
        self.config = config

        self._authority = normalize_address(authority)
        self._reserves = Reserves(0, 0)
        self._guard = ReentrancyGuard()
        self._listeners: list[EventListener] = []

    def __repr__(self) -> str:
        return (
            f"Pool(token1={self.token1!r}, token2={self.token2!r}, "
            f"reserve1={self._reserves.reserve1}, reserve2={self._reserves.reserve2})"
        )

    # --- Authority ---

    @property
    def authority(self) -> str:
        return self._authority

    def is_authorized(self, caller: str) -> bool:
        return normalize_address(caller) == self._authority

    def _require_authority(self, caller: str) -> None:
        if not self.is_authorized(caller):
            raise Unauthorized(f"Caller {caller} is not the pool authority")

    @non_reentrant
    def transfer_authority(self, caller: str, new_authority: str) -> None:
        """Hand the privileged role to a new identity.

        Raises:
            Unauthorized: If caller is not the current authority
            ValueError: If new_authority is empty
        """
        self._require_authority(caller)
        if not new_authority:
            raise ValueError("New authority is required")

        previous = self._authority
        self._authority = normalize_address(new_authority)
        self._emit(AuthorityTransferred(previous, self._authority))

    # --- Notifications ---

    def subscribe(self, listener: EventListener) -> None:
        """Register a listener called with every committed event."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        self._listeners.remove(listener)

    def _emit(self, event: PoolEvent) -> None:
        logger.info(event.name, pool=self.address, **asdict(event))
        for listener in list(self._listeners):
            # State is already committed; a failing listener must not undo that
            try:
                listener(event)
            except Exception:
                logger.exception("listener_failed", pool=self.address, pool_event=event.name)

    # --- Queries ---

    def reserves(self) -> Reserves:
        """Current (reserve1, reserve2)."""
        return self._reserves

    @property
    def is_empty(self) -> bool:
        return self._reserves.reserve1 == 0 and self._reserves.reserve2 == 0

    def _orient(self, token_in: str) -> tuple[bool, int, int]:
        """Resolve an asset to (is_forward, reserve_in, reserve_out)."""
        token = normalize_address(token_in)
        reserve1, reserve2 = self._reserves
        if token == self.token1:
            return True, reserve1, reserve2
        elif token == self.token2:
            return False, reserve2, reserve1
        else:
            raise InvalidToken(f"Token {token_in} not in pool")

    def get_token_out(self, token_in: str) -> str:
        """Get the output token for a given input token."""
        forward, _, _ = self._orient(token_in)
        return self.token2 if forward else self.token1

    def spot_price(self, token: str) -> int:
        """Price of one unit of token in units of the other asset, scaled by 1e18.

        Returns 0 while either reserve is empty.

        Raises:
            InvalidToken: If token is not one of the pool's assets
        """
        _, reserve_own, reserve_other = self._orient(token)
        return spot_price(reserve_own, reserve_other, self.config.price_scale)

    def quote(self, token_in: str, amount_in: int) -> int:
        """Output a swap of amount_in of token_in would yield right now.

        Pure projection of the swap formula: no validation of the result
        and no state change. Returns 0 for a zero input or an empty reserve.

        Raises:
            InvalidToken: If token_in is not one of the pool's assets
            InvalidAmount: If amount_in is negative or not an integer
        """
        _, reserve_in, reserve_out = self._orient(token_in)
        _check_amount(amount_in, allow_zero=True)
        return get_amount_out(
            amount_in,
            reserve_in,
            reserve_out,
            self.config.fee_numerator,
            self.config.fee_denominator,
        )

    # --- Liquidity ---

    @non_reentrant
    def add_liquidity(self, caller: str, amount1: int, amount2: int) -> Reserves:
        """Deposit both assets from the authority at any ratio.

        Returns:
            The committed reserves

        Raises:
            Unauthorized: If caller is not the authority
            ZeroAmount: If either amount is zero
            TransferFailed: If either deposit fails (the other is reversed)
        """
        self._require_authority(caller)
        _check_amount(amount1)
        _check_amount(amount2)

        reserve1, reserve2 = self._reserves
        new_reserve1 = S(reserve1) + amount1
        new_reserve2 = S(reserve2) + amount2
        if not (new_reserve1.is_uint256() and new_reserve2.is_uint256()):
            raise InvalidAmount("Deposit would overflow uint256 reserves")

        self._settle(
            [
                _Transfer(self.asset1, True, caller, amount1),
                _Transfer(self.asset2, True, caller, amount2),
            ]
        )

        self._reserves = Reserves(new_reserve1.to_uint256(), new_reserve2.to_uint256())
        self._emit(LiquidityAdded(normalize_address(caller), amount1, amount2))
        return self._reserves

    @non_reentrant
    def remove_liquidity(self, caller: str, amount1: int, amount2: int) -> Reserves:
        """Withdraw both assets to the authority, bounded by current reserves.

        No proportionality is enforced; this is a direct draw.

        Returns:
            The committed reserves

        Raises:
            Unauthorized: If caller is not the authority
            ZeroAmount: If either amount is zero
            InsufficientLiquidity: If the pool is empty or an amount exceeds its reserve
            TransferFailed: If either withdrawal fails (the other is reversed)
        """
        self._require_authority(caller)
        _check_amount(amount1)
        _check_amount(amount2)

        reserve1, reserve2 = self._reserves
        if reserve1 == 0 or reserve2 == 0:
            raise InsufficientLiquidity("Pool has no liquidity")
        if amount1 > reserve1 or amount2 > reserve2:
            raise InsufficientLiquidity(
                f"Withdrawal ({amount1}, {amount2}) exceeds reserves ({reserve1}, {reserve2})"
            )
        new_reserve1 = S(reserve1) - amount1
        new_reserve2 = S(reserve2) - amount2

        self._settle(
            [
                _Transfer(self.asset1, False, caller, amount1),
                _Transfer(self.asset2, False, caller, amount2),
            ]
        )

        self._reserves = Reserves(new_reserve1.value, new_reserve2.value)
        self._emit(LiquidityRemoved(normalize_address(caller), amount1, amount2))
        return self._reserves

    @non_reentrant
    def emergency_withdraw(self, caller: str) -> tuple[int, int]:
        """Sweep the pool's actual ledger balances to the authority.

        Best effort: a failed or raising ledger is logged and its leg counts
        as zero. Reserves are reset to zero afterwards whatever was swept.

        Returns:
            Amounts actually transferred (asset1, asset2)

        Raises:
            Unauthorized: If caller is not the authority
        """
        self._require_authority(caller)

        swept = [self._sweep(ledger, caller) for ledger in (self.asset1, self.asset2)]

        self._reserves = Reserves(0, 0)
        self._emit(EmergencyWithdrawn(normalize_address(caller), swept[0], swept[1]))
        return swept[0], swept[1]

    def _sweep(self, ledger: AssetLedger, recipient: str) -> int:
        """Move the pool's whole balance of one asset; returns the amount moved."""
        try:
            balance = ledger.balance_of(self.address)
            if balance <= 0:
                return 0
            if _attempt(_Transfer(ledger, False, recipient, balance)):
                return balance
        except Exception:
            logger.exception("emergency_sweep_error", pool=self.address, asset=ledger.address)
            return 0

        logger.warning(
            "emergency_sweep_transfer_failed",
            pool=self.address,
            asset=ledger.address,
            amount=balance,
        )
        return 0

    # --- Swaps ---

    @non_reentrant
    def swap_forward(self, caller: str, amount_in: int) -> SwapResult:
        """Swap amount_in of asset1 for asset2."""
        return self._swap(caller, True, amount_in)

    @non_reentrant
    def swap_backward(self, caller: str, amount_in: int) -> SwapResult:
        """Swap amount_in of asset2 for asset1."""
        return self._swap(caller, False, amount_in)

    def swap(self, caller: str, token_in: str, amount_in: int) -> SwapResult:
        """Swap amount_in of token_in for the other asset.

        Raises:
            InvalidToken: If token_in is not one of the pool's assets
        """
        forward, _, _ = self._orient(token_in)
        if forward:
            return self.swap_forward(caller, amount_in)
        return self.swap_backward(caller, amount_in)

    def _swap(self, caller: str, forward: bool, amount_in: int) -> SwapResult:
        """Exact-input swap against the committed reserves.

        Raises:
            ZeroAmount: If amount_in is zero
            InsufficientLiquidity: If a reserve is empty or would be drained
            InsufficientAmount: If the output rounds down to zero
            TransferFailed: If either leg fails (the other is reversed)
        """
        _check_amount(amount_in)

        reserve1, reserve2 = self._reserves
        if reserve1 == 0 or reserve2 == 0:
            raise InsufficientLiquidity("Pool has no liquidity")

        if forward:
            ledger_in, ledger_out = self.asset1, self.asset2
            reserve_in, reserve_out = reserve1, reserve2
        else:
            ledger_in, ledger_out = self.asset2, self.asset1
            reserve_in, reserve_out = reserve2, reserve1

        amount_out = get_amount_out(
            amount_in,
            reserve_in,
            reserve_out,
            self.config.fee_numerator,
            self.config.fee_denominator,
        )
        if amount_out == 0:
            raise InsufficientAmount(f"Output for input {amount_in} rounds to zero")
        if amount_out >= reserve_out:
            raise InsufficientLiquidity(
                f"Output {amount_out} would drain reserve {reserve_out}"
            )

        new_reserve_in = S(reserve_in) + amount_in
        new_reserve_out = S(reserve_out) - amount_out
        if not new_reserve_in.is_uint256():
            raise InvalidAmount("Swap input would overflow uint256 reserve")

        self._settle(
            [
                _Transfer(ledger_in, True, caller, amount_in),
                _Transfer(ledger_out, False, caller, amount_out),
            ]
        )

        if forward:
            self._reserves = Reserves(new_reserve_in.value, new_reserve_out.value)
        else:
            self._reserves = Reserves(new_reserve_out.value, new_reserve_in.value)

        result = SwapResult(
            amount_in=amount_in,
            amount_out=amount_out,
            token_in=normalize_address(ledger_in.address),
            token_out=normalize_address(ledger_out.address),
        )
        self._emit(
            TokensSwapped(
                trader=normalize_address(caller),
                token_in=result.token_in,
                token_out=result.token_out,
                amount_in=amount_in,
                amount_out=amount_out,
            )
        )
        return result

    # --- Transfers ---

    def _settle(self, transfers: list[_Transfer]) -> None:
        """Run transfers in order, all or nothing.

        On a failed transfer every completed one is reversed and
        TransferFailed is raised. Unexpected ledger exceptions also reverse
        completed transfers before propagating.
        """
        done: list[_Transfer] = []
        try:
            for transfer in transfers:
                if not _attempt(transfer):
                    logger.warning(
                        "transfer_failed",
                        pool=self.address,
                        asset=transfer.ledger.address,
                        account=transfer.account,
                        amount=transfer.amount,
                        inbound=transfer.inbound,
                    )
                    raise TransferFailed(
                        f"Transfer of {transfer.amount} {transfer.ledger.address} "
                        f"{'from' if transfer.inbound else 'to'} {transfer.account} failed"
                    )
                done.append(transfer)
        except Exception:
            self._revert(done)
            raise

    def _revert(self, done: list[_Transfer]) -> None:
        for transfer in reversed(done):
            compensation = transfer.reversed()
            if _attempt(compensation):
                logger.info(
                    "transfer_reverted",
                    pool=self.address,
                    asset=transfer.ledger.address,
                    account=transfer.account,
                    amount=transfer.amount,
                )
            else:
                logger.error(
                    "compensation_failed",
                    pool=self.address,
                    asset=transfer.ledger.address,
                    account=transfer.account,
                    amount=transfer.amount,
                )


def _attempt(transfer: _Transfer) -> bool:
    """Execute one transfer; a LedgerError counts as failure."""
    ledger = transfer.ledger
    try:
        if transfer.inbound:
            ok = ledger.transfer_in(transfer.account, transfer.amount)
        else:
            ok = ledger.transfer_out(transfer.account, transfer.amount)
    except LedgerError as err:
        logger.warning("ledger_error", asset=ledger.address, error=str(err))
        return False
    return bool(ok)


def _check_amount(amount: int, *, allow_zero: bool = False) -> None:
    """Validate an amount input.

    Raises:
        InvalidAmount: If amount is not an int, is negative, or exceeds uint256
        ZeroAmount: If amount is zero and allow_zero is False
    """
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise InvalidAmount(f"Amount must be an integer, got {type(amount).__name__}")
    if not S(amount).is_uint256():
        raise InvalidAmount(f"Amount out of uint256 range: {amount}")
    if amount == 0 and not allow_zero:
        raise ZeroAmount("Amount must be greater than zero")


__all__ = [
    "Pool",
    "Reserves",
    "SwapResult",
]
