"""Asset ledger interface and an in-memory implementation.

The pool never keeps balances of the assets themselves. It asks a ledger,
one per asset, to move amounts in and out of its custody and trusts the
boolean result.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import structlog

from amm_pool.models.types import normalize_address

logger = structlog.get_logger()


class LedgerError(Exception):
    """Raised by a ledger to signal a failed transfer.

    The pool treats it the same as a False return value.
    """

    pass


@runtime_checkable
class AssetLedger(Protocol):
    """Transfer contract the pool requires from each asset.

    Implementations are bound to the pool's custody account: transfer_in
    moves funds into it and transfer_out moves funds out of it.
    """

    address: str

    def transfer_in(self, sender: str, amount: int) -> bool:
        """Move amount from sender into pool custody."""
        ...

    def transfer_out(self, recipient: str, amount: int) -> bool:
        """Move amount from pool custody to recipient."""
        ...

    def balance_of(self, holder: str) -> int:
        """Current balance of holder."""
        ...


class InMemoryLedger:
    """Dictionary-backed ledger for a single asset.

    Transfers fail (return False) instead of overdrawing an account.
    Used by the HTTP service, the simulation CLI and tests.
    """

    def __init__(
        self,
        address: str,
        custodian: str,
        balances: dict[str, int] | None = None,
    ) -> None:
        """Create a ledger.

        Args:
            address: Asset address (identity of the asset)
            custodian: Account that holds pool custody
            balances: Optional initial balances by holder
        """
        self.address = normalize_address(address)
        self.custodian = normalize_address(custodian)
        self._balances: dict[str, int] = {}
        for holder, amount in (balances or {}).items():
            self.mint(holder, amount)

    def mint(self, holder: str, amount: int) -> None:
        """Credit amount to holder out of thin air."""
        if amount < 0:
            raise ValueError(f"Cannot mint a negative amount: {amount}")
        key = normalize_address(holder)
        self._balances[key] = self._balances.get(key, 0) + amount

    def balance_of(self, holder: str) -> int:
        return self._balances.get(normalize_address(holder), 0)

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        """Move amount between two accounts; False if sender is short."""
        if amount < 0:
            return False
        src = normalize_address(sender)
        dst = normalize_address(recipient)
        balance = self._balances.get(src, 0)
        if balance < amount:
            logger.debug(
                "ledger_insufficient_balance",
                asset=self.address,
                holder=src,
                balance=balance,
                amount=amount,
            )
            return False
        self._balances[src] = balance - amount
        self._balances[dst] = self._balances.get(dst, 0) + amount
        return True

    def transfer_in(self, sender: str, amount: int) -> bool:
        return self.transfer(sender, self.custodian, amount)

    def transfer_out(self, recipient: str, amount: int) -> bool:
        return self.transfer(self.custodian, recipient, amount)

    def __repr__(self) -> str:
        return f"InMemoryLedger(address={self.address!r}, custodian={self.custodian!r})"


__all__ = [
    "AssetLedger",
    "InMemoryLedger",
    "LedgerError",
]
