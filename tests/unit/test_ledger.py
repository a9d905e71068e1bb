"""Tests for the in-memory asset ledger."""

import pytest

from amm_pool.ledger import AssetLedger, InMemoryLedger
from tests.helpers import POOL_ADDRESS, TRADER, WETH


@pytest.fixture
def ledger() -> InMemoryLedger:
    return InMemoryLedger(WETH, custodian=POOL_ADDRESS, balances={TRADER: 100})


class TestInMemoryLedger:
    """Tests for InMemoryLedger transfers."""

    def test_satisfies_protocol(self, ledger):
        assert isinstance(ledger, AssetLedger)

    def test_initial_balances(self, ledger):
        assert ledger.balance_of(TRADER) == 100
        assert ledger.balance_of(TRADER.upper().replace("0X", "0x")) == 100
        assert ledger.balance_of(POOL_ADDRESS) == 0

    def test_transfer_in_and_out(self, ledger):
        assert ledger.transfer_in(TRADER, 60)
        assert ledger.balance_of(POOL_ADDRESS) == 60
        assert ledger.transfer_out(TRADER, 10)
        assert ledger.balance_of(TRADER) == 50

    def test_overdraw_fails_without_change(self, ledger):
        assert not ledger.transfer_in(TRADER, 101)
        assert ledger.balance_of(TRADER) == 100
        assert not ledger.transfer_out(TRADER, 1)

    def test_negative_transfer_fails(self, ledger):
        assert not ledger.transfer(TRADER, POOL_ADDRESS, -1)

    def test_zero_transfer_succeeds(self, ledger):
        assert ledger.transfer_out(TRADER, 0)

    def test_mint(self, ledger):
        ledger.mint(POOL_ADDRESS, 5)
        assert ledger.balance_of(POOL_ADDRESS) == 5
        with pytest.raises(ValueError):
            ledger.mint(POOL_ADDRESS, -5)

    def test_repr(self, ledger):
        assert WETH in repr(ledger)
