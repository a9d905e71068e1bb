"""Tests for Pool liquidity seeding, withdrawal and emergency drain."""

import pytest

from amm_pool.constants import UINT256_MAX
from amm_pool.errors import (
    InsufficientLiquidity,
    InvalidAmount,
    TransferFailed,
    Unauthorized,
    ZeroAmount,
)
from amm_pool.events import EmergencyWithdrawn, LiquidityAdded, LiquidityRemoved
from tests.helpers import AUTHORITY, FUNDING, OUTSIDER, POOL_ADDRESS, TRADER, make_pool


class TestAddLiquidity:
    """Tests for seeding the pool."""

    def test_seed_empty_pool(self, empty_pool):
        reserves = empty_pool.add_liquidity(AUTHORITY, 1000, 2500)

        assert reserves == (1000, 2500)
        assert empty_pool.reserves() == (1000, 2500)
        assert empty_pool.asset1.balance_of(POOL_ADDRESS) == 1000
        assert empty_pool.asset2.balance_of(POOL_ADDRESS) == 2500
        assert not empty_pool.is_empty

    def test_any_ratio_accepted(self, pool):
        """No ratio check: a lopsided deposit just moves the price."""
        pool.add_liquidity(AUTHORITY, 1, 9000)

        assert pool.reserves() == (1001, 10000)

    def test_emits_liquidity_added(self, pool, events):
        pool.add_liquidity(AUTHORITY, 10, 20)

        assert events == [LiquidityAdded(provider=AUTHORITY, amount1=10, amount2=20)]

    def test_authority_is_case_insensitive(self, empty_pool):
        empty_pool.add_liquidity(AUTHORITY.upper().replace("0X", "0x"), 5, 5)
        assert empty_pool.reserves() == (5, 5)

    @pytest.mark.parametrize("caller", [TRADER, OUTSIDER])
    def test_unauthorized(self, empty_pool, caller):
        with pytest.raises(Unauthorized):
            empty_pool.add_liquidity(caller, 1000, 1000)
        assert empty_pool.reserves() == (0, 0)
        assert empty_pool.asset1.calls == []

    @pytest.mark.parametrize("amounts", [(0, 1000), (1000, 0), (0, 0)])
    def test_zero_amount(self, empty_pool, amounts):
        with pytest.raises(ZeroAmount):
            empty_pool.add_liquidity(AUTHORITY, *amounts)
        assert empty_pool.reserves() == (0, 0)

    def test_unauthorized_checked_before_amounts(self, empty_pool):
        with pytest.raises(Unauthorized):
            empty_pool.add_liquidity(TRADER, 0, 0)

    def test_reserve_overflow(self):
        pool = make_pool()
        pool.asset1.mint(AUTHORITY, UINT256_MAX)
        pool.add_liquidity(AUTHORITY, UINT256_MAX, 1)

        with pytest.raises(InvalidAmount):
            pool.add_liquidity(AUTHORITY, 1, 1)
        assert pool.reserves() == (UINT256_MAX, 1)

    def test_first_transfer_fails(self, empty_pool):
        empty_pool.asset1.fail_in = True

        with pytest.raises(TransferFailed):
            empty_pool.add_liquidity(AUTHORITY, 1000, 1000)

        assert empty_pool.reserves() == (0, 0)
        assert empty_pool.asset2.calls == []

    def test_second_transfer_fails_reverts_first(self, empty_pool):
        empty_pool.asset2.fail_in = True

        with pytest.raises(TransferFailed):
            empty_pool.add_liquidity(AUTHORITY, 1000, 1000)

        assert empty_pool.reserves() == (0, 0)
        assert empty_pool.asset1.balance_of(AUTHORITY) == FUNDING
        assert empty_pool.asset1.balance_of(POOL_ADDRESS) == 0


class TestRemoveLiquidity:
    """Tests for withdrawing liquidity."""

    def test_partial_withdrawal(self, pool):
        reserves = pool.remove_liquidity(AUTHORITY, 400, 100)

        assert reserves == (600, 900)
        assert pool.asset1.balance_of(AUTHORITY) == FUNDING - 600
        assert pool.asset2.balance_of(AUTHORITY) == FUNDING - 900

    def test_full_withdrawal_empties_pool(self, pool):
        pool.remove_liquidity(AUTHORITY, 1000, 1000)

        assert pool.reserves() == (0, 0)
        assert pool.is_empty

    def test_round_trip_restores_reserves(self, pool):
        """Seeding (A, B) then withdrawing (A, B) returns to the prior reserves."""
        before = pool.reserves()
        pool.add_liquidity(AUTHORITY, 12345, 678)
        pool.remove_liquidity(AUTHORITY, 12345, 678)

        assert pool.reserves() == before

    def test_emits_liquidity_removed(self, pool, events):
        pool.remove_liquidity(AUTHORITY, 1, 2)

        assert events == [LiquidityRemoved(provider=AUTHORITY, amount1=1, amount2=2)]

    @pytest.mark.parametrize("amounts", [(1001, 1), (1, 1001), (5000, 5000)])
    def test_exceeds_reserves(self, pool, events, amounts):
        with pytest.raises(InsufficientLiquidity):
            pool.remove_liquidity(AUTHORITY, *amounts)

        assert pool.reserves() == (1000, 1000)
        assert pool.asset1.calls == []
        assert events == []

    def test_empty_pool(self, empty_pool):
        with pytest.raises(InsufficientLiquidity):
            empty_pool.remove_liquidity(AUTHORITY, 1, 1)

    def test_zero_amount(self, pool):
        with pytest.raises(ZeroAmount):
            pool.remove_liquidity(AUTHORITY, 0, 10)

    def test_unauthorized(self, pool, events):
        with pytest.raises(Unauthorized):
            pool.remove_liquidity(TRADER, 10, 10)

        assert pool.reserves() == (1000, 1000)
        assert events == []

    def test_second_transfer_fails_reverts_first(self, pool, events):
        pool.asset2.fail_out = True

        with pytest.raises(TransferFailed):
            pool.remove_liquidity(AUTHORITY, 100, 100)

        assert pool.reserves() == (1000, 1000)
        assert pool.asset1.balance_of(POOL_ADDRESS) == 1000
        assert pool.asset1.calls == [("out", AUTHORITY, 100), ("in", AUTHORITY, 100)]
        assert events == []


class TestEmergencyWithdraw:
    """Tests for the best-effort sweep."""

    def test_sweeps_balances_and_resets_reserves(self, pool, events):
        swept = pool.emergency_withdraw(AUTHORITY)

        assert swept == (1000, 1000)
        assert pool.reserves() == (0, 0)
        assert pool.asset1.balance_of(POOL_ADDRESS) == 0
        assert pool.asset1.balance_of(AUTHORITY) == FUNDING
        assert events == [EmergencyWithdrawn(recipient=AUTHORITY, amount1=1000, amount2=1000)]

    def test_sweeps_actual_balance_not_reserves(self, pool):
        """Funds sent to the pool outside of its operations are swept too."""
        pool.asset1.mint(POOL_ADDRESS, 55)

        swept = pool.emergency_withdraw(AUTHORITY)

        assert swept == (1055, 1000)

    def test_empty_pool(self, empty_pool):
        """Nothing to sweep is not an error."""
        assert empty_pool.emergency_withdraw(AUTHORITY) == (0, 0)
        assert empty_pool.asset1.calls == []

    def test_failed_transfer_does_not_abort(self, pool):
        pool.asset2.fail_out = True

        swept = pool.emergency_withdraw(AUTHORITY)

        assert swept == (1000, 0)
        assert pool.reserves() == (0, 0)
        assert pool.asset2.balance_of(POOL_ADDRESS) == 1000

    def test_unauthorized(self, pool):
        with pytest.raises(Unauthorized):
            pool.emergency_withdraw(TRADER)
        assert pool.reserves() == (1000, 1000)

    def test_pool_is_reseedable(self, pool):
        pool.emergency_withdraw(AUTHORITY)
        pool.add_liquidity(AUTHORITY, 10, 20)

        assert pool.reserves() == (10, 20)

    def test_raising_ledger_does_not_abort(self, pool, events):
        """A ledger raising something other than LedgerError still gets swept past."""

        def explode(direction, account, amount):
            raise RuntimeError("ledger crashed")

        pool.asset2.on_transfer = explode

        swept = pool.emergency_withdraw(AUTHORITY)

        assert swept == (1000, 0)
        assert pool.reserves() == (0, 0)
        assert pool.asset1.balance_of(POOL_ADDRESS) == 0
        assert pool.asset2.balance_of(POOL_ADDRESS) == 1000
        assert events == [EmergencyWithdrawn(recipient=AUTHORITY, amount1=1000, amount2=0)]

    def test_reentrant_ledger_callback_does_not_abort(self, pool):
        pool.asset1.on_transfer = lambda *args: pool.swap_forward(TRADER, 10)

        swept = pool.emergency_withdraw(AUTHORITY)

        assert swept == (0, 1000)
        assert pool.reserves() == (0, 0)
