"""Tests for basisvault/core/funding.py: settlement algorithm and ledger."""

import pytest

from basisvault.core.errors import ArithmeticViolationError
from basisvault.core.funding import SettledFundingLedger, compute_updated_settled_funding
from basisvault.core.precise_math import MAX_UINT256, PRECISE_UNIT


class TestComputeUpdatedSettledFunding:
    def test_vault_owed_funding_adds(self):
        # Negative pending reading: the exchange owes the vault.
        assert compute_updated_settled_funding(100, -50) == 150

    def test_vault_owes_funding_subtracts(self):
        assert compute_updated_settled_funding(100, 30) == 70

    def test_debt_larger_than_ledger_floors_at_zero(self):
        assert compute_updated_settled_funding(100, 500) == 0

    def test_zero_pending_is_identity(self):
        assert compute_updated_settled_funding(123, 0) == 123

    def test_overflow_fails_closed(self):
        with pytest.raises(ArithmeticViolationError):
            compute_updated_settled_funding(MAX_UINT256, -1)

    def test_negative_current_rejected(self):
        with pytest.raises(ArithmeticViolationError):
            compute_updated_settled_funding(-1, 0)


class TestSettledFundingLedger:
    def test_default_zero(self):
        assert SettledFundingLedger().get("v") == 0

    def test_set_and_get(self):
        ledger = SettledFundingLedger()
        ledger.set("v", 5 * PRECISE_UNIT)
        assert ledger.get("v") == 5 * PRECISE_UNIT

    def test_set_negative_rejected(self):
        with pytest.raises(ArithmeticViolationError):
            SettledFundingLedger().set("v", -1)

    def test_decrement_underflow_rejected(self):
        ledger = SettledFundingLedger()
        ledger.set("v", 10)
        with pytest.raises(ArithmeticViolationError):
            ledger.decrement("v", 11)
        assert ledger.get("v") == 10

    def test_delete(self):
        ledger = SettledFundingLedger()
        ledger.set("v", 10)
        ledger.delete("v")
        assert ledger.get("v") == 0

    def test_commit_is_idempotent_for_same_reading(self):
        ledger = SettledFundingLedger()
        assert ledger.commit("v", -100) == 100
        assert ledger.commit("v", -100) == 100
        assert ledger.get("v") == 100

    def test_commit_then_settle_then_new_reading(self):
        ledger = SettledFundingLedger()
        ledger.commit("v", -100)
        ledger.mark_settled("v")
        # The exchange cleared the first reading; a new one accrues on top.
        assert ledger.commit("v", -30) == 130
        assert ledger.preview("v", -30) == 130

    def test_unsettled_commit_is_replaced_by_newer_reading(self):
        ledger = SettledFundingLedger()
        ledger.commit("v", -100)
        # More funding accrued before the exchange settled: the reading grew.
        assert ledger.commit("v", -150) == 150

    def test_preview_does_not_mutate(self):
        ledger = SettledFundingLedger()
        assert ledger.preview("v", -100) == 100
        assert ledger.get("v") == 0

    def test_decrement_requires_settled_entry(self):
        ledger = SettledFundingLedger()
        ledger.commit("v", -100)
        with pytest.raises(ArithmeticViolationError):
            ledger.decrement("v", 10)
        ledger.mark_settled("v")
        assert ledger.decrement("v", 10) == 90

    def test_snapshot_restore(self):
        ledger = SettledFundingLedger()
        ledger.set("v", 10)
        snap = ledger.snapshot()
        ledger.set("v", 20)
        ledger.restore(snap)
        assert ledger.get("v") == 10

