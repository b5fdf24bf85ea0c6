"""Tests for basisvault/core/fee_settings.py: per-vault fee state."""

import pytest

from basisvault.core.errors import PreconditionError
from basisvault.core.fee_settings import ZERO_ADDRESS, FeeSettingsRegistry, FeeState, is_zero_address
from basisvault.core.precise_math import PRECISE_UNIT

RECIPIENT = "0x" + "ab" * 20
TEN_PCT = PRECISE_UNIT // 10
TWENTY_PCT = PRECISE_UNIT // 5


def _state(**kwargs) -> FeeState:
    base = dict(
        fee_recipient=RECIPIENT,
        max_performance_fee_percentage=TWENTY_PCT,
        performance_fee_percentage=TEN_PCT,
    )
    base.update(kwargs)
    return FeeState(**base)


class TestFeeStateValidation:
    def test_valid(self):
        s = _state()
        assert s.performance_fee_percentage == TEN_PCT

    def test_zero_recipient(self):
        with pytest.raises(PreconditionError, match="Fee Recipient must be non-zero address"):
            _state(fee_recipient=ZERO_ADDRESS)

    def test_max_above_one_hundred_percent(self):
        with pytest.raises(PreconditionError, match="Max fee must be <= 100%"):
            _state(max_performance_fee_percentage=PRECISE_UNIT + 1)

    def test_max_exactly_one_hundred_percent(self):
        assert _state(max_performance_fee_percentage=PRECISE_UNIT).max_performance_fee_percentage == PRECISE_UNIT

    def test_fee_above_max(self):
        with pytest.raises(PreconditionError, match="Fee must be <= max"):
            _state(performance_fee_percentage=TWENTY_PCT + 1)


class TestZeroAddress:
    def test_variants(self):
        assert is_zero_address("")
        assert is_zero_address("0x")
        assert is_zero_address(ZERO_ADDRESS)
        assert not is_zero_address(RECIPIENT)


class TestFeeSettingsRegistry:
    def test_initialize_once(self):
        reg = FeeSettingsRegistry()
        reg.initialize("v", _state())
        assert "v" in reg
        with pytest.raises(PreconditionError, match="already initialized"):
            reg.initialize("v", _state())

    def test_get_missing(self):
        with pytest.raises(PreconditionError):
            FeeSettingsRegistry().get("v")

    def test_update_fee_with_zero_funding(self):
        reg = FeeSettingsRegistry()
        reg.initialize("v", _state())
        reg.update_performance_fee("v", TWENTY_PCT, settled_funding=0)
        assert reg.get("v").performance_fee_percentage == TWENTY_PCT

    def test_update_fee_blocked_by_settled_funding(self):
        reg = FeeSettingsRegistry()
        reg.initialize("v", _state())
        with pytest.raises(PreconditionError, match="Non-zero settled funding remains"):
            reg.update_performance_fee("v", 0, settled_funding=1)
        assert reg.get("v").performance_fee_percentage == TEN_PCT

    def test_update_fee_above_max(self):
        reg = FeeSettingsRegistry()
        reg.initialize("v", _state())
        with pytest.raises(PreconditionError, match="Fee must be less than max"):
            reg.update_performance_fee("v", TWENTY_PCT + 1, settled_funding=0)

    def test_update_recipient(self):
        reg = FeeSettingsRegistry()
        reg.initialize("v", _state())
        reg.update_fee_recipient("v", "0x" + "cd" * 20)
        assert reg.get("v").fee_recipient == "0x" + "cd" * 20
        with pytest.raises(PreconditionError):
            reg.update_fee_recipient("v", ZERO_ADDRESS)

    def test_remove(self):
        reg = FeeSettingsRegistry()
        reg.initialize("v", _state())
        reg.remove("v")
        assert "v" not in reg
        reg.remove("v")
