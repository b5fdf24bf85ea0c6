"""Tests for basisvault/core/guards.py: reentrancy guard."""

import pytest

from basisvault.core.errors import ReentrancyError
from basisvault.core.guards import ReentrancyGuard


class TestReentrancyGuard:
    def test_nested_same_vault_rejected(self):
        guard = ReentrancyGuard()
        with guard.hold("v"):
            assert guard.is_entered("v")
            with pytest.raises(ReentrancyError):
                with guard.hold("v"):
                    pass
        assert not guard.is_entered("v")

    def test_other_vault_allowed(self):
        guard = ReentrancyGuard()
        with guard.hold("a"):
            with guard.hold("b"):
                assert guard.is_entered("a") and guard.is_entered("b")

    def test_released_on_exception(self):
        guard = ReentrancyGuard()
        with pytest.raises(RuntimeError):
            with guard.hold("v"):
                raise RuntimeError("boom")
        assert not guard.is_entered("v")
        with guard.hold("v"):
            pass
