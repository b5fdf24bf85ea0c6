"""Data types emitted by the basis-trading module.

All types are frozen dataclasses (immutable).

Units/conventions:
- `*_units` are per-share precise units (1e18 == one unit per vault token).
- `*_percentage` and `*_split` are precise units (1e18 == 100%).
- collateral amounts are in the collateral token's own decimals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, unique
from typing import Tuple


@unique
class Event(Enum):
    MODULE_INITIALIZED = "ModuleInitialized"
    MODULE_REMOVED = "ModuleRemoved"
    PERFORMANCE_FEE_UPDATED = "PerformanceFeeUpdated"
    FEE_RECIPIENT_UPDATED = "FeeRecipientUpdated"
    FUNDING_WITHDRAWN = "FundingWithdrawn"


@dataclass(frozen=True)
class EventRecord:
    """One emitted event: the event type, the vault it concerns, and its payload."""

    event: Event
    vault: str
    data: Tuple[Tuple[str, object], ...] = field(default_factory=tuple)

    def get(self, key: str) -> object:
        for k, v in self.data:
            if k == key:
                return v
        raise KeyError(key)


@dataclass(frozen=True)
class FundingWithdrawal:
    """Result of a funding withdrawal (all amounts in collateral decimals)."""

    amount_withdrawn: int = 0
    manager_fee: int = 0
    protocol_fee: int = 0


@dataclass(frozen=True)
class RedemptionAdjustments:
    """Per-component unit deltas a redemption would apply, in component order."""

    components: Tuple[str, ...]
    equity_adjustments: Tuple[int, ...]
    debt_adjustments: Tuple[int, ...]
