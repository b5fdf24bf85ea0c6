"""Settled-funding ledger and the settlement algorithm that feeds it.

The ledger holds, per vault, funding income already realized at the exchange
but not yet withdrawn to the vault's spot balance. Values are 18-decimal and
never negative: a funding debt larger than the ledger floors it at zero.

Exchange convention: a positive pending funding payment means the vault
*owes* funding. The settlement algorithm negates it so a positive result
means the vault is *owed* funding.

Each entry keeps two values:
- `base`: the ledger value as of the last time the exchange settled funding,
- `committed`: `base` with the current pending reading folded in.

`commit()` always folds the pending reading onto `base`, so committing twice
against the same reading yields the same value. `mark_settled()` advances
`base` once the exchange has actually settled the pending payment.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Mapping

from .errors import ArithmeticViolationError
from .precise_math import checked_add, checked_sub, saturating_sub


def compute_updated_settled_funding(current_settled_funding: int, pending_funding_payment: int) -> int:
    """Fold a pending funding reading into the ledger value (pure).

    Overflow fails closed; a debt that exceeds the ledger floors at zero.
    """
    if not isinstance(pending_funding_payment, int) or isinstance(pending_funding_payment, bool):
        raise TypeError("pending_funding_payment must be an int")
    owed_to_vault = -pending_funding_payment
    if owed_to_vault >= 0:
        return checked_add(current_settled_funding, owed_to_vault)
    return saturating_sub(current_settled_funding, -owed_to_vault)


@dataclass(frozen=True)
class FundingEntry:
    base: int = 0
    committed: int = 0

    def __post_init__(self) -> None:
        if self.base < 0 or self.committed < 0:
            raise ArithmeticViolationError("settled funding cannot be negative")


class SettledFundingLedger:
    """Non-negative settled funding keyed by vault handle."""

    def __init__(self) -> None:
        self._entries: Dict[str, FundingEntry] = {}

    def _entry(self, vault: str) -> FundingEntry:
        return self._entries.get(vault, FundingEntry())

    def get(self, vault: str) -> int:
        """Last committed value."""
        return self._entry(vault).committed

    def preview(self, vault: str, pending_funding_payment: int) -> int:
        return compute_updated_settled_funding(self._entry(vault).base, pending_funding_payment)

    def commit(self, vault: str, pending_funding_payment: int) -> int:
        entry = self._entry(vault)
        committed = compute_updated_settled_funding(entry.base, pending_funding_payment)
        self._entries[vault] = replace(entry, committed=committed)
        return committed

    def mark_settled(self, vault: str) -> None:
        """The exchange settled pending funding; the committed value becomes the base."""
        entry = self._entry(vault)
        self._entries[vault] = replace(entry, base=entry.committed)

    def set(self, vault: str, amount: int) -> None:
        if not isinstance(amount, int) or isinstance(amount, bool):
            raise TypeError("amount must be an int")
        self._entries[vault] = FundingEntry(base=amount, committed=amount)

    def decrement(self, vault: str, amount: int) -> int:
        """Subtract a withdrawn amount; only valid right after `mark_settled`."""
        entry = self._entry(vault)
        if entry.base != entry.committed:
            raise ArithmeticViolationError("decrement requires settled funding to be up to date")
        new_value = checked_sub(entry.committed, amount)
        self._entries[vault] = FundingEntry(base=new_value, committed=new_value)
        return new_value

    def delete(self, vault: str) -> None:
        self._entries.pop(vault, None)

    def verify_non_negative(self) -> bool:
        return all(e.base >= 0 and e.committed >= 0 for e in self._entries.values())

    def snapshot(self) -> Mapping[str, FundingEntry]:
        return dict(self._entries)

    def restore(self, snapshot: Mapping[str, FundingEntry]) -> None:
        self._entries = dict(snapshot)

    def __repr__(self) -> str:
        return f"SettledFundingLedger({len(self._entries)} entries)"
