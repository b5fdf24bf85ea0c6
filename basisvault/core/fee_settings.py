"""Per-vault performance fee settings.

`FeeState` validates itself on construction, so a registry entry can never
hold an out-of-range rate or an empty recipient.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterator, Mapping

from .errors import PreconditionError
from .precise_math import PRECISE_UNIT

ZERO_ADDRESS = "0x" + "00" * 20


def is_zero_address(address: str) -> bool:
    if not address:
        return True
    digits = address[2:] if address.lower().startswith("0x") else address
    return not digits.strip("0")


@dataclass(frozen=True)
class FeeState:
    fee_recipient: str
    max_performance_fee_percentage: int
    performance_fee_percentage: int

    def __post_init__(self) -> None:
        for name, v in (
            ("max_performance_fee_percentage", self.max_performance_fee_percentage),
            ("performance_fee_percentage", self.performance_fee_percentage),
        ):
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if v < 0:
                raise PreconditionError(f"{name} must be non-negative")
        if not isinstance(self.fee_recipient, str) or is_zero_address(self.fee_recipient):
            raise PreconditionError("Fee Recipient must be non-zero address")
        if self.max_performance_fee_percentage > PRECISE_UNIT:
            raise PreconditionError("Max fee must be <= 100%")
        if self.performance_fee_percentage > self.max_performance_fee_percentage:
            raise PreconditionError("Fee must be <= max")


class FeeSettingsRegistry:
    """Mapping vault handle -> `FeeState`, owned by one module instance."""

    def __init__(self) -> None:
        self._states: Dict[str, FeeState] = {}

    def __contains__(self, vault: str) -> bool:
        return vault in self._states

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._states))

    def get(self, vault: str) -> FeeState:
        try:
            return self._states[vault]
        except KeyError:
            raise PreconditionError(f"no fee settings for vault {vault}") from None

    def initialize(self, vault: str, settings: FeeState) -> FeeState:
        if vault in self._states:
            raise PreconditionError("Fee settings already initialized")
        if not isinstance(settings, FeeState):
            raise TypeError("settings must be a FeeState")
        self._states[vault] = settings
        return settings

    def update_performance_fee(self, vault: str, new_fee: int, *, settled_funding: int) -> FeeState:
        current = self.get(vault)
        if new_fee > current.max_performance_fee_percentage:
            raise PreconditionError("Fee must be less than max")
        if settled_funding != 0:
            raise PreconditionError("Non-zero settled funding remains")
        state = replace(current, performance_fee_percentage=new_fee)
        self._states[vault] = state
        return state

    def update_fee_recipient(self, vault: str, new_recipient: str) -> FeeState:
        current = self.get(vault)
        if is_zero_address(new_recipient):
            raise PreconditionError("Fee Recipient must be non-zero address")
        state = replace(current, fee_recipient=new_recipient)
        self._states[vault] = state
        return state

    def remove(self, vault: str) -> None:
        self._states.pop(vault, None)

    def snapshot(self) -> Mapping[str, FeeState]:
        return dict(self._states)

    def restore(self, snapshot: Mapping[str, FeeState]) -> None:
        self._states = dict(snapshot)
