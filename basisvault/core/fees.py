"""
Performance fee splitting (deterministic, integer-only).

The total fee is floored once; the protocol share is floored from the total
and the manager takes the remainder, so the two shares always sum to the total
and no rounding dust is created or lost.
"""

from __future__ import annotations

from dataclasses import dataclass

from .precise_math import PRECISE_UNIT, precise_mul


@dataclass(frozen=True)
class PerformanceFeeSplit:
    total_fee: int
    manager_fee: int
    protocol_fee: int

    def __post_init__(self) -> None:
        for name, v in (
            ("total_fee", self.total_fee),
            ("manager_fee", self.manager_fee),
            ("protocol_fee", self.protocol_fee),
        ):
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if v < 0:
                raise ValueError(f"{name} must be non-negative: {v}")
        if self.manager_fee + self.protocol_fee != self.total_fee:
            raise AssertionError("fee split does not conserve the total")


NO_FEES = PerformanceFeeSplit(total_fee=0, manager_fee=0, protocol_fee=0)


def split_performance_fee(
    notional_amount: int,
    performance_fee_percentage: int,
    protocol_fee_split: int,
) -> PerformanceFeeSplit:
    """Split the performance fee on *notional_amount* into manager/protocol shares.

    `performance_fee_percentage` and `protocol_fee_split` are precise units
    (1e18 == 100%).
    """
    for name, v in (
        ("notional_amount", notional_amount),
        ("performance_fee_percentage", performance_fee_percentage),
        ("protocol_fee_split", protocol_fee_split),
    ):
        if not isinstance(v, int) or isinstance(v, bool) or v < 0:
            raise ValueError(f"{name} must be a non-negative int, got {v}")
    if protocol_fee_split > PRECISE_UNIT:
        raise ValueError(f"protocol_fee_split must be <= {PRECISE_UNIT}: {protocol_fee_split}")

    if performance_fee_percentage == 0:
        return NO_FEES

    total = precise_mul(notional_amount, performance_fee_percentage)
    protocol = precise_mul(total, protocol_fee_split)
    return PerformanceFeeSplit(total_fee=total, manager_fee=total - protocol, protocol_fee=protocol)
