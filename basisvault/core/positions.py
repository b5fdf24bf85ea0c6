"""Default position unit math (deterministic, integer-only)."""

from __future__ import annotations

from .errors import ArithmeticViolationError
from .precise_math import precise_div, precise_mul, to_uint256


def get_default_total_notional(supply: int, position_unit: int) -> int:
    return precise_mul(to_uint256(supply), to_uint256(position_unit))


def calculate_default_edit_position_unit(
    supply: int,
    pre_total_notional: int,
    post_total_notional: int,
    pre_position_unit: int,
) -> int:
    """New default unit after the vault's balance moved from pre to post.

    Any balance the vault held beyond ``pre_position_unit * supply`` (airdrops,
    dust) is untracked and stays excluded from the new unit.
    """
    if supply == 0:
        raise ArithmeticViolationError("cannot divide by 0")
    untracked = pre_total_notional - get_default_total_notional(supply, pre_position_unit)
    tracked_post = post_total_notional - untracked
    if tracked_post < 0:
        raise ArithmeticViolationError(f"post balance below untracked balance: {tracked_post}")
    return precise_div(tracked_post, supply)
