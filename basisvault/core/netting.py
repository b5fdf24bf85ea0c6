"""Net an external position unit of accrued, unwithdrawn performance fees."""

from __future__ import annotations

import logging

from .errors import ArithmeticViolationError
from .precise_math import clamp_non_negative, from_precise_unit_to_decimals, mul_div_ceil

logger = logging.getLogger(__name__)


def performance_fee_unit(
    updated_settled_funding: int,
    total_supply: int,
    performance_fee_percentage: int,
    collateral_decimals: int,
) -> int:
    """Per-share fee owed on settled funding, in collateral decimals.

    Both the per-share division and the decimal conversion round up, so the
    fee unit never understates what is owed.
    """
    if total_supply == 0:
        raise ArithmeticViolationError("cannot divide by 0")
    precise_fee_unit = mul_div_ceil(updated_settled_funding, performance_fee_percentage, total_supply)
    return from_precise_unit_to_decimals(precise_fee_unit, collateral_decimals, round_up=True)


def net_position_unit_after_fees(
    raw_external_position_unit: int,
    updated_settled_funding: int,
    total_supply: int,
    performance_fee_percentage: int,
    collateral_decimals: int,
) -> int:
    """Raw external unit minus the performance fee unit, floored at zero."""
    if updated_settled_funding == 0:
        return raw_external_position_unit

    fee_unit = performance_fee_unit(
        updated_settled_funding, total_supply, performance_fee_percentage, collateral_decimals,
    )
    net = raw_external_position_unit - fee_unit
    if net < 0:
        # The clamped remainder is not reconciled anywhere.
        logger.warning(
            "net position unit clamped to zero: raw=%d fee_unit=%d shortfall=%d",
            raw_external_position_unit, fee_unit, -net,
        )
    return clamp_non_negative(net)
