"""
Core accounting algorithms
"""

from .collateralization import (
    check_vault,
    validate_collateralization_post_transfer_in_pre_hook,
    validate_collateralization_post_transfer_out,
)
from .errors import (
    ArithmeticViolationError,
    BasisVaultError,
    PreconditionError,
    ReentrancyError,
    UnauthorizedError,
    UndercollateralizedError,
)
from .fee_settings import FeeSettingsRegistry, FeeState
from .fees import PerformanceFeeSplit, split_performance_fee
from .funding import SettledFundingLedger, compute_updated_settled_funding
from .netting import net_position_unit_after_fees, performance_fee_unit
from .positions import calculate_default_edit_position_unit
from .precise_math import PRECISE_UNIT
from .types import Event, EventRecord, FundingWithdrawal, RedemptionAdjustments

__all__ = [
    "check_vault",
    "validate_collateralization_post_transfer_in_pre_hook",
    "validate_collateralization_post_transfer_out",
    "ArithmeticViolationError",
    "BasisVaultError",
    "PreconditionError",
    "ReentrancyError",
    "UnauthorizedError",
    "UndercollateralizedError",
    "FeeSettingsRegistry",
    "FeeState",
    "PerformanceFeeSplit",
    "split_performance_fee",
    "SettledFundingLedger",
    "compute_updated_settled_funding",
    "net_position_unit_after_fees",
    "performance_fee_unit",
    "calculate_default_edit_position_unit",
    "PRECISE_UNIT",
    "Event",
    "EventRecord",
    "FundingWithdrawal",
    "RedemptionAdjustments",
]
