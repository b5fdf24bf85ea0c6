"""Collateralization checks run right after a component moves in or out of a vault.

A vault is collateralized for a component when its actual token balance covers
``supply * default_position_unit``, with the product rounded up so the bound
can only err toward over-collateralization.

Each `is_*` function returns True when the check holds; the `validate_*`
forms raise `UndercollateralizedError`. `check_vault()` returns the list of
undercollateralized components (empty = all pass).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from .errors import UndercollateralizedError
from .precise_math import precise_mul_ceil, to_uint256

if TYPE_CHECKING:
    from ..integration.interfaces import VaultLedger

TRANSFER_IN_ERROR = "Invalid transfer in. Results in undercollateralization"
TRANSFER_OUT_ERROR = "Invalid transfer out. Results in undercollateralization"


def required_balance(supply: int, default_position_unit: int) -> int:
    """Minimum balance implied by a (non-negative) default unit at *supply*."""
    return precise_mul_ceil(to_uint256(supply), to_uint256(default_position_unit))


def is_collateralized_post_transfer_in_pre_hook(
    new_component_balance: int,
    initial_supply: int,
    default_position_unit: int,
    component_quantity: int,
) -> bool:
    """Check run after a component is transferred in but before module hooks.

    The balance must cover the pre-issuance requirement plus the quantity just
    received.
    """
    return new_component_balance >= required_balance(initial_supply, default_position_unit) + component_quantity


def is_collateralized_post_transfer_out(
    new_component_balance: int,
    final_supply: int,
    default_position_unit: int,
) -> bool:
    return new_component_balance >= required_balance(final_supply, default_position_unit)


def validate_collateralization_post_transfer_in_pre_hook(
    new_component_balance: int,
    initial_supply: int,
    default_position_unit: int,
    component_quantity: int,
    *,
    component: str | None = None,
) -> None:
    if not is_collateralized_post_transfer_in_pre_hook(
        new_component_balance, initial_supply, default_position_unit, component_quantity,
    ):
        raise UndercollateralizedError(TRANSFER_IN_ERROR, component=component)


def validate_collateralization_post_transfer_out(
    new_component_balance: int,
    final_supply: int,
    default_position_unit: int,
    *,
    component: str | None = None,
) -> None:
    if not is_collateralized_post_transfer_out(new_component_balance, final_supply, default_position_unit):
        raise UndercollateralizedError(TRANSFER_OUT_ERROR, component=component)


def check_vault(vault: "VaultLedger") -> List[str]:
    """Return components whose balance is below the implied requirement."""
    supply = vault.total_supply()
    return [
        component
        for component in vault.components()
        if not is_collateralized_post_transfer_out(
            vault.balance_of(component), supply, vault.get_default_position_unit(component),
        )
    ]
