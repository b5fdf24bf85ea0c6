"""
Structural interfaces for the collaborators the basis-trading module drives.

The module never implements these; it consumes whatever the host supplies.
`basisvault.state` ships in-memory implementations for tests and the offline
demo.
"""

from __future__ import annotations

from typing import Protocol, Sequence


class VaultLedger(Protocol):
    """A vault token: supply, per-share position units and spot balances."""

    address: str
    manager: str

    def total_supply(self) -> int: ...

    def components(self) -> Sequence[str]: ...

    def has_external_position(self, component: str) -> bool: ...

    def get_default_position_unit(self, component: str) -> int: ...

    def get_external_position_unit(self, component: str, module: str) -> int: ...

    def edit_default_position_unit(self, component: str, unit: int) -> None: ...

    def set_external_position_unit(self, component: str, module: str, unit: int) -> None: ...

    def balance_of(self, component: str) -> int: ...

    def transfer_out(self, component: str, to: str, amount: int) -> None: ...

    def is_pending_module(self, module: str) -> bool: ...

    def is_initialized_module(self, module: str) -> bool: ...

    def initialize_module(self, module: str) -> None: ...


class PerpExchange(Protocol):
    def pending_funding_payment(self, vault: str) -> int:
        """Signed 18-decimal pending funding; positive means the vault owes."""
        ...


class TradingEngine(Protocol):
    """Leverage/trading capability that holds the vault's perp positions.

    `trade`, `withdraw` and `execute_position_trades(simulate=False)` settle
    the exchange's pending funding as a side effect.
    """

    def is_initialized(self, vault: VaultLedger) -> bool: ...

    def initialize(self, vault: VaultLedger) -> None: ...

    def trade(
        self,
        vault: VaultLedger,
        base_token: str,
        base_quantity_units: int,
        quote_bound_quantity_units: int,
    ) -> None: ...

    def withdraw(self, vault: VaultLedger, collateral_notional: int) -> None: ...

    def execute_position_trades(
        self,
        vault: VaultLedger,
        vault_token_quantity: int,
        is_issue: bool,
        simulate: bool,
    ) -> int: ...

    def remove_module(self, vault: VaultLedger) -> None: ...


class Controller(Protocol):
    """Protocol-wide registry: fee splits and the protocol fee recipient."""

    def protocol_fee_split(self, module: str, fee_index: int) -> int: ...

    def protocol_fee_recipient(self) -> str: ...
