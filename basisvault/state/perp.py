"""
In-memory perpetuals exchange, trading engine and controller.

These are deliberately small stand-ins for the external collaborators of
`BasisTradingModule`:

- `InMemoryPerpExchange` keeps per-vault collateral (18 decimals) and a
  pending funding reading that is folded into collateral on `settle_funding`.
- `InMemoryTradingEngine` settles pending funding on every trade, withdrawal
  and non-simulated position trade, and reports the vault's account value
  per share as the raw external position unit.
- `StaticController` returns fixed protocol fee splits.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Dict, Set, Tuple

from ..core.errors import PreconditionError
from ..core.precise_math import (
    from_precise_unit_to_decimals,
    precise_div,
    to_precise_units_from_decimals,
)
from ..integration.interfaces import VaultLedger
from .balances import TokenBalances

logger = logging.getLogger(__name__)


@dataclass
class InMemoryPerpExchange:
    address: str
    collateral_token: str
    collateral_decimals: int
    balances: TokenBalances
    collateral: Dict[str, int] = field(default_factory=dict)
    pending_funding: Dict[str, int] = field(default_factory=dict)
    unrealized_pnl: Dict[str, int] = field(default_factory=dict)

    def pending_funding_payment(self, vault: str) -> int:
        return self.pending_funding.get(vault, 0)

    def accrue_funding(self, vault: str, amount: int) -> None:
        """Add to the pending reading; positive means the vault owes funding."""
        self.pending_funding[vault] = self.pending_funding.get(vault, 0) + amount

    def settle_funding(self, vault: str) -> None:
        pending = self.pending_funding.pop(vault, 0)
        self.collateral[vault] = self.collateral.get(vault, 0) - pending

    def account_value(self, vault: str) -> int:
        """Collateral plus unrealized PnL minus pending funding (18 decimals)."""
        return (
            self.collateral.get(vault, 0)
            + self.unrealized_pnl.get(vault, 0)
            - self.pending_funding.get(vault, 0)
        )

    def deposit(self, vault: str, amount: int) -> None:
        """Deposit `amount` collateral tokens held by *vault*."""
        self.balances.transfer(self.collateral_token, vault, self.address, amount)
        self.collateral[vault] = self.collateral.get(vault, 0) + to_precise_units_from_decimals(
            amount, self.collateral_decimals,
        )

    def withdraw(self, vault: str, amount: int) -> None:
        """Withdraw `amount` collateral tokens back to *vault*; settles funding first."""
        self.settle_funding(vault)
        amount_e18 = to_precise_units_from_decimals(amount, self.collateral_decimals)
        free = self.collateral.get(vault, 0) + min(self.unrealized_pnl.get(vault, 0), 0)
        if amount_e18 > free:
            raise PreconditionError("V_NEFC")  # not enough free collateral
        self.collateral[vault] = self.collateral.get(vault, 0) - amount_e18
        self.balances.transfer(self.collateral_token, self.address, vault, amount)


class InMemoryTradingEngine:
    def __init__(self, exchange: InMemoryPerpExchange, module_id: str) -> None:
        self.exchange = exchange
        self.module_id = module_id
        self._initialized: Set[str] = set()
        self.trades: list[Tuple[str, str, int, int]] = []

    def is_initialized(self, vault: VaultLedger) -> bool:
        return vault.address in self._initialized

    def initialize(self, vault: VaultLedger) -> None:
        if vault.address in self._initialized:
            raise PreconditionError("Already initialized")
        self._initialized.add(vault.address)

    def trade(
        self,
        vault: VaultLedger,
        base_token: str,
        base_quantity_units: int,
        quote_bound_quantity_units: int,
    ) -> None:
        self.exchange.settle_funding(vault.address)
        self.trades.append((vault.address, base_token, base_quantity_units, quote_bound_quantity_units))
        logger.debug("trade vault=%s base=%s qty=%d", vault.address, base_token, base_quantity_units)

    def withdraw(self, vault: VaultLedger, collateral_notional: int) -> None:
        self.exchange.withdraw(vault.address, collateral_notional)

    def external_position_unit(self, vault: VaultLedger) -> int:
        value = from_precise_unit_to_decimals(
            self.exchange.account_value(vault.address), self.exchange.collateral_decimals,
        )
        return precise_div(value, vault.total_supply())

    def execute_position_trades(
        self,
        vault: VaultLedger,
        vault_token_quantity: int,
        is_issue: bool,
        simulate: bool,
    ) -> int:
        if not simulate:
            self.exchange.settle_funding(vault.address)
            self.trades.append((vault.address, "issue" if is_issue else "redeem", vault_token_quantity, 0))
        return self.external_position_unit(vault)

    def remove_module(self, vault: VaultLedger) -> None:
        if vault.address not in self._initialized:
            raise PreconditionError("Not initialized")
        self._initialized.discard(vault.address)


@dataclass
class StaticController:
    fee_recipient: str
    fee_splits: Dict[Tuple[str, int], int] = field(default_factory=dict)

    def protocol_fee_split(self, module: str, fee_index: int) -> int:
        return self.fee_splits.get((module, fee_index), 0)

    def protocol_fee_recipient(self) -> str:
        return self.fee_recipient
