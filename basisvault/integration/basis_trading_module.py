"""
Basis-trading module: funding settlement, performance fees and fee-netted
external position units for a vault that holds perp positions.

The module owns two per-vault records, `FeeState` and settled funding, and
drives three collaborators: the vault ledger, the trading engine that holds
the perp positions, and the exchange it reads pending funding from. The
central controller supplies the protocol fee split and recipient.

Ordering constraints:
- Any call that makes the exchange settle pending funding (trades, collateral
  withdrawals, issue/redeem position trades) commits the settlement ledger
  first. Once the exchange settles, the pending reading is gone and the credit
  cannot be recovered.
- Value-moving manager entry points hold a per-vault reentrancy guard.
  Issue/redeem hooks do not: they run inside the issuance module's own guard
  and check that the caller is a registered module instead.
- Module-owned state is restored if any step of a call raises, so callers
  never observe a half-applied update.
"""

from __future__ import annotations

from contextlib import contextmanager
import logging
from typing import Iterator, List

from ..config import ModuleConfig
from ..core.errors import PreconditionError
from ..core.fee_settings import FeeSettingsRegistry, FeeState
from ..core.fees import NO_FEES, PerformanceFeeSplit, split_performance_fee
from ..core.funding import SettledFundingLedger
from ..core.guards import (
    ReentrancyGuard,
    require_manager,
    require_module,
    require_vault_caller,
    require_valid_and_initialized,
    require_valid_and_pending,
)
from ..core.netting import net_position_unit_after_fees
from ..core.positions import calculate_default_edit_position_unit
from ..core.precise_math import (
    MAX_UINT256,
    from_precise_unit_to_decimals,
    precise_mul,
    to_precise_units_from_decimals,
)
from ..core.types import Event, EventRecord, FundingWithdrawal, RedemptionAdjustments
from .interfaces import Controller, PerpExchange, TradingEngine, VaultLedger

logger = logging.getLogger(__name__)

# Passing this as `notional_funding` withdraws all settled funding.
WITHDRAW_ALL = MAX_UINT256


class BasisTradingModule:
    def __init__(
        self,
        config: ModuleConfig,
        *,
        trading: TradingEngine,
        exchange: PerpExchange,
        controller: Controller,
    ) -> None:
        self.config = config
        self.trading = trading
        self.exchange = exchange
        self.controller = controller
        self.fee_settings = FeeSettingsRegistry()
        self.settled_funding = SettledFundingLedger()
        self.events: List[EventRecord] = []
        self._guard = ReentrancyGuard()

    @property
    def module_id(self) -> str:
        return self.config.module_id

    @property
    def collateral_token(self) -> str:
        return self.config.collateral_token

    @property
    def collateral_decimals(self) -> int:
        return self.config.collateral_decimals

    # -- Internal helpers ------------------------------------------------------

    @contextmanager
    def _atomic(self) -> Iterator[None]:
        fee_snapshot = self.fee_settings.snapshot()
        funding_snapshot = self.settled_funding.snapshot()
        try:
            yield
        except Exception:
            self.fee_settings.restore(fee_snapshot)
            self.settled_funding.restore(funding_snapshot)
            raise

    def _emit(self, event: Event, vault: VaultLedger, **data: object) -> None:
        record = EventRecord(event=event, vault=vault.address, data=tuple(sorted(data.items())))
        self.events.append(record)
        logger.info("%s vault=%s %s", event.value, vault.address, dict(record.data))

    def _update_settled_funding(self, vault: VaultLedger) -> int:
        new_value = self.settled_funding.commit(
            vault.address, self.exchange.pending_funding_payment(vault.address),
        )
        logger.debug("settled funding committed vault=%s value=%d", vault.address, new_value)
        return new_value

    def _handle_fees(self, vault: VaultLedger, notional_amount: int) -> PerformanceFeeSplit:
        rate = self.fee_settings.get(vault.address).performance_fee_percentage
        if rate == 0:
            return NO_FEES

        protocol_split = self.controller.protocol_fee_split(
            self.module_id, self.config.protocol_performance_fee_index,
        )
        split = split_performance_fee(notional_amount, rate, protocol_split)

        fee_recipient = self.fee_settings.get(vault.address).fee_recipient
        if split.manager_fee > 0:
            vault.transfer_out(self.collateral_token, fee_recipient, split.manager_fee)
        if split.protocol_fee > 0:
            vault.transfer_out(self.collateral_token, self.controller.protocol_fee_recipient(), split.protocol_fee)
        return split

    def _update_default_collateral_unit(self, vault: VaultLedger, balance_before: int) -> int:
        new_unit = calculate_default_edit_position_unit(
            vault.total_supply(),
            balance_before,
            vault.balance_of(self.collateral_token),
            vault.get_default_position_unit(self.collateral_token),
        )
        vault.edit_default_position_unit(self.collateral_token, new_unit)
        return new_unit

    def _net_position_unit(self, vault: VaultLedger, raw_unit: int, updated_settled_funding: int) -> int:
        return net_position_unit_after_fees(
            raw_unit,
            updated_settled_funding,
            vault.total_supply(),
            self.fee_settings.get(vault.address).performance_fee_percentage,
            self.collateral_decimals,
        )

    def _hook_applies(self, vault: VaultLedger) -> bool:
        return vault.total_supply() != 0 and vault.has_external_position(self.collateral_token)

    # -- Lifecycle -------------------------------------------------------------

    def initialize(self, vault: VaultLedger, settings: FeeState, *, caller: str) -> None:
        """Activate the module for a pending vault and record its fee settings."""
        require_manager(vault, caller)
        require_valid_and_pending(vault, self.module_id)
        if self.trading.is_initialized(vault):
            raise PreconditionError("Trading module already initialized")

        with self._atomic():
            self.fee_settings.initialize(vault.address, settings)
            self.settled_funding.set(vault.address, 0)
            self.trading.initialize(vault)
            vault.initialize_module(self.module_id)

        self._emit(
            Event.MODULE_INITIALIZED, vault,
            fee_recipient=settings.fee_recipient,
            max_performance_fee_percentage=settings.max_performance_fee_percentage,
            performance_fee_percentage=settings.performance_fee_percentage,
        )

    def remove_module(self, vault: VaultLedger, *, caller: str) -> None:
        """Drop the vault's fee state and settled funding without a fee sweep."""
        require_vault_caller(vault, caller)
        require_valid_and_initialized(vault, self.module_id)

        with self._atomic():
            self.trading.remove_module(vault)
            self.fee_settings.remove(vault.address)
            self.settled_funding.delete(vault.address)

        self._emit(Event.MODULE_REMOVED, vault)

    # -- Manager surface -------------------------------------------------------

    def trade_and_track_funding(
        self,
        vault: VaultLedger,
        base_token: str,
        base_quantity_units: int,
        quote_bound_quantity_units: int,
        *,
        caller: str,
    ) -> None:
        require_manager(vault, caller)
        require_valid_and_initialized(vault, self.module_id)

        with self._guard.hold(vault.address), self._atomic():
            self._update_settled_funding(vault)
            self.trading.trade(vault, base_token, base_quantity_units, quote_bound_quantity_units)
            self.settled_funding.mark_settled(vault.address)

    def withdraw(self, vault: VaultLedger, collateral_quantity_units: int, *, caller: str) -> None:
        """Withdraw per-share collateral from the exchange back to the vault."""
        require_manager(vault, caller)
        require_valid_and_initialized(vault, self.module_id)
        if collateral_quantity_units <= 0:
            raise PreconditionError("Withdraw amount is 0")

        with self._guard.hold(vault.address), self._atomic():
            self._update_settled_funding(vault)
            balance_before = vault.balance_of(self.collateral_token)
            notional = precise_mul(collateral_quantity_units, vault.total_supply())
            self.trading.withdraw(vault, notional)
            self.settled_funding.mark_settled(vault.address)
            self._update_default_collateral_unit(vault, balance_before)

    def withdraw_funding_and_accrue_fees(
        self,
        vault: VaultLedger,
        notional_funding: int,
        *,
        caller: str,
    ) -> FundingWithdrawal:
        """Withdraw settled funding to the vault and pay performance fees on it.

        `notional_funding` is in collateral decimals and is clamped to the
        settled balance; pass `WITHDRAW_ALL` to withdraw everything.
        """
        require_manager(vault, caller)
        require_valid_and_initialized(vault, self.module_id)
        if not isinstance(notional_funding, int) or isinstance(notional_funding, bool) or notional_funding < 0:
            raise PreconditionError("Withdraw amount must be a non-negative int")
        if notional_funding == 0:
            return FundingWithdrawal()

        with self._guard.hold(vault.address), self._atomic():
            new_settled_funding = self._update_settled_funding(vault)
            available = from_precise_unit_to_decimals(new_settled_funding, self.collateral_decimals)
            notional_funding = min(notional_funding, available)
            if notional_funding == 0:
                return FundingWithdrawal()

            balance_before = vault.balance_of(self.collateral_token)
            self.trading.withdraw(vault, notional_funding)
            self.settled_funding.mark_settled(vault.address)
            split = self._handle_fees(vault, notional_funding)
            self._update_default_collateral_unit(vault, balance_before)
            self.settled_funding.decrement(
                vault.address, to_precise_units_from_decimals(notional_funding, self.collateral_decimals),
            )

        self._emit(
            Event.FUNDING_WITHDRAWN, vault,
            collateral_token=self.collateral_token,
            amount_withdrawn=notional_funding,
            manager_fee=split.manager_fee,
            protocol_fee=split.protocol_fee,
        )
        return FundingWithdrawal(
            amount_withdrawn=notional_funding,
            manager_fee=split.manager_fee,
            protocol_fee=split.protocol_fee,
        )

    def update_performance_fee(self, vault: VaultLedger, new_fee: int, *, caller: str) -> None:
        """Change the fee rate; only allowed once all settled funding is withdrawn."""
        require_manager(vault, caller)
        require_valid_and_initialized(vault, self.module_id)
        self.fee_settings.update_performance_fee(
            vault.address, new_fee, settled_funding=self.settled_funding.get(vault.address),
        )
        self._emit(Event.PERFORMANCE_FEE_UPDATED, vault, new_performance_fee=new_fee)

    def update_fee_recipient(self, vault: VaultLedger, new_fee_recipient: str, *, caller: str) -> None:
        require_manager(vault, caller)
        require_valid_and_initialized(vault, self.module_id)
        self.fee_settings.update_fee_recipient(vault.address, new_fee_recipient)
        self._emit(Event.FEE_RECIPIENT_UPDATED, vault, new_fee_recipient=new_fee_recipient)

    # -- Issuance / redemption hooks --------------------------------------------

    def _check_hook_caller(self, vault: VaultLedger, caller: str) -> None:
        require_module(vault, caller)
        require_valid_and_initialized(vault, self.module_id)

    def module_issue_hook(self, vault: VaultLedger, vault_token_quantity: int, *, caller: str) -> None:
        """Settle funding, open positions for the issuance, and record the netted unit."""
        self._check_hook_caller(vault, caller)
        with self._atomic():
            updated_settled_funding = self._update_settled_funding(vault)
            if not self._hook_applies(vault):
                return
            raw_unit = self.trading.execute_position_trades(vault, vault_token_quantity, True, False)
            self.settled_funding.mark_settled(vault.address)
            net_unit = self._net_position_unit(vault, raw_unit, updated_settled_funding)
            vault.set_external_position_unit(self.collateral_token, self.module_id, net_unit)

    def module_redeem_hook(self, vault: VaultLedger, vault_token_quantity: int, *, caller: str) -> None:
        """Settle funding, close positions for the redemption, and record the netted unit."""
        self._check_hook_caller(vault, caller)
        if not self._hook_applies(vault):
            return
        with self._atomic():
            updated_settled_funding = self._update_settled_funding(vault)
            raw_unit = self.trading.execute_position_trades(vault, vault_token_quantity, False, False)
            self.settled_funding.mark_settled(vault.address)
            net_unit = self._net_position_unit(vault, raw_unit, updated_settled_funding)
            vault.set_external_position_unit(self.collateral_token, self.module_id, net_unit)

    # -- Read-only previews ------------------------------------------------------

    def get_updated_settled_funding(self, vault: VaultLedger) -> int:
        return self.settled_funding.preview(
            vault.address, self.exchange.pending_funding_payment(vault.address),
        )

    def get_redemption_adjustments(self, vault: VaultLedger, vault_token_quantity: int) -> RedemptionAdjustments:
        """Unit deltas a redemption of *vault_token_quantity* would apply, without mutating state."""
        components = tuple(vault.components())
        equity = [0] * len(components)
        debt = (0,) * len(components)

        if self._hook_applies(vault):
            raw_unit = self.trading.execute_position_trades(vault, vault_token_quantity, False, True)
            net_unit = self._net_position_unit(vault, raw_unit, self.get_updated_settled_funding(vault))
            current_unit = vault.get_external_position_unit(self.collateral_token, self.module_id)
            for i, component in enumerate(components):
                if component == self.collateral_token:
                    equity[i] = net_unit - current_unit

        return RedemptionAdjustments(
            components=components,
            equity_adjustments=tuple(equity),
            debt_adjustments=debt,
        )
