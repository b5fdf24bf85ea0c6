"""
In-memory vault token ledger.

Tracks total supply, per-component default units, per-module external units
and the module registry. Spot balances live in a shared `TokenBalances` so
transfers between the vault, fee recipients and the exchange stay consistent.

Every `transfer_out` is strict (the recipient must receive exactly the
requested amount) and is followed by the post-transfer-out collateralization
check for the transferred component.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Sequence, Tuple

from ..core.collateralization import validate_collateralization_post_transfer_out
from ..core.errors import PreconditionError
from ..core.precise_math import to_int256
from .balances import TokenBalances


class ModuleStatus(Enum):
    NONE = "none"
    PENDING = "pending"
    INITIALIZED = "initialized"


@dataclass
class InMemoryVault:
    address: str
    manager: str
    balances: TokenBalances
    supply: int = 0
    _components: List[str] = field(default_factory=list)
    _default_units: Dict[str, int] = field(default_factory=dict)
    _external_units: Dict[Tuple[str, str], int] = field(default_factory=dict)
    _modules: Dict[str, ModuleStatus] = field(default_factory=dict)

    # -- Supply ---------------------------------------------------------------

    def total_supply(self) -> int:
        return self.supply

    def set_total_supply(self, supply: int) -> None:
        if supply < 0:
            raise ValueError(f"supply must be non-negative: {supply}")
        self.supply = supply

    # -- Components / positions -----------------------------------------------

    def components(self) -> Sequence[str]:
        return tuple(self._components)

    def _track(self, component: str) -> None:
        if component not in self._components:
            self._components.append(component)

    def _untrack_if_empty(self, component: str) -> None:
        if self._default_units.get(component, 0) != 0:
            return
        if any(c == component for (c, _m) in self._external_units):
            return
        if component in self._components:
            self._components.remove(component)

    def has_external_position(self, component: str) -> bool:
        return any(c == component for (c, _m) in self._external_units)

    def get_default_position_unit(self, component: str) -> int:
        return self._default_units.get(component, 0)

    def get_external_position_unit(self, component: str, module: str) -> int:
        return self._external_units.get((component, module), 0)

    def edit_default_position_unit(self, component: str, unit: int) -> None:
        to_int256(unit)
        if unit == 0:
            self._default_units.pop(component, None)
            self._untrack_if_empty(component)
            return
        self._default_units[component] = unit
        self._track(component)

    def set_external_position_unit(self, component: str, module: str, unit: int) -> None:
        self._require_initialized(module)
        if unit == 0:
            self._external_units.pop((component, module), None)
            self._untrack_if_empty(component)
            return
        self._external_units[(component, module)] = unit
        self._track(component)

    # -- Balances -------------------------------------------------------------

    def balance_of(self, component: str) -> int:
        return self.balances.balance_of(self.address, component)

    def transfer_out(self, component: str, to: str, amount: int) -> None:
        recipient_before = self.balances.balance_of(to, component)
        self.balances.transfer(component, self.address, to, amount)
        received = self.balances.balance_of(to, component) - recipient_before
        if received != amount:
            raise PreconditionError("Invalid post transfer balance")
        validate_collateralization_post_transfer_out(
            self.balance_of(component),
            self.supply,
            self.get_default_position_unit(component),
            component=component,
        )

    # -- Module registry --------------------------------------------------------

    def add_module(self, module: str) -> None:
        if self._modules.get(module, ModuleStatus.NONE) != ModuleStatus.NONE:
            raise PreconditionError("Module must not be added")
        self._modules[module] = ModuleStatus.PENDING

    def is_pending_module(self, module: str) -> bool:
        return self._modules.get(module) == ModuleStatus.PENDING

    def is_initialized_module(self, module: str) -> bool:
        return self._modules.get(module) == ModuleStatus.INITIALIZED

    def initialize_module(self, module: str) -> None:
        if not self.is_pending_module(module):
            raise PreconditionError("Module must be pending")
        self._modules[module] = ModuleStatus.INITIALIZED

    def remove_module(self, module: str) -> None:
        if not self.is_initialized_module(module):
            raise PreconditionError("Module must be added")
        self._modules.pop(module)
        for key in [k for k in self._external_units if k[1] == module]:
            self._external_units.pop(key)
            self._untrack_if_empty(key[0])

    def _require_initialized(self, module: str) -> None:
        if not self.is_initialized_module(module):
            raise PreconditionError("Only the module can call")
