"""
In-memory collaborators for the basis-trading module
"""

from .balances import TokenBalances
from .perp import InMemoryPerpExchange, InMemoryTradingEngine, StaticController
from .vault_ledger import InMemoryVault, ModuleStatus

__all__ = [
    "TokenBalances",
    "InMemoryPerpExchange",
    "InMemoryTradingEngine",
    "StaticController",
    "InMemoryVault",
    "ModuleStatus",
]
