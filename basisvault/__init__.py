"""
basisvault: funding settlement and performance-fee accounting for vaults that
hold perpetual positions at an external exchange.
"""

from .config import ModuleConfig, load_config
from .integration.basis_trading_module import WITHDRAW_ALL, BasisTradingModule

__all__ = [
    "BasisTradingModule",
    "ModuleConfig",
    "WITHDRAW_ALL",
    "load_config",
]
