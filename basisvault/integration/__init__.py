"""
Module surface and collaborator interfaces
"""

from .basis_trading_module import WITHDRAW_ALL, BasisTradingModule
from .interfaces import Controller, PerpExchange, TradingEngine, VaultLedger

__all__ = [
    "BasisTradingModule",
    "WITHDRAW_ALL",
    "Controller",
    "PerpExchange",
    "TradingEngine",
    "VaultLedger",
]
