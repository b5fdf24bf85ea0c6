"""Call-scoped guards for the basis-trading module.

`ReentrancyGuard` keeps an explicit per-vault "in progress" flag. Entering a
guarded scope for a vault that is already in progress raises; the flag is
cleared on every exit path.

The capability checks are plain predicates over the vault ledger plus raising
wrappers, one per role the module recognizes.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator, Set

from .errors import ReentrancyError, UnauthorizedError

if TYPE_CHECKING:
    from ..integration.interfaces import VaultLedger


class ReentrancyGuard:
    def __init__(self) -> None:
        self._entered: Set[str] = set()

    def is_entered(self, vault: str) -> bool:
        return vault in self._entered

    @contextmanager
    def hold(self, vault: str) -> Iterator[None]:
        if vault in self._entered:
            raise ReentrancyError("ReentrancyGuard: reentrant call")
        self._entered.add(vault)
        try:
            yield
        finally:
            self._entered.discard(vault)


def is_manager(vault: "VaultLedger", caller: str) -> bool:
    return caller == vault.manager


def is_registered_module(vault: "VaultLedger", caller: str) -> bool:
    return vault.is_initialized_module(caller)


def require_manager(vault: "VaultLedger", caller: str) -> None:
    if not is_manager(vault, caller):
        raise UnauthorizedError("Must be the SetToken manager")


def require_valid_and_initialized(vault: "VaultLedger", module_id: str) -> None:
    if not vault.is_initialized_module(module_id):
        raise UnauthorizedError("Must be a valid and initialized SetToken")


def require_valid_and_pending(vault: "VaultLedger", module_id: str) -> None:
    if not vault.is_pending_module(module_id):
        raise UnauthorizedError("Must be pending initialization")


def require_module(vault: "VaultLedger", caller: str) -> None:
    if not is_registered_module(vault, caller):
        raise UnauthorizedError("Only the module can call")


def require_vault_caller(vault: "VaultLedger", caller: str) -> None:
    if caller != vault.address:
        raise UnauthorizedError("Only the SetToken can call")
