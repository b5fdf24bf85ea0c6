"""Exception types for the basis-trading accounting engine.

Every refusal is raised before any module-owned state changes; callers see
the refusal name as the exception message.
"""

from __future__ import annotations


class BasisVaultError(Exception):
    """Base class for all engine errors."""


class PreconditionError(BasisVaultError):
    """Raised when a named precondition of an operation is not satisfied."""


class UnauthorizedError(PreconditionError):
    """Raised when the caller lacks the capability an operation requires."""


class ReentrancyError(PreconditionError):
    """Raised when a guarded entry point is re-entered for the same vault."""


class ArithmeticViolationError(BasisVaultError):
    """Raised on overflow, underflow, invalid sign conversion or division by zero."""


class UndercollateralizedError(BasisVaultError):
    """Raised when a vault balance falls below what its position units imply."""

    def __init__(self, message: str, *, component: str | None = None) -> None:
        self.component = component
        super().__init__(message)
