"""Fixed-point arithmetic at 18-decimal precision.

Every function is stateless and operates on plain Python ints. Rounding is
explicit in the name: the bare forms floor, the `_ceil` forms round up.

Signed `precise_mul` / `precise_div` truncate toward zero, matching EVM signed
integer division, so negative external units round toward zero rather than
toward -inf.
"""

from __future__ import annotations

from .errors import ArithmeticViolationError

PRECISE_UNIT: int = 10**18
MAX_UINT256: int = 2**256 - 1
MAX_INT256: int = 2**255 - 1
MIN_INT256: int = -(2**255)
PRECISE_DECIMALS: int = 18


# -- Type / sign helpers -----------------------------------------------------

def _require_int(name: str, x: int) -> None:
    if not isinstance(x, int) or isinstance(x, bool):
        raise TypeError(f"{name} must be an int")


def _require_uint(name: str, x: int) -> None:
    _require_int(name, x)
    if x < 0:
        raise ArithmeticViolationError(f"{name} must be non-negative: {x}")
    if x > MAX_UINT256:
        raise ArithmeticViolationError(f"{name} overflows uint256: {x}")


def to_int256(x: int) -> int:
    """Unsigned to signed conversion; fails when *x* exceeds int256."""
    _require_int("x", x)
    if x < 0:
        raise ArithmeticViolationError(f"to_int256 expects a non-negative value: {x}")
    if x > MAX_INT256:
        raise ArithmeticViolationError(f"value doesn't fit in an int256: {x}")
    return x


def to_uint256(x: int) -> int:
    """Signed to unsigned conversion; fails on negative input."""
    _require_int("x", x)
    if x < 0:
        raise ArithmeticViolationError(f"value must be positive: {x}")
    if x > MAX_UINT256:
        raise ArithmeticViolationError(f"value doesn't fit in a uint256: {x}")
    return x


def _div_trunc(a: int, b: int) -> int:
    """Signed division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


# -- Checked / saturating arithmetic ------------------------------------------

def checked_add(a: int, b: int) -> int:
    _require_uint("a", a)
    _require_uint("b", b)
    out = a + b
    if out > MAX_UINT256:
        raise ArithmeticViolationError("addition overflow")
    return out


def checked_sub(a: int, b: int) -> int:
    _require_uint("a", a)
    _require_uint("b", b)
    if b > a:
        raise ArithmeticViolationError("subtraction overflow")
    return a - b


def saturating_sub(a: int, b: int) -> int:
    """``max(a - b, 0)`` for unsigned operands."""
    _require_uint("a", a)
    _require_uint("b", b)
    return a - b if a > b else 0


def clamp_non_negative(x: int) -> int:
    """Floor a signed value at zero."""
    _require_int("x", x)
    return x if x > 0 else 0


# -- Precise multiply / divide -------------------------------------------------

def precise_mul(a: int, b: int) -> int:
    """``a * b / 1e18``; floor for unsigned operands, truncation for signed."""
    _require_int("a", a)
    _require_int("b", b)
    return _div_trunc(a * b, PRECISE_UNIT)


def precise_mul_ceil(a: int, b: int) -> int:
    """``ceil(a * b / 1e18)`` for unsigned operands."""
    _require_uint("a", a)
    _require_uint("b", b)
    if a == 0 or b == 0:
        return 0
    return (a * b - 1) // PRECISE_UNIT + 1


def precise_div(a: int, b: int) -> int:
    """``a * 1e18 / b``; floor for unsigned operands, truncation for signed."""
    _require_int("a", a)
    _require_int("b", b)
    if b == 0:
        raise ArithmeticViolationError("cannot divide by 0")
    return _div_trunc(a * PRECISE_UNIT, b)


def mul_div_ceil(a: int, b: int, denominator: int) -> int:
    """``ceil(a * b / denominator)`` computed without intermediate rounding."""
    _require_uint("a", a)
    _require_uint("b", b)
    _require_uint("denominator", denominator)
    if denominator == 0:
        raise ArithmeticViolationError("cannot divide by 0")
    return -((-a * b) // denominator)


# -- Decimal scale conversions -------------------------------------------------

def _scale(decimals: int) -> int:
    _require_int("decimals", decimals)
    if not (0 <= decimals <= PRECISE_DECIMALS):
        raise ValueError(f"decimals must be in [0, {PRECISE_DECIMALS}]: {decimals}")
    return 10 ** (PRECISE_DECIMALS - decimals)


def from_precise_unit_to_decimals(amount: int, decimals: int, *, round_up: bool = False) -> int:
    """Convert an 18-decimal amount to a token with *decimals* decimals.

    Truncates toward zero by default (a credit about to be paid out);
    ``round_up=True`` rounds away from zero (an obligation).
    """
    _require_int("amount", amount)
    scale = _scale(decimals)
    magnitude = abs(amount)
    q = -((-magnitude) // scale) if round_up else magnitude // scale
    return -q if amount < 0 else q


def to_precise_units_from_decimals(amount: int, decimals: int) -> int:
    """Convert a token amount with *decimals* decimals to 18-decimal units (exact)."""
    _require_int("amount", amount)
    return amount * _scale(decimals)
