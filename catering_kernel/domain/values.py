"""
Values -- Decimal helpers for event money arithmetic.

Responsibility:
    Coerce raw numbers arriving from rules documents and booking forms into
    finite ``Decimal`` values, apply percentages, and round money at the
    persistence edge.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by the config loader and every engine module.

Invariants enforced:
    - Decimal-only arithmetic: floats are converted through ``str()`` so
      ``0.1`` becomes ``Decimal("0.1")``, never its binary expansion.
    - NaN and infinities never leave this module; they are replaced by the
      caller's default.
    - Rounding happens only through ``round_money``, which engines do not
      call.  Snapshot builders call it once, at the edge.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
HUNDRED = Decimal("100")

_CENTS = Decimal("0.01")


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    """
    Convert ``value`` to a finite Decimal, or return ``default``.

    Postconditions:
        - Returns a finite Decimal.
        - ``None``, booleans, NaN, infinities and unparseable strings all
          yield ``default``.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            return default
    else:
        return default
    return result if result.is_finite() else default


def is_number(value: Any) -> bool:
    """True when ``value`` is a finite number usable in money math."""
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, (int, float)):
        return Decimal(str(value)).is_finite()
    return False


def non_negative(value: Any) -> Decimal:
    """Read a rate or amount as ``max(0, value)``; non-numbers read as 0."""
    return max(ZERO, to_decimal(value))


def optional_non_negative(value: Any) -> Decimal | None:
    """
    Return ``value`` as a Decimal when it is finite and >= 0, else None.

    Used for the menu-priced subtotal and food cost overrides, which only
    take effect when they are usable numbers.
    """
    if value is None:
        return None
    result = to_decimal(value, default=Decimal("-1"))
    if result < ZERO:
        return None
    return result


def positive_or_none(value: Any) -> Decimal | None:
    """A pay cap: positive finite amounts stand, anything else means no cap."""
    result = to_decimal(value)
    return result if result > ZERO else None


def percent_of(amount: Decimal, percent: Any) -> Decimal:
    """``amount * max(0, percent) / 100``."""
    return amount * non_negative(percent) / HUNDRED


def round_money(value: Decimal) -> Decimal:
    """Round to cents, half-up. Call only at the persistence edge."""
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)


def to_count(value: Any) -> int:
    """Read a head count as a non-negative whole number (fractions truncate)."""
    return max(0, int(to_decimal(value)))
