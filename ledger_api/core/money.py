"""
Money helpers.

Balances and amounts are stored as integer minor units (cents). Decimal values
only exist at the API boundary.
"""

from decimal import Decimal, InvalidOperation as DecimalError, localcontext
from typing import Union

from ledger_api.core.errors import InvalidAmount

MINOR_UNIT_EXPONENT = 2

# Largest value a signed 64-bit column can hold
MAX_MINOR_UNITS = 2 ** 63 - 1
MAX_MAJOR_DIGITS = len(str(MAX_MINOR_UNITS)) - MINOR_UNIT_EXPONENT


def to_minor_units(amount: Union[Decimal, int, str], allow_zero: bool = False) -> int:
    """
    Convert a decimal amount into integer minor units.

    Raises InvalidAmount when the value is not a finite number, is negative
    (or zero unless allow_zero is set), has more precision than the minor
    unit, or does not fit in storage.
    """
    if isinstance(amount, bool):
        raise InvalidAmount("Amount must be a number")
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (DecimalError, ValueError):
        raise InvalidAmount("Amount must be a number")

    if not value.is_finite():
        raise InvalidAmount("Amount must be a finite number")
    if value < 0:
        raise InvalidAmount("Amount cannot be negative")
    if value == 0 and not allow_zero:
        raise InvalidAmount("Amount must be positive")
    if value and value.adjusted() > MAX_MAJOR_DIGITS:
        raise InvalidAmount("Amount is too large")

    # Enough precision to scale every digit exactly; nothing is rounded
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(value.as_tuple().digits) + MINOR_UNIT_EXPONENT)
        scaled = value.scaleb(MINOR_UNIT_EXPONENT)
        integral = scaled.to_integral_value()
    if scaled != integral:
        raise InvalidAmount(
            f"Amount cannot have more than {MINOR_UNIT_EXPONENT} decimal places"
        )

    minor = int(scaled)
    if minor > MAX_MINOR_UNITS:
        raise InvalidAmount("Amount is too large")
    return minor


def from_minor_units(minor: int) -> Decimal:
    """Convert integer minor units back to a Decimal with fixed precision."""
    return Decimal(minor).scaleb(-MINOR_UNIT_EXPONENT)
