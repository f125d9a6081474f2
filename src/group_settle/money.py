"""Decimal money primitives shared by every part of the settlement engine."""

from decimal import ROUND_HALF_UP, Decimal

# Differences at or below one cent are rounding noise.
EPSILON = Decimal("0.01")

CENT = Decimal("0.01")


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """
    Coerce a user-supplied amount to Decimal.

    Floats are routed through ``str`` so that ``0.1`` becomes ``Decimal("0.1")``
    rather than its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round2(amount: Decimal | int | float | str) -> Decimal:
    """
    Round to 2 decimal places, half away from zero.

    Decimal's ROUND_HALF_UP rounds ties away from zero for both signs:
    ``2.345 -> 2.35`` and ``-2.345 -> -2.35``.

    Args:
        amount: Amount to round

    Returns:
        Amount quantized to cents
    """
    return to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def is_zero(amount: Decimal) -> bool:
    """True when the amount is within EPSILON of zero."""
    return abs(amount) <= EPSILON


def is_whole_cents(amount: Decimal) -> bool:
    """True when the amount has no fraction of a cent."""
    return amount == round2(amount)
