"""
Money Utilities - Decimal operations for cart pricing.

Prices, price modifiers and VAT are Decimal end to end; floats only appear
at the JSON boundary (to_float).
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Optional, Union

Number = Union[str, int, float, Decimal]

# Cent precision for line and cart amounts
MONEY_PRECISION = Decimal("0.01")


def to_decimal(value: Union[Number, None]) -> Decimal:
    """
    Convert any value to Decimal, falling back to Decimal("0").

    Use for trusted values (catalog columns). Stored cart fields go through
    parse_decimal instead so that garbage can be told apart from zero.
    """
    if value is None:
        return Decimal("0")

    if isinstance(value, Decimal):
        return value

    try:
        # Via str to keep 0.1 as 0.1
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def parse_decimal(value: Union[Number, None]) -> Optional[Decimal]:
    """
    Parse a stored decimal string.

    Returns:
        Decimal, or None if the value is missing or not a finite number
    """
    if value is None:
        return None
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not result.is_finite():
        return None
    return result


def format_decimal(value: Number) -> str:
    """Encode a Decimal for storage without exponent notation."""
    decimal_value = to_decimal(value)
    text = format(decimal_value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


def round_money(value: Number) -> Decimal:
    """Round a monetary value to cents (half up)."""
    return to_decimal(value).quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def to_float(value: Number) -> float:
    """
    Convert Decimal to float for JSON serialization.

    Use only at API boundaries, not for internal calculations.
    """
    return float(to_decimal(value))


def add(a: Number, b: Number) -> Decimal:
    """Safe addition of monetary values."""
    return to_decimal(a) + to_decimal(b)


def multiply(value: Number, factor: Number) -> Decimal:
    """Safe multiplication of monetary value by a factor."""
    return to_decimal(value) * to_decimal(factor)


def percent(value: Number, percent_value: Number) -> Decimal:
    """Calculate percentage of a monetary value (e.g. VAT at 21)."""
    return to_decimal(value) * to_decimal(percent_value) / Decimal(100)
