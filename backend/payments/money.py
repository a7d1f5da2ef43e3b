"""
Monetary precision helpers for order pricing and payment reconciliation.

CRITICAL: Every amount that touches an order or a payment goes through this
module. Money is never represented as a binary float.

Key Principles:
1. NEVER use float for money (floats are converted through str first)
2. Store and compare amounts at two decimal places
3. Use ROUND_HALF_EVEN (banker's rounding) to prevent systematic bias
4. Round derived amounts (tax, service charge) BEFORE summing totals
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN, getcontext
from typing import Iterable, Union

# Set high precision for intermediate calculations
getcontext().prec = 28

Number = Union[Decimal, str, int, float]

# Smallest unit of the store currency (cents)
MONEY_EXPONENT = 2
MONEY_PLACES = Decimal(10) ** -MONEY_EXPONENT
ZERO = Decimal("0.00")


def to_decimal(amount: Number) -> Decimal:
    """
    Convert any numeric input to Decimal without float artifacts.

    Raises:
        ValueError: if the value is not a finite number

    Examples:
        >>> to_decimal(0.1)
        Decimal('0.1')
        >>> to_decimal("12.50")
        Decimal('12.50')
    """
    if isinstance(amount, Decimal):
        value = amount
    else:
        if isinstance(amount, bool):
            raise ValueError(f"Not a monetary amount: {amount!r}")
        if isinstance(amount, float):
            # Convert float to string first to avoid precision issues
            amount = str(amount)
        try:
            value = Decimal(amount)
        except (InvalidOperation, TypeError):
            raise ValueError(f"Not a monetary amount: {amount!r}")

    if not value.is_finite():
        raise ValueError(f"Not a monetary amount: {amount!r}")
    return value


def quantize(amount: Number) -> Decimal:
    """
    Round to two decimals using banker's rounding (ROUND_HALF_EVEN).

    Examples:
        >>> quantize("10.127")
        Decimal('10.13')
        >>> quantize("10.125")
        Decimal('10.12')  # Banker's rounding
    """
    return to_decimal(amount).quantize(MONEY_PLACES, rounding=ROUND_HALF_EVEN)


def has_money_precision(amount: Number) -> bool:
    """
    True when the amount needs no rounding to be stored (at most two decimals).

    Examples:
        >>> has_money_precision("10.10")
        True
        >>> has_money_precision("10.105")
        False
    """
    value = to_decimal(amount)
    return value == value.quantize(MONEY_PLACES)


def to_minor(amount: Number) -> int:
    """
    Convert to minor units (cents) after quantization.

    Examples:
        >>> to_minor("10.127")
        1013
    """
    quantized = quantize(amount)
    return int((quantized * (10 ** MONEY_EXPONENT)).to_integral_value())


def from_minor(minor: int) -> Decimal:
    """
    Convert from minor units to Decimal.

    Examples:
        >>> from_minor(1013)
        Decimal('10.13')
    """
    return (Decimal(minor) / (10 ** MONEY_EXPONENT)).quantize(MONEY_PLACES)


def apply_rate(amount: Number, rate: Number) -> Decimal:
    """
    Multiply an amount by a fractional rate and round to cents.

    Used for tax and service charge, where rate 0.10 means 10%.

    Examples:
        >>> apply_rate("120000", "0.10")
        Decimal('12000.00')
        >>> apply_rate("0.05", "0.10")
        Decimal('0.00')  # 0.005 rounds half to even
    """
    return quantize(to_decimal(amount) * to_decimal(rate))


def sum_money(amounts: Iterable[Number]) -> Decimal:
    """Sum amounts, always returning a Decimal (ZERO for an empty iterable)."""
    return sum((to_decimal(amount) for amount in amounts), ZERO)


def format_money(amount: Number) -> str:
    """
    Format an amount for human-readable notes and messages.

    Examples:
        >>> format_money("138000")
        '138,000.00'
    """
    return f"{quantize(amount):,.2f}"
