"""
Money, percentage and date formatting for printed documents.

All helpers take ``Decimal`` values and never round-trip through float.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from apps.core.exceptions import ValidationError

TWO_PLACES = Decimal("0.01")


def quantize_money(value: Union[Decimal, int, str]) -> Decimal:
    """
    Round a money value to two decimal places (half up).

    Raises:
        ValidationError: If the value has too many digits to hold in paise

    Examples:
        >>> quantize_money(Decimal("16.6665"))
        Decimal('16.67')
    """
    try:
        return Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f"Amount out of range: {value}")


def format_amount(value: Decimal) -> str:
    """Format a money value with exactly two decimals, e.g. ``945.00``."""
    return f"{quantize_money(value):.2f}"


def format_money(value: Decimal, symbol: str = "") -> str:
    """
    Format a money value with an optional currency symbol.

    Examples:
        >>> format_money(Decimal("45"), "Rs.")
        'Rs. 45.00'
    """
    amount = format_amount(value)
    return f"{symbol} {amount}" if symbol else amount


def format_percent(value: Decimal) -> str:
    """
    Format a percentage with at most two decimals and no trailing zeros.

    Examples:
        >>> format_percent(Decimal("5.00"))
        '5'
        >>> format_percent(Decimal("12.50"))
        '12.5'
    """
    text = f"{quantize_money(value):.2f}".rstrip("0").rstrip(".")
    return text or "0"


def format_invoice_date(value: datetime) -> str:
    """Format a timestamp as printed on invoices, e.g. ``05 Mar 2025``."""
    return value.strftime("%d %b %Y")
