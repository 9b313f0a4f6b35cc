"""
Bill arithmetic.

The computation order is fixed so every run rounds identically:

1. line_total = unit_price * quantity
2. subtotal = sum of line totals
3. discount_amount = clamp(subtotal * discount% / 100, 0, subtotal)
4. taxable = max(0, subtotal - discount_amount)
5. gst_amount = taxable * gst% / 100
6. total = taxable + gst_amount
7. paid = clamp(paid, 0, total); balance_due = total - paid

Percentages are clamped (discount to [0, 100], GST to [0, 28]) and held to
two decimals. The discount and GST amounts are rounded half up to two
decimals; everything after them is derived from the rounded values, so the
stored totals add up exactly.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, List

from apps.core.exceptions import ValidationError
from apps.core.formatting_utils import quantize_money

ZERO = Decimal("0.00")
HUNDRED = Decimal("100")
MAX_DISCOUNT_PERCENT = Decimal("100")
MAX_GST_PERCENT = Decimal("28")


@dataclass(frozen=True)
class BillLine:
    """A priced cart line."""

    product_code: str
    name: str
    quantity: int
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class BillTotals:
    """Every financial figure of a bill."""

    subtotal: Decimal
    discount_percent: Decimal
    discount_amount: Decimal
    taxable_amount: Decimal
    gst_percent: Decimal
    gst_amount: Decimal
    total_amount: Decimal
    paid_amount: Decimal
    balance_due: Decimal


def to_decimal(value, field: str = "value") -> Decimal:
    """
    Convert user input to Decimal without passing through binary floats.

    ``None`` and blank strings count as zero.
    """
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid {field}: {value!r}", {"field": field})
    if not result.is_finite():
        raise ValidationError(f"Invalid {field}: {value!r}", {"field": field})
    return result


def clamp(value: Decimal, low: Decimal, high: Decimal) -> Decimal:
    return max(low, min(high, value))


def compute_totals(
    lines: Iterable[BillLine], gst_percent, discount_percent, paid_amount
) -> BillTotals:
    """Compute the bill for ``lines`` in the fixed order described above."""
    lines: List[BillLine] = list(lines)

    subtotal = sum((line.line_total for line in lines), ZERO)

    discount_pct = quantize_money(
        clamp(to_decimal(discount_percent, "discount_percent"), ZERO, MAX_DISCOUNT_PERCENT)
    )
    discount_amount = clamp(quantize_money(subtotal * discount_pct / HUNDRED), ZERO, subtotal)

    taxable = max(ZERO, subtotal - discount_amount)

    gst_pct = quantize_money(clamp(to_decimal(gst_percent, "gst_percent"), ZERO, MAX_GST_PERCENT))
    gst_amount = quantize_money(taxable * gst_pct / HUNDRED)

    total = taxable + gst_amount

    paid = quantize_money(clamp(to_decimal(paid_amount, "paid_amount"), ZERO, total))
    balance_due = total - paid

    return BillTotals(
        subtotal=subtotal,
        discount_percent=discount_pct,
        discount_amount=discount_amount,
        taxable_amount=taxable,
        gst_percent=gst_pct,
        gst_amount=gst_amount,
        total_amount=total,
        paid_amount=paid,
        balance_due=balance_due,
    )
