"""
Sales models for the shop counter.

A Sale is written once at checkout with every financial field frozen.
Afterwards only the payment settlement fields (paid amount, payment method,
balance due) may change. SaleItems are disconnected snapshots of the product
name and price at checkout time; they hold no reference to the catalog.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from apps.core.formatting_utils import quantize_money


def _money_field(help_text, **kwargs):
    return models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text=help_text,
        **kwargs,
    )


class Sale(models.Model):
    """
    A billed sale with its frozen totals.

    Financial invariants on every stored row:
    - subtotal is the sum of the item line totals
    - taxable_amount = subtotal - discount_amount
    - total_amount = taxable_amount + gst_amount
    - balance_due = total_amount - paid_amount
    """

    DEFAULT_PAYMENT_METHOD = "Cash"

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the sale",
    )

    invoice_no = models.CharField(
        max_length=40,
        unique=True,
        help_text="Human-readable invoice number (e.g., 'INV-20250305-142210-3FA9')",
    )

    # Customer (optional for walk-in sales)
    customer_name = models.CharField(
        max_length=200,
        blank=True,
        null=True,
        help_text="Customer name printed on the invoice",
    )

    customer_phone = models.CharField(
        max_length=30,
        blank=True,
        null=True,
        help_text="Customer phone number",
    )

    # Rates
    gst_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00")), MaxValueValidator(Decimal("28.00"))],
        help_text="Single GST rate applied to the whole bill",
    )

    discount_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00")), MaxValueValidator(Decimal("100.00"))],
        help_text="Bill-level discount percentage",
    )

    # Financial details
    subtotal = _money_field("Sum of line totals")
    discount_amount = _money_field("Discount amount", default=Decimal("0.00"))
    taxable_amount = _money_field("Subtotal after discount, base for GST")
    gst_amount = _money_field("GST amount", default=Decimal("0.00"))
    total_amount = _money_field("Taxable amount plus GST")

    # Payment settlement
    paid_amount = _money_field("Amount paid so far", default=Decimal("0.00"))
    balance_due = _money_field("Total minus amount paid", default=Decimal("0.00"))

    payment_method = models.CharField(
        max_length=50,
        default=DEFAULT_PAYMENT_METHOD,
        help_text="Payment method (Cash, Card, UPI, ...)",
    )

    # Timestamps (set from the checkout clock, not auto_now)
    created_at = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="When the sale was created",
    )

    updated_at = models.DateTimeField(
        default=timezone.now,
        help_text="When the sale was last updated",
    )

    class Meta:
        db_table = "sales"
        ordering = ["-created_at"]
        verbose_name = "Sale"
        verbose_name_plural = "Sales"

    def __str__(self):
        return f"{self.invoice_no} - {self.total_amount}"

    def apply_payment(
        self, paid_amount: Decimal, payment_method: Optional[str], now: datetime
    ) -> None:
        """
        Record a revised payment.

        ``paid_amount`` is clamped to [0, total_amount] and rounded to paise;
        the total itself is never recomputed. The payment method changes only
        when a non-blank value is given.
        """
        paid = quantize_money(min(max(paid_amount, Decimal("0.00")), self.total_amount))
        self.paid_amount = paid
        self.balance_due = self.total_amount - paid

        if payment_method is not None and payment_method.strip():
            self.payment_method = payment_method.strip()

        self.updated_at = now
        self.save(update_fields=["paid_amount", "balance_due", "payment_method", "updated_at"])


class SaleItem(models.Model):
    """
    Line item snapshot.

    Stores the product code, name and unit price as they were at checkout.
    Immutable after creation.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the sale item",
    )

    sale = models.ForeignKey(
        Sale,
        on_delete=models.CASCADE,
        related_name="items",
        help_text="Sale that this item belongs to",
    )

    position = models.PositiveIntegerField(
        default=0,
        help_text="Line order on the invoice (0-based)",
    )

    product_code = models.CharField(
        max_length=64,
        help_text="Product code at time of sale",
    )

    name = models.CharField(
        max_length=200,
        help_text="Product name at time of sale",
    )

    quantity = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text="Quantity sold",
    )

    unit_price = _money_field("Unit price at time of sale")
    line_total = _money_field("Line total (quantity * unit_price)")

    class Meta:
        db_table = "sale_items"
        ordering = ["sale", "position"]
        verbose_name = "Sale Item"
        verbose_name_plural = "Sale Items"

    def __str__(self):
        return f"{self.name} x {self.quantity}"
