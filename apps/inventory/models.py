"""
Inventory models for the shop counter.

A Product is the catalog record scanned at the counter. Its quantity is
decremented by checkout; sales keep their own snapshot of name and price,
so catalog edits never reach historical invoices.
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class Product(models.Model):
    """
    Catalog product identified by a shop-assigned product code.

    The barcode payload printed on labels is ``barcode_value`` when set,
    otherwise the product code itself.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the product",
    )

    product_code = models.CharField(
        max_length=64,
        unique=True,
        help_text="Unique manual code/SKU scanned at the counter",
    )

    name = models.CharField(
        max_length=200,
        help_text="Product name printed on invoices",
    )

    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Unit selling price",
    )

    quantity = models.PositiveIntegerField(
        default=0,
        help_text="Units currently in stock",
    )

    barcode_value = models.CharField(
        max_length=64,
        blank=True,
        default="",
        help_text="Explicit barcode payload (numeric 12/13 digits recommended)",
    )

    # Timestamps
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the product was created",
    )

    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the product was last updated",
    )

    class Meta:
        db_table = "inventory_products"
        ordering = ["-updated_at"]
        verbose_name = "Product"
        verbose_name_plural = "Products"

    def __str__(self):
        return f"{self.product_code} - {self.name}"

    @property
    def barcode_payload(self) -> str:
        """Text encoded into this product's barcode."""
        value = (self.barcode_value or "").strip()
        return value or self.product_code
