import decimal
import uuid

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

MONEY_VALIDATORS = [django.core.validators.MinValueValidator(decimal.Decimal("0.00"))]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Sale",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for the sale",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "invoice_no",
                    models.CharField(
                        help_text="Human-readable invoice number (e.g., 'INV-20250305-142210-3FA9')",
                        max_length=40,
                        unique=True,
                    ),
                ),
                (
                    "customer_name",
                    models.CharField(
                        blank=True,
                        help_text="Customer name printed on the invoice",
                        max_length=200,
                        null=True,
                    ),
                ),
                (
                    "customer_phone",
                    models.CharField(
                        blank=True, help_text="Customer phone number", max_length=30, null=True
                    ),
                ),
                (
                    "gst_percent",
                    models.DecimalField(
                        decimal_places=2,
                        default=decimal.Decimal("0.00"),
                        help_text="Single GST rate applied to the whole bill",
                        max_digits=5,
                        validators=[
                            django.core.validators.MinValueValidator(decimal.Decimal("0.00")),
                            django.core.validators.MaxValueValidator(decimal.Decimal("28.00")),
                        ],
                    ),
                ),
                (
                    "discount_percent",
                    models.DecimalField(
                        decimal_places=2,
                        default=decimal.Decimal("0.00"),
                        help_text="Bill-level discount percentage",
                        max_digits=5,
                        validators=[
                            django.core.validators.MinValueValidator(decimal.Decimal("0.00")),
                            django.core.validators.MaxValueValidator(decimal.Decimal("100.00")),
                        ],
                    ),
                ),
                (
                    "subtotal",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Sum of line totals",
                        max_digits=12,
                        validators=MONEY_VALIDATORS,
                    ),
                ),
                (
                    "discount_amount",
                    models.DecimalField(
                        decimal_places=2,
                        default=decimal.Decimal("0.00"),
                        help_text="Discount amount",
                        max_digits=12,
                        validators=MONEY_VALIDATORS,
                    ),
                ),
                (
                    "taxable_amount",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Subtotal after discount, base for GST",
                        max_digits=12,
                        validators=MONEY_VALIDATORS,
                    ),
                ),
                (
                    "gst_amount",
                    models.DecimalField(
                        decimal_places=2,
                        default=decimal.Decimal("0.00"),
                        help_text="GST amount",
                        max_digits=12,
                        validators=MONEY_VALIDATORS,
                    ),
                ),
                (
                    "total_amount",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Taxable amount plus GST",
                        max_digits=12,
                        validators=MONEY_VALIDATORS,
                    ),
                ),
                (
                    "paid_amount",
                    models.DecimalField(
                        decimal_places=2,
                        default=decimal.Decimal("0.00"),
                        help_text="Amount paid so far",
                        max_digits=12,
                        validators=MONEY_VALIDATORS,
                    ),
                ),
                (
                    "balance_due",
                    models.DecimalField(
                        decimal_places=2,
                        default=decimal.Decimal("0.00"),
                        help_text="Total minus amount paid",
                        max_digits=12,
                        validators=MONEY_VALIDATORS,
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(
                        default="Cash",
                        help_text="Payment method (Cash, Card, UPI, ...)",
                        max_length=50,
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        db_index=True,
                        default=django.utils.timezone.now,
                        help_text="When the sale was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        default=django.utils.timezone.now,
                        help_text="When the sale was last updated",
                    ),
                ),
            ],
            options={
                "verbose_name": "Sale",
                "verbose_name_plural": "Sales",
                "db_table": "sales",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="SaleItem",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for the sale item",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "position",
                    models.PositiveIntegerField(
                        default=0, help_text="Line order on the invoice (0-based)"
                    ),
                ),
                (
                    "product_code",
                    models.CharField(help_text="Product code at time of sale", max_length=64),
                ),
                (
                    "name",
                    models.CharField(help_text="Product name at time of sale", max_length=200),
                ),
                (
                    "quantity",
                    models.PositiveIntegerField(
                        help_text="Quantity sold",
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "unit_price",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Unit price at time of sale",
                        max_digits=12,
                        validators=MONEY_VALIDATORS,
                    ),
                ),
                (
                    "line_total",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Line total (quantity * unit_price)",
                        max_digits=12,
                        validators=MONEY_VALIDATORS,
                    ),
                ),
                (
                    "sale",
                    models.ForeignKey(
                        help_text="Sale that this item belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="sales.sale",
                    ),
                ),
            ],
            options={
                "verbose_name": "Sale Item",
                "verbose_name_plural": "Sale Items",
                "db_table": "sale_items",
                "ordering": ["sale", "position"],
            },
        ),
    ]
