"""
Serializers for sales endpoints.

Request serializers only check shape and types. Business rules (clamping,
stock, unknown codes) belong to the services so that every caller gets the
same behavior.
"""

from decimal import Decimal

from rest_framework import serializers

from .models import Sale, SaleItem


class CheckoutItemSerializer(serializers.Serializer):
    """A scanned product code and quantity."""

    product_code = serializers.CharField(max_length=64, trim_whitespace=True)
    quantity = serializers.IntegerField(required=False, default=1)


class CheckoutRequestSerializer(serializers.Serializer):
    """
    Checkout request body.

    Percentages outside their range are accepted here and clamped by the
    checkout engine.
    """

    items = CheckoutItemSerializer(many=True, allow_empty=True)
    customer_name = serializers.CharField(
        max_length=200, required=False, allow_blank=True, allow_null=True
    )
    customer_phone = serializers.CharField(
        max_length=30, required=False, allow_blank=True, allow_null=True
    )
    gst_percent = serializers.DecimalField(
        max_digits=7, decimal_places=2, required=False, default=Decimal("0")
    )
    discount_percent = serializers.DecimalField(
        max_digits=7, decimal_places=2, required=False, default=Decimal("0")
    )
    paid_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, default=Decimal("0")
    )
    payment_method = serializers.CharField(
        max_length=50, required=False, allow_blank=True, allow_null=True
    )


class SaleSummarySerializer(serializers.Serializer):
    """Checkout response."""

    sale_id = serializers.UUIDField()
    invoice_no = serializers.CharField()
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    paid_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    balance_due = serializers.DecimalField(max_digits=12, decimal_places=2)


class PaymentUpdateSerializer(serializers.Serializer):
    """Payment update request body."""

    paid_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    payment_method = serializers.CharField(
        max_length=50, required=False, allow_blank=True, allow_null=True
    )


class PaymentSummarySerializer(serializers.Serializer):
    """Payment update response."""

    sale_id = serializers.UUIDField()
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    paid_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    balance_due = serializers.DecimalField(max_digits=12, decimal_places=2)
    payment_method = serializers.CharField()


class SaleItemDetailSerializer(serializers.ModelSerializer):
    """Serializer for sale item snapshots."""

    class Meta:
        model = SaleItem
        fields = [
            "position",
            "product_code",
            "name",
            "quantity",
            "unit_price",
            "line_total",
        ]


class SaleDetailSerializer(serializers.ModelSerializer):
    """Serializer for sale details."""

    items = serializers.SerializerMethodField()

    class Meta:
        model = Sale
        fields = [
            "id",
            "invoice_no",
            "customer_name",
            "customer_phone",
            "items",
            "subtotal",
            "discount_percent",
            "discount_amount",
            "taxable_amount",
            "gst_percent",
            "gst_amount",
            "total_amount",
            "paid_amount",
            "balance_due",
            "payment_method",
            "created_at",
            "updated_at",
        ]

    def get_items(self, obj):
        return SaleItemDetailSerializer(obj.items.order_by("position"), many=True).data
