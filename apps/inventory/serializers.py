"""
Serializers for inventory endpoints.
"""

from rest_framework import serializers

from .models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Read-only product record returned by the counter lookup."""

    barcode_payload = serializers.CharField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "product_code",
            "name",
            "price",
            "quantity",
            "barcode_value",
            "barcode_payload",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class LabelItemSerializer(serializers.Serializer):
    """One line of a label sheet request."""

    product_code = serializers.CharField(max_length=64, trim_whitespace=True)
    label_count = serializers.IntegerField(default=1)


class LabelSheetRequestSerializer(serializers.Serializer):
    """
    Label sheet request.

    An empty ``items`` list is accepted here and rejected by the label
    service so the error payload matches the other checks.
    """

    items = LabelItemSerializer(many=True, allow_empty=True)
