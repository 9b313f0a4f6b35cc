"""
Admin configuration for inventory models.
"""

from django.contrib import admin

from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin interface for Product."""

    list_display = ["product_code", "name", "price", "quantity", "barcode_value", "updated_at"]
    list_filter = ["updated_at"]
    search_fields = ["product_code", "name", "barcode_value"]
    ordering = ["-updated_at"]
    readonly_fields = ["created_at", "updated_at"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("product_code", "name", "price", "quantity"),
            },
        ),
        (
            "Labels",
            {
                "fields": ("barcode_value",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )
