"""
Django admin configuration for sales models.

Sales are read-only here: totals are frozen at checkout and payments go
through the payment endpoint.
"""

from django.contrib import admin

from .models import Sale, SaleItem


class SaleItemInline(admin.TabularInline):
    """Inline admin for SaleItem snapshots."""

    model = SaleItem
    extra = 0
    can_delete = False
    ordering = ["position"]
    fields = ["position", "product_code", "name", "quantity", "unit_price", "line_total"]
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    """Admin interface for Sale model."""

    list_display = [
        "invoice_no",
        "customer_name",
        "total_amount",
        "paid_amount",
        "balance_due",
        "payment_method",
        "created_at",
    ]
    list_filter = ["payment_method", "created_at"]
    search_fields = ["invoice_no", "customer_name", "customer_phone"]
    inlines = [SaleItemInline]
    fieldsets = [
        (
            "Basic Information",
            {
                "fields": ["id", "invoice_no", "customer_name", "customer_phone"],
            },
        ),
        (
            "Financial Details",
            {
                "fields": [
                    "subtotal",
                    "discount_percent",
                    "discount_amount",
                    "taxable_amount",
                    "gst_percent",
                    "gst_amount",
                    "total_amount",
                ],
            },
        ),
        (
            "Payment",
            {
                "fields": ["paid_amount", "balance_due", "payment_method"],
            },
        ),
        (
            "Timestamps",
            {
                "fields": ["created_at", "updated_at"],
            },
        ),
    ]

    def get_readonly_fields(self, request, obj=None):
        return [field.name for field in Sale._meta.fields]

    def has_add_permission(self, request):
        return False
