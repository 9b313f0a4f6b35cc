"""
Views for the billing counter.

- Checkout: turn a cart into a sale and decrement stock
- Payment update: record later payments against a sale
- Sale detail and tax invoice PDF
"""

import logging

from django.http import HttpResponse

from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.exceptions import NotFoundError

from .invoice_service import InvoiceRenderer
from .models import Sale
from .serializers import (
    CheckoutRequestSerializer,
    PaymentSummarySerializer,
    PaymentUpdateSerializer,
    SaleDetailSerializer,
    SaleSummarySerializer,
)
from .services import CheckoutEngine, PaymentUpdater

logger = logging.getLogger(__name__)


def _get_sale(sale_id) -> Sale:
    try:
        return Sale.objects.prefetch_related("items").get(id=sale_id)
    except Sale.DoesNotExist:
        raise NotFoundError("Sale not found.")


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated])
def checkout(request):
    """
    Check out a cart.

    Request body:
    {
        "items": [{"product_code": "P1001", "quantity": 2}],
        "customer_name": "Ravi" (optional),
        "customer_phone": "98xxxxxx" (optional),
        "gst_percent": "5" (optional, clamped to 0-28),
        "discount_percent": "10" (optional, clamped to 0-100),
        "paid_amount": "500.00" (optional, clamped to 0-total),
        "payment_method": "UPI" (optional, default Cash)
    }

    Unknown codes return 404 with ``missing``; insufficient stock returns
    409 with ``shortages``.
    """
    serializer = CheckoutRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    summary = CheckoutEngine().checkout(
        items=data["items"],
        customer_name=data.get("customer_name"),
        customer_phone=data.get("customer_phone"),
        gst_percent=data["gst_percent"],
        discount_percent=data["discount_percent"],
        paid_amount=data["paid_amount"],
        payment_method=data.get("payment_method"),
    )

    return Response(SaleSummarySerializer(summary).data, status=status.HTTP_201_CREATED)


@api_view(["PUT"])
@permission_classes([permissions.IsAuthenticated])
def update_payment(request, sale_id):
    """
    Record a revised paid amount for a sale.

    Request body:
    {
        "paid_amount": "945.00",
        "payment_method": "UPI" (optional, blank keeps the current method)
    }
    """
    serializer = PaymentUpdateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    summary = PaymentUpdater().update_payment(
        sale_id,
        serializer.validated_data["paid_amount"],
        serializer.validated_data.get("payment_method"),
    )

    return Response(PaymentSummarySerializer(summary).data, status=status.HTTP_200_OK)


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def sale_detail(request, sale_id):
    """Return a sale with its item snapshots."""
    sale = _get_sale(sale_id)
    return Response(SaleDetailSerializer(sale).data, status=status.HTTP_200_OK)


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def invoice_pdf(request, sale_id):
    """Download the tax invoice PDF for a sale."""
    sale = _get_sale(sale_id)

    pdf_bytes = InvoiceRenderer().render(sale)
    logger.debug("Rendered invoice %s (%s bytes)", sale.invoice_no, len(pdf_bytes))

    response = HttpResponse(pdf_bytes, content_type="application/pdf")
    response["Content-Disposition"] = f'attachment; filename="{sale.invoice_no}.pdf"'
    return response
