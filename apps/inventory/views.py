"""
Views for inventory endpoints.

- Product lookup for the counter's scan step
- QR code PNG linking to the public product page
- Barcode label sheet PDF
"""

import logging

from django.conf import settings
from django.http import HttpResponse

from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.exceptions import NotFoundError

from .barcode_utils import QrEncoder, product_page_url
from .label_service import LabelSheetRenderer, resolve_label_requests
from .serializers import LabelSheetRequestSerializer, ProductSerializer
from .store import ProductStore

logger = logging.getLogger(__name__)


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def product_detail(request, product_code):
    """Return the product scanned at the counter."""
    product = ProductStore().find_by_code(product_code)
    if product is None:
        raise NotFoundError("Product not found.", {"missing": [product_code.strip()]})

    return Response(ProductSerializer(product).data, status=status.HTTP_200_OK)


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def product_qr_code(request, product_code):
    """
    Generate a QR code linking to the product's public page.

    Returns:
        PNG image of the QR code
    """
    product = ProductStore().find_by_code(product_code)
    if product is None:
        raise NotFoundError("Product not found.", {"missing": [product_code.strip()]})

    url = product_page_url(settings.PUBLIC_BASE_URL, product.product_code)
    png = QrEncoder(box_size=8).encode(url)

    response = HttpResponse(png, content_type="image/png")
    response["Content-Disposition"] = f'inline; filename="{product.product_code}_qrcode.png"'
    return response


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated])
def label_sheet_pdf(request):
    """
    Generate a printable sheet of barcode stickers.

    Request body:
    {
        "items": [
            {"product_code": "P1001", "label_count": 12}
        ]
    }

    Unknown product codes are reported as a 400 with the ``missing`` list.
    """
    serializer = LabelSheetRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        label_requests = resolve_label_requests(serializer.validated_data["items"])
    except NotFoundError as e:
        return Response(e.as_dict(), status=status.HTTP_400_BAD_REQUEST)

    pdf_bytes = LabelSheetRenderer().render(label_requests)

    response = HttpResponse(pdf_bytes, content_type="application/pdf")
    response["Content-Disposition"] = 'attachment; filename="labels.pdf"'
    return response
