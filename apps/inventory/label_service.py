"""
Printable barcode label sheets.

Builds an A4 PDF of retail stickers laid out in a two-column grid. Each
sticker carries the shop name, the price, a Code 128 barcode, the barcode
digits and an optional website footer.

Rendering is pure: the only collaborator is the barcode encoder, which is
called once per distinct payload per sheet.
"""

import io
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Mapping, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Table, TableStyle

from apps.core.exceptions import NotFoundError, ValidationError
from apps.core.formatting_utils import format_money
from apps.core.shop import ShopProfile

from .barcode_utils import BarcodeEncoder
from .models import Product
from .store import ProductStore

logger = logging.getLogger(__name__)

MAX_COPIES_PER_PRODUCT = 500


@dataclass(frozen=True)
class LabelRequest:
    """A product and how many stickers to print for it."""

    product: Product
    copies: int


@dataclass(frozen=True)
class Sticker:
    """One printed sticker."""

    product: Product
    payload: str


def unencodable_codes(products: Iterable[Product]) -> List[str]:
    """Codes of products whose barcode payload cannot be printed as Code 128."""
    codes = [
        product.product_code
        for product in products
        if not BarcodeEncoder.can_encode(product.barcode_payload)
    ]
    return list(dict.fromkeys(codes))


def _check_encodable(products: Iterable[Product]):
    unencodable = unencodable_codes(products)
    if unencodable:
        raise ValidationError(
            "Some barcode values contain characters Code 128 cannot print.",
            {"unencodable": unencodable},
        )


def clamp_copies(copies) -> int:
    """Clamp a requested sticker count to [0, MAX_COPIES_PER_PRODUCT]."""
    return max(0, min(MAX_COPIES_PER_PRODUCT, int(copies or 0)))


def resolve_label_requests(
    items: Iterable[Mapping], store: Optional[ProductStore] = None
) -> List[LabelRequest]:
    """
    Resolve ``{product_code, label_count}`` items into label requests.

    Raises:
        ValidationError: If no items are given, a code is blank or a barcode
            payload is not Code 128 text (``unencodable`` lists the codes)
        NotFoundError: If any product code is unknown (all missing codes listed)
    """
    items = list(items or [])
    if not items:
        raise ValidationError("Items required.")

    store = store or ProductStore()
    codes = [str(item.get("product_code") or "").strip() for item in items]
    if not all(codes):
        raise ValidationError("Every item needs a product code.")

    distinct_codes = list(dict.fromkeys(codes))
    products = store.find_by_codes(distinct_codes)
    missing = store.missing_codes(distinct_codes, products)
    if missing:
        raise NotFoundError("Some product codes were not found.", {"missing": missing})

    _check_encodable(products[code] for code in distinct_codes)

    return [
        LabelRequest(product=products[code], copies=item.get("label_count", 0))
        for code, item in zip(codes, items)
    ]


def expand_stickers(requests: Iterable[LabelRequest]) -> List[Sticker]:
    """
    Expand label requests into the ordered list of stickers to print.

    Each request is clamped on its own. Requests for a product already seen
    are appended to that product's group, so copies of one product are
    always contiguous and groups keep first-appearance order.
    """
    groups: Dict[str, List[Sticker]] = {}
    for request in requests:
        product = request.product
        group = groups.setdefault(product.product_code, [])
        sticker = Sticker(product=product, payload=product.barcode_payload)
        group.extend([sticker] * clamp_copies(request.copies))

    stickers = []
    for group in groups.values():
        stickers.extend(group)
    return stickers


class LabelSheetRenderer:
    """
    Render label requests into a sticker-grid PDF.

    The renderer keeps no state between calls; the barcode image cache lives
    only for the duration of one ``render``.
    """

    PAGE_SIZE = A4
    MARGIN = 18
    COLUMNS = 2
    SPACING = 14
    STICKER_PADDING = 12
    BARCODE_HEIGHT = 65

    def __init__(
        self,
        shop: Optional[ShopProfile] = None,
        encoder: Optional[Callable[[str], bytes]] = None,
    ):
        self.shop = shop or ShopProfile.from_settings()
        self.encoder = encoder or BarcodeEncoder().encode
        self._create_styles()

    def _create_styles(self):
        styles = getSampleStyleSheet()
        self.shop_style = ParagraphStyle(
            "StickerShop",
            parent=styles["Normal"],
            fontName="Helvetica-Bold",
            fontSize=14,
            leading=17,
            alignment=TA_CENTER,
        )
        self.price_style = ParagraphStyle(
            "StickerPrice",
            parent=styles["Normal"],
            fontName="Helvetica-Bold",
            fontSize=13,
            leading=16,
            alignment=TA_CENTER,
        )
        self.payload_style = ParagraphStyle(
            "StickerPayload",
            parent=styles["Normal"],
            fontName="Helvetica",
            fontSize=11,
            leading=13,
            alignment=TA_CENTER,
        )
        self.website_style = ParagraphStyle(
            "StickerWebsite",
            parent=styles["Normal"],
            fontName="Helvetica",
            fontSize=8,
            leading=10,
            alignment=TA_CENTER,
            textColor=colors.HexColor("#616161"),
        )
        self.empty_style = ParagraphStyle(
            "EmptySheet",
            parent=styles["Normal"],
            fontSize=10,
            alignment=TA_CENTER,
        )

    def render(self, requests: List[LabelRequest]) -> bytes:
        """
        Render the label sheet.

        Args:
            requests: Ordered label requests

        Returns:
            PDF bytes

        Raises:
            ValidationError: If ``requests`` is empty or a barcode payload
                cannot be encoded
        """
        if not requests:
            raise ValidationError("Items required.")

        _check_encodable(request.product for request in requests)

        stickers = expand_stickers(requests)
        images: Dict[str, bytes] = {}

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=self.PAGE_SIZE,
            rightMargin=self.MARGIN,
            leftMargin=self.MARGIN,
            topMargin=self.MARGIN,
            bottomMargin=self.MARGIN,
            title="Labels",
            author=self.shop.name,
            invariant=1,
        )

        if stickers:
            story = [self._build_grid(stickers, images, doc.width)]
        else:
            story = [Paragraph("No labels requested.", self.empty_style)]

        doc.build(story)
        logger.debug(
            "Rendered %s stickers with %s distinct barcodes", len(stickers), len(images)
        )
        return buffer.getvalue()

    def _barcode_image(self, payload: str, images: Dict[str, bytes]) -> bytes:
        if payload not in images:
            images[payload] = self.encoder(payload)
        return images[payload]

    def _build_grid(self, stickers: List[Sticker], images: Dict[str, bytes], frame_width):
        cell_width = frame_width / self.COLUMNS
        sticker_width = cell_width - self.SPACING

        cells = [self._build_sticker(sticker, images, sticker_width) for sticker in stickers]
        rows = []
        for start in range(0, len(cells), self.COLUMNS):
            row = cells[start : start + self.COLUMNS]
            row.extend([""] * (self.COLUMNS - len(row)))
            rows.append(row)

        grid = Table(rows, colWidths=[cell_width] * self.COLUMNS)
        half = self.SPACING / 2
        grid.setStyle(
            TableStyle(
                [
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("LEFTPADDING", (0, 0), (-1, -1), half),
                    ("RIGHTPADDING", (0, 0), (-1, -1), half),
                    ("TOPPADDING", (0, 0), (-1, -1), half),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), half),
                ]
            )
        )
        return grid

    def _build_sticker(self, sticker: Sticker, images: Dict[str, bytes], width) -> Table:
        product = sticker.product
        inner_width = width - 2 * self.STICKER_PADDING

        barcode = Image(
            io.BytesIO(self._barcode_image(sticker.payload, images)),
            width=inner_width,
            height=self.BARCODE_HEIGHT,
            kind="proportional",
        )

        price = format_money(product.price, self.shop.currency_symbol)

        rows = [
            [Paragraph(escape(self.shop.name), self.shop_style)],
            [Paragraph(escape(price), self.price_style)],
            [barcode],
            [Paragraph(escape(sticker.payload), self.payload_style)],
        ]
        if self.shop.website.strip():
            rows.append([Paragraph(escape(self.shop.website), self.website_style)])

        box = Table(rows, colWidths=[width])
        box.setStyle(
            TableStyle(
                [
                    ("BOX", (0, 0), (-1, -1), 2, colors.HexColor("#E0E0E0")),
                    ("BACKGROUND", (0, 0), (-1, -1), colors.white),
                    ("ALIGN", (0, 0), (-1, -1), "CENTER"),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                    ("LEFTPADDING", (0, 0), (-1, -1), self.STICKER_PADDING),
                    ("RIGHTPADDING", (0, 0), (-1, -1), self.STICKER_PADDING),
                    ("TOPPADDING", (0, 0), (-1, -1), 2),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
                    ("TOPPADDING", (0, 0), (-1, 0), self.STICKER_PADDING),
                    ("TOPPADDING", (0, 2), (-1, 2), 8),
                    ("BOTTOMPADDING", (0, -1), (-1, -1), self.STICKER_PADDING),
                ]
            )
        )
        return box
