"""
Tax invoice PDF generation.

Renders a persisted sale as a single A4 tax invoice: shop header, bill-to and
GST boxes, the item table and the totals block. Output depends only on the
sale and the shop profile, so rendering the same sale twice yields identical
bytes.
"""

import io
from typing import List, Optional
from xml.sax.saxutils import escape

from django.utils import timezone

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from reportlab.platypus.flowables import HRFlowable

from apps.core.formatting_utils import (
    format_amount,
    format_invoice_date,
    format_money,
    format_percent,
)
from apps.core.shop import ShopProfile

from .models import Sale

GREY_DARK = colors.HexColor("#616161")
GREY_LIGHT = colors.HexColor("#E0E0E0")
GREY_LIGHTER = colors.HexColor("#EEEEEE")


class InvoiceRenderer:
    """Build the tax invoice PDF for a sale."""

    MARGIN = 24
    HEADER_RIGHT_WIDTH = 180
    BOX_GAP = 16
    TOTALS_VALUE_WIDTH = 120
    TOTALS_LABEL_WIDTH = 150

    def __init__(self, shop: Optional[ShopProfile] = None):
        self.shop = shop or ShopProfile.from_settings()
        self.styles = getSampleStyleSheet()
        self._create_custom_styles()

    def _create_custom_styles(self):
        """Create paragraph styles for the invoice."""
        self.body_style = ParagraphStyle(
            "InvoiceBody",
            parent=self.styles["Normal"],
            fontSize=10,
            leading=13,
        )

        self.shop_name_style = ParagraphStyle(
            "InvoiceShopName",
            parent=self.body_style,
            fontName="Helvetica-Bold",
            fontSize=16,
            leading=20,
        )

        self.muted_style = ParagraphStyle(
            "InvoiceMuted",
            parent=self.body_style,
            textColor=GREY_DARK,
        )

        self.title_style = ParagraphStyle(
            "InvoiceTitle",
            parent=self.body_style,
            fontName="Helvetica-Bold",
            fontSize=14,
            leading=18,
            alignment=TA_RIGHT,
        )

        self.right_style = ParagraphStyle(
            "InvoiceRight",
            parent=self.body_style,
            alignment=TA_RIGHT,
        )

        self.bold_style = ParagraphStyle(
            "InvoiceBold",
            parent=self.body_style,
            fontName="Helvetica-Bold",
        )

        self.bold_right_style = ParagraphStyle(
            "InvoiceBoldRight",
            parent=self.bold_style,
            alignment=TA_RIGHT,
        )

        self.footer_style = ParagraphStyle(
            "InvoiceFooter",
            parent=self.muted_style,
            alignment=TA_CENTER,
        )

    def render(self, sale: Sale) -> bytes:
        """
        Generate the invoice PDF.

        Args:
            sale: Persisted sale; its items are read in position order

        Returns:
            PDF bytes
        """
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=self.MARGIN,
            leftMargin=self.MARGIN,
            topMargin=self.MARGIN,
            bottomMargin=self.MARGIN,
            title=f"Invoice {sale.invoice_no}",
            author=self.shop.name,
            invariant=1,
        )

        story = []
        story.extend(self._build_header(sale, doc.width))
        story.extend(self._build_party_boxes(sale, doc.width))
        story.extend(self._build_items_table(sale, doc.width))
        story.extend(self._build_totals_section(sale, doc.width))
        story.append(Spacer(1, 18))
        story.append(Paragraph("Thank you for your business!", self.footer_style))

        doc.build(story)
        pdf_bytes = buffer.getvalue()
        buffer.close()

        return pdf_bytes

    def _p(self, text, style=None) -> Paragraph:
        return Paragraph(escape(str(text)), style or self.body_style)

    def _build_header(self, sale: Sale, width) -> List:
        """Shop identity on the left, invoice number and date on the right."""
        left = [self._p(self.shop.name, self.shop_name_style)]
        if self.shop.address:
            left.append(self._p(self.shop.address, self.muted_style))
        if self.shop.phone:
            left.append(self._p(f"Phone: {self.shop.phone}", self.muted_style))

        created_at = sale.created_at
        if timezone.is_aware(created_at):
            created_at = timezone.localtime(created_at)

        right = [
            self._p("TAX INVOICE", self.title_style),
            self._p(f"Invoice No: {sale.invoice_no}", self.right_style),
            self._p(f"Date: {format_invoice_date(created_at)}", self.right_style),
        ]

        header = Table(
            [[left, right]],
            colWidths=[width - self.HEADER_RIGHT_WIDTH, self.HEADER_RIGHT_WIDTH],
        )
        header.setStyle(
            TableStyle(
                [
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("LEFTPADDING", (0, 0), (-1, -1), 0),
                    ("RIGHTPADDING", (0, 0), (-1, -1), 0),
                ]
            )
        )

        return [
            header,
            Spacer(1, 10),
            HRFlowable(width="100%", thickness=1, color=GREY_LIGHT),
            Spacer(1, 10),
        ]

    def _build_party_boxes(self, sale: Sale, width) -> List:
        """Bill-to box and GST/payment box side by side."""
        bill_to = [
            self._p("BILL TO", self.bold_style),
            self._p(_or_dash(sale.customer_name)),
            self._p(_or_dash(sale.customer_phone)),
        ]
        gst = [
            self._p("GST", self.bold_style),
            self._p(f"{format_percent(sale.gst_percent)}% (single rate)"),
            self._p(f"Payment: {sale.payment_method}"),
        ]

        box_width = (width - self.BOX_GAP) / 2
        boxes = Table([[bill_to, "", gst]], colWidths=[box_width, self.BOX_GAP, box_width])
        boxes.setStyle(
            TableStyle(
                [
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("BOX", (0, 0), (0, 0), 1, GREY_LIGHT),
                    ("BOX", (2, 0), (2, 0), 1, GREY_LIGHT),
                    ("LEFTPADDING", (0, 0), (-1, -1), 10),
                    ("RIGHTPADDING", (0, 0), (-1, -1), 10),
                    ("TOPPADDING", (0, 0), (-1, -1), 10),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 10),
                ]
            )
        )

        return [boxes, Spacer(1, 20)]

    def _build_items_table(self, sale: Sale, width) -> List:
        """Numbered item rows in checkout order."""
        symbol = self.shop.currency_symbol
        header = [
            "#",
            "Item",
            "Qty",
            f"Unit ({symbol})" if symbol else "Unit",
            f"Amount ({symbol})" if symbol else "Amount",
        ]
        data = [header]

        for number, item in enumerate(sale.items.order_by("position"), start=1):
            data.append(
                [
                    str(number),
                    self._p(item.name),
                    str(item.quantity),
                    format_amount(item.unit_price),
                    format_amount(item.line_total),
                ]
            )

        fixed = [30, 60, 80, 90]
        col_widths = [fixed[0], width - sum(fixed)] + fixed[1:]

        table = Table(data, colWidths=col_widths, repeatRows=1)
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), GREY_LIGHTER),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("ALIGN", (2, 0), (-1, -1), "RIGHT"),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                    ("LINEBELOW", (0, 0), (-1, 0), 1, GREY_LIGHT),
                    ("LINEBELOW", (0, 1), (-1, -1), 1, GREY_LIGHTER),
                    ("TOPPADDING", (0, 0), (-1, -1), 6),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                    ("LEFTPADDING", (0, 0), (-1, -1), 6),
                    ("RIGHTPADDING", (0, 0), (-1, -1), 6),
                ]
            )
        )

        return [table, Spacer(1, 20)]

    def _build_totals_section(self, sale: Sale, width) -> List:
        """Right-aligned totals block."""
        symbol = self.shop.currency_symbol

        discount_label = "Discount"
        if sale.discount_percent > 0:
            discount_label = f"Discount ({format_percent(sale.discount_percent)}%)"

        rows = [
            ("Subtotal", format_money(sale.subtotal, symbol), False),
            (discount_label, f"- {format_money(sale.discount_amount, symbol)}", False),
            ("Taxable Amount", format_money(sale.taxable_amount, symbol), False),
            (
                f"GST ({format_percent(sale.gst_percent)}%)",
                format_money(sale.gst_amount, symbol),
                False,
            ),
            ("Total", format_money(sale.total_amount, symbol), True),
            ("Paid", format_money(sale.paid_amount, symbol), False),
            ("Balance Due", format_money(sale.balance_due, symbol), True),
        ]

        data = []
        for label, value, bold in rows:
            if bold:
                data.append(
                    [self._p(label, self.bold_style), self._p(value, self.bold_right_style)]
                )
            else:
                data.append([self._p(label), self._p(value, self.right_style)])

        totals = Table(
            data,
            colWidths=[self.TOTALS_LABEL_WIDTH, self.TOTALS_VALUE_WIDTH],
            hAlign="RIGHT",
        )
        total_row = 4
        totals.setStyle(
            TableStyle(
                [
                    ("LINEABOVE", (0, total_row), (-1, total_row), 1, GREY_LIGHT),
                    ("TOPPADDING", (0, total_row), (-1, total_row), 6),
                    ("LEFTPADDING", (0, 0), (-1, -1), 0),
                    ("RIGHTPADDING", (0, 0), (-1, -1), 0),
                ]
            )
        )

        return [totals]


def _or_dash(value: Optional[str]) -> str:
    value = (value or "").strip()
    return value or "-"
