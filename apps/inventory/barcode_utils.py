"""
Barcode and QR code image encoders.

Both encoders are pure text -> PNG bytes functions:
- BarcodeEncoder: Code 128 bars only, the label prints the digits itself
- QrEncoder: QR codes for product page links
"""

import io
from typing import Optional
from urllib.parse import quote

import barcode
import qrcode
from barcode.writer import ImageWriter


class BarcodeEncoder:
    """Code 128 barcode encoder producing PNG bytes."""

    BARCODE_TYPE = "code128"

    DEFAULT_OPTIONS = {
        "module_width": 0.3,
        "module_height": 15.0,
        "quiet_zone": 6.5,
        "write_text": False,
        "background": "white",
        "foreground": "black",
        "dpi": 300,
    }

    def __init__(self, options: Optional[dict] = None):
        self.options = dict(self.DEFAULT_OPTIONS)
        if options:
            self.options.update(options)

    @staticmethod
    def can_encode(text: str) -> bool:
        """
        Check that ``text`` is a printable ASCII payload Code 128 can carry.

        Examples:
            >>> BarcodeEncoder.can_encode("P1001")
            True
            >>> BarcodeEncoder.can_encode("CAFÉ-1")
            False
        """
        return bool(text) and all(" " <= char <= "~" for char in text)

    def encode(self, text: str) -> bytes:
        """
        Encode ``text`` as a Code 128 barcode.

        Args:
            text: Barcode payload (ASCII)

        Returns:
            PNG image as bytes

        Raises:
            ValueError: If the payload is empty or cannot be encoded
        """
        if not text:
            raise ValueError("Barcode payload must not be empty")

        barcode_class = barcode.get_barcode_class(self.BARCODE_TYPE)
        barcode_instance = barcode_class(text, writer=ImageWriter())

        buffer = io.BytesIO()
        barcode_instance.write(buffer, options=self.options)
        return buffer.getvalue()

    __call__ = encode


class QrEncoder:
    """QR code encoder producing PNG bytes."""

    def __init__(self, box_size: int = 8, border: int = 4):
        self.box_size = box_size
        self.border = border

    def encode(self, data: str) -> bytes:
        """
        Encode ``data`` (usually a URL) as a QR code.

        Returns:
            PNG image as bytes
        """
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_Q,
            box_size=self.box_size,
            border=self.border,
        )
        qr.add_data(data)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        return buffer.getvalue()

    __call__ = encode


def product_page_url(base_url: str, product_code: str) -> str:
    """Public product page link encoded into shelf QR codes."""
    return f"{base_url.rstrip('/')}/p/{quote(product_code, safe='')}"
