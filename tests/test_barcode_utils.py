"""
Tests for barcode and QR code encoders.
"""

import io

import pytest
from PIL import Image

from apps.inventory.barcode_utils import BarcodeEncoder, QrEncoder, product_page_url


class TestBarcodeEncoder:
    """Test Code 128 encoding."""

    def test_encode_returns_png(self):
        png = BarcodeEncoder().encode("P1001")

        image = Image.open(io.BytesIO(png))
        assert image.format == "PNG"
        assert image.size[0] > image.size[1]

    def test_encoder_is_callable(self):
        encoder = BarcodeEncoder()

        assert encoder("8901234567890") == encoder.encode("8901234567890")

    def test_options_override_defaults(self):
        encoder = BarcodeEncoder({"dpi": 150})

        assert encoder.options["dpi"] == 150
        assert encoder.options["write_text"] is False

    def test_empty_payload_rejected(self):
        with pytest.raises(ValueError):
            BarcodeEncoder().encode("")

    @pytest.mark.parametrize("text", ["P1001", "8901234567890", "SKU 12/A-b~"])
    def test_can_encode_printable_ascii(self, text):
        assert BarcodeEncoder.can_encode(text)
        assert BarcodeEncoder().encode(text).startswith(b"\x89PNG")

    @pytest.mark.parametrize("text", ["", "CAFÉ-1", "ÄB1", "P1\n"])
    def test_cannot_encode_other_text(self, text):
        assert not BarcodeEncoder.can_encode(text)


class TestQrEncoder:
    """Test QR code encoding."""

    def test_encode_returns_square_png(self):
        png = QrEncoder(box_size=4).encode("http://shop.test/p/P1001")

        image = Image.open(io.BytesIO(png))
        assert image.format == "PNG"
        assert image.size[0] == image.size[1]


class TestProductPageUrl:
    """Test the product page link."""

    def test_joins_base_and_code(self):
        assert product_page_url("http://shop.test/", "P1001") == "http://shop.test/p/P1001"

    def test_escapes_code(self):
        assert product_page_url("http://shop.test", "A B/1") == "http://shop.test/p/A%20B%2F1"
