"""
Pytest configuration and fixtures for the shop counter billing platform.
"""

import io
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

import pytest
from PIL import Image

from apps.core.clock import FixedClock
from apps.core.shop import ShopProfile


@pytest.fixture
def api_client():
    """
    Fixture for Django REST framework API client.
    """
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def user(db, django_user_model):
    """Create a counter operator."""
    return django_user_model.objects.create_user(
        username="cashier", email="cashier@example.com", password="testpass123"
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """
    Fixture for authenticated API client.
    """
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture
def make_product(db):
    """Factory for catalog products."""
    from apps.inventory.models import Product

    def _make_product(product_code, name=None, price="100.00", quantity=10, barcode_value=""):
        return Product.objects.create(
            product_code=product_code,
            name=name or f"Product {product_code}",
            price=Decimal(price),
            quantity=quantity,
            barcode_value=barcode_value,
        )

    return _make_product


@pytest.fixture
def shirt(make_product):
    """A cotton shirt with 10 units in stock."""
    return make_product("P1", name="Cotton Shirt", price="100.00", quantity=10)


@pytest.fixture
def saree(make_product):
    """A silk saree with 2 units in stock."""
    return make_product("P2", name="Silk Saree", price="250.00", quantity=2)


@pytest.fixture
def fixed_clock():
    """Clock frozen at 2025-03-05 14:22:10 UTC."""
    return FixedClock(datetime(2025, 3, 5, 14, 22, 10, tzinfo=dt_timezone.utc))


@pytest.fixture
def shop():
    """Shop identity printed on test documents."""
    return ShopProfile(
        name="Test Cloth Stores",
        address="1 Market Road, Test Town",
        phone="+91 90000 00000",
        website="www.test-shop.example",
        currency_symbol="Rs.",
    )


def make_png(width=120, height=40):
    """Return a small white PNG."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), "white").save(buffer, format="PNG")
    return buffer.getvalue()


class CountingEncoder:
    """Barcode encoder stand-in that records every payload it is asked for."""

    def __init__(self):
        self.calls = []
        self.png = make_png()

    def __call__(self, text):
        self.calls.append(text)
        return self.png


@pytest.fixture
def counting_encoder():
    return CountingEncoder()
