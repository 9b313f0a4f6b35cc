"""
Tests for the product store.
"""

import pytest

from apps.inventory.models import Product
from apps.inventory.store import ProductStore


@pytest.mark.django_db
class TestProductStore:
    """Test ProductStore lookups and stock decrement."""

    def test_find_by_code(self, shirt):
        store = ProductStore()

        assert store.find_by_code(" P1 ") == shirt
        assert store.find_by_code("NOPE") is None

    def test_find_by_codes(self, shirt, saree):
        found = ProductStore().find_by_codes(["P2", "P1", "X"])

        assert set(found) == {"P1", "P2"}
        assert found["P2"].name == "Silk Saree"

    def test_lock_by_codes(self, shirt, saree):
        from django.db import transaction

        with transaction.atomic():
            locked = ProductStore().lock_by_codes(["P2", "P1", "P2"])

        assert list(locked) == ["P1", "P2"]

    def test_missing_codes_keep_request_order(self, shirt):
        store = ProductStore()

        assert store.missing_codes(["B", "P1", "A"], store.find_by_codes(["B", "P1", "A"])) == [
            "B",
            "A",
        ]

    def test_decrement_succeeds(self, shirt, fixed_clock):
        assert ProductStore().decrement_atomically("P1", 4, fixed_clock.now()) is True

        shirt.refresh_from_db()
        assert shirt.quantity == 6
        assert shirt.updated_at == fixed_clock.now()

    def test_decrement_to_zero(self, saree, fixed_clock):
        assert ProductStore().decrement_atomically("P2", 2, fixed_clock.now()) is True

        assert Product.objects.get(product_code="P2").quantity == 0

    def test_decrement_refused_when_short(self, saree, fixed_clock):
        assert ProductStore().decrement_atomically("P2", 3, fixed_clock.now()) is False

        assert Product.objects.get(product_code="P2").quantity == 2

    def test_decrement_unknown_code(self, fixed_clock, db):
        assert ProductStore().decrement_atomically("NOPE", 1, fixed_clock.now()) is False


@pytest.mark.django_db
class TestProductModel:
    """Test Product."""

    def test_barcode_payload_defaults_to_code(self, shirt):
        assert shirt.barcode_payload == "P1"

    def test_barcode_payload_uses_explicit_value(self, make_product):
        product = make_product("P5", barcode_value="8901234567890")

        assert product.barcode_payload == "8901234567890"

    def test_blank_barcode_value_ignored(self, make_product):
        product = make_product("P6", barcode_value="   ")

        assert product.barcode_payload == "P6"

    def test_str(self, shirt):
        assert str(shirt) == "P1 - Cotton Shirt"
