"""
Tests for tax invoice PDF generation.
"""

import re
from decimal import Decimal

import pytest

from apps.core.shop import ShopProfile
from apps.sales.invoice_service import InvoiceRenderer
from apps.sales.models import Sale
from apps.sales.services import CheckoutEngine


@pytest.fixture
def sale_with_items(db, make_product, fixed_clock):
    """A sale with two lines, discount and GST."""
    make_product("P1", name="Cotton Shirt", price="100.00", quantity=10)
    make_product("P2", name="Silk Saree <Kanchi> & Co", price="250.00", quantity=5)
    summary = CheckoutEngine(clock=fixed_clock, suffix_factory=lambda: "3FA9").checkout(
        items=[{"product_code": "P1", "quantity": 2}, {"product_code": "P2", "quantity": 1}],
        customer_name="Ravi",
        customer_phone="9876543210",
        gst_percent="5",
        discount_percent="10",
        paid_amount="200",
    )
    return Sale.objects.get(id=summary.sale_id)


def page_count(pdf_bytes):
    return len(re.findall(rb"/Type /Page\b(?!s)", pdf_bytes))


@pytest.mark.django_db
class TestInvoiceRenderer:
    """Test InvoiceRenderer."""

    def test_renders_pdf(self, sale_with_items, shop):
        pdf_bytes = InvoiceRenderer(shop=shop).render(sale_with_items)

        assert pdf_bytes.startswith(b"%PDF")
        assert pdf_bytes.rstrip().endswith(b"%%EOF")
        assert page_count(pdf_bytes) == 1

    def test_rendering_is_deterministic(self, sale_with_items, shop):
        renderer = InvoiceRenderer(shop=shop)

        first = renderer.render(sale_with_items)
        second = InvoiceRenderer(shop=shop).render(Sale.objects.get(id=sale_with_items.id))

        assert first == second

    def test_output_depends_on_shop_profile(self, sale_with_items, shop):
        other = ShopProfile(name="Other Textiles", currency_symbol="INR")

        assert InvoiceRenderer(shop=shop).render(sale_with_items) != InvoiceRenderer(
            shop=other
        ).render(sale_with_items)

    def test_does_not_mutate_sale(self, sale_with_items, shop):
        before = Sale.objects.filter(id=sale_with_items.id).values().get()

        InvoiceRenderer(shop=shop).render(sale_with_items)

        assert Sale.objects.filter(id=sale_with_items.id).values().get() == before

    def test_walk_in_sale_without_customer(self, make_product, fixed_clock, shop):
        make_product("P9", price="10.00", quantity=1)
        summary = CheckoutEngine(clock=fixed_clock).checkout(
            items=[{"product_code": "P9", "quantity": 1}]
        )
        sale = Sale.objects.get(id=summary.sale_id)

        assert sale.customer_name is None
        assert InvoiceRenderer(shop=shop).render(sale).startswith(b"%PDF")

    def test_long_invoice_paginates(self, make_product, fixed_clock, shop):
        for n in range(80):
            make_product(f"L{n:03d}", name=f"Item number {n}", price="12.50", quantity=1)
        summary = CheckoutEngine(clock=fixed_clock).checkout(
            items=[{"product_code": f"L{n:03d}", "quantity": 1} for n in range(80)]
        )
        sale = Sale.objects.get(id=summary.sale_id)

        assert sale.subtotal == Decimal("1000.00")
        assert page_count(InvoiceRenderer(shop=shop).render(sale)) >= 2

    def test_default_shop_profile_from_settings(self, sale_with_items, settings):
        settings.SHOP_NAME = "Settings Cloth House"

        renderer = InvoiceRenderer()

        assert renderer.shop.name == "Settings Cloth House"
        assert renderer.render(sale_with_items).startswith(b"%PDF")
