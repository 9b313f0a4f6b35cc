"""
Tests for the checkout engine.

Covers billing of persisted sales, stock decrement, the all-or-nothing
write path and invoice numbering.
"""

from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal
from unittest import mock

from django.db import DatabaseError
from django.utils import timezone

import pytest

from apps.core.clock import FixedClock
from apps.core.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from apps.core.formatting_utils import format_invoice_date
from apps.inventory.models import Product
from apps.inventory.store import ProductStore
from apps.sales.models import Sale, SaleItem
from apps.sales.services import CartLine, CheckoutEngine, generate_invoice_no, normalize_cart


@pytest.fixture
def engine(fixed_clock):
    """Checkout engine with a frozen clock and a fixed invoice suffix."""
    return CheckoutEngine(clock=fixed_clock, suffix_factory=lambda: "3FA9")


def stock(code):
    return Product.objects.get(product_code=code).quantity


@pytest.mark.django_db
class TestCheckout:
    """Test successful checkouts."""

    def test_checkout_persists_sale_and_decrements_stock(self, engine, shirt, saree):
        summary = engine.checkout(
            items=[{"product_code": "P1", "quantity": 2}, {"product_code": "P2", "quantity": 1}],
            customer_name="Ravi",
            customer_phone="9876543210",
            gst_percent="5",
            discount_percent="10",
            paid_amount="500",
            payment_method="UPI",
        )

        assert summary.invoice_no == "INV-20250305-142210-3FA9"
        assert summary.total_amount == Decimal("425.25")
        assert summary.paid_amount == Decimal("425.25")
        assert summary.balance_due == Decimal("0.00")

        sale = Sale.objects.get(id=summary.sale_id)
        assert sale.subtotal == Decimal("450.00")
        assert sale.discount_percent == Decimal("10.00")
        assert sale.discount_amount == Decimal("45.00")
        assert sale.taxable_amount == Decimal("405.00")
        assert sale.gst_percent == Decimal("5.00")
        assert sale.gst_amount == Decimal("20.25")
        assert sale.customer_name == "Ravi"
        assert sale.customer_phone == "9876543210"
        assert sale.payment_method == "UPI"

        assert stock("P1") == 8
        assert stock("P2") == 1

    def test_worked_example(self, engine, make_product):
        make_product("P1000", price="1000.00", quantity=1)

        summary = engine.checkout(
            items=[{"product_code": "P1000", "quantity": 1}],
            gst_percent="5",
            discount_percent="10",
            paid_amount="500",
        )

        assert summary.total_amount == Decimal("945.00")
        assert summary.paid_amount == Decimal("500.00")
        assert summary.balance_due == Decimal("445.00")

    def test_items_are_snapshots_in_cart_order(self, engine, shirt, saree):
        summary = engine.checkout(
            items=[{"product_code": "P2", "quantity": 1}, {"product_code": "P1", "quantity": 3}]
        )

        items = list(SaleItem.objects.filter(sale_id=summary.sale_id).order_by("position"))
        assert [(i.position, i.product_code, i.name) for i in items] == [
            (0, "P2", "Silk Saree"),
            (1, "P1", "Cotton Shirt"),
        ]
        assert items[1].unit_price == Decimal("100.00")
        assert items[1].line_total == Decimal("300.00")

        # Catalog edits never reach the sale
        shirt.refresh_from_db()
        shirt.name = "Renamed Shirt"
        shirt.price = Decimal("999.00")
        shirt.save()
        items[1].refresh_from_db()
        assert items[1].name == "Cotton Shirt"
        assert items[1].unit_price == Decimal("100.00")

    def test_subtotal_matches_items(self, engine, shirt, saree):
        summary = engine.checkout(
            items=[{"product_code": "P1", "quantity": 3}, {"product_code": "P2", "quantity": 2}],
            gst_percent="12",
            discount_percent="7.5",
        )

        sale = Sale.objects.get(id=summary.sale_id)
        assert sale.subtotal == sum(item.line_total for item in sale.items.all())
        assert sale.taxable_amount == sale.subtotal - sale.discount_amount
        assert sale.total_amount == sale.taxable_amount + sale.gst_amount
        assert sale.balance_due == sale.total_amount - sale.paid_amount

    def test_timestamps_come_from_clock(self, engine, fixed_clock, shirt):
        summary = engine.checkout(items=[{"product_code": "P1", "quantity": 1}])

        sale = Sale.objects.get(id=summary.sale_id)
        assert sale.created_at == fixed_clock.now()
        assert sale.updated_at == fixed_clock.now()

    def test_defaults(self, engine, shirt):
        summary = engine.checkout(
            items=[{"product_code": " P1 ", "quantity": None}],
            customer_name="  ",
            payment_method="",
        )

        sale = Sale.objects.get(id=summary.sale_id)
        assert sale.payment_method == "Cash"
        assert sale.customer_name is None
        assert sale.customer_phone is None
        assert sale.items.get().quantity == 1
        assert stock("P1") == 9

    def test_non_positive_quantity_becomes_one(self, engine, fixed_clock, shirt):
        engine.checkout(items=[{"product_code": "P1", "quantity": 0}])
        fixed_clock.advance(timedelta(seconds=1))
        engine.checkout(items=[{"product_code": "P1", "quantity": -4}])

        assert stock("P1") == 8

    def test_duplicate_codes_are_summed(self, engine, shirt):
        summary = engine.checkout(
            items=[{"product_code": "P1", "quantity": 1}, {"product_code": "P1", "quantity": 2}]
        )

        assert stock("P1") == 7
        assert SaleItem.objects.filter(sale_id=summary.sale_id).count() == 2

    def test_accepts_cart_lines(self, engine, shirt):
        engine.checkout(items=[CartLine(product_code="P1", quantity=4)])

        assert stock("P1") == 6

    def test_sequential_checkouts_decrement_until_empty(self, engine, make_product, fixed_clock):
        make_product("S1", quantity=2)

        engine.checkout(items=[{"product_code": "S1", "quantity": 1}])
        fixed_clock.advance(timedelta(seconds=1))
        engine.checkout(items=[{"product_code": "S1", "quantity": 1}])
        assert stock("S1") == 0

        fixed_clock.advance(timedelta(seconds=1))
        with pytest.raises(ConflictError):
            engine.checkout(items=[{"product_code": "S1", "quantity": 1}])

        assert stock("S1") == 0
        assert Sale.objects.count() == 2


@pytest.mark.django_db
class TestCheckoutRejections:
    """Test that rejected checkouts leave stock and sales untouched."""

    def test_empty_cart(self, engine):
        with pytest.raises(ValidationError):
            engine.checkout(items=[])

    def test_blank_code(self, engine, shirt):
        with pytest.raises(ValidationError):
            engine.checkout(items=[{"product_code": "P1"}, {"product_code": "  "}])

        assert stock("P1") == 10

    def test_invalid_quantity(self, engine, shirt):
        with pytest.raises(ValidationError):
            engine.checkout(items=[{"product_code": "P1", "quantity": "many"}])

    def test_unknown_codes_are_all_reported(self, engine, shirt):
        with pytest.raises(NotFoundError) as exc_info:
            engine.checkout(
                items=[
                    {"product_code": "X2", "quantity": 1},
                    {"product_code": "P1", "quantity": 1},
                    {"product_code": "X1", "quantity": 1},
                ]
            )

        assert exc_info.value.extra["missing"] == ["X2", "X1"]
        assert stock("P1") == 10
        assert Sale.objects.count() == 0

    def test_insufficient_stock_changes_nothing(self, engine, shirt, saree):
        with pytest.raises(ConflictError) as exc_info:
            engine.checkout(
                items=[{"product_code": "P1", "quantity": 1}, {"product_code": "P2", "quantity": 5}]
            )

        assert exc_info.value.extra["shortages"] == [
            {"product_code": "P2", "name": "Silk Saree", "requested": 5, "available": 2}
        ]
        assert stock("P1") == 10
        assert stock("P2") == 2
        assert Sale.objects.count() == 0
        assert SaleItem.objects.count() == 0

    def test_duplicate_codes_checked_against_combined_quantity(self, engine, saree):
        with pytest.raises(ConflictError) as exc_info:
            engine.checkout(
                items=[{"product_code": "P2", "quantity": 1}, {"product_code": "P2", "quantity": 2}]
            )

        assert exc_info.value.extra["shortages"][0]["requested"] == 3
        assert stock("P2") == 2

    def test_refused_decrement_rolls_back_earlier_decrements(self, fixed_clock, shirt, saree):
        class RacingStore(ProductStore):
            """Store where another terminal empties P2 between check and decrement."""

            def decrement_atomically(self, code, quantity, now):
                if code == "P2":
                    return False
                return super().decrement_atomically(code, quantity, now)

        engine = CheckoutEngine(store=RacingStore(), clock=fixed_clock)

        with pytest.raises(ConflictError):
            engine.checkout(
                items=[{"product_code": "P1", "quantity": 3}, {"product_code": "P2", "quantity": 1}]
            )

        assert stock("P1") == 10
        assert stock("P2") == 2
        assert Sale.objects.count() == 0

    def test_persistence_failure_rolls_back_stock(self, engine, shirt):
        with mock.patch.object(
            SaleItem.objects, "bulk_create", side_effect=DatabaseError("disk full")
        ):
            with pytest.raises(InternalError):
                engine.checkout(items=[{"product_code": "P1", "quantity": 2}])

        assert stock("P1") == 10
        assert Sale.objects.count() == 0


@pytest.mark.django_db
class TestInvoiceNumbers:
    """Test invoice number generation and collision handling."""

    def test_format(self, fixed_clock):
        assert generate_invoice_no(fixed_clock.now(), "00FF") == "INV-20250305-142210-00FF"

    def test_random_suffix_format(self, fixed_clock, shirt):
        summary = CheckoutEngine(clock=fixed_clock).checkout(
            items=[{"product_code": "P1", "quantity": 1}]
        )

        prefix, date, time, suffix = summary.invoice_no.split("-")
        assert (prefix, date, time) == ("INV", "20250305", "142210")
        assert len(suffix) == 4
        assert all(c in "0123456789ABCDEF" for c in suffix)

    def test_number_uses_local_date_printed_on_invoice(self, settings, shirt):
        settings.TIME_ZONE = "Asia/Kolkata"
        late_evening_utc = FixedClock(datetime(2025, 3, 5, 20, 0, 0, tzinfo=dt_timezone.utc))

        summary = CheckoutEngine(clock=late_evening_utc, suffix_factory=lambda: "00FF").checkout(
            items=[{"product_code": "P1", "quantity": 1}]
        )

        sale = Sale.objects.get(id=summary.sale_id)
        assert summary.invoice_no == "INV-20250306-013000-00FF"
        assert format_invoice_date(timezone.localtime(sale.created_at)) == "06 Mar 2025"

    def test_collision_is_retried(self, fixed_clock, shirt):
        suffixes = iter(["AAAA", "AAAA", "BBBB"])
        engine = CheckoutEngine(clock=fixed_clock, suffix_factory=lambda: next(suffixes))

        first = engine.checkout(items=[{"product_code": "P1", "quantity": 1}])
        second = engine.checkout(items=[{"product_code": "P1", "quantity": 1}])

        assert first.invoice_no.endswith("-AAAA")
        assert second.invoice_no.endswith("-BBBB")
        assert stock("P1") == 8

    def test_exhausted_retries_leave_stock_untouched(self, fixed_clock, shirt):
        engine = CheckoutEngine(clock=fixed_clock, suffix_factory=lambda: "AAAA")
        engine.checkout(items=[{"product_code": "P1", "quantity": 1}])

        with pytest.raises(InternalError):
            engine.checkout(items=[{"product_code": "P1", "quantity": 2}])

        assert stock("P1") == 9
        assert Sale.objects.count() == 1


class TestNormalizeCart:
    """Test cart normalization without the database."""

    def test_trims_codes_and_defaults_quantity(self):
        cart = normalize_cart([{"product_code": " A1 "}, {"product_code": "B2", "quantity": "3"}])

        assert cart == [CartLine("A1", 1), CartLine("B2", 3)]

    def test_rejects_non_mapping_items(self):
        with pytest.raises(ValidationError):
            normalize_cart(["A1"])

    def test_rejects_none(self):
        with pytest.raises(ValidationError):
            normalize_cart(None)
