"""
Checkout and payment services.

CheckoutEngine turns a cart into a persisted sale. The whole operation runs
in one transaction: product rows are locked, stock is validated and
decremented with a conditional update, and the sale with its item snapshots
is written. Any failure leaves stock and sales untouched.

PaymentUpdater revises the paid amount of an existing sale without touching
its frozen totals.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Mapping, Optional
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from apps.core.clock import Clock
from apps.core.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from apps.inventory.models import Product
from apps.inventory.store import ProductStore

from .billing import BillLine, compute_totals, to_decimal
from .models import Sale, SaleItem

logger = logging.getLogger(__name__)


def random_invoice_suffix() -> str:
    """Four random uppercase hex characters."""
    return secrets.token_hex(2).upper()


def generate_invoice_no(now: datetime, suffix: str) -> str:
    """
    Build an invoice number from the checkout instant.

    Aware instants are converted to the shop's local time first, so the
    number carries the same date as the printed invoice.

    Examples:
        >>> generate_invoice_no(datetime(2025, 3, 5, 14, 22, 10), "3FA9")
        'INV-20250305-142210-3FA9'
    """
    if timezone.is_aware(now):
        now = timezone.localtime(now)
    return f"INV-{now:%Y%m%d-%H%M%S}-{suffix}"


@dataclass(frozen=True)
class CartLine:
    """A requested product code and quantity."""

    product_code: str
    quantity: int


@dataclass(frozen=True)
class SaleSummary:
    """What the counter needs after a successful checkout."""

    sale_id: UUID
    invoice_no: str
    total_amount: Decimal
    paid_amount: Decimal
    balance_due: Decimal


@dataclass(frozen=True)
class PaymentSummary:
    """Settlement state of a sale after a payment update."""

    sale_id: UUID
    total_amount: Decimal
    paid_amount: Decimal
    balance_due: Decimal
    payment_method: str


def normalize_cart(items: Iterable) -> List[CartLine]:
    """
    Turn raw cart items into CartLines.

    Codes are trimmed; a missing or non-positive quantity becomes 1.

    Raises:
        ValidationError: If the cart is empty, a code is blank or a
            quantity is not a whole number
    """
    items = list(items or [])
    if not items:
        raise ValidationError("No items.")

    cart = []
    for item in items:
        if isinstance(item, CartLine):
            code, quantity = item.product_code, item.quantity
        elif isinstance(item, Mapping):
            code, quantity = item.get("product_code"), item.get("quantity")
        else:
            raise ValidationError(f"Invalid cart item: {item!r}")

        code = str(code or "").strip()
        if not code:
            raise ValidationError("Every item needs a product code.")

        try:
            quantity = int(quantity or 1)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid quantity for {code}.", {"product_code": code})

        cart.append(CartLine(product_code=code, quantity=max(1, quantity)))

    return cart


class CheckoutEngine:
    """
    Validate a cart, bill it and persist the sale atomically.

    Collaborators are injectable so tests can fix the clock and invoice
    suffix or substitute the product store.
    """

    INVOICE_NO_ATTEMPTS = 5

    def __init__(
        self,
        store: Optional[ProductStore] = None,
        clock: Optional[Clock] = None,
        suffix_factory: Optional[Callable[[], str]] = None,
    ):
        self.store = store or ProductStore()
        self.clock = clock or Clock()
        self.suffix_factory = suffix_factory or random_invoice_suffix

    def checkout(
        self,
        items: Iterable,
        customer_name: Optional[str] = None,
        customer_phone: Optional[str] = None,
        gst_percent=Decimal("0"),
        discount_percent=Decimal("0"),
        paid_amount=Decimal("0"),
        payment_method: Optional[str] = None,
    ) -> SaleSummary:
        """
        Check out a cart.

        Returns:
            SaleSummary of the persisted sale

        Raises:
            ValidationError: Empty cart, blank code or malformed number
            NotFoundError: Unknown product codes (``missing`` lists them all)
            ConflictError: Requested quantity exceeds stock (``shortages``)
            InternalError: Persistence failed; nothing was written
        """
        cart = normalize_cart(items)
        codes = list(dict.fromkeys(line.product_code for line in cart))

        requested: Dict[str, int] = {}
        for line in cart:
            requested[line.product_code] = requested.get(line.product_code, 0) + line.quantity

        try:
            with transaction.atomic():
                products = self.store.lock_by_codes(codes)

                missing = self.store.missing_codes(codes, products)
                if missing:
                    raise NotFoundError(
                        f"Products not found: {', '.join(missing)}", {"missing": missing}
                    )

                self._check_stock(codes, requested, products)

                lines = [
                    BillLine(
                        product_code=line.product_code,
                        name=products[line.product_code].name,
                        quantity=line.quantity,
                        unit_price=products[line.product_code].price,
                    )
                    for line in cart
                ]
                totals = compute_totals(lines, gst_percent, discount_percent, paid_amount)

                now = self.clock.now()
                for code in codes:
                    if not self.store.decrement_atomically(code, requested[code], now):
                        product = products[code]
                        raise ConflictError(
                            f"Not enough stock for {code}.",
                            {"shortages": [self._shortage(product, requested[code])]},
                        )

                sale = self._create_sale(
                    lines,
                    totals,
                    now,
                    customer_name=_clean(customer_name),
                    customer_phone=_clean(customer_phone),
                    payment_method=_clean(payment_method) or Sale.DEFAULT_PAYMENT_METHOD,
                )
        except DatabaseError as e:
            logger.error("Checkout failed while saving the sale: %s", e, exc_info=True)
            raise InternalError("Could not save the sale. Please retry.") from e

        logger.info(
            "Checkout %s: %s lines, total %s, paid %s",
            sale.invoice_no,
            len(lines),
            sale.total_amount,
            sale.paid_amount,
        )

        return SaleSummary(
            sale_id=sale.id,
            invoice_no=sale.invoice_no,
            total_amount=sale.total_amount,
            paid_amount=sale.paid_amount,
            balance_due=sale.balance_due,
        )

    def _check_stock(
        self, codes: List[str], requested: Dict[str, int], products: Dict[str, Product]
    ):
        shortages = [
            self._shortage(products[code], requested[code])
            for code in codes
            if products[code].quantity < requested[code]
        ]
        if shortages:
            message = "; ".join(
                f"Not enough stock for {s['product_code']} (available {s['available']})"
                for s in shortages
            )
            logger.warning("Checkout refused: %s", message)
            raise ConflictError(message + ".", {"shortages": shortages})

    @staticmethod
    def _shortage(product: Product, requested: int) -> dict:
        return {
            "product_code": product.product_code,
            "name": product.name,
            "requested": requested,
            "available": product.quantity,
        }

    def _create_sale(self, lines: List[BillLine], totals, now: datetime, **fields) -> Sale:
        """Insert the sale and its items, retrying on invoice number collisions."""
        sale = None
        for attempt in range(1, self.INVOICE_NO_ATTEMPTS + 1):
            invoice_no = generate_invoice_no(now, self.suffix_factory())
            try:
                with transaction.atomic():
                    sale = Sale.objects.create(
                        invoice_no=invoice_no,
                        created_at=now,
                        updated_at=now,
                        gst_percent=totals.gst_percent,
                        discount_percent=totals.discount_percent,
                        subtotal=totals.subtotal,
                        discount_amount=totals.discount_amount,
                        taxable_amount=totals.taxable_amount,
                        gst_amount=totals.gst_amount,
                        total_amount=totals.total_amount,
                        paid_amount=totals.paid_amount,
                        balance_due=totals.balance_due,
                        **fields,
                    )
                break
            except IntegrityError:
                logger.warning(
                    "Invoice number %s already taken (attempt %s/%s)",
                    invoice_no,
                    attempt,
                    self.INVOICE_NO_ATTEMPTS,
                )

        if sale is None:
            raise InternalError("Could not allocate a unique invoice number. Please retry.")

        SaleItem.objects.bulk_create(
            [
                SaleItem(
                    sale=sale,
                    position=position,
                    product_code=line.product_code,
                    name=line.name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    line_total=line.line_total,
                )
                for position, line in enumerate(lines)
            ]
        )
        return sale


class PaymentUpdater:
    """Record later payments against an existing sale."""

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or Clock()

    def update_payment(
        self, sale_id, paid_amount, payment_method: Optional[str] = None
    ) -> PaymentSummary:
        """
        Set the paid amount of a sale (clamped to [0, total]).

        Raises:
            NotFoundError: If the sale does not exist
            ValidationError: If ``paid_amount`` is not a number
        """
        paid = to_decimal(paid_amount, "paid_amount")

        with transaction.atomic():
            try:
                sale = Sale.objects.select_for_update().get(pk=sale_id)
            except (Sale.DoesNotExist, DjangoValidationError, ValueError):
                raise NotFoundError("Sale not found.")

            sale.apply_payment(paid, payment_method, self.clock.now())

        logger.info(
            "Payment updated for %s: paid %s, balance %s",
            sale.invoice_no,
            sale.paid_amount,
            sale.balance_due,
        )

        return PaymentSummary(
            sale_id=sale.id,
            total_amount=sale.total_amount,
            paid_amount=sale.paid_amount,
            balance_due=sale.balance_due,
            payment_method=sale.payment_method,
        )


def _clean(value: Optional[str]) -> Optional[str]:
    """Trim a free-text field; blank becomes None."""
    if value is None:
        return None
    value = value.strip()
    return value or None
