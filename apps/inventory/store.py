"""
Product store used by checkout and label printing.

All stock mutation goes through ``decrement_atomically``, a conditional
UPDATE that never lets quantity drop below zero even if two transactions
read the same stock level.
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from django.db.models import F

from .models import Product

logger = logging.getLogger(__name__)


class ProductStore:
    """Lookup and stock adjustment for catalog products."""

    def find_by_code(self, code: str) -> Optional[Product]:
        """Return the product with the given code, or None."""
        return Product.objects.filter(product_code=code.strip()).first()

    def find_by_codes(self, codes: Iterable[str]) -> Dict[str, Product]:
        """Return the products matching ``codes`` keyed by product code."""
        products = Product.objects.filter(product_code__in=list(codes))
        return {product.product_code: product for product in products}

    def lock_by_codes(self, codes: Iterable[str]) -> Dict[str, Product]:
        """
        Fetch and row-lock the products matching ``codes``.

        Must be called inside ``transaction.atomic()``. Rows are locked in
        product-code order so overlapping checkouts cannot deadlock.
        """
        products = (
            Product.objects.select_for_update()
            .filter(product_code__in=sorted(set(codes)))
            .order_by("product_code")
        )
        return {product.product_code: product for product in products}

    def decrement_atomically(self, code: str, quantity: int, now: datetime) -> bool:
        """
        Take ``quantity`` units of ``code`` out of stock.

        Returns False, without changing anything, when fewer than
        ``quantity`` units are available.
        """
        updated = Product.objects.filter(product_code=code, quantity__gte=quantity).update(
            quantity=F("quantity") - quantity,
            updated_at=now,
        )
        if not updated:
            logger.warning("Stock decrement refused for %s (requested %s)", code, quantity)
        return bool(updated)

    @staticmethod
    def missing_codes(codes: List[str], found: Dict[str, Product]) -> List[str]:
        """Return the codes absent from ``found``, in request order."""
        return [code for code in codes if code not in found]
