"""
Shop identity used on printed documents.
"""

from dataclasses import dataclass

from django.conf import settings


@dataclass(frozen=True)
class ShopProfile:
    """Name, contact details and currency symbol printed on invoices and labels."""

    name: str
    address: str = ""
    phone: str = ""
    website: str = ""
    currency_symbol: str = "Rs."

    @classmethod
    def from_settings(cls) -> "ShopProfile":
        """Build the profile from the SHOP_* Django settings."""
        return cls(
            name=settings.SHOP_NAME,
            address=getattr(settings, "SHOP_ADDRESS", ""),
            phone=getattr(settings, "SHOP_PHONE", ""),
            website=getattr(settings, "SHOP_WEBSITE", ""),
            currency_symbol=getattr(settings, "SHOP_CURRENCY_SYMBOL", "Rs."),
        )
