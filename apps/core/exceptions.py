"""
Error taxonomy for checkout, payment and document operations.

Every error carries a human-readable message and an ``extra`` dict with the
structured details (missing codes, stock shortages) a caller needs to correct
and resubmit the request.
"""

from typing import Any, Dict, Optional


class ShopError(Exception):
    """Base class for all domain errors raised by the shop services."""

    code = "error"

    def __init__(self, message: str, extra: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.extra = extra or {}

    def as_dict(self) -> Dict[str, Any]:
        """Return the structured error payload."""
        payload = {"detail": self.message, "code": self.code}
        payload.update(self.extra)
        return payload


class ValidationError(ShopError):
    """Raised when a request is malformed (empty cart, blank codes)."""

    code = "validation_error"


class NotFoundError(ShopError):
    """Raised when product codes or a sale id do not resolve."""

    code = "not_found"


class ConflictError(ShopError):
    """Raised when requested quantities exceed available stock."""

    code = "conflict"


class InternalError(ShopError):
    """Raised when persistence fails after validation succeeded."""

    code = "internal_error"
