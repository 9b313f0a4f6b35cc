"""
REST framework integration for the shop error taxonomy.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

from .exceptions import ConflictError, InternalError, NotFoundError, ShopError, ValidationError

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    InternalError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: ShopError) -> int:
    """Return the HTTP status code for a domain error."""
    for error_class, status_code in STATUS_BY_ERROR.items():
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def shop_exception_handler(exc, context):
    """
    Translate domain errors into structured JSON responses.

    Anything that is not a ShopError is handed to the default DRF handler.
    """
    if not isinstance(exc, ShopError):
        return exception_handler(exc, context)

    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("Request failed: %s", exc.message)
    set_rollback()
    return Response(exc.as_dict(), status=status_code)
