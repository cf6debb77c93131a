"""Error taxonomy for the order & inventory engine.

Every failure path of a use-case raises one of these classes.  Each kind
carries a stable ``code``, a ``retryable`` flag and the HTTP status the
API layer should answer with, so callers can branch on the *kind* of
failure instead of parsing messages.

- ``ValidationError``: malformed input, caller's fault.
- ``NotFoundError``: customer / item / order does not exist.
- ``InsufficientStockError``: business rule, retry only with new input.
- ``InvalidTransitionError``: illegal order status change.
- ``DuplicateIdentifierError``: generated identifier collided, retryable.
- ``InfrastructureError``: blob storage / database unavailable, retryable.
- ``MissingStatusError``: data-integrity defect, surfaced as internal error.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


class DomainError(Exception):
    """Base class for every error raised by the engine."""

    code: str = "domain_error"
    retryable: bool = False
    http_status: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "", *, attr: Optional[str] = None) -> None:
        super().__init__(message or self.__class__.__doc__ or self.code)
        self.attr = attr

    @property
    def detail(self) -> str:
        return str(self)


# ---------------------------------------------------------------------------
# Caller errors
# ---------------------------------------------------------------------------


class ValidationError(DomainError):
    """The request is malformed."""

    code = "invalid"


class InvalidQuantityError(ValidationError):
    """Quantity must be a positive integer."""

    code = "invalid_quantity"


class ItemValidationError(ValidationError):
    """The item listing is inconsistent (price, discount or stock)."""

    code = "invalid_item"


class NotFoundError(DomainError):
    """The referenced record does not exist."""

    code = "not_found"
    http_status = status.HTTP_404_NOT_FOUND


class CustomerNotFoundError(NotFoundError):
    """No active customer matches the given email."""

    code = "customer_not_found"


class ItemNotFoundError(NotFoundError):
    """No item matches the given item code."""

    code = "item_not_found"


class InvalidItemError(ItemNotFoundError):
    """The item reference handed to the pricing engine does not resolve."""

    code = "invalid_item_reference"


class OrderNotFoundError(NotFoundError):
    """No order matches the given order number."""

    code = "order_not_found"


# ---------------------------------------------------------------------------
# Business rule violations
# ---------------------------------------------------------------------------


class InsufficientStockError(DomainError):
    """Not enough stock to reserve the requested quantity."""

    code = "insufficient_stock"
    http_status = status.HTTP_409_CONFLICT


class InvalidTransitionError(DomainError):
    """The order cannot move from its current status to the requested one."""

    code = "invalid_transition"
    http_status = status.HTTP_409_CONFLICT


class DuplicateIdentifierError(DomainError):
    """A generated identifier collided with an existing record."""

    code = "duplicate_identifier"
    retryable = True
    http_status = status.HTTP_409_CONFLICT


# ---------------------------------------------------------------------------
# Infrastructure faults
# ---------------------------------------------------------------------------


class InfrastructureError(DomainError):
    """A collaborator outside the engine failed."""

    code = "infrastructure_error"
    retryable = True
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE


class ImageStorageError(InfrastructureError):
    """The item image could not be stored."""

    code = "image_storage_error"


class StorageUnavailableError(InfrastructureError):
    """The database did not answer within the configured timeout."""

    code = "storage_unavailable"


class MissingStatusError(DomainError):
    """An order exists without its status record."""

    code = "missing_status"
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR


class StockIntegrityError(DomainError):
    """Releasing a reservation would push stock above its initial quantity."""

    code = "stock_integrity"
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR


# ---------------------------------------------------------------------------
# DRF integration
# ---------------------------------------------------------------------------


def _error_body(
    error_type: str, code: str, detail: Any, attr: Optional[str], retryable: bool
) -> dict:
    return {
        "type": error_type,
        "errors": [{"code": code, "detail": detail, "attr": attr}],
        "retryable": retryable,
    }


def domain_exception_handler(exc: Exception, context: dict) -> Optional[Response]:
    """DRF ``EXCEPTION_HANDLER`` producing one envelope for every error.

    ``DomainError`` subclasses are mapped through their ``http_status``;
    DRF's own exceptions (auth, parse, serializer validation) are wrapped
    in the same ``{"type", "errors"}`` shape.
    """
    if isinstance(exc, DomainError):
        error_type = "server_error" if exc.http_status >= 500 else "client_error"
        return Response(
            _error_body(error_type, exc.code, exc.detail, exc.attr, exc.retryable),
            status=exc.http_status,
        )

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, drf_exceptions.ValidationError) and isinstance(
        exc.detail, dict
    ):
        errors = [
            {
                "code": getattr(messages[0], "code", "invalid"),
                "detail": str(messages[0]),
                "attr": field,
            }
            for field, messages in exc.detail.items()
            if isinstance(messages, list) and messages
        ]
        response.data = {
            "type": "validation_error",
            "errors": errors,
            "retryable": False,
        }
        return response

    detail = response.data.get("detail", response.data) if isinstance(
        response.data, dict
    ) else response.data
    code = getattr(detail, "code", None) or getattr(exc, "default_code", "error")
    response.data = _error_body(
        "client_error" if response.status_code < 500 else "server_error",
        code,
        str(detail),
        None,
        False,
    )
    return response
