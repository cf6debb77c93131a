"""Customer directory exceptions."""

from __future__ import annotations

from modules.core.exceptions import CustomerNotFoundError, ValidationError

__all__ = ["CustomerAlreadyExists", "CustomerNotFoundError"]


class CustomerAlreadyExists(ValidationError):
    """A customer with the same email already exists."""

    code = "customer_exists"
