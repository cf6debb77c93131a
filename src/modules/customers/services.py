"""Customer directory service.

``find_customer_by_email`` is the look-up the order engine relies on;
``register_customer`` assigns a generated account number and retries on
collision.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import structlog
from django.db import transaction

from modules.core.identifiers import IdentifierGenerator, retry_on_collision
from modules.customers.models import Customer

if TYPE_CHECKING:
    from modules.customers.dtos import RegisterCustomerDTO
    from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


class CustomerService:
    """Application service for the customer directory."""

    def __init__(
        self,
        repository: ICustomerRepository,
        identifiers: Optional[IdentifierGenerator] = None,
    ) -> None:
        self._repo = repository
        self._ids = identifiers or IdentifierGenerator()

    def find_customer_by_email(self, email: str) -> Optional[Customer]:
        """Return the customer with *email*, or ``None``."""
        return self._repo.get_by_email(email)

    @transaction.atomic
    def register_customer(self, dto: RegisterCustomerDTO) -> Customer:
        """Create a customer with a fresh account number.

        Raises:
            CustomerAlreadyExists: the email is already registered.
            DuplicateIdentifierError: every generated account number
                collided.
        """

        def _create() -> Customer:
            return self._repo.create(
                Customer(
                    name=dto.name,
                    email=dto.email,
                    mobile=dto.mobile,
                    account_number=self._ids.next_account_number(),
                )
            )

        customer = retry_on_collision(_create, label="account_number")
        logger.info("customer.registered", customer_id=str(customer.id))
        return customer
