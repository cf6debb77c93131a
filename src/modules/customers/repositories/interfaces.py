"""Customer repository interface (the customer directory contract)."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.customers.models import Customer


class ICustomerRepository(IRepository["Customer"]):
    """Repository contract for the Customer aggregate."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Customer]:
        """Retrieve a customer by email address (case-insensitive)."""

    @abstractmethod
    def create(self, customer: Customer) -> Customer:
        """Insert a new customer.

        Raises:
            DuplicateIdentifierError: ``account_number`` already taken.
            CustomerAlreadyExists: ``email`` already taken.
        """
