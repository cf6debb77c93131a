"""Django ORM implementation of the Customer repository.

Error handling follows the Null Object pattern for reads: methods return
``None`` instead of raising, the Service Layer decides how to translate
a missing customer.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from modules.core.exceptions import DuplicateIdentifierError
from modules.customers.exceptions import CustomerAlreadyExists
from modules.customers.models import Customer
from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


class CustomerDjangoRepository(ICustomerRepository):
    """Concrete Customer repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Customer]:
        """Returns ``None`` for non-existent or invalid IDs (e.g. malformed UUID)."""
        try:
            return Customer.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Customer]:
        queryset = Customer.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Customer) -> Customer:
        entity.save()
        logger.info("customer.saved", customer_id=str(entity.id))
        return entity

    def create(self, customer: Customer) -> Customer:
        """Insert inside a savepoint so a collision leaves the outer
        transaction usable for a retry."""
        if Customer.objects.filter(email=customer.email.strip().lower()).exists():
            raise CustomerAlreadyExists("Email already registered.")
        try:
            with transaction.atomic():
                customer.save(force_insert=True)
        except IntegrityError as exc:
            if Customer.objects.filter(account_number=customer.account_number).exists():
                raise DuplicateIdentifierError(
                    f"Account number {customer.account_number} already exists."
                ) from exc
            raise CustomerAlreadyExists("Email already registered.") from exc
        logger.info("customer.created", customer_id=str(customer.id))
        return customer

    def get_by_email(self, email: str) -> Optional[Customer]:
        return Customer.objects.filter(email=email.strip().lower()).first()
