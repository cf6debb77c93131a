"""Django ORM implementation of the Item repository.

Stock updates are single ``UPDATE ... WHERE`` statements with ``F()``
expressions: the database evaluates the condition and the new value
atomically, so two concurrent reservations can never both pass the
check on a stale read.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from modules.catalog.models import Item
from modules.catalog.repositories.interfaces import IItemRepository
from modules.core.exceptions import DuplicateIdentifierError
from modules.core.outbox import record_events

logger = structlog.get_logger(__name__)

OUTBOX_TOPIC = "catalog"


class ItemDjangoRepository(IItemRepository):
    """Concrete Item repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Item]:
        """Returns ``None`` for non-existent or invalid IDs."""
        try:
            return Item.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_code(self, item_code: str) -> Optional[Item]:
        return Item.objects.filter(item_code=item_code.strip()).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Item]:
        """List items with optional Django ORM look-ups.

        Examples of valid filters::

            {"name__icontains": "shirt"}
            {"current_quantity__gt": 0}
        """
        queryset = Item.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Item) -> Item:
        """Persist descriptive changes.  Stock counters are never written here."""
        fields = [
            f.name
            for f in Item._meta.concrete_fields
            if not f.primary_key and f.name not in {"current_quantity", "item_code"}
        ]
        entity.save(update_fields=fields)
        logger.info("item.saved", item_id=str(entity.id), item_code=entity.item_code)
        return entity

    def create(self, item: Item) -> Item:
        """Insert inside a savepoint so a code collision can be retried."""
        try:
            with transaction.atomic():
                item.save(force_insert=True)
                record_events(item.domain_events, topic=OUTBOX_TOPIC)
        except IntegrityError as exc:
            if Item.objects.filter(item_code=item.item_code).exists():
                raise DuplicateIdentifierError(
                    f"Item code {item.item_code} already exists."
                ) from exc
            raise
        item.clear_domain_events()
        logger.info("item.created", item_id=str(item.id), item_code=item.item_code)
        return item

    def names_matching(self, query: str, limit: int = 10) -> List[str]:
        names = (
            Item.objects.filter(name__icontains=query.strip())
            .order_by("name")
            .values_list("name", flat=True)
            .distinct()
        )
        return list(names[:limit])

    # ------------------------------------------------------------------
    # Conditional stock updates
    # ------------------------------------------------------------------

    def decrement_stock(self, item_id: UUID, quantity: int) -> bool:
        updated = Item.objects.filter(
            id=item_id, current_quantity__gte=quantity
        ).update(
            current_quantity=F("current_quantity") - quantity,
            updated_at=timezone.now(),
        )
        return updated == 1

    def increment_stock(self, item_id: UUID, quantity: int) -> bool:
        updated = Item.objects.filter(
            id=item_id,
            current_quantity__lte=F("initial_quantity") - quantity,
        ).update(
            current_quantity=F("current_quantity") + quantity,
            updated_at=timezone.now(),
        )
        return updated == 1

    def current_stock(self, item_id: UUID) -> Optional[int]:
        return (
            Item.objects.filter(id=item_id)
            .values_list("current_quantity", flat=True)
            .first()
        )
