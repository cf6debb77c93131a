"""Django ORM implementation of the Order repository.

Row locks use ``select_for_update()`` on the order row and, separately,
on its status row: locking through the reverse one-to-one join is not
allowed on PostgreSQL (nullable side of an outer join).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from modules.core.exceptions import DuplicateIdentifierError
from modules.core.outbox import record_events
from modules.orders.constants import Status
from modules.orders.models import Order, OrderLine, OrderStatus
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

OUTBOX_TOPIC = "orders"


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    def create(self, order: Order, lines: List[OrderLine]) -> Order:
        """Insert order, status and lines inside one savepoint.

        A UNIQUE violation on ``order_number`` rolls back only the
        savepoint, so the caller can retry with a new number.
        """
        try:
            with transaction.atomic():
                order.save(force_insert=True)
        except IntegrityError as exc:
            if Order.objects.filter(order_number=order.order_number).exists():
                raise DuplicateIdentifierError(
                    f"Order number {order.order_number} already exists."
                ) from exc
            raise

        OrderStatus.objects.create(order=order, status=Status.ONGOING)
        for line in lines:
            line.order = order
        OrderLine.objects.bulk_create(lines)
        record_events(order.domain_events, topic=OUTBOX_TOPIC)
        order.clear_domain_events()

        logger.info(
            "order.persisted",
            order_number=order.order_number,
            line_count=len(lines),
        )
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def _with_relations(self):
        return Order.objects.select_related(
            "customer", "status_record"
        ).prefetch_related("lines__item")

    def get_by_id(self, id: str) -> Optional[Order]:
        """Returns ``None`` for non-existent or invalid IDs."""
        try:
            return self._with_relations().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_number(self, order_number: str) -> Optional[Order]:
        return self._with_relations().filter(order_number=order_number).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders with optional filters and eager-loaded relations.

        Supported filter keys include ``status_record__status`` and
        ``customer__email``.
        """
        queryset = self._with_relations()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def get_for_update(self, order_number: str) -> Optional[Order]:
        return (
            Order.objects.select_for_update()
            .filter(order_number=order_number)
            .first()
        )

    def get_status_for_update(self, order: Order) -> Optional[OrderStatus]:
        return OrderStatus.objects.select_for_update().filter(order=order).first()

    def lines_of(self, order: Order) -> List[OrderLine]:
        return list(
            OrderLine.objects.select_related("item")
            .filter(order=order)
            .order_by("item_id")
        )

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        entity.save()
        record_events(entity.domain_events, topic=OUTBOX_TOPIC)
        entity.clear_domain_events()
        return entity

    @transaction.atomic
    def save_transition(self, order: Order, status: OrderStatus) -> Order:
        status.save(update_fields=["status"])
        order.save(update_fields=["updated_at"])
        events = order.domain_events
        record_events(events, topic=OUTBOX_TOPIC)
        order.clear_domain_events()
        logger.info(
            "order.status_saved",
            order_number=order.order_number,
            status=status.status,
            event_count=len(events),
        )
        return order
