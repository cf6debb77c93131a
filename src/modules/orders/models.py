"""Order, OrderLine and OrderStatus models.

- ``order_number`` is generated (prefix ``555``) and UNIQUE; a collision
  is reported by the repository, never silently overwritten.
- ``total_price`` and ``OrderLine.unit_price`` are snapshots taken at
  placement; later catalog price changes do not touch them.
- Each order owns exactly one ``OrderStatus`` and one or more lines;
  both are deleted with the order (CASCADE).  Items are shared and
  protected (PROTECT).
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import TERMINAL_STATES, VALID_TRANSITIONS, Status
from shared.domain.events import DomainEventMixin

logger = structlog.get_logger(__name__)


class Order(DomainEventMixin, BaseModel):
    """Order aggregate root.

    ``order_number`` is the human-shareable identifier used by every API;
    the UUIDv7 ``id`` is used for internal references.
    """

    order_number = models.CharField(max_length=32, unique=True, editable=False)
    address = models.CharField(max_length=512)
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    total_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_price__gte=0),
                name="orders_total_non_negative",
            ),
        ]

    @property
    def status(self) -> str | None:
        """Current lifecycle state, ``None`` if the status record is missing."""
        record = getattr(self, "status_record", None)
        return record.status if record else None

    def __str__(self) -> str:
        return f"{self.order_number} ({self.status})"


class OrderLine(BaseModel):
    """One purchased item within an order.

    ``unit_price`` and ``line_total`` are frozen at placement.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="lines",
    )
    item = models.ForeignKey(
        "catalog.Item",
        on_delete=models.PROTECT,
        related_name="order_lines",
    )
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    line_total = models.DecimalField(max_digits=12, decimal_places=2)
    sizes = models.JSONField(default=list, blank=True)
    colors = models.JSONField(default=list, blank=True)

    class Meta:
        db_table = "order_lines"
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_lines_quantity_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.item_id} x{self.quantity} ({self.line_total})"


class OrderStatus(BaseModel):
    """Lifecycle state of an order (one-to-one).

    ``updated_at`` (from ``BaseModel``) moves on every transition.
    """

    order = models.OneToOneField(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_record",
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ONGOING,
    )

    class Meta:
        db_table = "order_statuses"
        indexes = [
            models.Index(fields=["status"], name="order_status_idx"),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    def __str__(self) -> str:
        return f"{self.order_id}: {self.status}"
