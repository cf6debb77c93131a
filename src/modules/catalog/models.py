"""Item model: the sellable product and its stock counters.

Invariants held by the database itself (CHECK constraints):
- ``actual_price >= 0`` and ``0 <= discount_price <= actual_price``.
- ``0 <= current_quantity <= initial_quantity``.

``current_quantity`` is only ever written by ``InventoryAdjuster`` through
conditional updates; nothing else in the code base assigns it after the
item is created.
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from shared.domain.events import DomainEventMixin

logger = structlog.get_logger(__name__)


class Item(DomainEventMixin, BaseModel):
    """Catalog item.

    ``item_code`` is the public, human-shareable identifier (15 random
    alphanumerics); ``id`` is used for internal references.
    ``published_at`` is set once when the record is inserted.
    """

    name = models.CharField(max_length=255)
    item_code = models.CharField(max_length=32, unique=True, editable=False)
    actual_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    discount_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    initial_quantity = models.PositiveIntegerField(default=0)
    current_quantity = models.PositiveIntegerField(default=0)
    description = models.TextField(blank=True, default="")
    rating = models.PositiveIntegerField(default=0)
    image = models.CharField(max_length=255, blank=True, default="")
    sizes = models.JSONField(default=list, blank=True)
    colors = models.JSONField(default=list, blank=True)
    categories = models.JSONField(default=list, blank=True)
    published_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "items"
        ordering = ["-published_at"]
        indexes = [
            models.Index(fields=["name"], name="items_name_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(actual_price__gte=0),
                name="items_price_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(discount_price__gte=0)
                & models.Q(discount_price__lte=models.F("actual_price")),
                name="items_discount_within_price",
            ),
            models.CheckConstraint(
                condition=models.Q(current_quantity__gte=0)
                & models.Q(current_quantity__lte=models.F("initial_quantity")),
                name="items_stock_within_initial",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.discount_price is not None and self.actual_price is not None:
            if self.discount_price > self.actual_price:
                raise ValidationError(
                    {"discount_price": "Discount cannot exceed the actual price."}
                )
        if self.current_quantity > self.initial_quantity:
            raise ValidationError(
                {"current_quantity": "Current stock cannot exceed initial stock."}
            )

    @property
    def is_in_stock(self) -> bool:
        return self.current_quantity > 0

    def __str__(self) -> str:
        return f"{self.item_code} - {self.name}"
