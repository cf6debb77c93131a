"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).  Quantity is deliberately *not*
range-checked here: the pricing engine rejects non-positive quantities
with ``InvalidQuantityError`` so every entry point reports the same kind.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from modules.catalog.dtos import clean_labels

if TYPE_CHECKING:
    from modules.orders.models import Order


class PlaceOrderDTO(BaseModel):
    """Immutable DTO for a placement request (one item line)."""

    model_config = ConfigDict(frozen=True)

    customer_email: str
    street: str = ""
    region: str = ""
    item_code: str
    quantity: int
    sizes: List[str] = []
    colors: List[str] = []

    @field_validator("customer_email", "street", "region", "item_code")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    @field_validator("sizes", "colors")
    @classmethod
    def normalise_labels(cls, v: List[str]) -> List[str]:
        return clean_labels(v)

    @property
    def address(self) -> str:
        return f"{self.street} {self.region}".strip()


class OrderLineOutputDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_code: str
    item_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    sizes: List[str]
    colors: List[str]


class OrderOutputDTO(BaseModel):
    """Immutable DTO for order API responses."""

    model_config = ConfigDict(frozen=True)

    order_number: str
    address: str
    customer_email: str
    status: Optional[str]
    total_price: Decimal
    created_at: datetime
    updated_at: datetime
    lines: List[OrderLineOutputDTO]

    @classmethod
    def from_entity(cls, order: Order) -> OrderOutputDTO:
        """Assumes ``lines__item`` is prefetched."""
        lines = [
            OrderLineOutputDTO(
                item_code=line.item.item_code,
                item_name=line.item.name,
                quantity=line.quantity,
                unit_price=line.unit_price,
                line_total=line.line_total,
                sizes=list(line.sizes),
                colors=list(line.colors),
            )
            for line in order.lines.all()
        ]
        return cls(
            order_number=order.order_number,
            address=order.address,
            customer_email=order.customer.email,
            status=order.status,
            total_price=order.total_price,
            created_at=order.created_at,
            updated_at=order.updated_at,
            lines=lines,
        )
