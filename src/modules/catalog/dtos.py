"""Catalog DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).  They normalise shape only; the
business checks (price, discount, stock) live in ``CatalogService`` so
they surface as ``ItemValidationError``.

- ``PublishItemDTO``: input for item publication.
- ``ItemOutputDTO``: output with the public item fields.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List

from pydantic import BaseModel, ConfigDict, field_validator

if TYPE_CHECKING:
    from modules.catalog.models import Item


def clean_labels(values: List[str]) -> List[str]:
    """Strip whitespace and stray quotes, drop blanks and duplicates."""
    seen: List[str] = []
    for value in values:
        label = str(value).strip().strip('"').strip()
        if label and label not in seen:
            seen.append(label)
    return seen


class PublishItemDTO(BaseModel):
    """Immutable DTO for item publication requests."""

    model_config = ConfigDict(frozen=True)

    name: str
    sizes: List[str] = []
    colors: List[str] = []
    stock_quantity: int
    actual_price: Decimal
    discount_price: Decimal = Decimal("0.00")
    description: str = ""
    categories: List[str] = []

    @field_validator("name", "description")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    @field_validator("sizes", "colors")
    @classmethod
    def normalise_labels(cls, v: List[str]) -> List[str]:
        return clean_labels(v)

    @field_validator("categories")
    @classmethod
    def normalise_categories(cls, v: List[str]) -> List[str]:
        return [label.lower() for label in clean_labels(v)]


class ItemOutputDTO(BaseModel):
    """Immutable DTO for item API responses."""

    model_config = ConfigDict(frozen=True)

    item_code: str
    name: str
    actual_price: Decimal
    discount_price: Decimal
    unit_price: Decimal
    quantity: int
    description: str
    rating: int
    image: str
    sizes: List[str]
    colors: List[str]
    categories: List[str]
    published_at: datetime

    @classmethod
    def from_entity(cls, item: Item) -> ItemOutputDTO:
        from modules.catalog.pricing import unit_price

        return cls(
            item_code=item.item_code,
            name=item.name,
            actual_price=item.actual_price,
            discount_price=item.discount_price,
            unit_price=unit_price(item),
            quantity=item.current_quantity,
            description=item.description,
            rating=item.rating,
            image=item.image,
            sizes=clean_labels(item.sizes),
            colors=clean_labels(item.colors),
            categories=list(item.categories),
            published_at=item.published_at,
        )
