"""Domain events for the catalog bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class ItemPublished(DomainEvent):
    """Raised when a new item is published."""

    item_code: str = ""
    initial_quantity: int = 0
