"""Item repository interface.

Besides plain reads and writes, the catalog store exposes the two
conditional stock updates the inventory adjuster is built on.  Both are a
single read-check-write at the storage layer.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.catalog.models import Item


class IItemRepository(IRepository["Item"]):
    """Repository contract for the Item aggregate."""

    @abstractmethod
    def get_by_code(self, item_code: str) -> Optional[Item]:
        """Retrieve an item by its public item code."""

    @abstractmethod
    def create(self, item: Item) -> Item:
        """Insert a new item together with its pending domain events.

        Raises:
            DuplicateIdentifierError: ``item_code`` already taken.
        """

    @abstractmethod
    def names_matching(self, query: str, limit: int = 10) -> List[str]:
        """Distinct item names containing *query* (case-insensitive)."""

    @abstractmethod
    def decrement_stock(self, item_id: UUID, quantity: int) -> bool:
        """``current_quantity -= quantity`` where ``current_quantity >= quantity``.

        Returns ``False`` when no row matched (not enough stock).
        """

    @abstractmethod
    def increment_stock(self, item_id: UUID, quantity: int) -> bool:
        """``current_quantity += quantity`` bounded by ``initial_quantity``.

        Returns ``False`` when no row matched.
        """

    @abstractmethod
    def current_stock(self, item_id: UUID) -> Optional[int]:
        """Committed ``current_quantity`` of the item, ``None`` if missing."""
