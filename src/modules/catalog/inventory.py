"""Inventory adjuster: the only writer of ``Item.current_quantity``.

``reserve_stock`` and ``release_stock`` delegate to conditional updates
on the item repository, so the check and the write happen in one
statement at the storage layer.  Of two concurrent reservations whose
combined demand exceeds stock, the one that reaches the row second
matches zero rows and gets ``InsufficientStockError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from modules.catalog.pricing import validate_quantity
from modules.core.exceptions import (
    InsufficientStockError,
    InvalidItemError,
    ItemNotFoundError,
    StockIntegrityError,
)

if TYPE_CHECKING:
    from modules.catalog.models import Item
    from modules.catalog.repositories.interfaces import IItemRepository

logger = structlog.get_logger(__name__)


class InventoryAdjuster:
    """Reserves and releases stock for order lines."""

    def __init__(self, item_repository: IItemRepository) -> None:
        self._items = item_repository

    def reserve_stock(self, item: Item, quantity: int) -> int:
        """Decrease the item's stock by *quantity*; return the remaining stock.

        *item* is refreshed in place with the committed counter.

        Raises:
            InvalidQuantityError: *quantity* is not a positive integer.
            InsufficientStockError: fewer than *quantity* units are left.
            ItemNotFoundError: the item disappeared.
        """
        if item is None:
            raise InvalidItemError("Item reference does not resolve.")
        quantity = validate_quantity(quantity)
        log = logger.bind(item_code=item.item_code, quantity=quantity)

        if not self._items.decrement_stock(item.id, quantity):
            available = self._items.current_stock(item.id)
            if available is None:
                raise ItemNotFoundError(f"Item {item.item_code} not found.")
            log.info("inventory.insufficient", available=available)
            raise InsufficientStockError(
                f"Item {item.item_code}: requested {quantity}, available {available}."
            )

        remaining = self._items.current_stock(item.id)
        item.current_quantity = remaining
        log.info("inventory.reserved", remaining=remaining)
        return remaining

    def release_stock(self, item: Item, quantity: int) -> int:
        """Give back *quantity* units of a reservation; return the new stock.

        The counter never rises above ``initial_quantity``.  A release that
        would overflow it is a data-integrity fault: stock is left unchanged
        and ``StockIntegrityError`` is raised.
        """
        if item is None:
            raise InvalidItemError("Item reference does not resolve.")
        quantity = validate_quantity(quantity)
        log = logger.bind(item_code=item.item_code, quantity=quantity)

        if not self._items.increment_stock(item.id, quantity):
            current = self._items.current_stock(item.id)
            if current is None:
                raise ItemNotFoundError(f"Item {item.item_code} not found.")
            log.error("inventory.release_overflow", current=current)
            raise StockIntegrityError(
                f"Item {item.item_code}: releasing {quantity} would exceed "
                f"the initial quantity {item.initial_quantity}."
            )

        restored = self._items.current_stock(item.id)
        item.current_quantity = restored
        log.info("inventory.released", restored=restored)
        return restored
