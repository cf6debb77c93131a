"""Order repository interface.

The Order aggregate is Order + OrderStatus + OrderLines.  ``create``
writes all three (plus pending outbox events) as one unit; transitions
lock the order row and its status row.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderLine, OrderStatus


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def create(self, order: Order, lines: List[OrderLine]) -> Order:
        """Insert the order, its initial ``ongoing`` status and its lines.

        Raises:
            DuplicateIdentifierError: ``order_number`` already taken.
        """

    @abstractmethod
    def get_by_number(self, order_number: str) -> Optional[Order]:
        """Retrieve an order with its status, customer and lines."""

    @abstractmethod
    def get_for_update(self, order_number: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def get_status_for_update(self, order: Order) -> Optional[OrderStatus]:
        """Lock and return the order's status record, ``None`` if missing."""

    @abstractmethod
    def lines_of(self, order: Order) -> List[OrderLine]:
        """Lines of *order* with their items."""

    @abstractmethod
    def save_transition(self, order: Order, status: OrderStatus) -> Order:
        """Persist a status change, bump both timestamps, flush events."""
