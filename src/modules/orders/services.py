"""Order lifecycle service (Use Cases).

Drives an order from placement to one of its terminal states.  Every
command runs inside ``storage_transaction``: either every record it
touches is committed, or none is.

Placement:
1. Validate quantity, resolve customer and item (no writes yet).
2. Price the line (snapshot of the item's current price).
3. Insert Order + OrderStatus(``ongoing``) + OrderLine under a fresh
   order number, regenerating on collision.
4. Reserve stock.  ``InsufficientStockError`` here rolls back step 3.

Transitions (confirm / cancel):
- Lock the order row, then its status row.
- Only ``ongoing`` may move; ``completed`` and ``canceled`` are final.
- Cancellation gives the reserved units back to the catalog.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Type

import structlog

from modules.catalog import pricing
from modules.catalog.inventory import InventoryAdjuster
from modules.core.db import storage_transaction
from modules.core.exceptions import (
    CustomerNotFoundError,
    InvalidTransitionError,
    ItemNotFoundError,
    MissingStatusError,
    OrderNotFoundError,
    ValidationError,
)
from modules.core.identifiers import IdentifierGenerator, retry_on_collision
from modules.orders.constants import Status
from modules.orders.events import OrderCanceled, OrderConfirmed, OrderPlaced
from modules.orders.models import Order, OrderLine

if TYPE_CHECKING:
    from modules.catalog.models import Item
    from modules.catalog.repositories.interfaces import IItemRepository
    from modules.customers.repositories.interfaces import ICustomerRepository
    from modules.orders.dtos import PlaceOrderDTO
    from modules.orders.repositories.interfaces import IOrderRepository
    from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        customer_repository: ICustomerRepository,
        item_repository: IItemRepository,
        identifiers: Optional[IdentifierGenerator] = None,
        inventory: Optional[InventoryAdjuster] = None,
    ) -> None:
        self._order_repo = order_repository
        self._customer_repo = customer_repository
        self._item_repo = item_repository
        self._ids = identifiers or IdentifierGenerator()
        self._inventory = inventory or InventoryAdjuster(item_repository)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def place_order(self, dto: PlaceOrderDTO) -> Order:
        """Place a single-line order and reserve its stock.

        Raises:
            InvalidQuantityError: quantity is zero or negative.
            ValidationError: shipping address is empty.
            CustomerNotFoundError: no active customer with that email.
            ItemNotFoundError: no item with that code.
            InsufficientStockError: not enough stock (nothing is persisted).
            DuplicateIdentifierError: every generated order number collided.
            StorageUnavailableError: the database timed out.
        """
        log = logger.bind(item_code=dto.item_code, quantity=dto.quantity)
        log.info("order.placement_started")

        quantity = pricing.validate_quantity(dto.quantity)
        if not dto.address:
            raise ValidationError("Shipping address is required.", attr="street")

        customer = self._customer_repo.get_by_email(dto.customer_email)
        if not customer or not customer.is_active:
            raise CustomerNotFoundError(
                f"No active customer with email {dto.customer_email}."
            )

        item = self._item_repo.get_by_code(dto.item_code)
        if not item:
            raise ItemNotFoundError(f"Item {dto.item_code} not found.")

        quote = pricing.quote(item, quantity)

        def _create() -> Order:
            order = Order(
                order_number=self._ids.next_order_number(),
                address=dto.address,
                customer=customer,
                total_price=pricing.order_total([quote]),
            )
            line = OrderLine(
                item=item,
                quantity=quote.quantity,
                unit_price=quote.unit_price,
                line_total=quote.line_total,
                sizes=list(dto.sizes),
                colors=list(dto.colors),
            )
            order.add_domain_event(
                OrderPlaced(
                    aggregate_id=order.id,
                    order_number=order.order_number,
                    item_code=item.item_code,
                    quantity=quote.quantity,
                    total_price=str(order.total_price),
                )
            )
            return self._order_repo.create(order, [line])

        with storage_transaction("place_order"):
            order = retry_on_collision(_create, label="order_number")
            remaining = self._inventory.reserve_stock(item, quote.quantity)

        log.info(
            "order.placed",
            order_number=order.order_number,
            total_price=str(order.total_price),
            remaining_stock=remaining,
        )
        return self._order_repo.get_by_number(order.order_number) or order

    def confirm_order(self, order_number: str) -> Order:
        """``ongoing -> completed``.

        Raises:
            OrderNotFoundError, MissingStatusError, InvalidTransitionError.
        """
        return self._transition(order_number, Status.COMPLETED)

    def cancel_order(self, order_number: str) -> Order:
        """``ongoing -> canceled``; reserved stock is released.

        Raises:
            OrderNotFoundError, MissingStatusError, InvalidTransitionError.
            StockIntegrityError: a line would restock above the item's
                initial quantity; nothing is changed.
        """
        return self._transition(order_number, Status.CANCELED)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_number: str) -> Order:
        """Raises ``OrderNotFoundError`` if the order does not exist."""
        order = self._order_repo.get_by_number(order_number)
        if not order:
            raise OrderNotFoundError(f"Order {order_number} not found.")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        return self._order_repo.list(filters)

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def _transition(self, order_number: str, target: Status) -> Order:
        log = logger.bind(order_number=order_number, new_status=str(target))

        with storage_transaction(f"{target}_order"):
            order = self._order_repo.get_for_update(order_number)
            if not order:
                raise OrderNotFoundError(f"Order {order_number} not found.")

            record = self._order_repo.get_status_for_update(order)
            if record is None:
                log.error("order.missing_status")
                raise MissingStatusError(
                    f"Order {order_number} has no status record."
                )

            log = log.bind(current_status=record.status)
            if not record.can_transition_to(target):
                log.warning("order.invalid_transition")
                raise InvalidTransitionError(
                    f"Cannot move order {order_number} from {record.status} "
                    f"to {target}."
                )

            event: DomainEvent
            if target == Status.CANCELED:
                restocked = self._release_lines(order)
                event = OrderCanceled(
                    aggregate_id=order.id,
                    order_number=order_number,
                    restocked_units=restocked,
                )
            else:
                event = self._event_for(target)(
                    aggregate_id=order.id, order_number=order_number
                )

            record.status = target
            order.add_domain_event(event)
            self._order_repo.save_transition(order, record)

        log.info("order.status_changed")
        return self._order_repo.get_by_number(order_number) or order

    def _release_lines(self, order: Order) -> int:
        restocked = 0
        for line in self._order_repo.lines_of(order):
            item: Item = line.item
            self._inventory.release_stock(item, line.quantity)
            restocked += line.quantity
        return restocked

    @staticmethod
    def _event_for(target: Status) -> Type[DomainEvent]:
        return {Status.COMPLETED: OrderConfirmed}[target]
