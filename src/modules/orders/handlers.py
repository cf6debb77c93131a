"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.events import OrderCanceled, OrderConfirmed, OrderPlaced
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderPlacedHandler(IEventHandler[OrderPlaced]):
    def handle(self, event: OrderPlaced) -> None:
        logger.info(
            "order.event.placed",
            order_number=event.order_number,
            item_code=event.item_code,
            quantity=event.quantity,
            total_price=event.total_price,
        )


class OrderConfirmedHandler(IEventHandler[OrderConfirmed]):
    def handle(self, event: OrderConfirmed) -> None:
        logger.info("order.event.confirmed", order_number=event.order_number)


class OrderCanceledHandler(IEventHandler[OrderCanceled]):
    def handle(self, event: OrderCanceled) -> None:
        logger.info(
            "order.event.canceled",
            order_number=event.order_number,
            restocked_units=event.restocked_units,
        )


order_placed_handler = OrderPlacedHandler()
order_confirmed_handler = OrderConfirmedHandler()
order_canceled_handler = OrderCanceledHandler()
