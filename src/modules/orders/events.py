"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderPlaced(DomainEvent):
    """Raised when an order is placed and its stock reserved."""

    order_number: str = ""
    item_code: str = ""
    quantity: int = 0
    total_price: str = "0.00"


@dataclass(frozen=True)
class OrderConfirmed(DomainEvent):
    """Raised when an order moves to ``completed``."""

    order_number: str = ""


@dataclass(frozen=True)
class OrderCanceled(DomainEvent):
    """Raised when an order moves to ``canceled``."""

    order_number: str = ""
    restocked_units: int = 0
