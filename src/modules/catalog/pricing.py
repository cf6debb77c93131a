"""Pricing engine.

Pure functions over an item snapshot: no I/O, no mutation.  The unit
price is ``actual_price - discount_price`` when a discount is set,
``actual_price`` otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from modules.core.exceptions import InvalidItemError, InvalidQuantityError

if TYPE_CHECKING:
    from modules.catalog.models import Item


@dataclass(frozen=True)
class PriceQuote:
    """Price of one order line, frozen at the moment it was computed."""

    unit_price: Decimal
    quantity: int
    line_total: Decimal


def validate_quantity(quantity: object) -> int:
    """Return *quantity* if it is a positive ``int``.

    Raises:
        InvalidQuantityError: zero, negative, or not an integer.
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantityError("Quantity must be an integer.", attr="quantity")
    if quantity <= 0:
        raise InvalidQuantityError("Quantity must be at least 1.", attr="quantity")
    return quantity


def unit_price(item: Optional[Item]) -> Decimal:
    """Price of a single unit after discount.

    Raises:
        InvalidItemError: *item* does not resolve.
    """
    if item is None:
        raise InvalidItemError("Item reference does not resolve.")
    if item.discount_price and item.discount_price > 0:
        return item.actual_price - item.discount_price
    return item.actual_price


def quote(item: Optional[Item], quantity: int) -> PriceQuote:
    """Compute unit price and line total for *quantity* units of *item*."""
    quantity = validate_quantity(quantity)
    price = unit_price(item)
    return PriceQuote(unit_price=price, quantity=quantity, line_total=price * quantity)


def order_total(quotes: list[PriceQuote]) -> Decimal:
    """Sum of line totals."""
    return sum((q.line_total for q in quotes), Decimal("0.00"))
