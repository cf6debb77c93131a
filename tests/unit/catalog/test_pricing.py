from decimal import Decimal

import pytest

from modules.catalog import pricing
from modules.catalog.models import Item
from modules.core.exceptions import InvalidItemError, InvalidQuantityError

pytestmark = pytest.mark.unit


def _item(price: str, discount: str) -> Item:
    return Item(actual_price=Decimal(price), discount_price=Decimal(discount))


class TestUnitPrice:
    def test_discount_is_subtracted(self):
        assert pricing.unit_price(_item("100.00", "20.00")) == Decimal("80.00")

    def test_zero_discount_keeps_actual_price(self):
        assert pricing.unit_price(_item("49.90", "0")) == Decimal("49.90")

    def test_discount_equal_to_price_is_free(self):
        assert pricing.unit_price(_item("10.00", "10.00")) == Decimal("0.00")

    def test_missing_item_is_invalid(self):
        with pytest.raises(InvalidItemError):
            pricing.unit_price(None)


class TestQuote:
    def test_reference_listing(self):
        quote = pricing.quote(_item("100.00", "20.00"), 3)
        assert quote.unit_price == Decimal("80.00")
        assert quote.line_total == Decimal("240.00")
        assert quote.quantity == 3

    @pytest.mark.parametrize("quantity", [0, -1, -50])
    def test_non_positive_quantity_is_rejected(self, quantity):
        with pytest.raises(InvalidQuantityError):
            pricing.quote(_item("100.00", "20.00"), quantity)

    @pytest.mark.parametrize("quantity", ["3", 2.5, True, None])
    def test_non_integer_quantity_is_rejected(self, quantity):
        with pytest.raises(InvalidQuantityError):
            pricing.quote(_item("100.00", "20.00"), quantity)

    def test_quote_does_not_touch_the_item(self):
        item = _item("100.00", "20.00")
        pricing.quote(item, 2)
        assert item.actual_price == Decimal("100.00")
        assert item.discount_price == Decimal("20.00")


def test_order_total_sums_lines():
    quotes = [
        pricing.quote(_item("100.00", "20.00"), 3),
        pricing.quote(_item("5.50", "0"), 2),
    ]
    assert pricing.order_total(quotes) == Decimal("251.00")


def test_order_total_of_nothing_is_zero():
    assert pricing.order_total([]) == Decimal("0.00")
