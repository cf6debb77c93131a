from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from modules.catalog.models import Item

pytestmark = pytest.mark.unit


class TestItemConstraints:
    def test_published_at_is_set_on_insert(self, item):
        assert item.published_at is not None

    def test_is_in_stock(self, make_item):
        assert make_item(stock=1).is_in_stock
        assert not make_item(stock=0).is_in_stock

    def test_discount_above_price_is_refused_by_database(self, make_item):
        with pytest.raises(IntegrityError), transaction.atomic():
            make_item(price="10.00", discount="11.00")

    def test_stock_above_initial_is_refused_by_database(self, item):
        with pytest.raises(IntegrityError), transaction.atomic():
            Item.objects.filter(pk=item.pk).update(current_quantity=6)

    def test_duplicate_item_code_is_refused(self, item, make_item):
        with pytest.raises(IntegrityError), transaction.atomic():
            make_item(item_code=item.item_code)

    def test_clean_reports_discount_field(self):
        listing = Item(
            name="Cap",
            item_code="CAP",
            actual_price=Decimal("5.00"),
            discount_price=Decimal("6.00"),
        )
        with pytest.raises(ValidationError) as excinfo:
            listing.clean()
        assert "discount_price" in excinfo.value.message_dict
