"""Unit tests for CatalogService.publish_item and the catalog queries."""

from __future__ import annotations

import random
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from modules.catalog.dtos import PublishItemDTO
from modules.catalog.models import Item
from modules.catalog.repositories.django_repository import ItemDjangoRepository
from modules.catalog.services import CatalogService
from modules.core.exceptions import (
    DuplicateIdentifierError,
    ImageStorageError,
    ItemNotFoundError,
    ItemValidationError,
)
from modules.core.identifiers import IdentifierGenerator
from modules.core.models import OutboxEvent

pytestmark = pytest.mark.unit


class FixedCodes(IdentifierGenerator):
    """Hands out a scripted sequence of item codes."""

    def __init__(self, codes):
        super().__init__(random.Random(0))
        self._codes = iter(codes)

    def next_item_code(self) -> str:
        return next(self._codes)


@pytest.fixture()
def storage():
    fake = MagicMock()
    fake.store_image.return_value = "items/shirt.png"
    return fake


@pytest.fixture()
def service(storage):
    return CatalogService(
        item_repository=ItemDjangoRepository(),
        image_storage=storage,
        identifiers=IdentifierGenerator(random.Random(42)),
    )


def _dto(**overrides) -> PublishItemDTO:
    data = {
        "name": "Linen Shirt",
        "sizes": ["M", '"L"'],
        "colors": ["white"],
        "stock_quantity": 5,
        "actual_price": Decimal("100.00"),
        "discount_price": Decimal("20.00"),
        "description": "Breathable.",
        "categories": ["Shirts"],
    }
    data.update(overrides)
    return PublishItemDTO(**data)


class TestPublishItem:
    def test_publish_sets_counters_and_rating(self, service, storage):
        item = service.publish_item(_dto(), image=MagicMock())

        item.refresh_from_db()
        assert item.initial_quantity == 5
        assert item.current_quantity == 5
        assert item.rating == 0
        assert item.image == "items/shirt.png"
        assert len(item.item_code) == 15
        assert item.sizes == ["M", "L"]
        assert item.categories == ["shirts"]
        storage.store_image.assert_called_once()

    def test_publish_writes_item_published_event(self, service):
        item = service.publish_item(_dto(), image=MagicMock())
        row = OutboxEvent.objects.get(event_type="ItemPublished")
        assert row.payload["item_code"] == item.item_code
        assert row.topic == "catalog"

    def test_zero_stock_is_allowed(self, service):
        item = service.publish_item(_dto(stock_quantity=0), image=MagicMock())
        assert item.current_quantity == 0

    @pytest.mark.parametrize(
        "overrides, attr",
        [
            ({"discount_price": Decimal("120.00")}, "discount_price"),
            ({"discount_price": Decimal("-1")}, "discount_price"),
            ({"actual_price": Decimal("-5")}, "actual_price"),
            ({"stock_quantity": -1}, "stock_quantity"),
            ({"name": "   "}, "name"),
        ],
    )
    def test_invalid_listing_writes_nothing(self, service, storage, overrides, attr):
        with pytest.raises(ItemValidationError) as excinfo:
            service.publish_item(_dto(**overrides), image=MagicMock())
        assert excinfo.value.attr == attr
        storage.store_image.assert_not_called()
        assert not Item.objects.exists()

    def test_image_failure_writes_no_item(self, service, storage):
        storage.store_image.side_effect = ImageStorageError("bucket down")
        with pytest.raises(ImageStorageError):
            service.publish_item(_dto(), image=MagicMock())
        assert not Item.objects.exists()
        assert not OutboxEvent.objects.exists()

    def test_item_code_collision_is_retried(self, storage, item):
        service = CatalogService(
            ItemDjangoRepository(), storage, FixedCodes([item.item_code, "FRESHCODE000001"])
        )
        published = service.publish_item(_dto(), image=MagicMock())
        assert published.item_code == "FRESHCODE000001"
        assert Item.objects.count() == 2

    def test_item_code_collision_gives_up(self, storage, item, settings):
        settings.IDENTIFIER_MAX_RETRIES = 2
        service = CatalogService(
            ItemDjangoRepository(), storage, FixedCodes([item.item_code] * 2)
        )
        with pytest.raises(DuplicateIdentifierError):
            service.publish_item(_dto(), image=MagicMock())
        assert Item.objects.count() == 1


class TestCatalogQueries:
    def test_get_item_by_code(self, service, item):
        assert service.get_item(item.item_code).pk == item.pk

    def test_get_unknown_item(self, service):
        with pytest.raises(ItemNotFoundError):
            service.get_item("NOPE")

    def test_find_item_names(self, service, make_item):
        make_item(name="Linen Shirt")
        make_item(name="Linen Trousers")
        make_item(name="Wool Cap")
        assert service.find_item_names("linen") == ["Linen Shirt", "Linen Trousers"]

    def test_blank_query_returns_nothing(self, service, item):
        assert service.find_item_names("  ") == []

    def test_list_items_with_filters(self, service, make_item):
        make_item(stock=0)
        in_stock = make_item(stock=3)
        assert [i.pk for i in service.list_items({"current_quantity__gt": 0})] == [
            in_stock.pk
        ]
