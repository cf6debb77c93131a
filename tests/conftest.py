import random
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APIClient

from modules.catalog.models import Item
from modules.core.identifiers import IdentifierGenerator
from modules.customers.models import Customer

User = get_user_model()


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _media_root(settings, tmp_path):
    """Uploaded images land in a per-test directory."""
    settings.MEDIA_ROOT = str(tmp_path / "media")


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def auth_client():
    """APIClient with a force-authenticated Django user."""
    client = APIClient()
    user = User.objects.create_user(username="shopper", password="testpass123")
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def seeded_ids():
    """Deterministic identifier generator."""
    return IdentifierGenerator(random.Random(1234))


@pytest.fixture()
def customer():
    return Customer.objects.create(
        name="Ada Buyer",
        email="ada@example.com",
        mobile="5550100",
        account_number="222000000000000001",
        is_active=True,
    )


@pytest.fixture()
def make_item():
    """Factory for items with ``current_quantity == initial_quantity``."""
    counter = {"n": 0}

    def _make(
        stock: int = 5,
        price: str = "100.00",
        discount: str = "20.00",
        **extra,
    ) -> Item:
        counter["n"] += 1
        defaults = {
            "name": f"Linen Shirt {counter['n']}",
            "item_code": f"ITEMCODE{counter['n']:07d}",
            "actual_price": Decimal(price),
            "discount_price": Decimal(discount),
            "initial_quantity": stock,
            "current_quantity": stock,
            "sizes": ["M", "L"],
            "colors": ["white"],
            "categories": ["shirts"],
        }
        defaults.update(extra)
        return Item.objects.create(**defaults)

    return _make


@pytest.fixture()
def item(make_item):
    """The reference listing: price 100, discount 20, stock 5."""
    return make_item()


@pytest.fixture()
def image_file():
    return SimpleUploadedFile(
        "shirt.png", b"\x89PNG\r\n\x1a\nfake-image-bytes", content_type="image/png"
    )
