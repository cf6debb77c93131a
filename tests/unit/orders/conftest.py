import pytest

from modules.catalog.repositories.django_repository import ItemDjangoRepository
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.dtos import PlaceOrderDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService


@pytest.fixture()
def order_service(seeded_ids):
    return OrderService(
        order_repository=OrderDjangoRepository(),
        customer_repository=CustomerDjangoRepository(),
        item_repository=ItemDjangoRepository(),
        identifiers=seeded_ids,
    )


@pytest.fixture()
def place_dto(customer, item):
    """Builds a placement request for the reference customer and item."""

    def _build(**overrides) -> PlaceOrderDTO:
        data = {
            "customer_email": customer.email,
            "street": "12 Main St",
            "region": "North",
            "item_code": item.item_code,
            "quantity": 3,
            "sizes": ["M"],
            "colors": ["white"],
        }
        data.update(overrides)
        return PlaceOrderDTO(**data)

    return _build
