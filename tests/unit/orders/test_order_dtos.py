import pytest
from pydantic import ValidationError as PydanticValidationError

from modules.orders.dtos import OrderOutputDTO, PlaceOrderDTO

pytestmark = pytest.mark.unit


class TestPlaceOrderDTO:
    def test_address_joins_street_and_region(self):
        dto = PlaceOrderDTO(
            customer_email="a@example.com",
            street=" 12 Main St ",
            region="North ",
            item_code="X",
            quantity=1,
        )
        assert dto.address == "12 Main St North"

    def test_address_with_region_only(self):
        dto = PlaceOrderDTO(
            customer_email="a@example.com", region="North", item_code="X", quantity=1
        )
        assert dto.address == "North"

    def test_labels_are_cleaned(self):
        dto = PlaceOrderDTO(
            customer_email="a@example.com",
            street="s",
            item_code="X",
            quantity=1,
            sizes=['"M"', "M", " L "],
        )
        assert dto.sizes == ["M", "L"]

    def test_non_numeric_quantity_fails(self):
        with pytest.raises(PydanticValidationError):
            PlaceOrderDTO(
                customer_email="a@example.com", street="s", item_code="X", quantity="many"
            )


def test_output_dto_from_entity(order_service, place_dto):
    order = order_service.place_order(place_dto())
    out = OrderOutputDTO.from_entity(order)
    assert out.status == "ongoing"
    assert out.customer_email == "ada@example.com"
    assert [line.quantity for line in out.lines] == [3]
    assert str(out.total_price) == "240.00"
