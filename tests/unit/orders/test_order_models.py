from decimal import Decimal

import pytest
from django.db import IntegrityError, transaction
from django.db.models import ProtectedError

from modules.orders.models import Order, OrderLine, OrderStatus

pytestmark = pytest.mark.unit


@pytest.fixture()
def order(customer):
    return Order.objects.create(
        order_number="55512345",
        address="12 Main St North",
        customer=customer,
        total_price=Decimal("80.00"),
    )


class TestOrderConstraints:
    def test_order_number_is_unique(self, order, customer):
        with pytest.raises(IntegrityError), transaction.atomic():
            Order.objects.create(
                order_number=order.order_number, address="x", customer=customer
            )

    def test_negative_total_is_refused(self, customer):
        with pytest.raises(IntegrityError), transaction.atomic():
            Order.objects.create(
                order_number="55500001",
                address="x",
                customer=customer,
                total_price=Decimal("-1.00"),
            )

    def test_zero_quantity_line_is_refused(self, order, item):
        with pytest.raises(IntegrityError), transaction.atomic():
            OrderLine.objects.create(
                order=order,
                item=item,
                quantity=0,
                unit_price=Decimal("80.00"),
                line_total=Decimal("0.00"),
            )

    def test_one_status_per_order(self, order):
        OrderStatus.objects.create(order=order)
        with pytest.raises(IntegrityError), transaction.atomic():
            OrderStatus.objects.create(order=order)

    def test_deleting_order_removes_lines_and_status(self, order, item):
        OrderStatus.objects.create(order=order)
        OrderLine.objects.create(
            order=order,
            item=item,
            quantity=1,
            unit_price=Decimal("80.00"),
            line_total=Decimal("80.00"),
        )
        order.delete()
        assert not OrderLine.objects.exists()
        assert not OrderStatus.objects.exists()

    def test_item_with_orders_cannot_be_deleted(self, order, item):
        OrderLine.objects.create(
            order=order,
            item=item,
            quantity=1,
            unit_price=Decimal("80.00"),
            line_total=Decimal("80.00"),
        )
        with pytest.raises(ProtectedError):
            item.delete()

    def test_new_status_defaults_to_ongoing(self, order):
        assert OrderStatus.objects.create(order=order).status == "ongoing"
