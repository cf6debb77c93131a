"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.catalog.dtos import clean_labels
from modules.orders.models import Order, OrderLine

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class PlaceOrderSerializer(serializers.Serializer):
    """Validates the order placement payload.

    ``quantity`` has no lower bound here; zero and negative values reach
    the pricing rules and come back as ``invalid_quantity``.
    """

    customer_email = serializers.EmailField()
    street = serializers.CharField(required=False, default="", allow_blank=True)
    region = serializers.CharField(required=False, default="", allow_blank=True)
    item_code = serializers.CharField(max_length=32)
    quantity = serializers.IntegerField()
    sizes = serializers.ListField(child=serializers.CharField(), required=False)
    colors = serializers.ListField(child=serializers.CharField(), required=False)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderLineSerializer(serializers.ModelSerializer):
    """Read serializer for order lines with the item snapshot."""

    item_code = serializers.CharField(source="item.item_code", read_only=True)
    item_name = serializers.CharField(source="item.name", read_only=True)
    sizes = serializers.SerializerMethodField()
    colors = serializers.SerializerMethodField()

    class Meta:
        model = OrderLine
        fields = [
            "item_code",
            "item_name",
            "quantity",
            "unit_price",
            "line_total",
            "sizes",
            "colors",
        ]
        read_only_fields = fields

    def get_sizes(self, obj: OrderLine) -> list[str]:
        return clean_labels(obj.sizes)

    def get_colors(self, obj: OrderLine) -> list[str]:
        return clean_labels(obj.colors)


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with nested lines."""

    customer_email = serializers.EmailField(source="customer.email", read_only=True)
    status = serializers.CharField(read_only=True, allow_null=True)
    lines = OrderLineSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "order_number",
            "address",
            "customer_email",
            "status",
            "total_price",
            "created_at",
            "updated_at",
            "lines",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order list (no nested relations)."""

    customer_email = serializers.EmailField(source="customer.email", read_only=True)
    status = serializers.CharField(read_only=True, allow_null=True)

    class Meta:
        model = Order
        fields = [
            "order_number",
            "customer_email",
            "status",
            "total_price",
            "created_at",
        ]
        read_only_fields = fields
