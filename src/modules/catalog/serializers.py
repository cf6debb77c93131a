"""Catalog DRF serializers for API input/output.

Business logic lives in ``CatalogService``, which receives the Pydantic
``PublishItemDTO`` built from ``PublishItemSerializer`` data.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.catalog.dtos import clean_labels
from modules.catalog.models import Item
from modules.catalog.pricing import unit_price


class PublishItemSerializer(serializers.Serializer):
    """Validates a multipart item publication request."""

    name = serializers.CharField(max_length=255)
    sizes = serializers.ListField(child=serializers.CharField(), required=False)
    colors = serializers.ListField(child=serializers.CharField(), required=False)
    stock_quantity = serializers.IntegerField()
    actual_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    discount_price = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, default=0
    )
    description = serializers.CharField(required=False, default="", allow_blank=True)
    categories = serializers.ListField(child=serializers.CharField(), required=False)
    image = serializers.FileField()


class ItemSerializer(serializers.ModelSerializer):
    """Read serializer for items.  ``quantity`` is the current stock."""

    quantity = serializers.IntegerField(source="current_quantity", read_only=True)
    unit_price = serializers.SerializerMethodField()
    sizes = serializers.SerializerMethodField()
    colors = serializers.SerializerMethodField()

    class Meta:
        model = Item
        fields = [
            "item_code",
            "name",
            "actual_price",
            "discount_price",
            "unit_price",
            "quantity",
            "description",
            "rating",
            "image",
            "sizes",
            "colors",
            "categories",
            "published_at",
        ]
        read_only_fields = fields

    def get_unit_price(self, obj: Item) -> str:
        return str(unit_price(obj))

    def get_sizes(self, obj: Item) -> list[str]:
        return clean_labels(obj.sizes)

    def get_colors(self, obj: Item) -> list[str]:
        return clean_labels(obj.colors)
