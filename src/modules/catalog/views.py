"""Catalog API views.

Exposes ``CatalogService`` via HTTP using DRF ViewSets.  Domain errors
propagate to ``domain_exception_handler``, which turns them into the
standard error envelope; the view never swallows exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.catalog.dtos import PublishItemDTO
from modules.catalog.filters import ItemFilter
from modules.catalog.models import Item
from modules.catalog.repositories.django_repository import ItemDjangoRepository
from modules.catalog.serializers import ItemSerializer, PublishItemSerializer
from modules.catalog.services import CatalogService
from modules.core.blobs import DjangoImageStorage
from modules.core.pagination import StandardResultsSetPagination


class ItemViewSet(ListModelMixin, GenericViewSet):
    """Publish, browse and look up catalog items.

    Items are addressed by their public ``item_code``.
    """

    queryset = Item.objects.all()
    serializer_class = ItemSerializer
    lookup_field = "item_code"
    filterset_class = ItemFilter
    search_fields = ["name", "description"]
    ordering_fields = ["published_at", "actual_price", "rating", "name"]
    ordering = ["-published_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    pagination_class = StandardResultsSetPagination
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CatalogService(
            item_repository=ItemDjangoRepository(),
            image_storage=DjangoImageStorage(),
        )

    def retrieve(self, request: Request, item_code: str | None = None) -> Response:
        """GET /api/v1/items/{item_code}/"""
        item = self._service.get_item(item_code or "")
        return Response(ItemSerializer(item).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/items/ (multipart, with an ``image`` file)."""
        serializer = PublishItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        image = data.pop("image")

        item = self._service.publish_item(PublishItemDTO(**data), image)
        return Response(ItemSerializer(item).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["get"])
    def names(self, request: Request) -> Response:
        """GET /api/v1/items/names/?q=<text>"""
        query = request.query_params.get("q", "")
        return Response({"results": self._service.find_item_names(query)})
