"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.  Domain errors
propagate to ``domain_exception_handler``, which maps each kind to its
HTTP status; the view never swallows exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.catalog.repositories.django_repository import ItemDjangoRepository
from modules.core.pagination import StandardResultsSetPagination
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.dtos import PlaceOrderDTO
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    OrderListSerializer,
    OrderSerializer,
    PlaceOrderSerializer,
)
from modules.orders.services import OrderService


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).  Orders are
    addressed by ``order_number``.  Does **not** extend ``ModelViewSet``:
    all writes go through the service/repository layer.
    """

    queryset = Order.objects.all()
    lookup_field = "order_number"
    filterset_class = OrderFilter
    search_fields = ["order_number", "customer__email", "address"]
    ordering_fields = ["created_at", "total_price"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            item_repository=ItemDjangoRepository(),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        """Throttle scope per action."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        serializer = PlaceOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = self._service.place_order(PlaceOrderDTO(**serializer.validated_data))
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def get_queryset(self):
        return Order.objects.select_related("customer", "status_record")

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Filtering (status, customer email, date range, total range) is
        handled by ``OrderFilter``; results are paginated.
        """
        queryset = self.filter_queryset(self.get_queryset())

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request)
        serializer = OrderListSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, order_number: str | None = None) -> Response:
        """GET /api/v1/orders/{order_number}/"""
        order = self._service.get_order(order_number or "")
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def confirm(self, request: Request, order_number: str | None = None) -> Response:
        """POST /api/v1/orders/{order_number}/confirm/"""
        order = self._service.confirm_order(order_number or "")
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, order_number: str | None = None) -> Response:
        """POST /api/v1/orders/{order_number}/cancel/

        Releases the reserved stock back to the catalog.
        """
        order = self._service.cancel_order(order_number or "")
        return Response(OrderSerializer(order).data)
