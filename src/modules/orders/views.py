"""Order API views.

Exposes the ``OrderService`` via HTTP using a DRF ViewSet.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.

The service is async; DRF views are sync, so calls cross the boundary
with ``async_to_sync``.
"""

from __future__ import annotations

from typing import Iterable, Tuple

from asgiref.sync import async_to_sync
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.core.cache import DjangoCacheService
from modules.core.middleware import get_correlation_id
from modules.orders.exceptions import OrderValidationError
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import CreateOrderSerializer
from modules.orders.services import OperationContext, OrderService


class OrderViewSet(ViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repository and cache (DIP).
    All ORM access goes through the service/repository layer.
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            cache=DjangoCacheService(),
        )

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        Returns 201 with the order profile, or 400 with the list of
        failed rules.  A uniqueness race lost at insert time is reported
        the same way as a validation failure.
        """
        serializer = CreateOrderSerializer(data=request.data)
        if not serializer.is_valid():
            return _validation_failed(
                (field, str(message))
                for field, messages in serializer.errors.items()
                for message in messages
            )

        context = OperationContext(correlation_id=get_correlation_id())
        try:
            profile = async_to_sync(self._service.create_order)(
                serializer.to_dto(), context
            )
        except OrderValidationError as exc:
            return _validation_failed(
                (error.field, error.message) for error in exc.errors
            )

        return Response(profile.model_dump(mode="json"), status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/"""
        profiles = async_to_sync(self._service.list_orders)()
        return Response([profile.model_dump(mode="json") for profile in profiles])


def _validation_failed(details: Iterable[Tuple[str, str]]) -> Response:
    return Response(
        {
            "error": "Validation failed",
            "details": [
                {"field": field, "message": message} for field, message in details
            ],
        },
        status=status.HTTP_400_BAD_REQUEST,
    )
