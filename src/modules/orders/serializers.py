"""Order DRF serializers for API input.

The serializer operates at the Interface layer (API Views) and only
checks payload shape.  Business validation lives in
``CreateOrderValidator``, which receives Pydantic DTOs from ``dtos.py``.
Output is rendered straight from ``OrderProfileDTO``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import DEFAULT_STOCK_QUANTITY
from modules.orders.dtos import CreateOrderDTO


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order creation request payload shape."""

    title = serializers.CharField(
        required=False, default="", allow_blank=True, trim_whitespace=False
    )
    author = serializers.CharField(
        required=False, default="", allow_blank=True, trim_whitespace=False
    )
    isbn = serializers.CharField(required=False, default="", allow_blank=True)
    category = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    published_date = serializers.DateField()
    cover_image_url = serializers.CharField(
        required=False, default=None, allow_blank=True, allow_null=True
    )
    stock_quantity = serializers.IntegerField(
        required=False, default=DEFAULT_STOCK_QUANTITY
    )

    def to_dto(self) -> CreateOrderDTO:
        return CreateOrderDTO(**self.validated_data)
