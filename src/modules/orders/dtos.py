"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderDTO``: input for order creation.  Only shapes are coerced
  here (``Decimal``, ``date``); every business rule is checked by
  ``CreateOrderValidator`` so all failures are reported together.
- ``OrderProfileDTO``: display-ready output with derived fields.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from modules.orders.constants import DEFAULT_STOCK_QUANTITY

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    ``category`` is kept as a plain string so an unknown value is reported
    by the validator ("Invalid category") alongside the other failures.
    """

    model_config = ConfigDict(frozen=True)

    title: str = ""
    author: str = ""
    isbn: str = ""
    category: str
    price: Decimal
    published_date: date
    cover_image_url: Optional[str] = None
    stock_quantity: int = DEFAULT_STOCK_QUANTITY

    @field_validator("cover_image_url")
    @classmethod
    def blank_url_is_absent(cls, v: Optional[str]) -> Optional[str]:
        return v or None


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class OrderProfileDTO(BaseModel):
    """Immutable DTO for order API responses.

    Carries the persisted fields plus five display fields computed at
    derivation time (see ``modules.orders.mappers.order_to_profile``).
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    title: str
    author: str
    isbn: str
    category: str
    category_display_name: str
    price: Decimal
    formatted_price: str
    published_date: date
    published_age: str
    author_initials: str
    cover_image_url: Optional[str]
    stock_quantity: int
    is_available: bool
    availability_status: str
    created_at: datetime
    updated_at: Optional[datetime]
