"""Pure conversions between order shapes.

- ``request_to_order``: ``CreateOrderDTO`` -> unsaved ``Order``.
- ``order_to_profile``: ``Order`` -> ``OrderProfileDTO`` with derived
  display fields.

No I/O happens here.  The current time is read once per call and may be
passed in explicitly, so derivation is deterministic for a fixed clock.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

import uuid6
from django.utils import timezone

from modules.orders.constants import (
    CHILDREN_DISCOUNT_FACTOR,
    UNCATEGORIZED_LABEL,
    OrderCategory,
)
from modules.orders.dtos import CreateOrderDTO, OrderProfileDTO
from modules.orders.models import Order

CENT = Decimal("0.01")

_CATEGORY_DISPLAY_NAMES: dict[str, str] = dict(OrderCategory.choices)


# ---------------------------------------------------------------------------
# Request -> Order
# ---------------------------------------------------------------------------


def apply_children_discount(price: Decimal) -> Decimal:
    """10% off, rounded half-up to cents."""
    return (price * CHILDREN_DISCOUNT_FACTOR).quantize(CENT, rounding=ROUND_HALF_UP)


def request_to_order(dto: CreateOrderDTO, *, now: Optional[datetime] = None) -> Order:
    """Build a new, unsaved ``Order`` from a validated request.

    Children orders get the discounted price and never carry a cover image.
    """
    price = dto.price
    cover_image_url = dto.cover_image_url
    if dto.category == OrderCategory.CHILDREN:
        price = apply_children_discount(dto.price)
        cover_image_url = None

    return Order(
        id=uuid6.uuid7(),
        title=dto.title,
        author=dto.author,
        isbn=dto.isbn,
        category=dto.category,
        price=price,
        published_date=dto.published_date,
        cover_image_url=cover_image_url,
        stock_quantity=dto.stock_quantity,
        created_at=now or timezone.now(),
        updated_at=None,
    )


# ---------------------------------------------------------------------------
# Order -> Profile
# ---------------------------------------------------------------------------


def category_display_name(category: str) -> str:
    return _CATEGORY_DISPLAY_NAMES.get(category, UNCATEGORIZED_LABEL)


def format_price(price: Decimal) -> str:
    """US-dollar currency string with thousands separators: ``$1,234.50``."""
    return f"${price:,.2f}"


def published_age(published_date: date, today: date) -> str:
    days = (today - published_date).days
    if days < 30:
        return "New Release"
    if days < 365:
        return f"{days // 30} months old"
    if days < 1825:
        return f"{days // 365} years old"
    return "Classic"


def author_initials(author: str) -> str:
    """First letter of the first and last name parts, upper-cased.

    >>> author_initials("John Michael Smith Jr")
    'JJ'
    """
    parts = (author or "").split()
    if not parts:
        return "?"
    if len(parts) == 1:
        return parts[0][0].upper()
    return f"{parts[0][0]}{parts[-1][0]}".upper()


def availability_status(order: Order) -> str:
    if not order.is_available:
        return "Out of Stock"
    if order.stock_quantity == 1:
        return "Last Copy"
    if order.stock_quantity <= 5:
        return "Limited Stock"
    return "In Stock"


def order_to_profile(order: Order, *, today: Optional[date] = None) -> OrderProfileDTO:
    """Build the display profile of ``order``.

    ``today`` defaults to the current UTC date.
    """
    today = today or timezone.now().date()
    return OrderProfileDTO(
        id=order.id,
        title=order.title,
        author=order.author,
        isbn=order.isbn,
        category=order.category,
        category_display_name=category_display_name(order.category),
        price=order.price,
        formatted_price=format_price(order.price),
        published_date=order.published_date,
        published_age=published_age(order.published_date, today),
        author_initials=author_initials(order.author),
        cover_image_url=order.cover_image_url,
        stock_quantity=order.stock_quantity,
        is_available=order.is_available,
        availability_status=availability_status(order),
        created_at=order.created_at,
        updated_at=order.updated_at,
    )
