"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's async QuerySet API
(``aexists``, ``acount``, ``afirst``, async iteration).

The insert runs in a synchronous ``transaction.atomic()`` block via
``sync_to_async``: a unique-constraint violation then only rolls back
its own savepoint and is re-raised as ``OrderConflict``.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional

import structlog
from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction

from modules.orders.exceptions import OrderConflict
from modules.orders.models import Order
from modules.orders.repositories.interfaces import IOrderRepository
from modules.orders.validators import (
    DUPLICATE_ISBN_MESSAGE,
    DUPLICATE_TITLE_AUTHOR_MESSAGE,
    ValidationErrorDetail,
)

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def find_by_isbn(self, isbn: str) -> Optional[Order]:
        return await Order.objects.filter(isbn=isbn).afirst()

    async def exists_by_title_author(self, title: str, author: str) -> bool:
        return await Order.objects.filter(
            title__iexact=title,
            author__iexact=author,
        ).aexists()

    async def count_created_on(self, day: date) -> int:
        """Count orders created on ``day``, with day boundaries taken in UTC."""
        start = datetime.combine(day, time.min, tzinfo=timezone.utc)
        end = start + timedelta(days=1)
        return await Order.objects.filter(
            created_at__gte=start,
            created_at__lt=end,
        ).acount()

    async def list_all(self) -> List[Order]:
        return [order async for order in Order.objects.all()]

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def add(self, entity: Order) -> None:
        """Insert a new order.

        Raises:
            OrderConflict: the ISBN or the title/author pair already exists.
        """
        try:
            await sync_to_async(self._insert)(entity)
        except IntegrityError as exc:
            detail = _conflict_detail(exc)
            logger.warning(
                "order.insert_conflict",
                isbn=entity.isbn,
                field=detail.field,
            )
            raise OrderConflict([detail]) from exc

        logger.info("order.persisted", order_id=str(entity.id))

    @transaction.atomic
    def _insert(self, entity: Order) -> None:
        entity.save(force_insert=True)


def _conflict_detail(exc: IntegrityError) -> ValidationErrorDetail:
    if "isbn" in str(exc).lower():
        return ValidationErrorDetail("isbn", DUPLICATE_ISBN_MESSAGE)
    return ValidationErrorDetail("title", DUPLICATE_TITLE_AUTHOR_MESSAGE)
