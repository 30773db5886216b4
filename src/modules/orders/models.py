"""Order model.

Storage-level invariants:
- ``isbn`` is unique across all orders.
- The ``(title, author)`` pair is unique case-insensitively, enforced with
  a functional unique constraint on ``LOWER(title), LOWER(author)``.

The validator performs best-effort pre-checks for both; these constraints
decide concurrent races (the loser surfaces as ``OrderConflict``).
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models.functions import Lower

from modules.core.models import BaseModel
from modules.orders.constants import (
    AUTHOR_MAX_LENGTH,
    COVER_IMAGE_URL_MAX_LENGTH,
    ISBN_MAX_LENGTH,
    STOCK_MAX,
    TITLE_MAX_LENGTH,
    OrderCategory,
)


class Order(BaseModel):
    """A persisted book order.

    ``is_available`` is derived from ``stock_quantity`` and never stored.
    """

    title: models.CharField = models.CharField(max_length=TITLE_MAX_LENGTH)
    author: models.CharField = models.CharField(max_length=AUTHOR_MAX_LENGTH)
    isbn: models.CharField = models.CharField(max_length=ISBN_MAX_LENGTH, unique=True)
    category: models.CharField = models.CharField(
        max_length=20,
        choices=OrderCategory.choices,
    )
    price: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    published_date: models.DateField = models.DateField()
    cover_image_url: models.URLField = models.URLField(  # noqa: DJ01
        max_length=COVER_IMAGE_URL_MAX_LENGTH,
        null=True,
        blank=True,
        default=None,
    )
    stock_quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        default=0,
        validators=[MaxValueValidator(STOCK_MAX)],
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                Lower("title"),
                Lower("author"),
                name="orders_title_author_ci_uniq",
            ),
        ]
        indexes = [
            models.Index(fields=["created_at"], name="orders_created_idx"),
        ]

    @property
    def is_available(self) -> bool:
        return self.stock_quantity > 0

    def __str__(self) -> str:
        return f"{self.title} by {self.author} ({self.isbn})"
