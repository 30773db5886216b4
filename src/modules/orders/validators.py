"""Validation of order creation requests.

``CreateOrderValidator`` runs an explicit, ordered list of rule
functions against a ``CreateOrderDTO`` and collects every failure
(no fail-fast).  Rules that need the repository are coroutines; the
validator awaits them in place so the reported order is stable.

Only the aggregate business-rule group short-circuits: it is a single
compound rule that stops at its first broken condition and reports one
model-level failure.

Rule families, in evaluation order:
- Title: required, length, content filter, title/author uniqueness.
- Author: required, length, allowed characters.
- ISBN: required, format, uniqueness.
- Category, price, published date, stock, cover image URL.
- Business rules: daily volume cap, Technical minimum price, Children
  title filter, high-value stock cap.
- Category-conditional rules (Technical, Children, Fiction).
- Cross-field: expensive orders need limited stock.
"""

from __future__ import annotations

import inspect
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Awaitable, Callable, List, Optional, Tuple, Union
from urllib.parse import urlsplit

import structlog
from django.conf import settings
from django.core.exceptions import NON_FIELD_ERRORS, ValidationError
from django.core.validators import URLValidator
from django.utils import timezone

from modules.orders.constants import (
    AUTHOR_MAX_LENGTH,
    AUTHOR_MIN_LENGTH,
    AUTHOR_NAME_PATTERN,
    CHILDREN_MAX_PRICE,
    CHILDREN_RESTRICTED_WORDS,
    COVER_IMAGE_URL_MAX_LENGTH,
    DEFAULT_DAILY_ORDER_LIMIT,
    EARLIEST_PUBLISHED_DATE,
    EXPENSIVE_MAX_STOCK,
    EXPENSIVE_PRICE_THRESHOLD,
    FICTION_AUTHOR_MIN_LENGTH,
    HIGH_VALUE_MAX_STOCK,
    HIGH_VALUE_PRICE_THRESHOLD,
    INAPPROPRIATE_WORDS,
    ISBN_MAX_LENGTH,
    ISBN_VALID_LENGTHS,
    PRICE_DECIMAL_PLACES,
    PRICE_MAX_EXCLUSIVE,
    STOCK_MAX,
    TECHNICAL_KEYWORDS,
    TECHNICAL_MAX_AGE_YEARS,
    TECHNICAL_MIN_PRICE,
    TITLE_MAX_LENGTH,
    VALID_IMAGE_EXTENSIONS,
    OrderCategory,
)

if TYPE_CHECKING:
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

DUPLICATE_ISBN_MESSAGE = "An order with this ISBN already exists"
DUPLICATE_TITLE_AUTHOR_MESSAGE = (
    "An order with this title by the same author already exists"
)
BUSINESS_RULES_MESSAGE = "Order does not meet business requirements"

_AUTHOR_RE = re.compile(AUTHOR_NAME_PATTERN)
_url_validator = URLValidator(schemes=["http", "https"])


@dataclass(frozen=True)
class ValidationErrorDetail:
    """A single failed rule: the offending field and a readable message.

    ``field`` is ``"__all__"`` for model-level rules.
    """

    field: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    errors: Tuple[ValidationErrorDetail, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def messages(self) -> List[str]:
        return [error.message for error in self.errors]


Errors = List[ValidationErrorDetail]
Rule = Callable[["CreateOrderDTO", date], Union[Errors, Awaitable[Errors]]]


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def _contains_any(text: str, words: Tuple[str, ...]) -> bool:
    lowered = text.lower()
    return any(word in lowered for word in words)


def is_appropriate_title(title: str) -> bool:
    return not _contains_any(title, INAPPROPRIATE_WORDS)


def is_appropriate_for_children(title: str) -> bool:
    return not _contains_any(title, CHILDREN_RESTRICTED_WORDS)


def has_technical_keyword(title: str) -> bool:
    return _contains_any(title, TECHNICAL_KEYWORDS)


def is_valid_author_name(author: str) -> bool:
    return _AUTHOR_RE.fullmatch(author) is not None


def normalize_isbn(isbn: str) -> str:
    return isbn.replace("-", "").replace(" ", "")


def is_valid_isbn(isbn: str) -> bool:
    """ISBN-10 or ISBN-13 digits, ignoring hyphens and spaces."""
    clean = normalize_isbn(isbn)
    return len(clean) in ISBN_VALID_LENGTHS and clean.isascii() and clean.isdigit()


def price_decimal_places(price: Decimal) -> int:
    """Significant fraction digits: ``Decimal("45.990")`` has 2."""
    exponent = price.normalize().as_tuple().exponent
    return max(0, -exponent)


def is_valid_image_url(url: str) -> bool:
    """Absolute http(s) URL whose path ends with a known image extension."""
    try:
        _url_validator(url)
    except ValidationError:
        return False
    path = urlsplit(url).path.lower()
    return path.endswith(VALID_IMAGE_EXTENSIONS)


def years_before(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        # 29 February in a non-leap target year
        return day.replace(year=day.year - years, day=28)


def _is_blank(value: str) -> bool:
    return not value or not value.strip()


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------


class CreateOrderValidator:
    """Validates ``CreateOrderDTO`` instances before an order is created.

    Receives the order repository via constructor injection (DIP) for the
    uniqueness checks and the daily volume cap.

    A blank title or author reports only its "required" message: the
    length and character-class rules for that field are not evaluated,
    and neither is the title/author uniqueness lookup.
    """

    def __init__(
        self,
        repository: IOrderRepository,
        *,
        daily_limit: Optional[int] = None,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._repository = repository
        self._daily_limit = (
            daily_limit
            if daily_limit is not None
            else getattr(settings, "ORDERS_DAILY_LIMIT", DEFAULT_DAILY_ORDER_LIMIT)
        )
        self._clock = clock
        self._rules: List[Rule] = [
            self._check_title,
            self._check_title_author_unique,
            self._check_author,
            self._check_isbn,
            self._check_isbn_unique,
            self._check_category,
            self._check_price,
            self._check_published_date,
            self._check_stock,
            self._check_cover_image_url,
            self._check_business_rules,
            self._check_technical,
            self._check_children,
            self._check_fiction,
            self._check_expensive_stock,
        ]

    async def validate(self, dto: CreateOrderDTO) -> ValidationResult:
        today = self._clock().date()
        errors: Errors = []
        for rule in self._rules:
            outcome = rule(dto, today)
            if inspect.isawaitable(outcome):
                outcome = await outcome
            errors.extend(outcome)
        return ValidationResult(tuple(errors))

    # ------------------------------------------------------------------
    # Field rules
    # ------------------------------------------------------------------

    def _check_title(self, dto: CreateOrderDTO, today: date) -> Errors:
        if _is_blank(dto.title):
            return [ValidationErrorDetail("title", "Title is required")]
        errors: Errors = []
        if len(dto.title) > TITLE_MAX_LENGTH:
            errors.append(
                ValidationErrorDetail(
                    "title", "Title must be between 1 and 200 characters"
                )
            )
        if not is_appropriate_title(dto.title):
            errors.append(
                ValidationErrorDetail("title", "Title contains inappropriate content")
            )
        return errors

    async def _check_title_author_unique(
        self, dto: CreateOrderDTO, today: date
    ) -> Errors:
        if _is_blank(dto.title) or _is_blank(dto.author):
            return []
        logger.info(
            "order.title_uniqueness_checked", title=dto.title, author=dto.author
        )
        if await self._repository.exists_by_title_author(dto.title, dto.author):
            return [ValidationErrorDetail("title", DUPLICATE_TITLE_AUTHOR_MESSAGE)]
        return []

    def _check_author(self, dto: CreateOrderDTO, today: date) -> Errors:
        if _is_blank(dto.author):
            return [ValidationErrorDetail("author", "Author is required")]
        errors: Errors = []
        if not AUTHOR_MIN_LENGTH <= len(dto.author) <= AUTHOR_MAX_LENGTH:
            errors.append(
                ValidationErrorDetail(
                    "author", "Author name must be between 2 and 100 characters"
                )
            )
        if not is_valid_author_name(dto.author):
            errors.append(
                ValidationErrorDetail(
                    "author", "Author name contains invalid characters"
                )
            )
        return errors

    def _check_isbn(self, dto: CreateOrderDTO, today: date) -> Errors:
        if _is_blank(dto.isbn):
            return [ValidationErrorDetail("isbn", "ISBN is required")]
        if len(dto.isbn) > ISBN_MAX_LENGTH:
            return [
                ValidationErrorDetail("isbn", "ISBN cannot exceed 20 characters")
            ]
        if not is_valid_isbn(dto.isbn):
            return [ValidationErrorDetail("isbn", "Invalid ISBN format")]
        return []

    async def _check_isbn_unique(self, dto: CreateOrderDTO, today: date) -> Errors:
        if _is_blank(dto.isbn):
            return []
        logger.info("order.isbn_uniqueness_checked", isbn=dto.isbn)
        if await self._repository.find_by_isbn(dto.isbn) is not None:
            return [ValidationErrorDetail("isbn", DUPLICATE_ISBN_MESSAGE)]
        return []

    def _check_category(self, dto: CreateOrderDTO, today: date) -> Errors:
        if dto.category not in OrderCategory.values:
            return [ValidationErrorDetail("category", "Invalid category")]
        return []

    def _check_price(self, dto: CreateOrderDTO, today: date) -> Errors:
        if dto.price <= 0:
            return [ValidationErrorDetail("price", "Price must be greater than 0")]
        if price_decimal_places(dto.price) > PRICE_DECIMAL_PLACES:
            return [
                ValidationErrorDetail(
                    "price", "Price must have at most 2 decimal places"
                )
            ]
        if dto.price >= PRICE_MAX_EXCLUSIVE:
            return [ValidationErrorDetail("price", "Price must be less than $10,000")]
        return []

    def _check_published_date(self, dto: CreateOrderDTO, today: date) -> Errors:
        if dto.published_date > today:
            return [
                ValidationErrorDetail(
                    "published_date", "Published date cannot be in the future"
                )
            ]
        if dto.published_date < EARLIEST_PUBLISHED_DATE:
            return [
                ValidationErrorDetail(
                    "published_date", "Published date cannot be before year 1400"
                )
            ]
        return []

    def _check_stock(self, dto: CreateOrderDTO, today: date) -> Errors:
        if dto.stock_quantity < 0:
            return [
                ValidationErrorDetail(
                    "stock_quantity", "Stock quantity cannot be negative"
                )
            ]
        if dto.stock_quantity > STOCK_MAX:
            return [
                ValidationErrorDetail(
                    "stock_quantity", "Stock quantity cannot exceed 100,000"
                )
            ]
        return []

    def _check_cover_image_url(self, dto: CreateOrderDTO, today: date) -> Errors:
        if not dto.cover_image_url:
            return []
        if len(dto.cover_image_url) > COVER_IMAGE_URL_MAX_LENGTH:
            return [
                ValidationErrorDetail(
                    "cover_image_url",
                    "Cover image URL cannot exceed 500 characters",
                )
            ]
        if not is_valid_image_url(dto.cover_image_url):
            return [
                ValidationErrorDetail(
                    "cover_image_url", "Cover image URL must be a valid image URL"
                )
            ]
        return []

    # ------------------------------------------------------------------
    # Aggregate business rules (short-circuit, single failure)
    # ------------------------------------------------------------------

    async def _check_business_rules(self, dto: CreateOrderDTO, today: date) -> Errors:
        if not await self._passes_business_rules(dto, today):
            return [ValidationErrorDetail(NON_FIELD_ERRORS, BUSINESS_RULES_MESSAGE)]
        return []

    async def _passes_business_rules(self, dto: CreateOrderDTO, today: date) -> bool:
        daily_count = await self._repository.count_created_on(today)
        if daily_count >= self._daily_limit:
            logger.warning("order.daily_limit_reached", count=daily_count)
            return False

        if dto.category == OrderCategory.TECHNICAL and dto.price < TECHNICAL_MIN_PRICE:
            logger.warning("order.technical_below_minimum_price", price=str(dto.price))
            return False

        if dto.category == OrderCategory.CHILDREN and not is_appropriate_for_children(
            dto.title
        ):
            logger.warning("order.children_inappropriate_title", title=dto.title)
            return False

        if (
            dto.price > HIGH_VALUE_PRICE_THRESHOLD
            and dto.stock_quantity > HIGH_VALUE_MAX_STOCK
        ):
            logger.warning(
                "order.high_value_stock_exceeded",
                price=str(dto.price),
                stock=dto.stock_quantity,
            )
            return False

        return True

    # ------------------------------------------------------------------
    # Category-conditional rules
    # ------------------------------------------------------------------

    def _check_technical(self, dto: CreateOrderDTO, today: date) -> Errors:
        if dto.category != OrderCategory.TECHNICAL:
            return []
        errors: Errors = []
        if dto.price < TECHNICAL_MIN_PRICE:
            errors.append(
                ValidationErrorDetail(
                    "price", "Technical orders must have a minimum price of $20.00"
                )
            )
        if not has_technical_keyword(dto.title):
            errors.append(
                ValidationErrorDetail(
                    "title",
                    "Technical orders must contain technical keywords in the title",
                )
            )
        if dto.published_date < years_before(today, TECHNICAL_MAX_AGE_YEARS):
            errors.append(
                ValidationErrorDetail(
                    "published_date",
                    "Technical orders must be published within the last 5 years",
                )
            )
        return errors

    def _check_children(self, dto: CreateOrderDTO, today: date) -> Errors:
        if dto.category != OrderCategory.CHILDREN:
            return []
        errors: Errors = []
        if dto.price > CHILDREN_MAX_PRICE:
            errors.append(
                ValidationErrorDetail(
                    "price", "Children's orders must have a maximum price of $50.00"
                )
            )
        if not is_appropriate_for_children(dto.title):
            errors.append(
                ValidationErrorDetail("title", "Title is not appropriate for children")
            )
        return errors

    def _check_fiction(self, dto: CreateOrderDTO, today: date) -> Errors:
        if dto.category != OrderCategory.FICTION:
            return []
        if len(dto.author) < FICTION_AUTHOR_MIN_LENGTH:
            return [
                ValidationErrorDetail(
                    "author",
                    "Fiction orders require a full author name (minimum 5 characters)",
                )
            ]
        return []

    # ------------------------------------------------------------------
    # Cross-field rules
    # ------------------------------------------------------------------

    def _check_expensive_stock(self, dto: CreateOrderDTO, today: date) -> Errors:
        if (
            dto.price > EXPENSIVE_PRICE_THRESHOLD
            and dto.stock_quantity > EXPENSIVE_MAX_STOCK
        ):
            return [
                ValidationErrorDetail(
                    NON_FIELD_ERRORS,
                    "Expensive orders (>$100) must have limited stock (≤20 units)",
                )
            ]
        return []
