"""Order domain constants.

Defines category choices, the word lists used by title content checks,
and the fixed thresholds of the order creation business rules.
"""

from datetime import date
from decimal import Decimal

from django.db import models


class OrderCategory(models.TextChoices):
    FICTION = "Fiction", "Fiction & Literature"
    NON_FICTION = "NonFiction", "Non-Fiction"
    TECHNICAL = "Technical", "Technical & Professional"
    CHILDREN = "Children", "Children's Orders"


UNCATEGORIZED_LABEL = "Uncategorized"

ALL_ORDERS_CACHE_KEY = "all_orders"

# Title content filters (case-insensitive substring match)
INAPPROPRIATE_WORDS: tuple[str, ...] = ("violence", "adult", "mature", "explicit")

CHILDREN_RESTRICTED_WORDS: tuple[str, ...] = (
    *INAPPROPRIATE_WORDS,
    "horror",
    "scary",
)

TECHNICAL_KEYWORDS: tuple[str, ...] = (
    "programming",
    "software",
    "computer",
    "technology",
    "technical",
    "engineering",
    "development",
    "code",
    "algorithm",
    "database",
)

VALID_IMAGE_EXTENSIONS: tuple[str, ...] = (".jpg", ".jpeg", ".png", ".gif", ".webp")

AUTHOR_NAME_PATTERN = r"^[A-Za-z\s\-.']+$"

# Field limits
TITLE_MAX_LENGTH = 200
AUTHOR_MIN_LENGTH = 2
AUTHOR_MAX_LENGTH = 100
FICTION_AUTHOR_MIN_LENGTH = 5
ISBN_MAX_LENGTH = 20
ISBN_VALID_LENGTHS = (10, 13)
COVER_IMAGE_URL_MAX_LENGTH = 500
PRICE_DECIMAL_PLACES = 2
PRICE_MAX_EXCLUSIVE = Decimal("10000")
STOCK_MAX = 100_000
EARLIEST_PUBLISHED_DATE = date(1400, 1, 1)
DEFAULT_STOCK_QUANTITY = 1

# Category rules
TECHNICAL_MIN_PRICE = Decimal("20.00")
TECHNICAL_MAX_AGE_YEARS = 5
CHILDREN_MAX_PRICE = Decimal("50.00")
CHILDREN_DISCOUNT_FACTOR = Decimal("0.9")

# Stock caps for expensive orders
EXPENSIVE_PRICE_THRESHOLD = Decimal("100")
EXPENSIVE_MAX_STOCK = 20
HIGH_VALUE_PRICE_THRESHOLD = Decimal("500")
HIGH_VALUE_MAX_STOCK = 10

DEFAULT_DAILY_ORDER_LIMIT = 500
