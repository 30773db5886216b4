from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

import pytest
from django.core.cache import caches
from rest_framework.test import APIClient

from modules.core.cache import ICacheService
from modules.orders.dtos import CreateOrderDTO
from modules.orders.models import Order
from modules.orders.repositories.interfaces import IOrderRepository


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_caches():
    """LocMemCache outlives a test; start every test with it empty."""
    for cache in caches.all():
        cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# In-memory collaborators
# ---------------------------------------------------------------------------


class FakeOrderRepository(IOrderRepository):
    """In-memory repository recording every call it receives."""

    def __init__(self, orders: Optional[List[Order]] = None, daily_count: int = 0):
        self.orders: List[Order] = list(orders or [])
        self.daily_count = daily_count
        self.calls: List[Tuple[str, Any]] = []
        self.add_error: Optional[BaseException] = None

    async def find_by_isbn(self, isbn: str) -> Optional[Order]:
        self.calls.append(("find_by_isbn", isbn))
        return next((o for o in self.orders if o.isbn == isbn), None)

    async def exists_by_title_author(self, title: str, author: str) -> bool:
        self.calls.append(("exists_by_title_author", (title, author)))
        return any(
            o.title.lower() == title.lower() and o.author.lower() == author.lower()
            for o in self.orders
        )

    async def count_created_on(self, day: date) -> int:
        self.calls.append(("count_created_on", day))
        return self.daily_count

    async def list_all(self) -> List[Order]:
        self.calls.append(("list_all", None))
        return list(self.orders)

    async def add(self, entity: Order) -> None:
        self.calls.append(("add", entity.isbn))
        if self.add_error is not None:
            raise self.add_error
        self.orders.append(entity)

    def called(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)


class FakeCache(ICacheService):
    def __init__(self) -> None:
        self.data: Dict[str, Any] = {}
        self.ttls: Dict[str, Optional[float]] = {}
        self.remove_error: Optional[Exception] = None
        self.removed: List[str] = []

    async def get(self, key: str) -> Optional[Any]:
        return self.data.get(key)

    async def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        self.data[key] = value
        self.ttls[key] = ttl

    async def remove(self, key: str) -> None:
        if self.remove_error is not None:
            raise self.remove_error
        self.removed.append(key)
        self.data.pop(key, None)


@pytest.fixture()
def order_repository():
    return FakeOrderRepository()


@pytest.fixture()
def fake_cache():
    return FakeCache()


@pytest.fixture()
def make_dto():
    """Factory for a valid Non-Fiction request, overridable per field."""

    def _make(**overrides) -> CreateOrderDTO:
        data = {
            "title": "A Brief History of Time",
            "author": "Stephen Hawking",
            "isbn": "9780553380163",
            "category": "NonFiction",
            "price": Decimal("18.99"),
            "published_date": date(1988, 4, 1),
            "cover_image_url": "https://example.com/covers/brief-history.jpg",
            "stock_quantity": 5,
        }
        data.update(overrides)
        return CreateOrderDTO(**data)

    return _make
