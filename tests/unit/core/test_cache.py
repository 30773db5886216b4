from __future__ import annotations

import pytest
from asgiref.sync import async_to_sync

from modules.core.cache import DjangoCacheService

pytestmark = pytest.mark.unit


@pytest.fixture()
def cache_service():
    return DjangoCacheService()


class TestDjangoCacheService:
    def test_get_missing_key_returns_none(self, cache_service):
        assert async_to_sync(cache_service.get)("missing") is None

    def test_set_then_get(self, cache_service):
        async_to_sync(cache_service.set)("k", [{"a": 1}], ttl=60)
        assert async_to_sync(cache_service.get)("k") == [{"a": 1}]

    def test_remove(self, cache_service):
        async_to_sync(cache_service.set)("k", "v")
        async_to_sync(cache_service.remove)("k")
        assert async_to_sync(cache_service.get)("k") is None

    def test_remove_missing_key_is_not_an_error(self, cache_service):
        async_to_sync(cache_service.remove)("never-set")

    def test_alias_defaults_to_setting(self, settings):
        settings.ORDERS_CACHE_ALIAS = "default"
        assert DjangoCacheService()._alias == "default"
