"""Cache port and its Django cache framework adapter.

``ICacheService`` is the async get/set/remove contract the service
layer depends on.  ``DjangoCacheService`` delegates to a configured
Django cache alias (Redis via ``django-redis`` in production,
``LocMemCache`` in tests) through its native async API.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from django.conf import settings
from django.core.cache import caches


class ICacheService(ABC):
    """Async key-value cache with optional expiry (seconds)."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or ``None`` on a miss."""

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store ``value``; ``ttl=None`` keeps it until removed."""

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Drop ``key``.  Removing a missing key is not an error."""


class DjangoCacheService(ICacheService):
    """``ICacheService`` backed by ``django.core.cache.caches[alias]``."""

    def __init__(self, alias: Optional[str] = None) -> None:
        self._alias = alias or getattr(settings, "ORDERS_CACHE_ALIAS", "default")

    @property
    def _cache(self):
        return caches[self._alias]

    async def get(self, key: str) -> Optional[Any]:
        return await self._cache.aget(key)

    async def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        await self._cache.aset(key, value, timeout=ttl)

    async def remove(self, key: str) -> None:
        await self._cache.adelete(key)
