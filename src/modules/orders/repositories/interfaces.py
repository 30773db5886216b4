"""Order repository interface.

Extends ``IRepository[Order]`` with the look-ups the creation
validator needs: ISBN and title/author uniqueness, and the daily
creation count.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import date
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order entity.

    ``add`` must rely on storage-level unique constraints for ISBN and
    case-insensitive ``(title, author)``.  A violation is raised as
    ``OrderConflict``.
    """

    @abstractmethod
    async def find_by_isbn(self, isbn: str) -> Optional[Order]:
        """Return the order with exactly this ISBN, if any."""

    @abstractmethod
    async def exists_by_title_author(self, title: str, author: str) -> bool:
        """Check for an order with this title and author, ignoring case."""

    @abstractmethod
    async def count_created_on(self, day: date) -> int:
        """Count orders whose ``created_at`` falls on ``day`` (UTC)."""
