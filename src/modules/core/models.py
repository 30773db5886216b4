"""Base abstract model shared by the domain modules.

Provides ``BaseModel``: UUIDv7 primary key + ``created_at`` /
``updated_at`` timestamp bookkeeping.

Design decisions:
- ``created_at`` uses ``default=timezone.now`` instead of
  ``auto_now_add`` so mappers can stamp the creation time on an unsaved
  instance and the persisted value matches what was returned.
- ``updated_at`` stays ``NULL`` until the first update.  It is only
  touched by ``save()`` calls on rows that already exist.
"""

from __future__ import annotations

import uuid6
from django.db import models
from django.utils import timezone


class BaseModel(models.Model):
    """Abstract base with UUIDv7 PK and timestamp bookkeeping."""

    id = models.UUIDField(
        primary_key=True,
        default=uuid6.uuid7,
        editable=False,
    )
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(null=True, blank=True, default=None)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs) -> None:
        """Refresh ``updated_at`` on updates, never on the first insert."""
        if not kwargs.get("force_insert") and not self._state.adding:
            self.updated_at = timezone.now()
            update_fields = kwargs.get("update_fields")
            if update_fields is not None and "updated_at" not in update_fields:
                kwargs["update_fields"] = list(update_fields) + ["updated_at"]
        super().save(*args, **kwargs)
