"""Order domain exceptions.

Raised by the Service Layer when an order cannot be created.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.

Store or cache outages are not wrapped: the underlying exception reaches
the caller unchanged and nothing is retried.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from modules.orders.validators import ValidationErrorDetail


class OrderValidationError(Exception):
    """The creation request broke one or more validation rules.

    Always recoverable by correcting the input; never retried internally.
    """

    def __init__(self, errors: Sequence[ValidationErrorDetail]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(error.message for error in self.errors))


class OrderConflict(OrderValidationError):
    """The store rejected the insert on a uniqueness constraint.

    Happens when a concurrent creation wins the race after this request's
    pre-checks passed.  The order already exists, so resubmitting the same
    payload cannot succeed.
    """
