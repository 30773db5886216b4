"""Order service layer (Use Cases).

Orchestrates order creation: validation, request-to-entity mapping,
persistence, cache invalidation and profile derivation, with timing
metrics captured on every path.

Behaviour enforced:
- Validation failures raise ``OrderValidationError`` without retry.
- A uniqueness race lost at insert time raises ``OrderConflict``.
- Cache invalidation failures are logged and do not fail the creation.
- Every other exception is recorded as a failure metric and re-raised
  unchanged; so is task cancellation.
"""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

import structlog
from django.conf import settings

from modules.orders.constants import ALL_ORDERS_CACHE_KEY
from modules.orders.dtos import OrderProfileDTO
from modules.orders.exceptions import OrderValidationError
from modules.orders.mappers import order_to_profile, request_to_order
from modules.orders.metrics import (
    MetricsSink,
    OrderCreationMetrics,
    Stopwatch,
    log_order_creation_metrics,
)
from modules.orders.validators import CreateOrderValidator

if TYPE_CHECKING:
    from modules.core.cache import ICacheService
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

DEFAULT_CACHE_TTL = 300


@dataclass(frozen=True)
class OperationContext:
    """Per-call context threaded explicitly into the service.

    ``correlation_id`` links the service logs to the inbound request
    (see ``CorrelationIdMiddleware``).
    """

    correlation_id: str = ""


@dataclass
class _CreationAttempt:
    dto: CreateOrderDTO
    operation_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    total: Stopwatch = field(default_factory=lambda: Stopwatch().start())
    validation: Stopwatch = field(default_factory=Stopwatch)
    database: Stopwatch = field(default_factory=Stopwatch)
    recorded: bool = False

    def metrics(
        self, success: bool, error_reason: Optional[str] = None
    ) -> OrderCreationMetrics:
        self.recorded = True
        return OrderCreationMetrics(
            operation_id=self.operation_id,
            order_title=self.dto.title,
            isbn=self.dto.isbn,
            category=self.dto.category,
            validation_duration_ms=self.validation.elapsed_ms,
            database_save_duration_ms=self.database.elapsed_ms,
            total_duration_ms=self.total.elapsed_ms,
            success=success,
            error_reason=error_reason,
        )


class OrderService:
    """Application service for Order use-cases.

    Receives its collaborators via constructor injection (DIP).  The
    validator defaults to a ``CreateOrderValidator`` over the same
    repository.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        cache: ICacheService,
        validator: Optional[CreateOrderValidator] = None,
        metrics_sink: MetricsSink = log_order_creation_metrics,
    ) -> None:
        self._order_repo = order_repository
        self._cache = cache
        self._validator = validator or CreateOrderValidator(order_repository)
        self._emit_metrics = metrics_sink
        self._cache_ttl = getattr(settings, "ORDERS_CACHE_TTL", DEFAULT_CACHE_TTL)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def create_order(
        self,
        dto: CreateOrderDTO,
        context: Optional[OperationContext] = None,
    ) -> OrderProfileDTO:
        """Validate, persist and profile a new order.

        Steps:
        1. Validate the request (collects every failure).
        2. Map request -> Order (fresh id, creation timestamp, pricing).
        3. Persist with a single insert.
        4. Invalidate the ``all_orders`` cache entry.
        5. Derive the display profile.

        Raises:
            OrderValidationError: the request broke validation rules.
            OrderConflict: a concurrent creation won the uniqueness race.
        """
        context = context or OperationContext()
        attempt = _CreationAttempt(dto)
        log = logger.bind(
            operation_id=attempt.operation_id,
            correlation_id=context.correlation_id,
            title=dto.title,
            isbn=dto.isbn,
            category=dto.category,
        )
        log.info("order.creation_started", author=dto.author)

        try:
            # 1. Validation
            attempt.validation.start()
            result = await self._validator.validate(dto)
            attempt.validation.stop()

            if not result.is_valid:
                errors = "; ".join(result.messages)
                log.warning("order.validation_failed", errors=errors)
                self._emit_metrics(
                    attempt.metrics(False, f"Validation failed: {errors}")
                )
                raise OrderValidationError(result.errors)

            log.info("order.validation_completed", stock=dto.stock_quantity)

            # 2-3. Mapping + persistence
            attempt.database.start()
            log.info("order.database_save_started")
            order = request_to_order(dto)
            await self._order_repo.add(order)
            attempt.database.stop()
            log.info("order.database_save_completed", order_id=str(order.id))

            # 4. Cache
            await self._invalidate_orders_cache(log)

            # 5. Profile
            profile = order_to_profile(order)
            attempt.total.stop()
            self._emit_metrics(attempt.metrics(True))
            log.info("order.created", order_id=str(order.id))
            return profile

        except asyncio.CancelledError:
            if not attempt.recorded:
                self._emit_metrics(attempt.metrics(False, "cancelled"))
            log.warning("order.creation_cancelled")
            raise
        except OrderValidationError as exc:
            if not attempt.recorded:
                self._emit_metrics(attempt.metrics(False, str(exc)))
                log.warning("order.creation_conflict", errors=str(exc))
            raise
        except Exception as exc:
            if not attempt.recorded:
                self._emit_metrics(attempt.metrics(False, str(exc)))
            log.exception("order.creation_failed")
            raise

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def list_orders(self) -> List[OrderProfileDTO]:
        """Return every order's profile, read through the ``all_orders`` cache."""
        cached = await self._cache.get(ALL_ORDERS_CACHE_KEY)
        if cached is not None:
            logger.info("order.list_cache_hit", count=len(cached))
            return [OrderProfileDTO.model_validate(item) for item in cached]

        orders = await self._order_repo.list_all()
        profiles = [order_to_profile(order) for order in orders]
        await self._cache.set(
            ALL_ORDERS_CACHE_KEY,
            [profile.model_dump(mode="json") for profile in profiles],
            ttl=self._cache_ttl,
        )
        logger.info("order.list_cache_filled", count=len(profiles))
        return profiles

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _invalidate_orders_cache(
        self, log: structlog.stdlib.BoundLogger
    ) -> None:
        log.info("order.cache_invalidation", key=ALL_ORDERS_CACHE_KEY)
        try:
            await self._cache.remove(ALL_ORDERS_CACHE_KEY)
        except Exception:
            log.exception("order.cache_invalidation_failed", key=ALL_ORDERS_CACHE_KEY)
