"""Order creation metrics.

``OrderCreationMetrics`` is the record emitted once per creation
attempt, on success and on every failure path.  The default sink writes
it as a structured ``order.metrics`` log event; callers may inject any
other ``MetricsSink``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Optional

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OrderCreationMetrics:
    operation_id: str
    order_title: str
    isbn: str
    category: str
    validation_duration_ms: float
    database_save_duration_ms: float
    total_duration_ms: float
    success: bool
    error_reason: Optional[str] = None


MetricsSink = Callable[[OrderCreationMetrics], None]


def log_order_creation_metrics(metrics: OrderCreationMetrics) -> None:
    logger.info(
        "order.metrics",
        operation_id=metrics.operation_id,
        title=metrics.order_title,
        isbn=metrics.isbn,
        category=metrics.category,
        validation_ms=metrics.validation_duration_ms,
        database_save_ms=metrics.database_save_duration_ms,
        total_ms=metrics.total_duration_ms,
        status="Success" if metrics.success else "Failed",
        error_reason=metrics.error_reason or "None",
    )


@dataclass
class Stopwatch:
    """Accumulating monotonic timer, reported in milliseconds."""

    _started: Optional[float] = field(default=None, repr=False)
    _elapsed: float = 0.0

    def start(self) -> Stopwatch:
        self._started = time.monotonic()
        return self

    def stop(self) -> None:
        if self._started is not None:
            self._elapsed += time.monotonic() - self._started
            self._started = None

    @property
    def elapsed_ms(self) -> float:
        running = 0.0
        if self._started is not None:
            running = time.monotonic() - self._started
        return round((self._elapsed + running) * 1000, 2)
