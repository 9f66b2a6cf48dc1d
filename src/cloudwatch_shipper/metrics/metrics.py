"""
Shipping metrics for cloudwatch-shipper.

Implements a handful of Prometheus-compatible counters describing what
happened to accepted records.

Design goals:
- Zero global state; each shipper owns its collector and registry
- Safe no-op exporters when metrics are disabled, while still tracking
  in-memory counters for tests and health checks
- Callable from the synchronous ingestion path (no awaits, no I/O)
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from typing import Any

from prometheus_client import CollectorRegistry, Counter


@dataclass
class ShippingMetrics:
    """Captured runtime counters for quick assertions in tests."""

    records_enqueued: int = 0
    records_filtered: int = 0
    batches_flushed: int = 0
    events_shipped: int = 0
    events_dropped: int = 0
    events_rejected: int = 0


class MetricsCollector:
    """Shipper-scoped metrics collector."""

    def __init__(self, *, enabled: bool = False) -> None:
        self._enabled = bool(enabled)
        self._lock = threading.Lock()
        self._state = ShippingMetrics()

        self._c_records: Any | None = None
        self._c_events: Any | None = None
        self._c_batches: Any | None = None
        self._registry: CollectorRegistry | None = None

        if self._enabled:
            # Isolated registry avoids duplicate registration across shippers
            self._registry = CollectorRegistry()
            self._c_records = Counter(
                "cloudwatch_shipper_records_total",
                "Records seen by shipper handlers",
                ["outcome"],
                registry=self._registry,
            )
            self._c_events = Counter(
                "cloudwatch_shipper_events_total",
                "Log events handed to CloudWatch",
                ["outcome"],
                registry=self._registry,
            )
            self._c_batches = Counter(
                "cloudwatch_shipper_batches_total",
                "Flushes that attempted delivery",
                registry=self._registry,
            )

    @property
    def is_enabled(self) -> bool:
        return self._enabled

    @property
    def registry(self) -> CollectorRegistry | None:
        """Expose the isolated Prometheus registry when enabled."""
        return self._registry

    def record_enqueued(self) -> None:
        with self._lock:
            self._state.records_enqueued += 1
        if self._c_records is not None:
            self._c_records.labels(outcome="enqueued").inc()

    def record_filtered(self) -> None:
        with self._lock:
            self._state.records_filtered += 1
        if self._c_records is not None:
            self._c_records.labels(outcome="filtered").inc()

    def record_batch(self, *, shipped: int, rejected: int = 0) -> None:
        with self._lock:
            self._state.batches_flushed += 1
            self._state.events_shipped += shipped
            self._state.events_rejected += rejected
        if self._c_batches is not None:
            self._c_batches.inc()
        if self._c_events is not None:
            self._c_events.labels(outcome="shipped").inc(shipped)
            if rejected:
                self._c_events.labels(outcome="rejected").inc(rejected)

    def record_dropped(self, count: int) -> None:
        with self._lock:
            self._state.batches_flushed += 1
            self._state.events_dropped += count
        if self._c_batches is not None:
            self._c_batches.inc()
        if self._c_events is not None:
            self._c_events.labels(outcome="dropped").inc(count)

    def snapshot(self) -> ShippingMetrics:
        with self._lock:
            return replace(self._state)
