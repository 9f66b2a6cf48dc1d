"""
CloudWatch Logs shipper.

Batches records accepted by per-module handlers in memory and ships them to
AWS CloudWatch Logs as JSON lines, one log stream per flush. Delivery is
best effort: failures are reported through diagnostics and the batch is
dropped. Pair it with a local sink when every line matters.
"""

from __future__ import annotations

import asyncio
import os
import socket
import threading
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...core import diagnostics
from ...core.errors import LogGroupError, ShipperStateError
from ...core.host import LevelMapHost, LoggerHost
from ...core.levels import BROKER_MODULE, DEFAULT_LEVELS, ERROR_RANK, get_level_rank
from ...core.records import Bindings, QueuedRecord, coerce_bindings, now_ms
from ...core.rendering import ObjectPrinter, default_object_printer, render_message
from ...core.settings import Settings
from ...core.shutdown import register_shipper, unregister_shipper
from ...metrics.metrics import MetricsCollector
from ..utils import parse_plugin_config
from . import LogHandler
from .aws_client import ALREADY_EXISTS, CloudWatchLogsClient, error_code

__all__ = [
    "CloudWatchShipper",
    "CloudWatchShipperConfig",
    "ShipperState",
    "stream_name_for",
]

STREAM_NAME_FORMAT = "%Y-%m-%d_%H-%M-%S"

_COMPONENT = "cloudwatch-shipper"


def _node_name() -> str | None:
    return os.getenv("MOL_NODE_NAME") or None


def _default_log_group_name() -> str:
    return f"mol-{_node_name() or socket.gethostname()}"


def stream_name_for(moment: datetime) -> str:
    """Log stream name for a flush started at ``moment``."""
    return moment.strftime(STREAM_NAME_FORMAT)


class CloudWatchShipperConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True, arbitrary_types_allowed=True)  # fmt: skip

    client_options: dict[str, Any] = Field(
        default_factory=dict,
        description="Keyword arguments for boto3.client('logs', ...)",
    )
    source: str = Field(default_factory=lambda: _node_name() or "moleculer")
    hostname: str = Field(default_factory=socket.gethostname)
    object_printer: Callable[[Any], str] | None = None
    interval: float = Field(
        default=5000,
        description="Flush interval in milliseconds; <= 0 flushes every record",
    )
    exclude_modules: frozenset[str] = Field(default_factory=frozenset)
    log_group_name: str = Field(default_factory=_default_log_group_name)
    environment: str | None = Field(default_factory=lambda: os.getenv("NODE_ENV"))

    @field_validator("exclude_modules", mode="before")
    @classmethod
    def _coerce_modules(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            return frozenset({value})
        return frozenset(value)

    @field_validator("log_group_name")
    @classmethod
    def _ensure_group_non_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("log_group_name must not be empty")
        return value


class ShipperState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"


def _count_rejected(response: Mapping[str, Any] | None, total: int) -> int:
    info = (response or {}).get("rejectedLogEventsInfo") or {}
    if not info:
        return 0
    head = max(
        int(info.get("tooOldLogEventEndIndex", 0) or 0),
        int(info.get("expiredLogEventEndIndex", 0) or 0),
    )
    too_new = info.get("tooNewLogEventStartIndex")
    tail = total - int(too_new) if too_new is not None else 0
    return min(total, head + max(0, tail))


class CloudWatchShipper:
    """Ship host log records to AWS CloudWatch Logs.

    Lifecycle: ``UNINITIALIZED -> INITIALIZING -> RUNNING -> STOPPING ->
    STOPPED``. ``init`` must run inside the event loop that will own the
    periodic flush; handlers may then be called from any thread.
    """

    name = "cloudwatch"

    def __init__(
        self,
        config: CloudWatchShipperConfig | Mapping[str, Any] | None = None,
        *,
        client_factory: Callable[..., Any] | None = None,
        metrics: MetricsCollector | None = None,
        settings: Settings | None = None,
        **kwargs: Any,
    ) -> None:
        self._config = parse_plugin_config(CloudWatchShipperConfig, config, **kwargs)
        self._settings = settings or Settings()
        self._client_factory = client_factory or CloudWatchLogsClient
        self._metrics = metrics or MetricsCollector(
            enabled=self._settings.core.enable_metrics
        )

        self._queue: list[QueuedRecord] = []
        # Handlers may run on bridge threads; guards append and swap only
        self._queue_lock = threading.Lock()

        self._state = ShipperState.UNINITIALIZED
        self._host: LoggerHost | None = None
        self._levels: tuple[str, ...] = DEFAULT_LEVELS
        self._error_rank = ERROR_RANK
        self._printer: ObjectPrinter = default_object_printer
        self._client: Any = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._timer: asyncio.Task[None] | None = None
        self._pending: set[asyncio.Task[None]] = set()

        self._log_group_attempted = False
        self.log_group_resolved = False
        self._last_put_ok: bool | None = None
        self._last_error: str | None = None

    @property
    def config(self) -> CloudWatchShipperConfig:
        return self._config

    @property
    def state(self) -> ShipperState:
        return self._state

    @property
    def metrics(self) -> MetricsCollector:
        return self._metrics

    @property
    def queue_size(self) -> int:
        return len(self._queue)

    async def init(self, host: LoggerHost | None = None) -> None:
        """Resolve the printer, start the timer, build the client and make
        sure the log group exists.

        Raises:
            LogGroupError: log group creation failed for a reason other than
                the group already existing
            ShipperStateError: ``init`` was already called
        """
        if self._state is not ShipperState.UNINITIALIZED:
            raise ShipperStateError(f"cannot init a shipper in state {self._state.value}")
        self._state = ShipperState.INITIALIZING

        self._host = host if host is not None else LevelMapHost()
        self._levels = tuple(getattr(self._host, "levels", None) or DEFAULT_LEVELS)
        error_rank = get_level_rank("error", self._levels)
        self._error_rank = ERROR_RANK if error_rank is None else error_rank
        self._printer = self._config.object_printer or default_object_printer

        self._loop = asyncio.get_running_loop()
        if self._config.interval > 0:
            self._timer = self._loop.create_task(
                self._flush_loop(), name="cloudwatch-shipper-timer"
            )

        self._client = self._client_factory(**self._config.client_options)
        if self._settings.core.atexit_drain_enabled:
            register_shipper(self)

        await self._ensure_log_group()
        self._state = ShipperState.RUNNING

    async def _ensure_log_group(self) -> None:
        if self._log_group_attempted:
            return
        self._log_group_attempted = True
        group = self._config.log_group_name
        try:
            await self._client.create_log_group(group)
        except Exception as exc:
            code = error_code(exc)
            if code != ALREADY_EXISTS:
                raise LogGroupError(
                    f"Unable to create log group {group!r}: {code}",
                    log_group_name=group,
                    code=code,
                    cause=exc,
                ) from exc
        self.log_group_resolved = True

    def create_handler(
        self, bindings: Bindings | Mapping[str, Any] | None
    ) -> LogHandler | None:
        """Build the record handler for one host module.

        Returns ``None`` when the host configures no threshold for the module;
        the caller must not log through it in that case.
        """
        resolved = coerce_bindings(bindings)
        if resolved is None or self._host is None:
            return None
        threshold = self._host.get_log_level(resolved.module)
        if not threshold:
            return None
        threshold_rank = get_level_rank(threshold, self._levels)
        if threshold_rank is None:
            diagnostics.warn(
                _COMPONENT,
                "unknown level threshold, module disabled",
                module=resolved.module,
                level=threshold,
            )
            return None

        excluded = resolved.module in self._config.exclude_modules
        is_broker = resolved.module == BROKER_MODULE

        def handler(level: str, args: Sequence[Any]) -> None:
            try:
                rank = get_level_rank(level, self._levels)
                if rank is None or rank > threshold_rank:
                    self._metrics.record_filtered()
                    return
                # error and fatal from the broker are never excluded
                if excluded and not (is_broker and rank <= self._error_rank):
                    self._metrics.record_filtered()
                    return
                if self._state is ShipperState.STOPPED:
                    return
                if isinstance(args, (str, bytes)):
                    args = [args]
                record = QueuedRecord(
                    timestamp=now_ms(),
                    level=self._levels[rank],
                    message=render_message(args, self._printer),
                    bindings=resolved,
                )
                with self._queue_lock:
                    # stop() closes intake under the same lock
                    if self._state is ShipperState.STOPPED:
                        return
                    self._queue.append(record)
                self._metrics.record_enqueued()
                if self._config.interval <= 0:
                    self._schedule_flush()
            except Exception as exc:
                diagnostics.warn(
                    _COMPONENT,
                    "record dropped by handler",
                    module=resolved.module,
                    error=type(exc).__name__,
                )

        return handler

    def _schedule_flush(self) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            self._spawn_flush()
        else:
            try:
                loop.call_soon_threadsafe(self._spawn_flush)
            except RuntimeError:
                # Loop closed between the check and the call
                pass

    def _spawn_flush(self) -> None:
        if self._loop is None or self._loop.is_closed():
            return
        task = self._loop.create_task(self.flush())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _flush_loop(self) -> None:
        delay = self._config.interval / 1000.0
        while True:
            await asyncio.sleep(delay)
            self._spawn_flush()

    async def flush(self) -> None:
        """Ship everything queued so far as one new log stream.

        Never raises: stream creation and upload failures are reported via
        diagnostics and the batch is dropped.
        """
        if self._client is None:
            return
        with self._queue_lock:
            if not self._queue:
                return
            rows, self._queue = self._queue, []

        cfg = self._config
        events: list[dict[str, Any]] = []
        for row in rows:
            try:
                events.append(
                    row.to_log_event(
                        source=cfg.source,
                        environment=cfg.environment,
                        hostname=cfg.hostname,
                    )
                )
            except Exception as exc:
                diagnostics.warn(
                    _COMPONENT,
                    "unserializable record skipped",
                    level=row.level,
                    error=str(exc),
                )
        if not events:
            return

        group = cfg.log_group_name
        stream = stream_name_for(datetime.now())

        try:
            await self._client.create_log_stream(group, stream)
        except Exception as exc:
            # Same-second flushes reuse the name; upload still goes ahead
            diagnostics.warn(
                _COMPONENT,
                "log stream creation failed",
                log_group=group,
                log_stream=stream,
                error=error_code(exc),
            )

        try:
            response = await self._client.put_log_events(group, stream, events)
        except Exception as exc:
            self._last_put_ok = False
            self._last_error = str(exc)
            diagnostics.warn(
                _COMPONENT,
                "unable to upload logs, batch dropped",
                log_group=group,
                log_stream=stream,
                batch_size=len(events),
                error=error_code(exc),
                detail=str(exc),
            )
            self._metrics.record_dropped(len(events))
            return

        self._last_put_ok = True
        self._last_error = None
        rejected = _count_rejected(response, len(events))
        if rejected:
            diagnostics.info(
                _COMPONENT,
                "logs uploaded with rejected events",
                log_group=group,
                log_stream=stream,
                rejected=rejected,
                info=response.get("rejectedLogEventsInfo"),
            )
        self._metrics.record_batch(shipped=len(events), rejected=rejected)

    async def stop(self) -> None:
        """Cancel the timer and drain the queue with one final flush."""
        if self._state is ShipperState.STOPPED:
            return
        self._state = ShipperState.STOPPING
        await self._cancel_timer()
        try:
            await self.flush()
            await self._await_pending()
            with self._queue_lock:
                self._state = ShipperState.STOPPED
                late = bool(self._queue)
            if late:
                # Accepted while the final flush was in flight
                await self.flush()
                await self._await_pending()
        finally:
            self._state = ShipperState.STOPPED
            unregister_shipper(self)

    async def _await_pending(self) -> None:
        current = asyncio.get_running_loop()
        pending = [
            t for t in self._pending if not t.done() and t.get_loop() is current
        ]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def _cancel_timer(self) -> None:
        timer, self._timer = self._timer, None
        if timer is None or timer.done():
            return
        timer_loop = timer.get_loop()
        if timer_loop is asyncio.get_running_loop():
            timer.cancel()
            try:
                await timer
            except asyncio.CancelledError:
                pass
        elif not timer_loop.is_closed():
            timer_loop.call_soon_threadsafe(timer.cancel)

    async def health_check(self) -> bool:
        return (
            self._client is not None
            and self.log_group_resolved
            and self._last_put_ok is not False
        )


# Mark Pydantic validators as used for vulture
_VULTURE_USED: tuple[object, ...] = (
    CloudWatchShipperConfig._coerce_modules,
    CloudWatchShipperConfig._ensure_group_non_empty,
)
