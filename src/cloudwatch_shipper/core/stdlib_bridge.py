"""
Bridge stdlib ``logging`` into a shipper.

Applications that log through the standard library can forward records to a
shipper without a host framework. Each stdlib logger name becomes the module
name in the record bindings, so per-module thresholds and exclusions apply.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from typing import Any, Mapping

from ..plugins.sinks import BaseLogShipper, LogHandler
from .records import Bindings, coerce_bindings

# Records from these loggers are produced by shipping itself
_IGNORED_LOGGERS = ("cloudwatch_shipper", "boto3", "botocore", "s3transfer", "urllib3")
_FORMATTER = logging.Formatter()


def _is_ignored(name: str) -> bool:
    root = name.split(".", 1)[0]
    return root in _IGNORED_LOGGERS


def stdlib_level_name(levelno: int) -> str:
    """Map a stdlib numeric level onto the shipper severity scale."""
    if levelno >= logging.CRITICAL:
        return "fatal"
    if levelno >= logging.ERROR:
        return "error"
    if levelno >= logging.WARNING:
        return "warn"
    if levelno >= logging.INFO:
        return "info"
    if levelno >= logging.DEBUG:
        return "debug"
    return "trace"


class ShipperHandler(logging.Handler):
    """``logging.Handler`` that feeds records to a shipper."""

    def __init__(
        self,
        shipper: BaseLogShipper,
        *,
        bindings: Bindings | Mapping[str, Any] | None = None,
        level: int = logging.NOTSET,
    ) -> None:
        super().__init__(level)
        self._shipper = shipper
        self._base = coerce_bindings(bindings) or Bindings()
        self._handlers: dict[str, LogHandler] = {}
        self._handlers_lock = threading.Lock()

    def _handler_for(self, name: str) -> LogHandler | None:
        with self._handlers_lock:
            handler = self._handlers.get(name)
        if handler is not None:
            return handler
        handler = self._shipper.create_handler(
            dataclasses.replace(self._base, module=name)
        )
        # Disabled modules are not cached; the host may enable them after init
        if handler is not None:
            with self._handlers_lock:
                self._handlers[name] = handler
        return handler

    def emit(self, record: logging.LogRecord) -> None:
        if _is_ignored(record.name):
            return
        try:
            handler = self._handler_for(record.name)
            if handler is None:
                return
            args: list[Any] = [record.getMessage()]
            if record.exc_info:
                args.append(_FORMATTER.formatException(record.exc_info))
            handler(stdlib_level_name(record.levelno), args)
        except Exception:
            self.handleError(record)


def enable_stdlib_bridge(
    shipper: BaseLogShipper,
    *,
    bindings: Bindings | Mapping[str, Any] | None = None,
    level: int = logging.INFO,
    logger: logging.Logger | None = None,
    remove_existing_handlers: bool = False,
) -> ShipperHandler:
    """Attach a ``ShipperHandler`` to ``logger`` (root by default)."""
    target = logger or logging.getLogger()
    if remove_existing_handlers:
        for existing in list(target.handlers):
            target.removeHandler(existing)
    handler = ShipperHandler(shipper, bindings=bindings, level=level)
    target.addHandler(handler)
    if target.level == logging.NOTSET or target.level > level:
        target.setLevel(level)
    return handler
