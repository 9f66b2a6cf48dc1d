"""
Internal diagnostics for contained, non-fatal errors.

Shipping failures never propagate into application code. They are reported
here instead, through the stdlib logger ``cloudwatch_shipper.diagnostics``,
as a short message followed by ``key=value`` fields. Structured fields are
also attached to the ``LogRecord`` under ``diagnostics`` for handlers that
want them.

The stdlib bridge ignores records from this logger, so diagnostics cannot
feed back into a shipper.
"""

from __future__ import annotations

import logging
from typing import Any

LOGGER_NAME = "cloudwatch_shipper.diagnostics"

_logger = logging.getLogger(LOGGER_NAME)
_enabled: bool | None = None


def _is_enabled() -> bool:
    global _enabled
    if _enabled is None:
        try:
            from .settings import Settings

            _enabled = bool(Settings().core.internal_logging_enabled)
        except Exception:  # pragma: no cover - invalid env falls back to on
            _enabled = True
    return _enabled


def configure(*, enabled: bool | None) -> None:
    """Force diagnostics on or off; ``None`` re-reads settings on next use."""
    global _enabled
    _enabled = enabled


def _format(component: str, message: str, fields: dict[str, Any]) -> str:
    parts = [f"[{component}] {message}"]
    parts.extend(f"{key}={value!r}" for key, value in fields.items())
    return " ".join(parts)


def _emit(level: int, component: str, message: str, fields: dict[str, Any]) -> None:
    if not _is_enabled():
        return
    try:
        _logger.log(
            level,
            _format(component, message, fields),
            extra={"diagnostics": {"component": component, **fields}},
        )
    except Exception:
        # Diagnostics must never break the caller
        pass


def warn(component: str, message: str, **fields: Any) -> None:
    """Report a contained failure (lost batch, failed stream creation)."""
    _emit(logging.WARNING, component, message, fields)


def info(component: str, message: str, **fields: Any) -> None:
    """Report a notable but successful outcome (partially rejected batch)."""
    _emit(logging.INFO, component, message, fields)
