"""Best-effort drain of running shippers at interpreter exit.

Shippers register themselves during ``init`` and unregister in ``stop``. On
normal exit, an atexit hook stops whatever is still registered so queued
records get one last flush. Registration uses a WeakSet so it never keeps a
shipper alive.

The hook never raises and never blocks for longer than
``core.atexit_drain_timeout_seconds`` per shipper.
"""

from __future__ import annotations

import asyncio
import atexit
import weakref
from typing import Any

from . import diagnostics

_shutdown_in_progress: bool = False
_registered_shippers: weakref.WeakSet[Any] = weakref.WeakSet()


def _get_drain_timeout() -> float:
    try:
        from .settings import Settings

        return float(Settings().core.atexit_drain_timeout_seconds)
    except Exception:  # pragma: no cover - invalid env falls back to default
        return 2.0


def register_shipper(shipper: Any) -> None:
    """Register a shipper for automatic drain on exit."""
    _registered_shippers.add(shipper)


def unregister_shipper(shipper: Any) -> None:
    """Unregister a shipper, typically once it has been stopped."""
    _registered_shippers.discard(shipper)


def registered_shippers() -> list[Any]:
    return list(_registered_shippers)


def _drain_single_shipper(shipper: Any, timeout: float) -> None:
    try:
        asyncio.run(asyncio.wait_for(shipper.stop(), timeout=timeout))
    except asyncio.TimeoutError:
        diagnostics.warn(
            "shutdown",
            "drain timed out",
            shipper=getattr(shipper, "name", type(shipper).__name__),
            timeout=timeout,
        )
    except Exception as exc:
        diagnostics.warn(
            "shutdown",
            "drain failed",
            shipper=getattr(shipper, "name", type(shipper).__name__),
            error=type(exc).__name__,
        )


def _atexit_handler() -> None:
    """Stop every registered shipper. Called by atexit; never raises."""
    global _shutdown_in_progress

    if _shutdown_in_progress:
        return
    _shutdown_in_progress = True

    timeout = _get_drain_timeout()
    try:
        shippers = list(_registered_shippers)
    except Exception:  # pragma: no cover - rare GC race
        return
    for shipper in shippers:
        _drain_single_shipper(shipper, timeout)


def _reset_for_tests() -> None:
    """Forget registrations and re-arm the hook (tests only)."""
    global _shutdown_in_progress
    _registered_shippers.clear()
    _shutdown_in_progress = False


atexit.register(_atexit_handler)
