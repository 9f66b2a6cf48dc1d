from __future__ import annotations

from typing import Any, Callable, Mapping, Protocol, Sequence, runtime_checkable

from ...core.host import LoggerHost
from ...core.records import Bindings

LogHandler = Callable[[str, Sequence[Any]], None]


@runtime_checkable
class BaseLogShipper(Protocol):
    """Capability interface a host framework invokes by contract.

    ``create_handler`` returns a synchronous callable that must never raise or
    block; delivery happens later in ``flush``. Errors while shipping are
    contained and reported through diagnostics, never propagated to the
    application.
    """

    async def init(self, host: LoggerHost) -> None:
        ...

    async def stop(self) -> None:
        ...

    async def flush(self) -> None:
        ...

    def create_handler(
        self, bindings: Bindings | Mapping[str, Any] | None
    ) -> LogHandler | None:  # noqa: D401
        """Return a per-module handler, or ``None`` when the module is disabled."""
        ...


__all__ = ["BaseLogShipper", "LogHandler"]
