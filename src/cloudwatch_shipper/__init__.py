"""
Public entrypoints for cloudwatch-shipper.

Batch host log records in memory and ship them to AWS CloudWatch Logs as
JSON lines, one log stream per flush.
"""

from __future__ import annotations

from typing import Any, Mapping

from ._version import __version__
from .core.errors import (
    ConfigurationError,
    LogGroupError,
    ShipperError,
    ShipperStateError,
)
from .core.host import LevelMapHost, LoggerHost
from .core.records import Bindings, QueuedRecord
from .core.settings import Settings
from .core.stdlib_bridge import ShipperHandler, enable_stdlib_bridge
from .metrics.metrics import MetricsCollector
from .plugins.sinks import BaseLogShipper
from .plugins.sinks.cloudwatch import (
    CloudWatchShipper,
    CloudWatchShipperConfig,
    ShipperState,
)

__all__ = [
    "BaseLogShipper",
    "Bindings",
    "CloudWatchShipper",
    "CloudWatchShipperConfig",
    "ConfigurationError",
    "LevelMapHost",
    "LogGroupError",
    "LoggerHost",
    "MetricsCollector",
    "QueuedRecord",
    "Settings",
    "ShipperError",
    "ShipperHandler",
    "ShipperState",
    "ShipperStateError",
    "enable_stdlib_bridge",
    "start_shipper",
    "__version__",
    "VERSION",
]

VERSION = __version__


async def start_shipper(
    host: LoggerHost | Mapping[str, Any] | str | None = None,
    config: CloudWatchShipperConfig | Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> CloudWatchShipper:
    """Create and initialize a CloudWatch shipper in one call.

    ``host`` may be a ``LoggerHost`` or anything ``LevelMapHost`` accepts
    (a single level name or a module-pattern mapping).

    Example:
        >>> shipper = await start_shipper({"*": "info"}, log_group_name="/app/prod")
        >>> handler = shipper.create_handler({"mod": "api", "nodeID": "n1"})
        >>> handler("info", ["Service started"])
        >>> await shipper.stop()
    """
    if host is None or isinstance(host, (str, Mapping)):
        host = LevelMapHost(host or "info")
    shipper = CloudWatchShipper(config, **kwargs)
    await shipper.init(host)
    return shipper
