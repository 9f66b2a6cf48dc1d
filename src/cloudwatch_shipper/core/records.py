"""
Queued log records and their CloudWatch wire representation.

A ``QueuedRecord`` is created when a handler accepts a record and lives only
until the next flush, where it is turned into an ``InputLogEvent``-shaped
dict: ``{"timestamp": <epoch ms>, "message": <JSON envelope>}``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Mapping

from .serialization import serialize_mapping_to_json_bytes

# Host binding keys -> Bindings attribute names
_BINDING_KEYS: dict[str, str] = {
    "nodeID": "node_id",
    "ns": "namespace",
    "svc": "service",
    "ver": "version",
    "mod": "module",
}


@dataclass(frozen=True)
class Bindings:
    """Per-module metadata supplied by the host framework."""

    module: str | None = None
    node_id: str | None = None
    namespace: str | None = None
    service: str | None = None
    version: Any = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Bindings:
        """Build bindings from host keys (``nodeID``/``ns``/``svc``/``ver``/``mod``)
        or from attribute names; host keys win when both are present."""
        values: dict[str, Any] = {}
        for attr in ("module", "node_id", "namespace", "service", "version"):
            if attr in data:
                values[attr] = data[attr]
        for key, attr in _BINDING_KEYS.items():
            if key in data:
                values[attr] = data[key]
        return cls(**values)


def coerce_bindings(bindings: Bindings | Mapping[str, Any] | None) -> Bindings | None:
    if bindings is None or isinstance(bindings, Bindings):
        return bindings
    return Bindings.from_mapping(bindings)


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class QueuedRecord:
    timestamp: int
    level: str
    message: str
    bindings: Bindings

    def to_envelope(
        self,
        *,
        source: str,
        environment: str | None,
        hostname: str,
    ) -> dict[str, Any]:
        """Structured body shipped as the event message."""
        return {
            "timestamp": self.timestamp,
            "level": self.level,
            "message": self.message,
            "nodeID": self.bindings.node_id,
            "namespace": self.bindings.namespace,
            "service": self.bindings.service,
            "version": self.bindings.version,
            "source": source,
            "tags": [environment],
            "hostname": hostname,
        }

    def to_log_event(
        self,
        *,
        source: str,
        environment: str | None,
        hostname: str,
    ) -> dict[str, Any]:
        envelope = self.to_envelope(
            source=source, environment=environment, hostname=hostname
        )
        return {
            "timestamp": self.timestamp,
            "message": serialize_mapping_to_json_bytes(envelope).decode(),
        }
