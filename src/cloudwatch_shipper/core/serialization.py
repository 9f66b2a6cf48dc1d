"""
JSON serialization helpers built on orjson.

Envelopes are encoded to bytes without an intermediate ``str`` and decoded
once into the text CloudWatch expects for ``InputLogEvent.message``. Field
order follows insertion order so shipped lines read the same way they were
built.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import orjson

from .errors import ShipperError

_OPTIONS = orjson.OPT_NON_STR_KEYS


def _default(obj: Any) -> Any:
    """Fallback hook for types orjson does not handle natively."""
    if hasattr(obj, "model_dump"):
        return obj.model_dump(exclude_none=True)
    if isinstance(obj, BaseException):
        return f"{type(obj).__name__}: {obj}"
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return bytes(obj).decode("utf-8", errors="replace")
    if hasattr(obj, "__dict__"):
        return {k: v for k, v in vars(obj).items() if not k.startswith("_")}
    return str(obj)


@dataclass
class SerializedView:
    """Encoded JSON payload."""

    data: bytes

    def decode(self) -> str:
        return self.data.decode("utf-8")


def serialize_mapping_to_json_bytes(payload: Mapping[str, Any]) -> SerializedView:
    """Serialize a mapping to JSON bytes.

    Raises:
        ShipperError: when the payload contains values that cannot be encoded
    """
    try:
        data = orjson.dumps(payload, default=_default, option=_OPTIONS)
    except TypeError as e:
        raise ShipperError("Serialization failed", cause=e) from e
    return SerializedView(data=data)


def to_json(obj: Any) -> str:
    """Encode any JSON-compatible object to text; used as the default printer."""
    try:
        return orjson.dumps(obj, default=_default, option=_OPTIONS).decode("utf-8")
    except TypeError as e:
        raise ShipperError("Serialization failed", cause=e) from e
