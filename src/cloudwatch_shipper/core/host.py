"""
Host framework contract.

A shipper does not inherit from the host's logger base class. The host hands
it an object satisfying ``LoggerHost`` during ``init`` and the shipper asks
it for per-module thresholds when building handlers.

``LevelMapHost`` is a ready-made host for applications that are not running
inside a framework: it resolves thresholds from a mapping such as::

    {"BROKER": "warn", "db.*": "debug", "*": "info"}
"""

from __future__ import annotations

from fnmatch import fnmatchcase
from typing import Mapping, Protocol, Sequence, runtime_checkable

from .levels import DEFAULT_LEVELS, get_level_rank

LevelSetting = str | bool | None


@runtime_checkable
class LoggerHost(Protocol):
    """What a shipper needs from the host logging framework."""

    levels: Sequence[str]

    def get_log_level(self, module: str | None) -> str | None:  # noqa: D401
        """Threshold configured for ``module``, or ``None`` when disabled."""
        ...


class LevelMapHost:
    """Resolve module thresholds from a name/pattern mapping.

    Lookup is case-insensitive. An exact module name wins; otherwise the first
    matching glob pattern in declaration order is used (``"*"`` and ``"**"``
    match everything). ``False`` or ``None`` disables a module.
    """

    def __init__(
        self,
        level: str | Mapping[str, LevelSetting] = "info",
        *,
        levels: Sequence[str] = DEFAULT_LEVELS,
    ) -> None:
        self.levels = tuple(levels)
        if isinstance(level, str):
            level = {"*": level}
        self._exact: dict[str, LevelSetting] = {}
        self._patterns: list[tuple[str, LevelSetting]] = []
        for key, value in level.items():
            name = key.lower()
            if any(ch in name for ch in "*?["):
                self._patterns.append((name, value))
            else:
                self._exact[name] = value

    def get_log_level(self, module: str | None) -> str | None:
        name = (module or "").lower()
        if name in self._exact:
            return self._coerce(self._exact[name])
        for pattern, value in self._patterns:
            if pattern == "**" or fnmatchcase(name, pattern):
                return self._coerce(value)
        return None

    def _coerce(self, value: LevelSetting) -> str | None:
        if not isinstance(value, str):
            return None
        if get_level_rank(value, self.levels) is None:
            return None
        return value.lower()
