"""Severity scale used for threshold comparisons.

Levels are ordered from most to least severe. The rank of a level is its
position on the scale, so a lower rank means a more severe record:

    fatal (0) < error (1) < warn (2) < info (3) < debug (4) < trace (5)

A host framework may supply its own scale; every lookup accepts an optional
``scale`` argument and falls back to the default one.

Example:
    >>> get_level_rank("error")
    1
    >>> get_level_rank("WARNING")
    2
    >>> is_within_threshold("debug", "info")
    False
"""

from __future__ import annotations

from typing import Final, Sequence

DEFAULT_LEVELS: Final[tuple[str, ...]] = (
    "fatal",
    "error",
    "warn",
    "info",
    "debug",
    "trace",
)

# Spellings used by other logging stacks, normalized before lookup
_ALIASES: Final[dict[str, str]] = {
    "critical": "fatal",
    "warning": "warn",
}

# Records at or above this severity from the broker bypass module exclusion
ERROR_RANK: Final[int] = DEFAULT_LEVELS.index("error")

BROKER_MODULE: Final[str] = "broker"


def normalize_level(level: str) -> str:
    """Lowercase a level name and resolve known aliases."""
    name = level.strip().lower()
    return _ALIASES.get(name, name)


def get_level_rank(level: object, scale: Sequence[str] | None = None) -> int | None:
    """Return the rank of ``level`` on ``scale``.

    Args:
        level: Level name (case-insensitive, aliases accepted)
        scale: Ordered most-to-least severe level names. Defaults to
               ``DEFAULT_LEVELS``.

    Returns:
        Zero-based rank, or ``None`` when the level is not on the scale.
    """
    if not isinstance(level, str) or not level:
        return None
    levels = DEFAULT_LEVELS if scale is None else tuple(s.lower() for s in scale)
    name = normalize_level(level)
    try:
        return levels.index(name)
    except ValueError:
        return None


def is_within_threshold(
    level: str, threshold: str, scale: Sequence[str] | None = None
) -> bool:
    """True when ``level`` is at least as severe as ``threshold``."""
    rank = get_level_rank(level, scale)
    limit = get_level_rank(threshold, scale)
    if rank is None or limit is None:
        return False
    return rank <= limit


def get_all_levels(scale: Sequence[str] | None = None) -> dict[str, int]:
    """Map every level name on the scale to its rank."""
    levels = DEFAULT_LEVELS if scale is None else tuple(s.lower() for s in scale)
    return {name: idx for idx, name in enumerate(levels)}
