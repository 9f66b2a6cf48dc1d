"""
Plugin utilities for configuration parsing.
"""

from __future__ import annotations

from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from ..core.errors import ConfigurationError

ConfigT = TypeVar("ConfigT", bound=BaseModel)


def deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into ``base`` (mutates and returns base). Override wins.

    Mappings taken from ``override`` are copied at every depth, so later
    merges never write into the caller's nested dicts.
    """
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, Mapping):
            deep_merge(base[key], value)
        elif isinstance(value, Mapping):
            base[key] = deep_merge({}, value)
        else:
            base[key] = value
    return base


def parse_plugin_config(
    config_cls: type[ConfigT],
    config: ConfigT | Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> ConfigT:
    """Build a plugin config from a model instance, a mapping and/or kwargs.

    Mappings and kwargs are deep-merged in that order over the instance
    values (or the model defaults). Nested dicts merge key by key.

    Raises:
        ConfigurationError: when the merged values fail validation
    """
    if isinstance(config, config_cls) and not kwargs:
        return config

    merged: dict[str, Any] = {}
    if isinstance(config, config_cls):
        merged = config.model_dump()
    elif config is not None:
        deep_merge(merged, config)
    deep_merge(merged, kwargs)

    try:
        return config_cls.model_validate(merged)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid {config_cls.__name__}: {e.error_count()} error(s)", cause=e
        ) from e

