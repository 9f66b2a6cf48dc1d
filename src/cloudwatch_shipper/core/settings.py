"""
Process-wide configuration for cloudwatch-shipper using Pydantic v2 Settings.

Per-shipper options (log group, interval, tags) live on
``CloudWatchShipperConfig``. This module only covers knobs that apply to
every shipper in the process: internal diagnostics, metrics and the atexit
drain.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic_settings import (  # type: ignore[import-not-found]
    BaseSettings,
    SettingsConfigDict,
)


class CoreSettings(BaseModel):
    """Ambient behavior shared by all shippers."""

    internal_logging_enabled: bool = Field(
        default=True,
        description="Emit WARN/INFO diagnostics for contained delivery errors",
    )
    enable_metrics: bool = Field(
        default=False,
        description="Export Prometheus counters for shipping activity",
    )
    atexit_drain_enabled: bool = Field(
        default=True,
        description="Flush running shippers from an atexit hook",
    )
    atexit_drain_timeout_seconds: float = Field(
        default=2.0,
        gt=0.0,
        description="Upper bound for the atexit drain of a single shipper",
    )


class Settings(BaseSettings):
    """Top-level settings read from ``CWSHIP_*`` environment variables."""

    core: CoreSettings = Field(default_factory=CoreSettings)

    model_config = SettingsConfigDict(
        env_prefix="CWSHIP_",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    def to_dict(self) -> dict[str, object]:
        return dict(self.model_dump())
