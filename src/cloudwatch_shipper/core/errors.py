"""
Exception taxonomy for cloudwatch-shipper.

Only initialization errors propagate to the host. Failures while flushing or
ingesting records are contained and reported through ``core.diagnostics``.
"""

from __future__ import annotations


class ShipperError(Exception):
    """Base class for all cloudwatch-shipper errors."""

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ConfigurationError(ShipperError):
    """Shipper configuration failed validation."""


class LogGroupError(ShipperError):
    """The destination log group could not be created."""

    def __init__(
        self,
        message: str,
        *,
        log_group_name: str,
        code: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.log_group_name = log_group_name
        self.code = code


class ShipperStateError(ShipperError):
    """A lifecycle operation was called in a state that does not allow it."""
