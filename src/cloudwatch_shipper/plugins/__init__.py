"""
Shipper plugins for cloudwatch-shipper.

Shippers implement the small ``BaseLogShipper`` capability interface that a
host logging framework drives by contract.
"""

from .sinks import BaseLogShipper
from .sinks.cloudwatch import CloudWatchShipper, CloudWatchShipperConfig

__all__ = [
    "BaseLogShipper",
    "CloudWatchShipper",
    "CloudWatchShipperConfig",
]
