from .metrics import MetricsCollector, ShippingMetrics

__all__ = ["MetricsCollector", "ShippingMetrics"]
