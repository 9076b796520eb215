# ABOUTME: Monitoring package initialization
# ABOUTME: Exports main monitoring classes and functions for metrics collection
from .metrics import PrometheusMetrics, route_label
from .middleware import MonitoringMiddleware, add_monitoring_middleware, route_template

__all__ = ["PrometheusMetrics", "MonitoringMiddleware", "add_monitoring_middleware", "route_label", "route_template"]
