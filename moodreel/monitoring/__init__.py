"""Prometheus instrumentation of the HTTP API."""

from moodreel.monitoring.middleware import PrometheusMiddleware, mount_metrics

__all__ = ["PrometheusMiddleware", "mount_metrics"]
