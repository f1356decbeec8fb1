"""
Middleware for the API server.
"""

from admedia.ad_server.middleware.metrics import (
    MetricsMiddleware,
    metrics_endpoint,
    record_analytics_increment,
    record_analytics_rejection,
    record_image_upload,
)

__all__ = [
    "MetricsMiddleware",
    "metrics_endpoint",
    "record_analytics_increment",
    "record_analytics_rejection",
    "record_image_upload",
]
