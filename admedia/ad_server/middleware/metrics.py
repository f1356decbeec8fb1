"""
Prometheus metrics middleware for monitoring.

Provides:
- Request latency histograms
- Request counters by endpoint
- Active request gauge
- Business metrics (impressions, clicks, analytics rejections, uploads)
"""

import time
from typing import Callable

from fastapi import Request, Response
from prometheus_client import Counter, Gauge, Histogram, Info, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response as StarletteResponse

from admedia.common.logger import get_logger

logger = get_logger(__name__)

# =============================================================================
# Prometheus Metrics Definitions
# =============================================================================

APP_INFO = Info("admedia_app", "AdMedia application information")
APP_INFO.info({
    "name": "admedia",
    "description": "Advertising campaign management backend",
})

# HTTP request metrics
HTTP_REQUEST_TOTAL = Counter(
    "admedia_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

HTTP_REQUEST_DURATION = Histogram(
    "admedia_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

HTTP_REQUESTS_IN_PROGRESS = Gauge(
    "admedia_http_requests_in_progress",
    "HTTP requests currently in progress",
    ["method", "endpoint"],
)

# Campaign analytics metrics
CAMPAIGN_IMPRESSIONS_TOTAL = Counter(
    "admedia_campaign_impressions_total",
    "Impressions recorded through analytics updates",
)

CAMPAIGN_CLICKS_TOTAL = Counter(
    "admedia_campaign_clicks_total",
    "Clicks recorded through analytics updates",
)

ANALYTICS_REJECTIONS_TOTAL = Counter(
    "admedia_analytics_rejections_total",
    "Rejected analytics updates",
    ["reason"],
)

# Image storage metrics
IMAGE_UPLOADS_TOTAL = Counter(
    "admedia_image_uploads_total",
    "Campaign image uploads",
    ["status"],
)


# =============================================================================
# Metrics Middleware
# =============================================================================

class MetricsMiddleware(BaseHTTPMiddleware):
    """
    Middleware that collects Prometheus metrics for all HTTP requests.
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        method = request.method
        endpoint = self._get_endpoint(request)

        HTTP_REQUESTS_IN_PROGRESS.labels(method=method, endpoint=endpoint).inc()

        start_time = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        except Exception as e:
            logger.error("Request error", error=str(e))
            raise
        finally:
            duration = time.perf_counter() - start_time

            HTTP_REQUEST_TOTAL.labels(
                method=method,
                endpoint=endpoint,
                status=str(status_code),
            ).inc()
            HTTP_REQUEST_DURATION.labels(method=method, endpoint=endpoint).observe(duration)
            HTTP_REQUESTS_IN_PROGRESS.labels(method=method, endpoint=endpoint).dec()

    def _get_endpoint(self, request: Request) -> str:
        """Path with numeric ids collapsed, e.g. /api/campaigns/{id}/analytics."""
        parts = request.url.path.split("/")
        return "/".join("{id}" if part.isdigit() else part for part in parts)


# =============================================================================
# Metrics Endpoint
# =============================================================================

async def metrics_endpoint() -> StarletteResponse:
    """Prometheus metrics in text exposition format."""
    return StarletteResponse(
        content=generate_latest(),
        media_type="text/plain; charset=utf-8",
    )


# =============================================================================
# Helper Functions for Recording Business Metrics
# =============================================================================

def record_analytics_increment(impressions: int, clicks: int) -> None:
    CAMPAIGN_IMPRESSIONS_TOTAL.inc(impressions)
    CAMPAIGN_CLICKS_TOTAL.inc(clicks)


def record_analytics_rejection(reason: str) -> None:
    ANALYTICS_REJECTIONS_TOTAL.labels(reason=reason).inc()


def record_image_upload(success: bool) -> None:
    IMAGE_UPLOADS_TOTAL.labels(status="success" if success else "failure").inc()
