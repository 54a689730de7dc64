"""Prometheus metrics middleware for FastAPI.

Counts requests and recommendation outcomes, and exposes them on
/metrics for Prometheus scraping.
"""

import time

from prometheus_client import Counter, Histogram, make_asgi_app
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# =============================================================================
# HTTP METRICS
# =============================================================================

HTTP_REQUESTS_TOTAL = Counter(
    "moodreel_http_requests_total",
    "Total HTTP requests",
    ["method", "route", "status"],
)

HTTP_REQUEST_DURATION = Histogram(
    "moodreel_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "route"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# =============================================================================
# DOMAIN METRICS
# =============================================================================

RECOMMENDATIONS_TOTAL = Counter(
    "moodreel_recommendations_total",
    "Recommendation requests by taxonomy and mood",
    ["taxonomy", "mood"],
)

RECOMMENDATION_TIER_TOTAL = Counter(
    "moodreel_recommendation_tier_total",
    "Recommended movies by the tier that selected them",
    ["tier"],
)


# =============================================================================
# MIDDLEWARE
# =============================================================================


UNMATCHED_ROUTE = "unmatched"


def _route_label(request: Request) -> str:
    """Route template of the request, or one shared label when nothing matched."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Records HTTP request metrics for Prometheus.

    Skips recording for the /metrics endpoint itself.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Process request and record metrics.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware/handler in the chain.

        Returns:
            HTTP response from downstream handler.
        """
        if request.url.path.startswith("/metrics"):
            return await call_next(request)

        method = request.method
        start = time.perf_counter()

        response = await call_next(request)

        duration = time.perf_counter() - start
        route = _route_label(request)
        status = str(response.status_code)

        HTTP_REQUESTS_TOTAL.labels(method=method, route=route, status=status).inc()
        HTTP_REQUEST_DURATION.labels(method=method, route=route).observe(duration)

        return response


# =============================================================================
# MOUNT HELPER
# =============================================================================


def mount_metrics(app) -> None:
    """Mount the /metrics Prometheus endpoint on a FastAPI app.

    Args:
        app: FastAPI application instance.
    """
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)
