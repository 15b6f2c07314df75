"""Prometheus metrics middleware for FastAPI.

Records request counts and latency labelled by route template, so path
parameters and unknown paths do not grow the label set. Exposes the
/metrics scrape endpoint.
"""

import time

from fastapi import FastAPI
from prometheus_client import Counter, Histogram, make_asgi_app
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Match

UNMATCHED_PATH = "unmatched"

# =============================================================================
# HTTP METRICS
# =============================================================================

HTTP_REQUESTS_TOTAL = Counter(
    "marquee_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

HTTP_REQUEST_DURATION = Histogram(
    "marquee_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 30.0, 60.0, 300.0, 900.0],
)


# =============================================================================
# MIDDLEWARE
# =============================================================================


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
        path = _route_template(request)
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            _observe(method, path, "500", time.perf_counter() - start)
            raise

        _observe(method, path, str(response.status_code), time.perf_counter() - start)
        return response


def _route_template(request: Request) -> str:
    """Return the path template of the route serving a request."""
    for route in request.app.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", request.url.path)
    return UNMATCHED_PATH


def _observe(method: str, path: str, status: str, duration: float) -> None:
    HTTP_REQUESTS_TOTAL.labels(method=method, path=path, status=status).inc()
    HTTP_REQUEST_DURATION.labels(method=method, path=path).observe(duration)


# =============================================================================
# MOUNT HELPER
# =============================================================================


def mount_metrics(app: FastAPI) -> None:
    """Mount the /metrics Prometheus endpoint on a FastAPI app.

    The mounted ASGI sub-app bypasses FastAPI's middleware chain
    and the cron secret check.

    Args:
        app: FastAPI application instance.
    """
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)
