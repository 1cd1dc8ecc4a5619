"""
Prometheus metrics and instrumentation helpers.
"""

from __future__ import annotations

import time
from typing import Awaitable, Callable

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


HTTP_REQUESTS_TOTAL = Counter(
    "app_http_requests_total",
    "Total count of HTTP requests processed.",
    ["method", "path", "status"],
)

HTTP_REQUEST_DURATION = Histogram(
    "app_http_request_duration_seconds",
    "Histogram of HTTP request durations in seconds.",
    ["method", "path"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10),
)

HTTP_REQUEST_ERRORS = Counter(
    "app_http_request_errors_total",
    "Count of HTTP requests resulting in error responses.",
    ["method", "path", "status"],
)

AUTH_EVENTS = Counter(
    "app_auth_events_total",
    "Authentication events partitioned by event and outcome.",
    ["event", "outcome"],
)


def _normalise_path(request: Request, raw_path: str) -> str:
    """Prefer route path templates to reduce cardinality in metrics.

    Templates of routes reached through an included router may omit the
    router prefix, so the prefix is recovered from the request path.
    """
    route = request.scope.get("route")
    template = getattr(route, "path_format", None) or getattr(route, "path", None)
    if not template or "{" not in template:
        return raw_path
    depth = len(template.strip("/").split("/"))
    segments = raw_path.rstrip("/").split("/")
    if len(segments) <= depth:
        return template
    return "/".join(segments[:-depth]) + template


def observe_http_request(method: str, path: str, status_code: int, duration: float) -> None:
    """Record metrics for an HTTP request."""
    status_str = str(status_code)
    HTTP_REQUESTS_TOTAL.labels(method=method, path=path, status=status_str).inc()
    HTTP_REQUEST_DURATION.labels(method=method, path=path).observe(duration)

    if status_code >= 400:
        HTTP_REQUEST_ERRORS.labels(method=method, path=path, status=status_str).inc()


def record_auth_event(event: str, outcome: str) -> None:
    """Increment the counter for a login, registration, or token check."""
    AUTH_EVENTS.labels(event=event, outcome=outcome).inc()


class MetricsMiddleware(BaseHTTPMiddleware):
    """ASGI middleware for capturing request metrics."""

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        method = request.method
        raw_path = request.url.path
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            duration = time.perf_counter() - start
            observe_http_request(method, _normalise_path(request, raw_path), 500, duration)
            raise

        duration = time.perf_counter() - start
        # The route is only resolved once the router has handled the request.
        observe_http_request(method, _normalise_path(request, raw_path), response.status_code, duration)
        return response


__all__ = [
    "MetricsMiddleware",
    "HTTP_REQUESTS_TOTAL",
    "HTTP_REQUEST_DURATION",
    "HTTP_REQUEST_ERRORS",
    "AUTH_EVENTS",
    "observe_http_request",
    "record_auth_event",
]
