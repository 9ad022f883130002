from __future__ import annotations

import time
from typing import cast

from fastapi import APIRouter, Request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

metrics_router = APIRouter(tags=["metrics"])

# Labels are route templates and fixed category names only; never job ids or file names.

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    labelnames=("method", "route", "status_code"),
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    labelnames=("method", "route", "status_code"),
    # /upload blocks on an assistant run, so keep buckets well past the usual API range.
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0),
)

resume_processing_failures_total = Counter(
    "resume_processing_failures_total",
    "Resume processing failures collapsed into the generic 500 response",
    labelnames=("endpoint", "category"),
)

assistant_run_polls = Histogram(
    "assistant_run_polls",
    "Number of run status reads per assistant run",
    buckets=(1, 2, 3, 5, 10, 20, 30, 60, 120, 300),
)


def _safe_route_label(request: Request) -> str:
    """
    Return a safe route label.

    Prefer the Starlette/FastAPI route template. If routing didn't match (404) or is
    otherwise unavailable, return "unmatched" to keep label cardinality bounded.
    """

    route = request.scope.get("route")
    path = getattr(route, "path", None)
    if isinstance(path, str) and path:
        return path
    return "unmatched"


class PrometheusMetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            route_label = _safe_route_label(request)
            method = request.method
            code = str(int(status_code))
            duration = time.perf_counter() - started
            http_requests_total.labels(method=method, route=route_label, status_code=code).inc()
            http_request_duration_seconds.labels(
                method=method, route=route_label, status_code=code
            ).observe(duration)


@metrics_router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    payload = generate_latest()
    return Response(content=cast(bytes, payload), media_type=CONTENT_TYPE_LATEST)
