"""HTTP logging middleware.

Logs request metadata only. Request bodies carry resume text and files, and response
bodies carry the anonymized output; neither is ever logged. An X-Request-ID is
generated or propagated so the generic 500 responses can be matched to the logged cause.
"""

from __future__ import annotations

import logging
import re
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger("app.http")

_REQUEST_ID_HEADER = "X-Request-ID"
_SAFE_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]{0,127}$")


def _get_or_create_request_id(*, request: Request) -> str:
    """Return the caller's request id if it is safe to log, otherwise a new UUID4 hex."""

    candidate = request.headers.get(_REQUEST_ID_HEADER)
    if candidate and _SAFE_REQUEST_ID_PATTERN.fullmatch(candidate):
        return candidate
    return uuid.uuid4().hex


def _route_label(*, request: Request) -> str:
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    if isinstance(path, str) and path:
        return path
    return "unmatched"


class HttpLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request (method, route, status, duration) and tag it with a request id."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _get_or_create_request_id(request=request)
        started = time.perf_counter()
        # Exception handlers read this to tag failure logs with the same id.
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception:  # noqa: BLE001 - log with stack trace, then let Starlette answer 500
            duration_ms = (time.perf_counter() - started) * 1000.0
            logger.exception(
                "Unhandled exception while processing request",
                extra={
                    "request_id": request_id,
                    "http_method": request.method,
                    "request_path": _route_label(request=request),
                    "status_code": 500,
                    "duration_ms": round(duration_ms, 2),
                },
            )
            raise

        duration_ms = (time.perf_counter() - started) * 1000.0
        response.headers[_REQUEST_ID_HEADER] = request_id

        logger.info(
            "Request completed",
            extra={
                "request_id": request_id,
                "http_method": request.method,
                "request_path": _route_label(request=request),
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
