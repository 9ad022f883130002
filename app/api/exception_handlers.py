from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.schemas import GENERIC_FAILURE_MESSAGE
from app.core.metrics import resume_processing_failures_total
from app.domain.exceptions import InputValidationError, ResumeProcessingError

logger = logging.getLogger("app.resume_processing")


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None) or request.headers.get("X-Request-ID")


def _endpoint_label(request: Request) -> str:
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    if isinstance(path, str) and path:
        return path
    return "unmatched"


def register_exception_handlers(app: FastAPI) -> None:
    """Register application exception handlers."""

    @app.exception_handler(InputValidationError)
    async def handle_input_validation_error(
        request: Request,
        exc: InputValidationError,
    ) -> JSONResponse:
        # IMPORTANT: do not log request bodies (resume text).
        logger.info(
            "Request rejected",
            extra={
                "request_id": _request_id(request),
                "http_method": request.method,
                "request_path": request.url.path,  # no query string
                "status_code": 400,
                "error_category": "invalid_request",
            },
        )
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(ResumeProcessingError)
    async def handle_resume_processing_error(
        request: Request,
        exc: ResumeProcessingError,
    ) -> JSONResponse:
        # The cause stays in the logs; callers always get the same body.
        logger.error(
            "Resume processing failed: %s",
            exc.message,
            exc_info=exc.__cause__ or exc,
            extra={
                "request_id": _request_id(request),
                "http_method": request.method,
                "request_path": request.url.path,
                "status_code": 500,
                "error_category": exc.category,
            },
        )
        resume_processing_failures_total.labels(
            endpoint=_endpoint_label(request), category=exc.category
        ).inc()
        return JSONResponse(status_code=500, content={"error": GENERIC_FAILURE_MESSAGE})
