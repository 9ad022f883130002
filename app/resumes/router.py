from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile

from app.api.schemas import ErrorOut
from app.core.llm.deps import get_openai_client
from app.core.llm.openai_client import OpenAIError
from app.core.settings import get_settings
from app.domain.exceptions import (
    ConfigurationError,
    InputValidationError,
    ResumeProcessingError,
    UpstreamError,
)
from app.resumes.schemas import CandidateOut, UploadOut
from app.resumes.scrub.service import ResumeScrubService
from app.resumes.upload.service import ResumeUploadService, Sleep

router = APIRouter(tags=["resumes"])
logger = logging.getLogger("app.resumes")

_ERROR_RESPONSES = {
    400: {"model": ErrorOut, "description": "Required input missing."},
    500: {"model": ErrorOut, "description": "Processing failed (details are only logged)."},
}


def get_run_sleep() -> Sleep:
    """Sleep used between run status reads (overridden in tests)."""
    return asyncio.sleep


def _require_client(openai_client):
    if openai_client is None:
        raise ConfigurationError("OPENAI_API_KEY environment variable is not set")
    return openai_client


def _as_processing_error(exc: Exception) -> ResumeProcessingError:
    if isinstance(exc, OpenAIError):
        return UpstreamError(str(exc))
    # Type name only: validation errors echo their input, which may be resume text.
    return ResumeProcessingError(f"Unexpected {type(exc).__name__}")


@router.post(
    "/scrub",
    response_model=CandidateOut,
    responses=_ERROR_RESPONSES,
    summary="Scrub resume text",
    description=(
        "Send raw resume text to a chat model for PII removal and return a candidate record.\n\n"
        "The candidate is not stored; callers keep it client-side."
    ),
)
async def scrub_resume(
    request: Request,
    openai_client=Depends(get_openai_client),
) -> CandidateOut:
    try:
        raw = await request.json()
    except Exception as exc:  # noqa: BLE001 - malformed bodies share the generic failure
        raise _as_processing_error(exc) from exc

    text = raw.get("text") if isinstance(raw, dict) else None
    job_id = raw.get("jobId") if isinstance(raw, dict) else None
    # Numeric job ids are accepted and echoed back as strings.
    if isinstance(job_id, int) and not isinstance(job_id, bool) and job_id:
        job_id = str(job_id)
    if not isinstance(text, str) or not text or not isinstance(job_id, str) or not job_id:
        raise InputValidationError("Text and job ID are required")

    settings = get_settings()
    try:
        svc = ResumeScrubService(
            llm_client=_require_client(openai_client),
            model=settings.openai_model,
            temperature=float(settings.openai_temperature),
            max_tokens=int(settings.openai_max_tokens),
        )
        candidate = await svc.create_candidate(text=text, job_id=job_id)
    except ResumeProcessingError:
        raise
    except Exception as exc:  # noqa: BLE001 - every failure maps to the generic 500
        raise _as_processing_error(exc) from exc

    logger.info(
        "Resume text scrubbed",
        extra={"request_id": getattr(request.state, "request_id", None)},
    )
    return CandidateOut(candidate=candidate)


@router.post(
    "/upload",
    response_model=UploadOut,
    responses=_ERROR_RESPONSES,
    summary="Anonymize an uploaded resume file",
    description=(
        "Upload a resume file to the provider and run the configured assistant over it.\n\n"
        "The request blocks until the run finishes, hits the poll limit, or the caller "
        "disconnects."
    ),
)
async def upload_resume(
    request: Request,
    openai_client=Depends(get_openai_client),
    sleep: Sleep = Depends(get_run_sleep),
) -> UploadOut:
    try:
        form = await request.form()
    except Exception as exc:  # noqa: BLE001
        raise _as_processing_error(exc) from exc

    upload = form.get("file")
    if not isinstance(upload, UploadFile):
        raise InputValidationError("No file provided")

    settings = get_settings()
    try:
        client = _require_client(openai_client)
        if not settings.openai_assistant_id:
            raise ConfigurationError("OPENAI_ASSISTANT_ID environment variable is not set")

        max_bytes = settings.max_resume_upload_bytes
        content = await upload.read(max_bytes + 1)
        if len(content) > max_bytes:
            raise ResumeProcessingError(
                f"Uploaded file exceeds {settings.max_resume_upload_mb} MB",
                category="invalid_request",
            )

        svc = ResumeUploadService(
            client=client,
            assistant_id=settings.openai_assistant_id,
            poll_interval_seconds=float(settings.run_poll_interval_seconds),
            max_polls=int(settings.run_max_polls),
            sleep=sleep,
        )
        result = await svc.anonymize(
            filename=upload.filename or "resume",
            content=content,
            content_type=upload.content_type,
            is_cancelled=request.is_disconnected,
        )
    except ResumeProcessingError:
        raise
    except Exception as exc:  # noqa: BLE001 - every failure maps to the generic 500
        raise _as_processing_error(exc) from exc

    logger.info(
        "Resume file anonymized",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "run_polls": svc.last_poll.polls if svc.last_poll else None,
        },
    )
    return UploadOut(text=result.text, file_id=result.file_id)
