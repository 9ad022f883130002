from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    # Wire format is camelCase (jobId, scrubbedText, ...); Python attributes stay snake_case.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Candidate(_CamelModel):
    """Anonymized resume returned to the caller for client-side storage (not persisted)."""

    id: str = Field(pattern=r"^\d{6}$", examples=["482913"])
    job_id: str
    scrubbed_text: str
    original_text: str
    created_at: datetime
    updated_at: datetime


class CandidateOut(BaseModel):
    candidate: Candidate


class UploadOut(_CamelModel):
    text: str = Field(description="Anonymized resume text produced by the assistant.")
    file_id: str = Field(description="Provider identifier of the uploaded file.")
