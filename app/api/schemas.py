from __future__ import annotations

from pydantic import BaseModel, Field

GENERIC_FAILURE_MESSAGE = "Failed to process the file"


class HealthOut(BaseModel):
    """Health check response."""

    status: str = Field(
        description="Service status indicator. `ok` means the API process is up and responding.",
        examples=["ok"],
    )


class ErrorOut(BaseModel):
    """Error envelope shared by every endpoint."""

    error: str = Field(examples=[GENERIC_FAILURE_MESSAGE])
