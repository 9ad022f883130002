from __future__ import annotations


class InputValidationError(Exception):
    """Raised when a request is missing required input (reported as 400)."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ResumeProcessingError(Exception):
    """
    Raised when resume processing fails after input validation.

    Every subclass is reported to callers as the same generic 500; `category` is for
    logs and metrics only.
    """

    category = "unexpected"

    def __init__(self, message: str, *, category: str | None = None):
        super().__init__(message)
        self.message = message
        if category is not None:
            self.category = category


class ConfigurationError(ResumeProcessingError):
    """Raised when a required secret (API key, assistant id) is not configured."""

    category = "configuration"


class UpstreamError(ResumeProcessingError):
    """Raised when a provider call fails."""

    category = "upstream"


class AssistantRunError(ResumeProcessingError):
    """Raised when an assistant run ends in a terminal status other than `completed`."""

    category = "run_status"

    def __init__(self, status: str):
        super().__init__(f"Run failed with status: {status}")
        self.status = status


class AssistantRunTimeoutError(ResumeProcessingError):
    """Raised when a run is still pending after the maximum number of status reads."""

    category = "run_timeout"


class AssistantRunCancelledError(ResumeProcessingError):
    """Raised when the caller disconnects while a run is being polled."""

    category = "run_cancelled"


class AssistantReplyError(ResumeProcessingError):
    """Raised when a completed run has no usable assistant reply."""

    category = "unexpected_content"
