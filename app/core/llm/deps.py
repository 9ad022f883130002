from __future__ import annotations

from app.core.llm.openai_client import OpenAIClient, OpenAIConfig
from app.core.settings import get_settings

_client: OpenAIClient | None = None


def get_openai_client() -> OpenAIClient | None:
    """
    Dependency provider for the process-wide OpenAIClient.

    Built on first use from settings and reused afterwards. Two requests racing here
    may both construct a client; the last one wins and both are equivalent.

    Returns None when not configured so routes can report a request-scoped failure
    instead of raising during dependency resolution.
    """

    global _client

    if _client is not None:
        return _client

    settings = get_settings()
    if not settings.openai_api_key:
        return None

    config = OpenAIConfig(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        timeout_seconds=float(settings.openai_timeout_seconds),
    )
    _client = OpenAIClient(config=config)
    return _client


def reset_openai_client() -> None:
    """Drop the cached client (used by tests and after configuration changes)."""

    global _client
    _client = None
