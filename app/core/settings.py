from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # LLM integration (OpenAI)
    # Credentials are optional here; routes detect missing values on first use.
    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "openai_api_key"),
        description="OpenAI API key (required for /scrub and /upload).",
    )
    openai_assistant_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_ASSISTANT_ID", "openai_assistant_id"),
        description="Identifier of the preconfigured assistant used by /upload.",
    )
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        validation_alias=AliasChoices("OPENAI_BASE_URL", "openai_base_url"),
        description="Base URL for OpenAI API (override for proxies/emulators).",
    )
    openai_model: str = Field(
        default="gpt-4",
        validation_alias=AliasChoices("OPENAI_MODEL", "openai_model"),
        description="Chat model used by /scrub.",
    )
    openai_temperature: float = Field(
        default=0.3,
        ge=0.0,
        le=2.0,
        validation_alias=AliasChoices("OPENAI_TEMPERATURE", "openai_temperature"),
        description="Sampling temperature for /scrub.",
    )
    openai_max_tokens: int = Field(
        default=2000,
        ge=1,
        validation_alias=AliasChoices("OPENAI_MAX_TOKENS", "openai_max_tokens"),
        description="Output length cap for /scrub.",
    )
    openai_timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        validation_alias=AliasChoices("OPENAI_TIMEOUT_SECONDS", "openai_timeout_seconds"),
        description="Timeout for each OpenAI API request (seconds).",
    )

    # Assistant run polling (/upload)
    run_poll_interval_seconds: float = Field(
        default=1.0,
        ge=0.0,
        validation_alias=AliasChoices("RUN_POLL_INTERVAL_SECONDS", "run_poll_interval_seconds"),
        description="Delay between run status reads (seconds).",
    )
    run_max_polls: int = Field(
        default=300,
        ge=1,
        validation_alias=AliasChoices("RUN_MAX_POLLS", "run_max_polls"),
        description="Maximum run status reads before the upload is abandoned.",
    )

    max_resume_upload_mb: int = Field(
        default=20,
        ge=1,
        validation_alias=AliasChoices("MAX_RESUME_UPLOAD_MB", "max_resume_upload_mb"),
        description="Maximum allowed upload size for resume files (MB).",
    )

    @property
    def max_resume_upload_bytes(self) -> int:
        return int(self.max_resume_upload_mb) * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    return Settings()
