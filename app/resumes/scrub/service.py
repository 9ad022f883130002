from __future__ import annotations

import secrets
from datetime import UTC, datetime
from typing import Protocol

from app.resumes.schemas import Candidate
from app.resumes.scrub.prompt import build_scrub_prompts


class ChatClient(Protocol):
    async def chat_completion(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str | None: ...


def generate_candidate_id() -> str:
    """Random 6-digit id (100000-999999); uniqueness is probabilistic only."""

    return str(100_000 + secrets.randbelow(900_000))


class ResumeScrubService:
    def __init__(
        self,
        *,
        llm_client: ChatClient,
        model: str,
        temperature: float,
        max_tokens: int,
    ):
        self._llm = llm_client
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def scrub_text(self, *, text: str) -> str:
        """Return the model's anonymized text, or `text` unchanged when the reply is empty."""

        system_prompt, user_prompt = build_scrub_prompts(text=text)
        scrubbed = await self._llm.chat_completion(
            model=self._model,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        return scrubbed or text

    async def create_candidate(self, *, text: str, job_id: str) -> Candidate:
        scrubbed = await self.scrub_text(text=text)
        now = datetime.now(UTC)
        return Candidate(
            id=generate_candidate_id(),
            job_id=job_id,
            scrubbed_text=scrubbed,
            original_text=text,
            created_at=now,
            updated_at=now,
        )
