from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Protocol

from app.core.metrics import assistant_run_polls
from app.domain.exceptions import (
    AssistantReplyError,
    AssistantRunCancelledError,
    AssistantRunError,
    AssistantRunTimeoutError,
)

ANONYMIZE_INSTRUCTION = (
    "Please anonymize this resume by removing personal information while preserving "
    "professional details."
)

# Any status outside this set is terminal (completed, failed, cancelled, expired, ...).
PENDING_RUN_STATUSES = frozenset({"queued", "in_progress"})

Sleep = Callable[[float], Awaitable[None]]
CancelCheck = Callable[[], Awaitable[bool]]


class AssistantsClient(Protocol):
    async def upload_file(
        self,
        *,
        filename: str,
        content: bytes,
        content_type: str | None = None,
        purpose: str = "assistants",
    ) -> str: ...

    async def create_thread(self) -> str: ...

    async def create_message(self, *, thread_id: str, content: str, file_id: str) -> str: ...

    async def create_run(self, *, thread_id: str, assistant_id: str) -> str: ...

    async def retrieve_run_status(self, *, thread_id: str, run_id: str) -> str: ...

    async def list_messages(self, *, thread_id: str) -> list[dict[str, Any]]: ...


@dataclass(frozen=True)
class AnonymizedUpload:
    file_id: str
    text: str


@dataclass(frozen=True)
class RunPollResult:
    status: str
    polls: int


async def poll_run_until_terminal(
    *,
    client: AssistantsClient,
    thread_id: str,
    run_id: str,
    interval_seconds: float,
    max_polls: int,
    is_cancelled: CancelCheck | None = None,
    sleep: Sleep = asyncio.sleep,
) -> RunPollResult:
    """
    Read run status until it leaves `queued`/`in_progress`.

    Status is read once up front, then once per interval. Only the status read repeats;
    nothing is retried. Raises AssistantRunTimeoutError after `max_polls` reads that are
    all pending, and AssistantRunCancelledError when `is_cancelled` reports the caller
    has gone away. Remote resources are left as they are in both cases.
    """

    polls = 0
    try:
        status = await client.retrieve_run_status(thread_id=thread_id, run_id=run_id)
        polls = 1
        while status in PENDING_RUN_STATUSES:
            if polls >= max_polls:
                raise AssistantRunTimeoutError(
                    f"Run still {status} after {polls} status checks"
                )
            if is_cancelled is not None and await is_cancelled():
                raise AssistantRunCancelledError(f"Caller disconnected while run was {status}")
            await sleep(interval_seconds)
            status = await client.retrieve_run_status(thread_id=thread_id, run_id=run_id)
            polls += 1
    finally:
        # Recorded on every exit, so abandoned runs show up too.
        if polls:
            assistant_run_polls.observe(polls)

    return RunPollResult(status=status, polls=polls)


def extract_assistant_text(messages: list[dict[str, Any]]) -> str:
    """Return the text of the first assistant-authored message's first content block."""

    assistant_message = next((m for m in messages if m.get("role") == "assistant"), None)
    if assistant_message is None:
        raise AssistantReplyError("No response from assistant", category="empty_reply")

    content = assistant_message.get("content") or []
    if not content:
        raise AssistantReplyError("Assistant response had no content", category="empty_reply")

    block = content[0]
    if not isinstance(block, dict) or block.get("type") != "text":
        raise AssistantReplyError("Unexpected response type from assistant")

    text = block.get("text")
    value = text.get("value") if isinstance(text, dict) else None
    if not isinstance(value, str):
        raise AssistantReplyError("Unexpected response type from assistant")
    return value


class ResumeUploadService:
    """Upload a resume file and have the configured assistant anonymize it."""

    def __init__(
        self,
        *,
        client: AssistantsClient,
        assistant_id: str,
        poll_interval_seconds: float,
        max_polls: int,
        sleep: Sleep = asyncio.sleep,
    ):
        self._client = client
        self._assistant_id = assistant_id
        self._poll_interval_seconds = poll_interval_seconds
        self._max_polls = max_polls
        self._sleep = sleep
        self.last_poll: RunPollResult | None = None

    async def anonymize(
        self,
        *,
        filename: str,
        content: bytes,
        content_type: str | None = None,
        is_cancelled: CancelCheck | None = None,
    ) -> AnonymizedUpload:
        file_id = await self._client.upload_file(
            filename=filename, content=content, content_type=content_type, purpose="assistants"
        )
        thread_id = await self._client.create_thread()
        await self._client.create_message(
            thread_id=thread_id, content=ANONYMIZE_INSTRUCTION, file_id=file_id
        )
        run_id = await self._client.create_run(
            thread_id=thread_id, assistant_id=self._assistant_id
        )

        self.last_poll = await poll_run_until_terminal(
            client=self._client,
            thread_id=thread_id,
            run_id=run_id,
            interval_seconds=self._poll_interval_seconds,
            max_polls=self._max_polls,
            is_cancelled=is_cancelled,
            sleep=self._sleep,
        )
        if self.last_poll.status != "completed":
            raise AssistantRunError(self.last_poll.status)

        messages = await self._client.list_messages(thread_id=thread_id)
        return AnonymizedUpload(file_id=file_id, text=extract_assistant_text(messages))
