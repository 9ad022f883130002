"""Test doubles for the OpenAI client."""

from __future__ import annotations

from typing import Any

from app.core.llm.openai_client import OpenAIUpstreamError


def text_message(role: str, value: str) -> dict[str, Any]:
    return {"role": role, "content": [{"type": "text", "text": {"value": value}}]}


class SleepRecorder:
    """Stands in for asyncio.sleep; records requested delays without waiting."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FakeOpenAIClient:
    """In-memory OpenAI client recording every call."""

    def __init__(self) -> None:
        self.chat_reply: str | None = "[NAME]\nSenior Engineer at [COMPANY]"
        self.chat_error: Exception | None = None
        self.run_statuses: list[str] = ["completed"]
        self.messages: list[dict[str, Any]] = [
            text_message("assistant", "Anonymized resume"),
            text_message("user", "Please anonymize this resume"),
        ]
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def calls_to(self, name: str) -> list[dict[str, Any]]:
        return [kwargs for call, kwargs in self.calls if call == name]

    async def chat_completion(self, **kwargs: Any) -> str | None:
        self.calls.append(("chat_completion", kwargs))
        if self.chat_error is not None:
            raise self.chat_error
        return self.chat_reply

    async def upload_file(self, **kwargs: Any) -> str:
        self.calls.append(("upload_file", kwargs))
        return "file-123"

    async def create_thread(self) -> str:
        self.calls.append(("create_thread", {}))
        return "thread_abc"

    async def create_message(self, **kwargs: Any) -> str:
        self.calls.append(("create_message", kwargs))
        return "msg_1"

    async def create_run(self, **kwargs: Any) -> str:
        self.calls.append(("create_run", kwargs))
        return "run_1"

    async def retrieve_run_status(self, **kwargs: Any) -> str:
        self.calls.append(("retrieve_run_status", kwargs))
        if not self.run_statuses:
            raise OpenAIUpstreamError("no more statuses")
        # The last status repeats once the sequence is exhausted.
        if len(self.run_statuses) == 1:
            return self.run_statuses[0]
        return self.run_statuses.pop(0)

    async def list_messages(self, **kwargs: Any) -> list[dict[str, Any]]:
        self.calls.append(("list_messages", kwargs))
        return self.messages
