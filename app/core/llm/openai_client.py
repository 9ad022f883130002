from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx


class OpenAIError(Exception):
    """Base error for OpenAI client failures (mapped to the generic 500 at the edge)."""


class OpenAIUpstreamError(OpenAIError):
    """Raised when OpenAI API fails or returns an unexpected response."""


@dataclass(frozen=True)
class OpenAIConfig:
    api_key: str
    base_url: str
    timeout_seconds: float


_ASSISTANTS_BETA_HEADER = {"OpenAI-Beta": "assistants=v2"}


class OpenAIClient:
    """
    Minimal OpenAI API client covering chat completions and the assistants workflow.

    Design notes:
    - No logging in this module (prompts, files and outputs contain resume PII).
    - Every call is attempted exactly once; no retries.
    - `transport` is injectable so tests can use `httpx.MockTransport`.
    """

    def __init__(self, *, config: OpenAIConfig, transport: httpx.AsyncBaseTransport | None = None):
        self._config = config
        self._transport = transport

    def _url(self, path: str) -> str:
        return f"{self._config.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _headers(self, *, beta: bool) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self._config.api_key}"}
        if beta:
            headers.update(_ASSISTANTS_BETA_HEADER)
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        beta: bool = False,
        json: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(
                timeout=self._config.timeout_seconds, transport=self._transport
            ) as client:
                resp = await client.request(
                    method,
                    self._url(path),
                    headers=self._headers(beta=beta),
                    json=json,
                    files=files,
                    data=data,
                )
        except httpx.TimeoutException as exc:
            raise OpenAIUpstreamError(f"{method} {path} timed out") from exc
        except httpx.HTTPError as exc:
            raise OpenAIUpstreamError(f"{method} {path} failed") from exc

        if not resp.is_success:
            # Status code only; upstream bodies can echo request content.
            raise OpenAIUpstreamError(f"{method} {path} returned HTTP {resp.status_code}")

        try:
            body = resp.json()
        except ValueError as exc:
            raise OpenAIUpstreamError(f"{method} {path} returned a non-JSON body") from exc

        if not isinstance(body, dict):
            raise OpenAIUpstreamError(f"{method} {path} returned an unexpected body")
        return body

    @staticmethod
    def _require_id(body: dict[str, Any], *, what: str) -> str:
        value = body.get("id")
        if not isinstance(value, str) or not value:
            raise OpenAIUpstreamError(f"{what} response did not include an id")
        return value

    async def chat_completion(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str | None:
        """Return the first choice's content, or None when the API returned no content."""

        payload: dict[str, Any] = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        body = await self._request("POST", "/chat/completions", json=payload)

        try:
            content = body["choices"][0]["message"].get("content")
        except (KeyError, IndexError, TypeError, AttributeError) as exc:
            raise OpenAIUpstreamError("chat completion response had no choices") from exc

        if content is not None and not isinstance(content, str):
            raise OpenAIUpstreamError("chat completion content was not text")
        return content

    async def upload_file(
        self,
        *,
        filename: str,
        content: bytes,
        content_type: str | None = None,
        purpose: str = "assistants",
    ) -> str:
        files = {"file": (filename, content, content_type or "application/octet-stream")}
        body = await self._request("POST", "/files", files=files, data={"purpose": purpose})
        return self._require_id(body, what="file upload")

    async def create_thread(self) -> str:
        body = await self._request("POST", "/threads", beta=True, json={})
        return self._require_id(body, what="thread")

    async def create_message(self, *, thread_id: str, content: str, file_id: str) -> str:
        payload = {
            "role": "user",
            "content": content,
            "attachments": [{"file_id": file_id, "tools": [{"type": "file_search"}]}],
        }
        body = await self._request(
            "POST", f"/threads/{thread_id}/messages", beta=True, json=payload
        )
        return self._require_id(body, what="message")

    async def create_run(self, *, thread_id: str, assistant_id: str) -> str:
        body = await self._request(
            "POST", f"/threads/{thread_id}/runs", beta=True, json={"assistant_id": assistant_id}
        )
        return self._require_id(body, what="run")

    async def retrieve_run_status(self, *, thread_id: str, run_id: str) -> str:
        body = await self._request("GET", f"/threads/{thread_id}/runs/{run_id}", beta=True)
        status = body.get("status")
        if not isinstance(status, str):
            raise OpenAIUpstreamError("run response did not include a status")
        return status

    async def list_messages(self, *, thread_id: str) -> list[dict[str, Any]]:
        """Return thread messages in provider order (newest first)."""

        body = await self._request("GET", f"/threads/{thread_id}/messages", beta=True)
        data = body.get("data")
        if not isinstance(data, list):
            raise OpenAIUpstreamError("message list response did not include data")
        return [m for m in data if isinstance(m, dict)]
