"""Client helper for the /upload endpoint."""

from __future__ import annotations

import os
from typing import BinaryIO

import httpx


class ResumeUploadError(Exception):
    """Raised when /upload answers with a non-success status or an unusable body."""


def _file_part(file: BinaryIO, filename: str | None) -> dict[str, tuple[str, BinaryIO]]:
    name = filename or os.path.basename(getattr(file, "name", "") or "") or "resume"
    return {"file": (name, file)}


def _file_id_from(response: httpx.Response) -> str:
    if not response.is_success:
        raise ResumeUploadError(f"Failed to upload file: {response.reason_phrase}")
    try:
        file_id = response.json()["fileId"]
    except (ValueError, KeyError, TypeError) as exc:
        raise ResumeUploadError("Upload response did not include a file id") from exc
    return str(file_id)


def upload_resume(
    file: BinaryIO,
    *,
    base_url: str,
    filename: str | None = None,
    http_client: httpx.Client | None = None,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """POST `file` as multipart field `file` to `{base_url}/upload` and return its file id.

    /upload holds the request open until the assistant run finishes, so the client
    built here has no timeout. `transport` only applies to that built client.
    """

    url = f"{base_url.rstrip('/')}/upload"
    if http_client is not None:
        return _file_id_from(http_client.post(url, files=_file_part(file, filename)))
    with httpx.Client(timeout=None, transport=transport) as client:
        return _file_id_from(client.post(url, files=_file_part(file, filename)))


async def upload_resume_async(
    file: BinaryIO,
    *,
    base_url: str,
    filename: str | None = None,
    http_client: httpx.AsyncClient | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    url = f"{base_url.rstrip('/')}/upload"
    if http_client is not None:
        return _file_id_from(await http_client.post(url, files=_file_part(file, filename)))
    async with httpx.AsyncClient(timeout=None, transport=transport) as client:
        return _file_id_from(await client.post(url, files=_file_part(file, filename)))
