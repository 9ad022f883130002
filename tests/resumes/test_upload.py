from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from tests.resumes._fakes import FakeOpenAIClient, SleepRecorder, text_message

PDF = ("resume.pdf", b"%PDF-1.7\n%fake resume\n", "application/pdf")
GENERIC_500 = {"error": "Failed to process the file"}


def _processing_logs(caplog: pytest.LogCaptureFixture):
    return [r for r in caplog.records if r.name == "app.resume_processing"]


def test_upload_runs_assistant_and_returns_text(
    client: TestClient, fake_openai: FakeOpenAIClient, sleep_recorder: SleepRecorder
) -> None:
    fake_openai.run_statuses = ["queued", "in_progress", "completed"]

    res = client.post("/upload", files={"file": PDF})
    assert res.status_code == 200, res.text
    assert res.json() == {"text": "Anonymized resume", "fileId": "file-123"}

    assert len(fake_openai.calls_to("retrieve_run_status")) == 3
    assert sleep_recorder.calls == [0.0, 0.0]
    assert len(fake_openai.calls_to("list_messages")) == 1

    # Mutating calls happen exactly once and in order.
    names = [name for name, _ in fake_openai.calls]
    assert names == [
        "upload_file",
        "create_thread",
        "create_message",
        "create_run",
        "retrieve_run_status",
        "retrieve_run_status",
        "retrieve_run_status",
        "list_messages",
    ]


def test_upload_passes_file_and_assistant_to_provider(
    client: TestClient, fake_openai: FakeOpenAIClient
) -> None:
    res = client.post("/upload", files={"file": PDF})
    assert res.status_code == 200, res.text

    [upload] = fake_openai.calls_to("upload_file")
    assert upload["filename"] == "resume.pdf"
    assert upload["content"] == PDF[1]
    assert upload["purpose"] == "assistants"

    [message] = fake_openai.calls_to("create_message")
    assert message["thread_id"] == "thread_abc"
    assert message["file_id"] == "file-123"
    assert "anonymize this resume" in message["content"]

    [run] = fake_openai.calls_to("create_run")
    assert run == {"thread_id": "thread_abc", "assistant_id": "asst_test"}


def test_upload_uses_configured_poll_interval(
    client: TestClient,
    fake_openai: FakeOpenAIClient,
    sleep_recorder: SleepRecorder,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("RUN_POLL_INTERVAL_SECONDS", "1.0")
    from app.core.settings import get_settings

    get_settings.cache_clear()
    fake_openai.run_statuses = ["in_progress", "completed"]

    res = client.post("/upload", files={"file": PDF})
    assert res.status_code == 200, res.text
    assert sleep_recorder.calls == [1.0]


def test_upload_without_file_returns_400(
    client: TestClient, fake_openai: FakeOpenAIClient
) -> None:
    res = client.post("/upload", data={"note": "no file here"})
    assert res.status_code == 400
    assert res.json() == {"error": "No file provided"}
    assert fake_openai.calls == []


def test_upload_with_empty_body_returns_400(client: TestClient) -> None:
    res = client.post("/upload")
    assert res.status_code == 400
    assert res.json() == {"error": "No file provided"}


def test_upload_terminal_failure_fails_without_sleeping(
    client: TestClient,
    fake_openai: FakeOpenAIClient,
    sleep_recorder: SleepRecorder,
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level("INFO", logger="app.resume_processing")
    fake_openai.run_statuses = ["failed"]

    res = client.post("/upload", files={"file": PDF})
    assert res.status_code == 500
    assert res.json() == GENERIC_500

    assert sleep_recorder.calls == []
    assert len(fake_openai.calls_to("retrieve_run_status")) == 1
    assert fake_openai.calls_to("list_messages") == []

    [record] = _processing_logs(caplog)
    assert "failed" in record.getMessage()
    assert record.__dict__["error_category"] == "run_status"


@pytest.mark.parametrize("status", ["cancelled", "expired", "requires_action", "incomplete"])
def test_upload_other_terminal_statuses_fail(
    client: TestClient, fake_openai: FakeOpenAIClient, status: str
) -> None:
    fake_openai.run_statuses = ["queued", status]
    res = client.post("/upload", files={"file": PDF})
    assert res.status_code == 500
    assert res.json() == GENERIC_500


def test_upload_without_assistant_reply_returns_500(
    client: TestClient, fake_openai: FakeOpenAIClient, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level("INFO", logger="app.resume_processing")
    fake_openai.messages = [text_message("user", "Please anonymize this resume")]

    res = client.post("/upload", files={"file": PDF})
    assert res.status_code == 500
    assert res.json() == GENERIC_500

    [record] = _processing_logs(caplog)
    assert "No response from assistant" in record.getMessage()


def test_upload_non_text_reply_returns_500(
    client: TestClient, fake_openai: FakeOpenAIClient
) -> None:
    fake_openai.messages = [
        {"role": "assistant", "content": [{"type": "image_file", "image_file": {"file_id": "f"}}]}
    ]
    res = client.post("/upload", files={"file": PDF})
    assert res.status_code == 500
    assert res.json() == GENERIC_500


def test_upload_gives_up_after_max_polls(
    client: TestClient,
    fake_openai: FakeOpenAIClient,
    sleep_recorder: SleepRecorder,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    monkeypatch.setenv("RUN_MAX_POLLS", "5")
    from app.core.settings import get_settings

    get_settings.cache_clear()
    caplog.set_level("INFO", logger="app.resume_processing")
    fake_openai.run_statuses = ["in_progress"]

    res = client.post("/upload", files={"file": PDF})
    assert res.status_code == 500
    assert res.json() == GENERIC_500

    assert len(fake_openai.calls_to("retrieve_run_status")) == 5
    assert len(sleep_recorder.calls) == 4
    [record] = _processing_logs(caplog)
    assert record.__dict__["error_category"] == "run_timeout"


def test_upload_without_assistant_id_returns_500(
    client: TestClient, fake_openai: FakeOpenAIClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("OPENAI_ASSISTANT_ID")
    from app.core.settings import get_settings

    get_settings.cache_clear()

    res = client.post("/upload", files={"file": PDF})
    assert res.status_code == 500
    assert res.json() == GENERIC_500
    assert fake_openai.calls == []


def test_upload_without_api_key_returns_500(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OPENAI_API_KEY")
    from app.core.settings import get_settings
    from app.main import create_app

    get_settings.cache_clear()

    with TestClient(create_app()) as client:
        res = client.post("/upload", files={"file": PDF})

    assert res.status_code == 500
    assert res.json() == GENERIC_500


def test_upload_rejects_oversized_file(
    client: TestClient, fake_openai: FakeOpenAIClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("MAX_RESUME_UPLOAD_MB", "1")
    from app.core.settings import get_settings

    get_settings.cache_clear()

    big = ("big.txt", b"x" * (1024 * 1024 + 1), "text/plain")
    res = client.post("/upload", files={"file": big})
    assert res.status_code == 500
    assert res.json() == GENERIC_500
    assert fake_openai.calls_to("upload_file") == []


def test_failures_are_counted_by_category(
    client: TestClient, fake_openai: FakeOpenAIClient
) -> None:
    from prometheus_client import REGISTRY

    labels = {"endpoint": "/upload", "category": "run_status"}
    before = REGISTRY.get_sample_value("resume_processing_failures_total", labels) or 0.0

    fake_openai.run_statuses = ["failed"]
    res = client.post("/upload", files={"file": PDF})
    assert res.status_code == 500
    assert REGISTRY.get_sample_value("resume_processing_failures_total", labels) == before + 1


def test_upload_stops_polling_when_client_disconnects(
    client: TestClient,
    fake_openai: FakeOpenAIClient,
    sleep_recorder: SleepRecorder,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    async def disconnected(self) -> bool:
        return True

    monkeypatch.setattr(Request, "is_disconnected", disconnected)
    caplog.set_level("INFO", logger="app.resume_processing")
    fake_openai.run_statuses = ["queued", "completed"]

    res = client.post("/upload", files={"file": PDF})
    assert res.status_code == 500
    assert res.json() == GENERIC_500

    assert len(fake_openai.calls_to("retrieve_run_status")) == 1
    assert sleep_recorder.calls == []
    assert fake_openai.calls_to("list_messages") == []
    [record] = _processing_logs(caplog)
    assert record.__dict__["error_category"] == "run_cancelled"
