from __future__ import annotations

import pytest

from tests.resumes._fakes import FakeOpenAIClient, SleepRecorder


@pytest.fixture(autouse=True)
def _set_test_openai_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("OPENAI_ASSISTANT_ID", "asst_test")
    monkeypatch.setenv("RUN_POLL_INTERVAL_SECONDS", "0")
    # Settings and the OpenAI client are cached; clear so each test sees its own env.
    from app.core.llm.deps import reset_openai_client
    from app.core.settings import get_settings

    get_settings.cache_clear()
    reset_openai_client()
    yield
    get_settings.cache_clear()
    reset_openai_client()


@pytest.fixture
def fake_openai() -> FakeOpenAIClient:
    return FakeOpenAIClient()


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def app(fake_openai: FakeOpenAIClient, sleep_recorder: SleepRecorder):
    from app.core.llm.deps import get_openai_client
    from app.main import create_app
    from app.resumes.router import get_run_sleep

    application = create_app()
    application.dependency_overrides[get_openai_client] = lambda: fake_openai
    application.dependency_overrides[get_run_sleep] = lambda: sleep_recorder
    return application


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as c:
        yield c
