"""Tests for the reasoning chat endpoint."""

from __future__ import annotations

from fastapi.testclient import TestClient

from tests._fixtures.fake_llm import FakeLLM, failing_llm
from vibeflow.server import create_app
from vibeflow.services.llm_client import get_llm_client
from vibeflow.services.rate_limiter import RateGovernor, get_rate_governor


def _client(llm, governor: RateGovernor | None = None) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_llm_client] = lambda: llm
    governor = governor if governor is not None else RateGovernor()
    app.dependency_overrides[get_rate_governor] = lambda: governor
    return TestClient(app)


def test_chat_returns_model_reply() -> None:
    response = _client(FakeLLM(["Hello there."])).post(
        "/reasoning/chat", json={"messages": [{"role": "user", "content": "Hi"}]}
    )

    assert response.status_code == 200
    assert response.json() == {"reply": "Hello there.", "fallback": False}


def test_chat_falls_back_with_project_context() -> None:
    payload = {
        "messages": [{"role": "user", "content": "Explain"}],
        "project": {"totalFiles": 3, "totalLines": 30, "topFile": {"path": "main.py", "lines": 20}},
    }

    response = _client(failing_llm()).post("/reasoning/chat", json=payload)

    assert response.status_code == 200
    data = response.json()
    assert data["fallback"] is True
    assert "main.py leads with 20 lines" in data["reply"]


def test_chat_requires_user_message() -> None:
    response = _client(FakeLLM()).post(
        "/reasoning/chat", json={"messages": [{"role": "system", "content": "x"}]}
    )
    assert response.status_code == 400


def test_chat_is_rate_limited() -> None:
    client = _client(FakeLLM(["one"]), RateGovernor(per_minute=1))
    payload = {"messages": [{"role": "user", "content": "Hi"}]}

    assert client.post("/reasoning/chat", json=payload).status_code == 200
    assert client.post("/reasoning/chat", json=payload).status_code == 429
