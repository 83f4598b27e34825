"""Tests for the reasoning chat service."""

from __future__ import annotations

import pytest

from tests._fixtures.fake_llm import FakeLLM, failing_llm
from vibeflow.models.project import LineStat
from vibeflow.models.reasoning import ChatMessage, ChatRequest, ProjectOverview
from vibeflow.services.reasoning import SYSTEM_PROMPT, generate_fallback_response, reply

OVERVIEW = ProjectOverview(total_files=4, total_lines=120, top_file=LineStat(path="src/app.py", lines=80))


def test_fallback_without_project_asks_for_upload() -> None:
    text = generate_fallback_response(None, "What does it do?")
    assert "Upload a folder first" in text
    assert '"What does it do?"' in text


def test_fallback_with_project_mentions_totals_and_top_file() -> None:
    text = generate_fallback_response(OVERVIEW, "Explain")
    assert "4 files and 120 total lines" in text
    assert "src/app.py leads with 80 lines" in text


@pytest.mark.asyncio
async def test_reply_prepends_system_prompt() -> None:
    llm = FakeLLM(["It is a web app."])
    req = ChatRequest(messages=[ChatMessage(role="user", content="What is this?")])

    response = await reply(llm, req)

    assert response.reply == "It is a web app."
    assert not response.fallback
    assert llm.chats[0][0] == {"role": "system", "content": SYSTEM_PROMPT}


@pytest.mark.asyncio
async def test_reply_falls_back_on_provider_error() -> None:
    req = ChatRequest(
        messages=[
            ChatMessage(role="user", content="first"),
            ChatMessage(role="assistant", content="..."),
            ChatMessage(role="user", content="second"),
        ],
        project=OVERVIEW,
    )

    response = await reply(failing_llm(), req)

    assert response.fallback
    assert '"second"' in response.reply


@pytest.mark.asyncio
async def test_reply_without_client_uses_fallback() -> None:
    req = ChatRequest(messages=[ChatMessage(role="user", content="hi")])
    response = await reply(None, req)
    assert response.fallback
