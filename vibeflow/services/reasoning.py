"""Free-form reasoning chat about an uploaded project."""

from __future__ import annotations

import logging

from vibeflow.models.reasoning import ChatMessage, ChatRequest, ChatResponse, ProjectOverview
from vibeflow.services.llm_client import LLMClient, UpstreamError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are VibeFlow, an AI architect who explains codebases succinctly."


def generate_fallback_response(project: ProjectOverview | None, prompt: str) -> str:
    """A local answer for when the provider is unreachable."""
    if project is None:
        return (
            "The AI provider is offline and no project context is loaded yet. "
            f'Upload a folder first, then ask: "{prompt}"'
        )

    lines = [
        "The AI provider is unavailable right now, but here is a quick local insight:",
        f"• Project contains {project.total_files} files and {project.total_lines} total lines.",
    ]
    if project.top_file:
        lines.append(f"• {project.top_file.path} leads with {project.top_file.lines} lines of code.")
    lines.append(f'• You asked: "{prompt}". Try again once an API key is configured.')
    return "\n".join(lines)


def _with_system_prompt(messages: list[ChatMessage]) -> list[dict[str, str]]:
    history = [m.model_dump() for m in messages]
    if not any(m["role"] == "system" for m in history):
        history.insert(0, {"role": "system", "content": SYSTEM_PROMPT})
    return history


async def reply(client: LLMClient | None, req: ChatRequest) -> ChatResponse:
    last_user = next((m.content for m in reversed(req.messages) if m.role == "user"), "")

    if client is None:
        return ChatResponse(reply=generate_fallback_response(req.project, last_user), fallback=True)

    try:
        text = await client.chat(_with_system_prompt(req.messages))
    except UpstreamError as e:
        logger.warning(f"Reasoning chat fell back to a local answer: {e}")
        return ChatResponse(reply=generate_fallback_response(req.project, last_user), fallback=True)

    return ChatResponse(reply=text)
