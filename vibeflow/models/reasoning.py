"""Reasoning chat data models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from vibeflow.models.project import LineStat


class ChatMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


class ProjectOverview(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_files: int
    total_lines: int
    top_file: LineStat | None = None


class ChatRequest(BaseModel):
    messages: list[ChatMessage]
    project: ProjectOverview | None = None


class ChatResponse(BaseModel):
    reply: str
    fallback: bool = False
