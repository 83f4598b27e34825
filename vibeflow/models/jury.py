"""Jury mode data models."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class ReliabilityCounts(BaseModel):
    handled: int = 0
    unhandled: int = 0


class CodeMetrics(BaseModel):
    memory_management: float = Field(ge=0, le=10)
    algorithmic_complexity: float = Field(ge=0, le=10)
    runtime_efficiency: float = Field(ge=0, le=10)
    security: Literal["Low", "Medium", "High"]
    reliability: ReliabilityCounts
    maintainability: Literal["Good", "Fair", "Poor"]
    scalability: float = Field(ge=0, le=10)


class AnalyzeRequest(BaseModel):
    # Optional so a missing digest can be reported as 400 rather than 422.
    project_digest: str | None = None


class AnalyzeResponse(BaseModel):
    metrics: CodeMetrics
    summary: str
    concepts: list[str]
    questions: list[str]  # 7 conceptual followed by 3 coding questions


class Answer(BaseModel):
    question: str
    answer: str


class EvaluateRequest(BaseModel):
    project_summary: str | None = None
    answers: list[Answer] | None = None


class BeforeAfter(BaseModel):
    before: str
    after: str


class GreyArea(BaseModel):
    topic: str
    micro_lesson: str
    before_after: BeforeAfter


class EvaluateResponse(BaseModel):
    overall_feedback: str
    overall_score: float = Field(ge=0, le=10)
    coding_understanding: float = Field(ge=0, le=10)
    grey_areas: list[GreyArea] = []


class JuryStage(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    QUESTIONS = "questions"
    EVALUATING = "evaluating"
    RESULT = "result"

