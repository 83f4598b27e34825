"""Jury mode: question generation and answer evaluation via the LLM."""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from vibeflow.models.jury import AnalyzeResponse, Answer, EvaluateResponse
from vibeflow.services.llm_client import LLMClient, UpstreamError, parse_json_response

logger = logging.getLogger(__name__)

QUESTION_COUNT = 10
MAX_GREY_AREAS = 3


def build_analyze_prompt(project_digest: str) -> str:
    return f"""You are Jury Mode of VibeFlow, an AI mentor.
Analyze the following project digest and return JSON with:

1) "metrics" - code quality metrics object with:
   - "memory_management": number 0-10 (memory efficiency, 10=best)
   - "algorithmic_complexity": number 0-10 (time complexity, 0=O(1), 10=O(n!))
   - "runtime_efficiency": number 0-10 (performance, 10=best)
   - "security": "Low" | "Medium" | "High" (risk level)
   - "reliability": {{ "handled": number, "unhandled": number }} (error handling counts)
   - "maintainability": "Good" | "Fair" | "Poor" (code quality)
   - "scalability": number 0-10 (modularity and extensibility, 10=best)

2) "summary" - 5-sentence beginner-friendly overview.

3) "concepts" - list of main topics (e.g., loops, async, OOP).

4) "questions" - EXACTLY {QUESTION_COUNT} questions total:
   - First 7 questions: conceptual/viva-style questions about the project
   - Last 3 questions: coding questions that require code snippets as answers

PROJECT DIGEST:
{project_digest}

Return ONLY valid JSON matching this structure:
{{
  "metrics": {{
    "memory_management": 0,
    "algorithmic_complexity": 0,
    "runtime_efficiency": 0,
    "security": "Low",
    "reliability": {{ "handled": 0, "unhandled": 0 }},
    "maintainability": "Good",
    "scalability": 0
  }},
  "summary": "string",
  "concepts": ["string"],
  "questions": ["string"]
}}"""


def build_evaluate_prompt(project_summary: str, answers: list[Answer]) -> str:
    qa_list = json.dumps([a.model_dump() for a in answers], indent=2)
    return f"""You are the Jury AI in VibeFlow.
Evaluate each Q&A pair and return:
1) "overall_feedback" - 3 sentences about strengths + improvements.
2) "overall_score" - score out of 10 based on answer quality (number 0-10).
3) "coding_understanding" - score out of 10 for coding knowledge (number 0-10).
4) "grey_areas" - up to {MAX_GREY_AREAS} items with:
   - "topic"
   - "micro_lesson" (2 sentences)
   - "before_after" with exactly 4 total lines (2 "before", 2 "after").

PROJECT SUMMARY:
{project_summary}

Q&A LIST:
{qa_list}

Return ONLY valid JSON matching this structure:
{{
  "overall_feedback": "string",
  "overall_score": 0,
  "coding_understanding": 0,
  "grey_areas": [
    {{
      "topic": "string",
      "micro_lesson": "string",
      "before_after": {{
        "before": "line1\\nline2",
        "after": "line1\\nline2"
      }}
    }}
  ]
}}"""


async def analyze_project(client: LLMClient, project_digest: str) -> AnalyzeResponse:
    """Ask the model for metrics, a summary and comprehension questions."""
    logger.info("Sending analyze request to the LLM provider")
    text = await client.complete(build_analyze_prompt(project_digest))
    parsed = parse_json_response(text)
    try:
        result = AnalyzeResponse.model_validate(parsed)
    except ValidationError as e:
        logger.error(f"Analyze response failed validation: {e}")
        raise UpstreamError(f"Analyze response failed validation: {e}") from e

    if len(result.questions) != QUESTION_COUNT:
        logger.warning(f"Model returned {len(result.questions)} questions, expected {QUESTION_COUNT}")
    return result


async def evaluate_answers(
    client: LLMClient, project_summary: str, answers: list[Answer]
) -> EvaluateResponse:
    """Ask the model to score the answers and flag grey areas."""
    logger.info(f"Sending evaluate request for {len(answers)} answers")
    text = await client.complete(build_evaluate_prompt(project_summary, answers))
    parsed = parse_json_response(text)
    try:
        result = EvaluateResponse.model_validate(parsed)
    except ValidationError as e:
        logger.error(f"Evaluate response failed validation: {e}")
        raise UpstreamError(f"Evaluate response failed validation: {e}") from e

    result.grey_areas = result.grey_areas[:MAX_GREY_AREAS]
    return result
