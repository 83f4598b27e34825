"""Jury mode routes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from vibeflow.models.jury import AnalyzeRequest, AnalyzeResponse, EvaluateRequest, EvaluateResponse
from vibeflow.routes.admission import rate_limited
from vibeflow.services.jury import analyze_project, evaluate_answers
from vibeflow.services.llm_client import LLMClient, UpstreamError, get_llm_client
from vibeflow.services.rate_limiter import RateGovernor, get_rate_governor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jury")


def _upstream_failure(error: str, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": error, "details": str(exc)})


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    req: AnalyzeRequest,
    request: Request,
    governor: RateGovernor = Depends(get_rate_governor),
    llm: LLMClient | None = Depends(get_llm_client),
):
    """Generate metrics, a summary and 10 questions from a project digest."""
    if limited := rate_limited(governor, request):
        return limited

    if not req.project_digest:
        return JSONResponse(status_code=400, content={"error": "project_digest is required"})

    if llm is None:
        return _upstream_failure("Analysis failed", RuntimeError("LLM provider not configured"))

    try:
        return await analyze_project(llm, req.project_digest)
    except UpstreamError as e:
        logger.error(f"Analyze error: {e}")
        return _upstream_failure("Analysis failed", e)


@router.post("/evaluate", response_model=EvaluateResponse)
async def evaluate(
    req: EvaluateRequest,
    request: Request,
    governor: RateGovernor = Depends(get_rate_governor),
    llm: LLMClient | None = Depends(get_llm_client),
):
    """Score the submitted answers and point out grey areas."""
    if limited := rate_limited(governor, request):
        return limited

    if not req.project_summary or req.answers is None:
        return JSONResponse(
            status_code=400, content={"error": "project_summary and answers are required"}
        )

    if llm is None:
        return _upstream_failure("Evaluation failed", RuntimeError("LLM provider not configured"))

    try:
        return await evaluate_answers(llm, req.project_summary, req.answers)
    except UpstreamError as e:
        logger.error(f"Evaluate error: {e}")
        return _upstream_failure("Evaluation failed", e)
