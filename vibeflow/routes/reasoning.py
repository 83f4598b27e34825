"""Reasoning chat routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from vibeflow.models.reasoning import ChatRequest, ChatResponse
from vibeflow.routes.admission import rate_limited
from vibeflow.services.llm_client import LLMClient, get_llm_client
from vibeflow.services.rate_limiter import RateGovernor, get_rate_governor
from vibeflow.services.reasoning import reply

router = APIRouter(prefix="/reasoning")


@router.post("/chat", response_model=ChatResponse)
async def chat(
    req: ChatRequest,
    request: Request,
    governor: RateGovernor = Depends(get_rate_governor),
    llm: LLMClient | None = Depends(get_llm_client),
):
    """Answer a question about the project, falling back to a local summary."""
    if not any(m.role == "user" for m in req.messages):
        raise HTTPException(status_code=400, detail="At least one user message is required.")

    # Only provider calls count against the limits.
    if llm is not None and (limited := rate_limited(governor, request)):
        return limited
    return await reply(llm, req)
