"""Rate-limit admission shared by the routes that call the LLM provider."""

from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse

from vibeflow.services.rate_limiter import RateGovernor


def client_identity(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def rate_limited(governor: RateGovernor, request: Request) -> JSONResponse | None:
    """Record the request, or return the 429 response if it is not admitted."""
    decision = governor.check(client_identity(request))
    if decision.allowed:
        return None
    return JSONResponse(
        status_code=429,
        content={"error": decision.reason, "retryAfter": decision.retry_after},
        headers={"Retry-After": str(decision.retry_after)},
    )
