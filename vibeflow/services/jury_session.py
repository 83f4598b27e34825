"""Client side of jury mode: the HTTP client and the session state machine.

A session moves ``idle -> analyzing -> questions -> evaluating -> result``.
A failed call rolls back to the stage before it (``idle`` or ``questions``)
with the error kept on the session and the entered answers untouched.

Every external call also starts a short cooldown, independent of the
server's rate limits, during which no new call is started.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from vibeflow.config import get_settings
from vibeflow.models.jury import AnalyzeResponse, Answer, EvaluateResponse, JuryStage
from vibeflow.models.project import ProjectDigest

logger = logging.getLogger(__name__)

COOLDOWN_SECONDS = 7.0
REQUEST_TIMEOUT = 90.0


class JuryApiError(RuntimeError):
    """A jury endpoint call failed."""


class JuryApiClient:
    """Calls the ``/jury`` endpoints of a VibeFlow server."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or get_settings().jury_api_url).rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _post(self, path: str, payload: dict[str, Any], label: str) -> Any:
        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self._transport
        ) as client:
            try:
                resp = await client.post(path, json=payload)
            except httpx.HTTPError as e:
                raise JuryApiError(f"{label} failed: {e}") from e

        if resp.is_error:
            message = f"{label} failed: {resp.status_code} {resp.reason_phrase}"
            try:
                detail = resp.json().get("error")
            except ValueError:
                detail = None
            if detail:
                message = f"{message} ({detail})"
            raise JuryApiError(message)

        try:
            return resp.json()
        except ValueError as e:
            raise JuryApiError(f"{label} failed: response is not JSON") from e

    async def analyze(self, project_digest: str) -> AnalyzeResponse:
        data = await self._post("/jury/analyze", {"project_digest": project_digest}, "Analysis")
        try:
            return AnalyzeResponse.model_validate(data)
        except ValidationError as e:
            raise JuryApiError(f"Analysis failed: unexpected response ({e})") from e

    async def evaluate(self, project_summary: str, answers: list[Answer]) -> EvaluateResponse:
        payload = {
            "project_summary": project_summary,
            "answers": [a.model_dump() for a in answers],
        }
        data = await self._post("/jury/evaluate", payload, "Evaluation")
        try:
            return EvaluateResponse.model_validate(data)
        except ValidationError as e:
            raise JuryApiError(f"Evaluation failed: unexpected response ({e})") from e


class JurySession:
    """One user's pass through jury mode."""

    def __init__(
        self,
        api: JuryApiClient,
        digest: ProjectDigest | None = None,
        cooldown_seconds: float = COOLDOWN_SECONDS,
    ):
        self.api = api
        self.digest = digest
        self.cooldown_seconds = cooldown_seconds
        self.stage = JuryStage.IDLE
        self.error: str | None = None
        self.disclaimer_acknowledged = False
        self.cooldown = False
        self.analysis: AnalyzeResponse | None = None
        self.answers: list[str] = []
        self.result: EvaluateResponse | None = None
        self._cooldown_handle: asyncio.TimerHandle | None = None

    def acknowledge_disclaimer(self) -> None:
        self.disclaimer_acknowledged = True

    @property
    def can_begin(self) -> bool:
        return (
            self.stage is JuryStage.IDLE
            and self.digest is not None
            and self.disclaimer_acknowledged
            and not self.cooldown
        )

    @property
    def all_answered(self) -> bool:
        return bool(self.answers) and all(a.strip() for a in self.answers)

    def _start_cooldown(self) -> None:
        self.cooldown = True
        if self._cooldown_handle is not None:
            self._cooldown_handle.cancel()
        loop = asyncio.get_running_loop()
        self._cooldown_handle = loop.call_later(self.cooldown_seconds, self._end_cooldown)

    def _end_cooldown(self) -> None:
        self.cooldown = False
        self._cooldown_handle = None

    async def begin(self) -> bool:
        """Request questions for the current digest. Returns False if nothing happened."""
        if not self.can_begin:
            return False

        self.stage = JuryStage.ANALYZING
        self.error = None
        self._start_cooldown()
        try:
            analysis = await self.api.analyze(self.digest.digest)
        except JuryApiError as e:
            logger.warning(f"Jury analysis failed: {e}")
            self.error = str(e)
            self.stage = JuryStage.IDLE
            return False

        self.analysis = analysis
        self.answers = ["" for _ in analysis.questions]
        self.stage = JuryStage.QUESTIONS
        return True

    def set_answer(self, index: int, text: str) -> None:
        if self.stage is not JuryStage.QUESTIONS or not 0 <= index < len(self.answers):
            return
        self.answers[index] = text

    async def submit_answers(self) -> bool:
        """Send the answers for scoring. Returns False if nothing happened."""
        if self.stage is not JuryStage.QUESTIONS or self.cooldown:
            return False
        if not self.all_answered:
            self.error = "Please answer every question before submitting."
            return False

        self.stage = JuryStage.EVALUATING
        self.error = None
        self._start_cooldown()
        answers = [
            Answer(question=q, answer=a) for q, a in zip(self.analysis.questions, self.answers)
        ]
        try:
            result = await self.api.evaluate(self.analysis.summary, answers)
        except JuryApiError as e:
            logger.warning(f"Jury evaluation failed: {e}")
            self.error = str(e)
            self.stage = JuryStage.QUESTIONS
            return False

        self.result = result
        self.stage = JuryStage.RESULT
        return True
