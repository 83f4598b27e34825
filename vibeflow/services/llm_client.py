"""LLM provider clients.

Two providers share one small interface: ``complete`` sends a single prompt,
``chat`` sends a message history. Both return the model's raw text; the JSON
helpers below turn fenced or bare JSON text into Python objects.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
import threading
from collections.abc import Awaitable
from typing import Any, Protocol, TypeVar

import anthropic
import httpx

from vibeflow.config import Settings, get_settings

logger = logging.getLogger(__name__)

DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-20250514"
DEFAULT_CHAT_MODEL = "deepseek-chat"

_FENCE = re.compile(r"```(?:json)?\n?|\n?```")

T = TypeVar("T")

_client: LLMClient | None = None
_client_lock = threading.Lock()


class UpstreamError(RuntimeError):
    """The provider failed, timed out, or answered with something unusable."""


class LLMClient(Protocol):
    async def complete(self, prompt: str, max_tokens: int = 4096) -> str: ...

    async def chat(self, messages: list[dict[str, str]], max_tokens: int = 2048) -> str: ...


async def with_deadline(call: Awaitable[T], timeout: float, what: str) -> T:
    """Await ``call``, cancelling it once ``timeout`` seconds have passed."""
    try:
        return await asyncio.wait_for(call, timeout=timeout)
    except asyncio.TimeoutError as e:
        raise UpstreamError(f"{what} timed out after {timeout:g}s") from e


def strip_code_fences(text: str) -> str:
    return _FENCE.sub("", text).strip()


def parse_json_response(text: str) -> Any:
    """Parse a model response as JSON, ignoring markdown code fences."""
    cleaned = strip_code_fences(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.debug(f"Raw model response: {text[:500]}")
        raise UpstreamError(f"Model response is not valid JSON: {e}") from e


class AnthropicClient:
    """Wrapper around the Anthropic SDK."""

    def __init__(self, api_key: str, model: str = DEFAULT_ANTHROPIC_MODEL, timeout: float = 60.0):
        self.client = anthropic.AsyncAnthropic(api_key=api_key)
        self.model = model
        self.timeout = timeout

    async def _create(self, messages: list[dict[str, str]], max_tokens: int, system: str | None) -> str:
        kwargs: dict[str, Any] = {}
        if system:
            kwargs["system"] = system
        try:
            message = await with_deadline(
                self.client.messages.create(
                    model=self.model,
                    max_tokens=max_tokens,
                    messages=messages,
                    **kwargs,
                ),
                self.timeout,
                "Anthropic request",
            )
        except anthropic.APIError as e:
            logger.error(f"Anthropic API error: {e}")
            raise UpstreamError(f"Anthropic API error: {e}") from e

        text = ""
        for block in message.content:
            if block.type == "text":
                text += block.text
        return text.strip()

    async def complete(self, prompt: str, max_tokens: int = 4096) -> str:
        return await self._create([{"role": "user", "content": prompt}], max_tokens, None)

    async def chat(self, messages: list[dict[str, str]], max_tokens: int = 2048) -> str:
        # The Messages API takes system text separately from the turns.
        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        turns = [m for m in messages if m["role"] != "system"]
        return await self._create(turns, max_tokens, system or None)


class ChatCompletionsClient:
    """OpenAI-compatible ``/chat/completions`` endpoint (DeepSeek, OpenRouter)."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str = DEFAULT_CHAT_MODEL,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self._transport = transport

    async def _post(self, messages: list[dict[str, str]], max_tokens: int) -> str:
        payload = {"model": self.model, "messages": messages, "max_tokens": max_tokens}
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "X-Title": "VibeFlow",
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                resp = await client.post(
                    f"{self.base_url}/chat/completions", json=payload, headers=headers
                )
                resp.raise_for_status()
                data = resp.json()
            except httpx.HTTPStatusError as e:
                logger.error(f"Chat completions HTTP error: {e}")
                raise UpstreamError(
                    f"Provider error: {e.response.status_code} {e.response.text[:200]}"
                ) from e
            except httpx.TimeoutException as e:
                raise UpstreamError(f"Provider request timed out after {self.timeout:g}s") from e
            except (httpx.HTTPError, ValueError) as e:
                logger.error(f"Chat completions request failed: {e}")
                raise UpstreamError(f"Provider request failed: {e}") from e

        choices = data.get("choices") or [{}]
        content = (choices[0].get("message") or {}).get("content")
        if not content:
            raise UpstreamError("Provider returned an empty response.")
        return content.strip()

    async def complete(self, prompt: str, max_tokens: int = 4096) -> str:
        return await self.chat([{"role": "user", "content": prompt}], max_tokens)

    async def chat(self, messages: list[dict[str, str]], max_tokens: int = 2048) -> str:
        return await with_deadline(self._post(messages, max_tokens), self.timeout, "Provider request")


def build_llm_client(settings: Settings) -> LLMClient | None:
    """Build the configured provider client, or None when it has no API key."""
    if settings.provider == "chat-completions":
        if not settings.chat_api_key:
            logger.warning("No chat completions API key found. Jury features will be unavailable.")
            return None
        return ChatCompletionsClient(
            api_key=settings.chat_api_key,
            base_url=settings.chat_base_url,
            model=settings.model or DEFAULT_CHAT_MODEL,
            timeout=settings.request_timeout,
        )

    if settings.provider != "anthropic":
        logger.warning(f"Unknown provider {settings.provider!r}, falling back to anthropic")
    if not settings.anthropic_api_key:
        logger.warning("No Anthropic API key found. Jury features will be unavailable.")
        return None
    return AnthropicClient(
        api_key=settings.anthropic_api_key,
        model=settings.model or DEFAULT_ANTHROPIC_MODEL,
        timeout=settings.request_timeout,
    )


def get_llm_client() -> LLMClient | None:
    """Get or create the global provider client.

    Returns None if no API key is configured.
    """
    global _client
    if _client is None:
        with _client_lock:
            if _client is None:
                _client = build_llm_client(get_settings())
    return _client
