"""
OpenAI chat completions client used for onboarding profile analysis.

Rate limits, timeouts and 5xx responses are retried with exponential
backoff; any other non-200 response fails on the first attempt.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Protocol

import httpx
import structlog
from freight_portal.core.config import get_settings

logger = structlog.get_logger()


class GPTClientError(Exception):
    """Base exception for GPT client errors."""


class GPTRateLimitError(GPTClientError):
    """OpenAI answered 429."""


class GPTTimeoutError(GPTClientError):
    """The request did not finish within the configured timeout."""


class GPTAPIError(GPTClientError):
    """Non-retryable API error or malformed payload."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass(slots=True)
class GPTResponse:
    content: str
    model: str
    total_tokens: int
    latency_ms: int
    finish_reason: str


class GPTClientProtocol(Protocol):
    async def chat_completion(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.0,
        max_tokens: int = 400,
    ) -> GPTResponse:
        ...


class OpenAIClient:
    """Async OpenAI client; one short-lived httpx client per attempt."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        max_retries: int | None = None,
        timeout_seconds: int | None = None,
        *,
        backoff_base: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self.api_key = api_key or settings.openai_api_key
        self.base_url = (base_url or settings.openai_base_url).rstrip("/")
        self.model = model or settings.openai_model
        self.max_retries = max(1, max_retries if max_retries is not None else settings.gpt_max_retries)
        self.timeout = timeout_seconds if timeout_seconds is not None else settings.gpt_timeout_seconds
        self.backoff_base = backoff_base
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def chat_completion(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.0,
        max_tokens: int = 400,
    ) -> GPTResponse:
        if not self.configured:
            raise GPTClientError("OPENAI_API_KEY not configured")

        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        last_error: GPTClientError = GPTClientError("All retries exhausted")
        for attempt in range(1, self.max_retries + 1):
            try:
                return await self._attempt(payload)
            except (GPTRateLimitError, GPTTimeoutError) as exc:
                last_error = exc
            except GPTAPIError as exc:
                if exc.status_code is None or exc.status_code < 500:
                    raise
                last_error = exc
            except GPTClientError as exc:
                last_error = exc

            await logger.awarning(
                "gpt_attempt_failed",
                attempt=attempt,
                max_retries=self.max_retries,
                error=str(last_error),
            )
            if attempt < self.max_retries:
                await asyncio.sleep(self.backoff_base * 2 ** (attempt - 1))

        raise last_error

    async def _attempt(self, payload: dict[str, Any]) -> GPTResponse:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        started = time.perf_counter()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions", headers=headers, json=payload
                )
        except httpx.TimeoutException as exc:
            raise GPTTimeoutError(f"Request timed out after {self.timeout}s") from exc
        except httpx.RequestError as exc:
            raise GPTClientError(f"Request failed: {exc}") from exc

        latency_ms = int((time.perf_counter() - started) * 1000)
        if response.status_code == 429:
            raise GPTRateLimitError("Rate limited")
        if response.status_code != 200:
            raise GPTAPIError(
                f"API error {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        return self._parse_response(response.json(), latency_ms)

    def _parse_response(self, data: dict[str, Any], latency_ms: int) -> GPTResponse:
        try:
            choice = data["choices"][0]
            content = choice["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise GPTAPIError("Malformed completion payload") from exc

        usage = data.get("usage") or {}
        return GPTResponse(
            content=content or "",
            model=data.get("model", self.model),
            total_tokens=usage.get("total_tokens", 0),
            latency_ms=latency_ms,
            finish_reason=choice.get("finish_reason", "unknown"),
        )
