"""OpenRouter completion client (OpenAI-compatible SDK)."""
from __future__ import annotations

import time
from typing import Any

from research_agent.config import Settings
from research_agent.exceptions import CapabilityUnavailable
from research_agent.models.research import CompletionResult
from research_agent.services import logger as log_service


class CompletionClient:
    """One blocking chat completion per call; no retries, no streaming."""

    def __init__(
        self,
        api_key: str,
        *,
        model: str,
        base_url: str = "https://openrouter.ai/api/v1",
        timeout: float = 60.0,
        openai_client: Any | None = None,
    ):
        self.api_key = api_key.strip()
        self.model = model
        self.base_url = base_url.strip() or "https://openrouter.ai/api/v1"
        self.timeout = timeout
        self._client = openai_client

    @classmethod
    def from_settings(cls, settings: Settings) -> "CompletionClient":
        return cls(
            settings.openrouter_api_key,
            model=settings.active_model,
            base_url=settings.openrouter_base_url,
            timeout=settings.llm_timeout_seconds,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.api_key) or self._client is not None

    def _get_client(self) -> Any:
        if self._client is None:
            from openai import AsyncOpenAI

            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    @staticmethod
    def _temperature_for_model(model: str, temperature: float) -> float:
        # Some OpenAI GPT-5-compatible gateways reject anything but temperature=1.
        if "gpt-5" in (model or "").lower():
            return 1
        return temperature

    async def complete(
        self,
        *,
        system: str,
        user: str,
        max_tokens: int,
        temperature: float,
        caller: str = "completion",
    ) -> CompletionResult:
        if not self.enabled:
            raise CapabilityUnavailable("OPENROUTER_API_KEY is not configured")

        t0 = time.monotonic()
        try:
            response = await self._get_client().chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                max_tokens=max_tokens,
                temperature=self._temperature_for_model(self.model, temperature),
            )
        except Exception as e:
            log_service.log_llm_call(
                model=self.model,
                caller=caller,
                duration_ms=int((time.monotonic() - t0) * 1000),
                status="error",
                error=str(e) or e.__class__.__name__,
            )
            raise

        result = self._from_openai_response(response, self.model)
        log_service.log_llm_call(
            model=result.model,
            caller=caller,
            input_tokens=result.input_tokens,
            output_tokens=result.output_tokens,
            duration_ms=int((time.monotonic() - t0) * 1000),
        )
        return result

    @staticmethod
    def _from_openai_response(response: Any, model: str) -> CompletionResult:
        choices = getattr(response, "choices", None) or []
        text = ""
        if choices:
            message = getattr(choices[0], "message", None)
            text = getattr(message, "content", None) or ""

        usage = getattr(response, "usage", None)
        return CompletionResult(
            text=text,
            model=getattr(response, "model", None) or model,
            input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            output_tokens=getattr(usage, "completion_tokens", 0) or 0,
        )
