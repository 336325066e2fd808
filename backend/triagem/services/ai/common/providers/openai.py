"""OpenAI provider (chat completions with structured outputs)."""

from __future__ import annotations

import logging
import time
from typing import Any

from .base import BaseProvider, ProviderResult

logger = logging.getLogger(__name__)

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"


class OpenAIProvider(BaseProvider):
    name = "openai"

    def __init__(self, api_key: str) -> None:
        self._api_key = api_key

    async def generate(
        self,
        prompt: str,
        *,
        response_schema: dict[str, Any] | None = None,
        system_prompt: str | None = None,
        model: str = "",
        temperature: float | None = None,
        max_tokens: int = 1024,
        timeout_seconds: float = 8.0,
    ) -> ProviderResult:
        import httpx

        model = model or "gpt-5-mini"
        t0 = time.monotonic()

        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        payload: dict[str, Any] = {
            "model": model,
            "max_completion_tokens": max_tokens,
            "messages": messages,
        }
        # Reasoning models only accept the default temperature.
        if temperature is not None:
            payload["temperature"] = temperature
        if response_schema:
            payload["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": response_schema.get("title", "response"),
                    "schema": response_schema,
                },
            }

        async with httpx.AsyncClient(timeout=timeout_seconds) as client:
            resp = await client.post(
                OPENAI_CHAT_URL,
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
            )
            resp.raise_for_status()
            data = resp.json()

        elapsed = (time.monotonic() - t0) * 1000
        choice = data["choices"][0]
        text = choice["message"].get("content") or ""
        usage = data.get("usage", {})

        if choice.get("message", {}).get("refusal"):
            logger.warning("OpenAI refused the request (model=%s)", model)

        return ProviderResult(
            raw_text=text,
            model=data.get("model", model),
            provider=self.name,
            prompt_tokens=usage.get("prompt_tokens", 0),
            completion_tokens=usage.get("completion_tokens", 0),
            latency_ms=round(elapsed, 2),
        )
