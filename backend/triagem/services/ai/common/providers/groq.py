"""Groq provider (OpenAI-compatible API, JSON mode)."""

from __future__ import annotations

import logging
import time
from typing import Any

from .base import BaseProvider, ProviderResult, schema_instructions

logger = logging.getLogger(__name__)


class GroqProvider(BaseProvider):
    name = "groq"

    def __init__(self, api_key: str) -> None:
        self._api_key = api_key

    async def generate(
        self,
        prompt: str,
        *,
        response_schema: dict[str, Any] | None = None,
        model: str = "",
        temperature: float | None = None,
        max_tokens: int = 1024,
        timeout_seconds: float = 8.0,
    ) -> ProviderResult:
        import httpx

        model = model or "llama-3.1-70b"
        t0 = time.monotonic()

        payload: dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": 0.0 if temperature is None else temperature,
            "messages": [{"role": "user", "content": schema_instructions(prompt, response_schema)}],
        }
        if response_schema:
            payload["response_format"] = {"type": "json_object"}

        async with httpx.AsyncClient(timeout=timeout_seconds) as client:
            resp = await client.post(
                "https://api.groq.com/openai/v1/chat/completions",
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
        text = choice["message"]["content"]
        usage = data.get("usage", {})

        return ProviderResult(
            raw_text=text,
            model=model,
            provider=self.name,
            prompt_tokens=usage.get("prompt_tokens", 0),
            completion_tokens=usage.get("completion_tokens", 0),
            latency_ms=round(elapsed, 2),
        )
