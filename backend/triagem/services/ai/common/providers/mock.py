"""Mock provider: deterministic responses for tests and local runs."""

from __future__ import annotations

import json
import time
from typing import Any

from .base import BaseProvider, ProviderResult

DEFAULT_MOCK_PAYLOAD: dict[str, Any] = {
    "intent": "OTHER",
    "confidence": 0.5,
    "entities": [],
    "should_reply": True,
    "reply_hint": "Responder de forma breve e perguntar como pode ajudar.",
}


class MockProvider(BaseProvider):
    name = "mock"

    def __init__(self, payload: dict[str, Any] | None = None) -> None:
        self._payload = dict(payload) if payload is not None else dict(DEFAULT_MOCK_PAYLOAD)

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
        t0 = time.monotonic()
        text = json.dumps(self._payload, ensure_ascii=False)
        elapsed = (time.monotonic() - t0) * 1000
        return ProviderResult(
            raw_text=text,
            model=model or "mock-v1",
            provider=self.name,
            prompt_tokens=len(prompt.split()),
            completion_tokens=len(text.split()),
            latency_ms=round(elapsed, 2),
        )
