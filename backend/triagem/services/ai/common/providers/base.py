"""Abstract base for all generative-model providers."""

from __future__ import annotations

import abc
import json
from dataclasses import dataclass
from typing import Any


class ProviderNotConfigured(Exception):
    """Requested provider is unknown, not allowlisted or has no API key."""


@dataclass(frozen=True)
class ProviderResult:
    """Immutable result returned by every provider."""

    raw_text: str
    model: str
    provider: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    latency_ms: float = 0.0


def schema_instructions(prompt: str, response_schema: dict[str, Any] | None) -> str:
    """Append a JSON-only instruction for providers without native schema support."""
    if not response_schema:
        return prompt
    schema_text = json.dumps(response_schema, ensure_ascii=False)
    return (
        f"{prompt}\n\n"
        "Responda APENAS com um objeto JSON válido que siga este JSON Schema, sem texto extra:\n"
        f"{schema_text}"
    )


class BaseProvider(abc.ABC):
    """Contract that every provider must implement.

    ``generate`` either returns the model's raw text or raises; callers are
    responsible for parsing and validating it against ``response_schema``.
    """

    name: str = "base"

    @abc.abstractmethod
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
        """Send *prompt* and return a ``ProviderResult``."""
