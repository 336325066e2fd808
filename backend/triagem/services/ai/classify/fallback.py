"""Model fallback: structured classification for messages no rule matched."""

from __future__ import annotations

import asyncio
import logging
import time

from pydantic import ValidationError

from ..common import router as ai_router
from ..common.json_tools import extract_json_object
from ..common.providers.base import BaseProvider, ProviderNotConfigured, ProviderResult
from .contracts import ClassificationResult, ModelUnavailable, classification_json_schema
from .prompt import build_prompt

logger = logging.getLogger(__name__)

SCOPE = "classify"
DEFAULT_TIMEOUT_SECONDS = 8.0
DEFAULT_MAX_TOKENS = 1024


class ModelFallbackAdapter:
    """Send a message through the prompt template to a structured model call.

    With an explicit *provider* the adapter uses it as-is; otherwise the
    provider, model and timeout are resolved per call through the AI router,
    so configuration changes apply without rebuilding the adapter.

    The adapter validates the output against ``ClassificationResult`` but does
    not enforce cross-field rules; that is the enforcer's job.
    """

    def __init__(
        self,
        provider: BaseProvider | None = None,
        *,
        model: str = "",
        timeout_seconds: float | None = None,
        override_provider: str | None = None,
        override_model: str | None = None,
    ) -> None:
        self._provider = provider
        self._model = model
        self._timeout_seconds = timeout_seconds
        self._override_provider = override_provider
        self._override_model = override_model

    def _resolve(self) -> tuple[BaseProvider, str, float | None, int, float]:
        if self._provider is not None:
            timeout = self._timeout_seconds if self._timeout_seconds is not None else DEFAULT_TIMEOUT_SECONDS
            return self._provider, self._model, None, DEFAULT_MAX_TOKENS, timeout

        try:
            config = ai_router.resolve(
                SCOPE,
                override_provider=self._override_provider,
                override_model=self._override_model,
            )
        except ProviderNotConfigured as exc:
            raise ModelUnavailable(f"provider not configured: {exc}") from exc

        timeout = self._timeout_seconds if self._timeout_seconds is not None else config.timeout_seconds
        return config.provider, config.model, config.temperature, config.max_tokens, timeout

    async def classify(self, text: str) -> ClassificationResult:
        """Classify *text* with the model; raise ``ModelUnavailable`` on any failure."""
        provider, model, temperature, max_tokens, timeout = self._resolve()
        prompt = build_prompt(text)

        t0 = time.monotonic()
        try:
            provider_result: ProviderResult = await asyncio.wait_for(
                provider.generate(
                    prompt,
                    response_schema=classification_json_schema(),
                    model=model,
                    temperature=temperature,
                    max_tokens=max_tokens,
                    timeout_seconds=timeout,
                ),
                timeout=timeout,
            )
        except asyncio.TimeoutError as exc:
            logger.warning("Provider %s timed out after %.1fs", provider.name, timeout)
            raise ModelUnavailable(f"provider {provider.name} timed out after {timeout}s") from exc
        except Exception as exc:
            logger.warning("Provider %s failed: %s", provider.name, exc)
            raise ModelUnavailable(f"provider {provider.name} failed: {exc}") from exc

        latency_ms = round((time.monotonic() - t0) * 1000, 2)

        parsed = extract_json_object(provider_result.raw_text)
        if parsed is None:
            logger.warning("Provider %s returned no JSON object", provider.name)
            raise ModelUnavailable(f"provider {provider.name} returned no JSON object")

        try:
            result = ClassificationResult.model_validate(parsed)
        except ValidationError as exc:
            logger.warning(
                "Provider %s output failed schema validation (%d errors)",
                provider.name,
                exc.error_count(),
            )
            raise ModelUnavailable(f"schema validation failed: {exc.error_count()} error(s)") from exc

        logger.info(
            "Model classified message: intent=%s confidence=%.2f provider=%s model=%s latency_ms=%s",
            result.intent.value,
            result.confidence,
            provider_result.provider,
            provider_result.model,
            latency_ms,
        )
        return result


async def classify_via_model(text: str, adapter: ModelFallbackAdapter | None = None) -> ClassificationResult:
    """Classify *text* through the model fallback with the configured provider."""
    return await (adapter or ModelFallbackAdapter()).classify(text)
