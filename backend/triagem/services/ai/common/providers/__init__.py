"""Provider factory: returns the requested provider instance or refuses."""

from __future__ import annotations

import logging

from triagem.core.config import get_settings

from .base import BaseProvider, ProviderNotConfigured, ProviderResult
from .mock import MockProvider

logger = logging.getLogger(__name__)

__all__ = ["get_provider", "BaseProvider", "ProviderNotConfigured", "ProviderResult", "MockProvider"]


def get_provider(provider_name: str) -> BaseProvider:
    """Return a provider instance for *provider_name*.

    Raises ``ProviderNotConfigured`` when the provider is not in the
    allowlist, has no API key, or is unknown. A real provider is never
    silently replaced by ``MockProvider``; only ``"mock"`` returns it.
    """
    settings = get_settings()
    name = provider_name.lower().strip()

    if name not in settings.ai_allowed_providers:
        logger.warning("Provider %r not in allowlist", name)
        raise ProviderNotConfigured(f"provider {name!r} is not allowed")

    if name == "mock":
        return MockProvider()

    if name == "claude":
        if not settings.anthropic_api_key:
            logger.warning("ANTHROPIC_API_KEY not set")
            raise ProviderNotConfigured("ANTHROPIC_API_KEY is not set")
        from .claude import ClaudeProvider

        return ClaudeProvider(api_key=settings.anthropic_api_key)

    if name == "groq":
        if not settings.groq_api_key:
            logger.warning("GROQ_API_KEY not set")
            raise ProviderNotConfigured("GROQ_API_KEY is not set")
        from .groq import GroqProvider

        return GroqProvider(api_key=settings.groq_api_key)

    if name == "openai":
        if not settings.openai_api_key:
            logger.warning("OPENAI_API_KEY not set")
            raise ProviderNotConfigured("OPENAI_API_KEY is not set")
        from .openai import OpenAIProvider

        return OpenAIProvider(api_key=settings.openai_api_key)

    logger.warning("Unknown provider %r", name)
    raise ProviderNotConfigured(f"unknown provider {name!r}")
