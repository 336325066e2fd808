from functools import lru_cache
import json
import os

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

KNOWN_PROVIDERS = ("openai", "claude", "groq", "mock")


def _parse_list_value(value: str) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        raw = value.strip()
        if raw == "":
            return []
        try:
            parsed = json.loads(raw)
            if isinstance(parsed, list):
                return [str(item).strip() for item in parsed if str(item).strip()]
        except ValueError:
            pass
        return [item.strip() for item in raw.split(",") if item.strip()]
    if isinstance(value, list):
        return [str(item).strip() for item in value if str(item).strip()]
    return []


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_by_name=True,
        populate_by_name=True,
    )

    openai_api_key: str = ""
    anthropic_api_key: str = ""
    groq_api_key: str = ""

    ai_classify_provider: str = "openai"
    ai_classify_model: str = "gpt-5-mini"
    ai_classify_timeout_seconds: float = 15.0
    ai_timeout_seconds: float = 8.0
    ai_temperature: float | None = None
    ai_max_tokens: int = 1024

    enable_ai_overrides: bool = False
    enable_ai_classify: bool = True

    ai_allowed_providers_raw: str = Field(
        default="openai,claude,groq,mock",
        validation_alias=AliasChoices("AI_ALLOWED_PROVIDERS", "ai_allowed_providers_raw"),
    )

    docs_enabled: bool = Field(default=True)
    openapi_enabled: bool = Field(default=True)
    expose_error_details: bool = False
    log_level: str = "INFO"

    @field_validator("ai_classify_provider")
    @classmethod
    def _lower_provider(cls, value: str) -> str:
        return value.lower().strip()

    @property
    def ai_allowed_providers(self) -> list[str]:
        """Allowed provider names; ``mock`` is always allowed."""
        providers = [p.lower() for p in _parse_list_value(self.ai_allowed_providers_raw)]
        if "mock" not in providers:
            providers.append("mock")
        return providers

    @property
    def ai_allowed_models(self) -> dict[str, list[str]]:
        """Per-provider model allowlists from ``AI_ALLOWED_MODELS_<PROVIDER>``.

        An empty list means any model is accepted for that provider.
        """
        return {
            name: _parse_list_value(os.getenv(f"AI_ALLOWED_MODELS_{name.upper()}", ""))
            for name in KNOWN_PROVIDERS
        }


@lru_cache
def get_settings() -> Settings:
    return Settings()
