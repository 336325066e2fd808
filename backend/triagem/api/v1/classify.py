"""Message classification endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from triagem.core.config import get_settings
from triagem.services.ai.classify.contracts import ClassificationResult, ModelUnavailable
from triagem.services.ai.classify.fallback import ModelFallbackAdapter
from triagem.services.ai.classify.service import ClassificationPipeline

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_REQUEST_TEXT_CHARS = 20_000


def _ensure_ai_classify_enabled() -> None:
    settings = get_settings()
    if not settings.enable_ai_classify:
        raise HTTPException(404, "Not found")


class ClassifyRequest(BaseModel):
    text: str = Field(..., max_length=MAX_REQUEST_TEXT_CHARS)
    override_provider: str | None = None
    override_model: str | None = None


@router.post(
    "/classify",
    response_model=ClassificationResult,
    summary="Classify a user message into an intent",
)
async def classify_endpoint(body: ClassifyRequest):
    _ensure_ai_classify_enabled()

    pipeline = ClassificationPipeline(
        model_fallback=ModelFallbackAdapter(
            override_provider=body.override_provider,
            override_model=body.override_model,
        )
    )
    try:
        return await pipeline.classify(body.text)
    except ModelUnavailable as exc:
        logger.warning("Classification unavailable: %s", exc.reason)
        raise HTTPException(503, "Classification model unavailable") from exc
