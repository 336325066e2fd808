"""Classification pipeline: normalize, hard rules, model fallback, enforce."""

from __future__ import annotations

import logging

from .contracts import ClassificationResult
from .enforcer import enforce
from .fallback import ModelFallbackAdapter
from .normalizer import normalize
from .rules import RuleEngine

logger = logging.getLogger(__name__)


class ClassificationPipeline:
    """Stateless composition of the four classification stages.

    At most one of {rule match, model call} runs per message, and the
    enforcer runs exactly once on whichever result came out.
    """

    def __init__(
        self,
        rule_engine: RuleEngine | None = None,
        model_fallback: ModelFallbackAdapter | None = None,
    ) -> None:
        self.rule_engine = rule_engine or RuleEngine()
        self.model_fallback = model_fallback or ModelFallbackAdapter()

    async def classify(self, raw_text: str) -> ClassificationResult:
        """Classify one message.

        Raises ``ModelUnavailable`` when no rule matches and the model
        cannot produce a valid result.
        """
        text = normalize(raw_text)

        matched = self.rule_engine.match(text)
        if matched is not None:
            result = matched.result
            source = f"rule:{matched.rule}"
        else:
            result = await self.model_fallback.classify(text)
            source = "model"

        final = enforce(result)
        logger.info(
            "Classified message: intent=%s confidence=%.2f should_reply=%s source=%s",
            final.intent.value,
            final.confidence,
            final.should_reply,
            source,
        )
        return final


_default_pipeline = ClassificationPipeline()


async def classify(raw_text: str) -> ClassificationResult:
    """Classify *raw_text* with the default rules and configured model."""
    return await _default_pipeline.classify(raw_text)
