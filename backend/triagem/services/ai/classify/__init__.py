"""Hybrid message-intent classification.

Usage::

    from triagem.services.ai.classify import classify

    result = await classify("Quero sair dessa lista!")
    assert result.intent is Intent.OPT_OUT
"""

from .contracts import ClassificationResult, Entity, EntityType, Intent, ModelUnavailable
from .enforcer import enforce
from .fallback import ModelFallbackAdapter, classify_via_model
from .normalizer import normalize
from .rules import Rule, RuleEngine, default_rules
from .service import ClassificationPipeline, classify

__all__ = [
    "classify",
    "ClassificationPipeline",
    "ClassificationResult",
    "Entity",
    "EntityType",
    "Intent",
    "ModelUnavailable",
    "ModelFallbackAdapter",
    "classify_via_model",
    "enforce",
    "normalize",
    "Rule",
    "RuleEngine",
    "default_rules",
]
