"""Deterministic hard rules evaluated before any model call.

Rules run in a fixed priority order and the first match wins:

1. opt_out            stop/cancel vocabulary, never overridden
2. support_error      error signals; beats negative_feedback on overlap
3. negative_feedback  complaint vocabulary
4. greeting           whole-message greetings only
5. noise              laughter, filler words and 1–3 character messages

All vocabularies are compiled once at import and never mutated.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from .contracts import ClassificationResult, Entity, EntityType, Intent

logger = logging.getLogger(__name__)

# Trigger word -> canonical action value. "sair" is kept as itself; it is
# the word users actually write and the one the fallback prompt shows.
OPT_OUT_CANONICAL = MappingProxyType(
    {
        "sair": "sair",
        "cancelar": "cancelar",
        "cancela": "cancelar",
        "parar": "parar",
        "pare": "parar",
        "stop": "parar",
        "remover": "remover",
        "descadastrar": "remover",
        "desinscrever": "remover",
    }
)

ERROR_SIGNAL_PATTERNS: tuple[str, ...] = (
    r"n[ãa]o (?:est[áa]|t[áa]) funcionando",
    r"n[ãa]o funciona",
    r"n[ãa]o consigo",
    r"erros?",
    r"falhas?",
    r"bugs?",
    r"500",
    r"404",
)

COMPLAINT_PATTERNS: tuple[str, ...] = (
    r"ruim",
    r"p[ée]ssim[oa]",
    r"horr[íi]vel",
    r"n[ãa]o gostei",
)

GREETING_PATTERNS: tuple[str, ...] = (
    r"oi+e?",
    r"ol[áa]",
    r"bom dia",
    r"boa tarde",
    r"boa noite",
)

NOISE_WORDS = frozenset({"ok", "hm", "hmm", "blz", "valeu"})
SHORT_MESSAGE_MAX_CHARS = 3

SUPPORT_HINT = "Pedir desculpas e solicitar mais detalhes sobre o erro."
NEGATIVE_FEEDBACK_HINT = "Pedir desculpas pela experiência e perguntar o que podemos melhorar."
GREETING_HINT = "Cumprimentar de volta e perguntar como pode ajudar."
ENGAGEMENT_HINT = "Responder de forma breve e convidar o usuário a dizer como podemos ajudar."


def _word_alternation(patterns: Sequence[str]) -> re.Pattern[str]:
    return re.compile(r"\b(?:" + "|".join(patterns) + r")\b", re.IGNORECASE)


# One named group per trigger word; a match maps back to its vocabulary word
# by group name. IGNORECASE also accepts Unicode case variants ("İ", "ſ")
# whose lower() is not a vocabulary key.
_OPT_OUT_WORDS: tuple[str, ...] = tuple(sorted(OPT_OUT_CANONICAL, key=len, reverse=True))
_OPT_OUT_RE = _word_alternation(
    [f"(?P<w{i}>{re.escape(word)})" for i, word in enumerate(_OPT_OUT_WORDS)]
)
_ERROR_SIGNAL_RE = _word_alternation(ERROR_SIGNAL_PATTERNS)
_COMPLAINT_RE = _word_alternation(COMPLAINT_PATTERNS)
_GREETING_RE = re.compile(r"(?:" + "|".join(GREETING_PATTERNS) + r")[\s!.,?]*", re.IGNORECASE)
_LAUGHTER_RE = re.compile(r"(?:k{2,}|(?:ha){2,}h?|(?:he){2,}h?|(?:rs)+)[!.]*", re.IGNORECASE)


@dataclass(frozen=True)
class Rule:
    """One hard rule: a matcher over normalized text and a result builder.

    ``matcher`` returns the trigger text when the rule fires, ``None``
    otherwise. ``build`` turns that trigger into the final result.
    """

    name: str
    matcher: Callable[[str], str | None]
    build: Callable[[str], ClassificationResult]


@dataclass(frozen=True)
class RuleMatch:
    rule: str
    trigger: str
    result: ClassificationResult


# --- Matchers ---


def match_opt_out(text: str) -> str | None:
    """Return the canonical vocabulary word behind the first opt-out trigger."""
    m = _OPT_OUT_RE.search(text)
    if not m:
        return None
    return _OPT_OUT_WORDS[int(m.lastgroup[1:])]


def match_error_signal(text: str) -> str | None:
    m = _ERROR_SIGNAL_RE.search(text)
    return m.group(0) if m else None


def match_complaint(text: str) -> str | None:
    m = _COMPLAINT_RE.search(text)
    return m.group(0) if m else None


def match_greeting(text: str) -> str | None:
    return text if _GREETING_RE.fullmatch(text) else None


def match_noise(text: str) -> str | None:
    if not text:
        return None
    if len(text) <= SHORT_MESSAGE_MAX_CHARS:
        return text
    if _LAUGHTER_RE.fullmatch(text):
        return text
    if text.lower().rstrip("!.") in NOISE_WORDS:
        return text
    return None


# --- Result builders ---


def build_opt_out(trigger: str) -> ClassificationResult:
    action = OPT_OUT_CANONICAL[trigger]
    return ClassificationResult(
        intent=Intent.OPT_OUT,
        confidence=1.0,
        entities=(Entity(type=EntityType.ACTION, value=action),),
        should_reply=False,
        reply_hint="",
    )


def build_support_request(trigger: str) -> ClassificationResult:
    return ClassificationResult(
        intent=Intent.SUPPORT_REQUEST,
        confidence=0.85,
        entities=(Entity(type=EntityType.ERROR_SIGNAL, value=trigger.lower()),),
        should_reply=True,
        reply_hint=SUPPORT_HINT,
    )


def build_negative_feedback(trigger: str) -> ClassificationResult:
    return ClassificationResult(
        intent=Intent.NEGATIVE_FEEDBACK,
        confidence=0.8,
        entities=(),
        should_reply=True,
        reply_hint=NEGATIVE_FEEDBACK_HINT,
    )


def build_greeting(trigger: str) -> ClassificationResult:
    return ClassificationResult(
        intent=Intent.GREETING,
        confidence=0.75,
        entities=(),
        should_reply=True,
        reply_hint=GREETING_HINT,
    )


def build_noise(trigger: str) -> ClassificationResult:
    return ClassificationResult(
        intent=Intent.OTHER,
        confidence=0.65,
        entities=(),
        should_reply=True,
        reply_hint=ENGAGEMENT_HINT,
    )


def default_rules() -> tuple[Rule, ...]:
    """The standard rule order. Changing it changes overlap resolution."""
    return (
        Rule("opt_out", match_opt_out, build_opt_out),
        Rule("support_error", match_error_signal, build_support_request),
        Rule("negative_feedback", match_complaint, build_negative_feedback),
        Rule("greeting", match_greeting, build_greeting),
        Rule("noise", match_noise, build_noise),
    )


class RuleEngine:
    """Ordered, short-circuiting evaluation of hard rules."""

    def __init__(self, rules: Sequence[Rule] | None = None) -> None:
        self._rules: tuple[Rule, ...] = tuple(rules) if rules is not None else default_rules()

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def match(self, text: str) -> RuleMatch | None:
        """Return the first firing rule and its result, or ``None``."""
        for rule in self._rules:
            trigger = rule.matcher(text)
            if trigger is not None:
                logger.debug("Rule %s fired on trigger %r", rule.name, trigger)
                return RuleMatch(rule=rule.name, trigger=trigger, result=rule.build(trigger))
        return None

    def apply(self, text: str) -> ClassificationResult | None:
        """Classify *text* by rules alone; ``None`` means no rule matched."""
        matched = self.match(text)
        return matched.result if matched else None
