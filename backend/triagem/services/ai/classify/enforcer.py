"""Cross-field rules applied to every result, rule-derived or model-derived."""

from __future__ import annotations

from .contracts import ClassificationResult, Intent


def enforce(result: ClassificationResult) -> ClassificationResult:
    """Return *result* with the reply contract enforced.

    * OPT_OUT never gets a reply or a hint.
    * Every other intent is replied to.
    * INFO_REQUEST carries no canned hint.

    Pure and idempotent; returns the same instance when nothing changes.
    """
    update: dict[str, object] = {}

    if result.intent is Intent.OPT_OUT:
        if result.should_reply:
            update["should_reply"] = False
        if result.reply_hint:
            update["reply_hint"] = ""
    elif not result.should_reply:
        update["should_reply"] = True

    if result.intent is Intent.INFO_REQUEST and result.reply_hint:
        update["reply_hint"] = ""

    if not update:
        return result
    return result.model_copy(update=update)
