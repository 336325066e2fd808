"""Tolerant JSON extraction from model responses."""

from __future__ import annotations

import json
import logging

logger = logging.getLogger(__name__)


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json ... ``` (or bare ```) fence."""
    s = text.strip()
    if not s.startswith("```"):
        return s
    s = s.split("\n", 1)[-1] if "\n" in s else s[3:]
    if s.endswith("```"):
        s = s[:-3]
    return s.strip()


def extract_json_object(text: str) -> dict | None:
    """Return the first JSON object found in *text*, or ``None``.

    Strategy:
    1. Drop a markdown code fence if the model added one.
    2. Attempt ``json.loads`` on the whole remainder (fast path).
    3. Slide through the text looking for ``{`` and attempt
       brace-balanced extraction.

    Arrays and scalars are not accepted; a classification is always an object.
    """
    if not text or not text.strip():
        return None

    stripped = strip_code_fence(text)

    try:
        parsed = json.loads(stripped)
    except ValueError:
        parsed = None
    if isinstance(parsed, dict):
        return parsed

    for i, ch in enumerate(stripped):
        if ch != "{":
            continue
        candidate = _balanced_slice(stripped, i)
        if candidate is None:
            continue
        try:
            parsed = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(parsed, dict):
            return parsed

    logger.debug("No JSON object found in %d chars of model output", len(text))
    return None


def _balanced_slice(text: str, start: int) -> str | None:
    """Return the brace-balanced substring that opens at *start*."""
    depth = 0
    in_string = False
    escape = False

    for i in range(start, len(text)):
        ch = text[i]

        if escape:
            escape = False
            continue

        if ch == "\\":
            if in_string:
                escape = True
            continue

        if ch == '"':
            in_string = not in_string
            continue

        if in_string:
            continue

        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]

    return None
