"""Input canonicalization applied before any rule or model sees the text."""

from __future__ import annotations

import re

MAX_INPUT_CHARS = 500

_HSPACE_RUN_RE = re.compile(r"[^\S\n]+")
# Blank lines holding only spaces or tabs count as part of the run.
_NEWLINE_RUN_RE = re.compile(r"\n(?:[^\S\n]*\n)+")


def normalize(raw: str) -> str:
    """Collapse line endings and whitespace, cap the length, then trim.

    The cap is applied before trimming, so the result is never longer than
    ``MAX_INPUT_CHARS``.
    """
    text = raw.replace("\r\n", "\n")
    text = _HSPACE_RUN_RE.sub(" ", text)
    text = _NEWLINE_RUN_RE.sub("\n", text)
    text = text[:MAX_INPUT_CHARS]
    return text.strip()
