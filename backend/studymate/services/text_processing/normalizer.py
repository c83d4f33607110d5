"""Input text cleaning applied before any prompt is built.

The cleaned text is what gets embedded in prompts and persisted on the note,
so the rules here are deliberately conservative: drop control bytes and
markup, squeeze whitespace, never rewrite words.
"""

import re
from typing import Optional

# NUL plus the C0/DEL control bytes that are not whitespace
_CONTROL_RE = re.compile(r"[\x00-\x08\x0e-\x1b\x7f]")
_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RUN_RE = re.compile(r"\s{2,}")


def normalize_text(text: Optional[str]) -> str:
    """Return *text* without control bytes, ``<...>`` markup or whitespace runs.

    ``None`` and the empty string both normalize to ``""``.
    """
    if not text:
        return ""

    text = _CONTROL_RE.sub("", text)
    text = _TAG_RE.sub("", text)
    text = _WHITESPACE_RUN_RE.sub(" ", text)
    return text.strip()


def count_words(text: str) -> int:
    """Whitespace-delimited token count; empty text counts as one token."""
    return len(text.split()) or 1
