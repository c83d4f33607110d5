"""Prompt template loader.

Each ``get_*_prompt`` function loads a ``.txt`` template from this
package directory and substitutes placeholders.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Dict

_DIR = os.path.dirname(__file__)


@lru_cache(maxsize=8)
def _load(filename: str) -> str:
    """Read a template file, caching the result."""
    with open(os.path.join(_DIR, filename), encoding="utf-8") as f:
        return f.read()


def _render(filename: str, subs: Dict[str, str]) -> str:
    """Load *filename* and apply all substitutions.

    The content placeholder must come last in *subs* so text inside the
    user's content is never treated as a placeholder.
    """
    text = _load(filename)
    for key, val in subs.items():
        text = text.replace(key, val)
    return text


# ── Public helpers ────────────────────────────────────────


def get_summary_prompt(content_text: str, min_words: int, max_words: int) -> str:
    return _render("summary_prompt.txt", {
        "{{MIN_WORDS}}": str(min_words),
        "{{MAX_WORDS}}": str(max_words),
        "{{CONTENT_TEXT}}": content_text,
    })


def get_quiz_prompt(summary_text: str, question_count: int) -> str:
    return _render("quiz_prompt.txt", {
        "{{QUESTION_COUNT}}": str(question_count),
        "{{SUMMARY_TEXT}}": summary_text,
    })
