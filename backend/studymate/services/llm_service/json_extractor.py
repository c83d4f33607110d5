"""Recover a JSON object/array from noisy model text.

Recovery is a fixed sequence of small steps, first success wins:

1. strict parse of the whole text
2. isolate the outermost ``{...}`` or ``[...]`` span
3. drop trailing commas before ``}`` / ``]``
4. strict parse of the repaired span

Only surrounding prose and trailing commas are tolerated.  Anything else
(unescaped quotes, truncation, single quotes) is a failed attempt, because
guessing at broken JSON can silently produce wrong data.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

logger = logging.getLogger(__name__)

# Greedy: first opening delimiter up to the last closing one of the same family
_JSON_SPAN_RE = re.compile(r"(\{[\s\S]*\}|\[[\s\S]*\])")
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")


# ── Recovery steps ────────────────────────────────────────────


def parse_strict(text: str) -> Optional[Any]:
    """Parse *text* as JSON; only objects and arrays count as a result."""
    try:
        value = json.loads(text)
    except (json.JSONDecodeError, TypeError, RecursionError):
        return None
    if isinstance(value, (dict, list)):
        return value
    return None


def isolate_json_span(text: str) -> Optional[str]:
    """Return the outermost brace/bracket span, or None when there is none."""
    match = _JSON_SPAN_RE.search(text)
    if not match:
        return None
    return match.group(1)


def repair_trailing_commas(text: str) -> str:
    """Delete any comma that is followed only by whitespace and a closer."""
    return _TRAILING_COMMA_RE.sub(r"\1", text)


# ── Public API ────────────────────────────────────────────────


def extract_structured(raw: Optional[str]) -> Optional[Any]:
    """Return the dict/list embedded in *raw*, or None.

    Never raises.
    """
    if not raw:
        return None

    value = parse_strict(raw)
    if value is not None:
        return value

    span = isolate_json_span(raw)
    if span is None:
        logger.warning("No JSON block found in model output: %s", raw[:500])
        return None

    candidate = repair_trailing_commas(span)
    value = parse_strict(candidate)
    if value is None:
        logger.warning("JSON candidate failed to parse after repair: %s", candidate[:1000])
    return value
