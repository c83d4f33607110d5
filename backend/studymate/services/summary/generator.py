"""Summary generation with word-count bounds derived from the source length."""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from typing import Optional

from studymate.prompts import get_summary_prompt
from studymate.services.llm_service.llm import TextGenerator
from studymate.services.llm_service.llm_schemas import SummaryResult
from studymate.services.llm_service.structured_invoker import invoke_structured
from studymate.services.llm_service.validators import validate_summary
from studymate.services.text_processing.normalizer import count_words

logger = logging.getLogger(__name__)

SUMMARY_LENGTH_PERCENT = {
    "short": 25,
    "medium": 45,
    "long": 70,
}
DEFAULT_SUMMARY_PERCENT = 40
MIN_TARGET_WORDS = 120


@dataclass(frozen=True)
class WordBounds:
    word_count: int
    percent: int
    target_words: int
    min_words: int
    max_words: int


def compute_word_bounds(word_count: int, summary_length: Optional[str] = None) -> WordBounds:
    """Target/min/max summary length for a source of *word_count* words.

    Unknown or missing tiers fall back to 40 percent; the target never drops
    below ``MIN_TARGET_WORDS``.  The bounds are ±15% of the target, floored.
    """
    percent = SUMMARY_LENGTH_PERCENT.get(summary_length or "", DEFAULT_SUMMARY_PERCENT)
    target = max(MIN_TARGET_WORDS, word_count * percent // 100)
    return WordBounds(
        word_count=word_count,
        percent=percent,
        target_words=target,
        min_words=math.floor(target * 0.85),
        max_words=math.floor(target * 1.15),
    )


def build_summary_prompt(normalized_text: str, summary_length: Optional[str] = None) -> str:
    bounds = compute_word_bounds(count_words(normalized_text), summary_length)
    logger.info(
        "Summary bounds: %d source words, tier=%s, target=%d (%d-%d)",
        bounds.word_count, summary_length, bounds.target_words,
        bounds.min_words, bounds.max_words,
    )
    return get_summary_prompt(normalized_text, bounds.min_words, bounds.max_words)


def generate_summary(
    normalized_text: str,
    summary_length: Optional[str] = None,
    *,
    client: Optional[TextGenerator] = None,
    cancel_event: Optional[threading.Event] = None,
) -> SummaryResult:
    """Generate a title and summary for already-normalized text.

    Raises:
        GenerationError: any pipeline failure (see ``llm_service.errors``).
    """
    prompt = build_summary_prompt(normalized_text, summary_length)
    return invoke_structured(
        prompt,
        validate_summary,
        client=client,
        cancel_event=cancel_event,
    )
