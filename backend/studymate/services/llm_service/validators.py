"""Acceptance checks applied to recovered values before anyone persists them.

Each validator either returns the accepted value or raises
:class:`ResultValidationError`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from pydantic import ValidationError

from studymate.services.llm_service.errors import ResultValidationError
from studymate.services.llm_service.llm_schemas import QuizQuestion, SummaryResult

logger = logging.getLogger(__name__)

QUIZ_POLICY_LENGTH_ONLY = "length_only"
QUIZ_POLICY_STRICT = "strict"


def validate_summary(value: Any) -> SummaryResult:
    """Accept any JSON object; missing title/summary fall back to defaults."""
    if not isinstance(value, dict):
        raise ResultValidationError("summary", f"expected a JSON object, got {type(value).__name__}")
    return SummaryResult.model_validate(value)


def validate_quiz(
    value: Any,
    question_count: int,
    policy: str = QUIZ_POLICY_LENGTH_ONLY,
) -> List[Dict[str, Any]]:
    """Accept an array of exactly *question_count* items.

    Arrays of any other length are rejected, never truncated or padded.
    With ``policy="strict"`` every item must also match :class:`QuizQuestion`.
    """
    if not isinstance(value, list):
        raise ResultValidationError("quiz", f"expected a JSON array, got {type(value).__name__}")

    if len(value) != question_count:
        raise ResultValidationError(
            "quiz", f"expected exactly {question_count} questions, got {len(value)}"
        )

    if policy == QUIZ_POLICY_STRICT:
        for index, item in enumerate(value):
            try:
                QuizQuestion.model_validate(item)
            except ValidationError as exc:
                raise ResultValidationError(
                    "quiz", f"question {index + 1} is malformed: {exc.errors()[0]['msg']}"
                ) from exc
    elif policy != QUIZ_POLICY_LENGTH_ONLY:
        raise ValueError(f"Unknown quiz item policy: {policy!r}")

    return value
