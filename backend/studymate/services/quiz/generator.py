"""Fixed-size multiple-choice quiz generation from a note summary."""

import logging
import threading
from functools import partial
from typing import Any, Dict, List, Optional

from studymate.core.config import settings
from studymate.prompts import get_quiz_prompt
from studymate.services.llm_service.llm import TextGenerator
from studymate.services.llm_service.structured_invoker import invoke_structured
from studymate.services.llm_service.validators import validate_quiz
from studymate.services.text_processing.normalizer import normalize_text

logger = logging.getLogger(__name__)


def generate_quiz(
    summary_text: str,
    question_count: Optional[int] = None,
    *,
    item_policy: Optional[str] = None,
    client: Optional[TextGenerator] = None,
    cancel_event: Optional[threading.Event] = None,
) -> List[Dict[str, Any]]:
    """Generate exactly *question_count* questions from *summary_text*.

    Args:
        summary_text: Summary stored on the note; normalized again here.
        question_count: Quiz size (default: QUIZ_QUESTION_COUNT).
        item_policy: ``length_only`` or ``strict`` (default: QUIZ_ITEM_POLICY).

    Returns:
        list: The accepted question objects, in model order.

    Raises:
        ValueError: *question_count* is below 1.
    """
    count = settings.QUIZ_QUESTION_COUNT if question_count is None else question_count
    if count < 1:
        raise ValueError(f"question_count must be >= 1, got {count}")
    policy = item_policy or settings.QUIZ_ITEM_POLICY

    prompt = get_quiz_prompt(normalize_text(summary_text), count)
    logger.info("Generating %d-question quiz (policy=%s)", count, policy)
    return invoke_structured(
        prompt,
        partial(validate_quiz, question_count=count, policy=policy),
        client=client,
        cancel_event=cancel_event,
    )
