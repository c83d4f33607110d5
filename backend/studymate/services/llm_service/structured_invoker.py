"""Structured generation: generate → extract, retried until something parses.

Attempts are strictly sequential and reissue the identical prompt; the
model's nondeterminism is what makes a retry worthwhile.  Transport failures
are not retried here and propagate on the attempt that hit them.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, List, Optional, TypeVar

from studymate.core.config import settings
from studymate.services.llm_service.errors import (
    ExhaustedRetriesError,
    GenerationCancelledError,
    ResultValidationError,
)
from studymate.services.llm_service.json_extractor import extract_structured
from studymate.services.llm_service.llm import TextGenerator, get_generation_client

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3


def generate_structured(
    prompt: str,
    client: TextGenerator,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    *,
    accept: Optional[Callable[[Any], bool]] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Optional[Any]:
    """Return the first structured value recovered within *max_attempts*.

    Args:
        prompt: Full prompt text, sent unchanged on every attempt.
        client: Generation capability; its ``TransportError`` propagates.
        max_attempts: Upper bound on client calls.
        accept: Optional predicate; a value it rejects counts as a failed attempt.
        cancel_event: Checked before each attempt.

    Returns:
        The recovered dict/list, or None when every attempt failed.

    Raises:
        GenerationCancelledError: if *cancel_event* is set between attempts.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    for attempt in range(1, max_attempts + 1):
        if cancel_event is not None and cancel_event.is_set():
            logger.info("Structured generation cancelled before attempt %d", attempt)
            raise GenerationCancelledError(attempt - 1)

        logger.debug("Structured generation attempt %d/%d", attempt, max_attempts)
        raw = client.generate(prompt)
        value = extract_structured(raw)

        if value is None:
            logger.warning(
                "Attempt %d/%d produced no structured output. Raw: %s",
                attempt, max_attempts, (raw or "")[:1000],
            )
            continue

        if accept is not None and not accept(value):
            logger.warning("Attempt %d/%d produced a value that failed validation", attempt, max_attempts)
            continue

        logger.info("Structured output recovered on attempt %d/%d", attempt, max_attempts)
        return value

    logger.error("No structured output after %d attempt(s)", max_attempts)
    return None


def invoke_structured(
    prompt: str,
    validator: Callable[[Any], T],
    *,
    client: Optional[TextGenerator] = None,
    max_attempts: Optional[int] = None,
    retry_on_invalid: Optional[bool] = None,
    cancel_event: Optional[threading.Event] = None,
) -> T:
    """Run :func:`generate_structured` and pass the result through *validator*.

    By default a validation failure ends the request immediately; with
    ``retry_on_invalid`` it is treated like an unparseable attempt.

    Raises:
        TransportError: remote call failed.
        ExhaustedRetriesError: nothing parseable came back.
        ResultValidationError: something parsed but was rejected.
        GenerationCancelledError: cancelled between attempts.
    """
    client = client or get_generation_client()
    attempts = settings.GENERATION_MAX_ATTEMPTS if max_attempts is None else max_attempts
    if retry_on_invalid is None:
        retry_on_invalid = settings.RETRY_ON_VALIDATION_FAILURE

    rejections: List[ResultValidationError] = []
    accept = None
    if retry_on_invalid:
        def accept(value: Any) -> bool:
            try:
                validator(value)
            except ResultValidationError as exc:
                rejections.append(exc)
                return False
            return True

    value = generate_structured(
        prompt, client, attempts, accept=accept, cancel_event=cancel_event
    )

    if value is None:
        if rejections:
            logger.error("Every recovered value was rejected; last: %s", rejections[-1])
            raise rejections[-1]
        raise ExhaustedRetriesError(attempts)

    try:
        return validator(value)
    except ResultValidationError as exc:
        logger.error("Structured output rejected: %s", exc)
        raise
