"""Failure taxonomy for the generation pipeline.

Every failure the pipeline reports derives from :class:`GenerationError` so
route handlers can catch the family once and map each member to a response.
"""

from __future__ import annotations

from typing import Optional


class GenerationError(Exception):
    """Base class for structured-generation failures."""


class TransportError(GenerationError):
    """The remote generation call itself failed (network, timeout, non-2xx)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ExhaustedRetriesError(GenerationError):
    """No attempt produced text from which a structured value could be recovered."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"No structured output recovered after {attempts} attempt(s)")


class ResultValidationError(GenerationError):
    """A structured value was recovered but breaks the acceptance contract."""

    def __init__(self, kind: str, reason: str):
        self.kind = kind
        self.reason = reason
        super().__init__(f"Invalid {kind} result: {reason}")


class GenerationCancelledError(GenerationError):
    """The caller cancelled the request between attempts."""

    def __init__(self, completed_attempts: int):
        self.completed_attempts = completed_attempts
        super().__init__(f"Generation cancelled after {completed_attempts} attempt(s)")
