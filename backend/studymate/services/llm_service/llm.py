"""Client for the remote text-generation service.

Usage:
    from studymate.services.llm_service.llm import get_generation_client

    client = get_generation_client()
    text = client.generate("Hello")

The client only ever returns flattened text.  Turning that text into
structured data is the job of ``json_extractor`` / ``structured_invoker``.
"""

from __future__ import annotations

import json
import logging
import re
from functools import lru_cache
from typing import Any, Optional, Protocol

import requests

from studymate.core.config import settings
from studymate.services.llm_service.errors import TransportError

logger = logging.getLogger(__name__)

_CODE_FENCE_RE = re.compile(r"```json|```")


class TextGenerator(Protocol):
    """Anything that turns a prompt into raw model text."""

    def generate(self, prompt: str) -> str:
        ...


# ── Envelope handling ─────────────────────────────────────────


def _envelope_text(envelope: Any) -> Optional[str]:
    """Concatenate ``candidates[0].content.parts[*].text`` or return None.

    None means the envelope does not have the expected shape.
    """
    if not isinstance(envelope, dict):
        return None
    candidates = envelope.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    first = candidates[0]
    content = first.get("content") if isinstance(first, dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return None

    return "".join(
        str(p.get("text") or "") if isinstance(p, dict) else ""
        for p in parts
    )


def flatten_response(body: str) -> str:
    """Turn a raw ``generateContent`` response body into plain model text.

    Bodies that are not JSON, or JSON without the expected content path, are
    returned unmodified.  Otherwise the text parts are joined in order and
    markdown code-fence markers are stripped.
    """
    try:
        envelope = json.loads(body)
    except (json.JSONDecodeError, TypeError, RecursionError):
        logger.warning("Generation response is not a JSON envelope; returning raw body")
        return body

    text = _envelope_text(envelope)
    if text is None:
        logger.warning("Generation envelope has no candidate parts; returning raw body")
        return body

    return _CODE_FENCE_RE.sub("", text).strip()


# ── Gemini client ─────────────────────────────────────────────


class GeminiClient:
    """Synchronous ``generateContent`` client.

    The API key is bound at construction so several clients with different
    credentials can coexist (tests rely on this).
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        api_base: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: int = 120,
    ):
        self.api_key = api_key
        self.model = model
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    @property
    def endpoint(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"

    def _build_payload(self, prompt: str) -> dict:
        return {"contents": [{"parts": [{"text": prompt}]}]}

    def generate(self, prompt: str) -> str:
        """Send *prompt* and return the flattened response text.

        Raises:
            TransportError: on connection failure, timeout or a non-2xx status.
        """
        try:
            resp = requests.post(
                self.endpoint,
                json=self._build_payload(prompt),
                headers={
                    "Content-Type": "application/json",
                    "X-goog-api-key": self.api_key,
                },
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as exc:
            logger.error("Generation request timed out after %ds", self.timeout)
            raise TransportError(f"Generation request timed out after {self.timeout}s") from exc
        except requests.exceptions.RequestException as exc:
            logger.error("Generation request failed: %s", exc)
            raise TransportError(f"Generation request failed: {exc}") from exc

        if not resp.ok:
            logger.error("Generation service returned HTTP %d: %s", resp.status_code, resp.text[:500])
            raise TransportError(
                f"Generation service returned HTTP {resp.status_code}",
                status_code=resp.status_code,
            )

        body = resp.text
        logger.debug("Generation raw response: %s", body[:2000])
        return flatten_response(body)


@lru_cache(maxsize=1)
def get_generation_client() -> GeminiClient:
    """Process-wide client built once from ``settings``."""
    logger.info("Initialising generation client (model=%s)", settings.GEMINI_MODEL)
    return GeminiClient(
        api_key=settings.GEMINI_API_KEY,
        model=settings.GEMINI_MODEL,
        api_base=settings.GEMINI_API_BASE,
        timeout=settings.LLM_TIMEOUT,
    )
