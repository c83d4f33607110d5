"""
Shared pytest fixtures and configuration for the entire test suite.
Applies to all subdirectories: unit/, api/
"""

import sys
import os
import json
import uuid
from types import SimpleNamespace

import pytest

# ── Ensure backend is importable from every pytest session ──────────────────
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "backend"))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

# Minimal env so that Pydantic Settings can validate on import
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-unit-tests-only-32chars!")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")


# ── Scripted generation client ───────────────────────────────────────────────

class ScriptedClient:
    """Generation client stub that replays a fixed script of outputs.

    Each script entry is either the raw text to return or an exception
    instance to raise.  The last entry repeats once the script runs out.
    """

    def __init__(self, *outputs):
        self.outputs = list(outputs)
        self.prompts = []

    @property
    def calls(self):
        return len(self.prompts)

    def generate(self, prompt):
        self.prompts.append(prompt)
        index = min(len(self.prompts), len(self.outputs)) - 1
        out = self.outputs[index]
        if isinstance(out, Exception):
            raise out
        return out


@pytest.fixture
def scripted_client():
    """Factory fixture: ``scripted_client("bad", '{"a": 1}')``."""
    return ScriptedClient


@pytest.fixture
def quiz_items():
    """Factory for a well-formed quiz array of *n* questions."""
    def _make(n):
        return [
            {
                "question": f"Question {i + 1}?",
                "options": ["alpha", "beta", "gamma", "delta"],
                "correctAnswer": "ABCD"[i % 4],
            }
            for i in range(n)
        ]
    return _make


@pytest.fixture
def quiz_json(quiz_items):
    def _make(n):
        return json.dumps(quiz_items(n))
    return _make


# ── Fake user fixture ────────────────────────────────────────────────────────

@pytest.fixture
def fake_user():
    """Return a user object with just the identity the routes need."""
    return SimpleNamespace(id="test-user-id-" + str(uuid.uuid4())[:8])
