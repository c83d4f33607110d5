"""Pydantic schemas for accepted generation results."""

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_NOTE_TITLE = "Untitled note"


# ── Summary ───────────────────────────────────────────────

class SummaryResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str = DEFAULT_NOTE_TITLE
    summary: str = ""

    @field_validator("title", mode="before")
    @classmethod
    def _default_title(cls, v):
        if not v:
            return DEFAULT_NOTE_TITLE
        return v if isinstance(v, str) else str(v)

    @field_validator("summary", mode="before")
    @classmethod
    def _default_summary(cls, v):
        if not v:
            return ""
        return v if isinstance(v, str) else str(v)


# ── Quiz ──────────────────────────────────────────────────

class QuizQuestion(BaseModel):
    """One multiple-choice item, used when items are checked individually."""

    model_config = ConfigDict(extra="allow")

    question: str = Field(min_length=1)
    options: List[str] = Field(min_length=4, max_length=4)
    correctAnswer: Literal["A", "B", "C", "D"]
