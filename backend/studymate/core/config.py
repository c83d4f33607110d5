"""
Centralized application configuration.

Uses pydantic BaseSettings for automatic env-var loading and validation.
Import the singleton ``settings`` instance throughout the app.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import List, Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings, validated from environment variables."""

    # ── Environment ────────────────────────────────────────
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False

    # ── JWT / Auth ────────────────────────────────────────
    JWT_SECRET_KEY: str = ""
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # ── CORS ──────────────────────────────────────────────
    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors(cls, v):
        if isinstance(v, str):
            return [o.strip() for o in v.split(",") if o.strip()]
        return v

    # ── Generation service (Gemini) ───────────────────────
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.0-flash"
    GEMINI_API_BASE: str = "https://generativelanguage.googleapis.com/v1beta"
    LLM_TIMEOUT: int = 120

    # ── Structured generation ─────────────────────────────
    GENERATION_MAX_ATTEMPTS: int = 3
    RETRY_ON_VALIDATION_FAILURE: bool = False
    QUIZ_QUESTION_COUNT: int = 30
    QUIZ_ITEM_POLICY: Literal["length_only", "strict"] = "length_only"

    @field_validator("GENERATION_MAX_ATTEMPTS", "QUIZ_QUESTION_COUNT", "LLM_TIMEOUT", mode="after")
    @classmethod
    def _positive(cls, v: int, info) -> int:
        if v < 1:
            raise ValueError(f"{info.field_name} must be >= 1, got {v}")
        return v

    @field_validator("QUIZ_ITEM_POLICY", mode="before")
    @classmethod
    def _lowercase_policy(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("JWT_SECRET_KEY", mode="after")
    @classmethod
    def _validate_jwt(cls, v: str) -> str:
        if not v:
            raise ValueError(
                "JWT_SECRET_KEY must be set. "
                'Generate: python -c "import secrets; print(secrets.token_urlsafe(64))"'
            )
        return v

    @model_validator(mode="after")
    def _warn_missing_credentials(self):
        if not self.GEMINI_API_KEY:
            logging.getLogger("config").warning(
                "GEMINI_API_KEY is empty; generation requests will be rejected by the service"
            )
        return self

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()


settings = get_settings()
