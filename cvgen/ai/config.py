"""Configuration settings for AI generation.

Provides settings for the LLM provider used to analyze jobs and write
tailored CVs and cover letters. Falls back to GEMINI_API_KEY when no
AI_LLM_API_KEY is set.
"""

from __future__ import annotations

import os
from typing import Annotated

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AIConfig(BaseSettings):
    """Configuration for the generative backend.

    Settings can be overridden via environment variables prefixed with AI_.

    Example: AI_LLM_PROVIDER=openai AI_LLM_MODEL=gpt-4o
    Or only set the key: GEMINI_API_KEY=...
    """

    model_config = SettingsConfigDict(
        env_prefix="AI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    llm_provider: str = Field(
        default="gemini",
        description="LLM provider (gemini, openai, anthropic, etc.)",
    )
    llm_model: str = Field(
        default="gemini-2.5-flash",
        description="LLM model name",
    )
    llm_api_key: str | None = Field(
        default=None,
        description="API key for LLM provider",
    )
    llm_base_url: str | None = Field(
        default=None,
        description="Base URL for OpenAI-compatible endpoints",
    )
    llm_max_retries: Annotated[int, Field(ge=0)] = Field(
        default=0,
        description="Maximum retry attempts for LLM calls",
    )
    llm_timeout: Annotated[float, Field(gt=0)] = Field(
        default=120.0,
        description="Timeout in seconds for a single LLM call",
    )
    cover_letter_max_words: Annotated[int, Field(gt=0)] = Field(
        default=400,
        description="Maximum word count requested for cover letters",
    )

    @model_validator(mode="after")
    def apply_gemini_key_fallback(self) -> AIConfig:
        """Use GEMINI_API_KEY when no AI_LLM_API_KEY was given."""
        if self.llm_api_key is None:
            gemini_key = os.getenv("GEMINI_API_KEY")
            if gemini_key:
                self.llm_api_key = gemini_key
        return self


# Singleton instance
_ai_config: AIConfig | None = None


def get_ai_config() -> AIConfig:
    """Get the AI configuration singleton."""
    global _ai_config
    if _ai_config is None:
        _ai_config = AIConfig()
    return _ai_config


def reset_ai_config() -> None:
    """Reset the configuration singleton (useful for testing)."""
    global _ai_config
    _ai_config = None
