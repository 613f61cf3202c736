"""Generative backend abstraction.

The generation pipeline talks to a ``GenerativeBackend``; the production
implementation drives an LLM through LiteLLM, while tests plug in a
deterministic fake.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from cvgen.ai.config import AIConfig, get_ai_config
from cvgen.ai.llm import GenerationLLM
from cvgen.ai.models import JobAnalysis
from cvgen.ai.prompts import (
    ANALYSIS_SYSTEM_PROMPT,
    COVER_LETTER_SYSTEM_PROMPT,
    TAILORING_SYSTEM_PROMPT,
    build_analysis_prompt,
    build_cover_letter_prompt,
    build_tailoring_prompt,
)
from cvgen.resume.models import ResumeDocument

logger = logging.getLogger(__name__)


class GenerativeBackend(ABC):
    """Abstract base class for generative backends."""

    @abstractmethod
    async def analyze_job(
        self,
        profile: ResumeDocument,
        job_description: str,
        *,
        timeout: float | None = None,
    ) -> JobAnalysis:
        """Score how well a profile fits a job description."""

    @abstractmethod
    async def tailor_document(
        self,
        profile: ResumeDocument,
        job_description: str,
        analysis: JobAnalysis,
        *,
        timeout: float | None = None,
    ) -> ResumeDocument:
        """Rewrite a profile document for a specific job."""

    @abstractmethod
    async def generate_cover_letter(
        self,
        profile: ResumeDocument,
        job_title: str,
        company_name: str,
        job_description: str,
        cv_summary: str = "",
        *,
        timeout: float | None = None,
    ) -> str:
        """Write a cover letter as free text."""


class LiteLLMBackend(GenerativeBackend):
    """Generative backend backed by an LLM through LiteLLM.

    Job analysis and tailoring use schema-constrained output; cover letters
    are plain text.
    """

    def __init__(self, config: AIConfig | None = None, llm: GenerationLLM | None = None):
        """Initialize the backend.

        Args:
            config: Optional AIConfig. Uses global config if not provided.
            llm: Optional pre-built LLM client.

        Raises:
            APIKeyNotSetError: If no API key is configured.
        """
        self.config = config or get_ai_config()
        self.llm = llm or GenerationLLM(config=self.config)

    async def analyze_job(
        self,
        profile: ResumeDocument,
        job_description: str,
        *,
        timeout: float | None = None,
    ) -> JobAnalysis:
        logger.debug(f"Analyzing job with {self.config.llm_provider}/{self.config.llm_model}")
        return await self.llm.generate_structured(
            prompt=build_analysis_prompt(profile.to_json(indent=2), job_description),
            output_model=JobAnalysis,
            system_prompt=ANALYSIS_SYSTEM_PROMPT,
            timeout=timeout,
        )

    async def tailor_document(
        self,
        profile: ResumeDocument,
        job_description: str,
        analysis: JobAnalysis,
        *,
        timeout: float | None = None,
    ) -> ResumeDocument:
        return await self.llm.generate_structured(
            prompt=build_tailoring_prompt(
                profile.to_json(indent=2),
                job_description,
                analysis.model_dump_json(indent=2),
            ),
            output_model=ResumeDocument,
            system_prompt=TAILORING_SYSTEM_PROMPT,
            timeout=timeout,
        )

    async def generate_cover_letter(
        self,
        profile: ResumeDocument,
        job_title: str,
        company_name: str,
        job_description: str,
        cv_summary: str = "",
        *,
        timeout: float | None = None,
    ) -> str:
        return await self.llm.generate_text(
            prompt=build_cover_letter_prompt(
                profile.to_json(indent=2),
                job_title,
                company_name,
                job_description,
                cv_summary,
            ),
            system_prompt=COVER_LETTER_SYSTEM_PROMPT.format(
                max_words=self.config.cover_letter_max_words
            ),
            timeout=timeout,
        )
