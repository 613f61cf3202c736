"""Unit tests for the LiteLLM generative backend."""

from unittest.mock import AsyncMock

import pytest

from cvgen.ai.backend import LiteLLMBackend
from cvgen.ai.config import AIConfig
from cvgen.ai.errors import APIKeyNotSetError
from cvgen.ai.models import JobAnalysis
from cvgen.ai.prompts import ANALYSIS_SYSTEM_PROMPT, TAILORING_SYSTEM_PROMPT
from cvgen.resume.models import ResumeDocument


@pytest.fixture
def config() -> AIConfig:
    return AIConfig(_env_file=None, llm_api_key="test-key", cover_letter_max_words=250)


@pytest.fixture
def analysis() -> JobAnalysis:
    return JobAnalysis(
        match_score=64,
        matching_skills=["Python"],
        missing_skills=["Go"],
        relevant_experiences=[],
        suggestions=[],
        keywords_to_include=["payments"],
    )


class TestLiteLLMBackend:
    """Tests for prompt wiring of the LiteLLM backend."""

    def test_requires_api_key(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)

        with pytest.raises(APIKeyNotSetError):
            LiteLLMBackend(config=AIConfig(_env_file=None, llm_api_key=None))

    @pytest.mark.asyncio
    async def test_analyze_job_uses_structured_output(
        self, config, sample_document, analysis
    ):
        llm = AsyncMock()
        llm.generate_structured.return_value = analysis
        backend = LiteLLMBackend(config=config, llm=llm)

        result = await backend.analyze_job(sample_document, "Build payment APIs", timeout=30.0)

        assert result == analysis
        kwargs = llm.generate_structured.call_args.kwargs
        assert kwargs["output_model"] is JobAnalysis
        assert kwargs["system_prompt"] == ANALYSIS_SYSTEM_PROMPT
        assert kwargs["timeout"] == 30.0
        assert "Build payment APIs" in kwargs["prompt"]
        assert "Ada Lovelace" in kwargs["prompt"]

    @pytest.mark.asyncio
    async def test_tailor_document_includes_analysis(self, config, sample_document, analysis):
        llm = AsyncMock()
        llm.generate_structured.return_value = sample_document
        backend = LiteLLMBackend(config=config, llm=llm)

        result = await backend.tailor_document(sample_document, "Build payment APIs", analysis)

        assert result == sample_document
        kwargs = llm.generate_structured.call_args.kwargs
        assert kwargs["output_model"] is ResumeDocument
        assert kwargs["system_prompt"] == TAILORING_SYSTEM_PROMPT
        assert kwargs["timeout"] is None
        assert '"match_score": 64' in kwargs["prompt"]

    @pytest.mark.asyncio
    async def test_cover_letter_is_plain_text(self, config, sample_document):
        llm = AsyncMock()
        llm.generate_text.return_value = "Dear Acme,"
        backend = LiteLLMBackend(config=config, llm=llm)

        result = await backend.generate_cover_letter(
            sample_document,
            "Backend Engineer",
            "Acme",
            "Build payment APIs",
            cv_summary="Payments specialist.",
            timeout=12.0,
        )

        assert result == "Dear Acme,"
        kwargs = llm.generate_text.call_args.kwargs
        assert "250 words" in kwargs["system_prompt"]
        assert "Backend Engineer position at Acme" in kwargs["prompt"]
        assert "Payments specialist." in kwargs["prompt"]
        assert kwargs["timeout"] == 12.0
        llm.generate_structured.assert_not_called()
