"""Integration tests for the generation workflow.

Runs the real LiteLLM backend against a patched ``acompletion`` and a real
SQLite database.
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from cvgen.ai.backend import LiteLLMBackend
from cvgen.ai.config import AIConfig
from cvgen.ai.errors import AnalysisFailedError
from cvgen.ai.models import GenerateCoverLetterRequest, GenerateCVRequest
from cvgen.ai.service import GenerationService
from cvgen.cover_letter.repository import CoverLetterRepository
from cvgen.cover_letter.service import CoverLetterService
from cvgen.credits.repository import CreditRepository
from cvgen.credits.service import CreditLedger, OutOfCreditsError
from cvgen.cv.repository import CVRepository
from cvgen.cv.service import CVService
from cvgen.profile.repository import ProfileRepository
from cvgen.profile.service import ProfileService
from cvgen.storage.database import Database

ANALYSIS_JSON = json.dumps(
    {
        "match_score": 77,
        "matching_skills": ["Python"],
        "missing_skills": ["Terraform"],
        "relevant_experiences": ["Backend Engineer at Initech"],
        "suggestions": ["Quantify the payments work"],
        "keywords_to_include": ["event-driven"],
    }
)


def make_response(content: str) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content, tool_calls=None))]
    return response


def build_service(database: Database, settings) -> GenerationService:
    profiles = ProfileRepository(database)
    backend = LiteLLMBackend(config=AIConfig(_env_file=None, llm_api_key="test-key"))
    return GenerationService(
        backend=backend,
        ledger=CreditLedger(CreditRepository(database), settings),
        profiles=profiles,
        cvs=CVService(CVRepository(database), profiles, settings),
        cover_letters=CoverLetterService(CoverLetterRepository(database)),
    )


class TestFullWorkflow:
    """Profile to tailored CV to cover letter, end-to-end."""

    @pytest.mark.asyncio
    async def test_profile_cv_and_letter(self, database, settings, sample_resume_data):
        profiles = ProfileService(ProfileRepository(database))
        service = build_service(database, settings)

        # Step 1: Save the master profile
        await profiles.create_or_update("ada", sample_resume_data)

        tailored = dict(sample_resume_data)
        tailored["basics"] = {**sample_resume_data["basics"], "summary": "Payments engineer."}

        with patch("cvgen.ai.llm.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.side_effect = [
                make_response(ANALYSIS_JSON),
                make_response("```json\n" + json.dumps(tailored) + "\n```"),
                make_response("Dear Acme,\n\nI build payment systems.\n\nAda"),
            ]

            # Step 2: Generate a tailored CV
            cv_result = await service.generate_cv(
                "ada",
                GenerateCVRequest(
                    job_description="Event-driven payments in Python.",
                    job_title="Payments Engineer",
                    company_name="Acme",
                ),
                timeout=60,
            )

            # Step 3: Generate a letter linked to it
            letter_result = await service.generate_cover_letter(
                "ada",
                GenerateCoverLetterRequest(
                    job_title="Payments Engineer", company_name="Acme", cv_id=cv_result.cv.id
                ),
            )

        assert mock_completion.await_count == 3
        assert cv_result.cv.name == "Payments Engineer CV"
        assert cv_result.cv.match_score == 77
        assert cv_result.cv.cv_data.summary == "Payments engineer."
        assert cv_result.credits_remaining == 2

        letter_prompt = mock_completion.call_args_list[2].kwargs["messages"][-1]["content"]
        assert "Event-driven payments in Python." in letter_prompt
        assert "Payments engineer." in letter_prompt
        assert letter_result.cover_letter.cv_id == cv_result.cv.id
        assert letter_result.credits_remaining == 1

        profile = await profiles.get_profile("ada")
        assert profile.resume_data.summary == "Engineer who likes engines."

    @pytest.mark.asyncio
    async def test_malformed_model_output_costs_nothing(
        self, database, settings, sample_resume_data
    ):
        await ProfileService(ProfileRepository(database)).create_or_update(
            "ada", sample_resume_data
        )
        service = build_service(database, settings)

        with patch("cvgen.ai.llm.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = make_response("I cannot help with that.")

            with pytest.raises(AnalysisFailedError):
                await service.generate_cv("ada", GenerateCVRequest(job_description="Python"))

        summary = await service.get_credits("ada")
        assert summary.remaining == 3
        assert summary.total_generations == 0

    @pytest.mark.asyncio
    async def test_free_allowance_runs_out(self, database, settings, sample_resume_data):
        await ProfileService(ProfileRepository(database)).create_or_update(
            "ada", sample_resume_data
        )
        service = build_service(database, settings)

        with patch("cvgen.ai.llm.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = make_response("Dear Acme,")
            request = GenerateCoverLetterRequest(job_title="Engineer", company_name="Acme")

            for expected in (2, 1, 0):
                result = await service.generate_cover_letter("ada", request)
                assert result.credits_remaining == expected

            with pytest.raises(OutOfCreditsError):
                await service.generate_cover_letter("ada", request)

        assert mock_completion.await_count == 3


class TestDatabasePersistence:
    """Test that state persists between sessions."""

    @pytest.mark.asyncio
    async def test_credits_and_cvs_survive_reopen(self, settings, sample_resume_data):
        async with Database(settings.database_path) as db:
            profiles = ProfileRepository(db)
            await ProfileService(profiles).create_or_update("ada", sample_resume_data)
            cvs = CVService(CVRepository(db), profiles, settings)
            cv = await cvs.create_cv("ada")
            await CreditLedger(CreditRepository(db), settings).consume_one("ada")

        async with Database(settings.database_path) as db:
            profiles = ProfileRepository(db)
            cvs = CVService(CVRepository(db), profiles, settings)
            stored = await cvs.get_cv("ada", cv.id)
            entry = await CreditLedger(CreditRepository(db), settings).get_or_create("ada")

        assert stored.cv_data.candidate_name == "Ada Lovelace"
        assert entry.free_used == 1
        assert entry.remaining == 2
