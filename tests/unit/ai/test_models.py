"""Tests for generation request and analysis models."""

import pytest
from pydantic import ValidationError

from cvgen.ai.models import CreditsSummary, GenerateCVRequest, JobAnalysis
from cvgen.credits.models import CreditLedgerEntry


def analysis_payload(**overrides) -> dict:
    payload = {
        "match_score": 50,
        "matching_skills": [],
        "missing_skills": [],
        "relevant_experiences": [],
        "suggestions": [],
        "keywords_to_include": [],
    }
    payload.update(overrides)
    return payload


class TestJobAnalysis:
    """Test the job analysis shape."""

    @pytest.mark.parametrize("score", [0, 100])
    def test_accepts_score_bounds(self, score):
        assert JobAnalysis(**analysis_payload(match_score=score)).match_score == score

    @pytest.mark.parametrize("score", [-1, 101])
    def test_rejects_score_out_of_range(self, score):
        with pytest.raises(ValidationError):
            JobAnalysis(**analysis_payload(match_score=score))

    def test_all_lists_are_required(self):
        payload = analysis_payload()
        del payload["keywords_to_include"]

        with pytest.raises(ValidationError):
            JobAnalysis(**payload)


class TestGenerateCVRequest:
    """Test CV name resolution."""

    def test_explicit_name_wins(self):
        request = GenerateCVRequest(job_description="x", cv_name=" Mine ", job_title="Dev")

        assert request.resolved_name() == "Mine"

    def test_falls_back_to_job_title(self):
        request = GenerateCVRequest(job_description="x", cv_name="  ", job_title="Dev")

        assert request.resolved_name() == "Dev CV"

    def test_generic_default(self):
        assert GenerateCVRequest(job_description="x").resolved_name() == "Tailored CV"


class TestCreditsSummary:
    def test_from_entry(self):
        entry = CreditLedgerEntry(
            user_id="u1", free_used=2, free_limit=3, paid_credits=4, total_generations=2
        )

        summary = CreditsSummary.from_entry(entry)

        assert summary.free_remaining == 1
        assert summary.remaining == 5
        assert summary.total_generations == 2
