"""Data models for AI-assisted generation.

Contains the structured job analysis returned by the model, the request
payloads accepted by the generation pipeline and the credit summary shown to
callers.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field

from cvgen.credits.models import CreditLedgerEntry


class JobAnalysis(BaseModel):
    """Analysis of how well a candidate profile fits a job description."""

    match_score: Annotated[int, Field(ge=0, le=100)] = Field(
        ..., description="How well the profile fits the job (0-100)"
    )
    matching_skills: list[str] = Field(
        ..., description="Skills from the profile the job asks for"
    )
    missing_skills: list[str] = Field(
        ..., description="Skills the job asks for that the profile lacks"
    )
    relevant_experiences: list[str] = Field(
        ..., description="Profile experiences most relevant to the job"
    )
    suggestions: list[str] = Field(
        ..., description="Concrete improvements for the tailored CV"
    )
    keywords_to_include: list[str] = Field(
        ..., description="Job keywords the tailored CV should mention"
    )


class GenerateCVRequest(BaseModel):
    """Request to generate a job-tailored CV from the master profile."""

    job_description: str = Field(..., description="Full job description text")
    cv_name: str | None = Field(default=None, description="Name for the new CV")
    job_title: str | None = Field(default=None, description="Job title")
    company_name: str | None = Field(default=None, description="Hiring company")
    job_url: str | None = Field(default=None, description="Job posting URL")

    def resolved_name(self) -> str:
        """CV name, defaulting to the job title when no name was given."""
        if self.cv_name and self.cv_name.strip():
            return self.cv_name.strip()
        if self.job_title and self.job_title.strip():
            return f"{self.job_title.strip()} CV"
        return "Tailored CV"


class GenerateCoverLetterRequest(BaseModel):
    """Request to generate a cover letter, optionally linked to a CV."""

    job_title: str = Field(default="", description="Job title (required)")
    company_name: str = Field(default="", description="Hiring company (required)")
    job_description: str | None = Field(default=None, description="Job description text")
    cv_id: str | None = Field(default=None, description="CV to draw context from")


class CreditsSummary(BaseModel):
    """A user's generation balance as shown to callers."""

    free_used: int
    free_limit: int
    free_remaining: int
    paid_credits: int
    total_generations: int
    remaining: int

    @classmethod
    def from_entry(cls, entry: CreditLedgerEntry) -> CreditsSummary:
        """Build a summary from a ledger entry."""
        return cls(
            free_used=entry.free_used,
            free_limit=entry.free_limit,
            free_remaining=entry.free_remaining,
            paid_credits=entry.paid_credits,
            total_generations=entry.total_generations,
            remaining=entry.remaining,
        )
