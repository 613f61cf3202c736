"""Data models for generated CVs."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime

from pydantic import BaseModel, Field

from cvgen.ai.models import JobAnalysis
from cvgen.resume.models import ResumeDocument


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


@dataclass
class GeneratedCV:
    """A named CV variant owned by a user.

    The document is a value copy taken when the CV was created or generated;
    later profile edits never reach it.

    Attributes:
        id: Record identifier.
        user_id: Owner of the CV.
        name: Display name.
        cv_data: The CV's own resume document.
        template_id: Rendering template identifier.
        job_url: URL of the job posting the CV targets.
        job_title: Title of the targeted job.
        company_name: Hiring company.
        job_description: Job description used for generation.
        match_score: Fit score from the job analysis (0-100).
        ai_suggestions: Full job analysis recorded at generation time.
        created_at: When the CV was created.
        updated_at: When the CV last changed.
    """

    id: str
    user_id: str
    name: str
    cv_data: ResumeDocument
    template_id: str | None = None
    job_url: str | None = None
    job_title: str | None = None
    company_name: str | None = None
    job_description: str | None = None
    match_score: int | None = None
    ai_suggestions: JobAnalysis | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.match_score is not None and not 0 <= self.match_score <= 100:
            raise ValueError(f"match_score must be between 0 and 100, got {self.match_score}")

    def to_dict(self) -> dict:
        """Serialize the CV to a dictionary.

        Returns:
            Dictionary representation of the CV.
        """
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "cv_data": self.cv_data.to_dict(),
            "template_id": self.template_id,
            "job_url": self.job_url,
            "job_title": self.job_title,
            "company_name": self.company_name,
            "job_description": self.job_description,
            "match_score": self.match_score,
            "ai_suggestions": self.ai_suggestions.model_dump()
            if self.ai_suggestions
            else None,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


@dataclass
class CVListItem:
    """A CV in list views, without its document."""

    id: str
    name: str
    template_id: str | None = None
    job_title: str | None = None
    company_name: str | None = None
    match_score: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "template_id": self.template_id,
            "job_title": self.job_title,
            "company_name": self.company_name,
            "match_score": self.match_score,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


@dataclass
class CVPage:
    """One page of a user's CVs, newest first."""

    items: list[CVListItem] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 10

    @property
    def total_pages(self) -> int:
        """Number of pages needed to show every CV."""
        return math.ceil(self.total / self.page_size) if self.page_size else 0

    def to_dict(self) -> dict:
        return {
            "items": [item.to_dict() for item in self.items],
            "total": self.total,
            "page": self.page,
            "page_size": self.page_size,
            "total_pages": self.total_pages,
        }


class CreateCVInput(BaseModel):
    """Input for creating a CV by hand from the master profile."""

    name: str | None = Field(default=None, description="CV name")
    template_id: str | None = Field(default=None, description="Template identifier")


class UpdateCVInput(BaseModel):
    """Partial update of a CV; fields left as None are not changed."""

    name: str | None = Field(default=None, description="New CV name")
    cv_data: ResumeDocument | None = Field(default=None, description="New CV document")
    template_id: str | None = Field(default=None, description="New template identifier")
