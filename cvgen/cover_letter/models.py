"""Data models for cover letters."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, Field


@dataclass
class CoverLetterRecord:
    """A stored cover letter.

    Attributes:
        id: Record identifier.
        user_id: Owner of the letter.
        cv_id: CV the letter was written for; may point at a deleted CV.
        content: Letter text.
        job_title: Title of the targeted job.
        company_name: Hiring company.
        created_at: When the letter was created.
        updated_at: When the letter last changed.
    """

    id: str
    user_id: str
    content: str
    cv_id: str | None = None
    job_title: str | None = None
    company_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def word_count(self) -> int:
        """Number of whitespace-delimited words in the letter."""
        return len(self.content.split())

    def to_dict(self, include_content: bool = True) -> dict:
        """Serialize the letter to a dictionary.

        Args:
            include_content: Whether to include the letter text (omitted in lists).
        """
        data = {
            "id": self.id,
            "user_id": self.user_id,
            "cv_id": self.cv_id,
            "job_title": self.job_title,
            "company_name": self.company_name,
            "word_count": self.word_count,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_content:
            data["content"] = self.content
        return data


class CreateCoverLetterInput(BaseModel):
    """Input for saving a hand-written cover letter."""

    content: str = Field(..., description="Letter text")
    cv_id: str | None = Field(default=None, description="CV the letter belongs to")
    job_title: str | None = Field(default=None, description="Job title")
    company_name: str | None = Field(default=None, description="Hiring company")
