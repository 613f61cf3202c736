"""Data models for master profiles."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from cvgen.resume.models import ResumeDocument


@dataclass
class MasterProfile:
    """A user's canonical resume document.

    Attributes:
        user_id: Owner of the profile (one profile per user).
        resume_data: The resume document.
        id: Record identifier; None for a profile that was never saved.
        created_at: When the profile was first saved.
        updated_at: When the profile last changed.
    """

    user_id: str
    resume_data: ResumeDocument = field(default_factory=ResumeDocument.empty)
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def exists(self) -> bool:
        """Whether the profile has been saved."""
        return self.id is not None

    @property
    def is_usable(self) -> bool:
        """Whether the profile can feed AI generation (it must carry a name)."""
        return bool(self.resume_data.candidate_name)

    def to_dict(self) -> dict:
        """Serialize the profile to a dictionary."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "resume_data": self.resume_data.to_dict(),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
