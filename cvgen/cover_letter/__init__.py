"""Cover letter collection.

Public API:
- CoverLetterService: list, create, update and delete cover letters
- CoverLetterRepository: database repository for cover letters
- CoverLetterRecord: data model for a stored letter
"""

from cvgen.cover_letter.models import CoverLetterRecord, CreateCoverLetterInput
from cvgen.cover_letter.repository import CoverLetterRepository
from cvgen.cover_letter.service import CoverLetterNotFoundError, CoverLetterService

__all__ = [
    "CoverLetterService",
    "CoverLetterRepository",
    "CoverLetterNotFoundError",
    "CoverLetterRecord",
    "CreateCoverLetterInput",
]
