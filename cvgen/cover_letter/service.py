"""Business logic service for stored cover letters."""

from __future__ import annotations

import logging

from cvgen.cover_letter.models import CoverLetterRecord, CreateCoverLetterInput
from cvgen.cover_letter.repository import CoverLetterRepository
from cvgen.storage.database import new_id, normalize_id, utc_now

logger = logging.getLogger(__name__)


class CoverLetterNotFoundError(Exception):
    """Raised when a cover letter does not exist or belongs to another user."""

    kind = "not-found"

    def __init__(self, letter_id: str | None):
        super().__init__("cover letter not found")
        self.letter_id = letter_id


class CoverLetterService:
    """Service for a user's cover letters.

    Manually created letters never touch the credit ledger; generated
    letters are saved through ``save`` by the generation pipeline.
    """

    def __init__(self, repository: CoverLetterRepository):
        self.repository = repository

    async def list_cover_letters(self, user_id: str) -> list[CoverLetterRecord]:
        """List a user's cover letters, newest first."""
        return await self.repository.list_for_user(user_id)

    async def get_cover_letter(self, user_id: str, letter_id: str) -> CoverLetterRecord:
        """Get one of the user's cover letters.

        Raises:
            CoverLetterNotFoundError: If the id is malformed, unknown or not the user's.
        """
        key = normalize_id(letter_id)
        letter = await self.repository.get(user_id, key) if key else None
        if letter is None:
            raise CoverLetterNotFoundError(letter_id)
        return letter

    async def create_cover_letter(
        self, user_id: str, data: CreateCoverLetterInput
    ) -> CoverLetterRecord:
        """Save a hand-written cover letter.

        A malformed ``cv_id`` is dropped rather than rejected.
        """
        return await self.save(
            user_id,
            content=data.content,
            cv_id=normalize_id(data.cv_id),
            job_title=data.job_title or None,
            company_name=data.company_name or None,
        )

    async def save(
        self,
        user_id: str,
        *,
        content: str,
        cv_id: str | None = None,
        job_title: str | None = None,
        company_name: str | None = None,
    ) -> CoverLetterRecord:
        """Insert a new cover letter for a user."""
        now = utc_now()
        letter = CoverLetterRecord(
            id=new_id(),
            user_id=user_id,
            cv_id=cv_id,
            content=content,
            job_title=job_title,
            company_name=company_name,
            created_at=now,
            updated_at=now,
        )
        await self.repository.insert(letter)
        logger.info(f"Saved cover letter {letter.id} for user {user_id}")
        return letter

    async def update_cover_letter(
        self, user_id: str, letter_id: str, content: str
    ) -> CoverLetterRecord:
        """Replace the text of one of the user's cover letters.

        Raises:
            CoverLetterNotFoundError: If the user owns no such letter.
        """
        key = normalize_id(letter_id)
        letter = await self.repository.update_content(user_id, key, content) if key else None
        if letter is None:
            raise CoverLetterNotFoundError(letter_id)
        return letter

    async def delete_cover_letter(self, user_id: str, letter_id: str) -> None:
        """Delete one of the user's cover letters.

        Raises:
            CoverLetterNotFoundError: If the user owns no such letter.
        """
        key = normalize_id(letter_id)
        deleted = await self.repository.delete(user_id, key) if key else False
        if not deleted:
            raise CoverLetterNotFoundError(letter_id)
        logger.info(f"Deleted cover letter {key} for user {user_id}")
