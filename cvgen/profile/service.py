"""Business logic service for master profiles.

Profiles use upsert semantics: the first write creates the profile and every
later write replaces its document in place.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from cvgen.profile.models import MasterProfile
from cvgen.profile.repository import ProfileRepository
from cvgen.resume.models import ResumeDocument
from cvgen.resume.sections import Section, SectionDecodeError, apply_section
from cvgen.resume.validation import ResumeValidationError, validate_document

logger = logging.getLogger(__name__)


class ProfileNotFoundError(Exception):
    """Raised when a user has no profile, or none usable for generation."""

    kind = "profile-not-found"

    def __init__(self, user_id: str, message: str = "profile not found"):
        super().__init__(message)
        self.user_id = user_id


class InvalidProfileDataError(ValueError):
    """Raised when profile data fails to decode or validate."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error


class ProfileService:
    """Fetch, replace, patch and delete a user's master profile."""

    def __init__(self, repository: ProfileRepository):
        """Initialize the service.

        Args:
            repository: The ProfileRepository instance for database access.
        """
        self.repository = repository

    async def get_profile(self, user_id: str) -> MasterProfile:
        """Get a user's profile, or an unsaved empty one if none exists."""
        profile = await self.repository.get(user_id)
        if profile is None:
            return MasterProfile(user_id=user_id)
        return profile

    async def get_existing(self, user_id: str) -> MasterProfile | None:
        """Get a user's profile only if it has been saved."""
        return await self.repository.get(user_id)

    async def create_or_update(
        self,
        user_id: str,
        data: ResumeDocument | dict[str, Any],
    ) -> MasterProfile:
        """Replace the user's whole profile document.

        Args:
            user_id: Owner of the profile.
            data: The new document, as a model or a JSON Resume dictionary.

        Returns:
            The stored profile.

        Raises:
            InvalidProfileDataError: If the document fails to decode or validate.
        """
        document = self._coerce_document(data)
        try:
            validate_document(document)
        except ResumeValidationError as e:
            raise InvalidProfileDataError(f"invalid resume data: {e}", e) from e

        profile = await self.repository.upsert(user_id, document)
        logger.info(f"Saved profile for user {user_id}")
        return profile

    async def update_section(
        self,
        user_id: str,
        section: str | Section,
        payload: Any,
    ) -> MasterProfile:
        """Replace one section of the user's profile.

        A missing profile is created from an empty document.

        Args:
            user_id: Owner of the profile.
            section: Name of the section to replace.
            payload: Raw section payload (JSON text or decoded data).

        Returns:
            The stored profile.

        Raises:
            InvalidSectionError: If the section name is unknown.
            InvalidProfileDataError: If the payload or resulting document is invalid.
        """
        existing = await self.get_profile(user_id)
        try:
            updated = apply_section(existing.resume_data, section, payload)
        except (SectionDecodeError, ResumeValidationError) as e:
            raise InvalidProfileDataError(f"invalid resume data: {e}", e) from e

        profile = await self.repository.upsert(user_id, updated)
        logger.info(f"Updated section {profile_section_name(section)} for user {user_id}")
        return profile

    async def delete_profile(self, user_id: str) -> None:
        """Delete the user's profile.

        Raises:
            ProfileNotFoundError: If the user has no profile.
        """
        deleted = await self.repository.delete(user_id)
        if not deleted:
            raise ProfileNotFoundError(user_id)
        logger.info(f"Deleted profile for user {user_id}")

    def _coerce_document(self, data: ResumeDocument | dict[str, Any]) -> ResumeDocument:
        if isinstance(data, ResumeDocument):
            return data
        try:
            return ResumeDocument.model_validate(data)
        except ValidationError as e:
            raise InvalidProfileDataError(f"invalid resume data: {e}", e) from e


def profile_section_name(section: str | Section) -> str:
    """Plain name of a section for log messages."""
    return section.value if isinstance(section, Section) else str(section)
