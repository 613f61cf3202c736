"""Business logic service for generated CVs.

Handles listing, manual creation, partial updates, duplication and
deletion of a user's CVs, plus saving CVs produced by the generation
pipeline.
"""

from __future__ import annotations

import logging

from cvgen.ai.models import JobAnalysis
from cvgen.config.settings import Settings, get_settings
from cvgen.cv.models import CreateCVInput, CVPage, GeneratedCV, UpdateCVInput
from cvgen.cv.repository import CVRepository
from cvgen.profile.repository import ProfileRepository
from cvgen.resume.models import ResumeDocument
from cvgen.resume.validation import validate_document
from cvgen.storage.database import new_id, normalize_id, utc_now

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100
DEFAULT_CV_NAME = "Untitled CV"
COPY_SUFFIX = " (Copy)"


class CVNotFoundError(Exception):
    """Raised when a CV does not exist or belongs to another user."""

    kind = "not-found"

    def __init__(self, cv_id: str | None):
        super().__init__("cv not found")
        self.cv_id = cv_id


class CVService:
    """Service for a user's collection of CVs."""

    def __init__(
        self,
        repository: CVRepository,
        profiles: ProfileRepository,
        settings: Settings | None = None,
    ):
        """Initialize the service.

        Args:
            repository: CV repository for database access.
            profiles: Profile repository, source of the document for new CVs.
            settings: Optional Settings. Uses global settings if not provided.
        """
        self.repository = repository
        self.profiles = profiles
        self.settings = settings or get_settings()

    async def list_cvs(
        self, user_id: str, page: int = 1, page_size: int | None = None
    ) -> CVPage:
        """List a user's CVs, newest first.

        A page below 1 becomes 1; a page size outside 1..100 falls back to
        the configured default.
        """
        if page < 1:
            page = 1
        if page_size is None or page_size < 1 or page_size > MAX_PAGE_SIZE:
            page_size = self.settings.cv_page_size

        total = await self.repository.count(user_id)
        items = await self.repository.list_page(
            user_id, limit=page_size, offset=(page - 1) * page_size
        )
        return CVPage(items=items, total=total, page=page, page_size=page_size)

    async def get_cv(self, user_id: str, cv_id: str) -> GeneratedCV:
        """Get one of the user's CVs.

        Raises:
            CVNotFoundError: If the id is malformed, unknown or not the user's.
        """
        key = normalize_id(cv_id)
        cv = await self.repository.get(user_id, key) if key else None
        if cv is None:
            raise CVNotFoundError(cv_id)
        return cv

    async def create_cv(
        self, user_id: str, data: CreateCVInput | None = None
    ) -> GeneratedCV:
        """Create a CV holding a copy of the user's master profile.

        Users without a profile get a CV with an empty document.
        """
        data = data or CreateCVInput()
        profile = await self.profiles.get(user_id)
        document = (
            profile.resume_data.model_copy(deep=True)
            if profile is not None
            else ResumeDocument.empty()
        )

        now = utc_now()
        cv = GeneratedCV(
            id=new_id(),
            user_id=user_id,
            name=data.name or DEFAULT_CV_NAME,
            cv_data=document,
            template_id=data.template_id or self.settings.default_template_id,
            created_at=now,
            updated_at=now,
        )
        await self.repository.insert(cv)
        logger.info(f"Created CV {cv.id} for user {user_id}")
        return cv

    async def save_generated(
        self,
        user_id: str,
        *,
        name: str,
        cv_data: ResumeDocument,
        analysis: JobAnalysis,
        job_description: str,
        job_title: str | None = None,
        company_name: str | None = None,
        job_url: str | None = None,
    ) -> GeneratedCV:
        """Persist a CV produced by the generation pipeline."""
        now = utc_now()
        cv = GeneratedCV(
            id=new_id(),
            user_id=user_id,
            name=name,
            cv_data=cv_data,
            template_id=self.settings.default_template_id,
            job_url=job_url,
            job_title=job_title,
            company_name=company_name,
            job_description=job_description,
            match_score=analysis.match_score,
            ai_suggestions=analysis,
            created_at=now,
            updated_at=now,
        )
        return await self.repository.insert(cv)

    async def update_cv(self, user_id: str, cv_id: str, data: UpdateCVInput) -> GeneratedCV:
        """Change the provided fields of a CV.

        Raises:
            CVNotFoundError: If the user owns no such CV.
            ResumeValidationError: If the new document has an invalid field.
        """
        if data.cv_data is not None:
            validate_document(data.cv_data)

        key = normalize_id(cv_id)
        cv = None
        if key:
            cv = await self.repository.update(
                user_id,
                key,
                name=data.name,
                cv_data=data.cv_data,
                template_id=data.template_id,
            )
        if cv is None:
            raise CVNotFoundError(cv_id)
        logger.info(f"Updated CV {cv.id} for user {user_id}")
        return cv

    async def delete_cv(self, user_id: str, cv_id: str) -> None:
        """Delete one of the user's CVs.

        Raises:
            CVNotFoundError: If the user owns no such CV.
        """
        key = normalize_id(cv_id)
        deleted = await self.repository.delete(user_id, key) if key else False
        if not deleted:
            raise CVNotFoundError(cv_id)
        logger.info(f"Deleted CV {key} for user {user_id}")

    async def duplicate_cv(self, user_id: str, cv_id: str) -> GeneratedCV:
        """Copy a CV under a new id.

        The copy keeps the document and job details but drops the match
        score and suggestions. No credit is involved.

        Raises:
            CVNotFoundError: If the user owns no such CV.
        """
        source = await self.get_cv(user_id, cv_id)

        now = utc_now()
        copy = GeneratedCV(
            id=new_id(),
            user_id=user_id,
            name=source.name + COPY_SUFFIX,
            cv_data=source.cv_data.model_copy(deep=True),
            template_id=source.template_id,
            job_url=source.job_url,
            job_title=source.job_title,
            company_name=source.company_name,
            job_description=source.job_description,
            created_at=now,
            updated_at=now,
        )
        await self.repository.insert(copy)
        logger.info(f"Duplicated CV {source.id} as {copy.id} for user {user_id}")
        return copy
