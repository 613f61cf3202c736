"""Main Generation Service.

Orchestrates the credit-gated pipelines that turn a master profile and a job
description into a job analysis, a tailored CV or a cover letter.

Each pipeline is linear with early exits: validate input, check credits,
load the profile, call the backend, save the artifact, then consume one
credit. Nothing is consumed unless the artifact was saved, and a failure
to consume after saving never fails the request.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import partial
from typing import Any, TypeVar

import aiosqlite
from pydantic import BaseModel, ValidationError

from cvgen.ai.backend import GenerativeBackend
from cvgen.ai.errors import (
    AnalysisFailedError,
    CoverLetterFailedError,
    EmptyJobDescriptionError,
    GenerationError,
    GenerationFailedError,
    InvalidResponseError,
    MissingJobDetailsError,
    PersistFailedError,
    TailoringFailedError,
)
from cvgen.ai.models import (
    CreditsSummary,
    GenerateCoverLetterRequest,
    GenerateCVRequest,
    JobAnalysis,
)
from cvgen.cover_letter.models import CoverLetterRecord
from cvgen.cover_letter.service import CoverLetterService
from cvgen.credits.service import CreditLedger
from cvgen.cv.models import GeneratedCV
from cvgen.cv.service import CVNotFoundError, CVService
from cvgen.profile.repository import ProfileRepository
from cvgen.profile.service import ProfileNotFoundError
from cvgen.resume.models import ResumeDocument

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)
A = TypeVar("A")


@dataclass
class GenerateCVResult:
    """Result of a successful CV generation."""

    cv: GeneratedCV
    analysis: JobAnalysis
    credits_remaining: int

    def to_dict(self) -> dict:
        return {
            "cv": self.cv.to_dict(),
            "analysis": self.analysis.model_dump(),
            "credits_remaining": self.credits_remaining,
        }


@dataclass
class GenerateCoverLetterResult:
    """Result of a successful cover letter generation."""

    cover_letter: CoverLetterRecord
    credits_remaining: int

    def to_dict(self) -> dict:
        return {
            "cover_letter": self.cover_letter.to_dict(),
            "credits_remaining": self.credits_remaining,
        }


class Deadline:
    """Time budget shared by every backend call of one request."""

    def __init__(self, timeout: float | None):
        self._loop = asyncio.get_running_loop()
        self._expires_at = self._loop.time() + timeout if timeout is not None else None

    def remaining(self) -> float | None:
        """Seconds left in the budget, or None when there is no deadline.

        Raises:
            GenerationFailedError: If the budget is used up.
        """
        if self._expires_at is None:
            return None
        left = self._expires_at - self._loop.time()
        if left <= 0:
            raise GenerationFailedError("request deadline exceeded")
        return left


class GenerationService:
    """Main service for AI-assisted generation.

    Orchestrates the pipelines:
    1. Validate the request
    2. Check the user's credits (not for analysis)
    3. Load the master profile
    4. Analyze the job, then tailor the CV or write the letter
    5. Save the artifact
    6. Consume one credit
    """

    def __init__(
        self,
        backend: GenerativeBackend,
        ledger: CreditLedger,
        profiles: ProfileRepository,
        cvs: CVService,
        cover_letters: CoverLetterService,
    ):
        """Initialize the generation service.

        Args:
            backend: Generative backend used for every model call.
            ledger: Credit ledger gating generation.
            profiles: Repository holding the master profiles.
            cvs: CV service used to read and save CVs.
            cover_letters: Cover letter service used to save letters.
        """
        self.backend = backend
        self.ledger = ledger
        self.profiles = profiles
        self.cvs = cvs
        self.cover_letters = cover_letters
        # Save-and-charge tasks still running after their caller was cancelled
        self._pending_charges: set[asyncio.Task] = set()

    async def analyze_job(
        self,
        user_id: str,
        job_description: str,
        *,
        timeout: float | None = None,
    ) -> JobAnalysis:
        """Analyze how well the user's profile fits a job.

        Analysis is free: it neither checks nor consumes credits.

        Raises:
            EmptyJobDescriptionError: If the job description is blank.
            ProfileNotFoundError: If the user has no usable profile.
            AnalysisFailedError: If the backend call fails.
        """
        if not job_description or not job_description.strip():
            raise EmptyJobDescriptionError()

        deadline = Deadline(timeout)
        profile = await self._load_profile(user_id)
        return await self._analyze(profile, job_description, deadline)

    async def generate_cv(
        self,
        user_id: str,
        request: GenerateCVRequest,
        *,
        timeout: float | None = None,
    ) -> GenerateCVResult:
        """Generate and save a CV tailored to a job.

        Args:
            user_id: The requesting user.
            request: Job details and optional CV name.
            timeout: Optional deadline in seconds shared by both model calls.

        Returns:
            GenerateCVResult with the saved CV, the analysis and the balance.

        Raises:
            EmptyJobDescriptionError: If the job description is blank.
            OutOfCreditsError: If the user has no credits left.
            ProfileNotFoundError: If the user has no usable profile.
            AnalysisFailedError: If job analysis fails.
            TailoringFailedError: If tailoring fails.
            PersistFailedError: If the CV could not be saved.
        """
        if not request.job_description or not request.job_description.strip():
            raise EmptyJobDescriptionError()

        deadline = Deadline(timeout)
        logger.info(f"Starting CV generation for user {user_id}")

        logger.info("Step 1: Checking credits...")
        entry = await self.ledger.check_available(user_id)

        logger.info("Step 2: Loading profile...")
        profile = await self._load_profile(user_id)

        logger.info("Step 3: Analyzing job...")
        analysis = await self._analyze(profile, request.job_description, deadline)

        logger.info("Step 4: Tailoring CV...")
        tailored = await self._tailor(profile, request.job_description, analysis, deadline)

        logger.info("Step 5: Saving CV and consuming credit...")
        cv, credits_remaining = await self._save_and_charge(
            user_id,
            partial(
                self.cvs.save_generated,
                user_id,
                name=request.resolved_name(),
                cv_data=tailored,
                analysis=analysis,
                job_description=request.job_description,
                job_title=request.job_title or None,
                company_name=request.company_name or None,
                job_url=request.job_url or None,
            ),
            entry.remaining,
            "generated CV",
        )

        logger.info(
            f"Generated CV {cv.id} for user {user_id} "
            f"(match score {analysis.match_score}, {credits_remaining} credits left)"
        )
        return GenerateCVResult(cv=cv, analysis=analysis, credits_remaining=credits_remaining)

    async def generate_cover_letter(
        self,
        user_id: str,
        request: GenerateCoverLetterRequest,
        *,
        timeout: float | None = None,
    ) -> GenerateCoverLetterResult:
        """Generate and save a cover letter.

        When ``request.cv_id`` names one of the user's CVs, its job
        description fills a missing request description, its summary is
        passed to the model and the letter links to it. An unknown or
        malformed ``cv_id`` is ignored.

        Raises:
            MissingJobDetailsError: If job title or company name is missing.
            OutOfCreditsError: If the user has no credits left.
            ProfileNotFoundError: If the user has no usable profile.
            CoverLetterFailedError: If the backend call fails.
            PersistFailedError: If the letter could not be saved.
        """
        job_title = (request.job_title or "").strip()
        company_name = (request.company_name or "").strip()
        if not job_title or not company_name:
            raise MissingJobDetailsError()

        deadline = Deadline(timeout)
        logger.info(f"Starting cover letter generation for user {user_id}")

        entry = await self.ledger.check_available(user_id)
        profile = await self._load_profile(user_id)

        job_description = request.job_description or ""
        cv_summary = ""
        linked_cv_id = None
        if request.cv_id:
            cv = await self._find_cv(user_id, request.cv_id)
            if cv is not None:
                if not job_description.strip() and cv.job_description:
                    job_description = cv.job_description
                cv_summary = cv.cv_data.summary
                linked_cv_id = cv.id

        if not job_description.strip():
            job_description = f"Position: {job_title} at {company_name}"

        try:
            content = await self.backend.generate_cover_letter(
                profile,
                job_title,
                company_name,
                job_description,
                cv_summary,
                timeout=deadline.remaining(),
            )
        except GenerationError as e:
            raise CoverLetterFailedError(f"failed to generate cover letter: {e}", e) from e

        if not isinstance(content, str) or not content.strip():
            error = InvalidResponseError("backend returned an empty cover letter")
            raise CoverLetterFailedError(f"failed to generate cover letter: {error}", error)

        letter, credits_remaining = await self._save_and_charge(
            user_id,
            partial(
                self.cover_letters.save,
                user_id,
                content=content.strip(),
                cv_id=linked_cv_id,
                job_title=job_title,
                company_name=company_name,
            ),
            entry.remaining,
            "cover letter",
        )
        return GenerateCoverLetterResult(cover_letter=letter, credits_remaining=credits_remaining)

    async def get_credits(self, user_id: str) -> CreditsSummary:
        """Get the user's generation balance."""
        entry = await self.ledger.get_or_create(user_id)
        return CreditsSummary.from_entry(entry)

    async def _load_profile(self, user_id: str) -> ResumeDocument:
        """Load the user's profile document.

        A profile without a candidate name counts as missing.
        """
        profile = await self.profiles.get(user_id)
        if profile is None:
            raise ProfileNotFoundError(
                user_id, "profile not found: create a master profile first"
            )
        if not profile.is_usable:
            raise ProfileNotFoundError(
                user_id, "profile is incomplete: add at least your name first"
            )
        return profile.resume_data

    async def _find_cv(self, user_id: str, cv_id: str) -> GeneratedCV | None:
        try:
            return await self.cvs.get_cv(user_id, cv_id)
        except CVNotFoundError:
            logger.info(f"Ignoring unknown CV {cv_id} for cover letter of user {user_id}")
            return None

    async def _analyze(
        self, profile: ResumeDocument, job_description: str, deadline: Deadline
    ) -> JobAnalysis:
        try:
            raw = await self.backend.analyze_job(
                profile, job_description, timeout=deadline.remaining()
            )
            return _decode(JobAnalysis, raw)
        except GenerationError as e:
            raise AnalysisFailedError(f"failed to analyze job: {e}", e) from e

    async def _tailor(
        self,
        profile: ResumeDocument,
        job_description: str,
        analysis: JobAnalysis,
        deadline: Deadline,
    ) -> ResumeDocument:
        try:
            raw = await self.backend.tailor_document(
                profile, job_description, analysis, timeout=deadline.remaining()
            )
            return _decode(ResumeDocument, raw)
        except GenerationError as e:
            raise TailoringFailedError(f"failed to tailor CV: {e}", e) from e

    async def _save_and_charge(
        self,
        user_id: str,
        save: Callable[[], Awaitable[A]],
        remaining_before: int,
        artifact_name: str,
    ) -> tuple[A, int]:
        """Save an artifact and consume its credit as one uninterruptible step.

        Cancelling the caller does not stop the step: once the save has
        started, the artifact is stored and the credit is charged.

        Returns:
            The saved artifact and the balance after consumption.

        Raises:
            PersistFailedError: If the artifact could not be saved.
        """

        async def save_then_consume() -> tuple[A, int]:
            try:
                artifact = await save()
            except aiosqlite.Error as e:
                raise PersistFailedError(f"failed to save {artifact_name}: {e}", e) from e
            return artifact, await self._consume_credit(user_id, remaining_before)

        task = asyncio.ensure_future(save_then_consume())
        self._pending_charges.add(task)
        task.add_done_callback(self._pending_charges.discard)
        return await asyncio.shield(task)

    async def _consume_credit(self, user_id: str, remaining_before: int) -> int:
        """Consume one credit after a saved generation.

        Returns:
            The balance after consumption, or an estimate if the update failed.
        """
        try:
            entry = await self.ledger.consume_one(user_id)
        except Exception as e:
            logger.warning(f"Failed to consume credit for user {user_id}: {e}")
            return max(0, remaining_before - 1)
        return entry.remaining


def _decode(model: type[M], raw: Any) -> M:
    """Re-validate a backend output as ``model``.

    Raises:
        InvalidResponseError: If the output does not fit the model.
    """
    try:
        if isinstance(raw, (str, bytes)):
            return model.model_validate_json(raw)
        if isinstance(raw, BaseModel):
            raw = raw.model_dump(by_alias=True)
        return model.model_validate(raw)
    except ValidationError as e:
        raise InvalidResponseError(f"backend returned invalid {model.__name__}: {e}", e) from e
