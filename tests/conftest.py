"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from cvgen.ai.backend import GenerativeBackend
from cvgen.ai.models import JobAnalysis
from cvgen.ai.service import GenerationService
from cvgen.config.settings import Settings
from cvgen.cover_letter.repository import CoverLetterRepository
from cvgen.cover_letter.service import CoverLetterService
from cvgen.credits.repository import CreditRepository
from cvgen.credits.service import CreditLedger
from cvgen.cv.repository import CVRepository
from cvgen.cv.service import CVService
from cvgen.profile.repository import ProfileRepository
from cvgen.profile.service import ProfileService
from cvgen.resume.models import ResumeDocument
from cvgen.storage.database import Database


class FakeBackend(GenerativeBackend):
    """Deterministic backend recording every call.

    Set ``analysis``, ``tailored`` or ``letter`` to change outputs, or one
    of the ``*_error`` attributes to make a call raise.
    """

    def __init__(self) -> None:
        self.analysis: object = JobAnalysis(
            match_score=82,
            matching_skills=["Python", "SQL"],
            missing_skills=["Kubernetes"],
            relevant_experiences=["Backend Engineer at Initech"],
            suggestions=["Lead with the payments platform work"],
            keywords_to_include=["distributed systems"],
        )
        self.tailored: object | None = None
        self.letter: object = "Dear Hiring Manager,\n\nI would love to join.\n\nSincerely,\nAda"
        self.analyze_error: Exception | None = None
        self.tailor_error: Exception | None = None
        self.letter_error: Exception | None = None
        self.calls: list[tuple[str, dict]] = []

    async def analyze_job(self, profile, job_description, *, timeout=None):
        self.calls.append(
            ("analyze", {"profile": profile, "job_description": job_description, "timeout": timeout})
        )
        if self.analyze_error is not None:
            raise self.analyze_error
        return self.analysis

    async def tailor_document(self, profile, job_description, analysis, *, timeout=None):
        self.calls.append(
            ("tailor", {"profile": profile, "analysis": analysis, "timeout": timeout})
        )
        if self.tailor_error is not None:
            raise self.tailor_error
        if self.tailored is not None:
            return self.tailored
        tailored = profile.model_copy(deep=True)
        tailored.basics.summary = "Backend engineer focused on distributed systems."
        return tailored

    async def generate_cover_letter(
        self,
        profile,
        job_title,
        company_name,
        job_description,
        cv_summary="",
        *,
        timeout=None,
    ):
        self.calls.append(
            (
                "letter",
                {
                    "job_title": job_title,
                    "company_name": company_name,
                    "job_description": job_description,
                    "cv_summary": cv_summary,
                    "timeout": timeout,
                },
            )
        )
        if self.letter_error is not None:
            raise self.letter_error
        return self.letter

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def sample_resume_data() -> dict:
    """Sample JSON Resume document as decoded JSON."""
    return {
        "basics": {
            "name": "Ada Lovelace",
            "label": "Backend Engineer",
            "email": "ada@acme.io",
            "phone": "+44 (20) 7946-0958",
            "url": "https://ada.acme.io",
            "summary": "Engineer who likes engines.",
            "location": {"city": "London", "countryCode": "GB"},
            "profiles": [
                {"network": "GitHub", "username": "ada", "url": "https://github.com/ada"}
            ],
        },
        "work": [
            {
                "name": "Initech",
                "position": "Backend Engineer",
                "url": "https://initech.acme.io",
                "startDate": "2019-04",
                "endDate": "2023",
                "highlights": ["Built the payments platform"],
            }
        ],
        "education": [
            {
                "institution": "University of London",
                "area": "Mathematics",
                "studyType": "Bachelor",
                "startDate": "2012",
                "endDate": "2015-06-30",
            }
        ],
        "skills": [{"name": "Python", "level": "Expert", "keywords": ["asyncio"]}],
    }


@pytest.fixture
def sample_document(sample_resume_data) -> ResumeDocument:
    """Sample resume document."""
    return ResumeDocument.from_dict(sample_resume_data)


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from the environment and .env files."""
    return Settings(
        _env_file=None,
        database_path=tmp_path / "cvgen.db",
        free_generations_limit=3,
        default_template_id="professional",
        cv_page_size=10,
    )


@pytest.fixture
async def database(settings):
    """Initialized database in a temporary directory."""
    db = Database(settings.database_path)
    await db.initialize()
    yield db
    await db.close()


@pytest.fixture
def profile_repo(database) -> ProfileRepository:
    return ProfileRepository(database)


@pytest.fixture
def profile_service(profile_repo) -> ProfileService:
    return ProfileService(profile_repo)


@pytest.fixture
def ledger(database, settings) -> CreditLedger:
    return CreditLedger(CreditRepository(database), settings)


@pytest.fixture
def cv_service(database, profile_repo, settings) -> CVService:
    return CVService(CVRepository(database), profile_repo, settings)


@pytest.fixture
def letter_service(database) -> CoverLetterService:
    return CoverLetterService(CoverLetterRepository(database))


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def generation_service(
    fake_backend, ledger, profile_repo, cv_service, letter_service
) -> GenerationService:
    return GenerationService(
        backend=fake_backend,
        ledger=ledger,
        profiles=profile_repo,
        cvs=cv_service,
        cover_letters=letter_service,
    )
