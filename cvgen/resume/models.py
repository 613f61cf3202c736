"""Data models for the resume document.

The document follows the JSON Resume schema (https://jsonresume.org/schema/):
one ``basics`` record plus eleven ordered sections of typed entries. Keys are
camelCase on the wire and snake_case in Python.

Every field is optional. ``None`` means the field was never set, while an
empty string or list is a value the user set explicitly; serialization keeps
the two apart by dropping only ``None``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ResumeModel(BaseModel):
    """Base for all resume document models."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Location(ResumeModel):
    """Physical location of the candidate."""

    address: str | None = Field(default=None, description="Street address")
    postal_code: str | None = Field(
        default=None, alias="postalCode", description="Postal code"
    )
    city: str | None = Field(default=None, description="City")
    country_code: str | None = Field(
        default=None, alias="countryCode", description="ISO country code"
    )
    region: str | None = Field(default=None, description="State or region")


class SocialProfile(ResumeModel):
    """Social media or professional network profile."""

    network: str | None = Field(default=None, description="Network name, e.g. GitHub")
    username: str | None = Field(default=None, description="Username on the network")
    url: str | None = Field(default=None, description="Profile URL")


class Basics(ResumeModel):
    """Basic information: name, contact details, location and profiles."""

    name: str | None = Field(default=None, description="Full name")
    label: str | None = Field(default=None, description="Headline, e.g. Web Developer")
    image: str | None = Field(default=None, description="Picture URL")
    email: str | None = Field(default=None, description="Contact email")
    phone: str | None = Field(default=None, description="Contact phone")
    url: str | None = Field(default=None, description="Personal website")
    summary: str | None = Field(default=None, description="Professional summary")
    location: Location | None = Field(default=None, description="Location")
    profiles: list[SocialProfile] | None = Field(
        default=None, description="Social and professional profiles"
    )


class Work(ResumeModel):
    """Work experience entry."""

    name: str | None = Field(default=None, description="Company name")
    position: str | None = Field(default=None, description="Job title")
    url: str | None = Field(default=None, description="Company website")
    start_date: str | None = Field(default=None, alias="startDate")
    end_date: str | None = Field(default=None, alias="endDate")
    summary: str | None = Field(default=None, description="Role overview")
    highlights: list[str] | None = Field(default=None, description="Accomplishments")
    location: str | None = Field(default=None, description="Work location")


class Volunteer(ResumeModel):
    """Volunteer experience entry."""

    organization: str | None = Field(default=None, description="Organization name")
    position: str | None = Field(default=None, description="Role held")
    url: str | None = Field(default=None, description="Organization website")
    start_date: str | None = Field(default=None, alias="startDate")
    end_date: str | None = Field(default=None, alias="endDate")
    summary: str | None = Field(default=None, description="Role overview")
    highlights: list[str] | None = Field(default=None, description="Accomplishments")


class Education(ResumeModel):
    """Education entry."""

    institution: str | None = Field(default=None, description="School or university")
    url: str | None = Field(default=None, description="Institution website")
    area: str | None = Field(default=None, description="Field of study")
    study_type: str | None = Field(
        default=None, alias="studyType", description="Degree, e.g. Bachelor"
    )
    start_date: str | None = Field(default=None, alias="startDate")
    end_date: str | None = Field(default=None, alias="endDate")
    score: str | None = Field(default=None, description="GPA or grade")
    courses: list[str] | None = Field(default=None, description="Notable courses")


class Award(ResumeModel):
    """Award or recognition."""

    title: str | None = Field(default=None, description="Award title")
    date: str | None = Field(default=None, description="Date received")
    awarder: str | None = Field(default=None, description="Awarding body")
    summary: str | None = Field(default=None, description="Description")


class Certificate(ResumeModel):
    """Professional certification."""

    name: str | None = Field(default=None, description="Certificate name")
    date: str | None = Field(default=None, description="Date issued")
    issuer: str | None = Field(default=None, description="Issuing organization")
    url: str | None = Field(default=None, description="Verification URL")


class Publication(ResumeModel):
    """Publication entry."""

    name: str | None = Field(default=None, description="Publication title")
    publisher: str | None = Field(default=None, description="Publisher")
    release_date: str | None = Field(default=None, alias="releaseDate")
    url: str | None = Field(default=None, description="Publication URL")
    summary: str | None = Field(default=None, description="Abstract or summary")


class Skill(ResumeModel):
    """Skill group with proficiency level and keywords."""

    name: str | None = Field(default=None, description="Skill or skill group")
    level: str | None = Field(default=None, description="Proficiency level")
    keywords: list[str] | None = Field(default=None, description="Related keywords")


class Language(ResumeModel):
    """Spoken language and fluency."""

    language: str | None = Field(default=None, description="Language name")
    fluency: str | None = Field(default=None, description="Fluency level")


class Interest(ResumeModel):
    """Personal interest."""

    name: str | None = Field(default=None, description="Interest")
    keywords: list[str] | None = Field(default=None, description="Related keywords")


class Reference(ResumeModel):
    """Professional reference."""

    name: str | None = Field(default=None, description="Referee name")
    reference: str | None = Field(default=None, description="Reference text")


class Project(ResumeModel):
    """Personal or professional project."""

    name: str | None = Field(default=None, description="Project name")
    description: str | None = Field(default=None, description="Short description")
    highlights: list[str] | None = Field(default=None, description="Accomplishments")
    keywords: list[str] | None = Field(default=None, description="Technologies used")
    start_date: str | None = Field(default=None, alias="startDate")
    end_date: str | None = Field(default=None, alias="endDate")
    url: str | None = Field(default=None, description="Project URL")
    roles: list[str] | None = Field(default=None, description="Roles held")
    entity: str | None = Field(default=None, description="Affiliated entity")
    type: str | None = Field(default=None, description="Project type")


class ResumeDocument(ResumeModel):
    """Complete resume document shared by master profiles and generated CVs."""

    basics: Basics | None = None
    work: list[Work] | None = None
    volunteer: list[Volunteer] | None = None
    education: list[Education] | None = None
    awards: list[Award] | None = None
    certificates: list[Certificate] | None = None
    publications: list[Publication] | None = None
    skills: list[Skill] | None = None
    languages: list[Language] | None = None
    interests: list[Interest] | None = None
    references: list[Reference] | None = None
    projects: list[Project] | None = None

    @classmethod
    def empty(cls) -> ResumeDocument:
        """Return a freshly initialized document with every section present but empty."""
        return cls(
            basics=Basics(),
            work=[],
            volunteer=[],
            education=[],
            awards=[],
            certificates=[],
            publications=[],
            skills=[],
            languages=[],
            interests=[],
            references=[],
            projects=[],
        )

    def is_empty(self) -> bool:
        """Whether the document holds no information at all."""
        if self.basics is not None and self.basics != Basics():
            return False
        for name in SEQUENCE_FIELDS:
            if getattr(self, name):
                return False
        return True

    @property
    def candidate_name(self) -> str:
        """The candidate's name, or an empty string when unset."""
        if self.basics is None or self.basics.name is None:
            return ""
        return self.basics.name.strip()

    @property
    def summary(self) -> str:
        """The professional summary, or an empty string when unset."""
        if self.basics is None or self.basics.summary is None:
            return ""
        return self.basics.summary

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self, indent: int | None = None) -> str:
        """Serialize to a JSON string with camelCase keys."""
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=indent)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResumeDocument:
        """Deserialize from a dictionary."""
        return cls.model_validate(data)

    @classmethod
    def from_json(cls, data: str | bytes) -> ResumeDocument:
        """Deserialize from a JSON string."""
        return cls.model_validate_json(data)


SEQUENCE_FIELDS: tuple[str, ...] = (
    "work",
    "volunteer",
    "education",
    "awards",
    "certificates",
    "publications",
    "skills",
    "languages",
    "interests",
    "references",
    "projects",
)
