"""Section-level updates of resume documents.

A section update decodes a raw payload into the concrete shape of one of the
twelve top-level sections and replaces that section wholesale. Nothing is
merged: the decoded value becomes the section.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import TypeAdapter, ValidationError

from cvgen.resume.models import (
    Award,
    Basics,
    Certificate,
    Education,
    Interest,
    Language,
    Project,
    Publication,
    Reference,
    ResumeDocument,
    Skill,
    Volunteer,
    Work,
)
from cvgen.resume.validation import validate_document


class Section(str, Enum):
    """Top-level sections of a resume document."""

    BASICS = "basics"
    WORK = "work"
    VOLUNTEER = "volunteer"
    EDUCATION = "education"
    AWARDS = "awards"
    CERTIFICATES = "certificates"
    PUBLICATIONS = "publications"
    SKILLS = "skills"
    LANGUAGES = "languages"
    INTERESTS = "interests"
    REFERENCES = "references"
    PROJECTS = "projects"


class InvalidSectionError(ValueError):
    """Raised when a section name is not one of the known sections."""

    def __init__(self, section: str):
        super().__init__(f"invalid section name: {section!r}")
        self.section = section


class SectionDecodeError(ValueError):
    """Raised when a section payload does not decode into the section's shape."""

    def __init__(self, section: Section, original_error: Exception):
        super().__init__(f"invalid {section.value} data: {original_error}")
        self.section = section
        self.original_error = original_error


# Decode target for every section: a single record for basics, a list of
# entries for the rest.
SECTION_ADAPTERS: dict[Section, TypeAdapter[Any]] = {
    Section.BASICS: TypeAdapter(Basics),
    Section.WORK: TypeAdapter(list[Work]),
    Section.VOLUNTEER: TypeAdapter(list[Volunteer]),
    Section.EDUCATION: TypeAdapter(list[Education]),
    Section.AWARDS: TypeAdapter(list[Award]),
    Section.CERTIFICATES: TypeAdapter(list[Certificate]),
    Section.PUBLICATIONS: TypeAdapter(list[Publication]),
    Section.SKILLS: TypeAdapter(list[Skill]),
    Section.LANGUAGES: TypeAdapter(list[Language]),
    Section.INTERESTS: TypeAdapter(list[Interest]),
    Section.REFERENCES: TypeAdapter(list[Reference]),
    Section.PROJECTS: TypeAdapter(list[Project]),
}

_missing = set(Section) - set(SECTION_ADAPTERS)
if _missing:
    raise RuntimeError(f"sections without a decode target: {sorted(s.value for s in _missing)}")


def valid_sections() -> list[str]:
    """Names of all sections, in document order."""
    return [section.value for section in Section]


def parse_section(name: str | Section) -> Section:
    """Resolve a section name.

    Raises:
        InvalidSectionError: If the name is not a known section.
    """
    if isinstance(name, Section):
        return name
    try:
        return Section(name)
    except ValueError:
        raise InvalidSectionError(str(name)) from None


def decode_section(section: Section, raw_payload: Any) -> Any:
    """Decode a raw payload into the concrete value of a section.

    Args:
        section: Target section.
        raw_payload: JSON text or bytes, or already-decoded Python data.

    Raises:
        SectionDecodeError: If the payload does not fit the section's shape.
    """
    adapter = SECTION_ADAPTERS[section]
    try:
        if isinstance(raw_payload, (str, bytes, bytearray)):
            return adapter.validate_json(raw_payload)
        return adapter.validate_python(raw_payload)
    except ValidationError as e:
        raise SectionDecodeError(section, e) from e


def apply_section(
    document: ResumeDocument,
    section_name: str | Section,
    raw_payload: Any,
) -> ResumeDocument:
    """Replace one section of a document with a decoded payload.

    The input document is never modified; a new document is returned and
    validated as a whole before it is handed back.

    Args:
        document: Current document.
        section_name: One of the twelve section names.
        raw_payload: Section payload (JSON text/bytes or Python data).

    Returns:
        A copy of the document with the section replaced.

    Raises:
        InvalidSectionError: Unknown section name.
        SectionDecodeError: Payload does not decode into the section's shape.
        ResumeValidationError: The updated document has an invalid field.
    """
    section = parse_section(section_name)
    value = decode_section(section, raw_payload)

    updated = document.model_copy(deep=True, update={section.value: value})
    validate_document(updated)
    return updated
