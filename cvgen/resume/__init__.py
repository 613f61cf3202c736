"""Resume document model.

Public API:
- ResumeDocument: JSON Resume shaped document shared by profiles and CVs
- Section: closed set of top-level section names
- apply_section: replace one section from a raw payload
- validate_document: field format validation
"""

from cvgen.resume.models import (
    Award,
    Basics,
    Certificate,
    Education,
    Interest,
    Language,
    Location,
    Project,
    Publication,
    Reference,
    ResumeDocument,
    Skill,
    SocialProfile,
    Volunteer,
    Work,
)
from cvgen.resume.sections import (
    InvalidSectionError,
    Section,
    SectionDecodeError,
    apply_section,
    decode_section,
    parse_section,
    valid_sections,
)
from cvgen.resume.validation import (
    InvalidDateError,
    InvalidEmailError,
    InvalidPhoneError,
    InvalidURLError,
    ResumeValidationError,
    validate_document,
)

__all__ = [
    # Document
    "ResumeDocument",
    "Basics",
    "Location",
    "SocialProfile",
    "Work",
    "Volunteer",
    "Education",
    "Award",
    "Certificate",
    "Publication",
    "Skill",
    "Language",
    "Interest",
    "Reference",
    "Project",
    # Sections
    "Section",
    "valid_sections",
    "parse_section",
    "decode_section",
    "apply_section",
    "InvalidSectionError",
    "SectionDecodeError",
    # Validation
    "validate_document",
    "ResumeValidationError",
    "InvalidEmailError",
    "InvalidURLError",
    "InvalidPhoneError",
    "InvalidDateError",
]
