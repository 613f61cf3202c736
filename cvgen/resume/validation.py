"""Field-level validation for resume documents.

Validation never mutates the document and stops at the first violation, so a
rejected write always reports exactly one problem. Absent or blank optional
fields are always valid.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from urllib.parse import urlsplit

from email_validator import EmailNotValidError, validate_email

from cvgen.resume.models import ResumeDocument

# YYYY, YYYY-MM or YYYY-MM-DD
DATE_PATTERN = re.compile(r"^\d{4}(-\d{2}(-\d{2})?)?$", re.ASCII)

# Digits plus common separators: spaces, dashes, plus, parentheses, dots
PHONE_PATTERN = re.compile(r"^[\d\s\-+().]+$", re.ASCII)


class ResumeValidationError(ValueError):
    """Raised when a resume document field has an invalid format."""

    field_kind = "field"
    expected = "a valid value"

    def __init__(self, field: str, value: str):
        super().__init__(f"invalid {self.field_kind} format at {field}: expected {self.expected}")
        self.field = field
        self.value = value


class InvalidEmailError(ResumeValidationError):
    field_kind = "email"
    expected = "an email address"


class InvalidURLError(ResumeValidationError):
    field_kind = "URL"
    expected = "a URL with a scheme and host"


class InvalidPhoneError(ResumeValidationError):
    field_kind = "phone"
    expected = "digits, spaces and + - ( ) ."


class InvalidDateError(ResumeValidationError):
    field_kind = "date"
    expected = "YYYY, YYYY-MM or YYYY-MM-DD"


def validate_document(document: ResumeDocument | None) -> None:
    """Validate every email, URL, phone and date field of a document.

    Args:
        document: The document to check. ``None`` is accepted as valid.

    Raises:
        ResumeValidationError: On the first field with an invalid format.
    """
    if document is None:
        return

    basics = document.basics
    if basics is not None:
        _check_email(basics.email, "basics.email")
        _check_url(basics.url, "basics.url")
        _check_phone(basics.phone, "basics.phone")
        for i, profile in enumerate(basics.profiles or []):
            _check_url(profile.url, f"basics.profiles[{i}].url")

    _check_entries(document.work, "work", urls=("url",), dates=("start_date", "end_date"))
    _check_entries(
        document.education, "education", urls=("url",), dates=("start_date", "end_date")
    )
    _check_entries(
        document.volunteer, "volunteer", urls=("url",), dates=("start_date", "end_date")
    )
    _check_entries(
        document.projects, "projects", urls=("url",), dates=("start_date", "end_date")
    )
    _check_entries(document.certificates, "certificates", urls=("url",), dates=("date",))
    _check_entries(
        document.publications, "publications", urls=("url",), dates=("release_date",)
    )
    _check_entries(document.awards, "awards", urls=(), dates=("date",))


def is_valid_url(value: str) -> bool:
    """Whether a string parses as a URL with both a scheme and a host."""
    try:
        parts = urlsplit(value.strip())
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.hostname)


def is_valid_date(value: str) -> bool:
    """Whether a string is formatted as YYYY, YYYY-MM or YYYY-MM-DD."""
    return DATE_PATTERN.match(value.strip()) is not None


def _check_entries(
    entries: Iterable[object] | None,
    section: str,
    *,
    urls: tuple[str, ...],
    dates: tuple[str, ...],
) -> None:
    for i, entry in enumerate(entries or []):
        for attr in urls:
            _check_url(getattr(entry, attr), f"{section}[{i}].{attr}")
        for attr in dates:
            _check_date(getattr(entry, attr), f"{section}[{i}].{attr}")


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _check_email(value: str | None, field: str) -> None:
    if _blank(value):
        return
    try:
        validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError as e:
        raise InvalidEmailError(field, value) from e


def _check_url(value: str | None, field: str) -> None:
    if _blank(value):
        return
    if not is_valid_url(value):
        raise InvalidURLError(field, value)


def _check_phone(value: str | None, field: str) -> None:
    if _blank(value):
        return
    if PHONE_PATTERN.match(value) is None:
        raise InvalidPhoneError(field, value)


def _check_date(value: str | None, field: str) -> None:
    if _blank(value):
        return
    if not is_valid_date(value):
        raise InvalidDateError(field, value)
