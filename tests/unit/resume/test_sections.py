"""Tests for section-level document updates."""

import json

import pytest

from cvgen.resume.models import Basics, ResumeDocument, Skill
from cvgen.resume.sections import (
    SECTION_ADAPTERS,
    InvalidSectionError,
    Section,
    SectionDecodeError,
    apply_section,
    decode_section,
    parse_section,
    valid_sections,
)
from cvgen.resume.validation import InvalidEmailError


class TestSectionNames:
    """Test the closed set of section names."""

    def test_twelve_sections_in_document_order(self):
        assert valid_sections() == [
            "basics",
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
        ]

    def test_every_section_has_a_decode_target(self):
        assert set(SECTION_ADAPTERS) == set(Section)

    def test_parse_known_section(self):
        assert parse_section("skills") is Section.SKILLS
        assert parse_section(Section.WORK) is Section.WORK

    def test_parse_unknown_section(self):
        with pytest.raises(InvalidSectionError) as exc_info:
            parse_section("hobbies")

        assert exc_info.value.section == "hobbies"


class TestDecodeSection:
    """Test payload decoding into section shapes."""

    def test_decode_basics_from_json_text(self):
        value = decode_section(Section.BASICS, '{"name": "Ada", "email": "ada@acme.io"}')

        assert isinstance(value, Basics)
        assert value.name == "Ada"

    def test_decode_list_section_from_python_data(self):
        value = decode_section(Section.SKILLS, [{"name": "Python", "keywords": ["asyncio"]}])

        assert value == [Skill(name="Python", keywords=["asyncio"])]

    def test_decode_list_section_from_bytes(self):
        value = decode_section(Section.LANGUAGES, b'[{"language": "French"}]')

        assert value[0].language == "French"

    def test_wrong_shape_names_the_section(self):
        with pytest.raises(SectionDecodeError) as exc_info:
            decode_section(Section.WORK, {"name": "Initech"})

        assert exc_info.value.section is Section.WORK
        assert "work" in str(exc_info.value)

    def test_malformed_json_is_a_decode_error(self):
        with pytest.raises(SectionDecodeError):
            decode_section(Section.SKILLS, "[{")


class TestApplySection:
    """Test replacing one section of a document."""

    def test_replaces_section_wholesale(self, sample_document):
        updated = apply_section(sample_document, "skills", [{"name": "Go"}])

        assert updated.skills == [Skill(name="Go")]
        assert updated.work == sample_document.work

    def test_does_not_mutate_input(self, sample_document):
        before = sample_document.model_copy(deep=True)

        apply_section(sample_document, "basics", json.dumps({"name": "Grace"}))

        assert sample_document == before

    def test_unknown_section_leaves_document_untouched(self, sample_document):
        before = sample_document.model_copy(deep=True)

        with pytest.raises(InvalidSectionError):
            apply_section(sample_document, "hobbies", [])

        assert sample_document == before

    def test_result_is_validated(self, sample_document):
        with pytest.raises(InvalidEmailError):
            apply_section(sample_document, "basics", {"name": "Ada", "email": "nope"})

    def test_apply_to_empty_document(self):
        updated = apply_section(ResumeDocument.empty(), Section.WORK, [{"name": "Initech"}])

        assert updated.work[0].name == "Initech"
        assert updated.basics == Basics()
