"""Tests for the resume document models."""

from cvgen.resume.models import Basics, ResumeDocument, Work


class TestResumeDocumentSerialization:
    """Test conversion between documents and JSON Resume data."""

    def test_round_trip_preserves_every_present_field(self, sample_resume_data):
        """Decoding then encoding should give back the same data."""
        document = ResumeDocument.from_dict(sample_resume_data)

        assert document.to_dict() == sample_resume_data

    def test_json_round_trip(self, sample_document):
        """to_json/from_json should reproduce the document."""
        restored = ResumeDocument.from_json(sample_document.to_json())

        assert restored == sample_document

    def test_camel_case_keys_map_to_snake_case_attributes(self, sample_document):
        """Wire keys like startDate and studyType should populate Python attributes."""
        assert sample_document.work[0].start_date == "2019-04"
        assert sample_document.education[0].study_type == "Bachelor"
        assert sample_document.basics.location.country_code == "GB"

    def test_serialization_uses_camel_case(self):
        """Serialized output should use JSON Resume key names."""
        document = ResumeDocument(work=[Work(name="Initech", start_date="2020")])

        assert document.to_dict() == {"work": [{"name": "Initech", "startDate": "2020"}]}

    def test_absent_and_empty_are_kept_apart(self):
        """None is dropped while empty strings and lists survive."""
        document = ResumeDocument.from_dict({"basics": {"label": ""}, "skills": []})

        data = document.to_dict()

        assert data == {"basics": {"label": ""}, "skills": []}
        assert "work" not in data

    def test_unknown_keys_are_ignored(self):
        """Keys outside the schema should not break decoding."""
        document = ResumeDocument.from_dict({"basics": {"name": "Ada"}, "meta": {"v": 1}})

        assert document.basics.name == "Ada"
        assert "meta" not in document.to_dict()


class TestEmptyDocument:
    """Test the freshly initialized document."""

    def test_empty_has_every_section_present(self):
        """empty() should initialize basics and all eleven sequences."""
        document = ResumeDocument.empty()

        assert document.basics == Basics()
        assert document.work == []
        assert document.projects == []
        assert document.is_empty()

    def test_document_with_content_is_not_empty(self, sample_document):
        assert not sample_document.is_empty()

    def test_candidate_name_is_stripped(self):
        document = ResumeDocument(basics=Basics(name="  Ada  "))

        assert document.candidate_name == "Ada"

    def test_candidate_name_defaults_to_empty_string(self):
        assert ResumeDocument().candidate_name == ""
        assert ResumeDocument.empty().candidate_name == ""

    def test_summary_defaults_to_empty_string(self):
        assert ResumeDocument().summary == ""
