"""
Tests for structured-data and metadata sanitization
"""
import json

import pytest

from application.services.resume.sanitizers import (
    StructuredDataError,
    is_valid_certification_date,
    parse_structured_data,
    sanitize_certification_dates,
    sanitize_for_s3_metadata,
    sanitize_structured_data,
)
from conftest import SAMPLE_CV


class TestCertificationDates:

    @pytest.mark.parametrize("value", ["01 2024", "12 1999", ""])
    def test_valid_dates(self, value):
        assert is_valid_certification_date(value)

    @pytest.mark.parametrize("value", ["2024-01-15", "13 2024", "00 2024", "1 2024", "January 2024", "01/2024"])
    def test_invalid_dates(self, value):
        assert not is_valid_certification_date(value)

    def test_sanitize_blanks_only_invalid_dates(self):
        data = {
            "certifications": [
                {"name": "A", "dateObtained": "01 2024"},
                {"name": "B", "dateObtained": "2024-01-15"},
                {"name": "C", "dateObtained": ""},
                {"name": "D", "issueDate": "March 2023", "expiryDate": "03 2026"},
            ]
        }

        result = sanitize_certification_dates(data)
        certs = result["certifications"]

        assert certs[0]["dateObtained"] == "01 2024"
        assert certs[1]["dateObtained"] == ""
        assert certs[2]["dateObtained"] == ""
        assert certs[3]["issueDate"] == ""
        assert certs[3]["expiryDate"] == "03 2026"
        assert certs[1]["name"] == "B"

    def test_sanitize_blanks_null_and_numeric_dates(self):
        data = {
            "certifications": [
                {"name": "AWS", "dateObtained": None},
                {"name": "GCP", "dateObtained": 2024, "expiryDate": None},
                {"name": "CKA"},
            ]
        }

        certs = sanitize_certification_dates(data)["certifications"]

        assert certs[0]["dateObtained"] == ""
        assert certs[1]["dateObtained"] == ""
        assert certs[1]["expiryDate"] == ""
        assert "dateObtained" not in certs[2]

    def test_missing_certifications_is_left_alone(self):
        data = {"header": {"name": "X"}}
        assert sanitize_certification_dates(data) == {"header": {"name": "X"}}


class TestStructuredData:

    def test_sanitize_does_not_mutate_input(self):
        original = json.loads(json.dumps(SAMPLE_CV))
        sanitize_structured_data(original)
        assert original["certifications"][1]["dateObtained"] == "2024-01-15"

    def test_accepts_json_text(self):
        result = sanitize_structured_data(json.dumps(SAMPLE_CV))
        assert result["certifications"][1]["dateObtained"] == ""

    def test_rejects_non_object(self):
        with pytest.raises(StructuredDataError):
            sanitize_structured_data("[1, 2, 3]")

    def test_rejects_invalid_json(self):
        with pytest.raises(StructuredDataError):
            sanitize_structured_data("{not json")

    def test_parse_into_cv_shape(self):
        cv = parse_structured_data(SAMPLE_CV)

        assert cv.header.name == "Ana Pérez"
        assert cv.header.contact.email == "ana@example.com"
        assert cv.certifications[0].dateObtained == "01 2024"
        assert cv.certifications[1].dateObtained == ""
        assert cv.professionalExperience[0].period.start == "2019"
        assert cv.technicalSkills.skills == ["Python", "PostgreSQL"]

    def test_parse_fills_missing_sections(self):
        cv = parse_structured_data({"header": {"name": "Solo"}})
        assert cv.education == []
        assert cv.header.contact.email == ""

    def test_parse_treats_null_as_empty(self):
        cv = parse_structured_data({
            "header": {"name": None, "contact": {"email": "x@example.com", "phone": None}},
            "certifications": [{"name": "AWS", "dateObtained": None}],
            "education": [{"degree": "BSc", "achievements": None}],
            "professionalExperience": [{"company": "Acme", "period": None, "responsibilities": None}],
            "technicalSkills": None,
        })

        assert cv.header.name == ""
        assert cv.header.contact.phone == ""
        assert cv.header.contact.email == "x@example.com"
        assert cv.certifications[0].dateObtained == ""
        assert cv.education[0].achievements == []
        assert cv.professionalExperience[0].period.start == ""
        assert cv.professionalExperience[0].responsibilities == []
        assert cv.technicalSkills.skills == []

    def test_parse_rejects_wrong_types(self):
        with pytest.raises(StructuredDataError):
            parse_structured_data({"education": "not a list"})


class TestMetadataSanitization:

    def test_strips_accents(self):
        assert sanitize_for_s3_metadata("Énfasis en gestión, año") == "Enfasis en gestion, ano"

    def test_collapses_line_breaks_and_whitespace(self):
        assert sanitize_for_s3_metadata("line one\r\nline   two\n\nthree") == "line one line two three"

    def test_drops_non_ascii_symbols(self):
        assert sanitize_for_s3_metadata("focus → leadership ✓") == "focus leadership"

    def test_truncates(self):
        assert sanitize_for_s3_metadata("a" * 50, max_length=10) == "a" * 10

    def test_empty(self):
        assert sanitize_for_s3_metadata("") == ""
        assert sanitize_for_s3_metadata(None) == ""
