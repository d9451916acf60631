"""Tests for record validation."""
from __future__ import annotations

from datetime import datetime

import pytest

from kingraph.exceptions import RecordValidationError, ValidationIssue
from kingraph.extraction import extract_individual
from kingraph.models import IndividualRecord, ProvenanceEntry, record_to_json
from kingraph.validation import validate_record

HTML = "<p>Surname: Carter</p>"


def _payload(**overrides):
    payload = record_to_json(extract_individual(HTML))
    payload.update(overrides)
    return payload


def _paths(error: RecordValidationError) -> list[str]:
    return [issue.path for issue in error.issues]


class TestValidateRecord:
    """Tests for validate_record."""

    def test_extracted_record_is_valid(self):
        """Test that an extracted record is valid."""
        record = validate_record(extract_individual(HTML))
        assert isinstance(record, IndividualRecord)
        assert record.surname == "Carter"

    def test_camel_case_mapping_is_accepted(self):
        """Test that a camelCase mapping is accepted."""
        record = validate_record(_payload())
        assert record.source_html == HTML
        assert record.provenance[0].text == "Carter"

    def test_missing_source_html(self):
        """Test a missing sourceHtml."""
        payload = _payload()
        del payload["sourceHtml"]
        with pytest.raises(RecordValidationError) as exc:
            validate_record(payload)
        assert "sourceHtml" in _paths(exc.value)

    def test_reports_every_offending_field(self):
        """Test that every offending field is reported."""
        payload = _payload(sex="X", birth={"month": 13})
        with pytest.raises(RecordValidationError) as exc:
            validate_record(payload)
        assert set(_paths(exc.value)) == {"sex", "birth.month"}

    def test_provenance_text_must_match_source(self):
        """Test that provenance text must match the source."""
        payload = _payload(provenance=[{"field": "surname", "text": "Smith", "start": 12, "end": 18}])
        with pytest.raises(RecordValidationError) as exc:
            validate_record(payload)
        assert _paths(exc.value) == ["provenance.0.text"]

    def test_provenance_span_must_be_in_range(self):
        """Test that a provenance span must be in range."""
        payload = _payload(provenance=[{"field": "surname", "text": "x", "start": 5, "end": 500}])
        with pytest.raises(RecordValidationError) as exc:
            validate_record(payload)
        assert _paths(exc.value) == ["provenance.0.end"]

    def test_negative_offsets_are_schema_errors(self):
        """Test that negative offsets are schema errors."""
        payload = _payload(provenance=[{"field": "surname", "text": "x", "start": -1, "end": 1}])
        with pytest.raises(RecordValidationError) as exc:
            validate_record(payload)
        assert _paths(exc.value) == ["provenance.0.start"]

    def test_naive_timestamp_is_rejected(self):
        """Test that a naive timestamp is rejected."""
        record = extract_individual(HTML)
        record.extracted_at = datetime(2024, 1, 1)
        with pytest.raises(RecordValidationError) as exc:
            validate_record(record)
        assert _paths(exc.value) == ["extractedAt"]

    def test_duplicate_relatives_are_rejected(self):
        """Test that duplicate relatives are rejected."""
        record = extract_individual(HTML)
        record.children = ["Luc Martin", "Luc Martin"]
        with pytest.raises(RecordValidationError) as exc:
            validate_record(record)
        assert _paths(exc.value) == ["children"]

    def test_assignment_after_construction_is_checked(self):
        """Test that assignments after construction are checked."""
        record = extract_individual(HTML)
        record.provenance.append(ProvenanceEntry(field="notes", text="nope", start=0, end=4))
        with pytest.raises(RecordValidationError):
            validate_record(record)

    def test_error_message_lists_issues(self):
        """Test the error message."""
        error = RecordValidationError([ValidationIssue("sex", "bad value")])
        assert str(error) == "Record failed validation (1 issue(s)): sex: bad value"
        assert str(ValidationIssue("sex", "bad value")) == "sex: bad value"
