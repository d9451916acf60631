"""Tests for provenance highlighting."""
from __future__ import annotations

from kingraph.extraction import extract_individual
from kingraph.highlight import highlight, provenance_spans
from kingraph.models import ProvenanceEntry

HTML = "<p>John Carter</p>"


class TestHighlight:
    """Tests for highlight and provenance_spans."""

    def test_wraps_span(self):
        """Test wrapping a span."""
        assert highlight(HTML, [("surname", 8, 14)]) == (
            '<p>John <mark data-field="surname">Carter</mark></p>'
        )

    def test_spans_applied_in_source_order(self):
        """Test that spans are applied in source order."""
        rendered = highlight(HTML, [("surname", 8, 14), ("givenNames", 3, 7)])
        assert rendered == (
            '<p><mark data-field="givenNames">John</mark> '
            '<mark data-field="surname">Carter</mark></p>'
        )

    def test_overlapping_span_is_skipped(self):
        """Test that an overlapping span is skipped."""
        rendered = highlight(HTML, [("name", 3, 14), ("surname", 8, 14)])
        assert rendered.count("<mark") == 1
        assert 'data-field="name"' in rendered

    def test_out_of_range_offsets_are_clamped(self):
        """Test that out-of-range offsets are clamped."""
        rendered = highlight(HTML, [("notes", 14, 999)])
        assert rendered == '<p>John Carter<mark data-field="notes"></p></mark>'

    def test_field_is_escaped(self):
        """Test that the field name is escaped."""
        rendered = highlight(HTML, [('a"b', 3, 7)])
        assert 'data-field="a&quot;b"' in rendered

    def test_no_spans_returns_input(self):
        """Test that no spans returns the input."""
        assert highlight(HTML, []) == HTML

    def test_accepts_provenance_entries(self):
        """Test provenance entries as input."""
        entry = ProvenanceEntry(field="surname", text="Carter", start=8, end=14)
        assert highlight(HTML, [entry]) == highlight(HTML, [entry.as_span()])

    def test_extracted_record_round_trip(self):
        """Test highlighting an extracted record."""
        html = "<p>Surname: Carter</p>"
        record = extract_individual(html)

        assert provenance_spans(record) == [("surname", 12, 18)]
        rendered = highlight(record.source_html, record.provenance)
        assert '<mark data-field="surname">Carter</mark>' in rendered
