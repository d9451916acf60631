"""Tests for the source-located document model."""
from __future__ import annotations

import re

from kingraph.extraction.document import SourceDocument, TextRun


def _slice(html: str, run: TextRun) -> str:
    start, end = run.source_range
    return html[start:end]


class TestSourceDocument:
    """Tests for tag and text offsets."""

    def test_tag_offset_and_text_range(self):
        """Test tag offsets and text ranges."""
        html = "<p>Born: 3 Mar 1902</p>"
        doc = SourceDocument(html)
        p = doc.soup.find("p")
        assert doc.tag_offset(p) == 0
        assert doc.text_run(p).source_range == (3, 19)

    def test_tag_offset_on_later_line(self):
        """Test tag offsets on later lines."""
        html = "<div>\n  <p>x</p>\n</div>"
        doc = SourceDocument(html)
        assert doc.tag_offset(doc.soup.find("p")) == 8

    def test_entities_map_to_full_raw_range(self):
        """Decoded characters keep the span of their entity."""
        html = "<p>Saint-R&eacute;my &amp; Co</p>"
        doc = SourceDocument(html)
        run = doc.text_run(doc.soup.find("p"))
        assert run.text == "Saint-Rémy & Co"
        assert _slice(html, run) == "Saint-R&eacute;my &amp; Co"
        accent = run.text.index("é")
        assert _slice(html, run[accent : accent + 1]) == "&eacute;"

    def test_repeated_text_is_located_in_order(self):
        """Test that repeated text is located in order."""
        html = "<p>Carter</p><p>Carter</p>"
        doc = SourceDocument(html)
        second = doc.soup.find_all("p")[1]
        assert doc.text_run(second).source_range == (16, 22)

    def test_comments_and_scripts_are_skipped(self):
        """Test that comments and scripts are skipped."""
        html = (
            "<div><!-- Born --><script>var Born = 1;</script>"
            "<span>Born</span></div>"
        )
        doc = SourceDocument(html)
        run = doc.text_run(doc.soup.find("div"))
        assert run.text == "Born"
        assert run.source_range[0] == html.index("<span>") + len("<span>")

    def test_text_span_ignores_surrounding_whitespace(self):
        """Test that text spans exclude surrounding whitespace."""
        html = "<li>\n   Jean RENAULT   \n</li>"
        doc = SourceDocument(html)
        start, end = doc.text_span(doc.soup.find("li"))
        assert html[start:end] == "Jean RENAULT"

    def test_bounds_end_at_next_element(self):
        """Test that bounds end at the next element."""
        html = "<ul><li>one</li><li>two</li></ul>"
        doc = SourceDocument(html)
        first = doc.soup.find("li")
        assert doc.bounds(first) == (4, html.index("<li>two"))


class TestTextRun:
    """Tests for TextRun slicing and splitting."""

    def _run(self, html: str) -> TextRun:
        doc = SourceDocument(html)
        return doc.text_run(doc.soup.find("p"))

    def test_strip_keeps_spans(self):
        """Test that strip keeps character spans."""
        html = "<p>   Boston  </p>"
        run = self._run(html).strip()
        assert run.text == "Boston"
        assert _slice(html, run) == "Boston"

    def test_split_and_partition(self):
        """Test split and partition."""
        html = "<p>Children: Luc; Anne</p>"
        run = self._run(html)
        label, value = run.partition(":")
        assert label.text == "Children"
        parts = [part.strip() for part in value.split(re.compile(r";"))]
        assert [part.text for part in parts] == ["Luc", "Anne"]
        assert _slice(html, parts[1]) == "Anne"
        assert run.partition("=") is None

    def test_collapse_whitespace(self):
        """Test whitespace collapsing."""
        html = "<p>Saint   Longis\n  Sarthe</p>"
        run = self._run(html).collapse_whitespace()
        assert run.text == "Saint Longis Sarthe"
        assert _slice(html, run) == "Saint   Longis\n  Sarthe"

    def test_join_separator_has_no_span(self):
        """Test that join separators have no span."""
        left = TextRun("a", ((0, 1),))
        right = TextRun("b", ((5, 6),))
        joined = TextRun.join([left, right], " ")
        assert joined.text == "a b"
        assert joined.spans[1] is None
        assert joined.source_range == (0, 6)

    def test_unlocated_run_has_no_range(self):
        """Test that an unlocated run has no range."""
        assert TextRun.unlocated("abc").source_range is None
        assert TextRun.empty().source_range is None
        assert not TextRun.empty()
