"""Provenance resolution: map extracted values back to source offsets."""
from __future__ import annotations

from kingraph.logging import get_logger
from kingraph.models.provenance import ProvenanceEntry

from .document import Span, TextRun

log = get_logger(__name__)


class ProvenanceResolver:
    """Appends provenance entries whose text is an exact slice of the source.

    Every entry satisfies ``html[start:end] == text``. Values that cannot be
    located are omitted silently (debug-logged); resolution never raises.
    """

    def __init__(self, html: str, entries: list[ProvenanceEntry] | None = None) -> None:
        self.html = html
        self.entries: list[ProvenanceEntry] = entries if entries is not None else []

    def add_span(self, field: str, start: int, end: int) -> ProvenanceEntry | None:
        start = max(0, min(start, len(self.html)))
        end = max(0, min(end, len(self.html)))
        if end <= start:
            log.debug("provenance_empty_span", field=field, start=start, end=end)
            return None
        entry = ProvenanceEntry(field=field, text=self.html[start:end], start=start, end=end)
        self.entries.append(entry)
        return entry

    def add_text(
        self, field: str, text: str, context: Span | None = None
    ) -> ProvenanceEntry | None:
        """Locate ``text`` in the context window, else anywhere in the document."""
        fragment = (text or "").strip()
        if not fragment:
            return None

        index = -1
        if context is not None:
            index = self.html.find(fragment, max(0, context[0]), max(0, context[1]))
        if index == -1:
            index = self.html.find(fragment)
        if index == -1:
            log.debug("provenance_not_found", field=field, text=fragment[:60])
            return None
        return self.add_span(field, index, index + len(fragment))

    def add_run(
        self, field: str, run: TextRun, context: Span | None = None
    ) -> ProvenanceEntry | None:
        """Use the run's own source range when known, else search its text."""
        located = run.strip()
        source = located.source_range
        if source is not None:
            return self.add_span(field, *source)
        return self.add_text(field, located.text, context)
