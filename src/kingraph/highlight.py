"""Render provenance as ``<mark>`` spans over the source HTML."""
from __future__ import annotations

import html as html_lib
from collections.abc import Iterable

from kingraph.models.provenance import ProvenanceEntry
from kingraph.models.record import IndividualRecord


def provenance_spans(record: IndividualRecord) -> list[tuple[str, int, int]]:
    """``(field, start, end)`` triples for every provenance entry."""
    return [entry.as_span() for entry in record.provenance]


def highlight(
    html: str, provenance: Iterable[ProvenanceEntry | tuple[str, int, int]]
) -> str:
    """Wrap each cited span in ``<mark data-field="...">``.

    Spans are applied in source order; a span overlapping an earlier one is
    skipped, and out-of-range offsets are clamped.
    """
    spans = [
        entry.as_span() if isinstance(entry, ProvenanceEntry) else tuple(entry)
        for entry in provenance
    ]
    if not spans:
        return html

    length = len(html)
    output: list[str] = []
    cursor = 0
    for field, start, end in sorted(spans, key=lambda span: (span[1], span[2])):
        start = max(0, min(start, length))
        end = max(start, min(end, length))
        if end <= start or start < cursor:
            continue
        output.append(html[cursor:start])
        label = html_lib.escape(str(field), quote=True)
        output.append(f'<mark data-field="{label}">{html[start:end]}</mark>')
        cursor = end
    output.append(html[cursor:])
    return "".join(output)
