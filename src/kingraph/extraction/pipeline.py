"""Extraction pipeline: HTML in, provenance-annotated record out."""
from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from bs4 import Tag

from kingraph.config import ExtractionConfig
from kingraph.logging import get_logger
from kingraph.models.record import IndividualRecord

from .document import SourceDocument
from .extractors import DEFAULT_EXTRACTORS, ExtractionContext, StructuredExtractor

log = get_logger(__name__)


def detect_source_url(document: SourceDocument) -> str | None:
    """Canonical page URL from ``<link rel="canonical">`` or ``og:url``."""
    soup = document.soup
    for link in soup.find_all("link", href=True):
        rel = link.get("rel") or []
        if isinstance(rel, str):
            rel = rel.split()
        if any(value.lower() == "canonical" for value in rel):
            href = str(link["href"]).strip()
            if href:
                return href
    meta = soup.find("meta", attrs={"property": "og:url"})
    if isinstance(meta, Tag):
        content = str(meta.get("content") or "").strip()
        if content:
            return content
    return None


def extract_individual(
    html: str,
    config: ExtractionConfig | None = None,
    source_url: str | None = None,
    extracted_at: datetime | None = None,
    extractors: Sequence[StructuredExtractor] = DEFAULT_EXTRACTORS,
) -> IndividualRecord:
    """Extract one individual from an HTML document.

    Strategies run in order; scalar fields keep the first value written and
    list fields accumulate. A failing strategy is logged and skipped, so this
    function does not raise on malformed or unexpected markup.

    Args:
        html: Source document, stored verbatim as ``source_html``
        config: Extra label synonyms and vocabularies
        source_url: Page URL; detected from the document when omitted
        extracted_at: Extraction timestamp (defaults to now, UTC)
        extractors: Strategies to run, in priority order

    Returns:
        IndividualRecord whose provenance entries are exact source slices
    """
    record = IndividualRecord(source_html=html, source_url=source_url)
    if extracted_at is not None:
        record.extracted_at = extracted_at

    try:
        document = SourceDocument(html)
    except Exception as e:  # bs4 rejects some markup outright
        log.warning("document_parse_failed", error=str(e))
        return record

    if record.source_url is None:
        record.source_url = detect_source_url(document)

    context = ExtractionContext(document, record, config)
    for extractor in extractors:
        try:
            extractor.extract(context)
        except Exception as e:
            log.warning(
                "extractor_failed",
                extractor=type(extractor).__name__,
                error=str(e),
            )

    # A lone surname still deserves a citation
    if record.surname and not record.given_names and not record.has_provenance("surname"):
        context.provenance.add_text("surname", record.surname)

    log.debug(
        "extraction_complete",
        fields=sorted({entry.field for entry in record.provenance}),
        source_url=record.source_url,
    )
    return record
