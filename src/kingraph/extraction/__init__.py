"""HTML extraction for genealogical records.

Turns loosely structured pages (profile pages, registers, obituaries) into an
``IndividualRecord`` whose fields are each traced to an exact source range.

Key Components:
- SourceDocument: parsed HTML with raw offsets for tags and text
- StructuredExtractor: base class for extraction strategies
- ProvenanceResolver: maps extracted values back to source offsets
- extract_individual: runs the strategies in order

Example:
    >>> from kingraph.extraction import extract_individual
    >>>
    >>> record = extract_individual("<p>Born: 3 Mar 1902 in Boston</p>")
    >>> record.birth.year, record.birth.place
    (1902, 'Boston')
"""
from .document import SourceDocument, TextRun
from .extractors import (
    DEFAULT_EXTRACTORS,
    ExtractionContext,
    ExtractorType,
    HeadingExtractor,
    LabelValueExtractor,
    ProfileTemplateExtractor,
    StructuredExtractor,
    map_sex,
)
from .labels import LABELS, LabelTable
from .pipeline import detect_source_url, extract_individual
from .provenance import ProvenanceResolver
from .vocabulary import (
    TEMPLATE_PLACES,
    TEMPLATE_PROFESSIONS,
    ParsedPlace,
    ParsedProfession,
    PlaceMatch,
    Vocabulary,
    parse_place,
    parse_profession,
)

__all__ = [
    # Document model
    "SourceDocument",
    "TextRun",
    # Extractors
    "DEFAULT_EXTRACTORS",
    "ExtractionContext",
    "ExtractorType",
    "HeadingExtractor",
    "LabelValueExtractor",
    "ProfileTemplateExtractor",
    "StructuredExtractor",
    "map_sex",
    # Labels and vocabularies
    "LABELS",
    "LabelTable",
    "TEMPLATE_PLACES",
    "TEMPLATE_PROFESSIONS",
    "ParsedPlace",
    "ParsedProfession",
    "PlaceMatch",
    "Vocabulary",
    "parse_place",
    "parse_profession",
    # Pipeline
    "ProvenanceResolver",
    "detect_source_url",
    "extract_individual",
]
