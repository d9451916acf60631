"""KinGraph - provenance-first genealogical record extraction and linkage.

Extracts structured individual records from genealogy web pages, traces
every field to an exact range of the source HTML, scores field confidence
and ranks stored individuals as linking candidates.
"""

__version__ = "0.1.0"

# Lazy imports to avoid loading bs4/dateparser for lightweight consumers
def __getattr__(name: str):
    if name == "extract_individual":
        from kingraph.extraction import extract_individual
        return extract_individual
    if name == "score_confidence":
        from kingraph.confidence import score_confidence
        return score_confidence
    if name == "validate_record":
        from kingraph.validation import validate_record
        return validate_record
    if name == "EntityMatcher":
        from kingraph.linkage import EntityMatcher
        return EntityMatcher
    if name == "models":
        from kingraph import models
        return models
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
