"""Per-field confidence scoring for extracted records.

Scores reflect how a value was obtained: a "Name (1901–1975)" heading is
stronger evidence than a labelled field, which is stronger than an uncited
value. Date scores follow precision and drop for approximate dates.
"""
from __future__ import annotations

import re

from kingraph.models.record import DateFragment, IndividualRecord

BRACKETED = re.compile(r"^\[[^\]]+\]$")

# Base scores
HEADING_NAME = 0.9
CITED_NAME = 0.8
UNCITED = 0.6
CITED_PARENT = 0.9
MAIDEN_EXPLICIT_NEE = 0.95
MAIDEN_BRACKETED = 0.5
MAIDEN_DEFAULT = 0.7
DATE_PRECISION = {"day": 0.95, "month": 0.85, "year": 0.7}
APPROX_PENALTY = 0.1


def _clamp(value: float) -> float:
    return round(max(0.0, min(1.0, value)), 4)


def _date_confidence(fragment: DateFragment) -> float | None:
    if not fragment.has_date:
        return None
    if fragment.day is not None:
        base = DATE_PRECISION["day"]
    elif fragment.month is not None:
        base = DATE_PRECISION["month"]
    else:
        base = DATE_PRECISION["year"]
    if fragment.approx:
        base -= APPROX_PENALTY
    return _clamp(base)


def _name_confidence(record: IndividualRecord, field: str) -> float:
    if record.has_provenance("name.heading"):
        return HEADING_NAME
    if record.has_provenance(field):
        return CITED_NAME
    return UNCITED


def score_confidence(record: IndividualRecord) -> dict[str, float]:
    """Score the populated fields of a record.

    Args:
        record: Extracted (and ideally validated) record

    Returns:
        Mapping of field key (``givenNames``, ``surname``, ``maidenName``,
        ``birth.date``, ``death.date``, ``parents.father``,
        ``parents.mother``) to a score in [0, 1]. Absent fields have no key.
    """
    scores: dict[str, float] = {}

    if record.given_names:
        scores["givenNames"] = _clamp(_name_confidence(record, "givenNames"))
    if record.surname:
        scores["surname"] = _clamp(_name_confidence(record, "surname"))

    if record.maiden_name:
        maiden = record.maiden_name.strip()
        confidence = MAIDEN_DEFAULT
        if BRACKETED.match(maiden):
            confidence = MAIDEN_BRACKETED
        elif re.search(rf"\bn[eé]e\s+{re.escape(maiden)}", record.source_html, re.IGNORECASE):
            confidence = MAIDEN_EXPLICIT_NEE
        scores["maidenName"] = _clamp(confidence)

    for event in ("birth", "death"):
        confidence = _date_confidence(getattr(record, event))
        if confidence is not None:
            scores[f"{event}.date"] = confidence

    for role in ("father", "mother"):
        if getattr(record.parents, role):
            field = f"parents.{role}"
            scores[field] = _clamp(CITED_PARENT if record.has_provenance(field) else UNCITED)

    return scores
