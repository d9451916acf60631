"""Schema and provenance validation for extracted records."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from kingraph.exceptions import RecordValidationError, ValidationIssue
from kingraph.logging import get_logger
from kingraph.models.record import IndividualRecord

log = get_logger(__name__)

UNIQUE_LIST_FIELDS = ("spouses", "children", "siblings")


def _path(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc) or "<root>"


def _provenance_issues(record: IndividualRecord) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    length = len(record.source_html)
    for index, entry in enumerate(record.provenance):
        prefix = f"provenance.{index}"
        if not 0 <= entry.start < entry.end <= length:
            issues.append(
                ValidationIssue(
                    f"{prefix}.end",
                    f"span [{entry.start}, {entry.end}) is outside sourceHtml (length {length})",
                )
            )
            continue
        if record.source_html[entry.start : entry.end] != entry.text:
            issues.append(
                ValidationIssue(f"{prefix}.text", "does not match sourceHtml[start:end]")
            )
    return issues


def validate_record(data: IndividualRecord | Mapping[str, Any]) -> IndividualRecord:
    """Validate a record against the canonical schema and provenance rules.

    Accepts a model or a camelCase/snake_case mapping. Models are re-validated
    from their dumped form so that values assigned after construction are
    checked too.

    Raises:
        RecordValidationError: with one issue per offending field path
    """
    payload = data.model_dump(by_alias=True) if isinstance(data, IndividualRecord) else data

    try:
        record = IndividualRecord.model_validate(payload)
    except ValidationError as e:
        issues = [ValidationIssue(_path(tuple(err["loc"])), err["msg"]) for err in e.errors()]
        log.debug("record_schema_invalid", issues=len(issues))
        raise RecordValidationError(issues) from e

    issues = _provenance_issues(record)

    if record.extracted_at.tzinfo is None:
        issues.append(ValidationIssue("extractedAt", "must be timezone-aware"))

    for field in UNIQUE_LIST_FIELDS:
        values = getattr(record, field)
        if len(values) != len(set(values)):
            issues.append(ValidationIssue(field, "contains duplicate entries"))

    if issues:
        log.debug("record_invalid", issues=len(issues))
        raise RecordValidationError(issues)
    return record
