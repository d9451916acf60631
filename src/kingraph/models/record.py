"""Canonical individual record produced by extraction.

Attributes are snake_case; the canonical JSON uses camelCase aliases
(``givenNames``, ``sourceHtml``, ...). Optional fields that are unset are
omitted from JSON output.
"""
from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .provenance import ProvenanceEntry

Sex = Literal["M", "F", "U"]


class RecordModel(BaseModel):
    """Base for models serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict[str, Any]:
        """JSON-serializable dict with camelCase keys and unset fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class DateFragment(RecordModel):
    """A partially-known life event date with optional place."""

    raw: str | None = None
    year: int | None = None
    month: int | None = Field(default=None, ge=1, le=12)
    day: int | None = Field(default=None, ge=1, le=31)
    approx: bool | None = None
    place: str | None = None

    @property
    def has_date(self) -> bool:
        return self.year is not None or self.month is not None or self.day is not None


class Residence(RecordModel):
    raw: str | None = None
    year: int | None = None
    place: str | None = None


class Parents(RecordModel):
    father: str | None = None
    mother: str | None = None


class IndividualRecord(RecordModel):
    """Normalized structure of one extracted individual."""

    # Lineage
    source_html: str = Field(description="Verbatim HTML the record was extracted from")
    source_url: str | None = None
    extracted_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Identity
    given_names: list[str] = Field(default_factory=list)
    surname: str | None = None
    maiden_name: str | None = None
    aliases: list[str] = Field(default_factory=list)
    sex: Sex | None = None

    # Life events
    birth: DateFragment = Field(default_factory=DateFragment)
    death: DateFragment = Field(default_factory=DateFragment)
    residences: list[Residence] = Field(default_factory=list)

    # Relationships
    parents: Parents = Field(default_factory=Parents)
    spouses: list[str] = Field(default_factory=list)
    children: list[str] = Field(default_factory=list)
    siblings: list[str] = Field(default_factory=list)

    # Context
    occupation: str | None = None
    religion: str | None = None
    notes: str | None = None
    sources: list[str] = Field(default_factory=list)

    provenance: list[ProvenanceEntry] = Field(default_factory=list)

    @property
    def full_name(self) -> str:
        return " ".join([*self.given_names, *([self.surname] if self.surname else [])])

    def has_provenance(self, field: str) -> bool:
        return any(entry.field == field for entry in self.provenance)

    def provenance_for(self, field: str) -> list[ProvenanceEntry]:
        return [entry for entry in self.provenance if entry.field == field]


def record_to_json(record: IndividualRecord) -> dict[str, Any]:
    """Canonical JSON-serializable form of a record."""
    return record.to_json_dict()
