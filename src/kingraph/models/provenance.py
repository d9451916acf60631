"""Provenance tracking models."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProvenanceEntry(BaseModel):
    """Links a record field to the exact source substring that produced it.

    ``text`` always equals ``source_html[start:end]`` of the owning record.
    """

    model_config = ConfigDict(frozen=True)

    field: str = Field(description="Dotted field name, e.g. 'birth.raw' or 'parents.father'")
    text: str = Field(description="Verbatim slice of the source HTML")
    start: int = Field(ge=0, description="Start offset in the source HTML (inclusive)")
    end: int = Field(ge=0, description="End offset in the source HTML (exclusive)")

    def as_span(self) -> tuple[str, int, int]:
        return self.field, self.start, self.end
