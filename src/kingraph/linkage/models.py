"""Entity matching models.

Match candidates are derived data: computed fresh for each request from the
caller's individual pool and never persisted.
"""
from __future__ import annotations

from enum import Enum
from typing import Annotated

from pydantic import Field

from kingraph.models.record import RecordModel


# =============================================================================
# Enums
# =============================================================================


class LinkDecision(str, Enum):
    """What a caller should do with a freshly extracted record."""

    AUTO_LINK = "auto_link"  # Top candidate clears the auto-link threshold
    SUGGEST = "suggest"  # Candidates worth showing a reviewer
    CREATE = "create"  # No plausible match; create a new individual


# =============================================================================
# Match Candidate
# =============================================================================


class ComponentScores(RecordModel):
    """Per-component similarities; a component is None when not comparable."""

    name: float | None = None
    birth_year: float | None = None
    death_year: float | None = None
    parents: float | None = None

    def present(self) -> dict[str, float]:
        return {key: value for key, value in self.model_dump().items() if value is not None}


class MatchCandidate(RecordModel):
    """A stored individual scored against an extracted record."""

    individual_id: str = Field(description="Identifier of the stored individual")
    score: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        description="Weighted similarity over the comparable components"
    )
    latest_record_ref: str | None = Field(
        default=None, description="Most recent record linked to the individual"
    )
    components: ComponentScores = Field(default_factory=ComponentScores)
