"""Read-only snapshot of previously stored individuals and records.

Storage itself lives outside the core; callers hand the matcher a snapshot
of what they hold and the core never writes back.
"""
from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict, Field

from .record import DateFragment, IndividualRecord, Parents, RecordModel, Sex


class IndividualProfile(RecordModel):
    """Partial record describing what is known about a stored individual."""

    model_config = ConfigDict(extra="ignore")

    given_names: list[str] = Field(default_factory=list)
    surname: str | None = None
    maiden_name: str | None = None
    aliases: list[str] = Field(default_factory=list)
    sex: Sex | None = None
    birth: DateFragment = Field(default_factory=DateFragment)
    death: DateFragment = Field(default_factory=DateFragment)
    parents: Parents = Field(default_factory=Parents)


class StoredIndividual(RecordModel):
    id: str
    name: str
    profile: IndividualProfile = Field(default_factory=IndividualProfile)
    role_id: str | None = None


class StoredRecord(RecordModel):
    id: str
    individual_id: str
    record: IndividualRecord
    created_at: datetime


class IndividualPool(RecordModel):
    """Snapshot of ``{individuals, records}`` supplied by the storage layer."""

    individuals: list[StoredIndividual] = Field(default_factory=list)
    records: list[StoredRecord] = Field(default_factory=list)

    def records_for(self, individual_id: str) -> list[StoredRecord]:
        """Linked records, most recent first."""
        linked = [stored for stored in self.records if stored.individual_id == individual_id]
        return sorted(linked, key=lambda stored: stored.created_at, reverse=True)

    def latest_record(self, individual_id: str) -> StoredRecord | None:
        linked = self.records_for(individual_id)
        return linked[0] if linked else None

    def latest_records(self) -> dict[str, StoredRecord]:
        """Most recent linked record per individual id, in one pass."""
        latest: dict[str, StoredRecord] = {}
        for stored in self.records:
            current = latest.get(stored.individual_id)
            if current is None or stored.created_at > current.created_at:
                latest[stored.individual_id] = stored
        return latest
