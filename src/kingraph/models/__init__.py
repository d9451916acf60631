"""Pydantic data models."""

from .provenance import ProvenanceEntry
from .record import (
    DateFragment,
    IndividualRecord,
    Parents,
    Residence,
    Sex,
    record_to_json,
)
from .storage import IndividualPool, IndividualProfile, StoredIndividual, StoredRecord

__all__ = [
    "DateFragment",
    "IndividualPool",
    "IndividualProfile",
    "IndividualRecord",
    "Parents",
    "ProvenanceEntry",
    "Residence",
    "Sex",
    "StoredIndividual",
    "StoredRecord",
    "record_to_json",
]
