"""Exceptions raised by the KinGraph core.

Extraction, confidence scoring and matching never raise; schema validation
and configuration loading are the only failure points callers need to handle.
"""
from __future__ import annotations

from dataclasses import dataclass, field


class KinGraphError(Exception):
    """Base class for KinGraph errors."""


@dataclass(frozen=True)
class ValidationIssue:
    """A single offending field path and its message."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass
class RecordValidationError(KinGraphError):
    """Raised when a record does not satisfy the canonical schema.

    Carries every offending field so callers can surface all of them at once.
    """

    issues: list[ValidationIssue] = field(default_factory=list)

    def __str__(self) -> str:
        if not self.issues:
            return "Record failed validation"
        lines = "; ".join(str(issue) for issue in self.issues)
        return f"Record failed validation ({len(self.issues)} issue(s)): {lines}"


class ConfigurationError(KinGraphError):
    """Raised when an extraction configuration file cannot be loaded."""
