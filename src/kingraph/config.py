"""Unified configuration for matching policy and extraction vocabularies.

Matching thresholds and weights are centralized here with environment-based
override support. Extraction settings (extra label synonyms, profession and
place vocabularies) are loaded from a YAML or JSON file.

Environment Variables:
    KINGRAPH_NAME_WEIGHT: Weight of the name component (default 0.6)
    KINGRAPH_BIRTH_YEAR_WEIGHT: Weight of the birth-year component (default 0.2)
    KINGRAPH_DEATH_YEAR_WEIGHT: Weight of the death-year component (default 0.1)
    KINGRAPH_PARENTS_WEIGHT: Weight of the parent-name component (default 0.1)

    KINGRAPH_SUGGESTION_THRESHOLD: Minimum score to suggest a match (default 0.45)
    KINGRAPH_AUTO_LINK_THRESHOLD: Minimum score to link without review (default 0.8)
    KINGRAPH_MAX_SUGGESTIONS: Suggestions surfaced at once (default 5)

Example:
    >>> from kingraph.config import MATCHING
    >>> MATCHING.auto_link_threshold
    0.8
    >>> config = load_extraction_config("vocabulary.yaml")
    >>> [entry.label for entry in config.professions]
    ['Ingénieur']
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from kingraph.exceptions import ConfigurationError


def _f(name: str, default: float) -> float:
    """Parse float from environment variable with fallback."""
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _i(name: str, default: int) -> int:
    """Parse int from environment variable with fallback."""
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class MatchingConfig:
    """Component weights and linking thresholds for the entity matcher."""

    # Component weights; the final score is normalized by the weights in use
    name_weight: float = 0.6
    birth_year_weight: float = 0.2
    death_year_weight: float = 0.1
    parents_weight: float = 0.1

    # Inclusive lower bounds
    suggestion_threshold: float = 0.45
    auto_link_threshold: float = 0.8

    max_suggestions: int = 5

    @classmethod
    def from_env(cls) -> MatchingConfig:
        """Build from KINGRAPH_* environment variables, falling back to defaults."""
        return cls(
            name_weight=_f("KINGRAPH_NAME_WEIGHT", cls.name_weight),
            birth_year_weight=_f("KINGRAPH_BIRTH_YEAR_WEIGHT", cls.birth_year_weight),
            death_year_weight=_f("KINGRAPH_DEATH_YEAR_WEIGHT", cls.death_year_weight),
            parents_weight=_f("KINGRAPH_PARENTS_WEIGHT", cls.parents_weight),
            suggestion_threshold=_f("KINGRAPH_SUGGESTION_THRESHOLD", cls.suggestion_threshold),
            auto_link_threshold=_f("KINGRAPH_AUTO_LINK_THRESHOLD", cls.auto_link_threshold),
            max_suggestions=_i("KINGRAPH_MAX_SUGGESTIONS", cls.max_suggestions),
        )

    def is_suggestion(self, score: float) -> bool:
        return score >= self.suggestion_threshold

    def is_auto_link(self, score: float) -> bool:
        return score >= self.auto_link_threshold


# Year distance → similarity; distances above the last bound score 0
YEAR_DISTANCE_SCORES: tuple[tuple[int, float], ...] = (
    (0, 1.0),
    (1, 0.75),
    (2, 0.5),
    (5, 0.25),
)


MATCHING = MatchingConfig.from_env()


class VocabularyEntry(BaseModel):
    """A canonical profession or place with its alternative spellings."""

    label: str
    aliases: list[str] = Field(default_factory=list)
    category: str | None = None


class ExtractionConfig(BaseModel):
    """Caller-supplied additions merged into the built-in dictionaries."""

    professions: list[VocabularyEntry] = Field(default_factory=list)
    places: list[VocabularyEntry] = Field(default_factory=list)
    label_synonyms: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Extra label phrases keyed by label category (e.g. 'birth')",
    )


def load_extraction_config(path: str | Path) -> ExtractionConfig:
    """Load an ``ExtractionConfig`` from a YAML or JSON file.

    Raises:
        ConfigurationError: if the file is missing, unparsable or invalid.
    """
    config_path = Path(path)
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration {config_path}: {e}") from e

    try:
        if config_path.suffix.lower() == ".json":
            data: Any = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot parse configuration {config_path}: {e}") from e

    try:
        return ExtractionConfig.model_validate(data or {})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration {config_path}: {e}") from e
