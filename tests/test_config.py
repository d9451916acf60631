"""Tests for configuration loading."""
from __future__ import annotations

import json

import pytest

from kingraph.config import (
    MATCHING,
    MatchingConfig,
    VocabularyEntry,
    load_extraction_config,
)
from kingraph.exceptions import ConfigurationError


class TestMatchingConfig:
    """Tests for matching weights and thresholds."""

    def test_defaults(self):
        """Test matching defaults."""
        config = MatchingConfig()
        assert (config.name_weight, config.birth_year_weight) == (0.6, 0.2)
        assert (config.death_year_weight, config.parents_weight) == (0.1, 0.1)
        assert config.suggestion_threshold == 0.45
        assert config.auto_link_threshold == 0.8
        assert config.max_suggestions == 5
        assert isinstance(MATCHING, MatchingConfig)

    def test_from_env(self, monkeypatch):
        """Test overriding matching settings from the environment."""
        monkeypatch.setenv("KINGRAPH_AUTO_LINK_THRESHOLD", "0.9")
        monkeypatch.setenv("KINGRAPH_MAX_SUGGESTIONS", "3")
        config = MatchingConfig.from_env()
        assert config.auto_link_threshold == 0.9
        assert config.max_suggestions == 3
        assert config.name_weight == 0.6

    def test_invalid_env_falls_back(self, monkeypatch):
        """Test that invalid environment values fall back to defaults."""
        monkeypatch.setenv("KINGRAPH_SUGGESTION_THRESHOLD", "high")
        assert MatchingConfig.from_env().suggestion_threshold == 0.45


class TestExtractionConfig:
    """Tests for load_extraction_config."""

    def test_yaml(self, tmp_path):
        """Test loading a YAML extraction config."""
        path = tmp_path / "vocabulary.yaml"
        path.write_text(
            "professions:\n"
            "  - label: Ingénieur\n"
            "    aliases: [Ingénieure]\n"
            "places:\n"
            "  - label: Lyon\n"
            "    category: city\n"
            "label_synonyms:\n"
            "  birth: [geboren]\n",
            encoding="utf-8",
        )
        config = load_extraction_config(path)
        assert config.professions == [VocabularyEntry(label="Ingénieur", aliases=["Ingénieure"])]
        assert config.places[0].category == "city"
        assert config.label_synonyms == {"birth": ["geboren"]}

    def test_json(self, tmp_path):
        """Test loading a JSON extraction config."""
        path = tmp_path / "vocabulary.json"
        path.write_text(json.dumps({"label_synonyms": {"death": ["gestorben"]}}), encoding="utf-8")
        assert load_extraction_config(path).label_synonyms == {"death": ["gestorben"]}

    def test_empty_file(self, tmp_path):
        """Test that an empty file gives the default config."""
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_extraction_config(path).professions == []

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_extraction_config(tmp_path / "nope.yaml")

    def test_unparsable_file(self, tmp_path):
        """Test that an unparsable file raises ConfigurationError."""
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Cannot parse"):
            load_extraction_config(path)

    def test_invalid_schema(self, tmp_path):
        """Test that a schema mismatch raises ConfigurationError."""
        path = tmp_path / "bad.yaml"
        path.write_text("professions: 12\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_extraction_config(path)
