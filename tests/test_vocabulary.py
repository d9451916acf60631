"""Tests for label, profession and place vocabularies."""
from __future__ import annotations

import pytest

from kingraph.config import VocabularyEntry
from kingraph.extraction import (
    TEMPLATE_PLACES,
    LabelTable,
    Vocabulary,
    parse_place,
    parse_profession,
)
from kingraph.extraction.vocabulary import normalize_token


class TestLabelTable:
    """Tests for label classification."""

    @pytest.mark.parametrize(
        ("label", "category"),
        [
            ("Name", "name"),
            ("Full name", "name"),
            ("Maiden name", "maiden"),
            ("Nom de jeune fille", "maiden"),
            ("Prénom", "given"),
            ("PRENOM", "given"),
            ("Nom", "surname"),
            ("Birthplace", "birth"),
            ("Date of death", "death"),
            ("Décès", "death"),
            ("Father's name", "father"),
            ("Nom du père", "father"),
            ("Mother's maiden name", "mother"),
            ("Sexe", "sex"),
            ("Children", "child"),
            ("Sources", "source"),
            ("Sœur", "sibling"),
            ("Favourite colour", None),
        ],
    )
    def test_classify(self, label, category):
        """Test classification of common labels."""
        assert LabelTable().classify(label) == category

    @pytest.mark.parametrize(
        ("label", "category"),
        [
            ("Dateofbirth", "birth"),
            ("DateOfBirth", "birth"),
            ("Placeofbirth", "birth"),
            ("Lastname", "surname"),
            ("Firstname", "given"),
            ("Stepfather", "father"),
            ("Grandfather", "father"),
            ("Person", "name"),
        ],
    )
    def test_compact_labels_are_contained(self, label, category):
        """Test that phrases match inside words and written together."""
        assert LabelTable().classify(label) == category

    def test_phrase_inside_longer_phrase_does_not_count(self):
        """Test that nested phrases of other categories are ignored."""
        table = LabelTable()
        assert not table.matches("surname", "Prénom")
        assert not table.matches("child", "Person")
        assert not table.matches("name", "Surname")
        assert table.matches("birth", "Birth place")
        assert table.matches("father", "Father's name")
        assert table.matches("name", "Father's name")

    def test_extra_synonyms(self):
        """Test that configured synonyms extend a category."""
        table = LabelTable({"occupation": ["métier"]})
        assert table.classify("Métier") == "occupation"
        assert LabelTable().classify("Métier") is None


class TestVocabulary:
    """Tests for vocabulary lookup."""

    def test_normalize_token(self):
        """Test token normalization."""
        assert normalize_token("  Maître d'école ") == "maitre decole"
        assert normalize_token("Saint-Barthélemy") == "saint barthelemy"

    def test_lookup_ignores_case_accents_and_spacing(self):
        """Test lookup ignoring case, accents and spacing."""
        places = Vocabulary(TEMPLATE_PLACES)
        assert places.lookup("saint barthelemy").label == "Saint-Barthélemy"
        assert places.lookup("ILE-DE-FRANCE").label == "Île-de-France"
        assert places.lookup("Pays-de-la-Loire").label == "Pays de la Loire"
        assert "Atlantis" not in places

    def test_later_entries_override(self):
        """Test that later entries override earlier ones."""
        places = Vocabulary.with_overrides(
            TEMPLATE_PLACES, [VocabularyEntry(label="Lyon métropole", aliases=["Lyon"])]
        )
        assert places.lookup("Lyon").label == "Lyon métropole"
        assert places.lookup("Paris").label == "Paris"


class TestParseProfession:
    """Tests for parse_profession."""

    def test_aliases_map_to_canonical_labels(self):
        """Test that aliases map to canonical labels."""
        assert parse_profession("Fermier, Marchande").tokens == ["Agriculteur", "Marchand"]

    def test_word_fallback(self):
        """Test the word fallback."""
        parsed = parse_profession("Ancien boulanger / notaire")
        assert parsed.tokens == ["Boulanger", "Notaire"]
        assert parsed.profession == "Ancien boulanger / notaire"

    def test_duplicates_collapse(self):
        """Test that duplicates collapse."""
        assert parse_profession("Cultivateur; Fermier").tokens == ["Agriculteur"]

    def test_unknown_and_empty(self):
        """Test unknown and empty input."""
        assert parse_profession("Astronaut").tokens == []
        assert parse_profession("").tokens == []


class TestParsePlace:
    """Tests for parse_place."""

    def test_region_and_country(self):
        """Test region and country."""
        parsed = parse_place("Brittany, France")
        assert parsed.tokens == ["Bretagne", "France"]
        assert [m.category for m in parsed.matches] == ["region", "country"]

    def test_department_codes(self):
        """Test department codes."""
        assert parse_place("72").tokens == ["Sarthe"]
        assert parse_place("Sarthe (72)").tokens == ["Sarthe"]
        assert parse_place("2A").tokens == ["Corse-du-Sud"]
        assert parse_place("1").tokens == ["Ain"]

    def test_paris_code(self):
        """Test the Paris code."""
        assert parse_place("75").tokens == ["Paris"]

    def test_geneanet_place(self):
        """Test a profile-page place."""
        parsed = parse_place("Saint-Longis, 72295, Sarthe, Pays de la Loire, France")
        assert parsed.tokens == ["Sarthe", "Pays de la Loire", "France"]
        assert parsed.matches[0].fragment == "Sarthe"

    def test_custom_entries(self):
        """Test custom entries."""
        entries = [VocabularyEntry(label="Saint-Longis", category="commune")]
        assert parse_place("Saint-Longis, France", entries).tokens == ["Saint-Longis"]
