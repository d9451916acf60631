"""Label synonym table for "Label: value" extraction.

Each category lists label phrases in English, French and German. A label
matches a category when one of its phrases, normalized, is contained in the
normalized label text; multi-word phrases also match written together
("Lastname", "Dateofbirth"). A match lying inside a longer phrase of another
category does not count, so "Prénom" is a given-name label and "Person" is
not a child label. Categories are tried in ``LABEL_PRIORITY`` order:
relatives first, so "Father's name" is a father label, then "Maiden name"
resolves to ``maiden`` before ``name``.
"""
from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from kingraph.utils.normalize import normalize_for_comparison

LABELS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "name": ("name", "full name", "person", "individual"),
        "given": ("given", "forename", "first name", "prénom", "vorname"),
        "surname": ("surname", "last name", "nom", "nachname"),
        "maiden": ("maiden", "née", "nee", "birth name", "jeune fille", "geburtsname"),
        "sex": ("sex", "gender", "sexe", "geschlecht"),
        "birth": ("birth", "born", "geburt", "naissance"),
        "death": ("death", "died", "décès", "tod"),
        "residence": ("residence", "address", "domicile"),
        "father": ("father", "dad", "père", "vater"),
        "mother": ("mother", "mom", "mère", "mutter"),
        "sibling": ("sibling", "brother", "sister", "frère", "soeur", "sœur"),
        "spouse": ("spouse", "husband", "wife", "époux", "épouse"),
        "child": ("child", "son", "daughter", "enfant", "kind"),
        "occupation": ("occupation", "profession", "emploi", "beruf"),
        "religion": ("religion", "confession"),
        "source": ("source", "citation", "reference"),
        "notes": ("notes", "note", "remarks", "comments"),
    }
)

LABEL_PRIORITY: tuple[str, ...] = (
    "father",
    "mother",
    "sibling",
    "spouse",
    "child",
    "maiden",
    "given",
    "surname",
    "name",
    "sex",
    "birth",
    "death",
    "residence",
    "occupation",
    "religion",
    "source",
    "notes",
)


def _variants(phrase: str) -> list[str]:
    normalized = normalize_for_comparison(phrase)
    if not normalized:
        return []
    return list(dict.fromkeys([normalized, normalized.replace(" ", "")]))


class LabelTable:
    """Normalized label phrases per category, optionally extended."""

    def __init__(self, extra: Mapping[str, list[str]] | None = None) -> None:
        phrases: dict[str, tuple[str, ...]] = {}
        for category in LABEL_PRIORITY:
            merged = [*LABELS[category], *((extra or {}).get(category, []))]
            variants = [variant for phrase in merged for variant in _variants(phrase)]
            phrases[category] = tuple(dict.fromkeys(variants))
        self._phrases = MappingProxyType(phrases)

    def _hits(self, label: str) -> list[tuple[str, int, int]]:
        """``(category, start, end)`` for every phrase occurrence in ``label``."""
        text = normalize_for_comparison(label)
        hits: list[tuple[str, int, int]] = []
        if not text:
            return hits
        for category, phrases in self._phrases.items():
            for phrase in phrases:
                start = text.find(phrase)
                while start != -1:
                    hits.append((category, start, start + len(phrase)))
                    start = text.find(phrase, start + 1)
        return hits

    def _categories(self, label: str) -> set[str]:
        hits = self._hits(label)
        return {
            category
            for category, start, end in hits
            if not any(
                other != category
                and other_start <= start
                and end <= other_end
                and other_end - other_start > end - start
                for other, other_start, other_end in hits
            )
        }

    def matches(self, category: str, label: str) -> bool:
        return category in self._categories(label)

    def classify(self, label: str) -> str | None:
        """First category in priority order with a phrase in ``label``."""
        categories = self._categories(label)
        for category in LABEL_PRIORITY:
            if category in categories:
                return category
        return None
