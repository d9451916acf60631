"""Normalization utilities for genealogical text.

Provides consistent accent-, case- and punctuation-insensitive forms for
label matching and name comparison.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_WHITESPACE = re.compile(r"\s+")
_LIGATURES = str.maketrans({"œ": "oe", "Œ": "OE", "æ": "ae", "Æ": "AE", "ß": "ss"})


def strip_diacritics(value: str) -> str:
    """Remove combining marks after canonical decomposition (é → e, œ → oe)."""
    decomposed = unicodedata.normalize("NFD", value.translate(_LIGATURES))
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def collapse_whitespace(value: str) -> str:
    return _WHITESPACE.sub(" ", value).strip()


def normalize_for_comparison(value: str) -> str:
    """Normalize text for label and name comparison.

    - Strips diacritics
    - Lowercases
    - Collapses every non-alphanumeric run to a single space

    Args:
        value: Text to normalize

    Returns:
        Normalized string, possibly empty
    """
    if not value:
        return ""
    lowered = strip_diacritics(value).lower()
    return _NON_ALNUM.sub(" ", lowered).strip()


def name_tokens(values: Iterable[str | None]) -> set[str]:
    """Collect normalized tokens from several name parts."""
    tokens: set[str] = set()
    for value in values:
        if not value:
            continue
        tokens.update(normalize_for_comparison(value).split())
    return tokens


def jaccard(left: set[str], right: set[str]) -> float | None:
    """Jaccard overlap of two token sets, or None when either is empty."""
    if not left or not right:
        return None
    return len(left & right) / len(left | right)
