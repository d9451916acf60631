"""Component similarity functions for entity matching.

Each function returns a similarity in [0, 1], or None when the two sides
cannot be compared (a value is missing on either side).
"""
from __future__ import annotations

from collections.abc import Iterable

from kingraph.config import YEAR_DISTANCE_SCORES
from kingraph.utils.normalize import jaccard, name_tokens


def name_similarity(left: Iterable[str | None], right: Iterable[str | None]) -> float | None:
    """Jaccard overlap of normalized name tokens."""
    return jaccard(name_tokens(left), name_tokens(right))


def year_similarity(left: int | None, right: int | None) -> float | None:
    """Similarity by absolute year distance: 0→1.0, 1→0.75, 2→0.5, ≤5→0.25."""
    if left is None or right is None:
        return None
    distance = abs(left - right)
    for bound, score in YEAR_DISTANCE_SCORES:
        if distance <= bound:
            return score
    return 0.0


def parents_similarity(
    left: tuple[str | None, str | None], right: tuple[str | None, str | None]
) -> float | None:
    """Average of the comparable father and mother name similarities."""
    scores = [
        score
        for score in (name_similarity([a], [b]) for a, b in zip(left, right))
        if score is not None
    ]
    if not scores:
        return None
    return sum(scores) / len(scores)
