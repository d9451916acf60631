"""Record-to-individual linkage.

Scores an extracted record against a snapshot of stored individuals and
applies the suggestion and auto-link threshold policies.

Key Components:
- EntityMatcher: ranks candidates, suggests, auto-links and decides
- MatchCandidate: scored candidate with a per-component breakdown
- LinkDecision: AUTO_LINK / SUGGEST / CREATE

Example:
    >>> from kingraph.linkage import EntityMatcher
    >>>
    >>> matcher = EntityMatcher()
    >>> for candidate in matcher.suggest(record, pool):
    ...     print(candidate.individual_id, candidate.score)
"""
from .comparisons import name_similarity, parents_similarity, year_similarity
from .matcher import EntityMatcher
from .models import ComponentScores, LinkDecision, MatchCandidate

__all__ = [
    # Models
    "ComponentScores",
    "LinkDecision",
    "MatchCandidate",
    # Comparisons
    "name_similarity",
    "parents_similarity",
    "year_similarity",
    # Matcher
    "EntityMatcher",
]
