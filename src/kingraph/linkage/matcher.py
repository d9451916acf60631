"""Entity matcher: rank stored individuals against an extracted record.

Scores combine up to four components, each weighted and skipped when not
comparable:

- name (0.6): token overlap of given names, surname, maiden name, aliases
- birth year (0.2) and death year (0.1): by year distance
- parents (0.1): average father/mother name overlap

The final score is the weighted mean over the components present, so a
record with only a name is judged on the name alone. Individuals with no
comparable component are not candidates at all.
"""
from __future__ import annotations

from dataclasses import dataclass

from kingraph.config import MATCHING, MatchingConfig
from kingraph.logging import get_logger
from kingraph.models.record import IndividualRecord
from kingraph.models.storage import IndividualPool, StoredIndividual, StoredRecord

from .comparisons import name_similarity, parents_similarity, year_similarity
from .models import ComponentScores, LinkDecision, MatchCandidate

log = get_logger(__name__)


@dataclass
class _IndividualView:
    """What is known about a stored individual, with record fallbacks applied."""

    names: list[str | None]
    birth_year: int | None
    death_year: int | None
    father: str | None
    mother: str | None
    latest: StoredRecord | None


def _record_names(record: IndividualRecord) -> list[str | None]:
    return [*record.given_names, record.surname, record.maiden_name, *record.aliases]


class EntityMatcher:
    """Scores and ranks linking candidates for an extracted record.

    Example:
        >>> matcher = EntityMatcher()
        >>> decision = matcher.decide(record, pool)
        >>> if decision is LinkDecision.AUTO_LINK:
        ...     candidate = matcher.auto_link(record, pool)
    """

    def __init__(self, config: MatchingConfig = MATCHING) -> None:
        self.config = config

    def _view(self, individual: StoredIndividual, latest: StoredRecord | None) -> _IndividualView:
        profile = individual.profile
        fallback = latest.record if latest else None

        names: list[str | None] = [
            *profile.given_names,
            profile.surname,
            profile.maiden_name,
            *profile.aliases,
        ]
        if not any(names) and fallback is not None:
            names = _record_names(fallback)
        if not any(names):
            names = [individual.name]

        def _pick(own, other):
            return own if own is not None else other

        return _IndividualView(
            names=names,
            birth_year=_pick(profile.birth.year, fallback.birth.year if fallback else None),
            death_year=_pick(profile.death.year, fallback.death.year if fallback else None),
            father=_pick(profile.parents.father, fallback.parents.father if fallback else None),
            mother=_pick(profile.parents.mother, fallback.parents.mother if fallback else None),
            latest=latest,
        )

    def score(
        self, record: IndividualRecord, individual: StoredIndividual, pool: IndividualPool
    ) -> MatchCandidate | None:
        """Score one individual; None when no component is comparable."""
        return self._score(record, individual, pool.latest_record(individual.id))

    def _score(
        self, record: IndividualRecord, individual: StoredIndividual, latest: StoredRecord | None
    ) -> MatchCandidate | None:
        view = self._view(individual, latest)
        components = ComponentScores(
            name=name_similarity(_record_names(record), view.names),
            birth_year=year_similarity(record.birth.year, view.birth_year),
            death_year=year_similarity(record.death.year, view.death_year),
            parents=parents_similarity(
                (record.parents.father, record.parents.mother), (view.father, view.mother)
            ),
        )
        weights = {
            "name": self.config.name_weight,
            "birth_year": self.config.birth_year_weight,
            "death_year": self.config.death_year_weight,
            "parents": self.config.parents_weight,
        }

        present = components.present()
        total_weight = sum(weights[key] for key in present)
        if not present or total_weight <= 0:
            return None
        weighted = sum(weights[key] * value for key, value in present.items())
        score = round(max(0.0, min(1.0, weighted / total_weight)), 6)

        return MatchCandidate(
            individual_id=individual.id,
            score=score,
            latest_record_ref=view.latest.id if view.latest else None,
            components=components,
        )

    def rank(self, record: IndividualRecord, pool: IndividualPool) -> list[MatchCandidate]:
        """All scorable individuals, best first.

        Ties go to the individual with the more recent linked record, then to
        the smaller id.
        """
        latest_by_individual = pool.latest_records()
        scored: list[tuple[MatchCandidate, float | None]] = []
        for individual in pool.individuals:
            latest = latest_by_individual.get(individual.id)
            candidate = self._score(record, individual, latest)
            if candidate is None:
                continue
            scored.append((candidate, latest.created_at.timestamp() if latest else None))

        scored.sort(
            key=lambda item: (
                -item[0].score,
                item[1] is None,
                -(item[1] or 0.0),
                item[0].individual_id,
            )
        )
        log.debug("candidates_ranked", pool_size=len(pool.individuals), scored=len(scored))
        return [candidate for candidate, _ in scored]

    def suggest(self, record: IndividualRecord, pool: IndividualPool) -> list[MatchCandidate]:
        """Candidates at or above the suggestion threshold, capped."""
        ranked = [c for c in self.rank(record, pool) if self.config.is_suggestion(c.score)]
        return ranked[: self.config.max_suggestions]

    def auto_link(self, record: IndividualRecord, pool: IndividualPool) -> MatchCandidate | None:
        """The top candidate when it clears the auto-link threshold."""
        ranked = self.rank(record, pool)
        if ranked and self.config.is_auto_link(ranked[0].score):
            return ranked[0]
        return None

    def decide(self, record: IndividualRecord, pool: IndividualPool) -> LinkDecision:
        """Batch-linking decision for one record."""
        ranked = self.rank(record, pool)
        if ranked and self.config.is_auto_link(ranked[0].score):
            return LinkDecision.AUTO_LINK
        if any(self.config.is_suggestion(c.score) for c in ranked):
            return LinkDecision.SUGGEST
        return LinkDecision.CREATE
