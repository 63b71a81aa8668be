"""Smart suggestions: rank catalog entries by how often their types appear in
a view history, with deliberate noise so repeated calls keep varying.

Randomness has two layers, both owned by :class:`RandomizationPolicy`:

1. every candidate gets a ``random_factor`` in ``[0, RANDOM_FACTOR_SPAN)``,
   and with probability ``PURE_RANDOM_CHANCE`` it is ranked by that factor
   alone instead of by ``match_score + random_factor``;
2. the top ``limit`` candidates are shuffled again before being returned.

Identical histories therefore give different orderings, and possibly
different members, from one call to the next.
"""
import logging
import random
from collections import Counter
from dataclasses import dataclass, field

from .core import PURE_RANDOM_CHANCE, RANDOM_FACTOR_SPAN
from .models import PokemonRecord

logger = logging.getLogger(__name__)


@dataclass
class SuggestionCandidate:
    record: PokemonRecord
    match_score: int
    random_factor: float
    use_random_only: bool = field(default=False)

    @property
    def relevance_score(self) -> float:
        return self.match_score + self.random_factor

    @property
    def sort_key(self) -> float:
        return self.random_factor if self.use_random_only else self.relevance_score


class RandomizationPolicy:
    """All random draws made while ranking suggestions."""

    def __init__(self, rng: random.Random = None,
                 random_span: float = RANDOM_FACTOR_SPAN,
                 pure_random_chance: float = PURE_RANDOM_CHANCE):
        self.rng = rng or random.Random()
        self.random_span = random_span
        self.pure_random_chance = pure_random_chance

    def random_factor(self) -> float:
        return self.rng.random() * self.random_span

    def rank_by_random_only(self) -> bool:
        return self.rng.random() < self.pure_random_chance

    def shuffle(self, items):
        items = list(items)
        self.rng.shuffle(items)
        return items


def build_type_affinity(history) -> Counter:
    """Count each type tag across *history*; dual-type entries count in both buckets."""
    affinity = Counter()
    for entry in history:
        if entry.primary_type:
            affinity[entry.primary_type] += 1
        if entry.secondary_type:
            affinity[entry.secondary_type] += 1
    return affinity


def match_score(record: PokemonRecord, affinity) -> int:
    # First match wins: primary type is checked before secondary, never summed.
    if record.primary_type in affinity:
        return affinity[record.primary_type]
    if record.secondary_type and record.secondary_type in affinity:
        return affinity[record.secondary_type]
    return 0


def rank_candidates(records, affinity, limit: int, policy: RandomizationPolicy):
    """Score, rank and shuffle *records*; pure apart from the policy's draws."""
    if limit <= 0:
        return []
    candidates = []
    for record in records:
        candidates.append(SuggestionCandidate(record, match_score(record, affinity), policy.random_factor()))
    candidates = [c for c in candidates if c.match_score > 0]
    for c in candidates:
        c.use_random_only = policy.rank_by_random_only()
    candidates.sort(key=lambda c: c.sort_key, reverse=True)
    return [c.record for c in policy.shuffle(candidates[:limit])]


class RecommendationEngine:
    def __init__(self, store, policy: RandomizationPolicy = None):
        self.store = store
        self.policy = policy or RandomizationPolicy()

    def suggest(self, history, exclude_names=(), limit: int = 15):
        """Return at most *limit* records not named in *exclude_names*, ranked
        by type affinity with *history*. An empty history yields a uniform
        random sample of the whole catalog. Store failures propagate as
        StoreUnavailable.
        """
        if limit <= 0:
            return []
        history = list(history or [])
        if not history:
            logger.info('No history, returning %d random pokemon', limit)
            return self.store.random_sample(limit)

        affinity = build_type_affinity(history)
        if not affinity:
            return []
        records = self.store.find_candidates(affinity.keys(), exclude_names)
        suggestions = rank_candidates(records, affinity, limit, self.policy)
        logger.info('Found %d smart suggestions from %d candidates', len(suggestions), len(records))
        return suggestions
