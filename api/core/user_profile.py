from __future__ import annotations
from dataclasses import dataclass, field
from collections import defaultdict
from typing import Dict, Iterable, Sequence

from api.core.candidate_gen import Candidate

LIKE_WEIGHT = 2
PASS_WEIGHT = 1


@dataclass
class GenreWeights:
    """Per-genre keep/pass counts for one request."""

    likes: Dict[int, int] = field(default_factory=dict)
    passes: Dict[int, int] = field(default_factory=dict)

    def bonus(self, genre_ids: Iterable[int]) -> int:
        return sum(
            LIKE_WEIGHT * self.likes.get(genre, 0)
            - PASS_WEIGHT * self.passes.get(genre, 0)
            for genre in genre_ids
        )

    def is_empty(self) -> bool:
        return not self.likes and not self.passes


def build_genre_weights(
    pool: Sequence[Candidate],
    kept_ids: Iterable[str],
    passed_ids: Iterable[str],
) -> GenreWeights:
    """
    Count how often each genre appears among kept and passed titles.

    Only titles present in ``pool`` contribute, so history outside today's slice
    union is ignored. Counts are raw occurrences with no decay.
    """
    kept = set(kept_ids)
    passed = set(passed_ids)
    likes: Dict[int, int] = defaultdict(int)
    passes: Dict[int, int] = defaultdict(int)

    for candidate in pool:
        if candidate.id in kept:
            for genre in candidate.genre_ids:
                likes[genre] += 1
        if candidate.id in passed:
            for genre in candidate.genre_ids:
                passes[genre] += 1

    return GenreWeights(likes=dict(likes), passes=dict(passes))
