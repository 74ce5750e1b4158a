from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from api.core.candidate_gen import GENRE_IDS, Candidate
from api.core.intent_parser import IntentSignature
from api.core.user_profile import GenreWeights

logger = logging.getLogger(__name__)

_VOTE_AVERAGE_WEIGHT = 2.0
_VOTE_COUNT_WEIGHT = 3.0

# (flag, genre bonus) for genre asks that match the title's tags
_GENRE_BONUSES: Tuple[Tuple[str, float], ...] = (
    ("comedy", 18.0),
    ("horror", 18.0),
    ("mystery", 14.0),
    ("anime", 10.0),
)

_UNDERRATED_CEILING = 30.0
_UNDERRATED_POPULARITY_WEIGHT = 10.0
_BAD_MOVIE_VOTE_WEIGHT = 2.0
_BAD_MOVIE_POPULARITY_WEIGHT = 2.0
_TRIPPY_BONUS = 6.0
_TRIPPY_WORDS = ("surreal", "psychedelic", "strange")


@dataclass(frozen=True)
class ScoredCandidate:
    candidate: Candidate
    score: float


def score_candidate(
    candidate: Candidate,
    signature: IntentSignature,
    weights: GenreWeights | None = None,
) -> float:
    """
    Additive rank score: quality, intent bonuses and genre history.

    Higher is better. No normalization and no tie-breaking happens here.
    """
    score = _VOTE_AVERAGE_WEIGHT * candidate.vote_average
    score += _VOTE_COUNT_WEIGHT * math.log10(candidate.vote_count + 1)

    for flag, bonus in _GENRE_BONUSES:
        if getattr(signature, flag) and GENRE_IDS[flag] in candidate.genre_ids:
            score += bonus

    popularity_log = math.log10(candidate.popularity + 1)
    if signature.underrated:
        score += max(
            0.0, _UNDERRATED_CEILING - _UNDERRATED_POPULARITY_WEIGHT * popularity_log
        )
    if signature.bad_movie:
        score += (
            -_BAD_MOVIE_VOTE_WEIGHT * candidate.vote_average
            + _BAD_MOVIE_POPULARITY_WEIGHT * popularity_log
        )
    if signature.trippy:
        overview = candidate.overview.lower()
        if any(word in overview for word in _TRIPPY_WORDS):
            score += _TRIPPY_BONUS

    if weights is not None:
        score += weights.bonus(candidate.genre_ids)
    return score


def rank_candidates(
    candidates: Sequence[Candidate],
    signature: IntentSignature,
    weights: GenreWeights | None = None,
) -> List[ScoredCandidate]:
    """Score and sort best-first; equal scores keep their pool order."""
    scored = [
        ScoredCandidate(candidate, score_candidate(candidate, signature, weights))
        for candidate in candidates
    ]
    scored.sort(key=lambda item: item.score, reverse=True)
    if logger.isEnabledFor(logging.DEBUG) and scored:
        logger.debug(
            "Ranked %d candidates | top=%s (%.3f) bottom=%s (%.3f)",
            len(scored),
            scored[0].candidate.id,
            scored[0].score,
            scored[-1].candidate.id,
            scored[-1].score,
        )
    return scored
