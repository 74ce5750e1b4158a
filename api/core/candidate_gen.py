from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Sequence

from api.core.intent_parser import IntentSignature

logger = logging.getLogger(__name__)

# TMDB movie genre ids behind the genre intent flags
GENRE_IDS: Dict[str, int] = {
    "anime": 16,
    "comedy": 35,
    "horror": 27,
    "mystery": 9648,
}

MIN_VOTE_COUNT = 200
MIN_VOTE_COUNT_UNDERRATED = 50
MAX_POPULARITY_UNDERRATED = 60.0
MIN_GENRE_POOL = 25


@dataclass(frozen=True)
class Candidate:
    id: str
    title: str
    release_date: str = ""
    genre_ids: FrozenSet[int] = field(default_factory=frozenset)
    vote_average: float = 0.0
    vote_count: int = 0
    popularity: float = 0.0
    overview: str = ""
    poster_path: str | None = None

    @classmethod
    def from_tmdb(cls, payload: Dict[str, Any]) -> "Candidate":
        return cls(
            id=str(payload["id"]),
            title=payload.get("title") or payload.get("name") or "",
            release_date=payload.get("release_date") or "",
            genre_ids=frozenset(int(g) for g in payload.get("genre_ids") or []),
            vote_average=float(payload.get("vote_average") or 0.0),
            vote_count=int(payload.get("vote_count") or 0),
            popularity=float(payload.get("popularity") or 0.0),
            overview=payload.get("overview") or "",
            poster_path=payload.get("poster_path") or None,
        )

    @property
    def year(self) -> int:
        prefix = self.release_date[:4]
        return int(prefix) if prefix.isdigit() else 0


def merge_slices(slices: Iterable[Sequence[Candidate]]) -> List[Candidate]:
    """
    Dedupe catalog slices by id. A later slice overwrites an earlier copy of the
    same title but the title keeps the position where it was first seen.
    """
    by_id: Dict[str, Candidate] = {}
    for batch in slices:
        for candidate in batch:
            by_id[candidate.id] = candidate
    return list(by_id.values())


def apply_hard_filters(
    pool: Sequence[Candidate],
    signature: IntentSignature,
    exclude_ids: Iterable[str] = (),
) -> List[Candidate]:
    excluded = set(exclude_ids)
    min_votes = MIN_VOTE_COUNT_UNDERRATED if signature.underrated else MIN_VOTE_COUNT

    filtered: List[Candidate] = []
    for candidate in pool:
        if not candidate.poster_path:
            continue
        if candidate.vote_count < min_votes:
            continue
        if signature.underrated and candidate.popularity > MAX_POPULARITY_UNDERRATED:
            continue
        if candidate.id in excluded:
            continue
        filtered.append(candidate)
    return filtered


def aggregate_candidates(
    pool: Sequence[Candidate],
    signature: IntentSignature,
    kept_ids: Iterable[str] = (),
    passed_ids: Iterable[str] = (),
) -> List[Candidate]:
    """
    Filter the merged pool down to rankable candidates.

    A lone genre ask (no underrated/bad-movie mode) narrows the pool to that
    genre, unless fewer than MIN_GENRE_POOL titles would survive.
    """
    exclude = set(kept_ids) | set(passed_ids)
    eligible = apply_hard_filters(pool, signature, exclude)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Hard filters kept %d of %d candidates (excluded=%d)",
            len(eligible),
            len(pool),
            len(exclude),
        )

    genre = signature.single_genre()
    if genre is None:
        return eligible

    genre_id = GENRE_IDS[genre]
    narrowed = [c for c in eligible if genre_id in c.genre_ids]
    if len(narrowed) < MIN_GENRE_POOL:
        logger.info(
            "Only %d %s candidates after genre filter; keeping the unfiltered pool of %d",
            len(narrowed),
            genre,
            len(eligible),
        )
        return eligible
    return narrowed
