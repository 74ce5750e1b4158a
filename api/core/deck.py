from __future__ import annotations

import logging
from typing import List, Literal, Optional, Sequence, Set

from pydantic import BaseModel, Field

from api.core.candidate_gen import Candidate
from api.core.intent_parser import IntentSignature
from api.core.reranker import ScoredCandidate

logger = logging.getLogger(__name__)

DECK_SIZE = 10
TOP_PICKS = 6
MID_PICKS = 4

DEFAULT_REASON = "Curated pick"

# First matching flag wins
_REASONS = (
    ("underrated", "Underrated gem"),
    ("bad_movie", "So bad it's good"),
    ("trippy", "Trippy pick"),
    ("comedy", "Comedy pick"),
    ("horror", "Horror pick"),
    ("mystery", "Mystery pick"),
)


class DeckCard(BaseModel):
    id: str
    title: str
    year: int = Field(0, description="Release year, 0 when unknown.")
    kind: Literal["movie", "tv"] = "movie"
    reason: str = DEFAULT_REASON
    poster_path: Optional[str] = None


class Interpretation(BaseModel):
    anime: bool = False
    comedy: bool = False
    horror: bool = False
    mystery: bool = False
    trippy: bool = False
    underrated: bool = False
    bad_movie: bool = False
    mode: str = "mixed"
    interpreted_as: str = ""


class DeckResponse(BaseModel):
    interpretation: Interpretation
    cards: List[DeckCard] = Field(default_factory=list)


def reason_for(signature: IntentSignature) -> str:
    for flag, label in _REASONS:
        if getattr(signature, flag):
            return label
    return DEFAULT_REASON


def describe(signature: IntentSignature) -> Interpretation:
    flags = signature.active_flags()
    if flags:
        summary = "tmdb mix: " + ", ".join(flags)
    else:
        summary = "tmdb mix: trending + top rated + discover"
    return Interpretation(
        **signature.model_dump(), mode=signature.mode(), interpreted_as=summary
    )


def select_candidates(
    top: Sequence[ScoredCandidate],
    mid: Sequence[ScoredCandidate],
    ranked: Sequence[ScoredCandidate],
    size: int = DECK_SIZE,
) -> List[Candidate]:
    """
    Take the head of the shuffled top and mid buckets, then top up from the
    full best-first ranking until the deck is full or the ranking runs out.
    """
    chosen: List[Candidate] = []
    seen: Set[str] = set()

    def _take(entry: ScoredCandidate) -> None:
        if len(chosen) >= size or entry.candidate.id in seen:
            return
        chosen.append(entry.candidate)
        seen.add(entry.candidate.id)

    for entry in top[:TOP_PICKS]:
        _take(entry)
    for entry in mid[:MID_PICKS]:
        _take(entry)

    if len(chosen) < size:
        before = len(chosen)
        for entry in ranked:
            if len(chosen) >= size:
                break
            _take(entry)
        logger.debug("Topped up deck with %d ranked fallbacks", len(chosen) - before)

    return chosen[:size]


def to_card(candidate: Candidate, reason: str) -> DeckCard:
    return DeckCard(
        id=candidate.id,
        title=candidate.title,
        year=candidate.year,
        kind="movie",
        reason=reason,
        poster_path=candidate.poster_path,
    )


def assemble_deck(
    top: Sequence[ScoredCandidate],
    mid: Sequence[ScoredCandidate],
    ranked: Sequence[ScoredCandidate],
    signature: IntentSignature,
) -> List[DeckCard]:
    reason = reason_for(signature)
    return [to_card(c, reason) for c in select_candidates(top, mid, ranked)]
