from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import List, Sequence

from api.core.candidate_gen import Candidate, aggregate_candidates, merge_slices
from api.core.deck import DeckResponse, assemble_deck, describe
from api.core.intent_parser import IntentSignature, parse_intent
from api.core.reranker import rank_candidates
from api.core.shuffle import derive_seed, shuffle_buckets
from api.core.user_profile import build_genre_weights
from api.core.user_utils import DeckRequest
from etl.catalog import CatalogSource, plan_slices

logger = logging.getLogger(__name__)


def calendar_day(now: datetime | None = None) -> str:
    moment = now or datetime.now(UTC)
    return moment.astimezone(UTC).strftime("%Y-%m-%d")


def build_deck_from_slices(
    slices: Sequence[Sequence[Candidate]],
    signature: IntentSignature,
    kept_ids: Sequence[str],
    passed_ids: Sequence[str],
    seed: int,
) -> DeckResponse:
    """
    Pure ranking pipeline over already-fetched catalog slices.

    Identical slices, feedback and seed always produce the identical deck.
    """
    pool = merge_slices(slices)
    weights = build_genre_weights(pool, kept_ids, passed_ids)
    eligible = aggregate_candidates(pool, signature, kept_ids, passed_ids)
    ranked = rank_candidates(eligible, signature, weights)
    top, mid = shuffle_buckets(ranked, seed)
    cards = assemble_deck(top, mid, ranked, signature)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Deck built | pool=%d eligible=%d liked_genres=%s passed_genres=%s cards=%s",
            len(pool),
            len(eligible),
            weights.likes,
            weights.passes,
            [card.id for card in cards],
        )
    return DeckResponse(interpretation=describe(signature), cards=cards)


async def build_deck(
    source: CatalogSource,
    request: DeckRequest,
    session_id: str,
    day: str | None = None,
) -> DeckResponse:
    signature = parse_intent(request.q)
    plan = plan_slices(signature)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Slice plan for mode=%s: %s",
            signature.mode(),
            [query.cache_key() for query in plan],
        )

    slices: List[List[Candidate]] = await source.fetch_all(plan)
    seed = derive_seed(session_id, day or calendar_day(), request.reroll)
    return build_deck_from_slices(
        slices, signature, request.likes, request.passes, seed
    )
