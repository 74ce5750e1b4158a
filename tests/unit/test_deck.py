from __future__ import annotations

from api.core import deck
from api.core.intent_parser import IntentSignature, parse_intent
from api.core.reranker import ScoredCandidate
from tests.helpers import make_candidate


def _scored(ids):
    return [ScoredCandidate(make_candidate(i), float(-n)) for n, i in enumerate(ids)]


def test_takes_six_from_top_and_four_from_mid():
    top = _scored(range(1, 61))
    mid = _scored(range(61, 221))
    ranked = top + mid

    chosen = deck.select_candidates(top, mid, ranked)

    assert [c.id for c in chosen] == [str(i) for i in [1, 2, 3, 4, 5, 6, 61, 62, 63, 64]]


def test_tops_up_from_ranking_without_duplicates():
    ranked = _scored(range(1, 8))
    chosen = deck.select_candidates(ranked, [], ranked)
    assert [c.id for c in chosen] == [str(i) for i in range(1, 8)]


def test_top_up_skips_already_chosen_ids():
    ranked = _scored(range(1, 64))
    top = ranked[:60]
    mid = ranked[60:]
    chosen = deck.select_candidates(top, mid, ranked)
    ids = [c.id for c in chosen]
    assert ids == ["1", "2", "3", "4", "5", "6", "61", "62", "63", "7"]
    assert len(set(ids)) == len(ids)


def test_empty_ranking_gives_empty_deck():
    assert deck.select_candidates([], [], []) == []


def test_reason_precedence():
    assert deck.reason_for(IntentSignature()) == "Curated pick"
    assert deck.reason_for(parse_intent("underrated trash horror")) == "Underrated gem"
    assert deck.reason_for(parse_intent("terrible weird comedy")) == "So bad it's good"
    assert deck.reason_for(parse_intent("weird comedy")) == "Trippy pick"
    assert deck.reason_for(parse_intent("funny and scary")) == "Comedy pick"
    assert deck.reason_for(parse_intent("scary whodunit")) == "Horror pick"
    assert deck.reason_for(parse_intent("a whodunit")) == "Mystery pick"


def test_to_card_maps_fields():
    candidate = make_candidate(5, release_date="1999-03-31", poster="/m.jpg")
    card = deck.to_card(candidate, "Curated pick")
    assert card.model_dump() == {
        "id": "5",
        "title": "Title 5",
        "year": 1999,
        "kind": "movie",
        "reason": "Curated pick",
        "poster_path": "/m.jpg",
    }


def test_describe_echoes_signature():
    interpretation = deck.describe(parse_intent("a scary movie"))
    assert interpretation.horror is True
    assert interpretation.mode == "genre:horror"
    assert "horror" in interpretation.interpreted_as
