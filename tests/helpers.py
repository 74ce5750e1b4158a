from __future__ import annotations

from typing import Any, Dict, Iterable, List

from api.core.candidate_gen import Candidate

HORROR = 27
COMEDY = 35
DRAMA = 18


def make_candidate(
    cid: int | str,
    *,
    genres: Iterable[int] = (DRAMA,),
    vote_average: float = 7.0,
    vote_count: int = 1000,
    popularity: float = 80.0,
    overview: str = "",
    poster: str | None = "/poster.jpg",
    release_date: str = "2010-05-01",
) -> Candidate:
    return Candidate(
        id=str(cid),
        title=f"Title {cid}",
        release_date=release_date,
        genre_ids=frozenset(genres),
        vote_average=vote_average,
        vote_count=vote_count,
        popularity=popularity,
        overview=overview,
        poster_path=poster,
    )


def tmdb_row(cid: int, **overrides: Any) -> Dict[str, Any]:
    row: Dict[str, Any] = {
        "id": cid,
        "title": f"Title {cid}",
        "overview": "",
        "release_date": "2010-05-01",
        "genre_ids": [DRAMA],
        "vote_average": 7.0,
        "vote_count": 1000,
        "popularity": 80.0,
        "poster_path": f"/p{cid}.jpg",
    }
    row.update(overrides)
    return row


def make_pool(count: int, start: int = 1, **kwargs: Any) -> List[Candidate]:
    return [make_candidate(start + i, **kwargs) for i in range(count)]
