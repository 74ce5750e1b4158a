from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Sequence, Tuple

import httpx

from api.core.candidate_gen import GENRE_IDS, Candidate
from api.core.errors import UpstreamFetchError
from api.core.intent_parser import IntentSignature
from etl.cache import CacheStore
from etl.tmdb_client import TMDBClient

logger = logging.getLogger(__name__)

HOUR = 60 * 60
TTL_BROAD = 6 * HOUR
TTL_TRENDING = 2 * HOUR
TTL_SLICE = 12 * HOUR

# (release_from, release_to); an open end is None
ERAS: Tuple[Tuple[str | None, str | None], ...] = (
    ("1970-01-01", "1999-12-31"),
    ("2000-01-01", None),
)
PAGES = (1, 2)

SliceKind = Literal["discover", "trending", "top_rated"]


@dataclass(frozen=True)
class CatalogQuery:
    kind: SliceKind = "discover"
    page: int = 1
    sort_by: str = "popularity.desc"
    vote_count_floor: int = 200
    vote_average_floor: float = 0.0
    genre_id: int | None = None
    release_from: str | None = None
    release_to: str | None = None

    def cache_key(self) -> str:
        if self.kind == "trending":
            return "tmdb:trending:movie:week:v1"
        if self.kind == "top_rated":
            return f"tmdb:top_rated:movie:p{self.page}:v1"
        parts = [
            "tmdb:discover:movie",
            self.sort_by.replace(".", "_"),
            f"votes{self.vote_count_floor}",
            f"avg{self.vote_average_floor:g}",
            f"g{self.genre_id or 'any'}",
            f"from{self.release_from or 'any'}",
            f"to{self.release_to or 'any'}",
            f"p{self.page}",
            "v1",
        ]
        return ":".join(parts)

    def ttl_seconds(self) -> int:
        if self.kind == "trending":
            return TTL_TRENDING
        if self.kind == "top_rated":
            return TTL_BROAD
        if self.genre_id is None and not self.release_from and not self.release_to:
            return TTL_BROAD
        return TTL_SLICE

    def discover_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "page": self.page,
            "sort_by": self.sort_by,
            "vote_count.gte": self.vote_count_floor,
        }
        if self.vote_average_floor:
            params["vote_average.gte"] = self.vote_average_floor
        if self.genre_id is not None:
            params["with_genres"] = self.genre_id
        if self.release_from:
            params["primary_release_date.gte"] = self.release_from
        if self.release_to:
            params["primary_release_date.lte"] = self.release_to
        return params


def plan_slices(signature: IntentSignature) -> List[CatalogQuery]:
    """Broad lists first, then one discover slice per era and page."""
    if signature.underrated:
        sort_by, vote_floor, average_floor = "vote_average.desc", 50, 6.5
    elif signature.bad_movie:
        sort_by, vote_floor, average_floor = "vote_average.asc", 200, 0.0
    else:
        sort_by, vote_floor, average_floor = "popularity.desc", 200, 0.0

    genre = signature.single_genre()
    genre_id = GENRE_IDS[genre] if genre else None

    plan = [CatalogQuery(kind="trending"), CatalogQuery(kind="top_rated", page=1)]
    for release_from, release_to in ERAS:
        for page in PAGES:
            plan.append(
                CatalogQuery(
                    page=page,
                    sort_by=sort_by,
                    vote_count_floor=vote_floor,
                    vote_average_floor=average_floor,
                    genre_id=genre_id,
                    release_from=release_from,
                    release_to=release_to,
                )
            )
    return plan


class CatalogSource:
    """Read-through cache in front of the TMDB client."""

    def __init__(self, client: TMDBClient, cache: CacheStore):
        self._client = client
        self._cache = cache

    async def _call(self, query: CatalogQuery) -> List[Dict[str, Any]]:
        if query.kind == "trending":
            return await self._client.trending("week")
        if query.kind == "top_rated":
            return await self._client.top_rated(query.page)
        return await self._client.discover(query.discover_params())

    async def query(self, query: CatalogQuery) -> List[Candidate]:
        key = query.cache_key()
        cached = await self._cache.get(key)
        if cached is not None:
            logger.debug("Cache hit %s", key)
            return [Candidate.from_tmdb(row) for row in cached]
        logger.debug("Cache miss %s", key)

        try:
            results = await self._call(query)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Catalog fetch failed for %s: %s", key, exc)
            raise UpstreamFetchError(key, f"TMDB error for {key}: {exc}") from exc

        await self._cache.set(key, results, query.ttl_seconds())
        logger.debug("Cache set %s (ttl=%ds)", key, query.ttl_seconds())
        return [Candidate.from_tmdb(row) for row in results]

    async def fetch_all(self, plan: Sequence[CatalogQuery]) -> List[List[Candidate]]:
        """Fetch every slice concurrently; any failure fails the whole batch."""
        return list(await asyncio.gather(*(self.query(q) for q in plan)))
