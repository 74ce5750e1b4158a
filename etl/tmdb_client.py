from __future__ import annotations
import asyncio
import time
from typing import Dict, Any, List
import httpx

TMDB_BASE = "https://api.themoviedb.org/3"


class TMDBClient:
    def __init__(
        self,
        api_key: str = "",
        read_token: str = "",
        timeout: float = 15.0,
        rate_per_sec: float = 20.0,
        language: str = "en-US",
    ):
        self.api_key = api_key
        self.read_token = read_token
        self.timeout = timeout
        self.rate = rate_per_sec
        self.language = language
        self._last = 0.0
        self._lock = asyncio.Lock()
        self._client = httpx.AsyncClient(timeout=self.timeout)

    async def _throttle(self):
        async with self._lock:
            dt = time.time() - self._last
            min_gap = 1.0 / max(self.rate, 1e-6)
            if dt < min_gap:
                await asyncio.sleep(min_gap - dt)
            self._last = time.time()

    def _headers(self) -> Dict[str, str]:
        if self.read_token:
            return {"Authorization": f"Bearer {self.read_token}"}
        return {}

    async def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        await self._throttle()
        q = dict(params)
        q.setdefault("language", self.language)
        if self.api_key:
            q["api_key"] = self.api_key
        r = await self._client.get(
            f"{TMDB_BASE}{path}", params=q, headers=self._headers()
        )
        r.raise_for_status()
        return r.json()

    async def discover(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        q = {"include_adult": "false", "include_video": "false"}
        q.update(params)
        data = await self._get("/discover/movie", q)
        return data.get("results") or []

    async def trending(self, window: str = "week") -> List[Dict[str, Any]]:
        data = await self._get(f"/trending/movie/{window}", {})
        return data.get("results") or []

    async def top_rated(self, page: int = 1) -> List[Dict[str, Any]]:
        data = await self._get("/movie/top_rated", {"page": page})
        return data.get("results") or []

    async def aclose(self):
        await self._client.aclose()
