import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes.health import router as health_router
from api.routes.deck import router as deck_router
from api.config import (
    CACHE_MAXSIZE,
    LOG_LEVEL,
    REDIS_URL,
    TMDB_API_KEY,
    TMDB_LANGUAGE,
    TMDB_RATE_PER_SEC,
    TMDB_READ_TOKEN,
    TMDB_TIMEOUT,
)
from etl.cache import build_cache
from etl.catalog import CatalogSource
from etl.tmdb_client import TMDBClient

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
# Reduce noise from other modules
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.INFO)


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    _initialise_application(app)
    yield
    client = getattr(app.state, "tmdb_client", None)
    if client is not None:
        await client.aclose()
        app.state.tmdb_client = None
    cache = getattr(app.state, "cache", None)
    if cache is not None and hasattr(cache, "aclose"):
        await cache.aclose()
    app.state.catalog = None


app = FastAPI(title="What to watch", version="0.1.0", lifespan=app_lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routes
app.include_router(health_router, prefix="")
app.include_router(deck_router)


def _initialise_application(app: FastAPI) -> None:
    # Tests install their own catalog stub before the app starts.
    if getattr(app.state, "catalog", None) is not None:
        return
    if not (TMDB_API_KEY or TMDB_READ_TOKEN):
        logging.getLogger(__name__).warning(
            "Neither TMDB_API_KEY nor TMDB_READ_TOKEN is set; /deck will answer 503."
        )
        app.state.tmdb_client = None
        app.state.cache = None
        app.state.catalog = None
        return
    client = TMDBClient(
        api_key=TMDB_API_KEY,
        read_token=TMDB_READ_TOKEN,
        timeout=TMDB_TIMEOUT,
        rate_per_sec=TMDB_RATE_PER_SEC,
        language=TMDB_LANGUAGE,
    )
    cache = build_cache(REDIS_URL, CACHE_MAXSIZE)
    app.state.tmdb_client = client
    app.state.cache = cache
    app.state.catalog = CatalogSource(client, cache)
