import os
from dotenv import load_dotenv

load_dotenv()


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


TMDB_API_KEY = os.getenv("TMDB_API_KEY", "")
TMDB_READ_TOKEN = os.getenv("TMDB_READ_TOKEN", "")
TMDB_LANGUAGE = os.getenv("TMDB_LANGUAGE", "en-US")
TMDB_TIMEOUT = _float_from_env("TMDB_TIMEOUT", 15.0)
TMDB_RATE_PER_SEC = _float_from_env("TMDB_RATE_PER_SEC", 20.0)
REDIS_URL = os.getenv("REDIS_URL", "")
CACHE_MAXSIZE = int(_float_from_env("CACHE_MAXSIZE", 512))
SESSION_COOKIE = os.getenv("SESSION_COOKIE", "wtw_session")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
