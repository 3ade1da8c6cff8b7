import os
from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


DATABASE_URL = os.getenv(
    "DATABASE_URL", "postgresql+asyncpg://localhost:5432/pubg_tracker"
)
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes")

PUBG_API_KEY = os.getenv("PUBG_API_KEY", "")
PUBG_API_BASE_URL = os.getenv("PUBG_API_BASE_URL", "https://api.pubg.com/shards")
PUBG_REQUEST_TIMEOUT_SECONDS = _env_int("PUBG_REQUEST_TIMEOUT_SECONDS", 30)

FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# memory tier of the stats cache
STATS_MEMORY_CACHE_SIZE = _env_int("STATS_MEMORY_CACHE_SIZE", 1000)
STATS_MEMORY_CACHE_TTL_SECONDS = _env_int("STATS_MEMORY_CACHE_TTL_SECONDS", 3600)

# run every 10 minutes
STATS_REAPER_INTERVAL_SECONDS = _env_int("STATS_REAPER_INTERVAL_SECONDS", 600)
