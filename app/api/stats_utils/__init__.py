"""
Stats utilities package.

Re-exports the pipeline pieces for convenient importing.
"""

# Aggregation
from app.api.stats_utils.aggregator import (
    compute_stats_from_matches,
    calculate_kd_ratio,
    calculate_win_rate,
    ttl_for_period,
)

# Cache
from app.api.stats_utils.cache import StatsCache, player_cache_keys
from app.api.stats_utils.persistence_worker import StatsPersistenceWorker

# Orchestration
from app.api.stats_utils.pipeline import StatsPipeline
from app.api.stats_utils.errors import NoMatchDataError, PlayerNotFoundError

__all__ = [
    # Aggregation
    "compute_stats_from_matches",
    "calculate_kd_ratio",
    "calculate_win_rate",
    "ttl_for_period",
    # Cache
    "StatsCache",
    "player_cache_keys",
    "StatsPersistenceWorker",
    # Orchestration
    "StatsPipeline",
    "NoMatchDataError",
    "PlayerNotFoundError",
]
