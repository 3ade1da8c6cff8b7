from app.api.players_utils.registry import PlayerRegistry
from app.api.pubg_utils.client import PubgApiClient
from app.api.stats_utils.cache import StatsCache
from app.api.stats_utils.persistence_worker import StatsPersistenceWorker
from app.api.stats_utils.pipeline import StatsPipeline
from app.api.stats_utils.repository import StatsRepository

# process-wide singletons, shared by every request
pubg_client = PubgApiClient()
stats_repository = StatsRepository()
stats_writer = StatsPersistenceWorker(stats_repository)
stats_cache = StatsCache(stats_repository, stats_writer)
player_registry = PlayerRegistry(pubg_client, stats_cache)
stats_pipeline = StatsPipeline(stats_cache, pubg_client, player_registry)


def get_stats_pipeline() -> StatsPipeline:
    return stats_pipeline


def get_player_registry() -> PlayerRegistry:
    return player_registry
