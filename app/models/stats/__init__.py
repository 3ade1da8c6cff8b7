from app.models.stats.Shard import Shard
from app.models.stats.StatsMode import StatsMode
from app.models.stats.StatsPeriod import StatsPeriod
from app.models.stats.StatsSummary import StatsKey, StatsSummary
from app.models.stats.StatsSummaryResponse import (
    StatsResponse,
    PlayerStatsData,
    DashboardResponse,
)

__all__ = [
    "Shard",
    "StatsMode",
    "StatsPeriod",
    "StatsKey",
    "StatsSummary",
    "StatsResponse",
    "PlayerStatsData",
    "DashboardResponse",
]
