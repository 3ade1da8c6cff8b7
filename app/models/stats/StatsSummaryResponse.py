from pydantic import BaseModel, Field
from typing import List
from datetime import datetime


class StatsResponse(BaseModel):
    """Stats summary as exposed to the frontend."""
    player_id: str
    period: str
    mode: str
    shard: str
    kills: int = Field(ge=0)
    deaths: int = Field(ge=0)
    kd_ratio: float = Field(ge=0)
    win_rate: float = Field(ge=0, le=100, description="Percentage of matches won")
    damage_dealt: float = Field(ge=0)
    survival_time: float = Field(ge=0, description="Cumulative seconds survived")
    wins: int = Field(ge=0)
    matches_counted: int = Field(ge=0)
    computed_at: datetime

    class Config:
        from_attributes = True


class PlayerStatsData(BaseModel):
    """One row of the comparison dashboard."""
    player_id: str
    name: str
    stats: StatsResponse


class DashboardResponse(BaseModel):
    """Stats of several players side by side for the same period and mode."""
    players: List[PlayerStatsData]
    period: str
    mode: str
