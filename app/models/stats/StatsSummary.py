from datetime import datetime
from typing import NamedTuple

from pydantic import BaseModel, Field


def _plain(value) -> str:
    # accepts both the selector enums and raw strings
    return str(getattr(value, "value", value))


class StatsKey(NamedTuple):
    """Identity of a summary: one live summary per (player, period, mode, shard)."""

    player_id: str
    period: str
    mode: str
    shard: str

    @classmethod
    def build(cls, player_id, period, mode, shard) -> "StatsKey":
        return cls(str(player_id), _plain(period), _plain(mode), _plain(shard))

    def __str__(self) -> str:
        return f"{self.player_id}:{self.period}:{self.mode}:{self.shard}"


class StatsSummary(BaseModel):
    """Aggregated performance of one player over a trailing period."""

    player_id: str
    period: str
    mode: str
    shard: str
    kills: int = Field(default=0, ge=0)
    deaths: int = Field(default=0, ge=0)
    kd_ratio: float = Field(default=0.0, ge=0)
    win_rate: float = Field(default=0.0, ge=0, le=100)
    damage_dealt: float = Field(default=0.0, ge=0)
    survival_time: float = Field(default=0.0, ge=0, description="Seconds")
    wins: int = Field(default=0, ge=0)
    matches_counted: int = Field(default=0, ge=0)
    computed_at: datetime
    expires_at: datetime

    class Config:
        frozen = True
        from_attributes = True

    @property
    def key(self) -> StatsKey:
        return StatsKey.build(self.player_id, self.period, self.mode, self.shard)
