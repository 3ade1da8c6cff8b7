"""
Persistent tier of the stats cache: the `player_stats` table.

At most one row per (player_id, period, mode, shard), enforced by the
`player_stats_composite` unique constraint; writes are upserts on it.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert

from app.database import AsyncSessionLocal
from app.models.db.PlayerStats import PlayerStats
from app.models.stats.StatsSummary import StatsKey, StatsSummary

SUMMARY_FIELDS = (
    "kills",
    "deaths",
    "kd_ratio",
    "win_rate",
    "damage_dealt",
    "survival_time",
    "wins",
    "matches_counted",
    "computed_at",
    "expires_at",
)


class StatsRepository:
    def __init__(self, session_factory=AsyncSessionLocal):
        self._session_factory = session_factory

    async def find(self, key: StatsKey) -> Optional[StatsSummary]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(PlayerStats).where(
                    PlayerStats.player_id == key.player_id,
                    PlayerStats.period == key.period,
                    PlayerStats.mode == key.mode,
                    PlayerStats.shard == key.shard,
                )
            )
            row = result.scalar_one_or_none()

        if row is None:
            return None
        return StatsSummary.model_validate(row)

    async def upsert(self, summary: StatsSummary) -> None:
        values = summary.model_dump()
        stmt = insert(PlayerStats).values(**values)
        stmt = stmt.on_conflict_do_update(
            constraint="player_stats_composite",
            set_={field: stmt.excluded[field] for field in SUMMARY_FIELDS},
        )
        async with self._session_factory() as session:
            async with session.begin():
                await session.execute(stmt)

    async def delete_by_player(self, player_id: str) -> int:
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    delete(PlayerStats).where(PlayerStats.player_id == player_id)
                )
        return result.rowcount or 0

    async def delete_all(self) -> int:
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(delete(PlayerStats))
        return result.rowcount or 0

    async def delete_expired(self, now: Optional[datetime] = None) -> int:
        now = now or datetime.now(timezone.utc)
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    delete(PlayerStats).where(PlayerStats.expires_at <= now)
                )
        return result.rowcount or 0
