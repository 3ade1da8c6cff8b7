"""
Two-tier cache for player stats summaries.

Cache Configuration:
- Memory tier: cachetools.TTLCache, 1000 entries, 1 hour TTL, LRU eviction on overflow
- Persistent tier: the player_stats table, rows valid until their own expires_at
- Cache key is the (player_id, period, mode, shard) StatsKey

The persistent tier decides whether a summary is still valid; the memory
tier is only an accelerator with its own, independent expiry.
"""

import asyncio
import itertools
import logging
from datetime import datetime, timezone
from time import monotonic
from typing import Awaitable, Callable

from cachetools import TTLCache

from app.core.config import STATS_MEMORY_CACHE_SIZE, STATS_MEMORY_CACHE_TTL_SECONDS
from app.models.stats.Shard import Shard
from app.models.stats.StatsMode import StatsMode
from app.models.stats.StatsPeriod import StatsPeriod
from app.models.stats.StatsSummary import StatsKey, StatsSummary

logger = logging.getLogger(__name__)

ComputeFn = Callable[[], Awaitable[StatsSummary]]


def player_cache_keys(player_id: str) -> list[StatsKey]:
    """Every key a player can be cached under (3 periods x 4 modes x 3 shards)."""
    return [
        StatsKey.build(player_id, period, mode, shard)
        for period, mode, shard in itertools.product(StatsPeriod, StatsMode, Shard)
    ]


class StatsCache:
    def __init__(
        self,
        repository,
        writer,
        capacity: int = STATS_MEMORY_CACHE_SIZE,
        ttl_seconds: float = STATS_MEMORY_CACHE_TTL_SECONDS,
        timer: Callable[[], float] = monotonic,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._repository = repository
        self._writer = writer
        self._memory: TTLCache = TTLCache(maxsize=capacity, ttl=ttl_seconds, timer=timer)
        self._in_flight: dict[StatsKey, asyncio.Task] = {}
        self._clock = clock

    def __len__(self) -> int:
        return len(self._memory)

    def get_cached(self, key: StatsKey) -> StatsSummary | None:
        """Memory tier lookup only."""
        return self._memory.get(key)

    async def get_or_compute(self, key: StatsKey, compute_fn: ComputeFn) -> StatsSummary:
        cached = self._memory.get(key)
        if cached is not None:
            logger.debug("Stats found in memory cache for %s", key)
            return cached

        # concurrent misses on the same key share one computation
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.create_task(self._load_or_compute(key, compute_fn))
            self._in_flight[key] = task
            task.add_done_callback(lambda done: self._forget(key, done))
        else:
            logger.debug("Joining in-flight computation for %s", key)

        # a caller going away does not cancel the computation itself
        return await asyncio.shield(task)

    async def store(self, summary: StatsSummary) -> None:
        """Caches a summary in memory and queues its database write."""
        self._memory[summary.key] = summary
        self._writer.submit(summary)

    async def save(self, summary: StatsSummary) -> None:
        """Like store, but waits for the database write to succeed."""
        await self._repository.upsert(summary)
        self._memory[summary.key] = summary
        logger.info("Stats saved for player %s (%s period)", summary.player_id, summary.period)

    async def invalidate(self, player_id: str) -> None:
        for key in player_cache_keys(player_id):
            self._memory.pop(key, None)
            self._in_flight.pop(key, None)

        # queued writes for this player must not land after the delete
        await self._writer.drain()
        removed = await self._repository.delete_by_player(player_id)

        logger.info(
            "Cache and database stats invalidated for player %s (%d rows removed)",
            player_id,
            removed,
        )

    async def invalidate_all(self) -> None:
        self._memory.clear()
        self._in_flight.clear()

        await self._writer.drain()
        removed = await self._repository.delete_all()

        logger.info("All cached stats cleared (%d rows removed)", removed)

    async def _load_or_compute(self, key: StatsKey, compute_fn: ComputeFn) -> StatsSummary:
        stored = await self._repository.find(key)
        if stored is not None:
            if stored.expires_at > self._clock():
                logger.debug("Stats found in database cache for %s", key)
                if self._is_current(key):
                    self._memory[key] = stored
                return stored
            logger.debug("Database stats for %s expired at %s", key, stored.expires_at)

        logger.info("Computing stats for %s (not in cache)", key)
        summary = await compute_fn()

        # invalidated while computing: hand the result to the waiters only
        if not self._is_current(key):
            logger.info("Discarding stats for %s computed before invalidation", key)
            return summary

        await self.store(summary)
        return summary

    def _is_current(self, key: StatsKey) -> bool:
        return self._in_flight.get(key) is asyncio.current_task()

    def _forget(self, key: StatsKey, task: asyncio.Task) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
