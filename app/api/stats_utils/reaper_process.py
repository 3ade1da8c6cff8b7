import asyncio
import logging

from app.core.config import STATS_REAPER_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


async def stats_reaper_process(repository, interval_seconds: float = STATS_REAPER_INTERVAL_SECONDS):
    """
    Background overseer deleting summaries past their expires_at.

    PostgreSQL has no TTL index, so this loop plays that role for the
    player_stats table.
    """
    while True:
        await asyncio.sleep(interval_seconds)

        try:
            removed = await repository.delete_expired()
            if removed:
                logger.info("Reaper removed %d expired stats summaries", removed)
        except Exception as e:
            logger.error("Stats reaper encountered an error: %s", e)
