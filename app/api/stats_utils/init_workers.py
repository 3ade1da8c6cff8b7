import asyncio
import logging

from app.api.deps import pubg_client, stats_repository, stats_writer
from app.api.stats_utils.reaper_process import stats_reaper_process

logger = logging.getLogger(__name__)

_background_tasks: set[asyncio.Task] = set()


async def initialize_stats_workers():
    """Starts the database writer and the expiry reaper."""
    stats_writer.start()

    task = asyncio.create_task(stats_reaper_process(stats_repository))
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)

    logger.info("Stats workers started")


async def shutdown_stats_workers():
    for task in list(_background_tasks):
        task.cancel()

    # flush summaries computed just before shutdown
    await stats_writer.stop()
    await pubg_client.aclose()

    logger.info("Stats workers stopped")
