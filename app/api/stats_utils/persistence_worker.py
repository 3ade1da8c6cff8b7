import asyncio
import logging
from typing import Optional

from app.models.stats.StatsSummary import StatsSummary

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 1000
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_DELAY_SECONDS = 1.0


class StatsPersistenceWorker:
    """
    Background writer for freshly computed summaries.

    Callers hand summaries over with `submit` and never wait for the write;
    a single loop drains the queue into the repository. Failed writes are
    retried a few times, then logged and dropped: the memory tier already
    holds the value and the next miss recomputes it.
    """

    def __init__(
        self,
        repository,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_delay_seconds: float = DEFAULT_RETRY_DELAY_SECONDS,
        queue_size: int = DEFAULT_QUEUE_SIZE,
    ):
        self._repository = repository
        self._max_attempts = max_attempts
        self._retry_delay_seconds = retry_delay_seconds
        self._queue: asyncio.Queue[StatsSummary] = asyncio.Queue(maxsize=queue_size)
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run(), name="stats-persistence-worker")

    async def stop(self) -> None:
        """Flushes queued writes, then stops the loop."""
        if not self.is_running:
            return
        await self.drain()
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    def submit(self, summary: StatsSummary) -> bool:
        try:
            self._queue.put_nowait(summary)
        except asyncio.QueueFull:
            logger.error(
                "Persistence queue full, dropping stats write for %s", summary.key
            )
            return False
        return True

    async def drain(self) -> None:
        """Waits until every submitted summary has been handled."""
        # without a running loop nothing would ever empty the queue
        if self.is_running:
            await self._queue.join()

    async def _run(self) -> None:
        while True:
            summary = await self._queue.get()
            try:
                await self._persist(summary)
            finally:
                self._queue.task_done()

    async def _persist(self, summary: StatsSummary) -> None:
        for attempt in range(1, self._max_attempts + 1):
            try:
                await self._repository.upsert(summary)
                logger.debug("Stats saved to database for %s", summary.key)
                return
            except Exception as e:
                if attempt == self._max_attempts:
                    logger.error(
                        "Failed to save stats to database for %s after %d attempts: %s",
                        summary.key,
                        attempt,
                        e,
                    )
                    return
                logger.warning(
                    "Saving stats for %s failed (attempt %d/%d): %s",
                    summary.key,
                    attempt,
                    self._max_attempts,
                    e,
                )
                await asyncio.sleep(self._retry_delay_seconds)
