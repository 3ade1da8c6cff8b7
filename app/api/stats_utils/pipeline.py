import logging

from app.api.pubg_utils.errors import PubgApiError
from app.api.stats_utils.aggregator import compute_stats_from_matches
from app.api.stats_utils.errors import NoMatchDataError, PlayerNotFoundError
from app.models.pubg.PubgMatch import PubgMatch
from app.models.stats.StatsSummary import StatsKey, StatsSummary

logger = logging.getLogger(__name__)

MAX_RECENT_MATCHES = 5


class StatsPipeline:
    """
    Serves stats summaries, computing them from the PUBG API on a cache miss.

    `players` is the registry the recent match ids come from; it only needs
    an async `get_player(player_id)` returning an object with `account_id`,
    `shard` and `last_matches`, or None.
    """

    def __init__(self, cache, client, players):
        self.cache = cache
        self.client = client
        self.players = players

    async def get_or_compute_stats(self, player_id: str, period, mode, shard) -> StatsSummary:
        key = StatsKey.build(player_id, period, mode, shard)
        return await self.cache.get_or_compute(key, lambda: self._compute(key))

    async def invalidate(self, player_id: str) -> None:
        await self.cache.invalidate(player_id)

    async def invalidate_all(self) -> None:
        await self.cache.invalidate_all()

    async def _compute(self, key: StatsKey) -> StatsSummary:
        player = await self.players.get_player(key.player_id)
        if player is None:
            raise PlayerNotFoundError(key.player_id)

        matches = await self._fetch_matches(player)
        if not matches:
            logger.error("No match data available for player %s", key.player_id)
            raise NoMatchDataError(key.player_id)

        logger.info("Computing stats from %d matches for %s", len(matches), key)
        summary = compute_stats_from_matches(player.account_id, matches, key.period)

        return summary.model_copy(
            update={"player_id": key.player_id, "mode": key.mode, "shard": key.shard}
        )

    async def _fetch_matches(self, player) -> list[PubgMatch]:
        match_ids = list(player.last_matches or [])[:MAX_RECENT_MATCHES]
        matches: list[PubgMatch] = []

        # one at a time to keep the load on the API bounded
        for match_id in match_ids:
            try:
                match = await self.client.get_match(player.shard, match_id)
            except PubgApiError as e:
                logger.warning("Failed to fetch match %s: %s", match_id, e)
                continue
            logger.debug("Successfully fetched match %s", match_id)
            matches.append(match)

        return matches
