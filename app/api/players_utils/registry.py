import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select

from app.api.stats_utils.errors import PlayerNotFoundError
from app.api.stats_utils.pipeline import MAX_RECENT_MATCHES
from app.database import AsyncSessionLocal
from app.models.db.Player import Player

logger = logging.getLogger(__name__)


class PlayerRegistry:
    """
    Tracked players and their recent match ids.

    Whenever a player's match list changes (refresh) or the player goes away
    (delete), every cached stats view of that player is invalidated.
    """

    def __init__(self, client, cache, session_factory=AsyncSessionLocal):
        self.client = client
        self.cache = cache
        self._session_factory = session_factory

    async def add_player(self, name: str, shard: str) -> Player:
        pubg_player = await self.client.get_player_by_name(shard, name)

        async with self._session_factory() as session:
            result = await session.execute(
                select(Player).where(Player.account_id == pubg_player.account_id)
            )
            existing = result.scalar_one_or_none()
            if existing is not None:
                logger.info("Player %s already exists", name)
                return existing

            player = Player(
                account_id=pubg_player.account_id,
                name=pubg_player.name,
                shard=shard,
                last_matches=pubg_player.recent_match_ids(MAX_RECENT_MATCHES),
                last_refreshed_at=datetime.now(timezone.utc),
            )
            session.add(player)
            await session.commit()
            await session.refresh(player)

        logger.info("Player %s added successfully with ID %s", name, player.id)
        return player

    async def list_players(self) -> list[Player]:
        async with self._session_factory() as session:
            result = await session.execute(select(Player).order_by(Player.created_at.asc()))
            return list(result.scalars().all())

    async def get_player(self, player_id: str) -> Optional[Player]:
        async with self._session_factory() as session:
            return await session.get(Player, player_id)

    async def get_player_matches(self, player_id: str) -> list[str]:
        player = await self.get_player(player_id)
        if player is None:
            raise PlayerNotFoundError(player_id)
        return list(player.last_matches or [])

    async def refresh_player(self, player_id: str) -> Player:
        known = await self.get_player(player_id)
        if known is None:
            raise PlayerNotFoundError(player_id)

        # no session is held while the API call (and its retries) runs
        pubg_player = await self.client.get_player_by_name(known.shard, known.name)

        async with self._session_factory() as session:
            player = await session.get(Player, player_id)
            if player is None:
                raise PlayerNotFoundError(player_id)

            player.last_matches = pubg_player.recent_match_ids(MAX_RECENT_MATCHES)
            player.last_refreshed_at = datetime.now(timezone.utc)
            await session.commit()

        await self.cache.invalidate(player_id)

        logger.info("Player %s refreshed successfully", player.name)
        return player

    async def refresh_all_players(self) -> tuple[int, int]:
        """Refreshes every player in turn; returns (refreshed, failed)."""
        refreshed = 0
        failed = 0

        for player in await self.list_players():
            try:
                await self.refresh_player(player.id)
                refreshed += 1
            except Exception as e:
                logger.warning("Failed to refresh player %s: %s", player.name, e)
                failed += 1

        logger.info("Refreshed %d players (%d failed)", refreshed, failed)
        return refreshed, failed

    async def delete_player(self, player_id: str) -> None:
        async with self._session_factory() as session:
            player = await session.get(Player, player_id)
            if player is None:
                raise PlayerNotFoundError(player_id)
            await session.delete(player)
            await session.commit()

        await self.cache.invalidate(player_id)

        logger.info("Player with ID %s deleted", player_id)
