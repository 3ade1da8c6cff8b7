"""Tests for tracked-player bookkeeping and the cache invalidation it triggers."""

from __future__ import annotations

import asyncio

import pytest

from app.api.players_utils.registry import PlayerRegistry
from app.api.pubg_utils.errors import NotFoundError
from app.api.stats_utils.cache import StatsCache, player_cache_keys
from app.api.stats_utils.errors import PlayerNotFoundError
from app.api.stats_utils.persistence_worker import StatsPersistenceWorker
from tests.fakes import (
    FakePlayerDatabase,
    FakePlayerLookup,
    FakeStatsRepository,
    make_summary,
)

MATCHES = [f"m{i}" for i in range(7)]


class RecordingInvalidations:
    """Cache double that records invalidations and fails for chosen players."""

    def __init__(self, failing: set[str] | None = None):
        self.failing = failing or set()
        self.invalidated: list[str] = []

    async def invalidate(self, player_id: str) -> None:
        if player_id in self.failing:
            raise RuntimeError("database unavailable")
        self.invalidated.append(player_id)


def build_registry(lookup: FakePlayerLookup, cache=None):
    database = FakePlayerDatabase()
    registry = PlayerRegistry(
        lookup,
        cache if cache is not None else RecordingInvalidations(),
        session_factory=database,
    )
    return registry, database


def test_add_player_stores_the_five_most_recent_matches() -> None:
    lookup = FakePlayerLookup({"shroud": MATCHES})
    registry, database = build_registry(lookup)

    player = asyncio.run(registry.add_player("shroud", "steam"))

    assert player.account_id == "account.shroud"
    assert player.shard == "steam"
    assert player.last_matches == ["m0", "m1", "m2", "m3", "m4"]
    assert player.last_refreshed_at is not None
    assert list(database.players) == [player.id]


def test_adding_a_known_account_returns_the_existing_player() -> None:
    lookup = FakePlayerLookup({"shroud": MATCHES})
    registry, database = build_registry(lookup)

    async def scenario():
        first = await registry.add_player("shroud", "steam")
        second = await registry.add_player("shroud", "steam")
        return first, second

    first, second = asyncio.run(scenario())
    assert second is first
    assert len(database.players) == 1


def test_adding_an_unknown_name_stores_nothing() -> None:
    registry, database = build_registry(FakePlayerLookup())

    with pytest.raises(NotFoundError):
        asyncio.run(registry.add_player("nobody", "xbox"))
    assert database.players == {}


def test_list_and_matches_of_tracked_players() -> None:
    lookup = FakePlayerLookup({"shroud": MATCHES[:2], "chocoTaco": MATCHES[2:4]})
    registry, _ = build_registry(lookup)

    async def scenario():
        first = await registry.add_player("shroud", "steam")
        await registry.add_player("chocoTaco", "steam")
        listed = await registry.list_players()
        matches = await registry.get_player_matches(first.id)
        missing = await registry.get_player("no-such-player")
        return listed, matches, missing

    listed, matches, missing = asyncio.run(scenario())
    assert [player.name for player in listed] == ["shroud", "chocoTaco"]
    assert matches == ["m0", "m1"]
    assert missing is None


def test_refresh_replaces_matches_and_clears_every_stats_view() -> None:
    lookup = FakePlayerLookup({"shroud": MATCHES[:2]})
    repository = FakeStatsRepository()

    async def scenario():
        writer = StatsPersistenceWorker(repository, retry_delay_seconds=0)
        writer.start()
        cache = StatsCache(repository, writer)
        registry, _ = build_registry(lookup, cache)

        player = await registry.add_player("shroud", "steam")
        for key in player_cache_keys(player.id):
            await cache.store(make_summary(*key))
        await cache.store(make_summary(player_id="someone-else"))
        await writer.drain()

        lookup.accounts["shroud"] = ["m9", *MATCHES]
        refreshed = await registry.refresh_player(player.id)
        await writer.stop()
        return player, refreshed, cache

    player, refreshed, cache = asyncio.run(scenario())
    assert refreshed.last_matches == ["m9", "m0", "m1", "m2", "m3"]
    assert all(cache.get_cached(key) is None for key in player_cache_keys(player.id))
    assert [key.player_id for key in repository.rows] == ["someone-else"]
    assert len(cache) == 1


def test_refresh_holds_no_session_during_the_api_lookup() -> None:
    sessions_seen: list[int] = []

    class ObservedLookup(FakePlayerLookup):
        async def get_player_by_name(self, shard, name):
            sessions_seen.append(database.open_sessions)
            return await super().get_player_by_name(shard, name)

    lookup = ObservedLookup({"shroud": MATCHES})
    registry, database = build_registry(lookup)

    async def scenario():
        player = await registry.add_player("shroud", "steam")
        sessions_seen.clear()
        await registry.refresh_player(player.id)

    asyncio.run(scenario())
    assert sessions_seen == [0]


def test_refresh_of_unknown_player_makes_no_api_call() -> None:
    lookup = FakePlayerLookup({"shroud": MATCHES})
    registry, _ = build_registry(lookup)

    with pytest.raises(PlayerNotFoundError):
        asyncio.run(registry.refresh_player("no-such-player"))
    assert lookup.calls == []


def test_delete_removes_the_player_and_invalidates_its_stats() -> None:
    lookup = FakePlayerLookup({"shroud": MATCHES})
    invalidations = RecordingInvalidations()
    registry, database = build_registry(lookup, invalidations)

    async def scenario():
        player = await registry.add_player("shroud", "steam")
        await registry.delete_player(player.id)
        return player

    player = asyncio.run(scenario())
    assert database.players == {}
    assert invalidations.invalidated == [player.id]

    with pytest.raises(PlayerNotFoundError):
        asyncio.run(registry.delete_player(player.id))


def test_refresh_all_counts_failures_and_keeps_going() -> None:
    lookup = FakePlayerLookup({"alpha": MATCHES, "bravo": MATCHES, "charlie": MATCHES})
    invalidations = RecordingInvalidations()
    registry, _ = build_registry(lookup, invalidations)

    async def scenario():
        alpha = await registry.add_player("alpha", "steam")
        bravo = await registry.add_player("bravo", "steam")
        charlie = await registry.add_player("charlie", "steam")

        # one API failure, one persistent-store failure during invalidation
        lookup.failing.add("alpha")
        invalidations.failing.add(bravo.id)
        counts = await registry.refresh_all_players()
        return counts, charlie

    (refreshed, failed), charlie = asyncio.run(scenario())
    assert (refreshed, failed) == (1, 2)
    assert invalidations.invalidated == [charlie.id]
