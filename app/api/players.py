import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import get_player_registry, get_stats_pipeline
from app.api.http_errors import to_http_exception
from app.api.players_utils.registry import PlayerRegistry
from app.api.stats_utils.pipeline import StatsPipeline
from app.models.players.PlayerResponse import (
    CreatePlayerRequest,
    PlayerMatchesResponse,
    PlayerResponse,
    RefreshAllResponse,
)
from app.models.stats import Shard, StatsMode, StatsPeriod, StatsResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=PlayerResponse,
)
async def create_player(
    body: CreatePlayerRequest,
    registry: PlayerRegistry = Depends(get_player_registry),
):
    """
    Starts tracking a player, looked up by exact name on the given shard.
    Adding an already tracked player returns the existing record.
    """
    try:
        player = await registry.add_player(body.name.strip(), body.shard)
    except Exception as e:
        logger.warning("Failed to add player %s: %s", body.name, e)
        raise to_http_exception(e, "Failed to add player")
    return PlayerResponse.model_validate(player)


@router.get("", status_code=status.HTTP_200_OK, response_model=list[PlayerResponse])
async def get_players(registry: PlayerRegistry = Depends(get_player_registry)):
    players = await registry.list_players()
    return [PlayerResponse.model_validate(player) for player in players]


@router.post(
    "/refresh-all",
    status_code=status.HTTP_200_OK,
    response_model=RefreshAllResponse,
)
async def refresh_all_players(registry: PlayerRegistry = Depends(get_player_registry)):
    refreshed, failed = await registry.refresh_all_players()
    return RefreshAllResponse(refreshed=refreshed, failed=failed)


@router.get("/{player_id}", status_code=status.HTTP_200_OK, response_model=PlayerResponse)
async def get_player(player_id: str, registry: PlayerRegistry = Depends(get_player_registry)):
    player = await registry.get_player(player_id)
    if player is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Player {player_id} not found",
        )
    return PlayerResponse.model_validate(player)


@router.get(
    "/{player_id}/stats",
    status_code=status.HTTP_200_OK,
    response_model=StatsResponse,
)
async def get_player_stats(
    player_id: str,
    period: StatsPeriod = Query(StatsPeriod.WEEK, description="Trailing window: 7d, 30d or 90d"),
    mode: StatsMode = Query(StatsMode.ALL),
    shard: Shard = Query(Shard.STEAM),
    pipeline: StatsPipeline = Depends(get_stats_pipeline),
):
    try:
        stats = await pipeline.get_or_compute_stats(player_id, period, mode, shard)
    except Exception as e:
        logger.warning("Failed to fetch stats for player %s: %s", player_id, e)
        raise to_http_exception(e, "Failed to fetch stats")
    return StatsResponse.model_validate(stats)


@router.post("/{player_id}/refresh", status_code=status.HTTP_200_OK, response_model=PlayerResponse)
async def refresh_player(player_id: str, registry: PlayerRegistry = Depends(get_player_registry)):
    """Re-reads the player's recent matches and drops every cached stats view."""
    try:
        player = await registry.refresh_player(player_id)
    except Exception as e:
        logger.warning("Failed to refresh player %s: %s", player_id, e)
        raise to_http_exception(e, "Failed to refresh player")
    return PlayerResponse.model_validate(player)


@router.delete("/{player_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_player(player_id: str, registry: PlayerRegistry = Depends(get_player_registry)):
    try:
        await registry.delete_player(player_id)
    except Exception as e:
        raise to_http_exception(e, "Failed to delete player")


@router.get(
    "/{player_id}/matches",
    status_code=status.HTTP_200_OK,
    response_model=PlayerMatchesResponse,
)
async def get_player_matches(
    player_id: str, registry: PlayerRegistry = Depends(get_player_registry)
):
    try:
        match_ids = await registry.get_player_matches(player_id)
    except Exception as e:
        raise to_http_exception(e, "Failed to fetch matches")
    return PlayerMatchesResponse(player_id=player_id, match_ids=match_ids)
