import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import get_player_registry, get_stats_pipeline
from app.api.http_errors import to_http_exception
from app.api.players_utils.registry import PlayerRegistry
from app.api.stats_utils.pipeline import StatsPipeline
from app.models.stats import (
    DashboardResponse,
    PlayerStatsData,
    Shard,
    StatsMode,
    StatsPeriod,
    StatsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_COMPARED_PLAYERS = 10


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=DashboardResponse,
)
async def get_dashboard_stats(
    ids: str = Query(..., description="Comma-separated player IDs"),
    period: StatsPeriod = Query(StatsPeriod.WEEK),
    mode: StatsMode = Query(StatsMode.ALL),
    shard: Shard = Query(Shard.STEAM),
    registry: PlayerRegistry = Depends(get_player_registry),
    pipeline: StatsPipeline = Depends(get_stats_pipeline),
):
    """
    Stats of up to 10 players side by side, e.g.
    GET /api/dashboard?ids=id1,id2,id3&period=7d&mode=all&shard=steam
    """
    player_ids = [player_id.strip() for player_id in ids.split(",") if player_id.strip()]

    if not player_ids:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="At least one player ID is required",
        )
    if len(player_ids) > MAX_COMPARED_PLAYERS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Maximum {MAX_COMPARED_PLAYERS} players can be compared",
        )

    players = []
    for player_id in player_ids:
        player = await registry.get_player(player_id)
        if player is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Player {player_id} not found",
            )

        try:
            stats = await pipeline.get_or_compute_stats(player_id, period, mode, shard)
        except Exception as e:
            logger.warning("Failed to fetch stats for player %s: %s", player_id, e)
            raise to_http_exception(e, "Failed to fetch stats")

        players.append(
            PlayerStatsData(
                player_id=player_id,
                name=player.name,
                stats=StatsResponse.model_validate(stats),
            )
        )

    return DashboardResponse(players=players, period=period.value, mode=mode.value)
