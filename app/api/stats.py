from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.api.deps import get_stats_pipeline
from app.api.http_errors import to_http_exception
from app.api.stats_utils.pipeline import StatsPipeline

router = APIRouter()


@router.post("/clear-cache", status_code=status.HTTP_200_OK)
async def clear_all_stats_cache(pipeline: StatsPipeline = Depends(get_stats_pipeline)):
    """
    Administrative reset: drops every cached summary from memory and the
    database. The next request for any player recomputes from the PUBG API.
    """
    try:
        await pipeline.invalidate_all()
    except Exception as e:
        raise to_http_exception(e, "Failed to clear stats cache")

    return JSONResponse(content={"message": "Stats cache cleared"})
