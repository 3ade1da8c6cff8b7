from fastapi import HTTPException, status

from app.api.pubg_utils.errors import NotFoundError, UnauthorizedError
from app.api.stats_utils.errors import PlayerNotFoundError


def to_http_exception(error: Exception, context: str) -> HTTPException:
    """
    Maps pipeline and registry failures onto HTTP responses.

    Not-found conditions become 404, a rejected API key 502 (our fault, not
    the caller's), everything else 500.
    """
    if isinstance(error, (PlayerNotFoundError, NotFoundError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))

    if isinstance(error, UnauthorizedError):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="PUBG API rejected the configured API key",
        )

    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"{context}: {error}",
    )
