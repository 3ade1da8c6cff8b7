"""
Async client for the PUBG statistics API.

Retry policy (per call, 3 retries = 4 attempts at most):
- network failure or 5xx: exponential backoff starting at 1s, doubling
- 429: sleep for the X-RateLimit-Reset value (60s if absent), backoff untouched
- 404, 401/403, undecodable 200: fail immediately
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel

from app.api.pubg_utils.errors import (
    NetworkError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    UnauthorizedError,
)
from app.core.config import (
    PUBG_API_BASE_URL,
    PUBG_API_KEY,
    PUBG_REQUEST_TIMEOUT_SECONDS,
)
from app.models.pubg.PubgMatch import PubgMatch
from app.models.pubg.PubgPlayer import PubgPlayer, PubgPlayerResponse

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

MAX_RETRIES = 3
INITIAL_BACKOFF_SECONDS = 1.0
DEFAULT_RATE_LIMIT_RESET_SECONDS = 60
RATE_LIMIT_RESET_HEADER = "X-RateLimit-Reset"


def _parse_rate_limit_reset(response: httpx.Response) -> int:
    raw = response.headers.get(RATE_LIMIT_RESET_HEADER)
    if raw is None:
        return DEFAULT_RATE_LIMIT_RESET_SECONDS
    try:
        seconds = int(raw.strip())
    except ValueError:
        return DEFAULT_RATE_LIMIT_RESET_SECONDS
    if seconds < 0:
        return DEFAULT_RATE_LIMIT_RESET_SECONDS
    return seconds


class PubgApiClient:
    def __init__(
        self,
        api_key: str = PUBG_API_KEY,
        base_url: str = PUBG_API_BASE_URL,
        timeout: float = PUBG_REQUEST_TIMEOUT_SECONDS,
        max_retries: int = MAX_RETRIES,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.max_retries = max_retries
        self._sleep = sleep
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout),
            headers={
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/vnd.api+json",
            },
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_player_by_name(self, shard: str, player_name: str) -> PubgPlayer:
        """
        Looks a player up by exact name on a shard.

        Raises NotFoundError when the API answers 200 with an empty list.
        """
        logger.debug("Requesting player %s on %s", player_name, shard)
        response = await self._request_with_retry(
            f"/{shard}/players",
            PubgPlayerResponse,
            params={"filter[playerNames]": player_name},
        )
        if not response.data:
            raise NotFoundError(f"Player {player_name} not found on {shard}")
        return response.data[0]

    async def get_match(self, shard: str, match_id: str) -> PubgMatch:
        return await self._request_with_retry(f"/{shard}/matches/{match_id}", PubgMatch)

    async def _request_with_retry(
        self, path: str, model: Type[T], params: Optional[dict] = None
    ) -> T:
        retries = 0
        backoff = INITIAL_BACKOFF_SECONDS

        while True:
            try:
                response = await self._client.get(path, params=params)
            except httpx.TransportError as e:
                if retries >= self.max_retries:
                    raise NetworkError(str(e) or type(e).__name__) from e
                logger.warning("Network error on %s, retrying in %ss: %r", path, backoff, e)
                await self._sleep(backoff)
                retries += 1
                backoff *= 2
                continue

            status = response.status_code

            if status == 200:
                try:
                    return model.model_validate(response.json())
                except ValueError as e:
                    raise ServerError(f"Failed to parse response: {e}") from e

            if status == 404:
                raise NotFoundError(response.text)

            if status in (401, 403):
                raise UnauthorizedError()

            if status == 429:
                retry_after = _parse_rate_limit_reset(response)
                if retries >= self.max_retries:
                    raise RateLimitedError(retry_after)
                logger.warning(
                    "Rate limit exceeded on %s, waiting %s seconds before retry",
                    path,
                    retry_after,
                )
                await self._sleep(retry_after)
                retries += 1
                continue

            if 500 <= status <= 599:
                if retries >= self.max_retries:
                    raise ServerError(f"Status {status}: {response.text}")
                logger.warning("Server error %s on %s, retrying in %ss", status, path, backoff)
                await self._sleep(backoff)
                retries += 1
                backoff *= 2
                continue

            raise ServerError(f"Unexpected status {status}: {response.text}")
