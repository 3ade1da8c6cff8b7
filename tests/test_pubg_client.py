"""Unit tests for the PUBG API client retry and error classification."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from app.api.pubg_utils.client import PubgApiClient
from app.api.pubg_utils.errors import (
    NetworkError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    UnauthorizedError,
)
from tests.fakes import NOW, match_payload, participant_payload

BASE_URL = "https://api.pubg.test/shards"


class SleepRecorder:
    def __init__(self):
        self.waits: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.waits.append(seconds)


def scripted(responses):
    """Transport handler replaying `responses` in order, recording requests."""
    requests: list[httpx.Request] = []
    queue = list(responses)

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        # a fresh response per request, the scripted one may be replayed
        return httpx.Response(item.status_code, headers=item.headers, content=item.content)

    return handler, requests


def call(responses, operation):
    handler, requests = scripted(responses)
    sleeper = SleepRecorder()

    async def run():
        client = PubgApiClient(
            api_key="test-key",
            base_url=BASE_URL,
            transport=httpx.MockTransport(handler),
            sleep=sleeper,
        )
        try:
            return await operation(client)
        finally:
            await client.aclose()

    outcome = None
    error = None
    try:
        outcome = asyncio.run(run())
    except Exception as e:  # noqa: BLE001 - tests inspect the raised error
        error = e
    return outcome, error, requests, sleeper.waits


def get_match(client):
    return client.get_match("steam", "match-1")


def match_response() -> httpx.Response:
    payload = match_payload("match-1", NOW, [participant_payload(kills=3)])
    return httpx.Response(200, json=payload)


def test_requests_are_authenticated_json_api_calls() -> None:
    match, error, requests, _ = call([match_response()], get_match)
    assert error is None
    assert match.id == "match-1"
    assert requests[0].headers["Authorization"] == "Bearer test-key"
    assert requests[0].headers["Accept"] == "application/vnd.api+json"
    assert str(requests[0].url) == f"{BASE_URL}/steam/matches/match-1"


def test_match_decoding_keeps_only_participants() -> None:
    match, _, _, _ = call([match_response()], get_match)
    assert len(match.participants) == 1
    assert match.participants[0].attributes.stats.kills == 3


def test_server_error_is_retried_exactly_three_times() -> None:
    _, error, requests, waits = call([httpx.Response(500, text="boom")], get_match)
    assert isinstance(error, ServerError)
    assert len(requests) == 4
    assert waits == [1.0, 2.0, 4.0]
    assert "500" in str(error)


def test_server_error_then_success_returns_payload() -> None:
    match, error, requests, waits = call(
        [httpx.Response(503), httpx.Response(502), match_response()], get_match
    )
    assert error is None
    assert match.id == "match-1"
    assert len(requests) == 3
    assert waits == [1.0, 2.0]


def test_network_error_is_retried_then_surfaced() -> None:
    failure = httpx.ConnectError("connection refused")
    _, error, requests, waits = call([failure], get_match)
    assert isinstance(error, NetworkError)
    assert len(requests) == 4
    assert waits == [1.0, 2.0, 4.0]


def test_timeout_counts_as_network_error() -> None:
    _, error, requests, _ = call([httpx.ReadTimeout("timed out")], get_match)
    assert isinstance(error, NetworkError)
    assert len(requests) == 4


def test_rate_limit_waits_for_reset_header() -> None:
    limited = httpx.Response(429, headers={"X-RateLimit-Reset": "7"})
    match, error, requests, waits = call([limited, match_response()], get_match)
    assert error is None
    assert match.id == "match-1"
    assert len(requests) == 2
    assert waits == [7]


def test_rate_limit_defaults_to_sixty_seconds_and_exhausts_budget() -> None:
    _, error, requests, waits = call([httpx.Response(429)], get_match)
    assert isinstance(error, RateLimitedError)
    assert error.retry_after == 60
    assert len(requests) == 4
    assert waits == [60, 60, 60]


@pytest.mark.parametrize("reset", ["-5", "soon", ""])
def test_unusable_reset_header_falls_back_to_sixty_seconds(reset: str) -> None:
    limited = httpx.Response(429, headers={"X-RateLimit-Reset": reset})
    _, error, _, waits = call([limited, match_response()], get_match)
    assert error is None
    assert waits == [60]


def test_rate_limit_does_not_advance_backoff() -> None:
    responses = [
        httpx.Response(500),
        httpx.Response(429, headers={"X-RateLimit-Reset": "5"}),
        httpx.Response(500),
        match_response(),
    ]
    _, error, requests, waits = call(responses, get_match)
    assert error is None
    assert len(requests) == 4
    assert waits == [1.0, 5, 2.0]


def test_not_found_is_not_retried() -> None:
    _, error, requests, waits = call([httpx.Response(404, text="missing")], get_match)
    assert isinstance(error, NotFoundError)
    assert len(requests) == 1
    assert waits == []


@pytest.mark.parametrize("status", [401, 403])
def test_auth_failures_are_not_retried(status: int) -> None:
    _, error, requests, waits = call([httpx.Response(status)], get_match)
    assert isinstance(error, UnauthorizedError)
    assert len(requests) == 1
    assert waits == []


def test_undecodable_payload_is_a_non_retried_server_error() -> None:
    _, error, requests, _ = call([httpx.Response(200, text="<html>oops</html>")], get_match)
    assert isinstance(error, ServerError)
    assert "Failed to parse response" in str(error)
    assert len(requests) == 1


def test_payload_with_wrong_shape_is_a_server_error() -> None:
    _, error, requests, _ = call([httpx.Response(200, json={"data": []})], get_match)
    assert isinstance(error, ServerError)
    assert len(requests) == 1


def test_unexpected_status_is_a_server_error() -> None:
    _, error, requests, _ = call([httpx.Response(418)], get_match)
    assert isinstance(error, ServerError)
    assert "Unexpected status 418" in str(error)
    assert len(requests) == 1


def player_response(match_count: int) -> httpx.Response:
    payload = {
        "data": [
            {
                "type": "player",
                "id": "account.abc",
                "attributes": {"name": "shroud", "shardId": "steam"},
                "relationships": {
                    "matches": {
                        "data": [{"type": "match", "id": f"m{i}"} for i in range(match_count)]
                    }
                },
            }
        ]
    }
    return httpx.Response(200, content=json.dumps(payload).encode())


def test_player_lookup_filters_by_name() -> None:
    player, error, requests, _ = call(
        [player_response(7)], lambda client: client.get_player_by_name("steam", "shroud")
    )
    assert error is None
    assert requests[0].url.path.endswith("/steam/players")
    assert requests[0].url.params["filter[playerNames]"] == "shroud"
    assert player.account_id == "account.abc"
    assert player.name == "shroud"
    assert player.recent_match_ids(5) == ["m0", "m1", "m2", "m3", "m4"]


def test_player_lookup_with_empty_result_is_not_found() -> None:
    _, error, _, _ = call(
        [httpx.Response(200, json={"data": []})],
        lambda client: client.get_player_by_name("xbox", "nobody"),
    )
    assert isinstance(error, NotFoundError)
