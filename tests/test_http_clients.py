"""Tests for the intervals.icu HTTP adapter."""

import asyncio
import base64

import httpx
import pytest

from marathon_tracker.adapters.intervals_client import HttpxIntervalsClient

BASE_URL = "https://intervals.icu/api/v1"


def _client(handler, max_retries: int = 3) -> HttpxIntervalsClient:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    async_client = httpx.AsyncClient(
        transport=transport, auth=httpx.BasicAuth("API_KEY", "secret")
    )
    return HttpxIntervalsClient(
        api_key="secret",
        athlete_id="i42",
        base_url=BASE_URL,
        http_client=async_client,
        max_retries=max_retries,
        backoff_seconds=0,
    )


def test_list_activities_uses_athlete_path_and_basic_auth() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"id": "i1"}])

    client = _client(handler)
    result = asyncio.run(client.list_activities("2026-02-02", "2026-02-08"))

    assert result == [{"id": "i1"}]
    request = seen[0]
    assert request.url.path == "/api/v1/athlete/i42/activities"
    assert request.url.params["oldest"] == "2026-02-02"
    assert request.url.params["newest"] == "2026-02-08"
    expected = base64.b64encode(b"API_KEY:secret").decode()
    assert request.headers["Authorization"] == f"Basic {expected}"


def test_activity_endpoints() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/intervals"):
            return httpx.Response(200, json={"icu_intervals": []})
        if request.url.path.endswith("/wellness"):
            return httpx.Response(200, json=[{"id": "2026-02-03"}])
        if request.url.path.endswith("/events"):
            return httpx.Response(200, json=[{"id": 1, "name": "Easy"}])
        return httpx.Response(200, json={"id": "i1", "type": "Run"})

    client = _client(handler)

    assert asyncio.run(client.get_activity("i1")) == {"id": "i1", "type": "Run"}
    assert asyncio.run(client.get_activity_intervals("i1")) == {"icu_intervals": []}
    assert asyncio.run(client.list_wellness("2026-02-01", "2026-02-03")) == [
        {"id": "2026-02-03"}
    ]
    assert asyncio.run(client.list_events("2026-02-01", "2026-02-08")) == [
        {"id": 1, "name": "Easy"}
    ]


def test_rate_limited_requests_are_retried() -> None:
    responses = [httpx.Response(429), httpx.Response(429), httpx.Response(200, json=[])]

    def handler(request: httpx.Request) -> httpx.Response:
        return responses.pop(0)

    client = _client(handler)

    assert asyncio.run(client.list_events("2026-02-01", "2026-02-08")) == []
    assert responses == []


def test_rate_limit_gives_up_after_max_retries() -> None:
    attempts: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        return httpx.Response(429)

    client = _client(handler, max_retries=2)

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.get_activity("i1"))
    assert len(attempts) == 3


def test_server_errors_are_raised() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    client = _client(handler)

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.get_activity("i1"))


def test_is_configured_requires_key_and_athlete() -> None:
    client = HttpxIntervalsClient.create(api_key="", athlete_id="i42", base_url=BASE_URL)

    assert client.is_configured is False
    asyncio.run(client.close())
