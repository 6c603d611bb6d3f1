"""intervals.icu REST API client."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

RATE_LIMITED = 429

_logger = logging.getLogger(__name__)


class IntervalsClient(Protocol):
    """Interface for the intervals.icu endpoints the app reads."""

    @property
    def is_configured(self) -> bool:
        """Return True when an API key and athlete id are available."""

    async def list_activities(self, oldest: str, newest: str) -> list[dict[str, object]]:
        """Return raw activities between two dates."""

    async def get_activity(self, activity_id: str) -> dict[str, object]:
        """Return raw activity details."""

    async def get_activity_intervals(self, activity_id: str) -> dict[str, object]:
        """Return raw interval data for an activity."""

    async def list_wellness(self, oldest: str, newest: str) -> list[dict[str, object]]:
        """Return raw wellness records between two dates."""

    async def list_events(self, oldest: str, newest: str) -> list[dict[str, object]]:
        """Return raw calendar events between two dates."""


@dataclass
class HttpxIntervalsClient(IntervalsClient):
    """HTTPX-backed intervals.icu client using API key basic auth."""

    api_key: str
    athlete_id: str
    base_url: str
    http_client: httpx.AsyncClient
    max_retries: int = 3
    backoff_seconds: float = 1.0

    @classmethod
    def create(
        cls, api_key: str, athlete_id: str, base_url: str
    ) -> "HttpxIntervalsClient":
        """Create a client with a managed httpx session."""
        return cls(
            api_key=api_key,
            athlete_id=athlete_id,
            base_url=base_url,
            http_client=httpx.AsyncClient(auth=httpx.BasicAuth("API_KEY", api_key)),
        )

    @property
    def is_configured(self) -> bool:
        """Return True when credentials are present."""
        return bool(self.api_key and self.athlete_id)

    async def list_activities(self, oldest: str, newest: str) -> list[dict[str, object]]:
        """Fetch activities for the athlete."""
        return await self._get(
            f"/athlete/{self.athlete_id}/activities",
            params={"oldest": oldest, "newest": newest},
        )

    async def get_activity(self, activity_id: str) -> dict[str, object]:
        """Fetch one activity."""
        return await self._get(f"/activity/{activity_id}")

    async def get_activity_intervals(self, activity_id: str) -> dict[str, object]:
        """Fetch interval data for one activity."""
        return await self._get(f"/activity/{activity_id}/intervals")

    async def list_wellness(self, oldest: str, newest: str) -> list[dict[str, object]]:
        """Fetch wellness records for the athlete."""
        return await self._get(
            f"/athlete/{self.athlete_id}/wellness",
            params={"oldest": oldest, "newest": newest},
        )

    async def list_events(self, oldest: str, newest: str) -> list[dict[str, object]]:
        """Fetch calendar events for the athlete."""
        return await self._get(
            f"/athlete/{self.athlete_id}/events",
            params={"oldest": oldest, "newest": newest},
        )

    async def _get(self, path: str, params: dict[str, str] | None = None):  # type: ignore[no-untyped-def]
        url = f"{self.base_url}{path}"
        retries_left = self.max_retries
        while True:
            response = await self.http_client.get(url, params=params, timeout=15)
            if response.status_code == RATE_LIMITED and retries_left > 0:
                attempt = self.max_retries - retries_left + 1
                _logger.warning("intervals.icu rate limited %s (retry %s)", path, attempt)
                await asyncio.sleep(self.backoff_seconds * attempt)
                retries_left -= 1
                continue
            response.raise_for_status()
            return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
