"""Activity, wellness and event retrieval with local persistence."""

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import TYPE_CHECKING, Protocol

import httpx

from marathon_tracker.adapters.intervals_client import IntervalsClient
from marathon_tracker.domain.activities import (
    Activity,
    ActivityInterval,
    PlannedWorkout,
    WellnessRecord,
)
from marathon_tracker.domain.errors import IntervalsNotConfiguredError
from marathon_tracker.services.cache import Cache

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

STRAVA_SOURCE = "STRAVA"

_logger = logging.getLogger(__name__)


class ActivityRepository(Protocol):
    """Persistence interface for raw intervals.icu payloads."""

    def put_activities(self, activities: list[dict[str, object]]) -> None:
        """Insert or replace activities by id."""

    def list_activities(self, start: date, end: date) -> list[dict[str, object]]:
        """Return activities whose local start date is within the range."""

    def get_details(self, activity_id: str) -> dict[str, object] | None:
        """Return stored activity details."""

    def put_details(self, activity_id: str, details: dict[str, object]) -> None:
        """Insert or replace stored activity details."""

    def put_wellness(self, records: list[dict[str, object]]) -> None:
        """Insert or replace wellness records by date."""

    def list_wellness(self, start: date, end: date) -> list[dict[str, object]]:
        """Return wellness records within the range."""


@dataclass
class ActivityService:
    """Reads activities from cache, then storage, then intervals.icu."""

    client: IntervalsClient
    repository: ActivityRepository
    cache: Cache
    cache_ttl_seconds: int = 300
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def list_activities(
        self, start: date, end: date, use_cache: bool = True
    ) -> list[Activity]:
        """Return activities in the range, fetching only when nothing is stored."""
        cache_key = f"activities:{start.isoformat()}:{end.isoformat()}"
        if use_cache:
            cached = self.cache.get(cache_key)
            if isinstance(cached, list):
                return cached
            stored = self.repository.list_activities(start, end)
            if stored:
                activities = [parse_activity(row) for row in stored]
                self.cache.set(cache_key, activities, ttl_seconds=self.cache_ttl_seconds)
                return activities

        if not self.client.is_configured:
            _logger.info("No stored activities and intervals.icu is not configured")
            return []

        activities = await self._fetch_activities(start, end)
        self.cache.set(cache_key, activities, ttl_seconds=self.cache_ttl_seconds)
        return activities

    async def sync_activities(self, start: date, end: date) -> list[Activity]:
        """Refresh activities from intervals.icu regardless of what is stored."""
        if not self.client.is_configured:
            raise IntervalsNotConfiguredError("intervals.icu is not configured")
        activities = await self._fetch_activities(start, end)
        self.cache.invalidate("activities:")
        return activities

    async def list_wellness(
        self, start: date, end: date, use_cache: bool = True
    ) -> list[WellnessRecord]:
        """Return wellness records in the range."""
        if use_cache:
            stored = self.repository.list_wellness(start, end)
            if stored:
                return _parse_wellness_rows(stored)

        if not self.client.is_configured:
            _logger.info("No stored wellness and intervals.icu is not configured")
            return []

        payload = await self._call_with_retry(
            lambda: self.client.list_wellness(start.isoformat(), end.isoformat()),
            action="wellness",
        )
        if payload:
            self.repository.put_wellness(payload)
        return _parse_wellness_rows(payload or [])

    async def get_activity_details(
        self, activity_id: str, use_cache: bool = True
    ) -> Activity | None:
        """Return full details for an activity."""
        if use_cache:
            stored = self.repository.get_details(activity_id)
            if stored and stored.get("id"):
                return parse_activity(stored)

        if not self.client.is_configured:
            return None

        payload = await self._call_with_retry(
            lambda: self.client.get_activity(activity_id),
            action=f"activity:{activity_id}",
        )
        if not payload:
            return None
        existing = self.repository.get_details(activity_id) or {}
        self.repository.put_details(activity_id, {**existing, **payload})
        return parse_activity(payload)

    async def get_activity_intervals(
        self, activity_id: str, use_cache: bool = True
    ) -> list[ActivityInterval]:
        """Return interval segments for an activity, storing them permanently."""
        stored = self.repository.get_details(activity_id) or {}
        if use_cache and isinstance(stored.get("intervals"), dict):
            return _parse_intervals(stored["intervals"].get("icu_intervals"))

        if not self.client.is_configured:
            return []

        payload = await self._call_with_retry(
            lambda: self.client.get_activity_intervals(activity_id),
            action=f"intervals:{activity_id}",
        )
        if not payload:
            return []
        self.repository.put_details(activity_id, {**stored, "intervals": payload})
        return _parse_intervals(payload.get("icu_intervals"))

    def attach_stored_intervals(self, activities: list[Activity]) -> list[Activity]:
        """Return copies of activities carrying any stored interval data."""
        attached = []
        for activity in activities:
            details = self.repository.get_details(activity.id) or {}
            intervals = details.get("intervals")
            if isinstance(intervals, dict):
                activity = replace(
                    activity, intervals=_parse_intervals(intervals.get("icu_intervals"))
                )
            attached.append(activity)
        return attached

    async def get_next_planned_workout(self, today: date) -> PlannedWorkout | None:
        """Return the first planned workout in the coming week."""
        if not self.client.is_configured:
            return None
        try:
            events = await self._call_with_retry(
                lambda: self.client.list_events(
                    today.isoformat(), (today + timedelta(days=7)).isoformat()
                ),
                action="events",
            )
        except httpx.HTTPError:
            _logger.exception("Failed to fetch planned workouts")
            return None

        workouts = [
            parse_event(event)
            for event in events or []
            if event.get("category") in {None, "WORKOUT"}
            or event.get("type") == "WORKOUT"
        ]
        workouts.sort(key=lambda workout: workout.start_date_local or "")
        return workouts[0] if workouts else None

    async def _fetch_activities(self, start: date, end: date) -> list[Activity]:
        payload = await self._call_with_retry(
            lambda: self.client.list_activities(start.isoformat(), end.isoformat()),
            action="activities",
        )
        rows = [row for row in payload or [] if row.get("source") != STRAVA_SOURCE]
        _logger.info(
            "Fetched %s activities, skipped %s Strava stubs",
            len(payload or []),
            len(payload or []) - len(rows),
        )
        if rows:
            self.repository.put_activities(rows)
        return [parse_activity(row) for row in rows]

    async def _call_with_retry(self, func: "Callable[[], Awaitable]", *, action: str):  # type: ignore[no-untyped-def]
        """Call intervals.icu with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except httpx.HTTPError as exc:
                attempt += 1
                _logger.warning(
                    "intervals.icu %s failed (attempt %s/%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _float(value: object) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _int(value: object) -> int | None:
    number = _float(value)
    return int(number) if number is not None else None


def parse_activity(payload: dict[str, object]) -> Activity:
    """Build an Activity from an intervals.icu payload, zeroing missing fields."""
    return Activity(
        id=str(payload.get("id", "")),
        start_date_local=str(payload.get("start_date_local") or ""),
        type=str(payload.get("type") or ""),
        name=str(payload.get("name") or ""),
        distance=_float(payload.get("distance")) or 0.0,
        moving_time=_int(payload.get("moving_time")) or 0,
        average_speed=_float(payload.get("average_speed")),
        average_heartrate=_float(
            payload.get("average_heartrate") or payload.get("average_hr")
        ),
        average_watts=_float(
            payload.get("icu_average_watts") or payload.get("average_watts")
        ),
        ftp=_float(payload.get("icu_ftp")),
        training_load=_float(
            payload.get("icu_training_load") or payload.get("training_load")
        )
        or 0.0,
        source=payload.get("source"),
        intervals=_parse_intervals(payload.get("icu_intervals")),
    )


def _parse_intervals(raw: object) -> list[ActivityInterval]:
    if not isinstance(raw, list):
        return []
    return [
        ActivityInterval(
            id=_int(item.get("id")),
            type=item.get("type"),
            distance=_float(item.get("distance")) or 0.0,
            moving_time=_int(item.get("moving_time") or item.get("elapsed_time")) or 0,
            average_speed=_float(item.get("average_speed")),
            average_heartrate=_float(item.get("average_heartrate")),
            average_watts=_float(item.get("average_watts")),
            average_cadence=_float(item.get("average_cadence")),
        )
        for item in raw
        if isinstance(item, dict)
    ]


def parse_wellness(payload: dict[str, object]) -> WellnessRecord:
    """Build a WellnessRecord; the payload id is the ISO date."""
    raw_date = str(payload.get("date") or payload.get("id") or "")
    return WellnessRecord(
        date=date.fromisoformat(raw_date.split("T")[0]),
        ctl=_float(payload.get("ctl")) or 0.0,
        atl=_float(payload.get("atl")) or 0.0,
        resting_hr=_float(payload.get("restingHR")),
        hrv=_float(payload.get("hrv")),
        sleep_secs=_int(payload.get("sleepSecs")),
        sleep_quality=_int(payload.get("sleepQuality")),
        weight=_float(payload.get("weight")),
        soreness=_int(payload.get("soreness")),
        mood=_int(payload.get("mood")),
    )


def _parse_wellness_rows(rows: list[dict[str, object]]) -> list[WellnessRecord]:
    records = []
    for row in rows:
        try:
            records.append(parse_wellness(row))
        except ValueError:
            _logger.warning("Skipping wellness record without a date: %s", row.get("id"))
    return records


def parse_event(payload: dict[str, object]) -> PlannedWorkout:
    """Build a PlannedWorkout from a calendar event payload."""
    return PlannedWorkout(
        id=str(payload.get("id", "")),
        name=str(payload.get("name") or "Workout"),
        description=str(payload.get("description") or ""),
        category=payload.get("category"),
        start_date_local=payload.get("start_date_local") or payload.get("date"),
        load=_float(payload.get("load") or payload.get("icu_training_load")) or 0.0,
    )
