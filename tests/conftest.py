"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import date

import httpx
import pytest

from marathon_tracker.adapters.intervals_client import IntervalsClient
from marathon_tracker.config import Settings
from marathon_tracker.containers import AppContainer
from marathon_tracker.domain.activities import Activity, ActivityInterval
from marathon_tracker.domain.carbs import CarbIntakeEntry
from marathon_tracker.domain.tracking import DailyTrackingEntry, MealRating
from marathon_tracker.services.activities import ActivityRepository, ActivityService
from marathon_tracker.services.adherence import (
    NutritionTrackingService,
    TrackingRepository,
)
from marathon_tracker.services.app_config import AppConfigService, ConfigRepository
from marathon_tracker.services.cache import TtlCache
from marathon_tracker.services.carbs import CarbIntakeRepository, CarbTrackingService
from marathon_tracker.services.cycle import load_training_cycle


@dataclass
class InMemoryTrackingRepository(TrackingRepository):
    """In-memory daily tracking repository for tests."""

    entries: dict[date, DailyTrackingEntry] = field(default_factory=dict)

    def get_entry(self, day: date) -> DailyTrackingEntry | None:
        return self.entries.get(day)

    def put_entry(self, entry: DailyTrackingEntry) -> None:
        self.entries[entry.date] = entry

    def put_entries(self, entries: list[DailyTrackingEntry]) -> None:
        for entry in entries:
            self.put_entry(entry)

    def list_entries(self, start: date, end: date) -> list[DailyTrackingEntry]:
        return [
            self.entries[day] for day in sorted(self.entries) if start <= day <= end
        ]


@dataclass
class InMemoryCarbRepository(CarbIntakeRepository):
    """In-memory carb intake repository for tests."""

    intakes: dict[str, CarbIntakeEntry] = field(default_factory=dict)

    def get_intake(self, activity_id: str) -> CarbIntakeEntry | None:
        return self.intakes.get(activity_id)

    def put_intake(self, entry: CarbIntakeEntry) -> None:
        self.intakes[entry.activity_id] = entry

    def list_intakes(self, activity_ids: list[str]) -> dict[str, CarbIntakeEntry]:
        return {
            activity_id: self.intakes[activity_id]
            for activity_id in activity_ids
            if activity_id in self.intakes
        }


@dataclass
class InMemoryConfigRepository(ConfigRepository):
    """In-memory configuration repository for tests."""

    values: dict[str, dict[str, object]] = field(default_factory=dict)

    def get_value(self, key: str) -> dict[str, object] | None:
        return self.values.get(key)

    def set_value(self, key: str, value: dict[str, object]) -> None:
        self.values[key] = value


@dataclass
class InMemoryActivityRepository(ActivityRepository):
    """In-memory store for raw activity and wellness payloads."""

    activities: dict[str, dict[str, object]] = field(default_factory=dict)
    details: dict[str, dict[str, object]] = field(default_factory=dict)
    wellness: dict[str, dict[str, object]] = field(default_factory=dict)

    def put_activities(self, activities: list[dict[str, object]]) -> None:
        for activity in activities:
            self.activities[str(activity["id"])] = activity

    def list_activities(self, start: date, end: date) -> list[dict[str, object]]:
        return [
            activity
            for activity in self.activities.values()
            if start.isoformat()
            <= str(activity["start_date_local"])[:10]
            <= end.isoformat()
        ]

    def get_details(self, activity_id: str) -> dict[str, object] | None:
        return self.details.get(activity_id)

    def put_details(self, activity_id: str, details: dict[str, object]) -> None:
        self.details[activity_id] = details

    def put_wellness(self, records: list[dict[str, object]]) -> None:
        for record in records:
            self.wellness[str(record["id"])] = record

    def list_wellness(self, start: date, end: date) -> list[dict[str, object]]:
        return [
            record
            for day, record in sorted(self.wellness.items())
            if start.isoformat() <= day <= end.isoformat()
        ]


@dataclass
class FakeIntervalsClient(IntervalsClient):
    """Fake intervals.icu client serving canned payloads."""

    configured: bool = True
    activities: list[dict[str, object]] = field(default_factory=list)
    wellness: list[dict[str, object]] = field(default_factory=list)
    events: list[dict[str, object]] = field(default_factory=list)
    details: dict[str, dict[str, object]] = field(default_factory=dict)
    intervals: dict[str, dict[str, object]] = field(default_factory=dict)
    failures: int = 0
    calls: list[str] = field(default_factory=list)

    @property
    def is_configured(self) -> bool:
        return self.configured

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if self.failures > 0:
            self.failures -= 1
            raise httpx.ConnectError("intervals.icu unreachable")

    async def list_activities(self, oldest: str, newest: str) -> list[dict[str, object]]:
        self._record("activities")
        return [
            activity
            for activity in self.activities
            if oldest <= str(activity["start_date_local"])[:10] <= newest
        ]

    async def get_activity(self, activity_id: str) -> dict[str, object]:
        self._record(f"activity:{activity_id}")
        return self.details.get(activity_id, {})

    async def get_activity_intervals(self, activity_id: str) -> dict[str, object]:
        self._record(f"intervals:{activity_id}")
        return self.intervals.get(activity_id, {})

    async def list_wellness(self, oldest: str, newest: str) -> list[dict[str, object]]:
        self._record("wellness")
        return [record for record in self.wellness if oldest <= record["id"] <= newest]

    async def list_events(self, oldest: str, newest: str) -> list[dict[str, object]]:
        self._record("events")
        return list(self.events)


def make_run(  # noqa: PLR0913
    activity_id: str,
    start: str,
    minutes: float,
    name: str = "Run",
    type_: str = "Run",
    intervals: list[ActivityInterval] | None = None,
) -> Activity:
    """Build a run lasting ``minutes``."""
    return Activity(
        id=activity_id,
        start_date_local=start,
        type=type_,
        name=name,
        moving_time=int(minutes * 60),
        intervals=intervals or [],
    )


def make_entry(
    day: date, rating: int, meals: dict[str, int] | None = None
) -> DailyTrackingEntry:
    """Build a tracking entry with optional per-meal ratings."""
    return DailyTrackingEntry(
        date=day,
        rating=rating,
        meals={meal: MealRating(rating=value) for meal, value in (meals or {}).items()},
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        intervals_api_key="intervals-key",
        intervals_athlete_id="i12345",
    )


@pytest.fixture
def config_repository() -> InMemoryConfigRepository:
    return InMemoryConfigRepository()


@pytest.fixture
def config_service(config_repository: InMemoryConfigRepository) -> AppConfigService:
    return AppConfigService(config_repository)


@pytest.fixture
def tracking_repository() -> InMemoryTrackingRepository:
    return InMemoryTrackingRepository()


@pytest.fixture
def nutrition_service(
    tracking_repository: InMemoryTrackingRepository, config_service: AppConfigService
) -> NutritionTrackingService:
    return NutritionTrackingService(
        repository=tracking_repository, config=config_service
    )


@pytest.fixture
def carb_repository() -> InMemoryCarbRepository:
    return InMemoryCarbRepository()


@pytest.fixture
def carb_service(
    carb_repository: InMemoryCarbRepository, config_service: AppConfigService
) -> CarbTrackingService:
    return CarbTrackingService(repository=carb_repository, config=config_service)


@pytest.fixture
def intervals_client() -> FakeIntervalsClient:
    return FakeIntervalsClient()


@pytest.fixture
def activity_repository() -> InMemoryActivityRepository:
    return InMemoryActivityRepository()


@pytest.fixture
def activity_service(
    intervals_client: FakeIntervalsClient,
    activity_repository: InMemoryActivityRepository,
) -> ActivityService:
    return ActivityService(
        client=intervals_client,
        repository=activity_repository,
        cache=TtlCache(),
        retry_delay_seconds=0,
    )


@pytest.fixture
def container(
    settings: Settings,
    intervals_client: FakeIntervalsClient,
    config_service: AppConfigService,
    nutrition_service: NutritionTrackingService,
    carb_service: CarbTrackingService,
    activity_service: ActivityService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        cycle=load_training_cycle(settings),
        intervals_client=intervals_client,
        config_service=config_service,
        nutrition_service=nutrition_service,
        carb_service=carb_service,
        activity_service=activity_service,
        close_resources=close_resources,
    )
