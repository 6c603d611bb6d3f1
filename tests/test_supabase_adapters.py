"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime

from marathon_tracker.adapters.supabase_activity_repository import (
    SupabaseActivityRepository,
)
from marathon_tracker.adapters.supabase_carb_repository import SupabaseCarbRepository
from marathon_tracker.adapters.supabase_config_repository import (
    SupabaseConfigRepository,
)
from marathon_tracker.adapters.supabase_tracking_repository import (
    SupabaseTrackingRepository,
)
from marathon_tracker.domain.carbs import CarbIntakeEntry
from marathon_tracker.domain.tracking import (
    Adherence,
    DailyTrackingEntry,
    DayType,
    MealRating,
)


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "upsert": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, str, object]] = field(default_factory=list)
    executed: int = 0

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "select"
        return self

    def upsert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "upsert"
        self.last_payload = payload
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("eq", column, value))
        return self

    def in_(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("in", column, value))
        return self

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("gte", column, value))
        return self

    def lte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("lte", column, value))
        return self

    def lt(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("lt", column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        self.executed += 1
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def test_tracking_repository_parses_rows() -> None:
    client = FakeSupabaseClient()
    table = client.table("nutrition_tracking")
    table.queue(
        "select",
        [
            {
                "date": "2026-01-20",
                "rating": 8,
                "notes": "good day",
                "adherence": "good",
                "planned_calories": 3200,
                "actual_calories": 3050,
                "day_type": "carb-load",
                "meals": {"lunch": {"rating": 6, "notes": "rushed"}},
                "timestamp": "2026-01-20T21:00:00+00:00",
            }
        ],
    )

    entry = SupabaseTrackingRepository(client).get_entry(date(2026, 1, 20))

    assert entry is not None
    assert entry.adherence is Adherence.GOOD
    assert entry.day_type is DayType.CARB_LOAD
    assert entry.meals["lunch"] == MealRating(rating=6, notes="rushed")
    assert entry.timestamp == datetime(2026, 1, 20, 21, 0, tzinfo=UTC)
    assert ("eq", "date", "2026-01-20") in table.last_filters


def test_tracking_repository_defaults_missing_columns() -> None:
    client = FakeSupabaseClient()
    client.table("nutrition_tracking").queue("select", [{"date": "2026-01-21"}])

    entries = SupabaseTrackingRepository(client).list_entries(
        date(2026, 1, 19), date(2026, 1, 25)
    )

    assert entries == [DailyTrackingEntry(date=date(2026, 1, 21))]
    filters = client.table("nutrition_tracking").last_filters
    assert ("gte", "date", "2026-01-19") in filters
    assert ("lte", "date", "2026-01-25") in filters


def test_tracking_repository_upserts_whole_rows() -> None:
    client = FakeSupabaseClient()
    repository = SupabaseTrackingRepository(client)
    entry = DailyTrackingEntry(
        date=date(2026, 1, 20),
        rating=7,
        meals={"dinner": MealRating(rating=8)},
    )

    repository.put_entry(entry)

    payload = client.table("nutrition_tracking").last_payload
    assert isinstance(payload, dict)
    assert payload["date"] == "2026-01-20"
    assert payload["adherence"] == "not-set"
    assert payload["day_type"] == "training"
    assert payload["meals"] == {"dinner": {"rating": 8, "notes": ""}}
    assert payload["timestamp"] is None


def test_tracking_repository_skips_empty_bulk_put() -> None:
    client = FakeSupabaseClient()

    SupabaseTrackingRepository(client).put_entries([])

    assert "nutrition_tracking" not in client.tables


def test_carb_repository_lists_by_activity() -> None:
    client = FakeSupabaseClient()
    table = client.table("carb_tracking")
    table.queue(
        "select",
        [
            {"activity_id": "a1", "carb_grams": 45, "notes": "gels"},
            {"activity_id": "a2", "carb_grams": 60, "notes": None},
        ],
    )
    repository = SupabaseCarbRepository(client)

    intakes = repository.list_intakes(["a1", "a2"])

    assert intakes["a1"].carb_grams == 45
    assert intakes["a2"].notes == ""
    assert ("in", "activity_id", ["a1", "a2"]) in table.last_filters
    assert repository.list_intakes([]) == {}
    assert table.executed == 1


def test_carb_repository_upserts_intake() -> None:
    client = FakeSupabaseClient()
    repository = SupabaseCarbRepository(client)

    repository.put_intake(
        CarbIntakeEntry(
            activity_id="a1",
            carb_grams=45,
            timestamp=datetime(2026, 2, 1, 10, tzinfo=UTC),
        )
    )

    payload = client.table("carb_tracking").last_payload
    assert payload == {
        "activity_id": "a1",
        "carb_grams": 45,
        "notes": "",
        "timestamp": "2026-02-01T10:00:00+00:00",
    }
    assert repository.get_intake("a1") is None


def test_activity_repository_round_trips_payloads() -> None:
    client = FakeSupabaseClient()
    activities = client.table("activities")
    payload = {"id": "i1", "start_date_local": "2026-02-03T07:00:00", "type": "Run"}
    activities.queue("select", [{"payload": payload}])
    repository = SupabaseActivityRepository(client)

    repository.put_activities([payload])
    stored = activities.last_payload
    listed = repository.list_activities(date(2026, 2, 2), date(2026, 2, 8))

    assert isinstance(stored, list)
    assert stored[0]["id"] == "i1"
    assert stored[0]["payload"] == payload
    assert listed == [payload]
    assert ("lt", "start_date_local", "2026-02-09") in activities.last_filters


def test_activity_repository_details_and_wellness() -> None:
    client = FakeSupabaseClient()
    client.table("activity_details").queue("select", [{"payload": {"id": "i1"}}])
    repository = SupabaseActivityRepository(client)

    assert repository.get_details("i1") == {"id": "i1"}
    assert repository.get_details("i2") is None

    repository.put_wellness([{"id": "2026-02-03", "ctl": 50}, {"ctl": 1}])

    rows = client.table("wellness").last_payload
    assert rows == [{"date": "2026-02-03", "payload": {"id": "2026-02-03", "ctl": 50}}]


def test_config_repository_get_and_set() -> None:
    client = FakeSupabaseClient()
    table = client.table("app_config")
    table.queue("select", [{"value": {"carbs_per_30_min": 25}}])
    repository = SupabaseConfigRepository(client)

    assert repository.get_value("carbGuidelines") == {"carbs_per_30_min": 25}
    assert repository.get_value("nutritionGoals") is None

    repository.set_value("nutritionGoals", {"primary": "performance"})
    payload = table.last_payload
    assert isinstance(payload, dict)
    assert payload["key"] == "nutritionGoals"
    assert payload["value"] == {"primary": "performance"}
    assert "updated_at" in payload
