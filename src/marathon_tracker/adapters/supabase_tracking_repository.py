"""Supabase repository for daily nutrition tracking."""

from dataclasses import dataclass
from datetime import date, datetime

from supabase import Client

from marathon_tracker.domain.tracking import (
    Adherence,
    DailyTrackingEntry,
    DayType,
    MealRating,
)
from marathon_tracker.services.adherence import TrackingRepository

TABLE = "nutrition_tracking"


@dataclass
class SupabaseTrackingRepository(TrackingRepository):
    """Supabase implementation keyed by tracking date."""

    client: Client

    def get_entry(self, day: date) -> DailyTrackingEntry | None:
        """Return the entry for a date, if present."""
        response = (
            self.client.table(TABLE)
            .select("*")
            .eq("date", day.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def put_entry(self, entry: DailyTrackingEntry) -> None:
        """Replace the row for the entry's date."""
        self.client.table(TABLE).upsert(_entry_row(entry)).execute()

    def put_entries(self, entries: list[DailyTrackingEntry]) -> None:
        """Replace several rows in one request."""
        if not entries:
            return
        self.client.table(TABLE).upsert([_entry_row(entry) for entry in entries]).execute()

    def list_entries(self, start: date, end: date) -> list[DailyTrackingEntry]:
        """Return entries within the inclusive date range."""
        response = (
            self.client.table(TABLE)
            .select("*")
            .gte("date", start.isoformat())
            .lte("date", end.isoformat())
            .order("date")
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]


def _entry_row(entry: DailyTrackingEntry) -> dict[str, object]:
    return {
        "date": entry.date.isoformat(),
        "rating": entry.rating,
        "notes": entry.notes,
        "adherence": entry.adherence.value,
        "planned_calories": entry.planned_calories,
        "actual_calories": entry.actual_calories,
        "day_type": entry.day_type.value,
        "meals": {
            meal: {"rating": rating.rating, "notes": rating.notes}
            for meal, rating in entry.meals.items()
        },
        "timestamp": entry.timestamp.isoformat() if entry.timestamp else None,
    }


def _parse_entry(row: dict[str, object]) -> DailyTrackingEntry:
    meals = row.get("meals") or {}
    timestamp = row.get("timestamp")
    return DailyTrackingEntry(
        date=date.fromisoformat(str(row["date"])[:10]),
        rating=int(row.get("rating") or 0),
        notes=str(row.get("notes") or ""),
        adherence=Adherence(row.get("adherence") or Adherence.NOT_SET.value),
        planned_calories=int(row.get("planned_calories") or 0),
        actual_calories=int(row.get("actual_calories") or 0),
        day_type=DayType(row.get("day_type") or DayType.TRAINING.value),
        meals={
            meal: MealRating(
                rating=int(value.get("rating") or 0), notes=str(value.get("notes") or "")
            )
            for meal, value in meals.items()
            if isinstance(value, dict)
        },
        timestamp=(
            datetime.fromisoformat(timestamp)
            if isinstance(timestamp, str) and timestamp
            else None
        ),
    )
