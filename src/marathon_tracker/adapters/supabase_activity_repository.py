"""Supabase repository for raw intervals.icu activities and wellness."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta

from supabase import Client

from marathon_tracker.services.activities import ActivityRepository


@dataclass
class SupabaseActivityRepository(ActivityRepository):
    """Stores intervals.icu payloads as JSON alongside their lookup keys."""

    client: Client

    def put_activities(self, activities: list[dict[str, object]]) -> None:
        """Upsert activities by id."""
        if not activities:
            return
        synced_at = datetime.now(tz=UTC).isoformat()
        self.client.table("activities").upsert(
            [
                {
                    "id": str(activity["id"]),
                    "start_date_local": activity.get("start_date_local"),
                    "payload": activity,
                    "synced_at": synced_at,
                }
                for activity in activities
            ]
        ).execute()

    def list_activities(self, start: date, end: date) -> list[dict[str, object]]:
        """Return stored payloads whose local start date is in range."""
        response = (
            self.client.table("activities")
            .select("payload")
            .gte("start_date_local", start.isoformat())
            .lt("start_date_local", (end + timedelta(days=1)).isoformat())
            .order("start_date_local")
            .execute()
        )
        return [row["payload"] for row in response.data or [] if row.get("payload")]

    def get_details(self, activity_id: str) -> dict[str, object] | None:
        """Return stored details for an activity."""
        response = (
            self.client.table("activity_details")
            .select("payload")
            .eq("activity_id", activity_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("payload")

    def put_details(self, activity_id: str, details: dict[str, object]) -> None:
        """Upsert details for an activity."""
        self.client.table("activity_details").upsert(
            {
                "activity_id": activity_id,
                "payload": details,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).execute()

    def put_wellness(self, records: list[dict[str, object]]) -> None:
        """Upsert wellness records by date."""
        rows = []
        for record in records:
            day = str(record.get("date") or record.get("id") or "")[:10]
            if day:
                rows.append({"date": day, "payload": record})
        if rows:
            self.client.table("wellness").upsert(rows).execute()

    def list_wellness(self, start: date, end: date) -> list[dict[str, object]]:
        """Return stored wellness payloads in range."""
        response = (
            self.client.table("wellness")
            .select("payload")
            .gte("date", start.isoformat())
            .lte("date", end.isoformat())
            .order("date")
            .execute()
        )
        return [row["payload"] for row in response.data or [] if row.get("payload")]
