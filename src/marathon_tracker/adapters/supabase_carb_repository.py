"""Supabase repository for carb intake during activities."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from marathon_tracker.domain.carbs import CarbIntakeEntry
from marathon_tracker.services.carbs import CarbIntakeRepository

TABLE = "carb_tracking"


@dataclass
class SupabaseCarbRepository(CarbIntakeRepository):
    """Supabase implementation keyed by activity id."""

    client: Client

    def get_intake(self, activity_id: str) -> CarbIntakeEntry | None:
        """Return the intake logged for an activity."""
        response = (
            self.client.table(TABLE)
            .select("*")
            .eq("activity_id", activity_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_intake(response.data[0])

    def put_intake(self, entry: CarbIntakeEntry) -> None:
        """Replace the intake row for the activity."""
        self.client.table(TABLE).upsert(
            {
                "activity_id": entry.activity_id,
                "carb_grams": entry.carb_grams,
                "notes": entry.notes,
                "timestamp": entry.timestamp.isoformat() if entry.timestamp else None,
            }
        ).execute()

    def list_intakes(self, activity_ids: list[str]) -> dict[str, CarbIntakeEntry]:
        """Return intakes for the given activities keyed by id."""
        if not activity_ids:
            return {}
        response = (
            self.client.table(TABLE)
            .select("*")
            .in_("activity_id", activity_ids)
            .execute()
        )
        intakes = [_parse_intake(row) for row in response.data or []]
        return {intake.activity_id: intake for intake in intakes}


def _parse_intake(row: dict[str, object]) -> CarbIntakeEntry:
    timestamp = row.get("timestamp")
    return CarbIntakeEntry(
        activity_id=str(row["activity_id"]),
        carb_grams=int(row.get("carb_grams") or 0),
        notes=str(row.get("notes") or ""),
        timestamp=(
            datetime.fromisoformat(timestamp)
            if isinstance(timestamp, str) and timestamp
            else None
        ),
    )
