"""Supabase repository for application configuration documents."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from marathon_tracker.services.app_config import ConfigRepository


@dataclass
class SupabaseConfigRepository(ConfigRepository):
    """Supabase implementation over the ``app_config`` key-value table."""

    client: Client

    def get_value(self, key: str) -> dict[str, object] | None:
        """Return the stored document for a key."""
        response = (
            self.client.table("app_config")
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("value")

    def set_value(self, key: str, value: dict[str, object]) -> None:
        """Replace the document stored under a key."""
        self.client.table("app_config").upsert(
            {
                "key": key,
                "value": value,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).execute()
