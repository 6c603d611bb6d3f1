"""Key-value application configuration service."""

from dataclasses import dataclass
from typing import Protocol


class ConfigRepository(Protocol):
    """Persistence interface for singleton configuration values."""

    def get_value(self, key: str) -> dict[str, object] | None:
        """Return the stored value for a key, if any."""

    def set_value(self, key: str, value: dict[str, object]) -> None:
        """Store a value under a key, replacing any previous one."""


@dataclass
class AppConfigService:
    """Service for reading and writing configuration documents."""

    repository: ConfigRepository

    def get(self, key: str) -> dict[str, object] | None:
        """Return the configuration document for a key."""
        return self.repository.get_value(key)

    def set(self, key: str, value: dict[str, object]) -> None:
        """Persist a configuration document."""
        self.repository.set_value(key, value)
