"""TTL cache for fetched activity and wellness lists."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Cache(Protocol):
    """Cache interface keyed by request description."""

    def get(self, key: str) -> object | None:
        """Return a live cached value, if any."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a value for ``ttl_seconds``."""

    def invalidate(self, prefix: str) -> None:
        """Drop every entry whose key starts with ``prefix``."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class _Slot:
    value: object
    expires_at: datetime


@dataclass
class TtlCache(Cache):
    """Process-local cache; entries expire lazily on read."""

    clock: Callable[[], datetime] = _utc_now
    _slots: dict[str, _Slot] = field(default_factory=dict)

    def get(self, key: str) -> object | None:
        """Return the value unless it has expired."""
        slot = self._slots.get(key)
        if slot is None:
            return None
        if self.clock() >= slot.expires_at:
            del self._slots[key]
            return None
        return slot.value

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a value until the TTL elapses."""
        self._slots[key] = _Slot(
            value=value, expires_at=self.clock() + timedelta(seconds=ttl_seconds)
        )

    def invalidate(self, prefix: str) -> None:
        """Drop matching entries, e.g. after a forced sync."""
        for key in [key for key in self._slots if key.startswith(prefix)]:
            del self._slots[key]
