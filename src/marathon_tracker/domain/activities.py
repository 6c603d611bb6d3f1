"""Domain models for activities, wellness and planned workouts."""

from dataclasses import dataclass, field
from datetime import date

RUN_TYPES = frozenset({"Run", "VirtualRun", "TrailRun"})


@dataclass(frozen=True)
class ActivityInterval:
    """A lap or work segment inside an activity."""

    id: int | None
    type: str | None
    distance: float
    moving_time: int
    average_speed: float | None = None
    average_heartrate: float | None = None
    average_watts: float | None = None
    average_cadence: float | None = None


@dataclass(frozen=True)
class Activity:
    """A completed workout as reported by intervals.icu."""

    id: str
    start_date_local: str
    type: str
    name: str = ""
    distance: float = 0.0
    moving_time: int = 0
    average_speed: float | None = None
    average_heartrate: float | None = None
    average_watts: float | None = None
    ftp: float | None = None
    training_load: float = 0.0
    source: str | None = None
    intervals: list[ActivityInterval] = field(default_factory=list)

    @property
    def is_run(self) -> bool:
        """Return True for running activities."""
        return self.type in RUN_TYPES

    @property
    def duration_minutes(self) -> float:
        """Moving time in minutes."""
        return self.moving_time / 60 if self.moving_time else 0.0

    @property
    def local_date(self) -> str:
        """Local start date as YYYY-MM-DD."""
        return self.start_date_local.split("T")[0]


@dataclass(frozen=True)
class WellnessRecord:
    """Daily wellness metrics."""

    date: date
    ctl: float = 0.0
    atl: float = 0.0
    resting_hr: float | None = None
    hrv: float | None = None
    sleep_secs: int | None = None
    sleep_quality: int | None = None
    weight: float | None = None
    soreness: int | None = None
    mood: int | None = None


@dataclass(frozen=True)
class PlannedWorkout:
    """A planned calendar event from intervals.icu."""

    id: str
    name: str
    description: str = ""
    category: str | None = None
    start_date_local: str | None = None
    load: float = 0.0
