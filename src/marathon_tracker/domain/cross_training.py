"""Domain models for cycling and strength sessions."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RunningEquivalent:
    """A ride expressed as running distance, time and load."""

    cycling_km: float
    cycling_minutes: int
    intensity_percent: int
    intensity_zone: str
    conversion_factor: float
    running_km: float
    running_minutes: int
    cycling_load: float
    running_load: int
    formula: str


@dataclass(frozen=True)
class RideSummary:
    id: str
    date: str
    name: str
    distance_km: float
    duration_minutes: int
    avg_power: float | None
    avg_hr: float | None
    load: float
    running_equivalent: RunningEquivalent


@dataclass(frozen=True)
class CyclingStats:
    """Ride totals alongside their running equivalents."""

    rides: list[RideSummary]
    sessions: int
    km: float
    minutes: int
    load: int
    equivalent_km: float
    equivalent_minutes: int
    equivalent_load: int


@dataclass(frozen=True)
class SessionTotals:
    sessions: int = 0
    minutes: int = 0


@dataclass(frozen=True)
class StrengthStats:
    """Strength session counts and minutes, overall and grouped."""

    sessions: int
    minutes: int
    hours: float
    by_week: dict[str, SessionTotals] = field(default_factory=dict)
    by_month: dict[str, SessionTotals] = field(default_factory=dict)


@dataclass(frozen=True)
class StrengthPlan:
    """Strength work recommended for the current phase."""

    phase: str
    phase_key: str
    week: int
    total_weeks: int
    weekly_minutes: tuple[int, int]
    weekly_minutes_range: str
    focus: str
    exercises: tuple[str, ...]
    rationale: str
    references: tuple[str, ...]
