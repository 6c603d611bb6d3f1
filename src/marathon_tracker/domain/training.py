"""Domain models for training analysis."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ZoneThresholds:
    """Pace thresholds in seconds per km used to classify zones."""

    marathon_pace: int = 242
    threshold_min: int = 220
    threshold_max: int = 235
    easy_min: int = 285


@dataclass(frozen=True)
class ParsedInterval:
    """Interval formatted for display."""

    id: int | None
    type: str | None
    distance_km: float
    duration: int
    avg_pace: str | None
    avg_power: float | None
    avg_hr: float | None
    avg_cadence: float | None
    zone: str | None


@dataclass(frozen=True)
class WeeklyVolume:
    """Running volume for one Monday-starting week."""

    week: str
    total_km: float
    total_load: float
    sessions: int
    km_at_threshold: float
    km_at_easy: float


@dataclass(frozen=True)
class IntensityDistribution:
    """Kilometres spent in each pace zone."""

    easy: float
    tempo: float
    marathon_pace: float
    threshold: float
    speed: float
    total: float


@dataclass(frozen=True)
class Readiness:
    """Training readiness derived from wellness metrics."""

    score: int | None
    status: str
    message: str
    insights: list[str]
    metrics: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class WellnessBaseline:
    """Rolling averages used as a reference for readiness."""

    resting_hr: float | None = None
    hrv: float | None = None
    weight: float | None = None


@dataclass(frozen=True)
class PerformanceAnalysis:
    """Quality assessment of a completed session."""

    completed: bool
    quality: str
    concerns: list[str]
    avg_hr: float | None = None
    avg_power: float | None = None
    avg_pace: float | None = None
    load: float = 0.0
    distance: float = 0.0


@dataclass(frozen=True)
class WorkoutAdaptation:
    """Advice for adjusting a planned workout."""

    recommendation: str
    adaptations: list[str]
    warnings: list[str]
    readiness_score: int | None
    readiness_status: str


@dataclass(frozen=True)
class WorkoutDetails:
    """Planned workout summarised by type."""

    name: str
    description: str
    type: str
    load: float
    date: str | None
