"""Domain models for intra-run carbohydrate tracking."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CarbGuidelines:
    """Supplementation guidelines for long runs."""

    carbs_per_30_min: float = 22.5
    min_duration_minutes: int = 75
    enabled: bool = True


@dataclass(frozen=True)
class CarbIntakeEntry:
    """Carbohydrates consumed during one activity."""

    activity_id: str
    carb_grams: int
    notes: str = ""
    timestamp: datetime | None = None


@dataclass(frozen=True)
class CarbCompliance:
    """Actual intake measured against the expected amount."""

    percentage: int
    level: str
    actual: int
    expected: int
    difference: int


@dataclass(frozen=True)
class CarbTrackingRecord:
    """Expected and actual intake for one eligible run."""

    activity_id: str
    date: str
    name: str
    duration: int
    expected: int
    actual: int | None
    tracked: bool
    compliance: CarbCompliance | None


@dataclass(frozen=True)
class WeeklyCarbStats:
    """Carb adherence roll-up for one Monday-starting week."""

    total_activities: int
    tracked_activities: int
    compliant_activities: int
    total_expected: int
    total_actual: int
    tracking_percentage: int
    compliance_percentage: int
    overall_compliance: int


@dataclass(frozen=True)
class CycleCarbStats:
    """Carb adherence roll-up across the training cycle."""

    total_activities: int
    tracked_activities: int
    compliant_activities: int
    total_expected: int
    total_actual: int
    tracking_percentage: int
    compliance_percentage: int
    overall_compliance: int
    message: str
