"""Domain models for daily nutrition tracking."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

MEAL_SLOTS = ("breakfast", "lunch", "dinner", "snacks")


class Adherence(Enum):
    """Self-reported adherence level for a day."""

    EXCELLENT = "excellent"
    GOOD = "good"
    POOR = "poor"
    FAILED = "failed"
    NOT_SET = "not-set"


class DayType(Enum):
    """Kind of day the nutrition plan was built for."""

    TRAINING = "training"
    CARB_LOAD = "carb-load"
    REST = "rest"


@dataclass(frozen=True)
class MealRating:
    """Rating and notes for a single meal."""

    rating: int = 0
    notes: str = ""


@dataclass(frozen=True)
class DailyTrackingEntry:
    """One day of nutrition tracking. A rating of 0 means unrated."""

    date: date
    rating: int = 0
    notes: str = ""
    adherence: Adherence = Adherence.NOT_SET
    planned_calories: int = 0
    actual_calories: int = 0
    day_type: DayType = DayType.TRAINING
    meals: dict[str, MealRating] = field(default_factory=dict)
    timestamp: datetime | None = None


@dataclass(frozen=True)
class DaySlot:
    """A calendar day and its tracking entry, if any."""

    date: date
    entry: DailyTrackingEntry | None


@dataclass(frozen=True)
class NutritionGoals:
    """Free-text nutrition goals shown alongside the analytics."""

    primary: str = "performance"
    description: str = "Optimize performance for sub-2:50 marathon"
    weekly_target: str = "Maintain 73.5kg while improving power-to-weight ratio"
    calorie_strategy: str = "Periodize nutrition based on training load"
    protein_target: str = "1.6-1.8g/kg bodyweight"
    carb_target: str = "High on training days, moderate on rest days"
    expected_outcome: str = "Sustained energy, improved recovery, stable weight"


@dataclass(frozen=True)
class WeeklyStats:
    """Adherence statistics for one week."""

    average_rating: float
    days_tracked: int
    total_days: int
    adherence_percentage: int
    on_track: bool
    message: str


@dataclass(frozen=True)
class CycleStats:
    """Adherence statistics across the training cycle."""

    total_days: int
    days_tracked: int
    average_rating: float
    adherence_percentage: int
    excellent_days: int
    good_days: int
    poor_days: int
    failed_days: int
    on_track: bool
    message: str
    cycle_start_date: str | None = None
    cycle_end_date: str | None = None


@dataclass(frozen=True)
class MealIssue:
    """A meal occurrence rated below target."""

    date: date
    rating: int
    notes: str


@dataclass(frozen=True)
class MealSummary:
    """Rating summary for one meal slot."""

    meal: str
    avg_rating: float | None
    count: int
    issues: list[MealIssue]

    @property
    def needs_attention(self) -> bool:
        """Return True when the meal averages below target."""
        return self.avg_rating is not None and self.avg_rating < 7


@dataclass(frozen=True)
class MealPatternSummary:
    """Per-meal analysis over a set of tracking entries."""

    most_problematic: MealSummary | None
    best_performing: MealSummary | None
    sorted_meals: list[MealSummary]
