"""Nutrition adherence analytics over daily tracking entries."""

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import asdict, dataclass, fields
from datetime import UTC, date, datetime, timedelta
from typing import Protocol

from marathon_tracker.domain.errors import ComputationError
from marathon_tracker.domain.tracking import (
    MEAL_SLOTS,
    Adherence,
    CycleStats,
    DailyTrackingEntry,
    DaySlot,
    DayType,
    MealIssue,
    MealPatternSummary,
    MealRating,
    MealSummary,
    NutritionGoals,
    WeeklyStats,
)
from marathon_tracker.services.app_config import AppConfigService
from marathon_tracker.services.dates import parse_day, parse_instant, week_dates
from marathon_tracker.services.rounding import round_half_up, round_int

WEEK_DAYS = 7
MEAL_TARGET_RATING = 7
GOALS_CONFIG_KEY = "nutritionGoals"

_logger = logging.getLogger(__name__)


class TrackingRepository(Protocol):
    """Persistence interface for daily tracking entries."""

    def get_entry(self, day: date) -> DailyTrackingEntry | None:
        """Return the entry for a date, if present."""

    def put_entry(self, entry: DailyTrackingEntry) -> None:
        """Insert or replace the entry for its date."""

    def put_entries(self, entries: list[DailyTrackingEntry]) -> None:
        """Insert or replace several entries."""

    def list_entries(self, start: date, end: date) -> list[DailyTrackingEntry]:
        """Return entries with start <= date <= end, ordered by date."""


def empty_weekly_stats() -> WeeklyStats:
    """Weekly stats shown before anything is tracked."""
    return WeeklyStats(
        average_rating=0,
        days_tracked=0,
        total_days=WEEK_DAYS,
        adherence_percentage=0,
        on_track=False,
        message="No data tracked yet this week",
    )


def empty_cycle_stats(
    total_days: int = 0,
    cycle_start_date: str | None = None,
    cycle_end_date: str | None = None,
) -> CycleStats:
    """Cycle stats shown before anything is tracked or when dates are unusable."""
    return CycleStats(
        total_days=total_days,
        days_tracked=0,
        average_rating=0,
        adherence_percentage=0,
        excellent_days=0,
        good_days=0,
        poor_days=0,
        failed_days=0,
        on_track=False,
        message="Start tracking to see your cycle progress",
        cycle_start_date=cycle_start_date,
        cycle_end_date=cycle_end_date,
    )


def weekly_stats(slots: Sequence[DaySlot]) -> WeeklyStats:
    """Summarise a week of tracking slots.

    Only entries with a positive rating count as tracked; the adherence
    percentage always uses a denominator of seven days.
    """
    valid = [slot.entry for slot in slots if slot.entry and slot.entry.rating > 0]
    if not valid:
        return empty_weekly_stats()

    tracked = len(valid)
    average = sum(entry.rating for entry in valid) / tracked
    on_track = average >= 7 and tracked >= 5

    if average >= 8 and tracked >= 6:
        message = "Excellent adherence! You're crushing your nutrition goals!"
    elif average >= 7 and tracked >= 5:
        message = "Great work! You're on track with your nutrition plan. Keep it up!"
    elif average >= 5:
        message = "Making progress, but there's room for improvement. Stay focused!"
    else:
        message = "Need to improve adherence. Let's get back on track this week!"

    return WeeklyStats(
        average_rating=round_half_up(average, 1),
        days_tracked=tracked,
        total_days=WEEK_DAYS,
        adherence_percentage=round_int(tracked / WEEK_DAYS * 100),
        on_track=on_track,
        message=message,
    )


def cycle_stats(
    start_date: str | date,
    end_date: str | date,
    entries: Sequence[DailyTrackingEntry],
) -> CycleStats:
    """Summarise tracking across the training cycle.

    Unlike the weekly view, every stored entry counts as tracked here,
    including entries with a rating of 0; those entries fall into none of
    the rating buckets but still pull the average down.

    Raises:
        ComputationError: when either date cannot be parsed.
    """
    start = parse_instant(start_date)
    end = parse_instant(end_date)
    total_days = math.ceil((end - start).total_seconds() / 86400)
    start_label = start.date().isoformat()
    end_label = end.date().isoformat()

    if not entries:
        return empty_cycle_stats(total_days, start_label, end_label)

    days_tracked = len(entries)
    average = sum(entry.rating or 0 for entry in entries) / days_tracked
    adherence = days_tracked / total_days * 100 if total_days > 0 else 0.0

    ratings = [entry.rating for entry in entries]
    excellent_days = sum(1 for rating in ratings if rating >= 8)
    good_days = sum(1 for rating in ratings if 6 <= rating < 8)
    poor_days = sum(1 for rating in ratings if 4 <= rating < 6)
    failed_days = sum(1 for rating in ratings if 0 < rating < 4)

    if average >= 8 and adherence >= 80:
        message = "Outstanding nutrition consistency throughout the cycle!"
    elif average >= 7 and adherence >= 70:
        message = "Solid nutrition adherence. Keep up the great work!"
    elif average >= 6:
        message = "Good progress, but room for improvement in consistency."
    elif adherence < 50:
        message = "Start tracking more consistently to build better habits."
    else:
        message = "Focus on improving nutrition quality and consistency."

    return CycleStats(
        total_days=total_days,
        days_tracked=days_tracked,
        average_rating=round_half_up(average, 1),
        adherence_percentage=round_int(adherence),
        excellent_days=excellent_days,
        good_days=good_days,
        poor_days=poor_days,
        failed_days=failed_days,
        on_track=average >= 7 and adherence >= 70,
        message=message,
        cycle_start_date=start_label,
        cycle_end_date=end_label,
    )


def meal_pattern_analysis(
    entries: Iterable[DailyTrackingEntry], max_issues: int = 2
) -> MealPatternSummary:
    """Rank the fixed meal slots by their average rating."""
    entries = list(entries)
    summaries = [_summarise_meal(meal, entries, max_issues) for meal in MEAL_SLOTS]
    sorted_meals = sorted(
        summaries,
        key=lambda summary: (summary.avg_rating is None, summary.avg_rating or 0),
    )
    rated = [summary for summary in sorted_meals if summary.count > 0]
    return MealPatternSummary(
        most_problematic=rated[0] if rated else None,
        best_performing=rated[-1] if rated else None,
        sorted_meals=sorted_meals,
    )


def _summarise_meal(
    meal: str, entries: list[DailyTrackingEntry], max_issues: int
) -> MealSummary:
    occurrences: list[MealIssue] = []
    for entry in entries:
        rating = entry.meals.get(meal)
        if rating is None or rating.rating <= 0:
            continue
        occurrences.append(
            MealIssue(date=entry.date, rating=rating.rating, notes=rating.notes)
        )

    if not occurrences:
        return MealSummary(meal=meal, avg_rating=None, count=0, issues=[])

    average = sum(item.rating for item in occurrences) / len(occurrences)
    issues = sorted(
        (item for item in occurrences if item.rating < MEAL_TARGET_RATING),
        key=lambda item: item.date,
        reverse=True,
    )
    return MealSummary(
        meal=meal,
        avg_rating=round_half_up(average, 1),
        count=len(occurrences),
        issues=issues[:max_issues],
    )


def derive_day_rating(meals: Mapping[str, MealRating], fallback: int) -> int:
    """Average the rated meals into a day rating, else keep the manual one."""
    ratings = [meal.rating for meal in meals.values() if meal.rating > 0]
    if not ratings:
        return fallback
    return round_int(sum(ratings) / len(ratings))


def rating_band(rating: int) -> str:
    """Classify a rating into the band used for display."""
    if rating >= 8:
        return "excellent"
    if rating >= 6:
        return "good"
    if rating >= 4:
        return "poor"
    if rating > 0:
        return "failed"
    return "unrated"


@dataclass
class NutritionTrackingService:
    """Service for daily tracking persistence and adherence stats."""

    repository: TrackingRepository
    config: AppConfigService

    def save_daily(  # noqa: PLR0913
        self,
        day: date,
        *,
        rating: int = 0,
        notes: str = "",
        adherence: Adherence = Adherence.NOT_SET,
        planned_calories: int = 0,
        actual_calories: int = 0,
        day_type: DayType = DayType.TRAINING,
        meals: Mapping[str, MealRating] | None = None,
    ) -> DailyTrackingEntry:
        """Replace the whole entry for a day and return what was stored."""
        entry = DailyTrackingEntry(
            date=day,
            rating=rating,
            notes=notes,
            adherence=adherence,
            planned_calories=planned_calories,
            actual_calories=actual_calories,
            day_type=day_type,
            meals=dict(meals or {}),
            timestamp=datetime.now(tz=UTC),
        )
        self.repository.put_entry(entry)
        return entry

    def import_entries(self, entries: list[DailyTrackingEntry]) -> int:
        """Store previously exported entries as-is."""
        self.repository.put_entries(entries)
        return len(entries)

    def get_daily(self, day: date) -> DailyTrackingEntry | None:
        """Return the entry for a day."""
        return self.repository.get_entry(day)

    def get_week(self, start: date) -> list[DaySlot]:
        """Return seven slots starting at ``start``, empty where untracked."""
        entries = self.repository.list_entries(start, start + timedelta(days=6))
        by_date = {entry.date: entry for entry in entries}
        return [DaySlot(date=day, entry=by_date.get(day)) for day in week_dates(start)]

    def get_weekly_stats(self, start: date) -> WeeklyStats:
        """Return adherence stats for the week starting at ``start``."""
        return weekly_stats(self.get_week(start))

    def get_cycle_stats(
        self, start_date: str | date, end_date: str | date
    ) -> CycleStats:
        """Return cycle-wide stats, or the empty state if dates are unusable."""
        try:
            entries = self.repository.list_entries(
                parse_day(start_date), parse_day(end_date)
            )
            return cycle_stats(start_date, end_date, entries)
        except ComputationError:
            _logger.warning(
                "Cycle stats unavailable for %s..%s", start_date, end_date, exc_info=True
            )
            return empty_cycle_stats()

    def get_meal_patterns(
        self, start_date: str | date, end_date: str | date
    ) -> MealPatternSummary:
        """Return meal pattern analysis for the cycle."""
        try:
            entries = self.repository.list_entries(
                parse_day(start_date), parse_day(end_date)
            )
        except ComputationError:
            _logger.warning(
                "Meal patterns unavailable for %s..%s",
                start_date,
                end_date,
                exc_info=True,
            )
            entries = []
        return meal_pattern_analysis(entries)

    def load_goals(self) -> NutritionGoals:
        """Return stored nutrition goals or the built-in defaults."""
        stored = self.config.get(GOALS_CONFIG_KEY)
        if not stored:
            return NutritionGoals()
        known = {item.name for item in fields(NutritionGoals)}
        return NutritionGoals(
            **{key: str(value) for key, value in stored.items() if key in known}
        )

    def save_goals(self, goals: NutritionGoals) -> None:
        """Persist nutrition goals."""
        self.config.set(GOALS_CONFIG_KEY, asdict(goals))
