"""Carbohydrate supplementation tracking for long runs."""

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import asdict, dataclass
from datetime import UTC, date, datetime
from typing import Protocol

from marathon_tracker.domain.activities import Activity
from marathon_tracker.domain.carbs import (
    CarbCompliance,
    CarbGuidelines,
    CarbIntakeEntry,
    CarbTrackingRecord,
    CycleCarbStats,
    WeeklyCarbStats,
)
from marathon_tracker.domain.errors import ComputationError, InvalidConfigurationError
from marathon_tracker.services.app_config import AppConfigService
from marathon_tracker.services.dates import parse_day, week_start
from marathon_tracker.services.rounding import round_int

GUIDELINES_CONFIG_KEY = "carbGuidelines"
PERIOD_MINUTES = 30
COMPLIANT_PERCENTAGE = 70

_logger = logging.getLogger(__name__)


class CarbIntakeRepository(Protocol):
    """Persistence interface for per-activity carb intake."""

    def get_intake(self, activity_id: str) -> CarbIntakeEntry | None:
        """Return the intake logged for an activity."""

    def put_intake(self, entry: CarbIntakeEntry) -> None:
        """Insert or replace the intake for its activity."""

    def list_intakes(self, activity_ids: list[str]) -> dict[str, CarbIntakeEntry]:
        """Return logged intakes keyed by activity id."""


def expected_carbs(duration_minutes: float, guidelines: CarbGuidelines | None) -> int:
    """Return grams of carbohydrate expected during a run.

    Gels are counted per full 30 minutes of running; the minimum duration
    only decides whether the run needs supplementation at all.
    """
    if guidelines is None:
        raise InvalidConfigurationError("Carb guidelines must be loaded first")
    if duration_minutes <= guidelines.min_duration_minutes:
        return 0
    periods = math.floor(duration_minutes / PERIOD_MINUTES)
    return round_int(periods * guidelines.carbs_per_30_min)


def compliance(actual: int, expected: int) -> CarbCompliance | None:
    """Compare actual intake to the expected amount; None when not applicable.

    ``level`` is banded on the unrounded ratio, so it can disagree with the
    rounded ``percentage``: 179 of 200 g reports 90% but level "good". Use
    ``level`` as given rather than re-deriving it from ``percentage``.
    """
    if expected == 0:
        return None
    percentage = actual / expected * 100
    if percentage >= 90:
        level = "excellent"
    elif percentage >= 70:
        level = "good"
    elif percentage >= 50:
        level = "fair"
    else:
        level = "poor"
    return CarbCompliance(
        percentage=round_int(percentage),
        level=level,
        actual=actual,
        expected=expected,
        difference=actual - expected,
    )


def is_eligible(activity: Activity, guidelines: CarbGuidelines) -> bool:
    """Return True for runs long enough to require supplementation."""
    return activity.is_run and activity.duration_minutes > guidelines.min_duration_minutes


def tracking_for_range(
    start_date: str | date,
    end_date: str | date,
    activities: Iterable[Activity],
    guidelines: CarbGuidelines | None,
    intakes: Mapping[str, CarbIntakeEntry],
) -> list[CarbTrackingRecord]:
    """Join eligible runs within the range to their logged intake."""
    if guidelines is None:
        raise InvalidConfigurationError("Carb guidelines must be loaded first")
    start = parse_day(start_date)
    end = parse_day(end_date)

    records = []
    for activity in activities:
        if not is_eligible(activity, guidelines):
            continue
        try:
            day = parse_day(activity.local_date)
        except ComputationError:
            continue
        if not start <= day <= end:
            continue
        duration = activity.duration_minutes
        expected = expected_carbs(duration, guidelines)
        intake = intakes.get(activity.id)
        records.append(
            CarbTrackingRecord(
                activity_id=activity.id,
                date=activity.start_date_local,
                name=activity.name,
                duration=round_int(duration),
                expected=expected,
                actual=intake.carb_grams if intake else None,
                tracked=intake is not None,
                compliance=(
                    compliance(intake.carb_grams, expected) if intake else None
                ),
            )
        )
    return records


@dataclass
class _Totals:
    total: int = 0
    tracked: int = 0
    compliant: int = 0
    expected: int = 0
    actual: int = 0

    def add(self, record: CarbTrackingRecord) -> None:
        self.total += 1
        if not record.tracked:
            return
        self.tracked += 1
        self.expected += record.expected
        self.actual += record.actual or 0
        if (
            record.compliance
            and record.compliance.percentage >= COMPLIANT_PERCENTAGE
        ):
            self.compliant += 1

    @property
    def tracking_percentage(self) -> int:
        return _percentage(self.tracked, self.total)

    @property
    def compliance_percentage(self) -> int:
        return _percentage(self.compliant, self.tracked)

    @property
    def overall_compliance(self) -> int:
        return _percentage(self.actual, self.expected)


def _percentage(part: float, whole: float) -> int:
    return round_int(part / whole * 100) if whole > 0 else 0


def weekly_carb_stats(
    records: Sequence[CarbTrackingRecord],
) -> dict[str, WeeklyCarbStats]:
    """Roll records up into Monday-starting weeks keyed by ISO date."""
    by_week: dict[str, _Totals] = {}
    for record in records:
        key = week_start(parse_day(record.date)).isoformat()
        by_week.setdefault(key, _Totals()).add(record)

    return {
        key: WeeklyCarbStats(
            total_activities=totals.total,
            tracked_activities=totals.tracked,
            compliant_activities=totals.compliant,
            total_expected=totals.expected,
            total_actual=totals.actual,
            tracking_percentage=totals.tracking_percentage,
            compliance_percentage=totals.compliance_percentage,
            overall_compliance=totals.overall_compliance,
        )
        for key, totals in by_week.items()
    }


def cycle_carb_stats(records: Sequence[CarbTrackingRecord]) -> CycleCarbStats:
    """Roll all records up into cycle-wide stats with a summary message."""
    totals = _Totals()
    for record in records:
        totals.add(record)

    # Tracking coverage is checked before compliance.
    if totals.tracking_percentage < 50:
        message = "Start tracking more consistently to see meaningful progress."
    elif totals.compliance_percentage >= 80:
        message = "Excellent carb supplementation adherence!"
    elif totals.compliance_percentage >= 60:
        message = "Good adherence to carb guidelines. Keep it up!"
    else:
        message = "Focus on hitting your carb targets on long runs."

    return CycleCarbStats(
        total_activities=totals.total,
        tracked_activities=totals.tracked,
        compliant_activities=totals.compliant,
        total_expected=totals.expected,
        total_actual=totals.actual,
        tracking_percentage=totals.tracking_percentage,
        compliance_percentage=totals.compliance_percentage,
        overall_compliance=totals.overall_compliance,
        message=message,
    )


@dataclass
class CarbTrackingService:
    """Service for carb intake persistence and adherence stats."""

    repository: CarbIntakeRepository
    config: AppConfigService

    def save_intake(
        self, activity_id: str, carb_grams: int, notes: str = ""
    ) -> CarbIntakeEntry:
        """Record carbs consumed during an activity."""
        entry = CarbIntakeEntry(
            activity_id=activity_id,
            carb_grams=carb_grams,
            notes=notes,
            timestamp=datetime.now(tz=UTC),
        )
        self.repository.put_intake(entry)
        return entry

    def get_intake(self, activity_id: str) -> CarbIntakeEntry | None:
        """Return the intake logged for an activity."""
        return self.repository.get_intake(activity_id)

    def get_guidelines(self) -> CarbGuidelines:
        """Return stored guidelines, persisting the defaults on first use."""
        stored = self.config.get(GUIDELINES_CONFIG_KEY)
        if stored:
            defaults = CarbGuidelines()
            return CarbGuidelines(
                carbs_per_30_min=float(
                    stored.get("carbs_per_30_min", defaults.carbs_per_30_min)
                ),
                min_duration_minutes=int(
                    stored.get("min_duration_minutes", defaults.min_duration_minutes)
                ),
                enabled=bool(stored.get("enabled", defaults.enabled)),
            )
        guidelines = CarbGuidelines()
        self.save_guidelines(guidelines)
        _logger.info("Stored default carb guidelines")
        return guidelines

    def save_guidelines(self, guidelines: CarbGuidelines) -> None:
        """Persist guidelines."""
        self.config.set(GUIDELINES_CONFIG_KEY, asdict(guidelines))

    def tracking_for_range(
        self,
        start_date: str | date,
        end_date: str | date,
        activities: Sequence[Activity],
        guidelines: CarbGuidelines | None,
    ) -> list[CarbTrackingRecord]:
        """Return tracking records, or an empty list if dates are unusable."""
        if guidelines is None:
            raise InvalidConfigurationError("Carb guidelines must be loaded first")
        eligible_ids = [
            activity.id for activity in activities if is_eligible(activity, guidelines)
        ]
        intakes = self.repository.list_intakes(eligible_ids) if eligible_ids else {}
        try:
            return tracking_for_range(
                start_date, end_date, activities, guidelines, intakes
            )
        except ComputationError:
            _logger.warning(
                "Carb tracking unavailable for %s..%s",
                start_date,
                end_date,
                exc_info=True,
            )
            return []

    def get_weekly_stats(
        self, records: Sequence[CarbTrackingRecord]
    ) -> dict[str, WeeklyCarbStats]:
        """Return weekly roll-ups, or no weeks if a record date is unusable."""
        try:
            return weekly_carb_stats(records)
        except ComputationError:
            _logger.warning("Weekly carb stats unavailable", exc_info=True)
            return {}

    def get_cycle_stats(self, records: Sequence[CarbTrackingRecord]) -> CycleCarbStats:
        """Return cycle-wide roll-up."""
        return cycle_carb_stats(records)
