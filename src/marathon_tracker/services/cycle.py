"""Training cycle calendar: weeks, phases and race countdown."""

import math
from datetime import date

from marathon_tracker.config import Settings
from marathon_tracker.domain.cycle import (
    CycleProgress,
    PaceRange,
    Phase,
    PhaseInfo,
    RaceGoal,
    TrainingCycle,
    VolumeTarget,
)
from marathon_tracker.domain.errors import InvalidConfigurationError
from marathon_tracker.services.rounding import round_int
from marathon_tracker.services.training import pace_to_seconds

DEFAULT_PHASES = (
    Phase(key="base", name="Base Build", start_week=1, end_week=4),
    Phase(key="build", name="Build", start_week=5, end_week=8),
    Phase(key="peak", name="Peak", start_week=9, end_week=16),
    Phase(key="taper", name="Taper", start_week=17, end_week=20),
)

_MP_TARGETS = {
    "base": VolumeTarget(min=4, max=8, target=6),
    "build": VolumeTarget(min=8, max=15, target=12),
    "peak": VolumeTarget(min=15, max=25, target=20),
    "taper": VolumeTarget(min=3, max=8, target=5),
}
_DEFAULT_MP_TARGET = VolumeTarget(min=10, max=20, target=15)


def load_training_cycle(settings: Settings) -> TrainingCycle:
    """Build the training cycle from settings.

    Callers keep the returned value and pass it to every calendar function.
    """
    if settings.race_date <= settings.cycle_start_date:
        raise InvalidConfigurationError("Race date must be after the cycle start")
    return TrainingCycle(
        start_date=settings.cycle_start_date,
        race_date=settings.race_date,
        total_weeks=settings.cycle_total_weeks,
        phases=DEFAULT_PHASES,
        goal=RaceGoal(
            time=settings.goal_time,
            pace=settings.goal_pace,
            pace_seconds=pace_to_seconds(settings.goal_pace),
        ),
    )


def current_training_week(cycle: TrainingCycle, on: date) -> int:
    """Return the 1-based plan week for a day, clamped to the plan length."""
    week = (on - cycle.start_date).days // 7 + 1
    return max(1, min(week, cycle.total_weeks))


def training_phase(cycle: TrainingCycle, week: int) -> PhaseInfo:
    """Return the phase a plan week belongs to."""
    for phase in cycle.phases:
        if phase.start_week <= week <= phase.end_week:
            return PhaseInfo(
                key=phase.key,
                name=phase.name,
                week=week,
                week_in_phase=week - phase.start_week + 1,
                total_weeks_in_phase=phase.end_week - phase.start_week + 1,
            )
    return PhaseInfo(
        key="unknown", name="Off Season", week=week, week_in_phase=0, total_weeks_in_phase=0
    )


def weeks_to_race(cycle: TrainingCycle, on: date) -> int:
    """Whole or partial weeks left until race day."""
    return max(0, math.ceil((cycle.race_date - on).days / 7))


def days_to_race(cycle: TrainingCycle, on: date) -> int:
    """Days left until race day."""
    return max(0, (cycle.race_date - on).days)


def is_within_cycle(cycle: TrainingCycle, on: date) -> bool:
    """Return True for days between the start and race day inclusive."""
    return cycle.start_date <= on <= cycle.race_date


def cycle_progress(cycle: TrainingCycle, on: date) -> CycleProgress:
    """Summarise where ``on`` falls in the cycle."""
    week = current_training_week(cycle, on)
    phase = training_phase(cycle, week)
    total_days = (cycle.race_date - cycle.start_date).days
    completed = (on - cycle.start_date).days
    return CycleProgress(
        current_week=week,
        total_weeks=cycle.total_weeks,
        phase=phase.name,
        phase_key=phase.key,
        week_in_phase=phase.week_in_phase,
        weeks_to_race=weeks_to_race(cycle, on),
        days_to_race=days_to_race(cycle, on),
        percent_complete=round_int(completed / total_days * 100) if total_days else 0,
        start_date=cycle.start_date,
        race_date=cycle.race_date,
    )


def threshold_pace_for_week(week: int) -> PaceRange:
    """Threshold pace band prescribed for a plan week."""
    if 1 <= week <= 4:
        return PaceRange(min="3:50/km", max="3:55/km", phase="building")
    if 5 <= week <= 8:
        return PaceRange(min="3:45/km", max="3:50/km", phase="established")
    if 9 <= week <= 11:
        return PaceRange(min="3:40/km", max="3:45/km", phase="peak")
    if 12 <= week <= 14:
        return PaceRange(min="3:45/km", max="3:50/km", phase="taper maintenance")
    return PaceRange(min="3:45/km", max="3:55/km", phase="general")


def weekly_mp_target(cycle: TrainingCycle, week: int) -> VolumeTarget:
    """Marathon-pace kilometres to aim for in a plan week."""
    return _MP_TARGETS.get(training_phase(cycle, week).key, _DEFAULT_MP_TARGET)


def format_training_week(cycle: TrainingCycle, week: int) -> str:
    """E.g. ``Week 3/20 - Base Build``."""
    return f"Week {week}/{cycle.total_weeks} - {training_phase(cycle, week).name}"


def phase_description(cycle: TrainingCycle, week: int) -> str:
    """E.g. ``Base Build (Week 3 of 20)``."""
    return f"{training_phase(cycle, week).name} (Week {week} of {cycle.total_weeks})"
