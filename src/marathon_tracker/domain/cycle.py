"""Domain models for the training cycle calendar."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Phase:
    """A block of training weeks."""

    key: str
    name: str
    start_week: int
    end_week: int


@dataclass(frozen=True)
class RaceGoal:
    """Target finish time and pace for the race."""

    time: str
    pace: str
    pace_seconds: int


@dataclass(frozen=True)
class TrainingCycle:
    """Training plan from the first week up to race day."""

    start_date: date
    race_date: date
    total_weeks: int
    phases: tuple[Phase, ...]
    goal: RaceGoal


@dataclass(frozen=True)
class PhaseInfo:
    """Where a given week sits inside the plan."""

    key: str
    name: str
    week: int
    week_in_phase: int
    total_weeks_in_phase: int


@dataclass(frozen=True)
class CycleProgress:
    """Snapshot of progress through the cycle on a given day."""

    current_week: int
    total_weeks: int
    phase: str
    phase_key: str
    week_in_phase: int
    weeks_to_race: int
    days_to_race: int
    percent_complete: int
    start_date: date
    race_date: date


@dataclass(frozen=True)
class PaceRange:
    """Pace band for a phase of the plan."""

    min: str
    max: str
    phase: str


@dataclass(frozen=True)
class VolumeTarget:
    """Weekly kilometre target range."""

    min: int
    max: int
    target: int
