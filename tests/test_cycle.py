"""Tests for the training cycle calendar."""

from datetime import date

import pytest

from marathon_tracker.config import Settings
from marathon_tracker.domain.errors import InvalidConfigurationError
from marathon_tracker.services.cycle import (
    current_training_week,
    cycle_progress,
    days_to_race,
    format_training_week,
    is_within_cycle,
    load_training_cycle,
    phase_description,
    threshold_pace_for_week,
    training_phase,
    weekly_mp_target,
    weeks_to_race,
)


@pytest.fixture
def cycle(settings: Settings):  # type: ignore[no-untyped-def]
    return load_training_cycle(settings)


def test_cycle_loaded_from_settings(cycle) -> None:  # type: ignore[no-untyped-def]
    assert cycle.start_date == date(2026, 1, 19)
    assert cycle.race_date == date(2026, 5, 31)
    assert cycle.total_weeks == 20
    assert cycle.goal.pace_seconds == 242


def test_race_before_start_is_rejected(settings: Settings) -> None:
    broken = settings.model_copy(update={"race_date": date(2026, 1, 1)})

    with pytest.raises(InvalidConfigurationError):
        load_training_cycle(broken)


def test_current_training_week_is_clamped(cycle) -> None:  # type: ignore[no-untyped-def]
    assert current_training_week(cycle, date(2026, 1, 19)) == 1
    assert current_training_week(cycle, date(2026, 2, 2)) == 3
    assert current_training_week(cycle, date(2025, 12, 1)) == 1
    assert current_training_week(cycle, date(2026, 9, 1)) == 20


def test_training_phase(cycle) -> None:  # type: ignore[no-untyped-def]
    base = training_phase(cycle, 3)
    peak = training_phase(cycle, 10)

    assert (base.key, base.week_in_phase, base.total_weeks_in_phase) == ("base", 3, 4)
    assert (peak.name, peak.week_in_phase) == ("Peak", 2)
    assert training_phase(cycle, 25).name == "Off Season"


def test_race_countdown(cycle) -> None:  # type: ignore[no-untyped-def]
    assert weeks_to_race(cycle, date(2026, 5, 20)) == 2
    assert days_to_race(cycle, date(2026, 5, 20)) == 11
    assert weeks_to_race(cycle, date(2026, 6, 10)) == 0
    assert days_to_race(cycle, date(2026, 6, 10)) == 0


def test_is_within_cycle(cycle) -> None:  # type: ignore[no-untyped-def]
    assert is_within_cycle(cycle, date(2026, 1, 19))
    assert is_within_cycle(cycle, date(2026, 5, 31))
    assert not is_within_cycle(cycle, date(2026, 6, 1))


def test_cycle_progress(cycle) -> None:  # type: ignore[no-untyped-def]
    progress = cycle_progress(cycle, date(2026, 2, 2))

    assert progress.current_week == 3
    assert progress.phase == "Base Build"
    assert progress.percent_complete == 11
    assert progress.days_to_race == 118


def test_weekly_prescriptions(cycle) -> None:  # type: ignore[no-untyped-def]
    assert threshold_pace_for_week(10).min == "3:40/km"
    assert threshold_pace_for_week(18).phase == "general"
    assert weekly_mp_target(cycle, 10).target == 20
    assert weekly_mp_target(cycle, 2).target == 6


def test_week_labels(cycle) -> None:  # type: ignore[no-untyped-def]
    assert format_training_week(cycle, 3) == "Week 3/20 - Base Build"
    assert phase_description(cycle, 18) == "Taper (Week 18 of 20)"
