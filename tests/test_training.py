"""Tests for pace and volume calculations."""

import pytest

from marathon_tracker.domain.activities import Activity, ActivityInterval
from marathon_tracker.services.training import (
    classify_training_zone,
    format_duration,
    intensity_distribution,
    is_marathon_pace,
    km_at_easy,
    km_at_marathon_pace,
    km_at_threshold,
    meters_per_second_to_pace,
    pace_to_seconds,
    parse_intervals,
    progress_to_goal,
    seconds_to_pace,
    weekly_volume,
)


def _segment(distance: float, pace_seconds: float, type_: str = "WORK") -> ActivityInterval:
    return ActivityInterval(
        id=None,
        type=type_,
        distance=distance,
        moving_time=int(distance / 1000 * pace_seconds),
        average_speed=1000 / pace_seconds,
    )


def _session(activity_type: str = "Run") -> Activity:
    return Activity(
        id="i1",
        start_date_local="2026-02-03T07:00:00",
        type=activity_type,
        distance=10100,
        intervals=[
            _segment(5000, 242),
            _segment(100, 242),
            _segment(3000, 230),
            _segment(2000, 300, "RECOVERY"),
        ],
    )


def test_pace_conversions() -> None:
    assert pace_to_seconds("4:02/km") == 242
    assert pace_to_seconds("bad") == 0
    assert pace_to_seconds(None) == 0
    assert seconds_to_pace(242) == "4:02/km"
    assert seconds_to_pace(0) == "0:00/km"
    assert meters_per_second_to_pace(4.0) == "4:10/km"
    assert meters_per_second_to_pace(None) == "0:00/km"


def test_is_marathon_pace_tolerance() -> None:
    assert is_marathon_pace("4:05/km", "4:02/km")
    assert not is_marathon_pace("4:10/km", "4:02/km")
    assert is_marathon_pace(248, 242, tolerance_seconds=6)


@pytest.mark.parametrize(
    ("pace", "zone"),
    [
        (210, "speed"),
        (225, "threshold"),
        (240, "marathon_pace"),
        (236, "tempo"),
        (260, "tempo"),
        (290, "easy"),
    ],
)
def test_classify_training_zone(pace: float, zone: str) -> None:
    assert classify_training_zone(pace) == zone


def test_km_by_zone_ignores_short_segments() -> None:
    activities = [_session()]

    assert km_at_marathon_pace(activities) == 5.0
    assert km_at_threshold(activities) == 3.0
    assert km_at_easy(activities) == 2.0


def test_km_by_zone_ignores_other_sports() -> None:
    activities = [_session("Ride")]

    assert km_at_marathon_pace(activities) == 0
    assert intensity_distribution(activities).total == 0


def test_intensity_distribution_includes_all_segments() -> None:
    distribution = intensity_distribution([_session()])

    assert distribution.marathon_pace == 5.1
    assert distribution.threshold == 3.0
    assert distribution.easy == 2.0
    assert distribution.total == 10.1


def test_weekly_volume_groups_by_monday() -> None:
    activities = [
        Activity(id="a", start_date_local="2026-02-03T07:00:00", type="Run",
                 distance=10000, average_speed=1000 / 300, training_load=50),
        Activity(id="b", start_date_local="2026-02-01T07:00:00", type="Run",
                 distance=20000, average_speed=1000 / 228, training_load=120),
        Activity(id="c", start_date_local="2026-02-05T07:00:00", type="Ride",
                 distance=40000),
        Activity(id="d", start_date_local="2026-02-06T07:00:00", type="Run",
                 distance=8000, training_load=30),
    ]

    weeks = weekly_volume(activities)

    assert [week.week for week in weeks] == ["2026-01-26", "2026-02-02"]
    assert weeks[0].km_at_threshold == 20
    assert weeks[1].total_km == 18
    assert weeks[1].sessions == 2
    assert weeks[1].total_load == 80
    assert weeks[1].km_at_easy == 10


def test_progress_to_goal_is_capped() -> None:
    assert progress_to_goal(5, 20) == 25
    assert progress_to_goal(30, 20) == 100
    assert progress_to_goal(5, 0) == 0


def test_parse_intervals_formats_segments() -> None:
    parsed = parse_intervals([_segment(1000, 250)])

    assert parsed[0].distance_km == 1
    assert parsed[0].avg_pace == "4:10/km"
    assert parsed[0].zone == "tempo"


def test_format_duration() -> None:
    assert format_duration(3725) == "1:02:05"
    assert format_duration(125) == "2:05"
