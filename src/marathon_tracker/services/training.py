"""Pace conversions, zone classification and volume summaries."""

import re
from collections.abc import Iterable

from marathon_tracker.domain.activities import Activity, ActivityInterval
from marathon_tracker.domain.training import (
    IntensityDistribution,
    ParsedInterval,
    WeeklyVolume,
    ZoneThresholds,
)
from marathon_tracker.services.dates import parse_day, week_start
from marathon_tracker.services.rounding import round_half_up, round_int

MIN_SEGMENT_METERS = 200
_PACE_PATTERN = re.compile(r"(\d+):(\d+)")
_DEFAULT_ZONES = ZoneThresholds()


def pace_to_seconds(pace: str | None) -> int:
    """Convert ``M:SS/km`` to seconds per km; 0 if unparseable."""
    if not pace:
        return 0
    match = _PACE_PATTERN.search(pace)
    if not match:
        return 0
    return int(match.group(1)) * 60 + int(match.group(2))


def seconds_to_pace(seconds: float) -> str:
    """Convert seconds per km to ``M:SS/km``."""
    if not seconds:
        return "0:00/km"
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}:{secs:02d}/km"


def meters_per_second_to_pace(speed: float | None) -> str:
    """Convert a speed in m/s to ``M:SS/km``."""
    if not speed:
        return "0:00/km"
    return seconds_to_pace(1000 / speed)


def is_marathon_pace(
    pace: str | float, target_pace: str | float, tolerance_seconds: float = 5
) -> bool:
    """Return True when ``pace`` is within tolerance of the target."""
    pace_seconds = pace_to_seconds(pace) if isinstance(pace, str) else pace
    target_seconds = (
        pace_to_seconds(target_pace) if isinstance(target_pace, str) else target_pace
    )
    return abs(pace_seconds - target_seconds) <= tolerance_seconds


def classify_training_zone(
    pace_seconds_per_km: float, zones: ZoneThresholds = _DEFAULT_ZONES
) -> str:
    """Classify a pace as speed, threshold, marathon_pace, easy or tempo."""
    if pace_seconds_per_km < zones.threshold_min:
        return "speed"
    if pace_seconds_per_km <= zones.threshold_max:
        return "threshold"
    if abs(pace_seconds_per_km - zones.marathon_pace) <= 5:
        return "marathon_pace"
    if pace_seconds_per_km >= zones.easy_min:
        return "easy"
    return "tempo"


def _run_segments(
    activities: Iterable[Activity], min_distance: float
) -> Iterable[tuple[ActivityInterval, float]]:
    """Yield qualifying interval segments with their pace in s/km."""
    for activity in activities:
        if activity.type != "Run":
            continue
        for interval in activity.intervals:
            if interval.distance >= min_distance and interval.average_speed:
                yield interval, 1000 / interval.average_speed


def km_at_marathon_pace(
    activities: Iterable[Activity],
    target_pace: str = "4:02/km",
    tolerance: float = 6,
    min_distance: float = MIN_SEGMENT_METERS,
) -> float:
    """Sum kilometres of segments run at marathon pace."""
    target = pace_to_seconds(target_pace)
    total = sum(
        interval.distance / 1000
        for interval, pace in _run_segments(activities, min_distance)
        if is_marathon_pace(pace, target, tolerance)
    )
    return round_half_up(total, 1)


def km_at_threshold(
    activities: Iterable[Activity],
    min_distance: float = MIN_SEGMENT_METERS,
    zones: ZoneThresholds = _DEFAULT_ZONES,
) -> float:
    """Sum kilometres of segments inside the threshold band."""
    total = sum(
        interval.distance / 1000
        for interval, pace in _run_segments(activities, min_distance)
        if zones.threshold_min <= pace <= zones.threshold_max
    )
    return round_half_up(total, 1)


def km_at_easy(
    activities: Iterable[Activity],
    min_distance: float = MIN_SEGMENT_METERS,
    zones: ZoneThresholds = _DEFAULT_ZONES,
) -> float:
    """Sum kilometres of segments at easy pace or slower."""
    total = sum(
        interval.distance / 1000
        for interval, pace in _run_segments(activities, min_distance)
        if pace >= zones.easy_min
    )
    return round_half_up(total, 1)


def weekly_volume(activities: Iterable[Activity]) -> list[WeeklyVolume]:
    """Summarise runs per Monday-starting week, oldest first.

    Threshold and easy kilometres are estimated from the activity's average
    pace; use :func:`km_at_marathon_pace` for interval-level accuracy.
    """
    weeks: dict[str, dict[str, float]] = {}
    for activity in activities:
        if activity.type != "Run":
            continue
        key = week_start(parse_day(activity.local_date)).isoformat()
        week = weeks.setdefault(
            key,
            {"total_km": 0.0, "total_load": 0.0, "sessions": 0, "threshold": 0.0, "easy": 0.0},
        )
        km = activity.distance / 1000
        week["total_km"] += km
        week["total_load"] += activity.training_load
        week["sessions"] += 1
        if activity.average_speed:
            zone = classify_training_zone(1000 / activity.average_speed)
            if zone == "threshold":
                week["threshold"] += km
            elif zone == "easy":
                week["easy"] += km

    return [
        WeeklyVolume(
            week=key,
            total_km=week["total_km"],
            total_load=week["total_load"],
            sessions=int(week["sessions"]),
            km_at_threshold=week["threshold"],
            km_at_easy=week["easy"],
        )
        for key, week in sorted(weeks.items())
    ]


def progress_to_goal(actual: float, target: float | None) -> int:
    """Percentage of a target reached, capped at 100."""
    if not target:
        return 0
    return min(100, round_int(actual / target * 100))


def parse_intervals(intervals: Iterable[ActivityInterval]) -> list[ParsedInterval]:
    """Format interval segments for display."""
    return [
        ParsedInterval(
            id=interval.id,
            type=interval.type,
            distance_km=interval.distance / 1000,
            duration=interval.moving_time,
            avg_pace=(
                meters_per_second_to_pace(interval.average_speed)
                if interval.average_speed
                else None
            ),
            avg_power=interval.average_watts,
            avg_hr=interval.average_heartrate,
            avg_cadence=interval.average_cadence,
            zone=(
                classify_training_zone(1000 / interval.average_speed)
                if interval.average_speed
                else None
            ),
        )
        for interval in intervals
    ]


def intensity_distribution(activities: Iterable[Activity]) -> IntensityDistribution:
    """Kilometres per zone over all run segments, warm-ups included."""
    buckets = {"easy": 0.0, "tempo": 0.0, "marathon_pace": 0.0, "threshold": 0.0, "speed": 0.0}
    for interval, pace in _run_segments(activities, min_distance=0):
        if interval.distance:
            buckets[classify_training_zone(pace)] += interval.distance / 1000

    return IntensityDistribution(
        easy=round_half_up(buckets["easy"], 1),
        tempo=round_half_up(buckets["tempo"], 1),
        marathon_pace=round_half_up(buckets["marathon_pace"], 1),
        threshold=round_half_up(buckets["threshold"], 1),
        speed=round_half_up(buckets["speed"], 1),
        total=round_half_up(sum(buckets.values()), 1),
    )


def format_duration(seconds: float) -> str:
    """Format seconds as ``H:MM:SS`` or ``M:SS``."""
    seconds = int(seconds)
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
