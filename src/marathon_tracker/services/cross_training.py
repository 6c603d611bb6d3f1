"""Cycling and strength sessions alongside the running plan."""

from collections.abc import Iterable
from datetime import date

from marathon_tracker.domain.activities import Activity
from marathon_tracker.domain.cross_training import (
    CyclingStats,
    RideSummary,
    RunningEquivalent,
    SessionTotals,
    StrengthPlan,
    StrengthStats,
)
from marathon_tracker.domain.cycle import TrainingCycle
from marathon_tracker.services.cycle import current_training_week, training_phase
from marathon_tracker.services.dates import parse_day, week_start
from marathon_tracker.services.rounding import round_half_up, round_int

CYCLING_TYPES = frozenset({"Ride", "VirtualRide"})
STRENGTH_TYPES = frozenset({"Other", "WeightTraining"})
STRENGTH_KEYWORDS = ("strength", "gym", "weights", "musculação")

DEFAULT_FTP = 250.0
RUN_TIME_FACTOR = 0.70
RUN_LOAD_FACTOR = 1.15

# (upper bound as fraction of FTP, zone, run km per ride km)
_CYCLING_ZONES = (
    (0.75, "Easy/Recovery", 0.275),
    (0.85, "Tempo", 0.325),
    (0.95, "Threshold", 0.375),
)
_VO2MAX_ZONE = ("VO2max", 0.425)

_REFERENCES = (
    "Balsalobre-Fernandez et al. (2016). Effects of strength training on running economy",
    "Beattie et al. (2014). The effect of strength training on performance in endurance athletes",
    "Mikkola et al. (2007). Neuromuscular and cardiovascular adaptations during "
    "concurrent strength and endurance training",
    "Taipale et al. (2010). Strength training in endurance runners",
)

# phase key -> (weekly minutes, focus, exercises, rationale)
_STRENGTH_BY_PHASE = {
    "base": (
        (60, 90),
        "General strength, muscle recruitment, injury prevention",
        (
            "Squats (3x8-12)",
            "Deadlifts (3x6-10)",
            "Single-leg RDLs (3x8 each)",
            "Lunges (3x10 each)",
            "Calf raises (3x15)",
            "Core work (planks, side planks)",
        ),
        "Build a muscular foundation and prevent injuries with high volume "
        "at moderate intensity.",
    ),
    "build": (
        (45, 60),
        "Power endurance, single-leg stability, plyometrics",
        (
            "Single-leg squats (3x6-8 each)",
            "Box jumps (3x8)",
            "Bulgarian split squats (3x8 each)",
            "Banded lateral walks (3x12)",
            "Calf hops (3x10)",
            "Core rotations",
        ),
        "Maintain strength while running volume increases and add explosive "
        "movements.",
    ),
    "peak": (
        (30, 45),
        "Maintenance, explosive power, minimal fatigue",
        (
            "Light squats (2x6)",
            "Quick box jumps (3x5)",
            "Single-leg balance work",
            "Banded clamshells (2x12)",
            "Explosive calf raises (3x8)",
            "Short core circuits",
        ),
        "Preserve neuromuscular capacity without adding fatigue: lower volume, "
        "same intensity.",
    ),
    "taper": (
        (20, 30),
        "Light maintenance only, preserve without fatigue",
        (
            "Bodyweight squats (2x8)",
            "Gentle lunges (2x6 each)",
            "Balance work",
            "Light core (planks only)",
            "Mobility work",
        ),
        "Keep strength adaptations without compromising recovery. Very light loads.",
    ),
}


def is_cycling(activity: Activity) -> bool:
    return activity.type in CYCLING_TYPES


def is_strength(activity: Activity) -> bool:
    """Strength sessions are logged as generic workouts named after the gym."""
    if activity.type not in STRENGTH_TYPES:
        return False
    name = activity.name.lower()
    return any(keyword in name for keyword in STRENGTH_KEYWORDS)


def running_equivalent(ride: Activity) -> RunningEquivalent:
    """Convert a ride into comparable running distance, time and load.

    Distance scales by a factor that grows with intensity relative to FTP.
    Running time is 70% of riding time and running load is 1.15x the ride load.
    """
    ftp = ride.ftp or DEFAULT_FTP
    intensity = (ride.average_watts or 0) / ftp
    zone, factor = _VO2MAX_ZONE
    for upper, name, zone_factor in _CYCLING_ZONES:
        if intensity < upper:
            zone, factor = name, zone_factor
            break

    cycling_km = ride.distance / 1000
    running_km = cycling_km * factor
    intensity_percent = round_int(intensity * 100)
    return RunningEquivalent(
        cycling_km=round_half_up(cycling_km, 2),
        cycling_minutes=round_int(ride.duration_minutes),
        intensity_percent=intensity_percent,
        intensity_zone=zone,
        conversion_factor=factor,
        running_km=round_half_up(running_km, 2),
        running_minutes=round_int(ride.duration_minutes * RUN_TIME_FACTOR),
        cycling_load=ride.training_load,
        running_load=round_int(ride.training_load * RUN_LOAD_FACTOR),
        formula=(
            f"{round_half_up(cycling_km, 1)}km ride @ {intensity_percent}% FTP"
            f" ~ {round_half_up(running_km, 1)}km run"
        ),
    )


def cycling_stats(activities: Iterable[Activity]) -> CyclingStats:
    """Summarise rides and their running equivalents.

    Equivalent totals add up the per-ride rounded values.
    """
    rides = [activity for activity in activities if is_cycling(activity)]
    summaries = [
        RideSummary(
            id=ride.id,
            date=ride.start_date_local,
            name=ride.name,
            distance_km=round_half_up(ride.distance / 1000, 2),
            duration_minutes=ride.moving_time // 60,
            avg_power=ride.average_watts,
            avg_hr=ride.average_heartrate,
            load=ride.training_load,
            running_equivalent=running_equivalent(ride),
        )
        for ride in rides
    ]
    equivalents = [summary.running_equivalent for summary in summaries]
    return CyclingStats(
        rides=summaries,
        sessions=len(rides),
        km=round_half_up(sum(ride.distance for ride in rides) / 1000, 2),
        minutes=round_int(sum(ride.moving_time for ride in rides) / 60),
        load=round_int(sum(ride.training_load for ride in rides)),
        equivalent_km=round_half_up(sum(item.running_km for item in equivalents), 2),
        equivalent_minutes=sum(item.running_minutes for item in equivalents),
        equivalent_load=sum(item.running_load for item in equivalents),
    )


def strength_stats(activities: Iterable[Activity]) -> StrengthStats:
    """Count strength sessions and minutes, grouped by week and month."""
    sessions = [activity for activity in activities if is_strength(activity)]
    by_week: dict[str, SessionTotals] = {}
    by_month: dict[str, SessionTotals] = {}
    for session in sessions:
        minutes = session.moving_time // 60
        day = parse_day(session.local_date)
        for groups, key in (
            (by_week, week_start(day).isoformat()),
            (by_month, day.strftime("%Y-%m")),
        ):
            current = groups.get(key, SessionTotals())
            groups[key] = SessionTotals(
                sessions=current.sessions + 1, minutes=current.minutes + minutes
            )

    total_minutes = sum(session.moving_time for session in sessions) // 60
    return StrengthStats(
        sessions=len(sessions),
        minutes=total_minutes,
        hours=round_half_up(total_minutes / 60, 1),
        by_week=by_week,
        by_month=by_month,
    )


def strength_plan(cycle: TrainingCycle, on: date) -> StrengthPlan:
    """Strength recommendations for the phase ``on`` falls in."""
    week = current_training_week(cycle, on)
    phase = training_phase(cycle, week)
    minutes, focus, exercises, rationale = _STRENGTH_BY_PHASE.get(
        phase.key, _STRENGTH_BY_PHASE["taper"]
    )
    return StrengthPlan(
        phase=phase.name,
        phase_key=phase.key,
        week=week,
        total_weeks=cycle.total_weeks,
        weekly_minutes=minutes,
        weekly_minutes_range=f"{minutes[0]}-{minutes[1]} min",
        focus=focus,
        exercises=exercises,
        rationale=rationale,
        references=_REFERENCES,
    )
