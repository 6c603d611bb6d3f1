"""Workout adaptation advice from readiness and recent performance."""

import re

from marathon_tracker.domain.activities import Activity, PlannedWorkout
from marathon_tracker.domain.training import (
    PerformanceAnalysis,
    Readiness,
    WorkoutAdaptation,
    WorkoutDetails,
)

HIGH_AVG_HR = 165
HIGH_LOAD = 80
MAX_PACE_VARIABILITY = 10

_QUALITY_PATTERN = re.compile(
    r"threshold|tempo|interval|speed|marathon pace|\bmp\b", re.IGNORECASE
)
_EASY_PATTERN = re.compile(r"easy|recovery|jog", re.IGNORECASE)


def analyze_today_performance(activity: Activity | None) -> PerformanceAnalysis:
    """Flag stress signals in a completed session."""
    if activity is None:
        return PerformanceAnalysis(completed=False, quality="unknown", concerns=[])

    concerns: list[str] = []
    quality = "good"

    avg_pace = None
    if activity.distance > 0 and activity.moving_time > 0:
        avg_pace = activity.moving_time / (activity.distance / 1000)

    if activity.average_heartrate and activity.average_heartrate > HIGH_AVG_HR:
        concerns.append("High average HR - may indicate elevated effort/stress")
        quality = "concerning"

    if activity.training_load > HIGH_LOAD:
        concerns.append("High training load - ensure adequate recovery")
        quality = "high_load"

    work = [
        interval.average_speed
        for interval in activity.intervals
        if interval.type in {None, "WORK", "ACTIVE"} and interval.average_speed
    ]
    if len(work) > 2:
        mean_speed = sum(work) / len(work)
        deviation = max(abs(speed - mean_speed) for speed in work)
        if deviation / mean_speed * 100 > MAX_PACE_VARIABILITY:
            concerns.append("High pace variability in intervals - pacing inconsistent")
            quality = "inconsistent"

    return PerformanceAnalysis(
        completed=True,
        quality=quality,
        concerns=concerns,
        avg_hr=activity.average_heartrate,
        avg_power=activity.average_watts,
        avg_pace=avg_pace,
        load=activity.training_load,
        distance=activity.distance,
    )


def generate_workout_adaptations(  # noqa: PLR0912, PLR0915
    planned: PlannedWorkout | None,
    readiness: Readiness | None,
    performance: PerformanceAnalysis | None = None,
) -> WorkoutAdaptation | None:
    """Recommend proceeding with, modifying or aborting a planned workout.

    Returns None when there is no workout or no readiness score to judge by.
    """
    if planned is None or readiness is None or readiness.score is None:
        return None

    adaptations: list[str] = []
    warnings: list[str] = []
    score = readiness.score
    metrics = readiness.metrics

    text = f"{planned.name} {planned.description}"
    is_quality = bool(_QUALITY_PATTERN.search(text))
    is_long_run = "long" in text.lower() or planned.load > HIGH_LOAD
    is_easy = bool(_EASY_PATTERN.search(text))

    form = metrics.get("form")
    very_fatigued = form is not None and form < -20
    moderately_fatigued = form is not None and form < -10
    elevated_hr = metrics.get("resting_hr", 0) > 55
    sleep_hours = metrics.get("sleep_hours")
    poor_sleep = sleep_hours is not None and sleep_hours < 6
    low_hrv = "hrv" in metrics and metrics["hrv"] < 30

    if performance and performance.completed:
        penalised = False
        if performance.load > HIGH_LOAD:
            penalised = True
            adaptations.append(
                f"Today's load ({performance.load:.0f} TSS) - consider impact on tomorrow"
            )
        if performance.quality in {"concerning", "inconsistent"}:
            penalised = True
            adaptations.append("Today's performance showed stress signals")
            adaptations.extend(f"  - {concern}" for concern in performance.concerns)
        if performance.quality == "high_load":
            penalised = True
        if penalised:
            adaptations.append(
                "Recovery consideration: today's session may affect tomorrow's readiness"
            )

    recommendation = "proceed"
    if score >= 85:
        if is_quality:
            adaptations.append("Excellent readiness - execute as planned")
            adaptations.append("Consider pushing the top end of pace ranges")
        elif is_long_run:
            adaptations.append("Good readiness for long run")
            adaptations.append("Can target higher end of volume if feeling strong")
        elif is_easy:
            adaptations.append("Easy day - maintain recovery pace despite feeling good")
            adaptations.append("Resist temptation to run harder")
    elif score >= 70:
        if is_quality:
            adaptations.append("Good readiness for quality work")
            adaptations.append("Execute as planned, monitor how body responds")
        elif is_long_run:
            adaptations.append("Proceed with long run as planned")
            if moderately_fatigued:
                adaptations.append("Consider running at lower end of pace range")
        elif is_easy:
            adaptations.append("Easy day - stick to easy pace")
    elif score >= 50:
        if is_quality:
            adaptations.append("Moderate readiness - adjust quality session")
            if moderately_fatigued:
                adaptations.append(
                    "Reduce volume by 15-20% OR reduce intensity by 5-10s/km"
                )
                adaptations.append("Shorten intervals and extend recoveries")
            if poor_sleep:
                adaptations.append("Poor sleep detected - consider reducing intensity")
            if low_hrv or elevated_hr:
                adaptations.append(
                    "Recovery markers poor - listen to your body during warmup"
                )
                adaptations.append("If HR elevated in first 10min, abort quality work")
            warnings.append("Monitor HR and perceived effort closely")
            recommendation = "modify"
        elif is_long_run:
            adaptations.append("Moderate readiness for long run")
            adaptations.append("Reduce distance by 10-15% OR run slower")
            adaptations.append("Focus on time on feet, not hitting specific paces")
            recommendation = "modify"
        elif is_easy:
            adaptations.append("Easy day appropriate for current state")
            adaptations.append("Keep HR <75% max, fully conversational")
    elif is_quality:
        adaptations.append("Poor readiness - DO NOT do quality work")
        adaptations.append("Convert to easy run or take rest day")
        adaptations.append("If running, keep HR below 70% max")
        if very_fatigued:
            warnings.append("Very high fatigue - strong consideration for complete rest")
        if elevated_hr:
            warnings.append("Elevated RHR may indicate illness/overtraining")
        recommendation = "abort"
    elif is_long_run:
        adaptations.append("Poor readiness - reschedule long run")
        adaptations.append("Replace with easy 60min or rest completely")
        warnings.append("Pushing through will increase injury/illness risk")
        recommendation = "abort"
    elif is_easy:
        adaptations.append("Even easy run may be too much")
        adaptations.append("Consider 30min easy jog or complete rest")
        adaptations.append("Walking or very light activity may be better option")
        recommendation = "modify"
    else:
        adaptations.append("Poor readiness - consider rest day")
        recommendation = "abort"

    if poor_sleep and not any("sleep" in item.lower() for item in adaptations):
        adaptations.append(
            f"Only {sleep_hours:.1f}h sleep - prioritize recovery over training"
        )

    weight_change = metrics.get("weight_change")
    if weight_change and abs(weight_change) > 1.5:
        adaptations.append(f"Weight change ({weight_change:+.1f}kg) - check hydration")

    return WorkoutAdaptation(
        recommendation=recommendation,
        adaptations=adaptations,
        warnings=warnings,
        readiness_score=score,
        readiness_status=readiness.status,
    )


def parse_workout_details(workout: PlannedWorkout | None) -> WorkoutDetails | None:
    """Classify a planned workout by its name and description."""
    if workout is None:
        return None
    text = f"{workout.name} {workout.description}".lower()
    if "easy" in text or "recovery" in text:
        workout_type = "easy"
    elif "long" in text:
        workout_type = "long_run"
    elif "threshold" in text or "tempo" in text:
        workout_type = "threshold"
    elif "interval" in text or "speed" in text:
        workout_type = "speed"
    elif "marathon pace" in text or re.search(r"\bmp\b", text):
        workout_type = "marathon_pace"
    else:
        workout_type = "other"
    return WorkoutDetails(
        name=workout.name,
        description=workout.description,
        type=workout_type,
        load=workout.load,
        date=workout.start_date_local,
    )
