"""Training readiness from daily wellness metrics."""

from collections.abc import Sequence

from marathon_tracker.domain.activities import WellnessRecord
from marathon_tracker.domain.training import Readiness, WellnessBaseline


def analyze_readiness(  # noqa: PLR0912, PLR0915
    wellness: WellnessRecord | None, baseline: WellnessBaseline | None = None
) -> Readiness:
    """Score readiness from 0 to 100 and explain the adjustments.

    The score starts at 100 and is moved by form (CTL - ATL), resting HR,
    HRV, sleep, soreness and mood. With a baseline, resting HR and HRV are
    judged relative to it; without one, fixed thresholds apply.
    """
    if wellness is None:
        return Readiness(
            score=None,
            status="unknown",
            message="No wellness data available",
            insights=[],
        )

    insights: list[str] = []
    metrics: dict[str, float] = {}
    score = 100

    form = wellness.ctl - wellness.atl
    metrics["fitness"] = wellness.ctl
    metrics["fatigue"] = wellness.atl
    metrics["form"] = form
    if form < -20:
        insights.append("Very fatigued - consider easy day")
        score -= 30
    elif form < -10:
        insights.append("Moderately fatigued - monitor recovery")
        score -= 15
    elif form > 5:
        insights.append("Well rested - good for quality work")
        score += 10

    if wellness.resting_hr:
        metrics["resting_hr"] = wellness.resting_hr
        if baseline and baseline.resting_hr:
            hr_diff = wellness.resting_hr - baseline.resting_hr
            if hr_diff > 5:
                insights.append(
                    f"Elevated RHR (+{hr_diff:.0f} bpm) - possible fatigue/illness"
                )
                score -= 20
            elif hr_diff < -3:
                insights.append("Lower RHR - good recovery")
                score += 5
        elif wellness.resting_hr > 55:
            insights.append("Elevated RHR - monitor for overtraining")
            score -= 10

    if wellness.hrv:
        metrics["hrv"] = wellness.hrv
        if baseline and baseline.hrv:
            change = (wellness.hrv - baseline.hrv) / baseline.hrv * 100
            if change < -15:
                insights.append("HRV significantly down - stress/fatigue detected")
                score -= 20
            elif change < -5:
                insights.append("HRV slightly down - recovery incomplete")
                score -= 10
            elif change > 5:
                insights.append("HRV elevated - excellent recovery")
                score += 10
        elif wellness.hrv < 30:
            insights.append("Low HRV - consider easy day")
            score -= 10
        elif wellness.hrv > 60:
            insights.append("High HRV - well recovered")
            score += 5

    if wellness.sleep_quality is not None:
        metrics["sleep_quality"] = wellness.sleep_quality
        if wellness.sleep_quality <= 2:
            insights.append("Poor sleep - recovery compromised")
            score -= 15
        elif wellness.sleep_quality >= 4:
            insights.append("Good sleep - ready for training")
            score += 5

    if wellness.sleep_secs:
        sleep_hours = wellness.sleep_secs / 3600
        metrics["sleep_hours"] = sleep_hours
        if sleep_hours < 6:
            insights.append(f"Low sleep ({sleep_hours:.1f}h) - prioritize rest")
            score -= 15
        elif sleep_hours >= 8:
            insights.append(f"Good sleep ({sleep_hours:.1f}h)")
            score += 5

    if wellness.weight:
        metrics["weight"] = wellness.weight
        if baseline and baseline.weight:
            weight_change = wellness.weight - baseline.weight
            metrics["weight_change"] = weight_change
            if abs(weight_change) > 1.5:
                insights.append(
                    f"Weight change ({weight_change:+.1f}kg) - monitor hydration"
                )

    if wellness.soreness is not None:
        metrics["soreness"] = wellness.soreness
        if wellness.soreness >= 4:
            insights.append("High soreness - consider recovery day")
            score -= 10

    if wellness.mood is not None:
        metrics["mood"] = wellness.mood
        if wellness.mood <= 2:
            insights.append("Low mood - mental recovery needed")
            score -= 10

    score = max(0, min(100, score))
    if score >= 85:
        status, message = "excellent", "Excellent readiness for quality training"
    elif score >= 70:
        status, message = "good", "Good readiness for moderate training"
    elif score >= 50:
        status, message = "moderate", "Moderate readiness - monitor intensity"
    else:
        status, message = "poor", "Low readiness - prioritize recovery"

    if not insights:
        insights.append("Limited wellness data available")

    return Readiness(
        score=score, status=status, message=message, insights=insights, metrics=metrics
    )


def wellness_baseline(records: Sequence[WellnessRecord]) -> WellnessBaseline | None:
    """Average resting HR, HRV and weight over recent records."""
    if not records:
        return None
    return WellnessBaseline(
        resting_hr=_mean([record.resting_hr for record in records]),
        hrv=_mean([record.hrv for record in records]),
        weight=_mean([record.weight for record in records]),
    )


def _mean(values: list[float | None]) -> float | None:
    present = [value for value in values if value]
    if not present:
        return None
    return sum(present) / len(present)
