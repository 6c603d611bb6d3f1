"""FastAPI application factory."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date, timedelta

import httpx
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from marathon_tracker.api.models import (
    CarbGuidelinesPayload,
    CarbIntakePayload,
    DailyTrackingPayload,
    ImportedDayPayload,
    NutritionGoalsPayload,
)
from marathon_tracker.app_logging import configure_logging
from marathon_tracker.containers import AppContainer
from marathon_tracker.domain.carbs import CarbTrackingRecord
from marathon_tracker.domain.errors import (
    IntervalsNotConfiguredError,
    InvalidConfigurationError,
)
from marathon_tracker.domain.tracking import DayType
from marathon_tracker.services.adaptation import (
    analyze_today_performance,
    generate_workout_adaptations,
    parse_workout_details,
)
from marathon_tracker.services.adherence import rating_band
from marathon_tracker.services.cross_training import (
    cycling_stats,
    strength_plan,
    strength_stats,
)
from marathon_tracker.services.cycle import (
    cycle_progress,
    format_training_week,
    is_within_cycle,
    phase_description,
    threshold_pace_for_week,
    weekly_mp_target,
)
from marathon_tracker.services.dates import week_start
from marathon_tracker.services.nutrition_plan import (
    athlete_profile,
    daily_nutrition_plan,
    planned_day_type,
    weekly_nutrition_overview,
)
from marathon_tracker.services.training import (
    intensity_distribution,
    km_at_easy,
    km_at_marathon_pace,
    km_at_threshold,
    parse_intervals,
    progress_to_goal,
    weekly_volume,
)
from marathon_tracker.services.wellness import analyze_readiness, wellness_baseline

WELLNESS_LOOKBACK_DAYS = 7


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(InvalidConfigurationError)
    @app.exception_handler(IntervalsNotConfiguredError)
    async def configuration_error(request: Request, exc: Exception) -> JSONResponse:
        logger.warning("Configuration error on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)}
        )

    @app.exception_handler(httpx.HTTPError)
    async def upstream_error(request: Request, exc: httpx.HTTPError) -> JSONResponse:
        logger.exception("intervals.icu request failed on %s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": "Activity source unavailable"},
        )

    def _container(request: Request) -> AppContainer:
        return request.app.state.container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/nutrition/days/{day}")
    async def get_day(day: date, request: Request) -> dict[str, object]:
        """Return the tracking entry for a day."""
        entry = _container(request).nutrition_service.get_daily(day)
        return {"date": day, "entry": entry}

    @app.put("/nutrition/days/{day}")
    async def save_day(
        day: date, payload: DailyTrackingPayload, request: Request
    ) -> dict[str, object]:
        """Replace the tracking entry for a day."""
        entry = _container(request).nutrition_service.save_daily(
            day,
            rating=payload.day_rating(),
            notes=payload.notes,
            adherence=payload.adherence,
            planned_calories=payload.planned_calories,
            actual_calories=payload.actual_calories,
            day_type=payload.day_type,
            meals=payload.meal_ratings(),
        )
        return {"date": day, "entry": entry}

    @app.post("/nutrition/import")
    async def import_days(
        payload: list[ImportedDayPayload], request: Request
    ) -> dict[str, object]:
        """Store exported days as-is, keeping their original timestamps."""
        imported = _container(request).nutrition_service.import_entries(
            [item.to_domain() for item in payload]
        )
        logger.info("Imported %s tracking days", imported)
        return {"imported": imported}

    @app.get("/nutrition/weekly")
    async def nutrition_weekly(
        request: Request, start: date | None = None
    ) -> dict[str, object]:
        """Return a week of tracking with its adherence stats."""
        service = _container(request).nutrition_service
        week = start or week_start(date.today())
        return {
            "start": week,
            "days": [
                {
                    "date": slot.date,
                    "entry": slot.entry,
                    "band": rating_band(slot.entry.rating) if slot.entry else None,
                }
                for slot in service.get_week(week)
            ],
            "stats": service.get_weekly_stats(week),
        }

    @app.get("/nutrition/cycle")
    async def nutrition_cycle(request: Request) -> dict[str, object]:
        """Return adherence stats across the training cycle."""
        state = _container(request)
        return {
            "stats": state.nutrition_service.get_cycle_stats(
                state.cycle.start_date, state.cycle.race_date
            )
        }

    @app.get("/nutrition/meals")
    async def nutrition_meals(request: Request) -> dict[str, object]:
        """Return per-meal patterns across the training cycle."""
        state = _container(request)
        return {
            "patterns": state.nutrition_service.get_meal_patterns(
                state.cycle.start_date, state.cycle.race_date
            )
        }

    @app.get("/nutrition/goals")
    async def get_goals(request: Request) -> dict[str, object]:
        """Return the nutrition goals."""
        return {"goals": _container(request).nutrition_service.load_goals()}

    @app.put("/nutrition/goals")
    async def save_goals(
        payload: NutritionGoalsPayload, request: Request
    ) -> dict[str, object]:
        """Replace the nutrition goals."""
        goals = payload.to_domain()
        _container(request).nutrition_service.save_goals(goals)
        return {"goals": goals}

    @app.get("/nutrition/plan")
    async def nutrition_plan(
        request: Request,
        on: date | None = None,
        day_type: DayType | None = None,
        intensity: str = "moderate",
    ) -> dict[str, object]:
        """Return energy and macro targets for a day.

        Without an explicit day type, the weekly pattern decides it.
        """
        day = on or date.today()
        plan = daily_nutrition_plan(
            day_type or planned_day_type(day),
            intensity,
            athlete_profile(_container(request).settings),
        )
        return {"date": day, "plan": plan}

    @app.get("/nutrition/plan/week")
    async def nutrition_plan_week() -> dict[str, object]:
        """Return the default day type for each weekday."""
        return {"days": weekly_nutrition_overview()}

    @app.get("/carbs/guidelines")
    async def get_guidelines(request: Request) -> dict[str, object]:
        """Return carb guidelines."""
        return {"guidelines": _container(request).carb_service.get_guidelines()}

    @app.put("/carbs/guidelines")
    async def save_guidelines(
        payload: CarbGuidelinesPayload, request: Request
    ) -> dict[str, object]:
        """Replace carb guidelines."""
        guidelines = payload.to_domain()
        _container(request).carb_service.save_guidelines(guidelines)
        return {"guidelines": guidelines}

    @app.get("/carbs/activities/{activity_id}")
    async def get_intake(activity_id: str, request: Request) -> dict[str, object]:
        """Return the carb intake logged for an activity."""
        return {"intake": _container(request).carb_service.get_intake(activity_id)}

    @app.put("/carbs/activities/{activity_id}")
    async def save_intake(
        activity_id: str, payload: CarbIntakePayload, request: Request
    ) -> dict[str, object]:
        """Log carbs consumed during an activity."""
        intake = _container(request).carb_service.save_intake(
            activity_id, payload.carb_grams, payload.notes
        )
        return {"intake": intake}

    async def _carb_records(
        state: AppContainer, start: date, end: date
    ) -> list[CarbTrackingRecord]:
        activities = await state.activity_service.list_activities(start, end)
        guidelines = state.carb_service.get_guidelines()
        return state.carb_service.tracking_for_range(start, end, activities, guidelines)

    @app.get("/carbs/tracking")
    async def carb_tracking(
        request: Request, start: date, end: date
    ) -> dict[str, object]:
        """Return eligible runs in a range with their logged intake."""
        return {"records": await _carb_records(_container(request), start, end)}

    @app.get("/carbs/weekly")
    async def carb_weekly(
        request: Request, start: date, end: date
    ) -> dict[str, object]:
        """Return carb adherence per Monday-starting week."""
        state = _container(request)
        records = await _carb_records(state, start, end)
        return {"weeks": state.carb_service.get_weekly_stats(records)}

    @app.get("/carbs/cycle")
    async def carb_cycle(request: Request) -> dict[str, object]:
        """Return carb adherence across the training cycle."""
        state = _container(request)
        records = await _carb_records(state, state.cycle.start_date, state.cycle.race_date)
        return {"stats": state.carb_service.get_cycle_stats(records)}

    @app.get("/cycle")
    async def cycle(request: Request, on: date | None = None) -> dict[str, object]:
        """Return where a day falls in the training cycle."""
        training_cycle = _container(request).cycle
        day = on or date.today()
        progress = cycle_progress(training_cycle, day)
        week = progress.current_week
        return {
            "progress": progress,
            "label": format_training_week(training_cycle, week),
            "description": phase_description(training_cycle, week),
            "within_cycle": is_within_cycle(training_cycle, day),
            "threshold_pace": threshold_pace_for_week(week),
            "mp_target": weekly_mp_target(training_cycle, week),
            "goal": training_cycle.goal,
        }

    @app.get("/training/summary")
    async def training_summary(
        request: Request, start: date, end: date
    ) -> dict[str, object]:
        """Return volume and intensity for runs in a range."""
        state = _container(request)
        activities = state.activity_service.attach_stored_intervals(
            await state.activity_service.list_activities(start, end)
        )
        mp_km = km_at_marathon_pace(activities, state.cycle.goal.pace)
        mp_target = weekly_mp_target(
            state.cycle, cycle_progress(state.cycle, end).current_week
        )
        return {
            "weeks": weekly_volume(activities),
            "intensity": intensity_distribution(activities),
            "km_at_marathon_pace": mp_km,
            "km_at_threshold": km_at_threshold(activities),
            "km_at_easy": km_at_easy(activities),
            "mp_progress": progress_to_goal(mp_km, mp_target.target),
        }

    @app.get("/cross-training")
    async def cross_training(
        request: Request, start: date, end: date
    ) -> dict[str, object]:
        """Return cycling and strength work in a range."""
        activities = await _container(request).activity_service.list_activities(
            start, end
        )
        return {
            "cycling": cycling_stats(activities),
            "strength": strength_stats(activities),
        }

    @app.get("/cross-training/strength-plan")
    async def strength_recommendations(
        request: Request, on: date | None = None
    ) -> dict[str, object]:
        """Return strength work suited to the current training phase."""
        return {"plan": strength_plan(_container(request).cycle, on or date.today())}

    @app.get("/activities/{activity_id}/intervals")
    async def activity_intervals(
        activity_id: str, request: Request
    ) -> dict[str, object]:
        """Return formatted interval segments for an activity."""
        intervals = await _container(request).activity_service.get_activity_intervals(
            activity_id
        )
        return {"intervals": parse_intervals(intervals)}

    @app.post("/activities/sync")
    async def sync_activities(
        request: Request, start: date, end: date
    ) -> dict[str, object]:
        """Refresh stored activities from intervals.icu."""
        activities = await _container(request).activity_service.sync_activities(
            start, end
        )
        logger.info("Synced %s activities for %s..%s", len(activities), start, end)
        return {"synced": len(activities)}

    @app.get("/readiness")
    async def readiness(request: Request, on: date | None = None) -> dict[str, object]:
        """Return readiness and advice for the next planned workout."""
        service = _container(request).activity_service
        day = on or date.today()
        wellness, planned, todays = await asyncio.gather(
            service.list_wellness(day - timedelta(days=WELLNESS_LOOKBACK_DAYS), day),
            service.get_next_planned_workout(day),
            service.list_activities(day, day),
        )
        latest = max(wellness, key=lambda record: record.date) if wellness else None
        baseline = wellness_baseline(
            [record for record in wellness if record is not latest]
        )
        current = analyze_readiness(latest, baseline)
        runs = service.attach_stored_intervals(
            [activity for activity in todays if activity.is_run]
        )
        performance = analyze_today_performance(runs[-1] if runs else None)
        return {
            "readiness": current,
            "performance": performance,
            "planned_workout": parse_workout_details(planned),
            "adaptation": generate_workout_adaptations(planned, current, performance),
        }

    return app
