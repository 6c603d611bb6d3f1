"""Pydantic request models for the HTTP API."""

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from marathon_tracker.domain.carbs import CarbGuidelines
from marathon_tracker.domain.tracking import (
    MEAL_SLOTS,
    Adherence,
    DailyTrackingEntry,
    DayType,
    MealRating,
    NutritionGoals,
)
from marathon_tracker.services.adherence import derive_day_rating

_DEFAULT_GOALS = NutritionGoals()
_DEFAULT_GUIDELINES = CarbGuidelines()


class MealRatingPayload(BaseModel):
    """Rating for one meal slot."""

    rating: int = Field(default=0, ge=0, le=10)
    notes: str = ""

    def to_domain(self) -> MealRating:
        return MealRating(rating=self.rating, notes=self.notes)


class DailyTrackingPayload(BaseModel):
    """A full day of tracking; saving replaces whatever was stored."""

    rating: int | None = Field(default=None, ge=0, le=10)
    notes: str = ""
    adherence: Adherence = Adherence.NOT_SET
    planned_calories: int = Field(default=0, ge=0)
    actual_calories: int = Field(default=0, ge=0)
    day_type: DayType = DayType.TRAINING
    meals: dict[str, MealRatingPayload] = Field(default_factory=dict)

    @field_validator("meals")
    @classmethod
    def _known_meals(
        cls, value: dict[str, MealRatingPayload]
    ) -> dict[str, MealRatingPayload]:
        unknown = set(value) - set(MEAL_SLOTS)
        if unknown:
            raise ValueError(f"Unknown meal slots: {', '.join(sorted(unknown))}")
        return value

    def meal_ratings(self) -> dict[str, MealRating]:
        return {name: meal.to_domain() for name, meal in self.meals.items()}

    def day_rating(self) -> int:
        """The explicit rating, else the average of the rated meals."""
        if self.rating is not None:
            return self.rating
        return derive_day_rating(self.meal_ratings(), 0)


class ImportedDayPayload(DailyTrackingPayload):
    """A previously exported day, stored with its original write time."""

    day: date = Field(alias="date")
    timestamp: datetime | None = None

    def to_domain(self) -> DailyTrackingEntry:
        return DailyTrackingEntry(
            date=self.day,
            rating=self.day_rating(),
            notes=self.notes,
            adherence=self.adherence,
            planned_calories=self.planned_calories,
            actual_calories=self.actual_calories,
            day_type=self.day_type,
            meals=self.meal_ratings(),
            timestamp=self.timestamp,
        )


class CarbIntakePayload(BaseModel):
    """Carbohydrates consumed during an activity."""

    carb_grams: int = Field(ge=0)
    notes: str = ""


class CarbGuidelinesPayload(BaseModel):
    """Carb supplementation guidelines."""

    carbs_per_30_min: float = Field(default=_DEFAULT_GUIDELINES.carbs_per_30_min, gt=0)
    min_duration_minutes: int = Field(
        default=_DEFAULT_GUIDELINES.min_duration_minutes, ge=0
    )
    enabled: bool = True

    def to_domain(self) -> CarbGuidelines:
        return CarbGuidelines(
            carbs_per_30_min=self.carbs_per_30_min,
            min_duration_minutes=self.min_duration_minutes,
            enabled=self.enabled,
        )


class NutritionGoalsPayload(BaseModel):
    """Free-text nutrition goals; omitted fields fall back to defaults."""

    primary: str = _DEFAULT_GOALS.primary
    description: str = _DEFAULT_GOALS.description
    weekly_target: str = _DEFAULT_GOALS.weekly_target
    calorie_strategy: str = _DEFAULT_GOALS.calorie_strategy
    protein_target: str = _DEFAULT_GOALS.protein_target
    carb_target: str = _DEFAULT_GOALS.carb_target
    expected_outcome: str = _DEFAULT_GOALS.expected_outcome

    def to_domain(self) -> NutritionGoals:
        return NutritionGoals(**self.model_dump())
