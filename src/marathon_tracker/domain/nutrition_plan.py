"""Domain models for daily energy and macro planning."""

from dataclasses import dataclass

from marathon_tracker.domain.tracking import DayType


@dataclass(frozen=True)
class AthleteProfile:
    """Body metrics used for energy estimates."""

    weight_kg: float = 73.5
    height_cm: float = 175.0
    age: int = 35
    sex: str = "male"


@dataclass(frozen=True)
class MacroTarget:
    grams: int
    calories: int
    percent: int


@dataclass(frozen=True)
class MacroTargets:
    """Daily protein, carb and fat targets for a calorie total."""

    protein: MacroTarget
    carbs: MacroTarget
    fats: MacroTarget
    total: int


@dataclass(frozen=True)
class MealTarget:
    """Calorie share of one meal in the daily routine."""

    slot: str
    calories: int
    timing: str


@dataclass(frozen=True)
class Supplement:
    name: str
    dose: str
    timing: str
    notes: str


@dataclass(frozen=True)
class DailyNutritionPlan:
    """Energy needs, macro targets and meal split for one day."""

    day_type: DayType
    bmr: int
    tdee: int
    description: str
    targets: MacroTargets
    meals: list[MealTarget]
    hydration: dict[str, str]
    supplements: list[Supplement]
    tips: list[str]


@dataclass(frozen=True)
class PlannedDay:
    """Default nutrition day type for a weekday."""

    weekday: str
    day_type: DayType
    description: str
