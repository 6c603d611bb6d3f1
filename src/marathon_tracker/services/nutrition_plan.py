"""Energy expenditure, macro targets and daily meal split."""

from datetime import date

from marathon_tracker.config import Settings
from marathon_tracker.domain.nutrition_plan import (
    AthleteProfile,
    DailyNutritionPlan,
    MacroTarget,
    MacroTargets,
    MealTarget,
    PlannedDay,
    Supplement,
)
from marathon_tracker.domain.tracking import DayType
from marathon_tracker.services.rounding import round_int

DEFAULT_PROFILE = AthleteProfile()

RACE_MULTIPLIER = 2.0
_INTENSITY_MULTIPLIERS = {"easy": 1.5, "moderate": 1.7}
_HARD_MULTIPLIER = 1.85
_DAY_MULTIPLIERS = {DayType.REST: 1.3, DayType.CARB_LOAD: 1.6}

# (protein g/kg, carb %, fat %)
_MACRO_SPLITS = {
    DayType.REST: (1.6, 45, 30),
    DayType.CARB_LOAD: (1.6, 60, 20),
    DayType.TRAINING: (1.8, 55, 25),
}

# Early-morning run routine: fuel before, recovery breakfast after.
_MEAL_SHARES = (
    ("pre_training", 0.08, "04:30, 30-45 min before the run"),
    ("breakfast", 0.22, "06:00-06:30, within an hour after the run"),
    ("lunch", 0.35, "12:00"),
    ("afternoon_snack", 0.15, "15:00"),
    ("dinner", 0.15, "18:00"),
    ("pre_bed", 0.05, "20:00, an hour before sleep"),
)

_DESCRIPTIONS = {
    DayType.REST: "Full rest day - basal metabolism plus light activity",
    DayType.CARB_LOAD: "Day before the long run - muscle glycogen loading",
    DayType.TRAINING: "Regular training day - fuel the session and recovery",
}

_HYDRATION = {
    "base_water": "2.5-3L",
    "during_training": "500-750ml/hour",
    "post_training": "1.5x weight lost",
    "notes": "Pale urine indicates good hydration",
}

_BASE_SUPPLEMENTS = (
    Supplement("Creatine", "5g/day", "Any time", "Supports anaerobic performance"),
    Supplement("Omega-3", "1-2g/day", "With a meal", "Anti-inflammatory"),
    Supplement("Vitamin D", "2000-4000 IU/day", "Morning", "Bone health and immunity"),
)
_TRAINING_SUPPLEMENTS = (
    Supplement("Energy gel", "1 sachet/45min", "Long runs over 90 min", "20-25g fast carbs"),
    Supplement("BCAA (optional)", "5-10g", "During long sessions", "Limits muscle breakdown"),
)

_BASE_TIPS = (
    "Hydrate steadily through the day (2.5-3L of water)",
    "Use lactose-free dairy to avoid stomach discomfort",
    "Eat protein at every meal for muscle recovery",
    "Sleep 7-9 hours to maximise recovery",
)
_DAY_TIPS = {
    DayType.CARB_LOAD: (
        "Carb-loading day: high carbs, low fat",
        "Avoid high-fibre foods in the 24h before the long run",
        "Eat dinner early so it is digested before the long run",
        "Nothing new on race day - test every food in training",
        "Prepare gels and a banana for tomorrow's long run",
    ),
    DayType.REST: (
        "Full rest: take the chance to sleep in",
        "Focus on vegetables, protein and healthy fats",
        "Reduce carbs without cutting them out",
        "Good day to prepare meals for the week",
    ),
    DayType.TRAINING: (
        "Pre-run snack 30-45 min before the run",
        "Post-run breakfast is the most important meal of the day",
        "Afternoon oats keep energy steady",
        "Keep dinner moderate for good digestion before sleep",
    ),
}

WEEKLY_PATTERN = (
    PlannedDay("monday", DayType.TRAINING, "Moderate training"),
    PlannedDay("tuesday", DayType.TRAINING, "Quality session (threshold/speed)"),
    PlannedDay("wednesday", DayType.TRAINING, "Easy/recovery run"),
    PlannedDay("thursday", DayType.TRAINING, "Moderate training"),
    PlannedDay("friday", DayType.CARB_LOAD, "Day before the long run - carb loading"),
    PlannedDay("saturday", DayType.TRAINING, "Long run (high energy demand)"),
    PlannedDay("sunday", DayType.REST, "Full rest"),
)


def athlete_profile(settings: Settings) -> AthleteProfile:
    """Build the athlete profile from settings."""
    return AthleteProfile(
        weight_kg=settings.athlete_weight_kg,
        height_cm=settings.athlete_height_cm,
        age=settings.athlete_age,
        sex=settings.athlete_sex,
    )


def basal_metabolic_rate(profile: AthleteProfile = DEFAULT_PROFILE) -> float:
    """Mifflin-St Jeor basal metabolic rate in kcal."""
    base = 10 * profile.weight_kg + 6.25 * profile.height_cm - 5 * profile.age
    return base + 5 if profile.sex == "male" else base - 161


def calculate_tdee(
    day_type: DayType = DayType.TRAINING,
    intensity: str = "moderate",
    profile: AthleteProfile = DEFAULT_PROFILE,
    race_day: bool = False,
) -> int:
    """Total daily energy expenditure for a day.

    ``intensity`` only matters on training days; anything other than easy or
    moderate counts as hard.
    """
    if race_day:
        multiplier = RACE_MULTIPLIER
    elif day_type is DayType.TRAINING:
        multiplier = _INTENSITY_MULTIPLIERS.get(intensity, _HARD_MULTIPLIER)
    else:
        multiplier = _DAY_MULTIPLIERS[day_type]
    return round_int(basal_metabolic_rate(profile) * multiplier)


def calculate_macros(
    tdee: int,
    day_type: DayType = DayType.TRAINING,
    profile: AthleteProfile = DEFAULT_PROFILE,
) -> MacroTargets:
    """Split a calorie total into protein, carb and fat targets.

    Protein is set per kilogram of body weight; carbs and fats are fixed
    shares of the total, so the three percentages need not sum to 100.
    """
    protein_per_kg, carb_percent, fat_percent = _MACRO_SPLITS[day_type]
    protein_grams = profile.weight_kg * protein_per_kg
    protein_calories = protein_grams * 4
    carb_calories = tdee * carb_percent / 100
    fat_calories = tdee * fat_percent / 100
    return MacroTargets(
        protein=MacroTarget(
            grams=round_int(protein_grams),
            calories=round_int(protein_calories),
            percent=round_int(protein_calories / tdee * 100) if tdee else 0,
        ),
        carbs=MacroTarget(
            grams=round_int(carb_calories / 4),
            calories=round_int(carb_calories),
            percent=carb_percent,
        ),
        fats=MacroTarget(
            grams=round_int(fat_calories / 9),
            calories=round_int(fat_calories),
            percent=fat_percent,
        ),
        total=tdee,
    )


def meal_targets(total: int, day_type: DayType = DayType.TRAINING) -> list[MealTarget]:
    """Spread the daily total across the meal routine."""
    targets = []
    for slot, share, timing in _MEAL_SHARES:
        if slot == "pre_training" and day_type is DayType.REST:
            targets.append(MealTarget(slot=slot, calories=0, timing="No run today"))
            continue
        targets.append(
            MealTarget(slot=slot, calories=round_int(total * share), timing=timing)
        )
    return targets


def daily_nutrition_plan(
    day_type: DayType = DayType.TRAINING,
    intensity: str = "moderate",
    profile: AthleteProfile = DEFAULT_PROFILE,
) -> DailyNutritionPlan:
    """Assemble the full plan for a day type."""
    tdee = calculate_tdee(day_type, intensity, profile)
    targets = calculate_macros(tdee, day_type, profile)
    supplements = list(_BASE_SUPPLEMENTS)
    if day_type in {DayType.TRAINING, DayType.CARB_LOAD}:
        supplements.extend(_TRAINING_SUPPLEMENTS)
    return DailyNutritionPlan(
        day_type=day_type,
        bmr=round_int(basal_metabolic_rate(profile)),
        tdee=tdee,
        description=_DESCRIPTIONS[day_type],
        targets=targets,
        meals=meal_targets(tdee, day_type),
        hydration=dict(_HYDRATION),
        supplements=supplements,
        tips=[*_BASE_TIPS, *_DAY_TIPS[day_type]],
    )


def weekly_nutrition_overview() -> list[PlannedDay]:
    """Default day types for Monday through Sunday."""
    return list(WEEKLY_PATTERN)


def planned_day_type(day: date) -> DayType:
    """Day type the weekly pattern assigns to a date."""
    return WEEKLY_PATTERN[day.weekday()].day_type
