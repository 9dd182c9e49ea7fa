"""Baseline macro targets and in-workout fueling guidance.

Macros are grams per kg of body weight, picked by day type in priority
order race day > post-race > carb-loading > regular day. Only regular
days are shifted by the dietary goal. Calories are always derived from
the rounded macros, never set on their own.
"""

import math

from fuelbase.models import DayFlags, FuelingGuidance, NutritionTarget

# (protein, fat, carbs) grams per kg
RACE_DAY_MULTIPLIERS = (2.2, 1.7, 8.6)
POST_RACE_MULTIPLIERS = (1.7, 1.0, 5.2)
CARB_LOADING_MULTIPLIERS = (1.7, 1.0, 8.2)

REGULAR_MULTIPLIERS = {
    "none": (1.8, 1.0, 2.5),
    "easy": (1.8, 1.0, 2.5),
    "endurance": (1.8, 1.1, 4.3),
    "tempo": (1.7, 1.0, 6.4),
    "threshold": (1.7, 1.0, 6.4),
    "intervals": (1.7, 1.0, 6.4),
    "strength": (1.9, 1.1, 3.5),
}
UNRECOGNIZED_MULTIPLIERS = (1.7, 1.0, 2.5)

LONG_ENDURANCE_MINUTES = 120
LONG_ENDURANCE_EXTRA_CARBS = 1.0

WEIGHT_LOSS_REST_MULTIPLIERS = (1.72, 0.92, 1.95)
WEIGHT_LOSS_MIN_FAT = 0.8
WEIGHT_LOSS_MIN_CARBS = 2.0

HIGH_INTENSITY = {"tempo", "threshold", "intervals"}
FLUID_ML_PER_HOUR = 750


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def derive_calories(protein: float, carbs: float, fat: float) -> int:
    return round_half_up(protein * 4 + carbs * 4 + fat * 9)


def select_multipliers(intensity: str, duration_minutes: float, flags: DayFlags,
                       goal: str | None) -> tuple[float, float, float]:
    """Return (protein, fat, carbs) g/kg for the day."""
    if flags.is_race_day:
        return RACE_DAY_MULTIPLIERS
    if flags.is_post_race:
        return POST_RACE_MULTIPLIERS
    if flags.is_carbo_loading:
        return CARB_LOADING_MULTIPLIERS

    protein, fat, carbs = REGULAR_MULTIPLIERS.get(intensity, UNRECOGNIZED_MULTIPLIERS)
    if intensity == "endurance" and (duration_minutes or 0) > LONG_ENDURANCE_MINUTES:
        carbs += LONG_ENDURANCE_EXTRA_CARBS

    if goal == "weight-loss":
        if intensity in ("none", "easy"):
            return WEIGHT_LOSS_REST_MULTIPLIERS
        fat = max(WEIGHT_LOSS_MIN_FAT, fat - 0.2)
        carbs = max(WEIGHT_LOSS_MIN_CARBS, carbs - 1.0)
    elif goal == "performance":
        protein += 0.2
        carbs += 1.5

    return protein, fat, carbs


def compute_macros(body_weight_kg: float, intensity: str, duration_minutes: float,
                   is_race_day: bool = False, is_post_race: bool = False,
                   is_carbo_loading: bool = False, goal: str | None = None) -> dict:
    """Compute {protein, fat, carbs} grams, each rounded independently."""
    flags = DayFlags(is_race_day=is_race_day, is_post_race=is_post_race,
                     is_carbo_loading=is_carbo_loading)
    protein, fat, carbs = select_multipliers(intensity, duration_minutes, flags, goal)
    return {
        "protein": round_half_up(protein * body_weight_kg),
        "fat": round_half_up(fat * body_weight_kg),
        "carbs": round_half_up(carbs * body_weight_kg),
    }


def compute_fueling(intensity: str, duration_minutes: float, is_race_day: bool) -> FuelingGuidance:
    """In-session carbohydrate and fluid guidance."""
    duration_minutes = duration_minutes or 0

    if is_race_day:
        return FuelingGuidance(
            during_workout_carbs_per_hour=90,
            fluid_ml_per_hour=FLUID_ML_PER_HOUR,
            pre_workout="100g (2-3 hours before)",
            post_workout="As part of recovery plan",
            tips=[
                "RACE FUEL: Aim for 90-120g carbs/hr.",
                "Consume race day breakfast 2-3 hours before start",
                "Practice your fueling strategy in training",
                "Have backup fuel options ready",
            ],
        )

    if 60 <= duration_minutes <= 90:
        carbs = 40
        tips = [
            "Start fueling within the first 15 minutes",
            "Aim for easily digestible carbs",
            "Hydrate regularly throughout the session",
        ]
    elif duration_minutes > 90:
        carbs = 80 if intensity in HIGH_INTENSITY else 60
        tips = [
            "Start fueling early and dose frequently (every 15-20 min)",
            "Mix carb types for better absorption",
            "Monitor hydration and electrolyte needs",
        ]
    else:
        carbs = 0
        tips = [
            "No in-session fueling required for this workout",
            "Focus on pre and post-workout nutrition",
            "Stay hydrated throughout",
        ]

    return FuelingGuidance(
        during_workout_carbs_per_hour=carbs,
        fluid_ml_per_hour=FLUID_ML_PER_HOUR,
        tips=tips,
    )


def compute_nutrition_target(body_weight_kg: float, goal: str | None, intensity: str,
                             duration_minutes: float, flags: DayFlags | None = None) -> NutritionTarget:
    """Baseline daily target: macros, derived calories, and fueling guidance."""
    flags = flags or DayFlags()
    macros = compute_macros(
        body_weight_kg, intensity, duration_minutes,
        is_race_day=flags.is_race_day,
        is_post_race=flags.is_post_race,
        is_carbo_loading=flags.is_carbo_loading,
        goal=goal,
    )
    return NutritionTarget(
        calories=derive_calories(macros["protein"], macros["carbs"], macros["fat"]),
        protein=macros["protein"],
        carbs=macros["carbs"],
        fat=macros["fat"],
        fueling=compute_fueling(intensity, duration_minutes, flags.is_race_day),
    )
