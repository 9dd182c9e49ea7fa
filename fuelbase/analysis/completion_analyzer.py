"""Compare a planned workout with how it was actually completed.

Produces a confidence score and, when the evidence is strong enough, a
nutrition adjustment built from three independent sources: duration
overrun/underrun, perceived effort vs. the effort the plan implied, and
average heart rate.
"""

from fuelbase.analysis.macros import round_half_up
from fuelbase.analysis.workout_classifier import classify
from fuelbase.models import Adjustment, CompletionAnalysis, Comparison, PlannedMetrics

DEFAULT_PLANNED_SECONDS = 3600

INTENSITY_LEVEL = {
    "easy": 1,
    "endurance": 2,
    "strength": 2,
    "tempo": 3,
    "threshold": 4,
    "intervals": 5,
}

EXPECTED_RPE = {
    "easy": 3,
    "endurance": 5,
    "strength": 6,
    "tempo": 7,
    "threshold": 8,
    "intervals": 9,
}

# Upper HR bounds (exclusive) for the estimated intensity
HR_INTENSITY_BOUNDS = [
    (130, "easy"),
    (150, "endurance"),
    (165, "tempo"),
    (175, "threshold"),
]

BASE_CONFIDENCE = 0.30
RPE_CONFIDENCE = 0.30
HR_CONFIDENCE = 0.20
POWER_CONFIDENCE = 0.20
DURATION_CONFIDENCE = 0.20
DURATION_CONFIDENCE_MINUTES = 10

DURATION_ADJUST_MINUTES = 15
DURATION_CAL_PER_MIN = 12
RPE_ADJUST_THRESHOLD = 2
HARDER_CAL_PER_MIN = 8
EASIER_CAL_PER_MIN = -4
HIGH_HR = 170
LOW_HR = 130
HIGH_HR_CAL_PER_MIN = 5

MIN_ADJUSTMENT_MAGNITUDE = 50
MIN_ADJUSTMENT_CONFIDENCE = 0.6


def planned_metrics(workout) -> PlannedMetrics:
    seconds = workout.moving_time_s or workout.duration_s or DEFAULT_PLANNED_SECONDS
    category = classify(workout)
    return PlannedMetrics(
        duration_minutes=round_half_up(seconds / 60),
        intensity_category=category,
        intensity_level=INTENSITY_LEVEL.get(category, 2),
        name=workout.name,
        category=workout.category,
    )


def estimate_intensity_from_hr(avg_hr: float) -> str:
    for bound, intensity in HR_INTENSITY_BOUNDS:
        if avg_hr < bound:
            return intensity
    return "intervals"


def confidence_score(completion, duration_difference: float) -> float:
    score = BASE_CONFIDENCE
    if completion.perceived_effort:
        score += RPE_CONFIDENCE
    if completion.avg_heart_rate:
        score += HR_CONFIDENCE
    if completion.avg_power:
        score += POWER_CONFIDENCE
    if abs(duration_difference) > DURATION_CONFIDENCE_MINUTES:
        score += DURATION_CONFIDENCE
    return round(min(1.0, score), 2)


def duration_adjustment(duration_difference: int) -> Adjustment:
    if abs(duration_difference) <= DURATION_ADJUST_MINUTES:
        return Adjustment()

    calories = duration_difference * DURATION_CAL_PER_MIN
    direction = "longer" if duration_difference > 0 else "shorter"
    return Adjustment(
        calories=calories,
        carbs=round_half_up(calories * 0.6 / 4),
        reasoning=[f"Workout was {abs(duration_difference)} minutes {direction} than planned"],
    )


def effort_adjustment(rpe_difference: float | None, duration_minutes: int,
                      actual_rpe=None, expected_rpe=None) -> Adjustment:
    if rpe_difference is None or abs(rpe_difference) < RPE_ADJUST_THRESHOLD:
        return Adjustment()

    if rpe_difference >= RPE_ADJUST_THRESHOLD:
        calories = duration_minutes * HARDER_CAL_PER_MIN
        return Adjustment(
            calories=calories,
            carbs=round_half_up(calories * 0.5 / 4),
            protein=round_half_up(calories * 0.25 / 4),
            reasoning=[f"Workout felt harder than planned (RPE {actual_rpe} vs expected {expected_rpe})"],
            recovery=[
                "Prioritize a recovery meal within 30 minutes",
                "Add extra protein to support muscle repair",
                "Monitor fatigue over the next 24-48 hours",
            ],
        )

    calories = duration_minutes * EASIER_CAL_PER_MIN
    return Adjustment(
        calories=calories,
        carbs=-round_half_up(abs(calories) * 0.4 / 4),
        reasoning=[f"Workout felt easier than planned (RPE {actual_rpe} vs expected {expected_rpe})"],
    )


def heart_rate_adjustment(avg_hr: float | None, duration_minutes: int) -> Adjustment:
    if not avg_hr:
        return Adjustment()

    if avg_hr > HIGH_HR:
        calories = duration_minutes * HIGH_HR_CAL_PER_MIN
        return Adjustment(
            calories=calories,
            carbs=round_half_up(calories * 0.7 / 4),
            reasoning=[f"High average heart rate ({avg_hr:.0f} bpm) indicates high energy expenditure"],
            timing=[
                "Increase carb intake within 2 hours post-workout",
                "Replace electrolytes lost through sweat",
            ],
        )
    if avg_hr < LOW_HR:
        return Adjustment(
            reasoning=[f"Low average heart rate ({avg_hr:.0f} bpm) suggests an easy effort"],
        )
    return Adjustment()


def combine(adjustments) -> Adjustment:
    """Sum numeric deltas and concatenate the text lists."""
    total = Adjustment()
    for adj in adjustments:
        total.calories += adj.calories
        total.carbs += adj.carbs
        total.protein += adj.protein
        total.fat += adj.fat
        total.reasoning.extend(adj.reasoning)
        total.timing.extend(adj.timing)
        total.recovery.extend(adj.recovery)
    return total


def is_material(adjustment: Adjustment, confidence: float) -> bool:
    return (adjustment.magnitude >= MIN_ADJUSTMENT_MAGNITUDE
            and confidence >= MIN_ADJUSTMENT_CONFIDENCE)


def analyze(planned_workout, completion) -> CompletionAnalysis | None:
    """Analyze a workout's completion. Returns None without completion data."""
    if completion is None:
        return None

    planned = planned_metrics(planned_workout)
    actual_minutes = completion.actual_duration_minutes or 0
    difference = actual_minutes - planned.duration_minutes

    comparison = Comparison(
        duration_ratio=actual_minutes / planned.duration_minutes if planned.duration_minutes else 1.0,
        duration_difference_minutes=difference,
    )

    rpe_difference = None
    expected_rpe = EXPECTED_RPE.get(planned.intensity_category)
    if completion.perceived_effort:
        rpe_difference = completion.perceived_effort - expected_rpe
        comparison.perceived_effort = completion.perceived_effort
        comparison.effort_vs_planned = rpe_difference

    if completion.avg_heart_rate:
        comparison.avg_heart_rate = completion.avg_heart_rate
        comparison.estimated_intensity_from_hr = estimate_intensity_from_hr(completion.avg_heart_rate)

    confidence = confidence_score(completion, difference)

    adjustment = combine([
        duration_adjustment(difference),
        effort_adjustment(rpe_difference, actual_minutes,
                          actual_rpe=completion.perceived_effort, expected_rpe=expected_rpe),
        heart_rate_adjustment(completion.avg_heart_rate, actual_minutes),
    ])

    return CompletionAnalysis(
        planned_metrics=planned,
        comparison=comparison,
        adjustment=adjustment if is_material(adjustment, confidence) else None,
        confidence=confidence,
    )
