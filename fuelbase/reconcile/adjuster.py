"""Fold completion adjustments into a baseline nutrition target."""

from dataclasses import replace
from functools import reduce

from fuelbase.analysis.completion_analyzer import combine
from fuelbase.analysis.macros import derive_calories
from fuelbase.models import Adjustment, AdjustmentDetails


def sum_adjustments(adjustments):
    """Reduce a day's accepted adjustments into one, or None if there are none."""
    adjustments = [a for a in adjustments if a is not None]
    if not adjustments:
        return None
    return reduce(lambda total, adj: combine([total, adj]), adjustments, Adjustment())


def apply_adjustment(baseline, adjustment):
    """Return a new target with the adjustment applied; baseline is untouched.

    Macros move by the adjustment deltas (floored at zero) and calories are
    re-derived from them.
    """
    if adjustment is None:
        return baseline

    protein = max(0, baseline.protein + adjustment.protein)
    carbs = max(0, baseline.carbs + adjustment.carbs)
    fat = max(0, baseline.fat + adjustment.fat)

    details = AdjustmentDetails(
        reason=". ".join(adjustment.reasoning),
        timing=list(adjustment.timing),
        recovery=list(adjustment.recovery),
        original_plan={
            "calories": baseline.calories,
            "carbs": baseline.carbs,
            "protein": baseline.protein,
            "fat": baseline.fat,
        },
    )
    return replace(
        baseline,
        calories=derive_calories(protein, carbs, fat),
        protein=protein,
        carbs=carbs,
        fat=fat,
        adjustment_applied=True,
        adjustment_details=details,
    )
