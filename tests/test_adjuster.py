from fuelbase.analysis.macros import compute_nutrition_target
from fuelbase.models import Adjustment
from fuelbase.reconcile.adjuster import apply_adjustment, sum_adjustments


def baseline():
    # 180p / 110f / 430c
    return compute_nutrition_target(100, "maintenance", "endurance", 60)


class TestApplyAdjustment:

    def test_none_returns_baseline(self):
        target = baseline()
        assert apply_adjustment(target, None) is target

    def test_applies_deltas_and_keeps_original(self):
        target = baseline()
        adj = Adjustment(calories=480, carbs=60, protein=30,
                         reasoning=["Harder than planned", "High heart rate"],
                         timing=["Carbs within 2h"], recovery=["Recovery meal"])
        adjusted = apply_adjustment(target, adj)

        assert (adjusted.protein, adjusted.carbs, adjusted.fat) == (210, 490, 110)
        assert adjusted.calories == 210 * 4 + 490 * 4 + 110 * 9
        assert adjusted.adjustment_applied is True

        details = adjusted.adjustment_details
        assert details.reason == "Harder than planned. High heart rate"
        assert details.timing == ["Carbs within 2h"]
        assert details.recovery == ["Recovery meal"]
        assert details.original_plan == {"calories": 3430, "carbs": 430, "protein": 180, "fat": 110}

        assert target.carbs == 430
        assert target.adjustment_applied is False

    def test_macros_never_negative(self):
        adjusted = apply_adjustment(baseline(), Adjustment(carbs=-1000))
        assert adjusted.carbs == 0
        assert adjusted.calories == 180 * 4 + 110 * 9


class TestSumAdjustments:

    def test_empty(self):
        assert sum_adjustments([]) is None
        assert sum_adjustments([None, None]) is None

    def test_sums_and_concatenates(self):
        total = sum_adjustments([
            Adjustment(calories=240, carbs=36, reasoning=["long"]),
            None,
            Adjustment(calories=-180, carbs=-18, protein=5, reasoning=["easy"], timing=["t"]),
        ])
        assert (total.calories, total.carbs, total.protein, total.fat) == (60, 18, 5, 0)
        assert total.reasoning == ["long", "easy"]
        assert total.timing == ["t"]

    def test_single_application(self):
        target = baseline()
        first = Adjustment(calories=240, carbs=36, reasoning=["a"])
        second = Adjustment(calories=480, carbs=60, protein=30, reasoning=["b"])
        adjusted = apply_adjustment(target, sum_adjustments([first, second]))
        assert adjusted.carbs == target.carbs + 96
        assert adjusted.adjustment_details.original_plan["carbs"] == target.carbs
