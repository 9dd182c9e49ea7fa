from fuelbase.models import IntakeLog, NutritionTarget
from fuelbase.reconcile.intake import compare_intake, rate


class TestCompareIntake:

    def test_percentages_and_overall(self):
        target = NutritionTarget(calories=2000, protein=150, carbs=250, fat=50)
        intake = IntakeLog(date="2024-06-10", calories=1800, protein=150, carbs=200, fat=40)
        result = compare_intake(target, intake)
        assert result.percentages == {"calories": 90, "protein": 100, "carbs": 80, "fat": 80}
        assert result.overall == 88
        assert result.rating == "excellent"
        assert result.date == "2024-06-10"

    def test_zero_planned_skipped(self):
        target = NutritionTarget(calories=1000, protein=100, carbs=0, fat=20)
        result = compare_intake(target, IntakeLog(calories=500, protein=50, carbs=80, fat=10))
        assert "carbs" not in result.percentages
        assert result.overall == 50
        assert result.rating == "needs-improvement"

    def test_nothing_planned(self):
        result = compare_intake(NutritionTarget(), IntakeLog(calories=100))
        assert result.overall is None
        assert result.percentages == {}


class TestRate:

    def test_thresholds(self):
        assert rate(85) == "excellent"
        assert rate(84) == "good"
        assert rate(70) == "good"
        assert rate(69) == "needs-improvement"
        assert rate(None) == "needs-improvement"
