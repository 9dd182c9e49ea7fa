"""Compare logged intake against the planned nutrition target."""

from dataclasses import dataclass, field

from fuelbase.analysis.macros import round_half_up

MACROS = ("calories", "protein", "carbs", "fat")

EXCELLENT_PCT = 85
GOOD_PCT = 70


@dataclass
class Adherence:
    date: str = ""
    percentages: dict = field(default_factory=dict)
    overall: int | None = None
    rating: str = "needs-improvement"


def rate(pct: int | None) -> str:
    if pct is None:
        return "needs-improvement"
    if pct >= EXCELLENT_PCT:
        return "excellent"
    if pct >= GOOD_PCT:
        return "good"
    return "needs-improvement"


def compare_intake(target, intake) -> Adherence:
    """Per-macro actual/planned percentages plus an overall average."""
    percentages = {}
    for macro in MACROS:
        planned = getattr(target, macro)
        if not planned:
            continue
        percentages[macro] = round_half_up(getattr(intake, macro) / planned * 100)

    overall = None
    if percentages:
        overall = round_half_up(sum(percentages.values()) / len(percentages))

    return Adherence(
        date=intake.date,
        percentages=percentages,
        overall=overall,
        rating=rate(overall),
    )
