"""Plan a day's nutrition from its workouts.

Pipeline per date: day-type flags -> dominant intensity and total
duration -> baseline target -> summed completion adjustment -> one
apply step. The optional CompletionStore is written to, never read.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from fuelbase.analysis.completion_analyzer import analyze
from fuelbase.analysis.completion_detector import is_past_date
from fuelbase.analysis.day_type import analyze_day_type, events_on
from fuelbase.analysis.macros import compute_nutrition_target, round_half_up
from fuelbase.analysis.workout_classifier import (
    classify, dominant_intensity, looks_like_race, strongest_session_intensity,
)
from fuelbase.models import DayFlags, NutritionTarget
from fuelbase.reconcile.adjuster import apply_adjustment, sum_adjustments

DEFAULT_EVENT_SECONDS = 3600
MAX_SESSION_WORKOUTS = 3


@dataclass
class DaySummary:
    intensity: str = "none"
    duration_minutes: int = 0
    has_race: bool = False


@dataclass
class DayPlan:
    date: str
    flags: DayFlags
    intensity: str
    duration_minutes: int
    target: NutritionTarget
    baseline: NutritionTarget
    analyses: list = field(default_factory=list)


def event_minutes(event) -> int:
    seconds = event.moving_time_s or event.duration_s or DEFAULT_EVENT_SECONDS
    return round_half_up(seconds / 60)


def summarize_calendar_day(events) -> DaySummary:
    """Calendar aggregation: combination rank, every event counted."""
    return DaySummary(
        intensity=dominant_intensity(classify(e) for e in events),
        duration_minutes=sum(event_minutes(e) for e in events),
        has_race=any(e.is_race for e in events),
    )


def summarize_session(workouts) -> DaySummary:
    """Single-date load: at most three workouts, session rank, name-based race check."""
    workouts = list(workouts)[:MAX_SESSION_WORKOUTS]
    if not workouts:
        return DaySummary()

    intensities = [classify(w) for w in workouts]
    intensity = strongest_session_intensity(intensities) or intensities[0]
    return DaySummary(
        intensity=intensity,
        duration_minutes=sum(event_minutes(w) for w in workouts),
        has_race=any(looks_like_race(w) or w.is_race for w in workouts),
    )


def collect_adjustments(events, day, now: datetime, store=None):
    """Analyze every event carrying completion data on a past date.

    Returns (summed adjustment or None, list of (event, analysis)).
    """
    if not is_past_date(day, now):
        return None, []

    analyses = []
    for event in events:
        analysis = analyze(event, event.completion_data)
        if analysis is None:
            continue
        analyses.append((event, analysis))
        if store is not None and event.id is not None:
            store.store(event.id, str(day), analysis)

    return sum_adjustments(a.adjustment for _, a in analyses), analyses


def plan_day(day, events, body_weight_kg: float, goal: str | None, now: datetime,
             carb_loading_days=(1, 3), session: bool = False, store=None) -> DayPlan:
    """Plan one date. `events` may span other dates; they inform day-type flags."""
    day_str = day.isoformat() if isinstance(day, date) else str(day)
    day_events = events_on(events, day_str)

    flags = analyze_day_type(day_str, events, carb_loading_days)
    summary = summarize_session(day_events) if session else summarize_calendar_day(day_events)
    if session and summary.has_race and not flags.is_race_day:
        flags = DayFlags(is_race_day=True)

    baseline = compute_nutrition_target(
        body_weight_kg, goal, summary.intensity, summary.duration_minutes, flags,
    )
    adjustment, analyses = collect_adjustments(day_events, day_str, now, store=store)
    target = apply_adjustment(baseline, adjustment)

    if store is not None and adjustment is not None:
        for event, analysis in analyses:
            if analysis.adjustment is not None and event.id is not None:
                store.mark_applied(event.id, day_str)

    return DayPlan(
        date=day_str,
        flags=flags,
        intensity=summary.intensity,
        duration_minutes=summary.duration_minutes,
        target=target,
        baseline=baseline,
        analyses=[a for _, a in analyses],
    )


def plan_range(start, end, events, body_weight_kg: float, goal: str | None, now: datetime,
               carb_loading_days=(1, 3), store=None) -> list[DayPlan]:
    start = start if isinstance(start, date) else date.fromisoformat(start)
    end = end if isinstance(end, date) else date.fromisoformat(end)

    plans = []
    current = start
    while current <= end:
        plans.append(plan_day(current, events, body_weight_kg, goal, now,
                              carb_loading_days=carb_loading_days, store=store))
        current += timedelta(days=1)
    return plans
