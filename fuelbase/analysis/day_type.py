"""Derive race / post-race / carb-loading flags for a calendar date."""

from datetime import date, datetime, timedelta

from fuelbase.models import DayFlags

IMPORTANT_RACE_CATEGORIES = {"RACE_A", "RACE_B"}


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).split("T")[0])


def events_on(events, day) -> list:
    day_str = _as_date(day).isoformat()
    return [e for e in events if e.date == day_str]


def find_upcoming_races(day, events, days_ahead: int) -> list:
    """Race events strictly after `day` and no more than `days_ahead` days out."""
    start = _as_date(day)
    end = start + timedelta(days=days_ahead)
    upcoming = []
    for event in events:
        if not event.is_race or not event.date:
            continue
        event_day = _as_date(event.date)
        if start < event_day <= end:
            upcoming.append(event)
    return upcoming


def analyze_day_type(day, events, carb_loading_days=(1, 3)) -> DayFlags:
    day = _as_date(day)

    if any(e.is_race for e in events_on(events, day)):
        return DayFlags(is_race_day=True)

    if any(e.is_race for e in events_on(events, day - timedelta(days=1))):
        return DayFlags(is_post_race=True)

    min_days, max_days = carb_loading_days
    for race in find_upcoming_races(day, events, max_days):
        if race.category not in IMPORTANT_RACE_CATEGORIES:
            continue
        days_until = (_as_date(race.date) - day).days
        if min_days <= days_until <= max_days:
            return DayFlags(is_carbo_loading=True)

    return DayFlags()
