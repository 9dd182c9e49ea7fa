"""Decide whether a calendar event is a completed activity or a planned workout."""

from dataclasses import dataclass, replace
from datetime import date, datetime, time

# Local noon keeps date comparisons clear of timezone boundary flips.
_REFERENCE_TIME = time(12, 0)

_ACTUAL_METRIC_FIELDS = (
    "moving_time_s", "distance", "avg_heart_rate", "avg_power", "kilojoules", "calories",
)


@dataclass
class CompletionStatus:
    is_completed: bool
    is_past_date: bool


def _parse_date(value) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    return date.fromisoformat(str(value).split("T")[0])


def is_past_date(event_date, now: datetime) -> bool:
    """True when the event's date is strictly before today's date.

    Both sides are pinned to local noon, so an event later today is never past.
    """
    d = _parse_date(event_date)
    if d is None:
        return False
    today = now.date() if isinstance(now, datetime) else now
    return datetime.combine(d, _REFERENCE_TIME) < datetime.combine(today, _REFERENCE_TIME)


def has_actual_metrics(event) -> bool:
    return any(getattr(event, f) for f in _ACTUAL_METRIC_FIELDS)


def is_completed(event, past_date: bool) -> bool:
    if not past_date:
        return False

    actual = has_actual_metrics(event)
    if actual and event.id:
        return True

    # Bare planned-workout skeleton
    if event.name and (event.duration_s or event.moving_time_s) and not actual:
        return False

    # Past, linked, nothing decisive: assume it happened.
    return bool(event.id)


def detect_completion(event, now: datetime) -> CompletionStatus:
    past = is_past_date(event.date, now)
    return CompletionStatus(is_completed=is_completed(event, past), is_past_date=past)


def decorate(event, now: datetime):
    """Return a copy of the event with its completion flags set."""
    status = detect_completion(event, now)
    needs_data = (
        status.is_past_date
        and event.completion_data is None
        and bool(event.paired_activity_id or (status.is_completed and event.id))
    )
    return replace(
        event,
        is_completed=status.is_completed,
        is_past_date=status.is_past_date,
        needs_completion_data=needs_data,
    )


def decorate_events(events, now: datetime) -> list:
    return [decorate(e, now) for e in events]
