"""Merge planned events and completed activities into one ordered timeline."""

from dataclasses import replace
from datetime import datetime


def _fill_completed(activity):
    """Back-fill missing display fields on a completed activity."""
    return replace(
        activity,
        source="completed",
        start_date_local=activity.start_date_local or activity.start_date,
        name=activity.name or activity.type or "Completed Activity",
        type=activity.type or "Unknown",
    )


def _start_key(event) -> datetime:
    start = event.start_date_local or event.start_date
    if not start:
        return datetime.min
    parsed = datetime.fromisoformat(start.replace("Z", "+00:00"))
    # Local wall-clock ordering; drop any offset so naive/aware values compare.
    return parsed.replace(tzinfo=None)


def merge_timeline(planned_events, completed_activities) -> list:
    """Planned events plus de-duplicated completed activities, sorted by start.

    Completed activities are de-duplicated by id only (first occurrence wins).
    The sort is stable, so equal timestamps keep their input order.
    """
    merged = [replace(e, source="planned") for e in planned_events]

    seen_ids = set()
    for activity in completed_activities:
        if activity.id is not None:
            if activity.id in seen_ids:
                continue
            seen_ids.add(activity.id)
        merged.append(_fill_completed(activity))

    return sorted(merged, key=_start_key)
