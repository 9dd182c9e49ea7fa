"""Intervals.icu API access: planned events, completed activities, activity detail.

Planned events and unplanned activities are merged into one timeline.
Activities paired to a planned event are analysed through that event, so
they are dropped from the timeline and their detail is fetched instead.
A failed detail fetch only costs that one workout its completion data.
"""

from dataclasses import replace
from datetime import datetime

import requests

from fuelbase.analysis.completion_detector import decorate_events
from fuelbase.models import CompletionData, WorkoutEvent, strip_activity_prefix
from fuelbase.reconcile.merger import merge_timeline


class IntervalsError(RuntimeError):
    """Non-success response from the Intervals.icu API."""

    def __init__(self, status_code: int, url: str):
        super().__init__(f"Intervals.icu API error: {status_code} ({url})")
        self.status_code = status_code
        self.url = url


class IntervalsClient:
    """Thin Basic-auth client (user 'API_KEY', password = the athlete's key)."""

    def __init__(self, athlete_id: str, api_key: str,
                 base_url: str = "https://intervals.icu/api/v1",
                 timeout_s: float = 30, session: requests.Session | None = None):
        if not athlete_id or not api_key:
            raise ValueError("Intervals.icu athlete_id and api_key are required")
        self.athlete_id = athlete_id
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.session = session or requests.Session()
        self.session.auth = ("API_KEY", api_key)

    def _get(self, path: str, params: dict | None = None):
        url = f"{self.base_url}/athlete/{self.athlete_id}{path}"
        r = self.session.get(url, params=params, timeout=self.timeout_s)
        if r.status_code >= 400:
            raise IntervalsError(r.status_code, url)
        return r.json()

    def get_events(self, oldest: str, newest: str) -> list[dict]:
        return self._get("/events", {"oldest": oldest, "newest": newest}) or []

    def get_activities(self, oldest: str, newest: str) -> list[dict]:
        return self._get("/activities", {"oldest": oldest, "newest": newest}) or []

    def get_activity(self, activity_id) -> dict | None:
        """Detailed activity, or None when it is missing or not shared."""
        try:
            return self._get(f"/activities/{activity_id}")
        except IntervalsError as e:
            if e.status_code == 404:
                return None
            raise


def client_from_config(config: dict, session: requests.Session | None = None) -> IntervalsClient:
    icu = config["intervals"]
    return IntervalsClient(
        athlete_id=icu.get("athlete_id"),
        api_key=icu.get("api_key"),
        base_url=icu.get("base_url") or "https://intervals.icu/api/v1",
        timeout_s=icu.get("timeout_s", 30),
        session=session,
    )


def build_timeline(raw_events: list[dict], raw_activities: list[dict], now: datetime) -> list:
    """Offline half of the sync: payloads -> decorated, merged timeline."""
    planned = [WorkoutEvent.from_api(e, source="planned") for e in raw_events]
    paired_ids = {e.paired_activity_id for e in planned if e.paired_activity_id}

    today = now.date().isoformat()
    completed = []
    for raw in raw_activities:
        activity = WorkoutEvent.from_api(raw, source="completed")
        if strip_activity_prefix(activity.id) in paired_ids:
            continue
        # Today's activities stay in; only past dates are analysed.
        if not activity.date or activity.date > today:
            continue
        completed.append(replace(activity, completion_data=CompletionData.from_activity(raw)))

    return decorate_events(merge_timeline(planned, completed), now)


def attach_completion_data(client: IntervalsClient, events: list, max_fetches: int = 15,
                           verbose: bool = False) -> tuple[list, dict]:
    """Fetch detail for paired planned events that need it.

    Returns (events, stats). Fetch failures are counted, not raised.
    """
    stats = {"fetched": 0, "missing": 0, "errors": 0, "skipped": 0}
    result = []
    for event in events:
        if not (event.needs_completion_data and event.paired_activity_id):
            result.append(event)
            continue
        if stats["fetched"] + stats["missing"] + stats["errors"] >= max_fetches:
            stats["skipped"] += 1
            result.append(event)
            continue

        try:
            raw = client.get_activity(event.paired_activity_id)
        except (requests.RequestException, IntervalsError) as e:
            stats["errors"] += 1
            if verbose:
                print(f"  Could not load activity {event.paired_activity_id} "
                      f"for \"{event.name}\": {e}")
            result.append(event)
            continue

        if raw is None:
            stats["missing"] += 1
            result.append(event)
            continue

        data = CompletionData.from_activity(raw)
        stats["fetched"] += 1
        if verbose:
            rpe = data.perceived_effort if data.perceived_effort is not None else "N/A"
            print(f"  Loaded completion for \"{event.name}\": "
                  f"{data.actual_duration_minutes}min, RPE {rpe}")
        result.append(replace(event, completion_data=data, needs_completion_data=False))

    return result, stats


def load_range(config: dict, start: str, end: str, now: datetime | None = None,
               verbose: bool = False, client: IntervalsClient | None = None) -> list:
    """Load events and activities for [start, end] with completion data attached."""
    now = now or datetime.now()
    client = client or client_from_config(config)

    if verbose:
        print(f"Loading Intervals.icu events and activities {start} → {end}...")
    raw_events = client.get_events(start, end)
    raw_activities = client.get_activities(start, end)

    events = build_timeline(raw_events, raw_activities, now)
    events, stats = attach_completion_data(
        client, events,
        max_fetches=config["intervals"].get("max_completion_fetches", 15),
        verbose=verbose,
    )

    if verbose:
        completed = sum(1 for e in events if e.is_completed)
        print(f"Loaded {len(events)} workouts: {completed} completed, "
              f"{stats['fetched']} detail fetches, {stats['errors']} errors")
    return events
