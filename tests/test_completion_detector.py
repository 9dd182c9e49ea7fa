from datetime import datetime

from fuelbase.analysis.completion_detector import (
    decorate, decorate_events, detect_completion, has_actual_metrics, is_completed, is_past_date,
)
from fuelbase.models import CompletionData

from conftest import make_event


class TestIsPastDate:

    def test_yesterday_is_past(self, now):
        assert is_past_date("2024-06-14T23:59:00", now)

    def test_today_is_not_past(self, now):
        assert not is_past_date("2024-06-15T06:00:00", now)
        assert not is_past_date("2024-06-15", datetime(2024, 6, 15, 23, 0))

    def test_future_is_not_past(self, now):
        assert not is_past_date("2024-06-20", now)

    def test_missing_date(self, now):
        assert not is_past_date(None, now)
        assert not is_past_date("", now)


class TestIsCompleted:

    def test_future_never_completed(self):
        event = make_event(id="1", moving_time_s=3600, avg_heart_rate=150, distance=30000)
        assert is_completed(event, past_date=False) is False

    def test_past_with_metrics_and_id(self):
        assert is_completed(make_event(id="a1", distance=10000), past_date=True)

    def test_planned_skeleton(self):
        event = make_event(id="e1", name="Tempo", duration_s=3600)
        assert not has_actual_metrics(event)
        assert is_completed(event, past_date=True) is False

    def test_ambiguous_past_with_id_defaults_completed(self):
        assert is_completed(make_event(id="e2", type="Ride"), past_date=True) is True

    def test_ambiguous_past_without_id(self):
        assert is_completed(make_event(type="Ride"), past_date=True) is False

    def test_metrics_without_id(self):
        assert is_completed(make_event(name="Ride", calories=500), past_date=True) is False


class TestDetectCompletion:

    def test_status(self, now):
        status = detect_completion(make_event(id="1", kilojoules=800), now)
        assert status.is_completed and status.is_past_date

        status = detect_completion(
            make_event(id="1", kilojoules=800, start_date_local="2024-06-16T07:00:00"), now)
        assert not status.is_completed and not status.is_past_date

    def test_decorate_sets_flags_without_mutating(self, now):
        event = make_event(id="e1", name="Threshold", duration_s=3600, paired_activity_id="99")
        decorated = decorate(event, now)
        assert decorated.is_past_date
        assert not decorated.is_completed
        assert decorated.needs_completion_data
        assert event.is_past_date is False

    def test_no_completion_needed_when_attached(self, now):
        event = make_event(id="a1", distance=5000, completion_data=CompletionData(actual_duration_minutes=30))
        decorated = decorate(event, now)
        assert decorated.is_completed
        assert not decorated.needs_completion_data

    def test_decorate_events(self, now):
        events = decorate_events([make_event(id="1", distance=1), make_event(name="Plan", duration_s=60)], now)
        assert [e.is_completed for e in events] == [True, False]
