from fuelbase.models import WorkoutEvent
from fuelbase.reconcile.merger import merge_timeline


def ev(id=None, start=None, **kwargs):
    return WorkoutEvent(id=id, start_date_local=start, **kwargs)


class TestMergeTimeline:

    def test_sorted_and_tagged(self):
        planned = [ev("p2", "2024-06-12T07:00:00", name="Tempo"),
                   ev("p1", "2024-06-10T07:00:00", name="Easy")]
        completed = [ev("a1", "2024-06-11T18:00:00", name="Evening Run")]
        merged = merge_timeline(planned, completed)
        assert [e.id for e in merged] == ["p1", "a1", "p2"]
        assert [e.source for e in merged] == ["planned", "completed", "planned"]

    def test_completed_duplicates_dropped(self):
        completed = [ev("a1", "2024-06-11T18:00:00", name="First"),
                     ev("a1", "2024-06-11T18:00:00", name="Second")]
        merged = merge_timeline([], completed)
        assert len(merged) == 1
        assert merged[0].name == "First"

    def test_planned_ids_not_used_for_dedup(self):
        merged = merge_timeline([ev("1", "2024-06-11T07:00:00", name="Plan")],
                                [ev("1", "2024-06-11T07:00:00", name="Done")])
        assert len(merged) == 2

    def test_backfill(self):
        merged = merge_timeline([], [
            WorkoutEvent(id="a1", start_date="2024-06-11T05:00:00Z", type="Ride"),
            WorkoutEvent(id="a2", start_date_local="2024-06-12T05:00:00"),
        ])
        assert merged[0].start_date_local == "2024-06-11T05:00:00Z"
        assert merged[0].name == "Ride"
        assert merged[1].name == "Completed Activity"
        assert merged[1].type == "Unknown"

    def test_stable_ties(self):
        same = "2024-06-11T07:00:00"
        planned = [ev("p1", same, name="A"), ev("p2", same, name="B")]
        completed = [ev("a1", same, name="C"), ev("a2", "2024-06-10T07:00:00", name="D")]
        merged = merge_timeline(planned, completed)
        assert [e.name for e in merged] == ["D", "A", "B", "C"]

    def test_inputs_not_mutated(self):
        activity = ev("a1", None, start_date="2024-06-11T05:00:00")
        merge_timeline([], [activity])
        assert activity.source is None
        assert activity.start_date_local is None
