import pytest

from fuelbase.ingest import fit_parser


class FakeMessage:

    def __init__(self, name, values):
        self.name = name
        self.values = values

    def get_value(self, field_name):
        return self.values.get(field_name)


def fake_fit(messages):
    class FakeFitFile:

        def __init__(self, path):
            self.path = path

        def get_messages(self):
            return iter(messages)

    return FakeFitFile


class TestCompletionFromFit:

    def test_running_session(self, monkeypatch):
        session = FakeMessage("session", {
            "sport": "running",
            "total_timer_time": 3720.0,
            "avg_heart_rate": 152,
            "max_heart_rate": 178,
            "avg_cadence": 85,
            "avg_speed": 3.1,
            "total_distance": 11500.0,
            "total_ascent": 84,
            "total_calories": 650,
        })
        monkeypatch.setattr(fit_parser, "FitFile", fake_fit([FakeMessage("record", {}), session]))

        data = fit_parser.completion_from_fit("run.fit")
        assert data.actual_duration_minutes == 62
        assert data.avg_heart_rate == 152
        assert data.max_heart_rate == 178
        assert data.avg_cadence == 170.0
        assert data.avg_speed == 3.1
        assert data.distance == 11500.0
        assert data.elevation_gain == 84
        assert data.calories_burned == 650
        assert data.perceived_effort is None

    def test_cycling_keeps_cadence_and_power(self, monkeypatch):
        session = FakeMessage("session", {
            "sport": "cycling",
            "total_elapsed_time": 5400,
            "avg_cadence": 88,
            "avg_power": 210,
            "max_power": 640,
            "enhanced_avg_speed": 8.4,
            "avg_speed": 8.0,
            "training_stress_score": 96.5,
        })
        monkeypatch.setattr(fit_parser, "FitFile", fake_fit([session]))

        data = fit_parser.completion_from_fit("ride.fit")
        assert data.actual_duration_minutes == 90
        assert data.avg_cadence == 88.0
        assert data.avg_power == 210
        assert data.max_power == 640
        assert data.avg_speed == 8.4
        assert data.training_stress_score == 96.5
        assert data.calories_burned is None

    def test_no_session(self, monkeypatch):
        monkeypatch.setattr(fit_parser, "FitFile", fake_fit([FakeMessage("record", {})]))
        with pytest.raises(ValueError, match="No session"):
            fit_parser.completion_from_fit("broken.fit")
