import pytest

from fuelbase.config import default_config
from fuelbase.ingest import intervals_sync
from fuelbase.review.app import create_app

TEMPO_ACTIVITY = {
    "id": 5, "name": "Tempo Run", "start_date_local": "2024-06-10T07:00:00",
    "moving_time": 3600, "perceived_exertion": 9,
}


@pytest.fixture
def client():
    app = create_app(default_config())
    app.config["TESTING"] = True
    return app.test_client()


class TestTargetEndpoint:

    def test_manual_target(self, client):
        r = client.get("/api/target?weight_lbs=192&goal=performance&intensity=endurance&duration=60")
        assert r.status_code == 200
        body = r.get_json()
        assert (body["protein"], body["fat"], body["carbs"]) == (174, 96, 505)
        assert body["calories"] == 3580
        assert body["fueling"]["during_workout_carbs_per_hour"] == 40

    def test_race_flag(self, client):
        body = client.get("/api/target?weight_lbs=192&race_day=true").get_json()
        assert body["fueling"]["during_workout_carbs_per_hour"] == 90

    def test_bad_number_is_400(self, client):
        r = client.get("/api/target?duration=abc")
        assert r.status_code == 400
        assert "error" in r.get_json()


class TestPlanEndpoint:

    def test_adjusted_plan(self, client):
        r = client.post("/api/plan", json={
            "date": "2024-06-10",
            "now": "2024-06-15T09:30:00",
            "events": [],
            "activities": [TEMPO_ACTIVITY],
        })
        assert r.status_code == 200
        plan = r.get_json()
        assert plan["intensity"] == "tempo"
        assert plan["target"]["adjustment_applied"] is True
        assert plan["target"]["carbs"] == plan["baseline"]["carbs"] + 60
        assert plan["target"]["protein"] == plan["baseline"]["protein"] + 30
        assert len(plan["analyses"]) == 1

    def test_date_required(self, client):
        r = client.post("/api/plan", json={"events": []})
        assert r.status_code == 400


class TestDayEndpoint:

    def test_platform_error_is_502(self, client, monkeypatch):
        def failing_load(config, start, end, **kwargs):
            raise intervals_sync.IntervalsError(401, "https://intervals.icu/api/v1/athlete/x/events")

        monkeypatch.setattr(intervals_sync, "load_range", failing_load)
        r = client.get("/api/day/2024-06-10")
        assert r.status_code == 502
        assert "401" in r.get_json()["error"]

    def test_loaded_window(self, client, monkeypatch):
        windows = []

        def fake_load(config, start, end, **kwargs):
            windows.append((start, end))
            return []

        monkeypatch.setattr(intervals_sync, "load_range", fake_load)
        r = client.get("/api/day/2024-06-10?weight_lbs=192")
        assert r.status_code == 200
        assert r.get_json()["intensity"] == "none"
        assert windows == [("2024-06-09", "2024-06-13")]

    def test_missing_credentials_is_502(self, client):
        r = client.get("/api/day/2024-06-10")
        assert r.status_code == 502
        assert "api_key" in r.get_json()["error"]

    def test_bad_date_is_400(self, client):
        assert client.get("/api/day/tomorrow").status_code == 400
