from dataclasses import asdict
from datetime import date, datetime, timedelta

import requests
from flask import Flask, jsonify, request

from fuelbase.analysis.macros import compute_nutrition_target
from fuelbase.config import default_config, load_config
from fuelbase.models import DayFlags, lbs_to_kg
from fuelbase.planner import plan_day


def _flag(value) -> bool:
    return str(value).lower() in ("1", "true", "yes", "on")


def create_app(config=None):
    app = Flask(__name__)

    if config is None:
        try:
            config = load_config()
        except FileNotFoundError:
            config = default_config()
    app.config["FUELBASE"] = config

    athlete = config["athlete"]
    carb_loading_days = tuple(config["planning"]["carb_loading_days"])

    def _weight_kg(value):
        return lbs_to_kg(float(value if value is not None else athlete["body_weight_lbs"]))

    @app.errorhandler(ValueError)
    def bad_value(e):
        return jsonify({"error": str(e)}), 400

    # ── Routes ───────────────────────────────────────────────────────

    @app.route("/api/target")
    def api_target():
        args = request.args
        flags = DayFlags(
            is_race_day=_flag(args.get("race_day")),
            is_post_race=_flag(args.get("post_race")),
            is_carbo_loading=_flag(args.get("carb_loading")),
        )
        target = compute_nutrition_target(
            _weight_kg(args.get("weight_lbs")),
            args.get("goal", athlete["goal"]),
            args.get("intensity", "none"),
            float(args.get("duration", 0)),
            flags,
        )
        return jsonify(asdict(target))

    @app.route("/api/plan", methods=["POST"])
    def api_plan():
        from fuelbase.ingest.intervals_sync import build_timeline

        body = request.get_json(silent=True) or {}
        day = body.get("date")
        if not day:
            return jsonify({"error": "date is required"}), 400
        now = datetime.fromisoformat(body["now"]) if body.get("now") else datetime.now()

        events = build_timeline(body.get("events", []), body.get("activities", []), now)
        plan = plan_day(
            date.fromisoformat(day), events,
            _weight_kg(body.get("weight_lbs")),
            body.get("goal", athlete["goal"]),
            now,
            carb_loading_days=carb_loading_days,
            session=bool(body.get("session", False)),
        )
        return jsonify(asdict(plan))

    @app.route("/api/day/<date_str>")
    def api_day(date_str):
        from fuelbase.ingest.intervals_sync import IntervalsError, load_range

        day = date.fromisoformat(date_str)
        # Previous day for post-race, the carb-loading window ahead.
        start = (day - timedelta(days=1)).isoformat()
        end = (day + timedelta(days=carb_loading_days[1])).isoformat()
        try:
            events = load_range(config, start, end)
        except (IntervalsError, requests.RequestException) as e:
            return jsonify({"error": str(e)}), 502
        except ValueError as e:
            # Missing Intervals.icu credentials
            return jsonify({"error": str(e)}), 502

        plan = plan_day(
            day, events,
            _weight_kg(request.args.get("weight_lbs")),
            request.args.get("goal", athlete["goal"]),
            datetime.now(),
            carb_loading_days=carb_loading_days,
        )
        return jsonify(asdict(plan))

    return app
