import argparse
import json
import sys


def _load_config_or_defaults(path=None):
    from fuelbase.config import default_config, load_config

    try:
        return load_config(path)
    except FileNotFoundError as e:
        if path:
            print(e)
            sys.exit(1)
        return default_config()


def _body_weight_kg(args, config):
    from fuelbase.models import lbs_to_kg

    lbs = args.weight if getattr(args, "weight", None) is not None else config["athlete"]["body_weight_lbs"]
    return lbs_to_kg(lbs)


def _goal(args, config):
    return getattr(args, "goal", None) or config["athlete"]["goal"]


def _load_events(args, config, start: str, end: str, now):
    """Timeline from a saved JSON payload or live from Intervals.icu."""
    if args.from_json:
        from fuelbase.ingest.intervals_sync import build_timeline

        with open(args.from_json) as f:
            payload = json.load(f)
        return build_timeline(payload.get("events", []), payload.get("activities", []), now)

    from fuelbase.ingest.intervals_sync import IntervalsError, load_range
    import requests

    try:
        return load_range(config, start, end, now=now, verbose=args.verbose)
    except (IntervalsError, requests.RequestException, ValueError) as e:
        print(f"Could not load workouts: {e}")
        sys.exit(1)


def _print_target(target, indent="  "):
    print(f"{indent}Calories: {target.calories}")
    print(f"{indent}Protein:  {target.protein}g")
    print(f"{indent}Carbs:    {target.carbs}g")
    print(f"{indent}Fat:      {target.fat}g")

    details = target.adjustment_details
    if target.adjustment_applied and details:
        original = details.original_plan
        delta = target.calories - original["calories"]
        sign = "+" if delta > 0 else ""
        print(f"\n{indent}Completion adjustment: {sign}{delta} cal")
        print(f"{indent}  Reason:   {details.reason}")
        print(f"{indent}  Original: {original['calories']} cal, {original['carbs']}g C, "
              f"{original['protein']}g P, {original['fat']}g F")
        for tip in details.timing:
            print(f"{indent}  Timing:   {tip}")
        for tip in details.recovery:
            print(f"{indent}  Recovery: {tip}")

    fueling = target.fueling
    print(f"\n{indent}Fueling:")
    print(f"{indent}  Pre-workout:    {fueling.pre_workout}")
    print(f"{indent}  During workout: {fueling.during_workout_carbs_per_hour}g carbs/hour")
    print(f"{indent}  Post-workout:   {fueling.post_workout}")
    print(f"{indent}  Fluid intake:   {fueling.fluid_ml_per_hour}ml/hour")
    for tip in fueling.tips:
        print(f"{indent}  - {tip}")


def _day_label(plan):
    if plan.flags.is_race_day:
        return "RACE DAY"
    if plan.flags.is_post_race:
        return "post-race"
    if plan.flags.is_carbo_loading:
        return "carb-loading"
    return plan.intensity


def cmd_target(args):
    from fuelbase.analysis.macros import compute_nutrition_target
    from fuelbase.models import DayFlags

    config = _load_config_or_defaults(args.config)
    flags = DayFlags(
        is_race_day=args.race_day,
        is_post_race=args.post_race,
        is_carbo_loading=args.carb_loading,
    )
    target = compute_nutrition_target(
        _body_weight_kg(args, config), _goal(args, config),
        args.intensity, args.duration, flags,
    )
    print(f"\nDaily nutrition target ({args.intensity}, {args.duration} min):")
    _print_target(target)


def cmd_day(args):
    from datetime import date, datetime, timedelta
    from fuelbase.planner import plan_day
    from fuelbase.reconcile.completion_store import CompletionStore

    config = _load_config_or_defaults(args.config)
    try:
        day = date.fromisoformat(args.date)
    except ValueError:
        print(f"Invalid date: {args.date} (expected YYYY-MM-DD)")
        sys.exit(1)

    carb_days = tuple(config["planning"]["carb_loading_days"])
    now = datetime.now()
    events = _load_events(
        args, config,
        (day - timedelta(days=1)).isoformat(),
        (day + timedelta(days=carb_days[1])).isoformat(),
        now,
    )

    store = CompletionStore()
    plan = plan_day(day, events, _body_weight_kg(args, config), _goal(args, config), now,
                    carb_loading_days=carb_days, session=True, store=store)

    day_events = [e for e in events if e.date == plan.date]
    print(f"\n{plan.date} — {_day_label(plan)}, {plan.duration_minutes} min")
    if not day_events:
        print("  No workouts found for this date — rest day nutrition")
    for e in day_events:
        status = "completed" if e.is_completed or e.source == "completed" else "planned"
        print(f"  [{status}] {e.name or e.type}")

    if args.verbose:
        for entry in store.get_by_date(plan.date):
            analysis = entry.analysis
            applied = "applied" if entry.applied else "not applied"
            print(f"  Analysis {entry.workout_id}: confidence {analysis.confidence:.2f} ({applied})")

    print()
    _print_target(plan.target)


def cmd_calendar(args):
    from datetime import date, datetime, timedelta
    from fuelbase.planner import plan_range

    config = _load_config_or_defaults(args.config)
    try:
        start = date.fromisoformat(args.start)
        end = date.fromisoformat(args.end)
    except ValueError:
        print("Invalid --start/--end (expected YYYY-MM-DD)")
        sys.exit(1)
    if end < start:
        print("--end must not be before --start")
        sys.exit(1)

    carb_days = tuple(config["planning"]["carb_loading_days"])
    now = datetime.now()
    events = _load_events(
        args, config,
        (start - timedelta(days=1)).isoformat(),
        (end + timedelta(days=carb_days[1])).isoformat(),
        now,
    )

    plans = plan_range(start, end, events, _body_weight_kg(args, config), _goal(args, config),
                       now, carb_loading_days=carb_days)

    print(f"\n{'Date':<12}{'Day':<14}{'Min':>5}{'Cal':>7}{'P':>6}{'C':>6}{'F':>6}")
    for plan in plans:
        t = plan.target
        adjusted = " *" if t.adjustment_applied else ""
        print(f"{plan.date:<12}{_day_label(plan):<14}{plan.duration_minutes:>5}"
              f"{t.calories:>7}{t.protein:>6}{t.carbs:>6}{t.fat:>6}{adjusted}")
    if any(p.target.adjustment_applied for p in plans):
        print("\n* adjusted from completion data")


def cmd_analyze_fit(args):
    from fuelbase.analysis.completion_analyzer import analyze
    from fuelbase.ingest.fit_parser import completion_from_fit
    from fuelbase.models import WorkoutEvent

    try:
        completion = completion_from_fit(args.path)
    except (OSError, ValueError) as e:
        print(f"Could not read {args.path}: {e}")
        sys.exit(1)

    if args.rpe is not None:
        completion.perceived_effort = args.rpe

    planned = WorkoutEvent(name=args.planned_name, duration_s=args.planned_minutes * 60)
    analysis = analyze(planned, completion)

    pm, cmp = analysis.planned_metrics, analysis.comparison
    print(f"\nPlanned:   {pm.name} — {pm.duration_minutes} min, {pm.intensity_category} "
          f"(level {pm.intensity_level})")
    print(f"Actual:    {completion.actual_duration_minutes} min "
          f"({cmp.duration_difference_minutes:+d} min, ratio {cmp.duration_ratio:.2f})")
    if cmp.avg_heart_rate:
        print(f"Heart rate: {cmp.avg_heart_rate:.0f} bpm → {cmp.estimated_intensity_from_hr}")
    if cmp.perceived_effort:
        print(f"RPE:       {cmp.perceived_effort} ({cmp.effort_vs_planned:+g} vs expected)")
    print(f"Confidence: {analysis.confidence:.2f}")

    adj = analysis.adjustment
    if adj is None:
        print("\nNo material nutrition adjustment.")
        return
    print(f"\nAdjustment: {adj.calories:+d} cal, {adj.carbs:+d}g C, {adj.protein:+d}g P")
    for reason in adj.reasoning:
        print(f"  - {reason}")


def cmd_adherence(args):
    from datetime import date, datetime, timedelta
    from fuelbase.ingest.nutrition_log import load_nutrition_log
    from fuelbase.planner import plan_day
    from fuelbase.reconcile.intake import compare_intake

    config = _load_config_or_defaults(args.config)
    try:
        day = date.fromisoformat(args.date)
        logs = load_nutrition_log(args.log)
    except (ValueError, FileNotFoundError) as e:
        print(f"{e}")
        sys.exit(1)

    intake = logs.get(day.isoformat())
    if intake is None:
        print(f"No intake logged for {day.isoformat()} in {args.log}")
        sys.exit(1)

    carb_days = tuple(config["planning"]["carb_loading_days"])
    now = datetime.now()
    events = _load_events(
        args, config,
        (day - timedelta(days=1)).isoformat(),
        (day + timedelta(days=carb_days[1])).isoformat(),
        now,
    )
    plan = plan_day(day, events, _body_weight_kg(args, config), _goal(args, config), now,
                    carb_loading_days=carb_days)
    result = compare_intake(plan.target, intake)

    print(f"\nPlan vs actual for {result.date}:")
    for macro, pct in result.percentages.items():
        planned = getattr(plan.target, macro)
        actual = getattr(intake, macro)
        print(f"  {macro.capitalize():<9} target {planned:>5}  actual {actual:>7.0f}  ({pct}%)")
    overall = f"{result.overall}%" if result.overall is not None else "n/a"
    print(f"\n  Overall adherence: {overall} ({result.rating})")


def cmd_review(args):
    from fuelbase.review.app import create_app

    config = _load_config_or_defaults(args.config)
    app = create_app(config)
    review = config["review"]
    app.run(host=review["host"], port=review["port"], debug=args.debug)


def _add_common(parser, events=False):
    parser.add_argument("--config", type=str, help="Path to config.yaml")
    parser.add_argument("--weight", type=float, help="Body weight in lbs (default: config)")
    parser.add_argument("--goal", choices=["maintenance", "weight-loss", "performance"],
                        help="Dietary goal (default: config)")
    if events:
        parser.add_argument("--from-json", type=str, metavar="PATH",
                            help="Read events/activities from a saved JSON payload instead of the API")
        parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")


def main():
    parser = argparse.ArgumentParser(prog="fuelbase", description="FuelBase — training nutrition planner")
    subparsers = parser.add_subparsers(dest="command")

    target_parser = subparsers.add_parser("target", help="Compute a daily target from manual inputs")
    _add_common(target_parser)
    target_parser.add_argument("--intensity", default="none",
                               choices=["none", "easy", "endurance", "tempo", "threshold",
                                        "intervals", "strength"],
                               help="Workout intensity")
    target_parser.add_argument("--duration", type=float, default=0, help="Workout minutes")
    target_parser.add_argument("--race-day", action="store_true", help="Race day")
    target_parser.add_argument("--post-race", action="store_true", help="Day after a race")
    target_parser.add_argument("--carb-loading", action="store_true", help="Carb-loading day")
    target_parser.set_defaults(func=cmd_target)

    day_parser = subparsers.add_parser("day", help="Plan one date from its workouts")
    day_parser.add_argument("date", help="Date (YYYY-MM-DD)")
    _add_common(day_parser, events=True)
    day_parser.set_defaults(func=cmd_day)

    calendar_parser = subparsers.add_parser("calendar", help="Plan every date in a range")
    calendar_parser.add_argument("--start", required=True, help="First date (YYYY-MM-DD)")
    calendar_parser.add_argument("--end", required=True, help="Last date (YYYY-MM-DD)")
    _add_common(calendar_parser, events=True)
    calendar_parser.set_defaults(func=cmd_calendar)

    fit_parser = subparsers.add_parser("analyze-fit", help="Compare a .fit file against a planned workout")
    fit_parser.add_argument("path", help="Path to .fit file")
    fit_parser.add_argument("--planned-minutes", type=float, required=True, help="Planned duration")
    fit_parser.add_argument("--planned-name", required=True, help="Planned workout name")
    fit_parser.add_argument("--rpe", type=float, help="Perceived effort (1-10)")
    fit_parser.set_defaults(func=cmd_analyze_fit)

    adherence_parser = subparsers.add_parser("adherence", help="Compare logged intake with the plan")
    adherence_parser.add_argument("--log", required=True, help="Diet tracker .xlsx export")
    adherence_parser.add_argument("--date", required=True, help="Date (YYYY-MM-DD)")
    _add_common(adherence_parser, events=True)
    adherence_parser.set_defaults(func=cmd_adherence)

    review_parser = subparsers.add_parser("review", help="Run the JSON review service")
    review_parser.add_argument("--config", type=str, help="Path to config.yaml")
    review_parser.add_argument("--debug", action="store_true", help="Flask debug mode")
    review_parser.set_defaults(func=cmd_review)

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)
    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()
        sys.exit(1)
