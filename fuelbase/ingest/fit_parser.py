"""Read completion data straight from a .fit file using fitparse."""

from fitparse import FitFile

from fuelbase.models import CompletionData


def _session_message(messages):
    for msg in messages:
        if msg.name == "session":
            return msg
    return None


def completion_from_fit(file_path) -> CompletionData:
    """Build CompletionData from the first FIT session message."""
    fit = FitFile(str(file_path))
    session = _session_message(fit.get_messages())
    if session is None:
        raise ValueError("No session message found in .fit file")

    def get(field_name, default=None):
        val = session.get_value(field_name)
        return val if val is not None else default

    duration_s = get("total_timer_time") or get("total_elapsed_time") or 0

    avg_speed = get("enhanced_avg_speed")
    if avg_speed is None:
        avg_speed = get("avg_speed")

    avg_cadence = get("avg_cadence")
    if avg_cadence is not None:
        sport = get("sport")
        if sport and str(sport).lower() == "running":
            avg_cadence = avg_cadence * 2
        avg_cadence = round(float(avg_cadence), 2)

    calories = get("total_calories")

    return CompletionData(
        actual_duration_minutes=int(duration_s / 60 + 0.5),
        avg_heart_rate=get("avg_heart_rate"),
        max_heart_rate=get("max_heart_rate"),
        avg_power=get("avg_power"),
        max_power=get("max_power"),
        avg_cadence=avg_cadence,
        elevation_gain=get("total_ascent"),
        distance=get("total_distance"),
        avg_speed=avg_speed,
        calories_burned=int(calories) if calories is not None else None,
        training_stress_score=get("training_stress_score"),
    )
