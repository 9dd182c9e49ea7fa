"""Classify workouts into nutrition intensity categories.

Classification is a first-match keyword search over the workout name
(and, for strength, its type). Two separate rank tables order the
categories: one for aggregating a calendar day, one for combining the
sessions loaded for a single date (where strength does not compete).
"""

INTENSITY_CATEGORIES = ("easy", "endurance", "tempo", "threshold", "intervals", "strength")

# Ordered rules: (keywords matched against the name, category). First match wins.
# "strength endurance"/"low cadence" must precede the plain strength rule.
NAME_RULES = [
    (("recovery", "easy"), "easy"),
    (("tempo", "zone 3"), "tempo"),
    (("threshold", "zone 4"), "threshold"),
    (("interval", "zone 5"), "intervals"),
    (("strength endurance", "low cadence"), "intervals"),
]

# Calendar-day aggregation ranking
COMBINATION_RANK = {
    "none": 0,
    "easy": 1,
    "strength": 2,
    "endurance": 3,
    "tempo": 4,
    "threshold": 5,
    "intervals": 6,
}

# Multi-workout single-date ranking (strength excluded)
SESSION_RANK = {
    "easy": 1,
    "endurance": 2,
    "tempo": 3,
    "threshold": 4,
    "intervals": 5,
}

RACE_NAME_KEYWORDS = ("race", "triathlon", "marathon")


def _text(value) -> str:
    return (value or "").lower()


def classify(workout) -> str:
    """Return the intensity category for a workout (WorkoutEvent or dict)."""
    if isinstance(workout, dict):
        name, wtype = _text(workout.get("name")), _text(workout.get("type"))
    else:
        name, wtype = _text(workout.name), _text(workout.type)

    for keywords, category in NAME_RULES:
        if any(k in name for k in keywords):
            return category

    if "strength" in name or "strength" in wtype:
        return "strength"

    return "endurance"


def dominant_intensity(intensities, start: str = "none") -> str:
    """Highest intensity by calendar combination rank; ties keep the earlier one."""
    best = start
    for intensity in intensities:
        if COMBINATION_RANK.get(intensity, 0) > COMBINATION_RANK.get(best, 0):
            best = intensity
    return best


def strongest_session_intensity(intensities) -> str | None:
    """Highest intensity by session rank. Categories outside the table are ignored."""
    best = None
    for intensity in intensities:
        if intensity not in SESSION_RANK:
            continue
        if best is None or SESSION_RANK[intensity] > SESSION_RANK[best]:
            best = intensity
    return best


def looks_like_race(workout) -> bool:
    name = _text(workout.get("name") if isinstance(workout, dict) else workout.name)
    return any(k in name for k in RACE_NAME_KEYWORDS)
