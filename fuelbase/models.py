from dataclasses import dataclass, field
from typing import Optional

LBS_TO_KG = 0.453592


def lbs_to_kg(lbs: float) -> float:
    return lbs * LBS_TO_KG


def strip_activity_prefix(activity_id) -> Optional[str]:
    """Intervals.icu activity ids come as 'i12345' on paired events."""
    if activity_id is None or activity_id == "":
        return None
    text = str(activity_id)
    return text[1:] if text.startswith("i") else text


@dataclass
class CompletionData:
    actual_duration_minutes: int = 0
    avg_heart_rate: Optional[float] = None
    max_heart_rate: Optional[float] = None
    avg_power: Optional[float] = None
    max_power: Optional[float] = None
    avg_cadence: Optional[float] = None
    elevation_gain: Optional[float] = None
    distance: Optional[float] = None
    avg_speed: Optional[float] = None
    calories_burned: Optional[int] = None
    training_stress_score: Optional[float] = None
    perceived_effort: Optional[float] = None
    description: Optional[str] = None
    workout_code: Optional[str] = None

    @classmethod
    def from_activity(cls, raw: dict) -> "CompletionData":
        """Build completion data from a detailed Intervals.icu activity payload."""
        data = raw.get("activity") or raw
        seconds = data.get("moving_time") or data.get("elapsed_time") or 0
        kilojoules = data.get("kilojoules")
        return cls(
            actual_duration_minutes=int(seconds / 60 + 0.5),
            avg_heart_rate=data.get("average_heartrate"),
            max_heart_rate=data.get("max_heartrate"),
            avg_power=data.get("average_watts"),
            max_power=data.get("max_watts"),
            avg_cadence=data.get("average_cadence"),
            elevation_gain=data.get("total_elevation_gain"),
            distance=data.get("distance"),
            avg_speed=data.get("average_speed"),
            calories_burned=int(kilojoules / 4.184 + 0.5) if kilojoules else None,
            training_stress_score=data.get("training_stress_score"),
            perceived_effort=data.get("perceived_exertion") or None,
            description=data.get("description"),
            workout_code=data.get("workout_code"),
        )


@dataclass
class WorkoutEvent:
    id: Optional[str] = None
    start_date_local: Optional[str] = None
    start_date: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    category: Optional[str] = None
    duration_s: Optional[float] = None
    moving_time_s: Optional[float] = None
    distance: Optional[float] = None
    avg_heart_rate: Optional[float] = None
    avg_power: Optional[float] = None
    kilojoules: Optional[float] = None
    calories: Optional[float] = None
    total_elevation_gain: Optional[float] = None
    paired_activity_id: Optional[str] = None
    source: Optional[str] = None
    is_completed: bool = False
    is_past_date: bool = False
    needs_completion_data: bool = False
    completion_data: Optional[CompletionData] = None

    @classmethod
    def from_api(cls, raw: dict, source: Optional[str] = None) -> "WorkoutEvent":
        """Map an Intervals.icu event or activity payload onto a WorkoutEvent."""
        event_id = raw.get("id")
        return cls(
            id=str(event_id) if event_id is not None else None,
            start_date_local=raw.get("start_date_local"),
            start_date=raw.get("start_date"),
            name=raw.get("name"),
            type=raw.get("type"),
            category=raw.get("category"),
            duration_s=raw.get("duration"),
            moving_time_s=raw.get("moving_time"),
            distance=raw.get("distance"),
            avg_heart_rate=raw.get("average_heartrate"),
            avg_power=raw.get("average_watts"),
            kilojoules=raw.get("kilojoules"),
            calories=raw.get("calories"),
            total_elevation_gain=raw.get("total_elevation_gain"),
            paired_activity_id=strip_activity_prefix(raw.get("paired_activity_id")),
            source=source,
        )

    @property
    def date(self) -> str:
        """Local calendar date (YYYY-MM-DD) of the event."""
        start = self.start_date_local or self.start_date or ""
        return start.split("T")[0]

    @property
    def is_race(self) -> bool:
        return bool(self.category) and self.category.startswith("RACE_")


@dataclass
class DayFlags:
    is_race_day: bool = False
    is_post_race: bool = False
    is_carbo_loading: bool = False


@dataclass
class FuelingGuidance:
    during_workout_carbs_per_hour: int = 0
    fluid_ml_per_hour: int = 750
    pre_workout: str = "Varies"
    post_workout: str = "Varies"
    tips: list[str] = field(default_factory=list)


@dataclass
class Adjustment:
    calories: int = 0
    carbs: int = 0
    protein: int = 0
    fat: int = 0
    reasoning: list[str] = field(default_factory=list)
    timing: list[str] = field(default_factory=list)
    recovery: list[str] = field(default_factory=list)

    @property
    def magnitude(self) -> int:
        return abs(self.calories) + abs(self.carbs) + abs(self.protein)


@dataclass
class AdjustmentDetails:
    reason: str = ""
    timing: list[str] = field(default_factory=list)
    recovery: list[str] = field(default_factory=list)
    original_plan: dict = field(default_factory=dict)


@dataclass
class NutritionTarget:
    calories: int = 0
    protein: int = 0
    carbs: int = 0
    fat: int = 0
    fueling: FuelingGuidance = field(default_factory=FuelingGuidance)
    adjustment_applied: bool = False
    adjustment_details: Optional[AdjustmentDetails] = None


@dataclass
class PlannedMetrics:
    duration_minutes: int = 0
    intensity_category: str = "endurance"
    intensity_level: int = 2
    name: Optional[str] = None
    category: Optional[str] = None


@dataclass
class Comparison:
    duration_ratio: float = 1.0
    duration_difference_minutes: int = 0
    avg_heart_rate: Optional[float] = None
    estimated_intensity_from_hr: Optional[str] = None
    perceived_effort: Optional[float] = None
    effort_vs_planned: Optional[float] = None


@dataclass
class CompletionAnalysis:
    planned_metrics: PlannedMetrics
    comparison: Comparison
    adjustment: Optional[Adjustment] = None
    confidence: float = 0.3


@dataclass
class IntakeLog:
    date: str = ""
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
