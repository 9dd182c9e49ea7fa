"""In-memory store of completion analyses, keyed by date and workout id."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class StoredAnalysis:
    workout_id: str
    date: str
    analysis: object
    timestamp: datetime = field(default_factory=datetime.now)
    applied: bool = False


class CompletionStore:
    """Process-lifetime cache. Entries never expire."""

    def __init__(self):
        self._data: dict[str, StoredAnalysis] = {}

    @staticmethod
    def _key(workout_id, date: str) -> str:
        return f"{date}_{workout_id}"

    def store(self, workout_id, date: str, analysis) -> StoredAnalysis:
        entry = StoredAnalysis(workout_id=str(workout_id), date=date, analysis=analysis)
        self._data[self._key(workout_id, date)] = entry
        return entry

    def get(self, workout_id, date: str) -> StoredAnalysis | None:
        return self._data.get(self._key(workout_id, date))

    def get_by_date(self, date: str) -> list[StoredAnalysis]:
        return [entry for entry in self._data.values() if entry.date == date]

    def mark_applied(self, workout_id, date: str) -> bool:
        entry = self.get(workout_id, date)
        if entry is None:
            return False
        entry.applied = True
        return True

    def __len__(self):
        return len(self._data)
