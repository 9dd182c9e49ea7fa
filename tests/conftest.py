from datetime import datetime

import pytest

from fuelbase.models import WorkoutEvent

NOW = datetime(2024, 6, 15, 9, 30)


@pytest.fixture
def now():
    return NOW


def make_event(**kwargs) -> WorkoutEvent:
    kwargs.setdefault("start_date_local", "2024-06-10T07:00:00")
    return WorkoutEvent(**kwargs)
