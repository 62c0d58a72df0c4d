from datetime import datetime

import pytest

from rhythm_planner.models import CalendarInterval, PlanningWindow, Task

# a Monday
DAY = datetime(2026, 1, 5)


def at(hour: int, minute: int = 0, day: datetime = DAY) -> datetime:
    return day.replace(hour=hour, minute=minute)


@pytest.fixture
def day_window() -> PlanningWindow:
    return PlanningWindow.for_day(DAY)


@pytest.fixture
def make_task():
    def _make(task_id=1, **fields) -> Task:
        return Task(id=task_id, **fields)
    return _make


@pytest.fixture
def busy():
    def _make(start: datetime, end: datetime, title: str = "busy") -> CalendarInterval:
        return CalendarInterval(title=title, start=start, end=end)
    return _make
