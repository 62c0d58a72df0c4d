from rhythm_planner.models import CalendarInterval, LifePatterns, PlanningWindow, Task, UserPreferences

from conftest import DAY, at


def test_task_defaults():
    t = Task(id=1)
    assert t.estimated_hours == 1.0
    assert t.impact == 5
    assert t.complexity == 3
    assert t.priority == 3
    assert t.status == "pending"


def test_task_malformed_values_fall_back():
    t = Task(id="a", impact=None, estimated_hours=None, complexity="lots", tags=None)
    assert t.impact == 5
    assert t.estimated_hours == 1.0
    assert t.complexity == 3
    assert t.tags == []


def test_task_ratings_are_clamped():
    t = Task(id=1, priority=0, impact=42, complexity=-3, estimated_hours=-2)
    assert t.priority == 1
    assert t.impact == 10
    assert t.complexity == 1
    assert t.estimated_hours == 1.0


def test_task_accepts_client_keys():
    t = Task.model_validate({"id": 3, "estimatedHours": 2.5, "dueDate": "2026-01-06T12:00:00"})
    assert t.estimated_hours == 2.5
    assert t.due_date == at(12).replace(day=6)


def test_task_status():
    assert Task(id=1, status="in_progress").status == "in-progress"
    assert Task(id=1, status="archived").status == "pending"
    assert not Task(id=1, status="completed").is_schedulable
    assert Task(id=1, status="blocked").is_schedulable


def test_life_patterns_defaults():
    p = LifePatterns()
    assert p.peak_hours == (10, 12)
    assert p.creative_hours == (20, 22)
    assert p.low_energy_hours == (14, 16)


def test_life_patterns_invalid_range_falls_back_per_field():
    p = LifePatterns.model_validate({"peakHours": [12, 10], "creativeHours": [18, 19], "lowEnergyHours": [3, 30]})
    assert p.peak_hours == (10, 12)
    assert p.creative_hours == (18, 19)
    assert p.low_energy_hours == (14, 16)


def test_life_patterns_contains_is_inclusive():
    assert LifePatterns.contains((10, 12), 10)
    assert LifePatterns.contains((10, 12), 12)
    assert not LifePatterns.contains((10, 12), 13)


def test_window_for_day():
    w = PlanningWindow.for_day(at(15, 30))
    assert w.start == DAY
    assert (w.end - w.start).days == 1


def test_preferences_defaults():
    p = UserPreferences()
    assert p.long_meeting_minutes == 60
    assert p.slot_block_minutes == 60
    assert p.life_patterns == LifePatterns()


def test_offset_timestamps_become_naive_utc():
    task = Task(id=1, dueDate="2026-01-05T10:00:00+02:00", created_at="2026-01-05T08:00:00Z")
    assert task.due_date == at(8)
    assert task.created_at == at(8)
    assert task.due_date.tzinfo is None

    interval = CalendarInterval(start="2026-01-05T09:00:00Z", end=at(10))
    assert interval.duration_minutes == 60

    w = PlanningWindow(start="2026-01-05T00:00:00Z", end=at(12))
    assert w.start == DAY


def test_task_progress_is_clamped():
    assert Task(id=1).progress == 0
    assert Task(id=1, progress=140).progress == 100
    assert Task(id=1, progress="n/a").progress == 0
