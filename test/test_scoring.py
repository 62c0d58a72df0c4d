import pytest

from energy.policy import EnergyMatchPolicy
from rhythm_planner.models import FreeSlot, LifePatterns
from scheduling.scoring import score_slot

from conftest import at

PATTERNS = LifePatterns()


def _slot(hour, hours=1, preceding=None):
    return FreeSlot(start=at(hour), end=at(hour + hours), preceding_busy_minutes=preceding)


def test_high_value_task_in_peak_hours(make_task):
    task = make_task(impact=9, complexity=5, estimated_hours=2)
    assert score_slot(task, _slot(10), PATTERNS) == 50
    assert score_slot(task, _slot(12), PATTERNS) == 50
    assert score_slot(task, _slot(13), PATTERNS) == 20


def test_high_value_needs_both_impact_and_complexity(make_task):
    task = make_task(impact=9, complexity=3, estimated_hours=5)
    assert score_slot(task, _slot(10), PATTERNS) == 0


@pytest.mark.parametrize("fields", [{"category": "Creative"}, {"tags": ["creative"]}])
def test_creative_task_in_creative_hours(make_task, fields):
    task = make_task(estimated_hours=1, **fields)
    assert score_slot(task, _slot(20), PATTERNS) == 45
    assert score_slot(task, _slot(19), PATTERNS) == 20


@pytest.mark.parametrize("fields", [{"category": "Admin"}, {"complexity": 2}])
def test_low_effort_task_in_low_energy_hours(make_task, fields):
    task = make_task(estimated_hours=1, **fields)
    assert score_slot(task, _slot(14), PATTERNS) == 40


def test_penalty_after_long_meeting_can_go_negative(make_task):
    task = make_task(estimated_hours=5)
    assert score_slot(task, _slot(17, preceding=90), PATTERNS) == -15


def test_meeting_of_exactly_threshold_is_not_long(make_task):
    task = make_task(estimated_hours=5)
    assert score_slot(task, _slot(17, preceding=60), PATTERNS) == 0


def test_duration_fit_tolerance(make_task):
    assert score_slot(make_task(estimated_hours=3), _slot(1, hours=2), PATTERNS) == 20
    assert score_slot(make_task(estimated_hours=3.5), _slot(1, hours=2), PATTERNS) == 0


def test_rules_are_additive(make_task):
    patterns = LifePatterns(peak_hours=(20, 22), creative_hours=(20, 22))
    task = make_task(impact=9, complexity=5, category="Creative", estimated_hours=1)
    assert score_slot(task, _slot(20), patterns) == 75


def test_weights_come_from_policy(make_task):
    policy = EnergyMatchPolicy(high_value_bonus=10, duration_fit_bonus=1, long_meeting_minutes=30)
    task = make_task(impact=8, complexity=4, estimated_hours=1)
    assert score_slot(task, _slot(10, preceding=45), PATTERNS, policy) == 10 + 1 - 15


def test_energy_match_and_confidence_are_clamped():
    policy = EnergyMatchPolicy()
    assert policy.energy_match(-15) == 0
    assert policy.energy_match(130) == 100
    assert policy.confidence(50) == 0.5
    assert policy.confidence(250) == 1.0
