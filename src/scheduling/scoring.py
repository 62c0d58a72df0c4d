from __future__ import annotations

from rhythm_planner.models import FreeSlot, LifePatterns, Task
from energy.policy import EnergyMatchPolicy

DEFAULT_POLICY = EnergyMatchPolicy()


def is_high_value(task: Task) -> bool:
    return task.impact >= 8 and task.complexity >= 4


def is_creative(task: Task) -> bool:
    return task.category == "Creative" or "creative" in task.tags


def is_low_effort(task: Task) -> bool:
    return task.category == "Admin" or task.complexity <= 2


def score_slot(
    task: Task,
    slot: FreeSlot,
    patterns: LifePatterns,
    policy: EnergyMatchPolicy = DEFAULT_POLICY,
) -> float:
    """Additive desirability of placing task in slot.

    Hour-of-day rules look at the slot's start hour only. The result is
    unclamped and goes negative when only the long-meeting penalty applies.
    """
    score = 0.0
    hour = slot.start.hour

    if is_high_value(task) and LifePatterns.contains(patterns.peak_hours, hour):
        score += policy.high_value_bonus

    if is_creative(task) and LifePatterns.contains(patterns.creative_hours, hour):
        score += policy.creative_bonus

    if is_low_effort(task) and LifePatterns.contains(patterns.low_energy_hours, hour):
        score += policy.low_effort_bonus

    if (
        slot.preceding_busy_minutes is not None
        and slot.preceding_busy_minutes > policy.long_meeting_minutes
    ):
        score -= policy.long_meeting_penalty

    if abs(slot.duration_hours - task.estimated_hours) <= policy.duration_tolerance_hours:
        score += policy.duration_fit_bonus

    return score
