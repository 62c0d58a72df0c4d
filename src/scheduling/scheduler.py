from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any, Callable, List, Optional, Tuple, Union

from rhythm_planner.models import (
    CalendarInterval,
    FreeSlot,
    LifePatterns,
    PlanningWindow,
    ScheduleAssignment,
    ScheduleResult,
    Task,
    TaskId,
    coerce_models,
)
from energy.policy import EnergyMatchPolicy
from scheduling.free_slots import extract_free_slots, segment_slots
from scheduling.scoring import score_slot

logger = logging.getLogger(__name__)


def urgency_key(task: Task) -> float:
    """Higher is more urgent; priority 1 (critical) contributes the most."""
    return 2 * (6 - task.priority) + 1.5 * task.impact


def _id_order(task_id: TaskId) -> Tuple[int, Any]:
    # numeric ids sort before string ids so mixed inputs stay comparable
    if isinstance(task_id, (int, float)):
        return (0, task_id)
    return (1, str(task_id))


def order_by_urgency(tasks: Iterable[Task]) -> List[Task]:
    return sorted(tasks, key=lambda t: (-urgency_key(t), _id_order(t.id)))


class Scheduler:
    """Greedy task-to-slot assignment over the free time of a planning window.

    Tasks are taken in urgency order and each one grabs the best-scoring
    remaining slot. This is not globally optimal; it is deterministic.
    """

    def __init__(
        self,
        policy: Optional[EnergyMatchPolicy] = None,
        block_minutes: Optional[int] = 60,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.policy = policy or EnergyMatchPolicy()
        self.block_minutes = block_minutes
        self.clock = clock

    def resolve_window(
        self,
        window: Union[PlanningWindow, Mapping, None] = None,
        reference_time: Optional[datetime] = None,
    ) -> PlanningWindow:
        if isinstance(window, PlanningWindow):
            return window
        if isinstance(window, Mapping):
            return PlanningWindow.model_validate(window)
        if window is not None:
            raise TypeError(f"window must be a PlanningWindow or mapping, got {type(window).__name__}")
        return PlanningWindow.for_day(reference_time or self.clock())

    def candidate_slots(
        self,
        busy_intervals: List[CalendarInterval],
        window: PlanningWindow,
    ) -> List[FreeSlot]:
        return segment_slots(extract_free_slots(busy_intervals, window), self.block_minutes)

    def schedule(
        self,
        tasks,
        busy_intervals,
        patterns: Union[LifePatterns, Mapping, None] = None,
        window: Union[PlanningWindow, Mapping, None] = None,
        reference_time: Optional[datetime] = None,
    ) -> ScheduleResult:
        task_models: List[Task] = coerce_models(tasks, Task, "tasks")
        intervals: List[CalendarInterval] = coerce_models(busy_intervals, CalendarInterval, "busy_intervals")

        if patterns is None:
            patterns = LifePatterns()
        elif isinstance(patterns, Mapping):
            patterns = LifePatterns.model_validate(patterns)
        elif not isinstance(patterns, LifePatterns):
            raise TypeError(f"patterns must be LifePatterns or a mapping, got {type(patterns).__name__}")

        planning_window = self.resolve_window(window, reference_time)
        pool = self.candidate_slots(intervals, planning_window)

        eligible = [t for t in task_models if t.is_schedulable]
        result = ScheduleResult()

        for task in order_by_urgency(eligible):
            if not pool:
                result.unscheduled.append(task.id)
                continue

            best_index = 0
            best_score: Optional[float] = None
            for index, slot in enumerate(pool):
                score = score_slot(task, slot, patterns, self.policy)
                # pool is chronological, so strict > keeps the earliest on ties
                if best_score is None or score > best_score:
                    best_index, best_score = index, score

            slot = pool.pop(best_index)
            result.assignments.append(
                ScheduleAssignment(
                    task=task,
                    slot=slot,
                    score=best_score,
                    energy_match_score=self.policy.energy_match(best_score),
                    confidence=self.policy.confidence(best_score),
                )
            )

        logger.info(
            "Scheduled %d of %d eligible tasks (%d unscheduled, %d slots left)",
            len(result.assignments),
            len(eligible),
            len(result.unscheduled),
            len(pool),
        )
        return result


def schedule(tasks, busy_intervals, patterns=None, window=None, reference_time=None) -> ScheduleResult:
    """Run the default Scheduler once."""
    return Scheduler().schedule(
        tasks,
        busy_intervals,
        patterns=patterns,
        window=window,
        reference_time=reference_time,
    )
