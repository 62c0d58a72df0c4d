from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from rhythm_planner.models import CalendarInterval, FreeSlot, PlanningWindow

logger = logging.getLogger(__name__)


def merge_busy_intervals(intervals: Iterable[CalendarInterval]) -> List[Tuple[datetime, datetime]]:
    """Coalesce overlapping or touching busy intervals into sorted, disjoint blocks.

    Intervals that do not end after they start are dropped.
    """
    valid = []
    for interval in intervals:
        if interval.end <= interval.start:
            logger.debug("Ignoring degenerate busy interval %r", interval.title)
            continue
        valid.append((interval.start, interval.end))

    merged: List[Tuple[datetime, datetime]] = []
    for start, end in sorted(valid):
        if merged and start <= merged[-1][1]:
            last_start, last_end = merged[-1]
            merged[-1] = (last_start, max(last_end, end))
        else:
            merged.append((start, end))
    return merged


def extract_free_slots(
    busy_intervals: Iterable[CalendarInterval],
    window: PlanningWindow,
) -> List[FreeSlot]:
    """Complement of the merged busy set within the window, in chronological order."""
    slots: List[FreeSlot] = []
    cursor = window.start
    preceding: Optional[float] = None

    for busy_start, busy_end in merge_busy_intervals(busy_intervals):
        if busy_end <= window.start:
            if busy_end == window.start:
                preceding = (busy_end - busy_start).total_seconds() / 60
            continue
        if busy_start >= window.end:
            break

        gap_end = max(min(busy_start, window.end), window.start)
        if gap_end > cursor:
            slots.append(FreeSlot(start=cursor, end=gap_end, preceding_busy_minutes=preceding))

        cursor = max(cursor, min(busy_end, window.end))
        preceding = (busy_end - busy_start).total_seconds() / 60

    if window.end > cursor:
        slots.append(FreeSlot(start=cursor, end=window.end, preceding_busy_minutes=preceding))

    return slots


def segment_slots(slots: Iterable[FreeSlot], block_minutes: Optional[int] = 60) -> List[FreeSlot]:
    """Cut free slots at every block_minutes boundary counted from midnight.

    With block_minutes=None the slots are returned unchanged.
    """
    slots = list(slots)
    if block_minutes is None:
        return slots
    if block_minutes <= 0:
        raise ValueError("block_minutes must be positive")

    block = timedelta(minutes=block_minutes)
    segments: List[FreeSlot] = []
    for slot in slots:
        midnight = slot.start.replace(hour=0, minute=0, second=0, microsecond=0)
        boundary = midnight + ((slot.start - midnight) // block + 1) * block
        start = slot.start
        preceding = slot.preceding_busy_minutes
        while start < slot.end:
            end = min(boundary, slot.end)
            segments.append(FreeSlot(start=start, end=end, preceding_busy_minutes=preceding))
            start, boundary, preceding = end, boundary + block, None
    return segments
