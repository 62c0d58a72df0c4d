from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EnergyMatchPolicy:
    """Weights of the slot-scoring rules and the mapping of raw scores to display numbers.

    The weights are tuning constants; nothing downstream depends on their exact values.
    """

    high_value_bonus: float = 30.0
    creative_bonus: float = 25.0
    low_effort_bonus: float = 20.0
    long_meeting_penalty: float = 15.0
    duration_fit_bonus: float = 20.0

    long_meeting_minutes: float = 60.0
    duration_tolerance_hours: float = 1.0

    def energy_match(self, score: float) -> float:
        """Raw score clamped to [0, 100] for display."""
        return max(0.0, min(100.0, float(score)))

    def confidence(self, score: float) -> float:
        return min(1.0, self.energy_match(score) / 100.0)
