import os

from energy.policy import EnergyMatchPolicy
from storage.preferences_store import PreferencesStore

# Configuration
PREFERENCES_PATH = os.getenv("PREFERENCES_PATH", "data/preferences.json")
DURATION_TOLERANCE_HOURS = float(os.getenv("DURATION_TOLERANCE_HOURS", "1.0"))

policy = EnergyMatchPolicy(duration_tolerance_hours=DURATION_TOLERANCE_HOURS)


def get_preferences_store() -> PreferencesStore:
    return PreferencesStore(path=PREFERENCES_PATH)


def get_energy_policy() -> EnergyMatchPolicy:
    return policy
