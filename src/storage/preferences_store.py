from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from rhythm_planner.models import UserPreferences

logger = logging.getLogger(__name__)


class PreferencesStore:
    def __init__(self, path: str = "data/preferences.json"):
        self.path = Path(path)

    def load(self) -> UserPreferences:
        """
        Load preferences from disk. Returns defaults if the file is missing or invalid.
        """
        if not self.path.exists():
            return UserPreferences()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return UserPreferences.model_validate(data)
        except (OSError, ValueError, ValidationError) as e:
            logger.warning("Unreadable preferences at %s, using defaults: %s", self.path, e)
            return UserPreferences()

    def save(self, prefs: UserPreferences) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # tuples become JSON lists; the model reads them back as hour ranges
        data = prefs.model_dump(mode="json")
        self.path.write_text(
            json.dumps(data, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
