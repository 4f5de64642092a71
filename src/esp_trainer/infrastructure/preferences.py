"""JSON file adapter for the PreferencesStore port."""

import logging
from pathlib import Path

from pydantic import ValidationError

from esp_trainer.domain.guesses.ports import Preferences, PreferencesStore

logger = logging.getLogger(__name__)


class JsonPreferencesStore(PreferencesStore):
    """
    Persists Preferences as a small JSON document.

    A missing or unreadable file yields defaults rather than an error.
    """

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> Preferences:
        if not self.path.exists():
            return Preferences()

        try:
            return Preferences.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (ValidationError, UnicodeDecodeError, OSError) as e:
            logger.warning(f"Ignoring invalid preferences at {self.path}: {e}")
            return Preferences()

    def save(self, preferences: Preferences) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(preferences.model_dump_json(indent=2), encoding="utf-8")
        logger.debug(f"Saved preferences to {self.path}")
