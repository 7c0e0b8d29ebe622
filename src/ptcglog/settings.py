"""Persistent settings and parser tuning.

Settings are stored in ~/.ptcglog/settings.json (or $PTCGLOG_HOME) and
persist between sessions. The parsing core never reads them itself; callers
build a ParserConfig with ParserConfig.from_settings() and pass it in.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

# Settings file location
SETTINGS_DIR = Path(os.environ.get("PTCGLOG_HOME", Path.home() / ".ptcglog"))
SETTINGS_FILE = SETTINGS_DIR / "settings.json"

# Default settings
DEFAULTS = {
    # Prizes needed to infer a winner when the log never says who won
    "prize_win_threshold": 6,
    # Lines to scan after "drew N cards" for the revealed card list
    "card_lookahead_lines": 4,
    # Copies of one card allowed in a deck (basic energy is exempt)
    "max_card_copies": 4,
    "damage_per_counter": 10,
    "log_level": "INFO",
}


@dataclass(frozen=True)
class ParserConfig:
    """Tunable constants used by the parser and deck reconstructor."""
    prize_win_threshold: int = 6
    card_lookahead_lines: int = 4
    max_card_copies: int = 4
    damage_per_counter: int = 10

    @classmethod
    def from_settings(cls, settings: Optional["Settings"] = None) -> "ParserConfig":
        """Build a config from persisted settings, falling back to defaults."""
        settings = settings or get_settings()
        return cls(
            prize_win_threshold=int(settings.get("prize_win_threshold")),
            card_lookahead_lines=int(settings.get("card_lookahead_lines")),
            max_card_copies=int(settings.get("max_card_copies")),
            damage_per_counter=int(settings.get("damage_per_counter")),
        )


DEFAULT_CONFIG = ParserConfig()


class Settings:
    """Persistent settings manager.

    Example:
        settings = Settings()
        threshold = settings.get("prize_win_threshold")
        settings.set("card_lookahead_lines", 6)
    """

    def __init__(self, settings_file: Optional[Path] = None) -> None:
        """Initialize settings, loading from disk if available."""
        self._file = settings_file or SETTINGS_FILE
        self._data: dict[str, Any] = DEFAULTS.copy()
        self._load()

    def _load(self) -> None:
        """Load settings from disk."""
        if not self._file.exists():
            return

        try:
            with open(self._file, "r") as f:
                loaded = json.load(f)
                # Merge with defaults (new settings get defaults)
                for key, value in loaded.items():
                    self._data[key] = value
            logger.debug(f"Loaded settings from {self._file}")
        except Exception as e:
            logger.warning(f"Failed to load settings: {e}")

    def save(self) -> None:
        """Save settings to disk."""
        try:
            self._file.parent.mkdir(parents=True, exist_ok=True)
            with open(self._file, "w") as f:
                json.dump(self._data, f, indent=2)
            logger.debug(f"Saved settings to {self._file}")
        except Exception as e:
            logger.warning(f"Failed to save settings: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a setting value, or the default if unset."""
        return self._data.get(key, default if default is not None else DEFAULTS.get(key))

    def set(self, key: str, value: Any, save: bool = True) -> None:
        """Set a setting value.

        Args:
            key: Setting key
            value: Value to set
            save: If True (default), immediately save to disk
        """
        self._data[key] = value
        if save:
            self.save()


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
