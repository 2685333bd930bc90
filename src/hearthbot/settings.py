"""Persistent settings for the hearthbot driver.

Settings are stored in ~/.hearthbot/settings.json and persist between sessions.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

# Settings file location
SETTINGS_DIR = Path.home() / ".hearthbot"
SETTINGS_FILE = SETTINGS_DIR / "settings.json"

# Default settings
DEFAULTS = {
    "mode": "tournament_ranked",
    "host": "",  # "package.module:factory" building the HostBridge
    "engine": "hearthbot.decision:PassiveEngine",
    "tick_interval": 0.1,  # seconds between driver ticks
    "hotkeys": True,
    "pause_hotkey": "f9",
    "reload_hotkey": "f8",
    # Per-delay overrides in milliseconds, keyed by BotConfig field name
    "delays": {},
}


class Settings:
    """Persistent settings manager.

    Example:
        settings = Settings()
        mode = settings.get("mode")
        settings.set("mode", "practice_expert")
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        """Initialize settings, loading from disk if available.

        Args:
            path: Settings file. Defaults to ~/.hearthbot/settings.json.
        """
        self.path = path or SETTINGS_FILE
        self._data: dict[str, Any] = copy.deepcopy(DEFAULTS)
        self._load()

    def _load(self) -> None:
        """Load settings from disk."""
        if not self.path.exists():
            return

        try:
            with open(self.path, "r") as f:
                loaded = json.load(f)
                # Merge with defaults (new settings get defaults)
                for key, value in loaded.items():
                    self._data[key] = value
            logger.debug(f"Loaded settings from {self.path}")
        except Exception as e:
            logger.warning(f"Failed to load settings: {e}")

    def save(self) -> None:
        """Save settings to disk."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                json.dump(self._data, f, indent=2)
            logger.debug(f"Saved settings to {self.path}")
        except Exception as e:
            logger.warning(f"Failed to save settings: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a setting value.

        Args:
            key: Setting key
            default: Default value if key not found

        Returns:
            Setting value or default
        """
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

    def reset(self) -> None:
        """Reset all settings to defaults."""
        self._data = copy.deepcopy(DEFAULTS)
        self.save()


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
