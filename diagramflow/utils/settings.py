"""
Settings management for diagramflow

Persistent settings that tune defaults of the domain layer: logging,
text export formatting and the default geometry of new components.
"""

import copy
import json
import os
import sys

from diagramflow.utils.paths import get_settings_path

# Default settings
DEFAULT_SETTINGS = {
    # Logging settings
    "log_level": "INFO",
    "file_logging": False,

    # Portable text export
    "export_indent": 2,

    # Component defaults
    "default_position": {"x": 100.0, "y": 100.0, "width": 160.0, "height": 80.0},
}


class Settings:
    """Application settings manager"""

    def __init__(self, settings_file: str | None = None):
        self.settings_file = settings_file or str(get_settings_path())
        self.settings = copy.deepcopy(DEFAULT_SETTINGS)
        self.load_settings()

    def load_settings(self):
        """Load settings from file, keeping defaults for missing keys"""
        if not os.path.exists(self.settings_file):
            return
        try:
            with open(self.settings_file, 'r', encoding='utf-8') as file:
                saved_settings = json.load(file)
        except (OSError, json.JSONDecodeError) as e:
            # Logging is configured from these settings, so warn on stderr only
            print(f"diagramflow: failed to load settings from {self.settings_file}: {e}", file=sys.stderr)
            return

        if isinstance(saved_settings, dict):
            # Update defaults with saved settings
            self.settings.update(saved_settings)

    def save_settings(self):
        """Save settings to file"""
        os.makedirs(os.path.dirname(self.settings_file), exist_ok=True)
        with open(self.settings_file, 'w', encoding='utf-8') as file:
            json.dump(self.settings, file, indent=4)

    def get(self, key, default=None):
        """Get a setting value"""
        return self.settings.get(key, default)

    def set(self, key, value):
        """Set a setting value"""
        self.settings[key] = value
        self.save_settings()

    def get_default_position(self) -> dict:
        """Default geometry for new components, completed from DEFAULT_SETTINGS"""
        position = dict(DEFAULT_SETTINGS["default_position"])
        configured = self.get("default_position") or {}
        if isinstance(configured, dict):
            position.update({k: float(v) for k, v in configured.items() if k in position})
        return position

    def get_export_indent(self) -> int | None:
        indent = self.get("export_indent")
        return int(indent) if indent is not None else None


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the lazily created settings instance"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings instance so the next access reloads from disk"""
    global _settings
    _settings = None
