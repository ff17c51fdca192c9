"""
Path management for diagramflow

Handles platform-specific user data directories following standard conventions:
- macOS: ~/Library/Application Support/DiagramFlow/
- Linux: ~/.local/share/diagramflow/
- Windows: %APPDATA%/DiagramFlow/

Setting DIAGRAMFLOW_HOME overrides every location with a single directory
(used by tests and portable installs).
"""
import os
import sys
from pathlib import Path


# Application name
APP_NAME = "DiagramFlow"
HOME_ENV_VAR = "DIAGRAMFLOW_HOME"


def _override_dir() -> Path | None:
    value = os.getenv(HOME_ENV_VAR)
    return Path(value) if value else None


def get_user_data_dir() -> Path:
    """
    Get platform-specific user data directory.

    Returns:
        Path to user data directory where settings and logs are stored.
    """
    override = _override_dir()
    if override is not None:
        user_data_dir = override
    else:
        system = sys.platform
        if system == "darwin":  # macOS
            base = Path.home() / "Library" / "Application Support"
            user_data_dir = base / APP_NAME
        elif system == "win32":  # Windows
            base = Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming"))
            user_data_dir = base / APP_NAME
        else:  # Linux and other Unix-like
            user_data_dir = Path.home() / ".local" / "share" / "diagramflow"

    user_data_dir.mkdir(parents=True, exist_ok=True)
    return user_data_dir


def get_user_config_dir() -> Path:
    """
    Get platform-specific user config directory.

    Same as the data directory on macOS/Windows, ~/.config/diagramflow/ on Linux.
    """
    if _override_dir() is not None or sys.platform in ("darwin", "win32"):
        return get_user_data_dir()

    config_dir = Path.home() / ".config" / "diagramflow"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_logs_dir() -> Path:
    """
    Get directory for application logs.

    Returns:
        Path to logs directory (stored in user data directory).
    """
    logs_dir = get_user_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir


def get_settings_path() -> Path:
    """
    Get path to settings file.

    Returns:
        Path to settings.json in user config directory.
    """
    return get_user_config_dir() / "settings.json"
