"""
Utils module - Logging, paths, and settings.

Contents:
- message.py: Log class for application logging
- paths.py: Platform-specific path utilities
- settings.py: JSON-backed settings
"""
from diagramflow.utils.message import Log
from diagramflow.utils.paths import (
    get_user_data_dir,
    get_user_config_dir,
    get_logs_dir,
    get_settings_path,
)
from diagramflow.utils.settings import Settings, get_settings, reset_settings

__all__ = [
    'Log',
    'get_user_data_dir',
    'get_user_config_dir',
    'get_logs_dir',
    'get_settings_path',
    'Settings',
    'get_settings',
    'reset_settings',
]
