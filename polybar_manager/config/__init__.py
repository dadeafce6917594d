"""
Configuration subsystem for polybar-manager.

Modules:
- loader: Load settings.toml into the Settings model
- state: Persist the last launched theme
"""

from .loader import SettingsLoader, default_config_dir
from .state import ThemeState, ThemeStateStore

__all__ = [
    "SettingsLoader",
    "default_config_dir",
    "ThemeState",
    "ThemeStateStore",
]
