"""
Settings loader for polybar-manager.

Loads settings.toml (TOML format) into the Settings model.
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..errors import SettingsLoadError
from ..models import Settings

logger = logging.getLogger(__name__)


def default_config_dir() -> Path:
    """$XDG_CONFIG_HOME/polybar-manager, falling back to ~/.config."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / "polybar-manager"


class SettingsLoader:
    """Loads settings from a TOML file."""

    def __init__(self, settings_path: Optional[Path] = None):
        """
        Initialize settings loader.

        Args:
            settings_path: Path to settings.toml (~/.config/polybar-manager/settings.toml)
        """
        self.settings_path = settings_path or default_config_dir() / "settings.toml"

    def load(self) -> Settings:
        """
        Load and validate settings.

        Returns:
            Settings model

        Raises:
            SettingsLoadError: If the file is missing, not valid TOML, or fails validation
        """
        if not self.settings_path.exists():
            raise SettingsLoadError(str(self.settings_path), "file does not exist")

        try:
            with open(self.settings_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise SettingsLoadError(str(self.settings_path), f"invalid TOML: {e}") from e
        except OSError as e:
            raise SettingsLoadError(str(self.settings_path), str(e)) from e

        try:
            settings = Settings(**data)
        except ValidationError as e:
            raise SettingsLoadError(str(self.settings_path), str(e)) from e

        logger.debug(
            f"Loaded settings from {self.settings_path}: "
            f"{len(settings.polybar.themes)} theme entries, default theme {settings.polybar.theme!r}"
        )
        return settings
