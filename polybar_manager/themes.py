"""Installed theme discovery and selection.

A theme is considered installed if there is a directory with the theme's name
in the themes folder. The `global` directory holds shared modules and is not a
theme.
"""

import logging
import subprocess
from pathlib import Path
from typing import List

from .errors import ThemeNotFoundError, ThemeSelectionCancelled
from .models import Settings, Theme

logger = logging.getLogger(__name__)

SHARED_DIRECTORY = "global"


def list_themes(themes_root: Path) -> List[str]:
    """Sorted names of installed themes.

    Raises:
        ThemeNotFoundError: If the themes directory does not exist
    """
    if not themes_root.is_dir():
        raise ThemeNotFoundError("*", str(themes_root))

    themes = sorted(
        entry.name for entry in themes_root.iterdir()
        if entry.is_dir() and entry.name != SHARED_DIRECTORY
    )
    logger.debug(f"Installed themes in {themes_root}: {themes}")
    return themes


def validate_theme(name: str, themes_root: Path) -> None:
    """Raise ThemeNotFoundError unless `name` is installed."""
    installed = list_themes(themes_root)
    if name not in installed:
        raise ThemeNotFoundError(name, str(themes_root), installed)


def theme_for(settings: Settings, name: str) -> Theme:
    """Theme entry from settings, or an empty one (auto-detected bars, default gaps)."""
    for theme in settings.polybar.themes:
        if theme.name == name:
            return theme
    logger.debug(f"Theme \"{name}\" has no settings entry, using defaults")
    return Theme(name=name)


def select_theme(themes: List[str], prompt: str = "Select Polybar theme") -> str:
    """Pick a theme interactively with rofi.

    Raises:
        ThemeSelectionCancelled: If rofi is missing or the user aborts
    """
    try:
        result = subprocess.run(
            ["rofi", "-dmenu", "-p", prompt],
            input="\n".join(themes),
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as e:
        raise ThemeSelectionCancelled("rofi is not installed") from e

    selection = result.stdout.strip()
    if result.returncode != 0 or not selection:
        raise ThemeSelectionCancelled()

    logger.info(f"You selected: {selection}")
    return selection
