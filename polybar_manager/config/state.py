"""Current theme state.

File: ~/.config/polybar-manager/state.json

Remembers the last theme that was launched so a bare `polybar-manager launch`
reloads it.
"""

import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError

from ..errors import StateWriteError
from .loader import default_config_dir

logger = logging.getLogger(__name__)


class ThemeState(BaseModel):
    """Persisted selection."""

    theme: Optional[str] = None
    last_updated: Optional[datetime] = None


class ThemeStateStore:
    """Reads and atomically writes the theme state file."""

    def __init__(self, state_path: Optional[Path] = None):
        self.state_path = state_path or default_config_dir() / "state.json"

    def load(self) -> ThemeState:
        """Load state; a missing or corrupt file yields an empty state."""
        try:
            with open(self.state_path) as f:
                return ThemeState(**json.load(f))
        except FileNotFoundError:
            return ThemeState()
        except (json.JSONDecodeError, ValidationError, OSError) as e:
            logger.warning(f"Ignoring unreadable theme state {self.state_path}: {e}")
            return ThemeState()

    def save_theme(self, theme: str) -> None:
        """Record `theme` as current (temp file + rename).

        Raises:
            StateWriteError: If the state directory or file cannot be written
        """
        state = ThemeState(theme=theme, last_updated=datetime.now())

        try:
            self.state_path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                dir=self.state_path.parent, prefix=".state-", suffix=".json"
            )
        except OSError as e:
            raise StateWriteError(str(self.state_path), str(e)) from e

        try:
            with os.fdopen(fd, "w") as f:
                json.dump(state.model_dump(mode="json"), f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, self.state_path)
        except OSError as e:
            if Path(temp_path).exists():
                os.unlink(temp_path)
            raise StateWriteError(str(self.state_path), str(e)) from e

        logger.debug(f"Saved current theme \"{theme}\" to {self.state_path}")
