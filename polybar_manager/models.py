"""
Pydantic data models for polybar-manager.

Outputs and role assignments are rebuilt from a live display query on every
invocation and are immutable. Themes and settings are read-only input.
"""

from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Enumerations

class MonitorRole(str, Enum):
    """Positional monitor label exported to bar processes.

    - MAIN: the display server's primary output
    - LEFT: lowest-x active non-primary output
    - RIGHT: second and third lowest-x active non-primary outputs
    """

    MAIN = "main"
    LEFT = "left"
    RIGHT = "right"

    @property
    def env_key(self) -> str:
        """Environment variable carrying the output name for this role."""
        return f"MONITOR_{self.name}"


class KillScope(str, Enum):
    """Which running bar processes are terminated before a launch."""

    SYSTEM = "system"
    USER = "user"


class BarStatus(str, Enum):
    """Outcome of one bar process."""

    EXITED = "exited"
    FAILED = "failed"
    START_FAILED = "start_failed"


# Display topology

class Output(BaseModel):
    """One physical monitor connector as reported by RandR.

    Immutable after creation (frozen).
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Output identifier (DP-4, eDP-1, etc.)")
    connected: bool = Field(True, description="Whether a monitor is plugged in")
    active: bool = Field(False, description="Whether the output drives a CRTC")
    position: Optional[Tuple[int, int]] = Field(
        None, description="(x, y) in the virtual screen, None when inactive"
    )
    resolution: Optional[Tuple[int, int]] = Field(
        None, description="(width, height) of the first advertised mode"
    )
    is_primary: bool = Field(False, description="Server designated primary output")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate output name is non-empty."""
        if not v or not v.strip():
            raise ValueError("Output name cannot be empty")
        return v

    @property
    def x(self) -> Optional[int]:
        return self.position[0] if self.position is not None else None


class MonitorRoleAssignment(BaseModel):
    """Resolved role to output mapping.

    Immutable after creation (frozen).
    """

    model_config = ConfigDict(frozen=True)

    role: MonitorRole = Field(..., description="Positional monitor role")
    output: str = Field(..., description="Physical output name")
    sort_index: int = Field(..., ge=0, description="Index among active outputs sorted by x")


# Themes

class I3Gaps(BaseModel):
    """i3 gap sizes; unset sides fall back to defaults."""

    top: Optional[str] = None
    bottom: Optional[str] = None
    left: Optional[str] = None
    right: Optional[str] = None

    @field_validator("top", "bottom", "left", "right", mode="before")
    @classmethod
    def coerce_size(cls, v):
        """Accept integer sizes from TOML and treat blank strings as unset."""
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    def sides(self) -> List[Tuple[str, Optional[str]]]:
        return [
            ("top", self.top),
            ("bottom", self.bottom),
            ("left", self.left),
            ("right", self.right),
        ]


class Theme(BaseModel):
    """A named bundle of bar definitions and gap preferences."""

    name: str = Field(..., description="Theme directory name")
    bars: List[str] = Field(default_factory=list, description="Explicit bar names")
    gaps: I3Gaps = Field(default_factory=I3Gaps, description="Theme gap overrides")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Theme name cannot be empty")
        return v.strip()


# Settings

class PolybarSettings(BaseModel):
    """[polybar] table of settings.toml."""

    themes_directory: str = Field(".config/polybar/themes", description="Themes root, relative to $HOME")
    theme: Optional[str] = Field(None, description="Default theme")
    binary: str = Field("polybar", description="Polybar executable")
    kill_scope: KillScope = Field(KillScope.SYSTEM, description="Which running bars to kill")
    require_primary: bool = Field(False, description="Fail when no primary monitor resolves")
    themes: List[Theme] = Field(default_factory=list, description="Per-theme settings")

    @field_validator("binary")
    @classmethod
    def validate_binary(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Polybar binary cannot be empty")
        return v.strip()


class I3wmSettings(BaseModel):
    """[i3wm] table of settings.toml."""

    default_gaps: I3Gaps = Field(default_factory=I3Gaps)


class Settings(BaseModel):
    """Top-level settings document."""

    polybar: PolybarSettings = Field(default_factory=PolybarSettings)
    i3wm: I3wmSettings = Field(default_factory=I3wmSettings)

    def themes_root(self, home: Optional[Path] = None) -> Path:
        """Absolute themes directory; relative paths resolve against $HOME."""
        path = Path(self.polybar.themes_directory).expanduser()
        if path.is_absolute():
            return path
        return (home or Path.home()) / path


class LaunchContext(BaseModel):
    """Everything one launch needs, threaded explicitly through each component."""

    model_config = ConfigDict(frozen=True)

    theme: Theme
    themes_root: Path
    default_gaps: I3Gaps = Field(default_factory=I3Gaps)
    binary: str = "polybar"
    kill_scope: KillScope = KillScope.SYSTEM
    require_primary: bool = False
    display_name: Optional[str] = None
    apply_gaps: bool = True

    @property
    def theme_path(self) -> Path:
        """Directory of the selected theme."""
        return self.themes_root / self.theme.name

    @property
    def theme_config_path(self) -> Path:
        """Polybar config file of the selected theme."""
        return self.theme_path / "config"


# Supervision results

class BarResult(BaseModel):
    """Completion report for one bar process."""

    bar: str
    status: BarStatus
    exit_code: Optional[int] = None
    stdout: str = ""
    stderr: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == BarStatus.EXITED


class SupervisorReport(BaseModel):
    """Per-bar results of one launch batch, in launch order."""

    results: List[BarResult] = Field(default_factory=list)

    @property
    def succeeded(self) -> List[BarResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> List[BarResult]:
        return [r for r in self.results if not r.ok]

    @property
    def all_ok(self) -> bool:
        return not self.failed
