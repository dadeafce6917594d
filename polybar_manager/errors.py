"""
Error types for polybar-manager.

Fatal errors (display server, theme resolution, settings) stop a run before
any bar process is spawned. Per-bar failures are never raised; they are
recorded in the supervisor report instead.
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(Enum):
    """
    Error codes for polybar-manager.

    - 1000-1099: Display server errors
    - 1100-1199: Theme errors
    - 1200-1299: Settings errors
    - 1300-1399: Monitor role errors
    """

    # Display server errors (1000-1099)
    DISPLAY_CONNECTION_FAILED = 1000
    DISPLAY_QUERY_FAILED = 1001

    # Theme errors (1100-1199)
    THEME_NOT_FOUND = 1100
    THEME_FILE_NOT_FOUND = 1101
    NO_BARS_FOUND = 1102
    THEME_SELECTION_CANCELLED = 1103
    THEME_FILE_UNREADABLE = 1104

    # Settings errors (1200-1299)
    SETTINGS_LOAD_FAILED = 1200
    STATE_WRITE_FAILED = 1201

    # Monitor role errors (1300-1399)
    NO_PRIMARY_MONITOR = 1300


class PolybarManagerError(Exception):
    """Base exception for polybar-manager errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            suggestion: Suggested recovery action
            context: Additional context for debugging
        """
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to a dictionary for JSON output.

        Returns:
            Error dictionary with code, message, suggestion, and context
        """
        result = {
            "code": self.code.value,
            "message": self.message
        }

        if self.suggestion:
            result["suggestion"] = self.suggestion

        if self.context:
            result["context"] = self.context

        return result


class DisplayServerError(PolybarManagerError):
    """Connection or query failure against the X server."""

    def __init__(self, operation: str, reason: str, code: ErrorCode = ErrorCode.DISPLAY_QUERY_FAILED):
        super().__init__(
            code=code,
            message=f"Display server {operation} failed: {reason}",
            suggestion="Ensure an X session is running and $DISPLAY is set",
            context={"operation": operation, "reason": reason}
        )


class ThemeNotFoundError(PolybarManagerError):
    """Selected theme is not installed under the themes directory."""

    def __init__(self, theme: str, themes_root: str, installed: Optional[list] = None):
        context = {"theme": theme, "themes_root": themes_root}
        if installed is not None:
            context["installed"] = installed

        super().__init__(
            code=ErrorCode.THEME_NOT_FOUND,
            message=f"Theme \"{theme}\" was not found in {themes_root}",
            suggestion="Run `polybar-manager themes` to list installed themes",
            context=context
        )


class ThemeFileNotFoundError(PolybarManagerError):
    """Theme configuration file is missing."""

    def __init__(self, path: str):
        super().__init__(
            code=ErrorCode.THEME_FILE_NOT_FOUND,
            message=f"Theme configuration not found: {path}",
            suggestion="Every theme directory needs a polybar `config` file",
            context={"path": path}
        )


class ThemeFileReadError(PolybarManagerError):
    """Theme configuration file exists but cannot be read."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            code=ErrorCode.THEME_FILE_UNREADABLE,
            message=f"Cannot read theme configuration {path}: {reason}",
            suggestion="Check that `config` is a regular file readable by the current user",
            context={"path": path, "reason": reason}
        )


class NoBarsFoundError(PolybarManagerError):
    """Theme defines no bars, neither in settings nor in its config file."""

    def __init__(self, theme: str, path: str):
        super().__init__(
            code=ErrorCode.NO_BARS_FOUND,
            message=f"No bars found for theme \"{theme}\" in {path}",
            suggestion="Declare bars as [bar/<name>] sections or list them under polybar.themes in settings",
            context={"theme": theme, "path": path}
        )


class ThemeSelectionCancelled(PolybarManagerError):
    """Interactive theme selection was aborted."""

    def __init__(self, reason: str = "no theme selected"):
        super().__init__(
            code=ErrorCode.THEME_SELECTION_CANCELLED,
            message=f"Theme selection cancelled: {reason}",
            context={"reason": reason}
        )


class SettingsLoadError(PolybarManagerError):
    """Settings loading error."""

    def __init__(self, file_path: str, reason: str):
        super().__init__(
            code=ErrorCode.SETTINGS_LOAD_FAILED,
            message=f"Failed to load settings from {file_path}: {reason}",
            suggestion="Check file syntax and permissions",
            context={"file_path": file_path, "reason": reason}
        )


class StateWriteError(PolybarManagerError):
    """Current theme could not be persisted."""

    def __init__(self, file_path: str, reason: str):
        super().__init__(
            code=ErrorCode.STATE_WRITE_FAILED,
            message=f"Failed to save current theme to {file_path}: {reason}",
            suggestion="Check that the polybar-manager config directory is writable",
            context={"file_path": file_path, "reason": reason}
        )


class NoPrimaryMonitorError(PolybarManagerError):
    """No active output is flagged primary while require_primary is set."""

    def __init__(self, outputs: list):
        super().__init__(
            code=ErrorCode.NO_PRIMARY_MONITOR,
            message="No primary monitor resolved among active outputs",
            suggestion="Set a primary output with `xrandr --output <name> --primary`",
            context={"active_outputs": outputs}
        )
