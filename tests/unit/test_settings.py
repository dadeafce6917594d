"""Unit tests for settings loading, theme state and installed themes."""

from unittest.mock import MagicMock, patch

import pytest

from polybar_manager.config import SettingsLoader, ThemeStateStore
from polybar_manager.errors import (
    ErrorCode,
    SettingsLoadError,
    StateWriteError,
    ThemeNotFoundError,
    ThemeSelectionCancelled,
)
from polybar_manager.models import KillScope, Settings
from polybar_manager.themes import list_themes, select_theme, theme_for, validate_theme


SETTINGS_TOML = """
[polybar]
themes_directory = ".config/polybar/themes"
theme = "nord"
kill_scope = "user"

[[polybar.themes]]
name = "nord"
bars = ["top", "bottom"]

[polybar.themes.gaps]
top = 30

[i3wm.default_gaps]
top = "0"
bottom = "0"
"""


class TestSettingsLoader:

    def test_load_valid_settings(self, tmp_path):
        path = tmp_path / "settings.toml"
        path.write_text(SETTINGS_TOML)

        settings = SettingsLoader(path).load()

        assert settings.polybar.theme == "nord"
        assert settings.polybar.kill_scope == KillScope.USER
        assert settings.polybar.binary == "polybar"
        nord = settings.polybar.themes[0]
        assert nord.bars == ["top", "bottom"]
        assert nord.gaps.top == "30"
        assert settings.i3wm.default_gaps.left is None

    def test_relative_themes_directory_resolves_against_home(self, tmp_path):
        settings = Settings(polybar={"themes_directory": ".config/polybar/themes"})

        assert settings.themes_root(home=tmp_path) == tmp_path / ".config/polybar/themes"

    def test_missing_file(self, tmp_path):
        with pytest.raises(SettingsLoadError, match="does not exist"):
            SettingsLoader(tmp_path / "nope.toml").load()

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "settings.toml"
        path.write_text("[polybar\ntheme = ")

        with pytest.raises(SettingsLoadError, match="invalid TOML"):
            SettingsLoader(path).load()

    def test_schema_violation(self, tmp_path):
        path = tmp_path / "settings.toml"
        path.write_text('[polybar]\nkill_scope = "everyone"\n')

        with pytest.raises(SettingsLoadError):
            SettingsLoader(path).load()

    def test_default_path_honours_xdg(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

        assert SettingsLoader().settings_path == tmp_path / "polybar-manager" / "settings.toml"


class TestThemeStateStore:

    def test_round_trip(self, tmp_path):
        store = ThemeStateStore(tmp_path / "state" / "state.json")

        store.save_theme("nord")

        assert store.load().theme == "nord"
        assert store.load().last_updated is not None
        assert not list((tmp_path / "state").glob(".state-*"))

    def test_missing_file_is_empty_state(self, tmp_path):
        assert ThemeStateStore(tmp_path / "state.json").load().theme is None

    def test_corrupt_file_is_ignored(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{not json")

        assert ThemeStateStore(path).load().theme is None

    def test_unwritable_state_directory(self, tmp_path):
        blocker = tmp_path / "polybar-manager"
        blocker.write_text("not a directory")
        store = ThemeStateStore(blocker / "state.json")

        with pytest.raises(StateWriteError) as exc_info:
            store.save_theme("nord")

        assert exc_info.value.code == ErrorCode.STATE_WRITE_FAILED
        assert store.load().theme is None

    def test_failed_write_leaves_no_temp_file(self, tmp_path):
        store = ThemeStateStore(tmp_path / "state.json")

        with patch("polybar_manager.config.state.os.replace", side_effect=PermissionError(13, "Permission denied")):
            with pytest.raises(StateWriteError, match="Permission denied"):
                store.save_theme("nord")

        assert list(tmp_path.iterdir()) == []


class TestThemes:

    def test_list_themes_excludes_global(self, themes_root):
        assert list_themes(themes_root) == ["minimal", "nord"]

    def test_missing_themes_root(self, tmp_path):
        with pytest.raises(ThemeNotFoundError):
            list_themes(tmp_path / "missing")

    def test_validate_theme(self, themes_root):
        validate_theme("nord", themes_root)

        with pytest.raises(ThemeNotFoundError) as exc_info:
            validate_theme("dracula", themes_root)

        assert exc_info.value.context["installed"] == ["minimal", "nord"]

    def test_theme_for_known_and_unknown(self, settings):
        assert theme_for(settings, "nord").gaps.top == "30"

        unknown = theme_for(settings, "dracula")
        assert unknown.name == "dracula"
        assert unknown.bars == []

    def test_select_theme_with_rofi(self):
        result = MagicMock(returncode=0, stdout="nord\n")

        with patch("polybar_manager.themes.subprocess.run", return_value=result) as run:
            assert select_theme(["minimal", "nord"]) == "nord"

        assert run.call_args.kwargs["input"] == "minimal\nnord"

    def test_select_theme_cancelled(self):
        result = MagicMock(returncode=1, stdout="")

        with patch("polybar_manager.themes.subprocess.run", return_value=result):
            with pytest.raises(ThemeSelectionCancelled):
                select_theme(["nord"])

    def test_select_theme_without_rofi(self):
        with patch("polybar_manager.themes.subprocess.run", side_effect=FileNotFoundError("rofi")):
            with pytest.raises(ThemeSelectionCancelled, match="rofi"):
                select_theme(["nord"])
