"""Unit tests for the bar environment."""

from polybar_manager.environment import EnvironmentBuilder


def keys(entries):
    return {entry.split("=", 1)[0] for entry in entries}


class TestBuild:
    """MONITOR_* and polybar_theme entries."""

    def test_single_primary_output(self, make_output):
        entries = EnvironmentBuilder().build([make_output("DP-4", primary=True)], "/themes/nord/config")

        assert "MONITOR_MAIN=DP-4" in entries
        assert "MONITOR_LEFT" not in keys(entries)
        assert "MONITOR_RIGHT" not in keys(entries)
        assert "polybar_theme=/themes/nord/config" in entries

    def test_three_outputs(self, three_outputs):
        entries = EnvironmentBuilder().build(three_outputs, "/themes/nord/config")

        assert entries == [
            "MONITOR_MAIN=DP-2",
            "MONITOR_LEFT=DP-1",
            "MONITOR_RIGHT=HDMI-1",
            "polybar_theme=/themes/nord/config",
        ]

    def test_no_primary_omits_main(self, make_output):
        entries = EnvironmentBuilder().build([make_output("DP-1", x=0), make_output("DP-2", x=10)], "/t")

        assert keys(entries) == {"MONITOR_LEFT", "MONITOR_RIGHT", "polybar_theme"}

    def test_theme_path_always_present(self):
        assert EnvironmentBuilder().build([], "/t") == ["polybar_theme=/t"]


class TestMerge:
    """Inherited environment first, overrides win."""

    def test_overrides_win(self):
        env = EnvironmentBuilder.merge(
            ["MONITOR_MAIN=DP-1", "polybar_theme=/t"],
            inherited={"HOME": "/home/user", "MONITOR_MAIN": "stale"},
        )

        assert env == {"HOME": "/home/user", "MONITOR_MAIN": "DP-1", "polybar_theme": "/t"}

    def test_later_override_wins(self):
        env = EnvironmentBuilder.merge(["A=1", "A=2"], inherited={})

        assert env == {"A": "2"}

    def test_values_may_contain_equals(self):
        env = EnvironmentBuilder.merge(["OPTS=a=b"], inherited={})

        assert env["OPTS"] == "a=b"

    def test_defaults_to_process_environment(self, monkeypatch):
        monkeypatch.setenv("POLYBAR_MANAGER_TEST", "yes")

        env = EnvironmentBuilder.merge(["X=1"])

        assert env["POLYBAR_MANAGER_TEST"] == "yes"
        assert env["X"] == "1"
