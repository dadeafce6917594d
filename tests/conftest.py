"""Pytest configuration and fixtures for polybar-manager tests.

Provides output factories, a temporary themes directory and a recording
launch capability that stands in for asyncio.create_subprocess_exec.
"""

import asyncio
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add package root to Python path BEFORE test collection
package_root = Path(__file__).parent.parent
if str(package_root) not in sys.path:
    sys.path.insert(0, str(package_root))

from polybar_manager.models import I3Gaps, Output, Settings, Theme


def _reader(data: bytes) -> asyncio.StreamReader:
    reader = asyncio.StreamReader()
    reader.feed_data(data)
    reader.feed_eof()
    return reader


def make_process(stdout: bytes = b"", stderr: bytes = b"", returncode: int = 0) -> MagicMock:
    """Fake asyncio subprocess with pre-filled streams. Needs a running loop."""
    process = MagicMock()
    process.stdout = _reader(stdout)
    process.stderr = _reader(stderr)
    process.wait = AsyncMock(return_value=returncode)
    process.returncode = returncode
    return process


Outcome = Union[Tuple[bytes, bytes, int], Exception]


class RecordingLauncher:
    """Launch capability that records argv/env and returns fake processes.

    Outcomes are keyed by bar name (last argv element); an Exception outcome
    is raised as a start failure.
    """

    def __init__(self, outcomes: Optional[Dict[str, Outcome]] = None):
        self.outcomes = outcomes or {}
        self.calls: List[Tuple[List[str], Dict[str, str]]] = []

    async def __call__(self, *argv, env=None, stdout=None, stderr=None):
        self.calls.append((list(argv), dict(env or {})))
        await asyncio.sleep(0)
        outcome = self.outcomes.get(argv[-1], (b"", b"", 0))
        if isinstance(outcome, Exception):
            raise outcome
        return make_process(*outcome)

    @property
    def bars(self) -> List[str]:
        return [argv[-1] for argv, _ in self.calls]


@pytest.fixture
def launcher_factory():
    """Build RecordingLauncher instances."""
    return RecordingLauncher


@pytest.fixture
def make_output():
    """Factory for Output with sensible defaults."""

    def _make(name: str, x: Optional[int] = 0, primary: bool = False, active: bool = True) -> Output:
        return Output(
            name=name,
            connected=True,
            active=active,
            position=(x, 0) if active else None,
            resolution=(1920, 1080),
            is_primary=primary,
        )

    return _make


@pytest.fixture
def three_outputs(make_output) -> List[Output]:
    """Three active outputs at x=0, 100, 200; the middle one is primary."""
    return [
        make_output("DP-1", x=0),
        make_output("DP-2", x=100, primary=True),
        make_output("HDMI-1", x=200),
    ]


@pytest.fixture
def themes_root(tmp_path: Path) -> Path:
    """Themes directory with `nord` (two bars), `minimal` (no bars) and `global`."""
    root = tmp_path / "themes"
    (root / "global").mkdir(parents=True)
    (root / "global" / "modules").write_text("[module/date]\ntype = internal/date\n")

    nord = root / "nord"
    nord.mkdir()
    (nord / "config").write_text(
        "; nord theme\n"
        "[colors]\n"
        "background = #2e3440\n"
        "\n"
        "[bar/top]\n"
        "monitor = ${env:MONITOR_MAIN}\n"
        "\n"
        "[module/cpu]\n"
        "type = internal/cpu\n"
        "\n"
        "[bar/bottom]\n"
        "monitor = ${env:MONITOR_LEFT}\n"
    )

    minimal = root / "minimal"
    minimal.mkdir()
    (minimal / "config").write_text("[colors]\nbackground = #000000\n")

    return root


@pytest.fixture
def settings(themes_root: Path) -> Settings:
    """Settings pointing at the temporary themes directory."""
    return Settings(
        polybar={
            "themes_directory": str(themes_root),
            "theme": "nord",
            "themes": [
                Theme(name="nord", gaps=I3Gaps(top="30")),
                Theme(name="minimal", bars=["solo"]),
            ],
        },
        i3wm={"default_gaps": I3Gaps(top="0", bottom="0", left="0", right="0")},
    )
