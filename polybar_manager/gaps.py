"""i3 gap adjustment for polybar themes.

Themes can specify the gaps between i3 and the bar(s). This is useful when i3
doesn't respect the height of the bar, which happens when certain settings
are enabled in polybar.
"""

import logging
from typing import List, Optional

from i3ipc.aio import Connection

from .models import I3Gaps

logger = logging.getLogger(__name__)


class GapsManager:
    """Applies theme gap sizes via i3 IPC."""

    def __init__(self, i3_connection: Optional[Connection] = None):
        """
        Initialize gaps manager.

        Args:
            i3_connection: Async i3ipc Connection (created if None)
        """
        self.i3 = i3_connection

    @staticmethod
    def gap_commands(theme_gaps: I3Gaps, default_gaps: I3Gaps) -> List[str]:
        """i3 commands for each side: theme value if set, else the default."""
        commands = []
        for (side, size), (_, default) in zip(theme_gaps.sides(), default_gaps.sides()):
            value = size or default
            if value is None:
                logger.debug(f"No gap size for \"{side}\", leaving i3 unchanged")
                continue
            commands.append(f"gaps {side} all set {value}")
        return commands

    async def apply(self, theme_name: str, theme_gaps: I3Gaps, default_gaps: I3Gaps) -> bool:
        """Send gap commands to i3.

        Returns:
            True if every command succeeded. Failures are logged, never raised.
        """
        commands = self.gap_commands(theme_gaps, default_gaps)
        if not commands:
            return True

        owned = self.i3 is None
        try:
            if owned:
                self.i3 = await Connection().connect()
        except Exception as e:
            logger.error(f"Failed to connect to i3 IPC, skipping gaps: {e}")
            self.i3 = None
            return False

        try:
            return await self._send(theme_name, commands)
        finally:
            if owned:
                self.i3.main_quit()
                self.i3 = None

    async def _send(self, theme_name: str, commands: List[str]) -> bool:
        ok = True
        for command in commands:
            logger.info(f"Setting i3wm gaps for theme \"{theme_name}\": {command}")
            try:
                replies = await self.i3.command(command)
            except Exception as e:
                logger.error(f"Failed to execute command '{command}': {e}")
                ok = False
                continue

            for reply in replies:
                if not reply.success:
                    logger.error(f"Failed to execute command '{command}': {reply.error}")
                    ok = False

        return ok
