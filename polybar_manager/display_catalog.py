"""Display topology discovery through the X RandR extension.

Queries the X server for connected outputs, their CRTC geometry, first
advertised mode and the primary flag, and returns them ordered left to right.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from Xlib import display as xdisplay
from Xlib.error import ConnectionClosedError, DisplayError, XError
from Xlib.ext import randr

from .errors import DisplayServerError, ErrorCode
from .models import Output

logger = logging.getLogger(__name__)


def _decode_name(name) -> str:
    return name.decode() if hasattr(name, "decode") else str(name)


def sort_outputs(outputs: List[Output]) -> List[Output]:
    """Order outputs ascending by x position.

    Inactive outputs have no position and sort after active ones. Equal keys
    keep discovery order.
    """
    return sorted(outputs, key=lambda o: (not o.active, o.x if o.active else 0))


class DisplayCatalog:
    """Builds the ordered list of connected outputs from a live RandR query."""

    def __init__(
        self,
        display_name: Optional[str] = None,
        display_factory: Callable[[Optional[str]], xdisplay.Display] = xdisplay.Display,
    ):
        """Initialize catalog.

        Args:
            display_name: X display to query (defaults to $DISPLAY)
            display_factory: Callable opening a display connection
        """
        self.display_name = display_name
        self.display_factory = display_factory

    def enumerate(self) -> List[Output]:
        """Query connected outputs, sorted left to right.

        Returns:
            Connected outputs, active ones first in ascending x order

        Raises:
            DisplayServerError: If connecting or any RandR query fails
        """
        try:
            dpy = self.display_factory(self.display_name)
        except (DisplayError, ConnectionClosedError, OSError) as e:
            raise DisplayServerError(
                "connection", str(e), code=ErrorCode.DISPLAY_CONNECTION_FAILED
            ) from e

        try:
            outputs = self._query_outputs(dpy)
        except (XError, ConnectionClosedError, DisplayError) as e:
            raise DisplayServerError("query", str(e)) from e
        finally:
            dpy.close()

        ordered = sort_outputs(outputs)
        logger.info(
            f"Discovered {len(ordered)} connected output(s): "
            f"{', '.join(self._describe(o) for o in ordered)}"
        )
        return ordered

    def _query_outputs(self, dpy) -> List[Output]:
        if not dpy.has_extension("RANDR"):
            raise DisplayServerError("query", "RANDR extension not available")

        root = dpy.screen().root
        resources = randr.get_screen_resources(root)
        timestamp = resources.config_timestamp
        primary_id = randr.get_output_primary(root).output
        modes: Dict[int, Tuple[int, int]] = {
            mode.id: (mode.width, mode.height) for mode in resources.modes
        }

        outputs = []
        for output_id in resources.outputs:
            info = randr.get_output_info(root, output_id, timestamp)
            name = _decode_name(info.name)

            if info.connection != randr.Connected:
                logger.debug(f"Skipping disconnected output {name}")
                continue

            position = self._crtc_position(root, info.crtc, timestamp, name)

            resolution = None
            if info.modes:
                resolution = modes.get(info.modes[0])

            outputs.append(Output(
                name=name,
                connected=True,
                active=position is not None,
                position=position,
                resolution=resolution,
                is_primary=output_id == primary_id,
            ))

        return outputs

    @staticmethod
    def _crtc_position(root, crtc: int, timestamp: int, name: str) -> Optional[Tuple[int, int]]:
        """Position of the output's CRTC, or None if the output is not driving one."""
        if not crtc:
            logger.debug(f"Output {name} is connected but has no CRTC (inactive)")
            return None
        try:
            crtc_info = randr.get_crtc_info(root, crtc, timestamp)
        except XError as e:
            logger.debug(f"Output {name} CRTC query failed, treating as inactive: {e}")
            return None
        return (crtc_info.x, crtc_info.y)

    @staticmethod
    def _describe(output: Output) -> str:
        if not output.active:
            return f"{output.name} (inactive)"
        flags = " primary" if output.is_primary else ""
        return f"{output.name}@{output.position[0]},{output.position[1]}{flags}"
