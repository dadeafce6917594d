"""Launch pipeline.

Theme resolution and display discovery run first and independently; any
failure there aborts before a single process is spawned. Only then are gaps
applied, stale bars killed and the new bars fanned out.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Tuple

from .bar_supervisor import BarSupervisor
from .config import ThemeStateStore
from .display_catalog import DisplayCatalog
from .environment import EnvironmentBuilder
from .errors import NoPrimaryMonitorError
from .gaps import GapsManager
from .models import LaunchContext, MonitorRole, Output, Settings, SupervisorReport
from .theme_resolver import ThemeResolver
from .themes import list_themes, select_theme, theme_for, validate_theme

logger = logging.getLogger(__name__)


def build_context(
    settings: Settings,
    theme_name: Optional[str] = None,
    state_store: Optional[ThemeStateStore] = None,
    select: bool = False,
    display_name: Optional[str] = None,
    apply_gaps: bool = True,
) -> LaunchContext:
    """Pick and validate the theme and assemble the per-run context.

    Theme precedence: interactive selection, explicit name, last launched
    theme, settings default.

    Raises:
        ThemeNotFoundError: If no theme is configured or it is not installed
        ThemeSelectionCancelled: If interactive selection was aborted
    """
    themes_root = settings.themes_root()

    if select:
        theme_name = select_theme(list_themes(themes_root))

    if not theme_name and state_store is not None:
        theme_name = state_store.load().theme
        if theme_name:
            logger.info(f"No theme specified, reloading current: \"{theme_name}\"")

    if not theme_name:
        theme_name = settings.polybar.theme
        logger.info(f"No theme specified, loading default: \"{theme_name}\"")

    validate_theme(theme_name or "", themes_root)

    if state_store is not None:
        state_store.save_theme(theme_name)

    return LaunchContext(
        theme=theme_for(settings, theme_name),
        themes_root=themes_root,
        default_gaps=settings.i3wm.default_gaps,
        binary=settings.polybar.binary,
        kill_scope=settings.polybar.kill_scope,
        require_primary=settings.polybar.require_primary,
        display_name=display_name,
        apply_gaps=apply_gaps,
    )


class Orchestrator:
    """Runs one launch: resolve, discover, build environment, supervise."""

    def __init__(
        self,
        theme_resolver: Optional[ThemeResolver] = None,
        catalog: Optional[DisplayCatalog] = None,
        env_builder: Optional[EnvironmentBuilder] = None,
        gaps: Optional[GapsManager] = None,
        supervisor: Optional[BarSupervisor] = None,
        inherited_env: Optional[Dict[str, str]] = None,
    ):
        self.theme_resolver = theme_resolver or ThemeResolver()
        self.catalog = catalog
        self.env_builder = env_builder or EnvironmentBuilder()
        self.gaps = gaps
        self.supervisor = supervisor
        self.inherited_env = inherited_env

    async def prepare(self, context: LaunchContext) -> Tuple[List[str], List[Output], Dict[str, str]]:
        """Resolve bars, discover outputs and build the bar environment.

        Raises:
            ThemeFileNotFoundError, NoBarsFoundError: Theme has nothing to launch
            DisplayServerError: X query failed
            NoPrimaryMonitorError: No primary output while require_primary is set
        """
        catalog = self.catalog or DisplayCatalog(context.display_name)

        bars, outputs = await asyncio.gather(
            asyncio.to_thread(self.theme_resolver.resolve, context.theme, context.theme_config_path),
            asyncio.to_thread(catalog.enumerate),
        )

        overrides = self.env_builder.build(outputs, context.theme_config_path)
        if not any(entry.startswith(f"{MonitorRole.MAIN.env_key}=") for entry in overrides):
            active = [o.name for o in outputs if o.active]
            if context.require_primary:
                raise NoPrimaryMonitorError(active)
            logger.warning(f"No primary monitor among active outputs {active}, {MonitorRole.MAIN.env_key} unset")

        env = self.env_builder.merge(overrides, self.inherited_env)
        return bars, outputs, env

    async def run(self, context: LaunchContext) -> SupervisorReport:
        """Launch the bars of the context's theme and wait for them."""
        bars, _, env = await self.prepare(context)

        if context.apply_gaps:
            gaps = self.gaps or GapsManager()
            await gaps.apply(context.theme.name, context.theme.gaps, context.default_gaps)

        supervisor = self.supervisor or BarSupervisor(
            binary=context.binary,
            kill_scope=context.kill_scope,
        )
        return await supervisor.run(bars, env)
