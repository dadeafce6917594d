"""Environment variables handed to bar processes.

Polybar themes read the monitor to draw on from MONITOR_MAIN, MONITOR_LEFT
and MONITOR_RIGHT, and the theme directory from polybar_theme.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Union

from .models import MonitorRole, Output
from .monitor_role_resolver import MonitorRoleResolver

logger = logging.getLogger(__name__)

THEME_ENV_KEY = "polybar_theme"


class EnvironmentBuilder:
    """Builds KEY=VALUE entries from the display catalog and theme path."""

    def __init__(self, resolver: Optional[MonitorRoleResolver] = None):
        self.resolver = resolver or MonitorRoleResolver()

    def build(self, catalog: List[Output], theme_path: Union[str, Path]) -> List[str]:
        """Build override entries.

        Args:
            catalog: Outputs from the display catalog
            theme_path: Selected theme directory

        Returns:
            KEY=VALUE strings; roles that did not resolve are omitted
        """
        roles = self.resolver.role_map(catalog)

        entries = []
        for role in MonitorRole:
            if role in roles:
                entries.append(f"{role.env_key}={roles[role]}")
            else:
                logger.debug(f"No output resolved for {role.env_key}, omitting")

        entries.append(f"{THEME_ENV_KEY}={theme_path}")
        logger.info(f"Bar environment: {' '.join(entries)}")
        return entries

    @staticmethod
    def merge(overrides: Iterable[str], inherited: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Concatenate inherited environment and overrides into one mapping.

        Inherited entries come first; later entries win on duplicate keys.
        """
        if inherited is None:
            inherited = os.environ

        entries = [f"{k}={v}" for k, v in inherited.items()]
        entries.extend(overrides)

        env: Dict[str, str] = {}
        for entry in entries:
            key, sep, value = entry.partition("=")
            if not sep:
                continue
            env[key] = value
        return env
