"""Bar name resolution for a polybar theme.

Bars listed explicitly in settings win. Otherwise bar names are detected from
`[bar/<name>]` section headers in the theme's polybar config file.
"""

import logging
import re
from pathlib import Path
from typing import List, Union

from .errors import NoBarsFoundError, ThemeFileNotFoundError, ThemeFileReadError
from .models import Theme

logger = logging.getLogger(__name__)

# example: [bar/SOME.BAR] -> SOME.BAR
BAR_SECTION_PATTERN = re.compile(r"^\[bar/(.+?)\]")


class ThemeResolver:
    """Resolves which bars a theme launches."""

    def resolve(self, theme: Theme, theme_config_path: Union[str, Path]) -> List[str]:
        """Resolve ordered bar names for a theme.

        Args:
            theme: Selected theme from settings
            theme_config_path: Theme's polybar config file

        Returns:
            Bar names in declaration order, duplicates preserved

        Raises:
            ThemeFileNotFoundError: If auto-detection is needed and the file is missing
            NoBarsFoundError: If auto-detection finds no [bar/...] sections
        """
        if theme.bars:
            logger.info(f"Bars specified in settings for theme \"{theme.name}\": {theme.bars}")
            return list(theme.bars)

        logger.info(f"No bars specified in settings for theme \"{theme.name}\", auto-detecting bars...")
        bars = self.parse_bars(theme_config_path)

        if not bars:
            raise NoBarsFoundError(theme.name, str(theme_config_path))

        logger.info(f"Detected {len(bars)} bar(s) in {theme_config_path}: {bars}")
        return bars

    @staticmethod
    def parse_bars(theme_config_path: Union[str, Path]) -> List[str]:
        """Scan a polybar config file for bar section names.

        Raises:
            ThemeFileNotFoundError: If the file does not exist
            ThemeFileReadError: If the file exists but cannot be read
        """
        path = Path(theme_config_path)
        try:
            with open(path, "r", encoding="utf-8", errors="replace") as f:
                bars = []
                for line in f:
                    match = BAR_SECTION_PATTERN.match(line)
                    if match:
                        bars.append(match.group(1))
        except FileNotFoundError as e:
            raise ThemeFileNotFoundError(str(path)) from e
        except OSError as e:
            raise ThemeFileReadError(str(path), str(e)) from e

        return bars
