"""
Logging Setup

Applies LoggingSettings to the standard library root logger.
"""

import logging
from typing import Optional

from config import LoggingSettings


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Configure root logging from settings.

    Uses logging.basicConfig with force=True so that repeated calls (for
    example from tests or notebooks) replace earlier handlers instead of
    stacking them.

    Args:
        settings: Logging settings. If None, settings are read from the
                 environment (LOG_LEVEL) and defaults.
    """
    settings = settings or LoggingSettings()
    logging.basicConfig(
        level=getattr(logging, settings.level),
        format=settings.format,
        force=True
    )
    logging.getLogger(__name__).debug(f"Logging configured at level {settings.level}")
