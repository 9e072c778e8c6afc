"""Logging setup for the monitor and display entry points."""

import logging
from typing import List, Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# The HTTP client and MQTT loop are chatty at DEBUG
NOISY_LOGGERS = ["aiohttp", "asyncio", "paho"]


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    quiet_loggers: Optional[List[str]] = None,
) -> int:
    """Configure the root logger for a linesense process.

    Args:
        level: Level name; unknown names fall back to INFO.
        format_string: Overrides DEFAULT_FORMAT.
        quiet_loggers: Extra logger names held at WARNING, on top of
            NOISY_LOGGERS.

    Returns:
        The numeric level that was applied.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logging.basicConfig(level=log_level, format=format_string or DEFAULT_FORMAT)

    for logger_name in (quiet_loggers or []) + NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
    return log_level


def display_log_level(level: str) -> str:
    """Level to use while the full-screen display owns the terminal.

    Anything chattier than WARNING would tear the redrawn screen.
    """
    level = level.upper()
    level_no = getattr(logging, level, None)
    if not isinstance(level_no, int) or level_no < logging.WARNING:
        return "WARNING"
    return level
