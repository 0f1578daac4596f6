"""
Central logging configuration for plantcare_lite.

The engine only logs diagnostics (unreadable frequencies, missing anchors,
orphaned tasks, truncated walks); callers decide how loud that should be.
"""

import logging
import os
import sys
from typing import Optional

from colorlog import ColoredFormatter

PACKAGE_LOGGER = "plantcare_lite"

LITE_MODULES = [
    "plantcare_lite",
    "plantcare_lite.frequency_rule",
    "plantcare_lite.anchor_time",
    "plantcare_lite.occurrence_expander",
    "plantcare_lite.activity_filter",
    "plantcare_lite.occurrence_aggregator",
    "plantcare_lite.care_loader",
    "plantcare_lite.config_loader",
]

_LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setLevel(level)
    # HH:MM:SS  LEVEL   logger.name: message -- only the level is colorized
    handler.setFormatter(
        ColoredFormatter(
            "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
            log_colors=_LOG_COLORS,
        )
    )
    return handler


_LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR")


def configure_lite_logging(
    debug_mode: bool = False,
    force_debug: Optional[bool] = None,
    log_level: Optional[str] = None,
) -> None:
    """
    Configure logging levels for plantcare_lite.

    Args:
        debug_mode: Whether to enable debug logging for plantcare_lite modules
        force_debug: Override debug mode setting (None to use env var detection)
        log_level: Configured level name (Config.log_level); ignored in debug mode

    Environment Variables:
        PLANTCARE_DEBUG: Set to '1', 'true', 'yes' to force debug logging
        PLANTCARE_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR)
    """
    env_debug = os.getenv("PLANTCARE_DEBUG", "").lower() in ("1", "true", "yes")
    env_log_level = os.getenv("PLANTCARE_LOG_LEVEL", "").upper()

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug:
        final_debug = True
    else:
        final_debug = debug_mode

    root_level = lite_level = logging.DEBUG if final_debug else logging.INFO
    if not final_debug and log_level and log_level.upper() in _LEVEL_NAMES:
        root_level = lite_level = getattr(logging, log_level.upper())
    if env_log_level in _LEVEL_NAMES:
        root_level = getattr(logging, env_log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    # Only add a handler if none exist, so embedding applications keep theirs
    if not root_logger.handlers:
        root_logger.addHandler(_console_handler(root_level))

    for module in LITE_MODULES:
        logging.getLogger(module).setLevel(lite_level)

    if final_debug:
        root_logger.info("Debug logging enabled for plantcare_lite modules")
    else:
        root_logger.debug("Production logging configuration applied")


def reset_logging_to_debug() -> None:
    """Reset the root and all plantcare_lite loggers to DEBUG for troubleshooting."""
    logging.getLogger().setLevel(logging.DEBUG)
    for module in LITE_MODULES:
        logging.getLogger(module).setLevel(logging.DEBUG)
    logging.getLogger().info("All loggers reset to DEBUG level for troubleshooting")


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}
    for logger_name in LITE_MODULES:
        status[logger_name] = logging.getLevelName(logging.getLogger(logger_name).level)
    return status
