"""Centralized logging configuration.

Logs go to stderr through Rich; stdout belongs to the protocol stream.

Usage at the process entry point:
    from xcbridge.logging_config import setup_logging
    setup_logging(settings)

Then in any module:
    from xcbridge.logging_config import get_logger
    logger = get_logger(__name__)
    logger.info("Hello")
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from xcbridge.config import Settings

ROOT_LOGGER = "xcbridge"


def setup_logging(settings: Settings) -> logging.Logger:
    """
    Configure the xcbridge logger tree once per process.

    Calling it again replaces the handler, so the level can be changed
    at runtime.

    Args:
        settings: Loaded settings (log_level, silence_logs)

    Returns:
        The package root logger
    """
    root = logging.getLogger(ROOT_LOGGER)
    root.handlers.clear()
    root.propagate = False

    if settings.silence_logs:
        root.addHandler(logging.NullHandler())
        root.setLevel(logging.CRITICAL + 1)
        return root

    level = logging.getLevelName(settings.log_level)
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s", datefmt="[%X]"))
    root.addHandler(handler)
    root.setLevel(level)
    return root


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Call at module level: logger = get_logger(__name__)

    Before setup_logging() runs, records fall through to the standard
    library's last-resort handler (warnings and above only).
    """
    return logging.getLogger(name)
