#
# PROJECT: framefit-viewer
# MODULE: framefit_viewer/logging_config.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-18
#
"""
Logging setup for the ``framefit_viewer`` namespace.

curses owns the terminal while the viewer runs, so console output is off by
default there; ``HudLogHandler`` keeps the latest message for the HUD line
and an optional file handler records everything.
"""

import logging
import sys
from typing import Optional

LOGGER_NAME = "framefit_viewer"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class HudLogHandler(logging.Handler):
    """Remembers the most recent record so the HUD can show it."""

    def __init__(self, level=logging.INFO):
        super().__init__(level)
        self.last_message = ""
        self.last_levelno = logging.NOTSET

    def emit(self, record):
        try:
            self.last_message = record.getMessage()
            self.last_levelno = record.levelno
        except Exception:
            self.handleError(record)


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None,
                  console: bool = True) -> logging.Logger:
    """
    Configures the package logger.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
        console: Also log to stderr (turn off while curses is active).
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Avoid duplicate handlers when called again
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S')

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    logger.debug("Logging initialized.")
    return logger


def attach_hud_handler(level: int = logging.INFO) -> HudLogHandler:
    handler = HudLogHandler(level)
    logging.getLogger(LOGGER_NAME).addHandler(handler)
    return handler
