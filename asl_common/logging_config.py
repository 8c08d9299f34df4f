# -*- coding: utf-8 -*-
"""
Logging configuration for the multi-app installer.

Console output carries short colored level tags; the log file gets every
record, DEBUG included, as ``[timestamp] [LEVEL] message`` lines so runs can
be audited after the fact.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, Optional, Union

LOGGER_NAME = "m_app_install"

LEVEL_TAGS: Dict[int, str] = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "ERROR",
}

LEVEL_COLORS: Dict[int, str] = {
    logging.DEBUG: "\033[0;34m",
    logging.INFO: "\033[0;32m",
    logging.WARNING: "\033[1;33m",
    logging.ERROR: "\033[0;31m",
    logging.CRITICAL: "\033[0;31m",
}
RESET_COLOR = "\033[0m"

FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ConsoleFormatter(logging.Formatter):
    """Formats records as ``[TAG] message`` with an optional ANSI color on the tag."""

    def __init__(self, use_color: bool = True):
        super().__init__("%(message)s")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        tag = LEVEL_TAGS.get(record.levelno, record.levelname)
        message = super().format(record)
        if self.use_color:
            color = LEVEL_COLORS.get(record.levelno, "")
            return f"{color}[{tag}]{RESET_COLOR} {message}"
        return f"[{tag}] {message}"


class FileFormatter(logging.Formatter):
    """Formats records as ``[YYYY-MM-DD HH:MM:SS] [LEVEL] message``."""

    def __init__(self):
        super().__init__(
            "[%(asctime)s] [%(leveltag)s] %(message)s", datefmt=FILE_DATE_FORMAT
        )

    def format(self, record: logging.LogRecord) -> str:
        record.leveltag = LEVEL_TAGS.get(record.levelno, record.levelname)
        return super().format(record)


def setup_logging(
    log_file: Optional[Union[str, Path]] = None,
    verbose: bool = False,
    use_color: Optional[bool] = None,
) -> logging.Logger:
    """
    Set up logging for the installer.

    Handlers are attached to the root logger so that module loggers
    (``logging.getLogger(__name__)``) share them.

    Args:
        log_file: File to append to. If it cannot be opened, logging
            continues on the console only and a warning is emitted.
        verbose: Show DEBUG records on the console.
        use_color: Force color on or off; defaults to whether stdout is a TTY.

    Returns:
        The installer's top-level logger.
    """
    console_level = logging.DEBUG if verbose else logging.INFO
    if use_color is None:
        use_color = sys.stdout.isatty()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Clear existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(ConsoleFormatter(use_color=use_color))
    root_logger.addHandler(console_handler)

    logger = logging.getLogger(LOGGER_NAME)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as e:
            logger.warning(
                f"Cannot write log file {log_file}: {e}. Logging to console only."
            )
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(FileFormatter())
            root_logger.addHandler(file_handler)

    return logger
