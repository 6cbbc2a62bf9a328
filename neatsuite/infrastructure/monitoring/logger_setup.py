"""Centralized logging configuration for the neatsuite package.

Sets up standard Python logging with levels, formatters and handlers
(console, optional file), and adapts a stdlib logger to the structured
``Logger`` interface the client accepts.
"""

import logging
import sys
from typing import Any, Mapping, Optional

DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = None


def setup_logging(
    log_level: int = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: Optional[str] = DEFAULT_LOG_FILE
) -> None:
    """Configures the root logger for the application.

    Args:
        log_level: The minimum logging level (e.g., logging.DEBUG, logging.INFO).
        log_format: The format string for log messages.
        log_file: Optional path to a file for logging output.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers attached to the root logger
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
        except OSError as e:
            logging.error(f"Failed to set up file logging to {log_file}: {e}", exc_info=True)
        else:
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            logging.info(f"Logging to file: {log_file}")

    logging.debug(f"Logging configured. Level={logging.getLevelName(log_level)}")


class StdlibLogger:
    """Adapts a ``logging.Logger`` to the client's ``Logger`` interface.

    ``meta`` is appended to the message and attached as ``record.meta``.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("neatsuite.client")

    def _emit(self, level: int, message: str, meta: Optional[Mapping[str, Any]]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        text = f"{message} {dict(meta)}" if meta else message
        self._logger.log(level, text, extra={"meta": dict(meta or {})})

    def debug(self, message: str, meta: Optional[Mapping[str, Any]] = None) -> None:
        self._emit(logging.DEBUG, message, meta)

    def info(self, message: str, meta: Optional[Mapping[str, Any]] = None) -> None:
        self._emit(logging.INFO, message, meta)

    def warning(self, message: str, meta: Optional[Mapping[str, Any]] = None) -> None:
        self._emit(logging.WARNING, message, meta)

    warn = warning

    def error(self, message: str, meta: Optional[Mapping[str, Any]] = None) -> None:
        self._emit(logging.ERROR, message, meta)
