"""
debug.py - Debug and logging functionality for the Connect Four chat bot

This module provides centralized debug and logging capabilities with configurable
levels, per-component filtering and optional file output. Every part of the bot
(board, session, standby, dispatcher, ledger) logs through the shared ``debug``
instance.
"""

import logging
import sys
from enum import Enum
from typing import List, Optional, Set


class DebugLevel(Enum):
    NONE = 0
    ERROR = 1
    WARNING = 2
    INFO = 3
    DEBUG = 4
    TRACE = 5


# Mapping to standard logging levels
LEVEL_MAP = {
    DebugLevel.NONE: logging.CRITICAL + 1,
    DebugLevel.ERROR: logging.ERROR,
    DebugLevel.WARNING: logging.WARNING,
    DebugLevel.INFO: logging.INFO,
    DebugLevel.DEBUG: logging.DEBUG,
    DebugLevel.TRACE: logging.DEBUG,
}

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class DebugManager:
    """Manages debug and logging output for the bot."""

    def __init__(self, name: str = "connect4bot"):
        self._level = DebugLevel.INFO
        self._enabled = True
        self._log_file: Optional[str] = None
        self._enabled_components: Set[str] = set()  # Empty set means all components
        self._logger = self._setup_logger(name)

    def _setup_logger(self, name: str) -> logging.Logger:
        """Configure and return a logger instance."""
        logger = logging.getLogger(name)
        logger.setLevel(LEVEL_MAP[self._level])

        if not any(isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
                   for h in logger.handlers):
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S'))
            logger.addHandler(console_handler)

        return logger

    @property
    def level(self) -> DebugLevel:
        return self._level

    def configure(self, level: DebugLevel = None,
                  enabled: bool = None,
                  log_file: str = None,
                  components: List[str] = None):
        """
        Configure the debug manager settings.

        Args:
            level: Debug level to set
            enabled: Whether debugging is enabled
            log_file: Path to log file (empty string disables file logging)
            components: List of components to enable debugging for (empty for all)
        """
        if level is not None:
            self._level = level
            self._logger.setLevel(LEVEL_MAP[level])

        if enabled is not None:
            self._enabled = enabled

        if log_file is not None:
            for handler in self._logger.handlers[:]:
                if isinstance(handler, logging.FileHandler):
                    self._logger.removeHandler(handler)
                    handler.close()

            self._log_file = log_file or None
            if self._log_file:
                file_handler = logging.FileHandler(self._log_file)
                file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
                self._logger.addHandler(file_handler)

        if components is not None:
            self._enabled_components = set(components)

    def _should_log(self, level: DebugLevel, component: str = None) -> bool:
        """Determine if a message should be logged based on settings."""
        if not self._enabled or self._level == DebugLevel.NONE:
            return False

        if level.value > self._level.value:
            return False

        if component and self._enabled_components and component not in self._enabled_components:
            return False

        return True

    def log(self, level: DebugLevel, message: str, component: str = None):
        """
        Log a message at the specified level.

        Args:
            level: Debug level for the message
            message: The message to log
            component: Optional component name for filtering
        """
        if not self._should_log(level, component):
            return

        formatted_message = f"[{component}] {message}" if component else message

        if level == DebugLevel.ERROR:
            self._logger.error(formatted_message)
        elif level == DebugLevel.WARNING:
            self._logger.warning(formatted_message)
        elif level == DebugLevel.INFO:
            self._logger.info(formatted_message)
        elif level == DebugLevel.DEBUG:
            self._logger.debug(formatted_message)
        elif level == DebugLevel.TRACE:
            self._logger.debug(f"TRACE: {formatted_message}")

    def error(self, message: str, component: str = None):
        """Log an error message."""
        self.log(DebugLevel.ERROR, message, component)

    def warning(self, message: str, component: str = None):
        """Log a warning message."""
        self.log(DebugLevel.WARNING, message, component)

    def info(self, message: str, component: str = None):
        """Log an info message."""
        self.log(DebugLevel.INFO, message, component)

    def debug(self, message: str, component: str = None):
        """Log a debug message."""
        self.log(DebugLevel.DEBUG, message, component)

    def trace(self, message: str, component: str = None):
        """Log a trace message."""
        self.log(DebugLevel.TRACE, message, component)

    def exception(self, message: str, component: str = None, error: BaseException = None):
        """
        Log an error message with a traceback.

        Args:
            message: The message to log
            component: Optional component name for filtering
            error: Exception whose traceback is logged; defaults to the one being handled
        """
        if not self._should_log(DebugLevel.ERROR, component):
            return
        formatted_message = f"[{component}] {message}" if component else message
        self._logger.error(formatted_message, exc_info=error if error is not None else True)

    def set_from_string(self, level_str: str) -> bool:
        """Set debug level from a string (for command line arguments and env vars)."""
        try:
            level = DebugLevel[level_str.upper()]
        except KeyError:
            self.warning(f"Unknown debug level: {level_str}")
            return False

        self.configure(level=level)
        self.debug(f"Debug level set to {level.name}")
        return True


# Create a singleton instance
debug = DebugManager()
