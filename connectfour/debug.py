"""
debug.py - Debug and logging functionality for the Connect Four engine

All modules log through the ``debug`` singleton with a component tag
("board", "search", "strategy", "game", "env", "cli"). The command line
picks the verbosity, an optional log file and the components to show.
Timers measure think time for the moves-per-second report.
"""

import logging
import sys
import time
from enum import Enum
from typing import Dict, Iterable, Optional, Set


class DebugLevel(Enum):
    NONE = 0
    ERROR = 1
    WARNING = 2
    INFO = 3
    DEBUG = 4
    TRACE = 5


TRACE = logging.DEBUG - 5
logging.addLevelName(TRACE, "TRACE")

# NONE sits above CRITICAL so a silenced logger drops everything
LEVEL_MAP = {
    DebugLevel.NONE: logging.CRITICAL + 1,
    DebugLevel.ERROR: logging.ERROR,
    DebugLevel.WARNING: logging.WARNING,
    DebugLevel.INFO: logging.INFO,
    DebugLevel.DEBUG: logging.DEBUG,
    DebugLevel.TRACE: TRACE,
}

LOGGER_NAME = "connectfour"
CONSOLE_HANDLER_NAME = "connectfour-console"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class DebugManager:
    """Routes tagged messages from the engine to the ``connectfour`` logger."""

    def __init__(self):
        self._level = DebugLevel.INFO
        self._enabled = True
        self._log_file: Optional[str] = None
        self._components: Set[str] = set()  # empty means every component
        self._timers: Dict[str, float] = {}
        self._logger = logging.getLogger(LOGGER_NAME)
        self._logger.setLevel(LEVEL_MAP[self._level])
        self._attach_console()

    def _attach_console(self):
        # several managers share one logger, only the first adds a handler
        if any(h.get_name() == CONSOLE_HANDLER_NAME for h in self._logger.handlers):
            return
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(CONSOLE_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S'))
        self._logger.addHandler(handler)

    def _replace_file_handler(self, path: Optional[str]):
        for handler in list(self._logger.handlers):
            if isinstance(handler, logging.FileHandler):
                self._logger.removeHandler(handler)
                handler.close()
        if path:
            handler = logging.FileHandler(path)
            handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
            self._logger.addHandler(handler)

    @property
    def level(self) -> DebugLevel:
        return self._level

    @property
    def log_file(self) -> Optional[str]:
        return self._log_file

    @property
    def components(self) -> Set[str]:
        return set(self._components)

    def configure(self, level: DebugLevel = None,
                  enabled: bool = None,
                  log_file: str = None,
                  components: Iterable[str] = None):
        """
        Change any subset of the settings; arguments left as None keep their value.

        Args:
            level: Most verbose level that still gets logged
            enabled: Master switch
            log_file: Also write to this file ("" stops writing to a file)
            components: Only log these components (empty for all)
        """
        if level is not None:
            self._level = level
            self._logger.setLevel(LEVEL_MAP[level])
        if enabled is not None:
            self._enabled = enabled
        if log_file is not None:
            self._log_file = log_file or None
            self._replace_file_handler(self._log_file)
        if components is not None:
            self._components = {c for c in components if c}

    def is_enabled_for(self, level: DebugLevel, component: str = None) -> bool:
        """
        True if a message at ``level`` for ``component`` would be written.

        The search checks this before formatting per-node messages.
        """
        if not self._enabled or self._level is DebugLevel.NONE:
            return False
        if level.value > self._level.value:
            return False
        return not (component and self._components and component not in self._components)

    def log(self, level: DebugLevel, message: str, component: str = None):
        if self.is_enabled_for(level, component):
            if component:
                message = f"[{component}] {message}"
            self._logger.log(LEVEL_MAP[level], message)

    def error(self, message: str, component: str = None):
        self.log(DebugLevel.ERROR, message, component)

    def warning(self, message: str, component: str = None):
        self.log(DebugLevel.WARNING, message, component)

    def info(self, message: str, component: str = None):
        self.log(DebugLevel.INFO, message, component)

    def debug(self, message: str, component: str = None):
        self.log(DebugLevel.DEBUG, message, component)

    def trace(self, message: str, component: str = None):
        self.log(DebugLevel.TRACE, message, component)

    def start_timer(self, marker_name: str):
        self._timers[marker_name] = time.perf_counter()

    def end_timer(self, marker_name: str, component: str = None) -> Optional[float]:
        """
        Stop the timer started under ``marker_name``.

        Returns:
            Elapsed seconds, or None (with a warning) if no such timer is running
        """
        started = self._timers.pop(marker_name, None)
        if started is None:
            self.warning(f"Timer '{marker_name}' not started", "debug")
            return None
        elapsed = time.perf_counter() - started
        self.debug(f"Timer [{marker_name}]: {elapsed:.6f} seconds", component)
        return elapsed

    def is_timing(self, marker_name: str) -> bool:
        return marker_name in self._timers

    def set_from_string(self, level_str: str):
        """Set the level by name, as given on the command line ("info", "trace", ...)."""
        level = DebugLevel.__members__.get(level_str.upper())
        if level is None:
            self.warning(f"Unknown debug level: {level_str}")
            return
        self.configure(level=level)
        self.debug(f"Debug level set to {level.name}")


debug = DebugManager()
