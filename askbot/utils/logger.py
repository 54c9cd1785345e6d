"""
Logger Utility
==============

Context-aware logging for the bot. Every component creates its own
``Logger("Component")`` so output can be traced back to where it came from:

    [2024-06-01T10:30:00] [INFO] [Agent] Tool round 1: search_hyperliquid_perp

Levels are filtered by the LOG_LEVEL environment variable (DEBUG, INFO,
WARNING, ERROR). Errors go to stderr, everything else to stdout. Colours
can be turned off with LOG_COLOR=false (useful when logs are shipped to a
file or an aggregator).

Usage:
    from askbot.utils.logger import Logger

    logger = Logger("MarketData")
    logger.info("Resolving symbol", {"kind": "perp", "symbol": "BTC"})

    tool_logger = logger.child("Perp")
    tool_logger.debug("Fetched 142 markets")
"""

import json
import os
import sys
from datetime import datetime
from enum import IntEnum
from typing import Any


class LogLevel(IntEnum):
    """Numeric log levels; higher is more severe."""
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40


class Colors:
    """ANSI escape codes for terminal output."""
    RESET = "\033[0m"
    DEBUG = "\033[36m"    # Cyan
    INFO = "\033[32m"     # Green
    WARNING = "\033[33m"  # Yellow
    ERROR = "\033[31m"    # Red
    DIM = "\033[2m"


_LEVEL_NAMES = {
    "DEBUG": LogLevel.DEBUG,
    "INFO": LogLevel.INFO,
    "WARNING": LogLevel.WARNING,
    "WARN": LogLevel.WARNING,
    "ERROR": LogLevel.ERROR,
}


def parse_level(value: str | None, default: LogLevel = LogLevel.INFO) -> LogLevel:
    """Map a level name (case-insensitive) to a LogLevel."""
    if not value:
        return default
    return _LEVEL_NAMES.get(value.upper(), default)


# Shared minimum level for loggers created without an explicit one
_default_level: LogLevel = parse_level(os.getenv("LOG_LEVEL"))


def set_default_level(level: LogLevel | str) -> None:
    """Change the minimum level of every logger that has no level of its own."""
    global _default_level
    _default_level = parse_level(level) if isinstance(level, str) else level


def _colors_enabled() -> bool:
    return os.getenv("LOG_COLOR", "true").lower() != "false"


class Logger:
    """
    A logger bound to a context prefix.

    Example:
        logger = Logger("Agent")
        logger.info("Prompt received")

        child = logger.child("Tools")   # logs as [Agent:Tools]
        child.warning("Tool failed", {"tool": "search_art"})
    """

    def __init__(self, context: str = "", level: LogLevel | None = None):
        """
        Args:
            context: Prefix shown in every line (e.g. "Agent", "Slack")
            level: Minimum level; follows the shared default (LOG_LEVEL) if None
        """
        self.context = context
        self._min_level = level

    def child(self, child_context: str) -> "Logger":
        """Create a logger whose context is ``parent:child``."""
        new_context = f"{self.context}:{child_context}" if self.context else child_context
        return Logger(new_context, self._min_level)

    def set_level(self, level: LogLevel | None) -> None:
        self._min_level = level

    def is_enabled_for(self, level: LogLevel) -> bool:
        min_level = self._min_level if self._min_level is not None else _default_level
        return level >= min_level

    def _format_message(self, level_name: str, message: str, color: str) -> str:
        timestamp = datetime.now().isoformat(timespec="seconds")
        context_str = f"[{self.context}] " if self.context else ""

        if not _colors_enabled():
            return f"[{timestamp}] [{level_name}] {context_str}{message}"

        return (
            f"{Colors.DIM}[{timestamp}]{Colors.RESET} "
            f"{color}[{level_name}]{Colors.RESET} "
            f"{context_str}{message}"
        )

    def _log(
        self,
        level: LogLevel,
        level_name: str,
        color: str,
        message: str,
        data: dict[str, Any] | None = None
    ) -> None:
        if not self.is_enabled_for(level):
            return

        stream = sys.stderr if level >= LogLevel.ERROR else sys.stdout
        print(self._format_message(level_name, message, color), file=stream)

        if data:
            data_str = json.dumps(data, indent=2, default=str)
            if _colors_enabled():
                data_str = f"{Colors.DIM}{data_str}{Colors.RESET}"
            print(data_str, file=stream)

    def debug(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Detailed diagnostics; only shown with LOG_LEVEL=DEBUG."""
        self._log(LogLevel.DEBUG, "DEBUG", Colors.DEBUG, message, data)

    def info(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Normal operational events."""
        self._log(LogLevel.INFO, "INFO", Colors.INFO, message, data)

    def warning(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Something went wrong but the request can still complete."""
        self._log(LogLevel.WARNING, "WARN", Colors.WARNING, message, data)

    def error(self, message: str, error: BaseException | None = None) -> None:
        """
        Log an error, optionally with the exception that caused it.

        Args:
            message: What failed
            error: The exception; its type and message are logged as data
        """
        data = None
        if error is not None:
            data = {
                "error_type": type(error).__name__,
                "error_message": str(error),
            }
        self._log(LogLevel.ERROR, "ERROR", Colors.ERROR, message, data)

