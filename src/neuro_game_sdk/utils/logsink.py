from __future__ import annotations

"""Severity-classified log sinks used by the protocol core."""

import logging
from enum import IntEnum
from typing import Callable, Dict


class LogLevel(IntEnum):
    DEBUG = 0
    LOG = 1
    INFO = 2
    WARN = 3
    ERROR = 4


LogSink = Callable[[str, LogLevel], None]

_STDLIB_LEVELS: Dict[LogLevel, int] = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.LOG: logging.INFO,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


def logging_sink(logger: logging.Logger) -> LogSink:
    """Return a sink that forwards every message to *logger*."""

    def _sink(message: str, level: LogLevel) -> None:
        logger.log(_STDLIB_LEVELS[LogLevel(level)], message)

    return _sink


default_sink: LogSink = logging_sink(logging.getLogger("neuro_game_sdk"))
