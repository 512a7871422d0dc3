"""Logging for the tk command.

Every message goes to one stream as "LEVEL: message". When the stream is a
terminal, the level name is bold and colored. An error stops the command with
status 1, unless the command runs with --keep-going or is watching files. In
those cases, only fatal messages stop it.
"""

import logging
import sys
from logging import Formatter, LogRecord, StreamHandler
from typing import NoReturn, Optional, TextIO

# ANSI color codes for level names.
LEVEL_COLORS = {
    logging.FATAL: 31,
    logging.ERROR: 31,
    logging.WARNING: 33,
    logging.INFO: 32,
    logging.DEBUG: 35,
}


class LevelFormatter(Formatter):

    """Formats records as "LEVEL: message", optionally coloring the level."""

    def __init__(self, color: bool):
        super().__init__("%(message)s")
        self.color = color

    def format(self, record: LogRecord) -> str:
        label = f"{record.levelname}:"
        code = LEVEL_COLORS.get(record.levelno)
        if self.color and code:
            label = f"\x1b[{code};1m{label}\x1b[0m"
        return f"{label} {super().format(record)}"


class StoppingHandler(StreamHandler):

    """Stream handler that exits with status 1 once a record is severe enough.

    The record is written first, so the reason for stopping is always shown.
    """

    def __init__(
        self, stream: Optional[TextIO] = None, stop_level: int = logging.ERROR
    ):
        super().__init__(stream)
        self.stop_level = stop_level

    def emit(self, record: LogRecord):
        super().emit(record)
        if record.levelno >= self.stop_level:
            sys.exit(1)


def setup_logging(stream: TextIO, verbose: int = 0, keep_going: bool = False):
    """Send the root logger to stream for a tk command.

    verbose is the number of -v flags: none shows warnings, one adds info,
    two or more add debug messages.
    """
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    handler = StoppingHandler(stream, logging.FATAL if keep_going else logging.ERROR)
    handler.setFormatter(LevelFormatter(color=stream.isatty()))
    logger = logging.getLogger()
    logger.setLevel(level)
    logger.addHandler(handler)
    logging.addLevelName(logging.FATAL, "FATAL")


def fatal(msg: str, *args, **kwargs) -> NoReturn:
    """Log a fatal message and exit with status 1.

    Under setup_logging the handler exits first. When tktag is used as a
    library with no handler, the message goes to logging's last-resort
    handler and then this function exits.
    """
    logging.fatal(msg, *args, **kwargs)
    sys.exit(1)
