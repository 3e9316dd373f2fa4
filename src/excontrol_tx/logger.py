#!/usr/bin/env python3
"""ExControl - a durable diagnostic log, with console logging.

Each diagnostic line is stamped (in UTC) with the instant supplied by its caller,
e.g. the reference time of a scheduler pass, rather than the time it was written:

    2025-03-05 09:06:00 - Scheduled action 'turn_on' skipped for offline device 'pc_1'.
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime as dt
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from typing import Final

import colorlog

from .version import VERSION

_LOGGER = logging.getLogger(__name__)

SZ_DIAG_LOGGER: Final = "excontrol_tx.diagnostics"

DEFAULT_FMT = "%(asctime)s - %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

CONSOLE_FMT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
COLOR_FMT = f"%(log_color)s{CONSOLE_FMT}"

LOG_COLOURS = {
    "DEBUG": "white",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "bold_red",
    "CRITICAL": "bold_red",
}


class _DtmFilter(logging.Filter):  # restamps record.created from record.dtm
    """Use the caller's dtm (naive is UTC), if any, as the record's timestamp."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(dtm := getattr(record, "dtm", None), dt):
            ts = (dtm if dtm.tzinfo else dtm.replace(tzinfo=UTC)).timestamp()
            record.created = ts
            record.msecs = (ts % 1) * 1000
        return True


class _UtcTimeMixin:
    default_time_format = DEFAULT_DATEFMT

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        """Return the record's asctime, always as UTC."""
        dtm = dt.fromtimestamp(record.created, tz=UTC)
        return dtm.strftime(datefmt or self.default_time_format)


class Formatter(_UtcTimeMixin, logging.Formatter):
    pass


class ColoredFormatter(_UtcTimeMixin, colorlog.ColoredFormatter):  # type: ignore[misc]
    pass


class _LevelFilter(logging.Filter):
    """Pass only records below (or at/above) a threshold level."""

    def __init__(self, level: int, *, below: bool) -> None:
        super().__init__()
        self._level = level
        self._below = below

    def filter(self, record: logging.LogRecord) -> bool:
        return (record.levelno < self._level) is self._below


DIAG_LOGGER = logging.getLogger(SZ_DIAG_LOGGER)
DIAG_LOGGER.addFilter(_DtmFilter())


def set_diag_logging(
    logger: logging.Logger = DIAG_LOGGER,
    cc_console: bool = False,
    file_name: str | None = None,
    rotate_backups: int = 0,
    rotate_bytes: int | None = None,
) -> None:
    """(Re)configure the handlers of the diagnostic log.

    With a file_name, lines are appended to that file (never truncated), and are
    rotated daily if rotate_backups is set, or by size if rotate_bytes is set. With
    neither a file nor cc_console, records propagate to the app's own logging.
    """

    for handler in list(logger.handlers):  # may be called several times
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(logging.DEBUG)

    if not file_name and not cc_console:
        logger.propagate = True
        return

    logger.propagate = False  # the diagnostic log is distinct from app logging

    if file_name:
        handler: logging.Handler
        if rotate_bytes:
            handler = RotatingFileHandler(
                file_name, maxBytes=rotate_bytes, backupCount=rotate_backups or 2
            )
        elif rotate_backups:
            handler = TimedRotatingFileHandler(
                file_name, when="midnight", backupCount=rotate_backups, utc=True
            )
        else:
            handler = logging.FileHandler(file_name)

        handler.setFormatter(Formatter(fmt=DEFAULT_FMT))
        handler.setLevel(logging.INFO)
        logger.addHandler(handler)

    if cc_console:
        add_console_handlers(logger)

    logger.debug(f"excontrol_tx {VERSION}: diagnostic log started")


def add_console_handlers(logger: logging.Logger) -> None:
    """Add coloured console handlers: WARNING & above to stderr, the rest to stdout."""

    formatter = ColoredFormatter(fmt=COLOR_FMT, reset=True, log_colors=LOG_COLOURS)

    for stream, below in ((sys.stderr, False), (sys.stdout, True)):
        handler = logging.StreamHandler(stream=stream)
        handler.setFormatter(formatter)
        handler.addFilter(_LevelFilter(logging.WARNING, below=below))
        logger.addHandler(handler)


def append_diagnostic(
    message: str, dtm: dt | None = None, *, level: int = logging.INFO
) -> None:
    """Append a message to the diagnostic log, stamped with dtm (default: now).

    Never raises: a failure to log is reported to stderr instead.
    """

    try:
        DIAG_LOGGER.log(level, message, extra={"dtm": dtm or dt.now(tz=UTC)})
    except Exception as err:  # noqa: BLE001
        print(f"Failed to log message: {err}", file=sys.stderr)
