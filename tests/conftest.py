#!/usr/bin/env python3
"""Fixtures for testing."""

import logging
from collections.abc import Generator
from datetime import UTC, datetime as dt
from pathlib import Path
from typing import Any

import pytest

from excontrol import Dependency, Device, ScheduleEntry
from excontrol_tx.logger import DIAG_LOGGER, set_diag_logging

_LOGGER = logging.getLogger(__name__)


# 2025-03-03 is a Monday, 2025-03-05 is a Wednesday
MONDAY = dt(2025, 3, 3, tzinfo=UTC)
WEDNESDAY = dt(2025, 3, 5, tzinfo=UTC)


def at(day: dt, hh: int, mm: int, ss: int = 0) -> dt:
    """Return the instant on a day, at hh:mm:ss (UTC)."""
    return day.replace(hour=hh, minute=mm, second=ss)


def weekly(action: str, time: str, *days: str) -> ScheduleEntry:
    return ScheduleEntry(action, days=list(days or ("wednesday",)), time=time)


def one_time(action: str, one_time_utc: str, **kwargs: Any) -> ScheduleEntry:
    return ScheduleEntry(action, one_time_utc=one_time_utc, **kwargs)


def make_device(
    name: str,
    *schedule: ScheduleEntry,
    depends_on: dict[str, int] | None = None,
    **kwargs: Any,
) -> Device:
    """Return a device with on/off commands, a schedule and any dependencies."""

    kwargs.setdefault("commands", {"on": f"wake {name}", "off": f"shutdown {name}"})
    return Device(
        name,
        schedule=list(schedule),
        dependencies=[Dependency(k, v) for k, v in (depends_on or {}).items()],
        **kwargs,
    )


def read_diag_log(file_name: Path) -> list[str]:
    for handler in DIAG_LOGGER.handlers:
        handler.flush()
    return file_name.read_text().splitlines()


#######################################################################################


@pytest.fixture(autouse=True)
def reset_diag_logging() -> Generator[None, None, None]:
    """Leave the diagnostic log propagating to the root logger (i.e. to caplog)."""

    set_diag_logging()
    yield
    set_diag_logging()


@pytest.fixture()
def diag_log(tmp_path: Path) -> Path:
    """Send the diagnostic log to a (temporary) file, and return its path."""

    file_name = tmp_path / "diagnostics.log"
    set_diag_logging(file_name=str(file_name))
    return file_name
