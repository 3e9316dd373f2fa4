#!/usr/bin/env python3
"""ExControl - evaluation of a device's schedule (what is due, and when).

Pure functions, with no side effects:
- due_triggers():    the entries of a schedule that are due at (or before) now
- winning_trigger(): the one trigger that governs ("last action wins")
- resolve_on_time(): when a turn_on may actually happen, given its dependencies

Time strings are parsed leniently: an entry with an unparseable time is never due.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime as dt, time as dt_time, timedelta as td
from typing import TYPE_CHECKING, NamedTuple

from .const import ONE_TIME_FORMATS, TIME_OF_DAY_FORMATS, WEEKDAYS

if TYPE_CHECKING:
    from .device import Device, ScheduleEntry


_LOGGER = logging.getLogger(__name__)


class Trigger(NamedTuple):
    """A due schedule entry, and the instant of this occurrence of it."""

    entry: ScheduleEntry
    dtm: dt


def as_aware(now: dt) -> dt:
    """Return the datetime as tz-aware (a naive datetime is taken to be UTC)."""
    return now.replace(tzinfo=UTC) if now.tzinfo is None else now


def parse_time_of_day(value: str) -> dt_time | None:
    """Return the time of day of a weekly entry, e.g. '09:00', or None if invalid."""

    for fmt in TIME_OF_DAY_FORMATS:
        try:
            return dt.strptime(value.strip(), fmt).time()
        except ValueError:
            continue
    return None


def parse_one_time(value: str) -> dt | None:
    """Return the (UTC) instant of a one-time entry, or None if it is invalid."""

    for fmt in ONE_TIME_FORMATS:
        try:
            return dt.strptime(value.strip(), fmt).replace(tzinfo=UTC)
        except ValueError:
            continue
    return None


def _weekly_trigger(entry: ScheduleEntry, now: dt) -> dt | None:
    if WEEKDAYS[now.weekday()] not in entry.days:
        return None

    if (tod := parse_time_of_day(entry.time)) is None:
        _LOGGER.debug(f"{entry}: ignored, the time is not valid: '{entry.time}'")
        return None

    dtm = dt.combine(now.date(), tod, tzinfo=now.tzinfo)
    return dtm if dtm <= now else None


def _one_time_trigger(entry: ScheduleEntry, now: dt) -> dt | None:
    if entry.has_triggered or not entry.one_time_utc:
        return None

    if (dtm := parse_one_time(entry.one_time_utc)) is None:
        _LOGGER.debug(f"{entry}: ignored, the timestamp is not valid")
        return None

    return dtm if dtm <= now else None


def due_triggers(device: Device, now: dt) -> list[Trigger]:
    """Return the device's schedule entries that are due at now, in declared order.

    A weekly entry is due (again) at every evaluation on a matching day, once its
    time of day has passed: it is for the caller to act only upon the winner.
    """

    now = as_aware(now)
    result = []

    for entry in device.schedule:
        if entry.is_weekly:
            dtm = _weekly_trigger(entry, now)
        else:
            dtm = _one_time_trigger(entry, now)

        if dtm is not None:
            result.append(Trigger(entry, dtm))

    return result


def winning_trigger(triggers: Iterable[Trigger]) -> Trigger | None:
    """Return the trigger with the latest instant, or None if there are none.

    When instants are equal, the later-declared entry wins.
    """

    winner: Trigger | None = None
    for trigger in triggers:
        if winner is None or trigger.dtm >= winner.dtm:
            winner = trigger
    return winner


def resolve_on_time(device: Device, nominal: dt, actual_on: Mapping[str, dt]) -> dt:
    """Return the earliest instant that a device's turn_on may take effect.

    actual_on maps the (lower case) names of the devices turned on earlier in this
    pass to the instant they were turned on. A dependency on a device that has not
    been turned on (unknown, offline, or not scheduled) is taken to be satisfied.
    """

    result = as_aware(nominal)

    for dep in device.dependencies:
        if (dep_on := actual_on.get(dep.depends_on.lower())) is None:
            continue
        result = max(result, as_aware(dep_on) + td(minutes=dep.delay_minutes))

    return result
