#!/usr/bin/env python3
"""ExControl - the device records (devices, their outlets, dependencies & schedules).

The records are created by the registry, and are otherwise only read. Each of the
three mutable fields has a single writer:
- Device.is_online:            the liveness monitor
- ScheduleEntry.has_triggered: the scheduler (one-time entries only)
- Outlet.is_on:                the dispatcher
"""

from __future__ import annotations

import logging
from typing import Any

from .const import (
    DEFAULT_MULTI_OUTLET_TYPE,
    SZ_ACTION,
    SZ_AREA,
    SZ_CATEGORY,
    SZ_COMMANDS,
    SZ_DAYS,
    SZ_DELAY_MINUTES,
    SZ_DEPENDENCIES,
    SZ_DEPENDS_ON,
    SZ_HAS_TRIGGERED,
    SZ_IP,
    SZ_IS_ON,
    SZ_IS_ONLINE,
    SZ_MAC,
    SZ_NAME,
    SZ_ONE_TIME_UTC,
    SZ_OUTLETS,
    SZ_SCHEDULE,
    SZ_TIME,
    SZ_TYPE,
    Action,
    CommandKey,
)
from .schemas import SCH_DEPENDENCY, SCH_DEVICE, SCH_OUTLET, SCH_SCHEDULE_ENTRY

_LOGGER = logging.getLogger(__name__)


class Dependency:
    """A device must wait delay_minutes after another device has been turned on."""

    def __init__(self, depends_on: str, delay_minutes: int = 0) -> None:
        if delay_minutes < 0:
            raise ValueError(f"delay_minutes must not be negative: {delay_minutes}")

        self.depends_on = depends_on  # a name, may never resolve to a device
        self.delay_minutes = delay_minutes

    def __repr__(self) -> str:
        return f"Dependency({self.depends_on!r}, delay_minutes={self.delay_minutes})"

    @classmethod
    def create_from_schema(cls, **schema: Any) -> Dependency:
        schema = SCH_DEPENDENCY(schema)
        return cls(schema[SZ_DEPENDS_ON], delay_minutes=schema[SZ_DELAY_MINUTES])

    @property
    def schema(self) -> dict[str, Any]:
        return {SZ_DEPENDS_ON: self.depends_on, SZ_DELAY_MINUTES: self.delay_minutes}


class ScheduleEntry:
    """A scheduled action, either weekly (has days) or one-time (has no days).

    A weekly entry is due on each of its days, at its time of day. A one-time entry
    is due at its (UTC) timestamp, and never again once it has been triggered.
    """

    def __init__(
        self,
        action: Action | str,
        *,
        days: list[str] | tuple[str, ...] | None = None,
        time: str | None = "",
        one_time_utc: str | None = "",
        has_triggered: bool = False,
    ) -> None:
        self.action = Action(action)
        self.days: tuple[str, ...] = tuple(d.strip().lower() for d in days or ())
        self.time = time or ""
        self.one_time_utc = one_time_utc or ""

        self._has_triggered = has_triggered

    def __repr__(self) -> str:
        if self.is_weekly:
            return (
                f"ScheduleEntry({self.action}, days={list(self.days)}"
                f", time={self.time!r})"
            )
        return (
            f"ScheduleEntry({self.action}, one_time_utc={self.one_time_utc!r}"
            f", has_triggered={self._has_triggered})"
        )

    @classmethod
    def create_from_schema(cls, **schema: Any) -> ScheduleEntry:
        schema = SCH_SCHEDULE_ENTRY(schema)
        return cls(
            schema[SZ_ACTION],
            days=schema[SZ_DAYS],
            time=schema[SZ_TIME],
            one_time_utc=schema[SZ_ONE_TIME_UTC],
            has_triggered=schema[SZ_HAS_TRIGGERED],
        )

    @property
    def is_weekly(self) -> bool:
        return bool(self.days)

    @property
    def is_one_time(self) -> bool:
        return not self.days

    @property
    def has_triggered(self) -> bool:
        """Return True if this (one-time) entry has been consumed."""
        return self._has_triggered

    def _mark_triggered(self) -> None:
        """Consume a one-time entry, so that it will never trigger again."""

        if self.is_one_time and not self._has_triggered:
            _LOGGER.debug(f"{self}: marked as triggered")
            self._has_triggered = True

    @property
    def schema(self) -> dict[str, Any]:
        return {
            SZ_ACTION: str(self.action),
            SZ_DAYS: list(self.days),
            SZ_TIME: self.time,
            SZ_ONE_TIME_UTC: self.one_time_utc,
            SZ_HAS_TRIGGERED: self._has_triggered,
        }


class Outlet:
    """An individually switchable outlet of a multi-outlet device (a power strip)."""

    def __init__(
        self,
        name: str,
        *,
        commands: dict[str, str] | None = None,
        is_on: bool = False,
    ) -> None:
        self.name = name
        self.commands: dict[str, str] = {
            k.lower(): v for k, v in (commands or {}).items()
        }

        self._is_on = is_on

    def __repr__(self) -> str:
        return f"Outlet({self.name!r}, is_on={self._is_on})"

    @classmethod
    def create_from_schema(cls, **schema: Any) -> Outlet:
        schema = SCH_OUTLET(schema)
        return cls(
            schema[SZ_NAME], commands=schema[SZ_COMMANDS], is_on=schema[SZ_IS_ON]
        )

    @property
    def is_on(self) -> bool:
        return self._is_on

    def _set_state(self, is_on: bool) -> None:
        self._is_on = is_on

    @property
    def schema(self) -> dict[str, Any]:
        return {
            SZ_NAME: self.name,
            SZ_COMMANDS: dict(self.commands),
            SZ_IS_ON: self._is_on,
        }


class Device:
    """A networked appliance (e.g. a PC, a projector, a power strip)."""

    def __init__(
        self,
        name: str,
        *,
        type: str | None = "",  # noqa: A002
        commands: dict[str, str] | None = None,
        dependencies: list[Dependency] | None = None,
        schedule: list[ScheduleEntry] | None = None,
        outlets: list[Outlet] | None = None,
        is_online: bool = True,
        ip: str | None = "",
        mac: str | None = "",
        area: str | None = "",
        category: str | None = "",
    ) -> None:
        if not name:
            raise ValueError("A device must have a name")

        self.name = name
        self.type = type or ""
        self.commands: dict[str, str] = {
            k.lower(): v for k, v in (commands or {}).items()
        }
        self.dependencies: list[Dependency] = dependencies or []
        self.schedule: list[ScheduleEntry] = schedule or []
        self.outlets: list[Outlet] = outlets or []

        self.ip = ip or ""
        self.mac = mac or ""
        self.area = area or ""
        self.category = category or ""

        self._is_online = is_online

    def __repr__(self) -> str:
        return f"Device({self.name!r}, type={self.type!r}, is_online={self._is_online})"

    def __str__(self) -> str:
        return self.name

    @classmethod
    def create_from_schema(cls, **schema: Any) -> Device:
        """Create a device from a (not yet validated) record, e.g. from a JSON file.

        Will raise vol.Invalid if the record is not valid.
        """

        schema = SCH_DEVICE(schema)
        return cls(
            schema[SZ_NAME],
            type=schema[SZ_TYPE],
            commands=schema[SZ_COMMANDS],
            dependencies=[
                Dependency.create_from_schema(**d) for d in schema[SZ_DEPENDENCIES]
            ],
            schedule=[
                ScheduleEntry.create_from_schema(**s) for s in schema[SZ_SCHEDULE]
            ],
            outlets=[Outlet.create_from_schema(**o) for o in schema[SZ_OUTLETS]],
            is_online=schema[SZ_IS_ONLINE],
            ip=schema[SZ_IP],
            mac=schema[SZ_MAC],
            area=schema[SZ_AREA],
            category=schema[SZ_CATEGORY],
        )

    @property
    def id(self) -> str:
        """Return the registry key of the device (names are case-insensitive)."""
        return self.name.lower()

    @property
    def is_online(self) -> bool:
        return self._is_online

    def _update_liveness(self, is_online: bool) -> None:
        if is_online != self._is_online:
            _LOGGER.info(f"{self}: is now {'online' if is_online else 'offline'}")
        self._is_online = is_online

    def is_multi_outlet(
        self, multi_outlet_type: str = DEFAULT_MULTI_OUTLET_TYPE
    ) -> bool:
        """Return True if the device has addressable outlets."""
        return self.type.lower() == multi_outlet_type.lower()

    def get_command(self, key: CommandKey | str) -> str | None:
        """Return the command string for an action keyword (e.g. 'on'), if any."""
        return self.commands.get(str(key).lower())

    @property
    def schema(self) -> dict[str, Any]:
        """Return the record of the device (e.g. to be saved by the registry)."""

        return {
            SZ_NAME: self.name,
            SZ_TYPE: self.type,
            SZ_IS_ONLINE: self._is_online,
            SZ_COMMANDS: dict(self.commands),
            SZ_DEPENDENCIES: [d.schema for d in self.dependencies],
            SZ_SCHEDULE: [s.schema for s in self.schedule],
            SZ_OUTLETS: [o.schema for o in self.outlets],
            SZ_IP: self.ip,
            SZ_MAC: self.mac,
            SZ_AREA: self.area,
            SZ_CATEGORY: self.category,
        }
