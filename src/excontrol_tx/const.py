#!/usr/bin/env python3
"""ExControl - constants for the command/transmit layer."""

from __future__ import annotations

from enum import StrEnum
from typing import Final

DEFAULT_MAX_RETRIES: Final = 1  # retries after the first failed attempt
DEFAULT_RETRY_BACKOFF: Final[float] = 5.0  # seconds, between attempts
DEFAULT_SEND_TIMEOUT: Final[float] = 30.0  # seconds, for each attempt

DEFAULT_PROBE_INTERVAL: Final[float] = 60.0  # seconds
DEFAULT_PROBE_TIMEOUT: Final[float] = 3.0  # seconds
DEFAULT_FAILURE_THRESHOLD: Final = 3  # consecutive failed probes before offline

DEFAULT_MULTI_OUTLET_TYPE: Final = "power_strip"

FAILED_COMMAND: Final = "fail"  # a command that the loopback transport will fail

#
# Keys used by the device records & the configuration schemas
SZ_ACTION: Final = "action"
SZ_AREA: Final = "area"
SZ_CATEGORY: Final = "category"
SZ_COMMANDS: Final = "commands"
SZ_DAYS: Final = "days"
SZ_DELAY_MINUTES: Final = "delay_minutes"
SZ_DEPENDENCIES: Final = "dependencies"
SZ_DEPENDS_ON: Final = "depends_on"
SZ_HAS_TRIGGERED: Final = "has_triggered"
SZ_IP: Final = "ip"
SZ_IS_ON: Final = "is_on"
SZ_IS_ONLINE: Final = "is_online"
SZ_MAC: Final = "mac"
SZ_NAME: Final = "name"
SZ_ONE_TIME_UTC: Final = "one_time_utc"
SZ_OUTLETS: Final = "outlets"
SZ_SCHEDULE: Final = "schedule"
SZ_TIME: Final = "time"
SZ_TYPE: Final = "type"

WEEKDAYS: Final[tuple[str, ...]] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)  # indexed by dt.weekday()


class CommandKey(StrEnum):
    """The keys of a device's (or an outlet's) command map."""

    ON = "on"
    OFF = "off"


class Action(StrEnum):
    """The power actions of a schedule entry."""

    TURN_ON = "turn_on"
    TURN_OFF = "turn_off"

    @classmethod
    def _missing_(cls, value: object) -> Action | None:
        if isinstance(value, str):  # case-insensitive, e.g. "Turn_On"
            for member in cls:
                if member.value == value.strip().lower():
                    return member
        return None

    @property
    def command_key(self) -> CommandKey:
        """Return the key used to look up this action in a command map."""
        return CommandKey.ON if self is Action.TURN_ON else CommandKey.OFF
