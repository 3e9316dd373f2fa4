#!/usr/bin/env python3
"""ExControl - power control of networked appliances.

Schema processor for upper layer.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Final

import voluptuous as vol

from excontrol_tx.schemas import (  # noqa: F401
    SCH_COMMANDS,
    SCH_COMMANDS_DICT,
    SCH_DISPATCH_DICT,
    SZ_DIAGNOSTIC_LOG,
    SZ_FILE_NAME,
    SZ_MAX_RETRIES,
    SZ_RETRY_BACKOFF,
    SZ_ROTATE_BACKUPS,
    SZ_ROTATE_BYTES,
    SZ_SEND_TIMEOUT,
    sch_diag_log_dict_factory,
)

from .const import (
    DEFAULT_FAILURE_THRESHOLD,
    DEFAULT_MULTI_OUTLET_TYPE,
    DEFAULT_PROBE_INTERVAL,
    DEFAULT_SCHEDULE_INTERVAL,
    SZ_ACTION,
    SZ_AREA,
    SZ_CATEGORY,
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
    WEEKDAYS,
    Action,
)

_LOGGER = logging.getLogger(__name__)


SCH_NAME = vol.All(str, vol.Strip, vol.Length(min=1))


def NormaliseWeekday() -> Callable[[str], str]:
    """Convert a weekday name to lower case (they are case-insensitive)."""

    def normalise_weekday(node_value: str) -> str:
        return node_value.strip().lower()

    return normalise_weekday


def NormaliseAction() -> Callable[[str], Action]:
    """Convert an action string, e.g. 'Turn_On', to an Action."""

    def normalise_action(node_value: str) -> Action:
        try:
            return Action(node_value)
        except ValueError as err:
            raise vol.Invalid(
                f"expected one of {[str(a) for a in Action]}, got '{node_value}'"
            ) from err

    return normalise_action


#
# 1/4: Schemas for the parts of a device record
SCH_DEPENDENCY = vol.Schema(
    {
        vol.Required(SZ_DEPENDS_ON): SCH_NAME,
        vol.Optional(SZ_DELAY_MINUTES, default=0): vol.All(int, vol.Range(min=0)),
    },
    extra=vol.PREVENT_EXTRA,
)

# time & one_time_utc remain free strings: an unparseable one never triggers
SCH_SCHEDULE_ENTRY = vol.Schema(
    {
        vol.Required(SZ_ACTION): vol.All(str, NormaliseAction()),
        vol.Optional(SZ_DAYS, default=[]): [
            vol.All(str, NormaliseWeekday(), vol.In(WEEKDAYS))
        ],
        vol.Optional(SZ_TIME, default=""): vol.Any(None, str),
        vol.Optional(SZ_ONE_TIME_UTC, default=""): vol.Any(None, str),
        vol.Optional(SZ_HAS_TRIGGERED, default=False): bool,
    },
    extra=vol.PREVENT_EXTRA,
)

SCH_OUTLET = vol.Schema(
    {
        vol.Required(SZ_NAME): str,
        vol.Optional(SZ_IS_ON, default=False): bool,
    },
    extra=vol.PREVENT_EXTRA,
).extend(SCH_COMMANDS_DICT)


#
# 2/4: Schema for a device record
SCH_DEVICE_TRAITS_DICT = {  # descriptive only, not used by the scheduler/monitor
    vol.Optional(SZ_IP, default=""): vol.Any(None, str),
    vol.Optional(SZ_MAC, default=""): vol.Any(None, str),
    vol.Optional(SZ_AREA, default=""): vol.Any(None, str),
    vol.Optional(SZ_CATEGORY, default=""): vol.Any(None, str),
}

SCH_DEVICE = (
    vol.Schema(
        {
            vol.Required(SZ_NAME): SCH_NAME,
            vol.Optional(SZ_TYPE, default=""): vol.Any(None, str),
            vol.Optional(SZ_IS_ONLINE, default=True): bool,
            vol.Optional(SZ_DEPENDENCIES, default=[]): [SCH_DEPENDENCY],
            vol.Optional(SZ_SCHEDULE, default=[]): [SCH_SCHEDULE_ENTRY],
            vol.Optional(SZ_OUTLETS, default=[]): [SCH_OUTLET],
            vol.Remove("scheduler_groups"): list,  # no longer used
        },
        extra=vol.PREVENT_EXTRA,
    )
    .extend(SCH_COMMANDS_DICT)
    .extend(SCH_DEVICE_TRAITS_DICT)
)

SCH_DEVICES = vol.All([SCH_DEVICE])


#
# 3/4: Controller (monitor/scheduler) configuration
SZ_FAILURE_THRESHOLD: Final = "failure_threshold"
SZ_MULTI_OUTLET_TYPE: Final = "multi_outlet_type"
SZ_PROBE_INTERVAL: Final = "probe_interval"
SZ_SCHEDULE_INTERVAL: Final = "schedule_interval"

SCH_CONTROLLER_DICT = {
    vol.Optional(SZ_PROBE_INTERVAL, default=DEFAULT_PROBE_INTERVAL): vol.All(
        vol.Coerce(float), vol.Range(min=0.01)
    ),
    vol.Optional(SZ_FAILURE_THRESHOLD, default=DEFAULT_FAILURE_THRESHOLD): vol.All(
        int, vol.Range(min=1)
    ),
    vol.Optional(SZ_SCHEDULE_INTERVAL, default=DEFAULT_SCHEDULE_INTERVAL): vol.All(
        vol.Coerce(float), vol.Range(min=0)
    ),  # NOTE: 0 means the caller drives the schedule
    vol.Optional(SZ_MULTI_OUTLET_TYPE, default=DEFAULT_MULTI_OUTLET_TYPE): vol.All(
        str, vol.Strip, vol.Length(min=1)
    ),
}


#
# 4/4: the Global (controller) Schema
SCH_CONTROLLER_CONFIG = vol.Schema(
    SCH_CONTROLLER_DICT | SCH_DISPATCH_DICT, extra=vol.PREVENT_EXTRA
).extend(sch_diag_log_dict_factory(default_backups=0))


def load_config(config: dict[str, Any] | None = None) -> dict[str, Any]:
    """Return a validated controller configuration, with the defaults filled in."""

    config = SCH_CONTROLLER_CONFIG(config or {})
    _LOGGER.debug(f"Controller config: {config}")
    return config
