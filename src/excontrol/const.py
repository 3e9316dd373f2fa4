#!/usr/bin/env python3
"""ExControl - constants for the control (upper) layer."""

from __future__ import annotations

from typing import Final

from excontrol_tx.const import (  # noqa: F401
    DEFAULT_FAILURE_THRESHOLD as DEFAULT_FAILURE_THRESHOLD,
    DEFAULT_MULTI_OUTLET_TYPE as DEFAULT_MULTI_OUTLET_TYPE,
    DEFAULT_PROBE_INTERVAL as DEFAULT_PROBE_INTERVAL,
    DEFAULT_PROBE_TIMEOUT as DEFAULT_PROBE_TIMEOUT,
    SZ_ACTION as SZ_ACTION,
    SZ_AREA as SZ_AREA,
    SZ_CATEGORY as SZ_CATEGORY,
    SZ_COMMANDS as SZ_COMMANDS,
    SZ_DAYS as SZ_DAYS,
    SZ_DELAY_MINUTES as SZ_DELAY_MINUTES,
    SZ_DEPENDENCIES as SZ_DEPENDENCIES,
    SZ_DEPENDS_ON as SZ_DEPENDS_ON,
    SZ_HAS_TRIGGERED as SZ_HAS_TRIGGERED,
    SZ_IP as SZ_IP,
    SZ_IS_ON as SZ_IS_ON,
    SZ_IS_ONLINE as SZ_IS_ONLINE,
    SZ_MAC as SZ_MAC,
    SZ_NAME as SZ_NAME,
    SZ_ONE_TIME_UTC as SZ_ONE_TIME_UTC,
    SZ_OUTLETS as SZ_OUTLETS,
    SZ_SCHEDULE as SZ_SCHEDULE,
    SZ_TIME as SZ_TIME,
    SZ_TYPE as SZ_TYPE,
    WEEKDAYS as WEEKDAYS,
)

from excontrol_tx.const import (  # noqa: F401, isort: skip
    Action as Action,
    CommandKey as CommandKey,
)

DEFAULT_SCHEDULE_INTERVAL: Final[float] = 0  # seconds, 0 is not periodic

# accepted layouts of a weekly entry's time of day
TIME_OF_DAY_FORMATS: Final[tuple[str, ...]] = ("%H:%M", "%H:%M:%S")

# accepted layouts of a one-time entry's timestamp (always UTC)
ONE_TIME_FORMATS: Final[tuple[str, ...]] = (
    "%Y-%m-%d %H:%M",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
)
