#!/usr/bin/env python3
"""ExControl - timed & manual power control of networked appliances.

Works with PCs, projectors, power strips, etc.
"""

from __future__ import annotations

from .const import Action, CommandKey
from .controller import Controller
from .device import Dependency, Device, Outlet, ScheduleEntry
from .dispatcher import Dispatcher
from .monitor import AlwaysAliveProbe, CallbackProbe, LivenessMonitor, TcpProbe
from .registry import DeviceRegistry
from .schedule import Trigger, due_triggers, resolve_on_time, winning_trigger
from .scheduler import FiredAction, Scheduler, run_schedules
from .version import VERSION

__all__ = [
    "VERSION",
    #
    "Action",
    "CommandKey",
    #
    "Controller",
    "Dependency",
    "Device",
    "DeviceRegistry",
    "Dispatcher",
    "FiredAction",
    "LivenessMonitor",
    "Outlet",
    "ScheduleEntry",
    "Scheduler",
    "Trigger",
    #
    "AlwaysAliveProbe",
    "CallbackProbe",
    "TcpProbe",
    #
    "due_triggers",
    "resolve_on_time",
    "run_schedules",
    "winning_trigger",
]
