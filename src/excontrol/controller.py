#!/usr/bin/env python3
"""ExControl - the controller: the registry, monitor, scheduler & dispatcher, wired.

Usage:
    ctl = Controller(records, send_fnc=send_command, probe_interval=30)
    await ctl.start()
    ...
    await ctl.run_schedules()  # e.g. once a minute, unless schedule_interval is set
    await ctl.turn_device_on(ctl.get_device("projector_1"))
    ...
    await ctl.stop()
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime as dt
from types import SimpleNamespace
from typing import TYPE_CHECKING, Any

from excontrol_tx.logger import set_diag_logging
from excontrol_tx.protocol import protocol_factory
from excontrol_tx.schemas import qos_from_config
from excontrol_tx.transport import transport_factory

from . import exceptions as exc
from .device import Device
from .dispatcher import Dispatcher
from .monitor import LivenessMonitor
from .registry import DeviceRegistry
from .scheduler import Scheduler
from .schemas import (
    SZ_DIAGNOSTIC_LOG,
    SZ_FILE_NAME,
    SZ_ROTATE_BACKUPS,
    SZ_ROTATE_BYTES,
    load_config,
)

if TYPE_CHECKING:
    from excontrol_tx.transport import CommandTransport
    from excontrol_tx.typing import ProbeFnT, SendFnT

    from .monitor import DeviceProbe
    from .scheduler import FiredAction, OnActionFnT

_LOGGER = logging.getLogger(__name__)


class Controller:
    """The power controller for a collection of networked appliances."""

    def __init__(
        self,
        devices: Iterable[Device | dict[str, Any]] | None = None,
        /,
        *,
        send_fnc: SendFnT | None = None,
        transport: CommandTransport | None = None,
        probe: DeviceProbe | ProbeFnT | None = None,
        debug_mode: bool = False,
        **kwargs: Any,
    ) -> None:
        if debug_mode:
            _LOGGER.setLevel(logging.DEBUG)

        config = load_config(kwargs)
        self.config = SimpleNamespace(**config)

        self._set_diag_logging(config[SZ_DIAGNOSTIC_LOG])

        if transport and send_fnc:
            raise TypeError("Specify a transport, or a send_fnc, not both")

        self.registry = DeviceRegistry()
        for device in devices or ():
            if isinstance(device, Device):
                self.registry.add_device(device)
            else:
                self.registry.load_devices([device])

        self._protocol = protocol_factory(
            transport or transport_factory(send_fnc, timeout=self.config.send_timeout),
            qos=qos_from_config(config),
        )
        self.dispatcher = Dispatcher(
            self._protocol, multi_outlet_type=self.config.multi_outlet_type
        )
        self.monitor = LivenessMonitor(
            self.registry, probe, failure_threshold=self.config.failure_threshold
        )
        self.scheduler = Scheduler(self.registry, self.dispatcher)

        self._is_started = False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(devices={len(self.registry)})"

    @staticmethod
    def _set_diag_logging(diag_log: dict[str, Any] | None) -> None:
        if not diag_log:
            set_diag_logging()
            return

        set_diag_logging(
            file_name=diag_log[SZ_FILE_NAME],
            rotate_backups=diag_log[SZ_ROTATE_BACKUPS] or 0,
            rotate_bytes=diag_log[SZ_ROTATE_BYTES],
        )

    @property
    def devices(self) -> list[Device]:
        return self.registry.snapshot()

    def get_device(self, name: str) -> Device:
        return self.registry.get_device(name)

    async def start(self, /, *, start_monitor: bool = True) -> None:
        """Start the liveness monitor (and the scheduler, if it is periodic)."""

        if self._is_started:
            raise exc.ControllerStateError(f"{self}: is already started")
        self._is_started = True

        _LOGGER.debug(f"{self}: Starting, config={self.config}")

        if start_monitor:
            self.monitor.start(self.config.probe_interval)
        if self.config.schedule_interval:
            self.scheduler.start(self.config.schedule_interval)

    async def stop(self) -> None:
        """Stop the monitor & scheduler (if running), and wait for them to finish."""

        await self.scheduler.stop()
        await self.monitor.stop()

        self._is_started = False
        _LOGGER.debug(f"{self}: Stopped")

    async def run_schedules(
        self, now: dt | None = None, on_action: OnActionFnT | None = None
    ) -> list[FiredAction]:
        return await self.scheduler.async_run_schedules(now, on_action=on_action)

    async def turn_device_on(self, device: Device) -> bool:
        return await self.dispatcher.turn_device_on(device)

    async def turn_device_off(self, device: Device) -> bool:
        return await self.dispatcher.turn_device_off(device)

    async def turn_outlet_on(self, device: Device, index: int) -> bool:
        return await self.dispatcher.turn_outlet_on(device, index)

    async def turn_outlet_off(self, device: Device, index: int) -> bool:
        return await self.dispatcher.turn_outlet_off(device, index)
