#!/usr/bin/env python3
"""ExControl - the dispatcher: executes a device's (or an outlet's) commands.

This is the entry point for both manual control and the scheduler. It never reads
or writes a device's schedule.

Failures are reported as a False result (and logged), not as exceptions, except for
invalid arguments (e.g. a device of None).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from excontrol_tx import exceptions as exc
from excontrol_tx.logger import append_diagnostic
from excontrol_tx.protocol import protocol_factory

from .const import DEFAULT_MULTI_OUTLET_TYPE, Action, CommandKey

if TYPE_CHECKING:
    from excontrol_tx.protocol import CommandProtocol

    from .device import Device


_LOGGER = logging.getLogger(__name__)


def _check_device(device: Device | None) -> Device:
    if device is None:
        raise TypeError("The device must not be None")
    return device


class Dispatcher:
    """Execute commands via a command protocol (which has retries)."""

    def __init__(
        self,
        protocol: CommandProtocol | None = None,
        *,
        multi_outlet_type: str = DEFAULT_MULTI_OUTLET_TYPE,
    ) -> None:
        self._protocol = protocol or protocol_factory()
        self._multi_outlet_type = multi_outlet_type

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._protocol!r})"

    @property
    def protocol(self) -> CommandProtocol:
        return self._protocol

    async def _send_cmd(self, device: Device, cmd: str) -> bool:
        """Send a command (with a retry), and return True if it was successful."""

        try:
            await self._protocol.send_cmd(device, cmd)
        except exc.CommandSendFailed as err:
            _LOGGER.error(f"{self}: {err}")
            append_diagnostic(str(err))
            return False
        return True

    async def execute_command(self, device: Device, key: CommandKey | str) -> bool:
        """Execute the device's command for a keyword (e.g. 'on'), return True if ok.

        The device's online state is not checked. A missing command is a failure.
        """

        key = str(key).strip().lower()

        if (cmd := device.get_command(key)) is None:
            _LOGGER.warning(f"{self}: No '{key}' command found for device '{device}'.")
            return False

        _LOGGER.info(f"{self}: Sending '{key}' to '{device}' using command '{cmd}'")
        return await self._send_cmd(device, cmd)

    async def execute_action(self, device: Device, action: Action | str) -> bool:
        """Execute a scheduled action, e.g. turn_on."""
        return await self.execute_command(device, Action(action).command_key)

    async def turn_device_on(self, device: Device) -> bool:
        return await self.execute_command(_check_device(device), CommandKey.ON)

    async def turn_device_off(self, device: Device) -> bool:
        return await self.execute_command(_check_device(device), CommandKey.OFF)

    async def _turn_outlet(self, device: Device, index: int, is_on: bool) -> bool:
        """Switch one outlet of a multi-outlet device.

        Fails (with no change of state) if the device is not a multi-outlet device,
        is offline, or has no such outlet. Otherwise, the command is taken from the
        outlet (else from the device), and the outlet's state is set regardless of
        whether there is such a command.

        Returns the result of the command if one was sent, otherwise True.
        """

        device = _check_device(device)

        if not device.is_multi_outlet(self._multi_outlet_type):
            _LOGGER.warning(
                f"{self}: Device '{device}' is not a {self._multi_outlet_type}"
                f" (its type is '{device.type}')"
            )
            return False

        if not device.is_online:
            _LOGGER.warning(f"{self}: Device '{device}' is offline")
            return False

        if not 0 <= index < len(device.outlets):
            _LOGGER.warning(
                f"{self}: Device '{device}' has no outlet {index}"
                f" (it has {len(device.outlets)})"
            )
            return False

        outlet = device.outlets[index]
        key = CommandKey.ON if is_on else CommandKey.OFF

        if (cmd := outlet.commands.get(str(key))) is None:
            _LOGGER.info(
                f"{self}: Outlet '{outlet.name}' of '{device}' has no '{key}' command"
                ", falling back to the device's commands"
            )
            cmd = device.get_command(key)

        result = True
        if cmd is None:
            _LOGGER.warning(f"{self}: No '{key}' command found for '{device}'")
        else:
            result = await self._send_cmd(device, cmd)

        outlet._set_state(is_on)
        return result

    async def turn_outlet_on(self, device: Device, index: int) -> bool:
        return await self._turn_outlet(device, index, True)

    async def turn_outlet_off(self, device: Device, index: int) -> bool:
        return await self._turn_outlet(device, index, False)
