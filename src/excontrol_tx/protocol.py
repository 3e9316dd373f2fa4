#!/usr/bin/env python3
"""ExControl - the command protocol: sends commands via a transport, with QoS.

QoS here is a bounded number of retries, each after a fixed backoff. The protocol
neither knows nor cares about schedules or liveness.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from . import exceptions as exc
from .transport import transport_factory
from .typing import QosParams

if TYPE_CHECKING:
    from .transport import CommandTransport
    from .typing import DeviceT


DEFAULT_QOS = QosParams()

_LOGGER = logging.getLogger(__name__)


class CommandProtocol:
    """Send a command via a transport, retrying (after a backoff) until success."""

    def __init__(
        self, transport: CommandTransport | None = None, qos: QosParams | None = None
    ) -> None:
        self._transport = transport or transport_factory()
        self._qos = qos or DEFAULT_QOS

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._transport!r}, {self._qos!r})"

    @property
    def transport(self) -> CommandTransport:
        return self._transport

    @property
    def qos(self) -> QosParams:
        return self._qos

    async def _send_once(
        self, device: DeviceT, cmd: str, timeout: float | None
    ) -> str | None:
        """Send the command once, and return None if successful, else the reason."""

        try:
            if await self._transport.send(device, cmd, timeout=timeout):
                return None
        except exc.ProtocolError as err:  # incl. TransportError
            return str(err)
        return "the transport reported a failure"

    async def send_cmd(
        self, device: DeviceT, cmd: str, /, *, qos: QosParams | None = None
    ) -> None:
        """Send a command with QoS (with retries, until success or CommandSendFailed).

        The first attempt is followed by up to max_retries retries, each after a
        delay of backoff seconds.

        Will raise:
            CommandSendFailed: the command failed on every attempt
        """

        qos = qos or self._qos

        for attempt in range(qos.max_retries + 1):
            if attempt:  # not the first attempt, so backoff before retrying
                _LOGGER.info(
                    f"{self}: Retrying '{cmd}' on '{device.name}' in {qos.backoff} secs"
                )
                await asyncio.sleep(qos.backoff)

            if (err_text := await self._send_once(device, cmd, qos.timeout)) is None:
                return

            _LOGGER.warning(
                f"{self}: Failed to send '{cmd}' to '{device.name}'"
                f" ({attempt + 1}/{qos.max_retries + 1}): {err_text}"
            )

        raise exc.CommandSendFailed(
            f"Command '{cmd}' failed on device '{device.name}' after retry."
        )


def protocol_factory(
    transport: CommandTransport | None = None,
    /,
    *,
    qos: QosParams | None = None,
) -> CommandProtocol:
    """Create and return a command protocol (with a loopback transport by default)."""

    return CommandProtocol(transport, qos=qos)
