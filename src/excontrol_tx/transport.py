#!/usr/bin/env python3
"""ExControl - the transports: how a command is actually delivered to a device.

The transport is the injected capability that performs the side effect (e.g. a
network call, or spawning a process). It reports success/failure, and bounds each
attempt with its own timeout; retries are the responsibility of the protocol.

Operation of the transports:
- LoopbackTransport: a stub, succeeds unless the command is the literal "fail"
- CallbackTransport: adapts any callable, sync or async: fnc(device, command) -> bool
"""

from __future__ import annotations

import asyncio
import logging
from inspect import iscoroutinefunction
from typing import TYPE_CHECKING, Any

from . import exceptions as exc
from .const import DEFAULT_SEND_TIMEOUT, FAILED_COMMAND

if TYPE_CHECKING:
    from .typing import DeviceT, SendFnT


_LOGGER = logging.getLogger(__name__)


class CommandTransport:
    """The base class for all transports."""

    def __init__(self, *, timeout: float = DEFAULT_SEND_TIMEOUT) -> None:
        self._timeout = timeout

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(timeout={self._timeout})"

    async def send(
        self, device: DeviceT, command: str, *, timeout: float | None = None
    ) -> bool:
        """Deliver a command to a device and return True if it was successful.

        Will raise:
            TransportTimeout: the command did not complete within timeout secs
            TransportError:   the command raised an exception (e.g. an OSError)
            ProtocolError:    as raised by the transport itself, unchanged
        """

        timeout = timeout or self._timeout

        try:
            result = await asyncio.wait_for(self._send(device, command), timeout)
        except TimeoutError as err:
            raise exc.TransportTimeout(
                f"{self}: Command '{command}' to '{device.name}' timed out"
                f" after {timeout} secs"
            ) from err
        except exc.ProtocolError:
            raise
        except Exception as err:  # e.g. OSError, subprocess.CalledProcessError
            raise exc.TransportError(
                f"{self}: Command '{command}' to '{device.name}' failed: {err!r}"
            ) from err

        _LOGGER.debug(f"{self}: Sent '{command}' to '{device.name}': ok={result}")
        return result

    async def _send(self, device: DeviceT, command: str) -> bool:
        raise NotImplementedError


class LoopbackTransport(CommandTransport):
    """A transport that only pretends to send, keeping a record of its commands."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.sent: list[tuple[str, str]] = []  # (device name, command), as sent

    async def _send(self, device: DeviceT, command: str) -> bool:
        self.sent.append((device.name, command))
        return command != FAILED_COMMAND


class CallbackTransport(CommandTransport):
    """A transport that delegates the sending to a callable (sync or async)."""

    def __init__(self, send_fnc: SendFnT, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._send_fnc = send_fnc

    def __repr__(self) -> str:
        name = getattr(self._send_fnc, "__name__", self._send_fnc)
        return f"{self.__class__.__name__}({name}, timeout={self._timeout})"

    async def _send(self, device: DeviceT, command: str) -> bool:
        if iscoroutinefunction(self._send_fnc):  # Awaitable, else Callable
            return bool(await self._send_fnc(device, command))  # type: ignore[misc]
        return bool(self._send_fnc(device, command))  # type: ignore[arg-type]


def transport_factory(
    send_fnc: SendFnT | None = None,
    /,
    *,
    timeout: float = DEFAULT_SEND_TIMEOUT,
) -> CommandTransport:
    """Return a transport for the callable, or a loopback transport if there is none."""

    if send_fnc is None:
        return LoopbackTransport(timeout=timeout)

    if isinstance(send_fnc, CommandTransport):
        raise TypeError(f"{send_fnc} is already a transport, not a callable")

    if not callable(send_fnc):
        raise TypeError(f"The send callable is not callable: {send_fnc}")

    return CallbackTransport(send_fnc, timeout=timeout)
