#!/usr/bin/env python3
"""ExControl - the liveness monitor: periodically probes every device.

Hysteresis is asymmetric: a device is marked offline only after failure_threshold
consecutive failed probes, but is marked online after a single successful probe.
A probe that raises an exception is a failed probe.
"""

from __future__ import annotations

import asyncio
import logging
from inspect import iscoroutinefunction
from typing import TYPE_CHECKING, Any

from excontrol_tx import exceptions as exc

from .const import DEFAULT_FAILURE_THRESHOLD, DEFAULT_PROBE_TIMEOUT
from .helpers import cancel_task, schedule_task

if TYPE_CHECKING:
    from excontrol_tx.typing import ProbeFnT

    from .device import Device
    from .registry import DeviceRegistry


DEFAULT_PROBE_PORT = 445  # SMB, usually open on a Windows PC

_LOGGER = logging.getLogger(__name__)


class DeviceProbe:
    """The base class for all probes: is a device alive?"""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"

    async def probe(self, device: Device) -> bool:
        raise NotImplementedError


class AlwaysAliveProbe(DeviceProbe):
    """A probe that reports every device as alive."""

    async def probe(self, device: Device) -> bool:
        return True


class TcpProbe(DeviceProbe):
    """A probe that attempts a TCP connection to the device's IP address."""

    def __init__(
        self, port: int = DEFAULT_PROBE_PORT, *, timeout: float = DEFAULT_PROBE_TIMEOUT
    ) -> None:
        self._port = port
        self._timeout = timeout

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(port={self._port}, timeout={self._timeout})"

    async def probe(self, device: Device) -> bool:
        """Return True if a connection to ip:port could be made within timeout secs.

        Will raise:
            ProbeError: the device has no IP address
        """

        if not device.ip:
            raise exc.ProbeError(f"{device}: has no IP address to probe")

        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(device.ip, self._port), self._timeout
            )
        except (OSError, TimeoutError) as err:
            _LOGGER.debug(f"{self}: {device} ({device.ip}) did not respond: {err}")
            return False

        writer.close()
        await writer.wait_closed()
        return True


class CallbackProbe(DeviceProbe):
    """A probe that delegates to a callable (sync or async)."""

    def __init__(self, probe_fnc: ProbeFnT) -> None:
        self._probe_fnc = probe_fnc

    def __repr__(self) -> str:
        name = getattr(self._probe_fnc, "__name__", self._probe_fnc)
        return f"{self.__class__.__name__}({name})"

    async def probe(self, device: Device) -> bool:
        if iscoroutinefunction(self._probe_fnc):  # Awaitable, else Callable
            return bool(await self._probe_fnc(device))  # type: ignore[misc]
        return bool(self._probe_fnc(device))  # type: ignore[arg-type]


def probe_factory(probe: DeviceProbe | ProbeFnT | None = None) -> DeviceProbe:
    """Return a probe for the callable, or an always-alive probe if there is none."""

    if probe is None:
        return AlwaysAliveProbe()
    if isinstance(probe, DeviceProbe):
        return probe
    if not callable(probe):
        raise TypeError(f"The probe is not callable: {probe}")
    return CallbackProbe(probe)


class LivenessMonitor:
    """Maintain the online/offline state of every device in a registry."""

    def __init__(
        self,
        registry: DeviceRegistry,
        probe: DeviceProbe | ProbeFnT | None = None,
        *,
        failure_threshold: int = DEFAULT_FAILURE_THRESHOLD,
    ) -> None:
        if failure_threshold < 1:
            raise ValueError(f"failure_threshold must be >= 1: {failure_threshold}")

        self._registry = registry
        self._probe = probe_factory(probe)
        self._threshold = failure_threshold

        self._failures: dict[str, int] = {}  # device.id -> consecutive failures
        self._task: asyncio.Task[Any] | None = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._probe!r}, running={self.is_running})"

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def failure_counts(self) -> dict[str, int]:
        """Return the consecutive failures of each device (by lower case name)."""
        return dict(self._failures)

    async def _probe_device(self, device: Device) -> bool:
        try:
            return bool(await self._probe.probe(device))
        except Exception as err:  # noqa: BLE001
            _LOGGER.warning(f"{self}: Probe of {device} failed: {err!r}")
            return False

    def _process_probe_result(self, device: Device, is_alive: bool) -> None:
        if is_alive:
            self._failures[device.id] = 0
            device._update_liveness(True)
            return

        self._failures[device.id] = self._failures.get(device.id, 0) + 1
        if self._failures[device.id] >= self._threshold:
            device._update_liveness(False)

    async def async_check_devices(self) -> None:
        """Probe every device (concurrently) and update its online/offline state."""

        devices = self._registry.snapshot()
        results = await asyncio.gather(*(self._probe_device(d) for d in devices))

        for device, is_alive in zip(devices, results, strict=True):
            self._process_probe_result(device, is_alive)

        current = {d.id for d in devices}
        for dev_id in [k for k in self._failures if k not in current]:
            del self._failures[dev_id]  # the device has left the registry

    def start(self, interval: float) -> None:
        """Probe every device now, and then every interval seconds, until stopped."""

        if self.is_running:
            return

        _LOGGER.debug(f"{self}: Starting, interval={interval} secs")
        self._task = schedule_task(self.async_check_devices, period=interval)

    async def stop(self) -> None:
        """Stop probing, and wait for any probe that is in flight to be cancelled."""

        await cancel_task(self._task)
        self._task = None
