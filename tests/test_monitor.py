#!/usr/bin/env python3
"""ExControl - Test the liveness monitor (hysteresis, probes, start/stop)."""

import asyncio

import pytest

from excontrol import (
    AlwaysAliveProbe,
    Device,
    DeviceRegistry,
    LivenessMonitor,
    TcpProbe,
)
from excontrol_tx import exceptions as exc

from .conftest import make_device

pytestmark = pytest.mark.asyncio()


class ScriptedProbe:
    """A probe callable whose results are set by the test, per device."""

    def __init__(self, *names: str) -> None:
        self.results = dict.fromkeys(names, True)
        self.calls = 0

    def __call__(self, device: Device) -> bool:
        self.calls += 1
        if (result := self.results[device.name]) is None:
            raise exc.TransportError(f"{device}: the network is down")
        return result


@pytest.fixture()
def registry() -> DeviceRegistry:
    return DeviceRegistry([make_device("pc_1"), make_device("pc_2")])


async def test_hysteresis(registry: DeviceRegistry) -> None:
    """Three failures to go offline, but only one success to go back online."""

    probe = ScriptedProbe("pc_1", "pc_2")
    monitor = LivenessMonitor(registry, probe)
    pc_1 = registry.get_device("pc_1")

    probe.results["pc_1"] = False

    await monitor.async_check_devices()
    await monitor.async_check_devices()
    assert pc_1.is_online  # 2 failures, still online
    assert monitor.failure_counts == {"pc_1": 2, "pc_2": 0}

    await monitor.async_check_devices()
    assert not pc_1.is_online  # 3rd failure
    assert registry.get_device("pc_2").is_online

    await monitor.async_check_devices()
    assert not pc_1.is_online

    probe.results["pc_1"] = True
    await monitor.async_check_devices()
    assert pc_1.is_online  # a single success
    assert monitor.failure_counts["pc_1"] == 0


async def test_success_resets_counter(registry: DeviceRegistry) -> None:
    probe = ScriptedProbe("pc_1", "pc_2")
    monitor = LivenessMonitor(registry, probe)
    pc_1 = registry.get_device("pc_1")

    for result in (False, False, True, False, False):
        probe.results["pc_1"] = result
        await monitor.async_check_devices()

    assert pc_1.is_online
    assert monitor.failure_counts["pc_1"] == 2


async def test_probe_exception_is_failure(registry: DeviceRegistry) -> None:
    probe = ScriptedProbe("pc_1", "pc_2")
    monitor = LivenessMonitor(registry, probe)

    probe.results["pc_2"] = None  # will raise

    for _ in range(3):
        await monitor.async_check_devices()

    assert registry.get_device("pc_1").is_online
    assert not registry.get_device("pc_2").is_online


async def test_async_probe_and_threshold(registry: DeviceRegistry) -> None:
    async def probe(device: Device) -> bool:
        return device.name != "pc_2"

    monitor = LivenessMonitor(registry, probe, failure_threshold=1)

    await monitor.async_check_devices()
    assert not registry.get_device("pc_2").is_online


async def test_counters_pruned(registry: DeviceRegistry) -> None:
    probe = ScriptedProbe("pc_1", "pc_2")
    monitor = LivenessMonitor(registry, probe)

    probe.results["pc_2"] = False
    await monitor.async_check_devices()
    assert monitor.failure_counts == {"pc_1": 0, "pc_2": 1}

    registry.remove_device("PC_2")
    await monitor.async_check_devices()
    assert monitor.failure_counts == {"pc_1": 0}


async def test_default_probe(registry: DeviceRegistry) -> None:
    registry.get_device("pc_1")._update_liveness(False)
    monitor = LivenessMonitor(registry)

    await monitor.async_check_devices()
    assert registry.get_device("pc_1").is_online


async def test_start_stop(registry: DeviceRegistry) -> None:
    probe = ScriptedProbe("pc_1", "pc_2")
    monitor = LivenessMonitor(registry, probe)

    monitor.start(0.01)
    assert monitor.is_running

    monitor.start(0.01)  # no-op, as already running

    for _ in range(100):
        if probe.calls >= 4:  # 2 devices x 2 cycles
            break
        await asyncio.sleep(0.01)
    assert probe.calls >= 4

    await monitor.stop()
    assert not monitor.is_running

    calls = probe.calls
    await asyncio.sleep(0.05)
    assert probe.calls == calls

    await monitor.stop()  # no-op, as already stopped


async def test_invalid_threshold(registry: DeviceRegistry) -> None:
    with pytest.raises(ValueError):
        LivenessMonitor(registry, AlwaysAliveProbe(), failure_threshold=0)


async def test_tcp_probe() -> None:
    async def handle(_: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        writer.close()

    server = await asyncio.start_server(handle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]

    device = make_device("pc_1", ip="127.0.0.1")
    try:
        assert await TcpProbe(port, timeout=1).probe(device) is True
    finally:
        server.close()
        await server.wait_closed()

    assert await TcpProbe(port, timeout=1).probe(device) is False

    with pytest.raises(exc.ProbeError):
        await TcpProbe(port).probe(make_device("pc_2"))  # no IP address
