#!/usr/bin/env python3
"""ExControl - the device registry: an in-memory, ordered collection of devices.

Names are case-insensitive, and unique. Persistence is the concern of the caller,
who can load the registry from records, and save it via each device's schema.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from .device import Device
from .schemas import SCH_DEVICES

_LOGGER = logging.getLogger(__name__)


class DeviceRegistry:
    """The devices, in the order they were added."""

    def __init__(self, devices: Iterable[Device] | None = None) -> None:
        self.devices: list[Device] = []
        self.device_by_id: dict[str, Device] = {}

        for device in devices or ():
            self.add_device(device)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(devices={len(self.devices)})"

    def __len__(self) -> int:
        return len(self.devices)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self.device_by_id

    def snapshot(self) -> list[Device]:
        """Return the devices (in registry order) as they are now.

        The list is a copy, so a device being added/removed during a pass is not seen
        until the next pass.
        """
        return list(self.devices)

    def get_device(self, name: str) -> Device:
        """Return a device by its (case-insensitive) name.

        Will raise:
            ValueError:  the name is empty
            LookupError: there is no such device
        """

        if not name or not name.strip():
            raise ValueError("The device name must not be empty")

        try:
            return self.device_by_id[name.strip().lower()]
        except KeyError as err:
            raise LookupError(f"Device not found: '{name}'") from err

    def add_device(self, device: Device) -> Device:
        """Add a device to the registry (the name must be unique)."""

        if device.id in self.device_by_id:
            raise LookupError(f"Duplicate device name: '{device.name}'")

        self.devices.append(device)
        self.device_by_id[device.id] = device

        _LOGGER.debug(f"{self}: Added device: {device!r}")
        return device

    def remove_device(self, name: str) -> Device:
        device = self.get_device(name)

        self.devices.remove(device)
        del self.device_by_id[device.id]

        _LOGGER.debug(f"{self}: Removed device: {device!r}")
        return device

    def load_devices(self, records: Iterable[dict[str, Any]]) -> list[Device]:
        """Create devices from (not yet validated) records, and add them.

        Will raise vol.Invalid if any record is invalid (and then adds none of them),
        and LookupError for a duplicate.
        """

        records = SCH_DEVICES(list(records))
        return [self.add_device(Device.create_from_schema(**r)) for r in records]

    @property
    def schema(self) -> list[dict[str, Any]]:
        return [d.schema for d in self.devices]
