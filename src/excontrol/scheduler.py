#!/usr/bin/env python3
"""ExControl - the scheduler: one pass over all devices, at a reference instant.

For each device (in registry order), the winning due action is:
- skipped, with a diagnostic, if the device is offline
- deferred, if a turn_on must wait for a dependency (it remains due)
- otherwise fired, via on_action()

Every one-time entry that was due is then consumed, even if the action was skipped
or deferred.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime as dt
from typing import TYPE_CHECKING, Any, NamedTuple

from excontrol_tx.logger import append_diagnostic

from .const import Action
from .helpers import cancel_task, schedule_task
from .schedule import (
    Trigger,
    as_aware,
    due_triggers,
    resolve_on_time,
    winning_trigger,
)

if TYPE_CHECKING:
    from .device import Device
    from .dispatcher import Dispatcher
    from .registry import DeviceRegistry


OnActionFnT = Callable[["Device", Action], Any]

_LOGGER = logging.getLogger(__name__)


class FiredAction(NamedTuple):
    device: Device
    action: Action


def _consume_one_time_entries(triggers: Iterable[Trigger]) -> None:
    for trigger in triggers:
        if trigger.entry.is_one_time:
            trigger.entry._mark_triggered()


def run_schedules(
    devices: Iterable[Device] | None,
    now: dt,
    on_action: OnActionFnT | None = None,
) -> list[FiredAction]:
    """Run one pass of the scheduler, and return the actions that were fired.

    on_action(device, action) is called synchronously for each fired action. If it
    raises, the exception is logged and the pass continues with the next device.
    """

    if devices is None:
        return []

    now = as_aware(now)
    actual_on: dict[str, dt] = {}  # device.id -> when it was turned on, this pass only
    fired: list[FiredAction] = []

    def fire(device: Device, action: Action) -> None:
        fired.append(FiredAction(device, action))
        if on_action is None:
            return
        try:
            on_action(device, action)
        except Exception:  # noqa: BLE001
            _LOGGER.exception(f"{device}: The handler of '{action}' failed")

    for device in devices:
        triggers = due_triggers(device, now)
        if (winner := winning_trigger(triggers)) is None:
            continue

        action = winner.entry.action

        if not device.is_online:
            append_diagnostic(
                f"Scheduled action '{action}' skipped"
                f" for offline device '{device.name}'.",
                dtm=now,
            )

        elif action is Action.TURN_ON:
            on_time = resolve_on_time(device, winner.dtm, actual_on)
            if on_time <= now:
                fire(device, action)
                actual_on[device.id] = now
            else:
                _LOGGER.info(f"{device}: '{action}' deferred until {on_time}")

        else:  # Action.TURN_OFF, never deferred
            fire(device, action)
            actual_on.pop(device.id, None)

        _consume_one_time_entries(triggers)

    return fired


class Scheduler:
    """Run the scheduler against a registry, and dispatch the fired actions.

    The pass can be invoked by the caller (e.g. each minute), or periodically by
    the scheduler itself, once started.
    """

    def __init__(self, registry: DeviceRegistry, dispatcher: Dispatcher) -> None:
        self._registry = registry
        self._dispatcher = dispatcher

        self._task: asyncio.Task[Any] | None = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(running={self.is_running})"

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _dispatch(self, fired: FiredAction) -> bool:
        try:
            return await self._dispatcher.execute_action(fired.device, fired.action)
        except Exception:  # noqa: BLE001
            _LOGGER.exception(f"{fired.device}: Failed to dispatch '{fired.action}'")
            return False

    async def async_run_schedules(
        self, now: dt | None = None, on_action: OnActionFnT | None = None
    ) -> list[FiredAction]:
        """Run one pass over a snapshot of the registry, and dispatch what fires.

        A dispatch failure on one device does not affect the others.
        """

        fired = run_schedules(
            self._registry.snapshot(), now or dt.now(tz=UTC), on_action=on_action
        )

        if fired:
            await asyncio.gather(*(self._dispatch(f) for f in fired))
        return fired

    def start(self, interval: float) -> None:
        """Run the scheduler every interval seconds, until stopped."""

        if self.is_running:
            return

        _LOGGER.debug(f"{self}: Starting, interval={interval} secs")
        self._task = schedule_task(self.async_run_schedules, period=interval)

    async def stop(self) -> None:
        await cancel_task(self._task)
        self._task = None
