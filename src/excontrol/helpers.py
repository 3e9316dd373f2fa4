#!/usr/bin/env python3
"""ExControl - Helper functions."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from inspect import iscoroutinefunction
from typing import Any

_LOGGER = logging.getLogger(__name__)


async def execute_fnc(
    fnc: Awaitable[Any] | Callable[..., Any], *args: Any, **kwargs: Any
) -> Any:
    """Call a function, awaiting it if it is a coroutine function."""

    if iscoroutinefunction(fnc):  # Awaitable, else Callable
        return await fnc(*args, **kwargs)
    return fnc(*args, **kwargs)  # type: ignore[operator]


def schedule_task(
    fnc: Awaitable[Any] | Callable[..., Any],
    *args: Any,
    delay: float | None = None,
    period: float | None = None,
    **kwargs: Any,
) -> asyncio.Task[Any]:
    """Start a coro after delay seconds, and repeat it every period seconds (if any).

    An exception raised by a periodic fnc is logged, and does not stop the task.
    """

    async def schedule_fnc(
        fnc: Awaitable[Any] | Callable[..., Any],
        delay: float | None,
        period: float | None,
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        if delay:
            await asyncio.sleep(delay)

        if not period:
            await execute_fnc(fnc, *args, **kwargs)
            return

        while period:
            try:
                await execute_fnc(fnc, *args, **kwargs)
            except Exception:  # noqa: BLE001
                _LOGGER.exception(f"Periodic task {fnc} raised an exception")
            await asyncio.sleep(period)

    return asyncio.create_task(
        schedule_fnc(fnc, delay, period, *args, **kwargs), name=str(fnc)
    )


async def cancel_task(task: asyncio.Task[Any] | None) -> None:
    """Cancel a task (if any), and wait for it to finish."""

    if task is None or task.done():
        return

    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task
