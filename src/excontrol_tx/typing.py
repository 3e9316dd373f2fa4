#!/usr/bin/env python3
"""ExControl - Typing for the command protocol & transports."""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeAlias

from .const import DEFAULT_MAX_RETRIES, DEFAULT_RETRY_BACKOFF

# a callable that performs the actual side effect, may be sync or async
SendFnT: TypeAlias = Callable[[Any, str], bool | Awaitable[bool]]


class DeviceT(Protocol):
    """The minimum a device must expose to the command/transmit layer."""

    name: str
    type: str

    @property
    def is_online(self) -> bool: ...


class QosParams:
    """A container for QoS attributes: the retry limit, backoff & timeout."""

    def __init__(
        self,
        *,
        max_retries: int | None = DEFAULT_MAX_RETRIES,
        backoff: float | None = DEFAULT_RETRY_BACKOFF,
        timeout: float | None = None,
    ) -> None:
        """Create a QosParams instance."""

        self._max_retries = DEFAULT_MAX_RETRIES if max_retries is None else max_retries
        self._backoff = DEFAULT_RETRY_BACKOFF if backoff is None else backoff
        self._timeout = timeout or None  # None, so the transport uses its own

    def __repr__(self) -> str:
        return (
            f"QosParams(max_retries={self._max_retries}, "
            f"backoff={self._backoff}, timeout={self._timeout})"
        )

    @property
    def max_retries(self) -> int:
        return self._max_retries

    @property
    def backoff(self) -> float:
        return self._backoff

    @property
    def timeout(self) -> float | None:
        return self._timeout


ProbeFnT: TypeAlias = Callable[[Any], bool | Awaitable[bool]]
