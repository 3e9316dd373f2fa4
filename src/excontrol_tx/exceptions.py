#!/usr/bin/env python3
"""ExControl - exceptions within the command/transmit layer."""

from __future__ import annotations


class _ExControlBaseException(Exception):
    """Base class for all excontrol exceptions."""

    pass


class ExControlException(_ExControlBaseException):
    """Base class for all excontrol exceptions."""

    HINT: None | str = None

    def __init__(self, *args: object):
        super().__init__(*args)
        self.message: str | None = args[0] if args else None  # type: ignore[assignment]

    def __str__(self) -> str:
        if self.message and self.HINT:
            return f"{self.message} (hint: {self.HINT})"
        if self.message:
            return self.message
        if self.HINT:
            return f"Hint: {self.HINT}"
        return ""


class _ExControlLowerError(ExControlException):
    """A failure in the lower layer (protocol, transport, probe)."""


########################################################################################
# Errors at/below the protocol/transport layer, incl. sending commands


class ProtocolError(_ExControlLowerError):
    """An error occurred when sending a command to a device."""


class CommandSendFailed(ProtocolError):
    """The command failed, and kept failing until the retry limit was exceeded."""


class TransportError(ProtocolError):
    """The transport failed to deliver the command (e.g. a network/process error)."""


class TransportTimeout(TransportError):
    """The transport did not complete the command within its timeout."""

    HINT = "consider increasing the send_timeout"


########################################################################################
# Errors when checking the liveness of a device


class ProbeError(_ExControlLowerError):
    """The liveness probe itself failed (as opposed to the device not responding)."""
