#!/usr/bin/env python3
"""ExControl - exceptions above the command/transmit layer."""

from __future__ import annotations

from excontrol_tx.exceptions import (  # noqa: F401
    CommandSendFailed as CommandSendFailed,
    ExControlException as ExControlException,
    ProbeError as ProbeError,
    ProtocolError as ProtocolError,
    TransportError as TransportError,
    TransportTimeout as TransportTimeout,
)


class _ExControlUpperError(ExControlException):
    """A failure in the upper layer (devices, schedules, the controller)."""


########################################################################################
# Errors above the protocol/transport layer, incl. the controller lifecycle


class ControllerStateError(_ExControlUpperError):
    """The controller was/became inconsistent, e.g. started twice."""

    HINT = "stop the controller before starting it again"
