#!/usr/bin/env python3
"""ExControl - the command/transmit layer (constants, transports, retries)."""

from __future__ import annotations

from .const import (
    DEFAULT_FAILURE_THRESHOLD,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MULTI_OUTLET_TYPE,
    DEFAULT_PROBE_INTERVAL,
    DEFAULT_RETRY_BACKOFF,
    DEFAULT_SEND_TIMEOUT,
    Action,
    CommandKey,
)
from .logger import append_diagnostic, set_diag_logging
from .protocol import CommandProtocol, protocol_factory
from .transport import (
    CallbackTransport,
    CommandTransport,
    LoopbackTransport,
    transport_factory,
)
from .typing import QosParams
from .version import VERSION

__all__ = [
    "VERSION",
    #
    "DEFAULT_FAILURE_THRESHOLD",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_MULTI_OUTLET_TYPE",
    "DEFAULT_PROBE_INTERVAL",
    "DEFAULT_RETRY_BACKOFF",
    "DEFAULT_SEND_TIMEOUT",
    #
    "Action",
    "CommandKey",
    "QosParams",
    #
    "CallbackTransport",
    "CommandProtocol",
    "CommandTransport",
    "LoopbackTransport",
    #
    "append_diagnostic",
    "protocol_factory",
    "set_diag_logging",
    "transport_factory",
]
