#!/usr/bin/env python3
"""ExControl - the command/transmit layer.

Schema processor for protocol (lower) layer.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Final, TypedDict

import voluptuous as vol

from .const import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_BACKOFF,
    DEFAULT_SEND_TIMEOUT,
    SZ_COMMANDS,
    CommandKey,
)
from .typing import QosParams

_LOGGER = logging.getLogger(__name__)


#
# 1/3: Command maps, e.g. {"on": "wake 00:11:22:33:44:55", "off": "shutdown"}
def NormaliseCommandKeys() -> Callable[[dict[str, str]], dict[str, str]]:
    """Convert the keys of a command map to lower case (they are case-insensitive)."""

    def normalise_command_keys(node_value: dict[str, str]) -> dict[str, str]:
        return {k.strip().lower(): v for k, v in node_value.items()}

    return normalise_command_keys


SCH_COMMANDS = vol.All(
    vol.Schema({str: str}),
    NormaliseCommandKeys(),
    vol.Schema({vol.Optional(k.value): str for k in CommandKey}, extra=vol.ALLOW_EXTRA),
)
SCH_COMMANDS_DICT = {vol.Optional(SZ_COMMANDS, default={}): SCH_COMMANDS}


#
# 2/3: Diagnostic log configuration
SZ_DIAGNOSTIC_LOG: Final = "diagnostic_log"
SZ_FILE_NAME: Final = "file_name"
SZ_ROTATE_BACKUPS: Final = "rotate_backups"
SZ_ROTATE_BYTES: Final = "rotate_bytes"


class DiagLogConfigT(TypedDict):
    file_name: str
    rotate_backups: int
    rotate_bytes: int | None


def sch_diag_log_dict_factory(
    default_backups: int = 0,
) -> dict[vol.Required, vol.Any]:
    """Return a diagnostic log dict with a configurable default rotation policy.

    usage:

    SCH_DIAG_LOG_7 = vol.Schema(
        sch_diag_log_dict_factory(default_backups=7), extra=vol.PREVENT_EXTRA
    )
    """

    SCH_DIAG_LOG_CONFIG = vol.Schema(
        {
            vol.Optional(SZ_ROTATE_BACKUPS, default=default_backups): vol.Any(
                None, vol.All(int, vol.Range(min=0))
            ),
            vol.Optional(SZ_ROTATE_BYTES, default=None): vol.Any(
                None, vol.All(int, vol.Range(min=1))
            ),
        },
        extra=vol.PREVENT_EXTRA,
    )

    SCH_DIAG_LOG_NAME = str

    def NormaliseDiagLog(rotate_backups: int = 0) -> Callable[..., Any]:
        def normalise_diag_log(node_value: str | DiagLogConfigT) -> DiagLogConfigT:
            if isinstance(node_value, str):
                return {
                    SZ_FILE_NAME: node_value,
                    SZ_ROTATE_BACKUPS: rotate_backups,
                    SZ_ROTATE_BYTES: None,
                }
            return node_value

        return normalise_diag_log

    return {  # SCH_DIAG_LOG_DICT
        vol.Required(SZ_DIAGNOSTIC_LOG, default=None): vol.Any(
            None,
            vol.All(
                SCH_DIAG_LOG_NAME,
                NormaliseDiagLog(rotate_backups=default_backups),
            ),
            SCH_DIAG_LOG_CONFIG.extend({vol.Required(SZ_FILE_NAME): SCH_DIAG_LOG_NAME}),
        )
    }


SCH_DIAG_LOG = vol.Schema(
    sch_diag_log_dict_factory(default_backups=7), extra=vol.PREVENT_EXTRA
)


#
# 3/3: Dispatch (QoS) configuration
SZ_MAX_RETRIES: Final = "max_retries"
SZ_RETRY_BACKOFF: Final = "retry_backoff"
SZ_SEND_TIMEOUT: Final = "send_timeout"

SCH_DISPATCH_DICT = {
    vol.Optional(SZ_MAX_RETRIES, default=DEFAULT_MAX_RETRIES): vol.All(
        int, vol.Range(min=0, max=5)
    ),
    vol.Optional(SZ_RETRY_BACKOFF, default=DEFAULT_RETRY_BACKOFF): vol.All(
        vol.Coerce(float), vol.Range(min=0, max=300)
    ),
    vol.Optional(SZ_SEND_TIMEOUT, default=DEFAULT_SEND_TIMEOUT): vol.All(
        vol.Coerce(float), vol.Range(min=0.1, max=600)
    ),
}
SCH_DISPATCH_CONFIG = vol.Schema(SCH_DISPATCH_DICT, extra=vol.REMOVE_EXTRA)


def qos_from_config(config: dict[str, Any]) -> QosParams:
    """Return the QoS params of a dispatch configuration.

    The send_timeout is not a QoS param: it is applied to the transport instead.
    """

    config = SCH_DISPATCH_CONFIG(config)
    return QosParams(
        max_retries=config[SZ_MAX_RETRIES],
        backoff=config[SZ_RETRY_BACKOFF],
    )
