#!/usr/bin/env python3
"""ExControl - the command/transmit layer (constants, transports, retries)."""

__version__ = "0.1.0"
VERSION = __version__
