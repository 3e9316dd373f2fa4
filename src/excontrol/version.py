#!/usr/bin/env python3
"""ExControl - timed & manual power control of networked appliances."""

__version__ = "0.1.0"
VERSION = __version__
