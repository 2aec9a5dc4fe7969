#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Utility helpers: the console/file logger and the exception hierarchy.

The settings file handler and summary rendering depend on core types and are
imported from their own modules.
"""

from .logger_utils import TunerLogger

from .exceptions import (
    CapabilityUnavailableError,
    CommandFailedError,
    ConfigValueValidationError,
    HubTuneError,
    InsufficientPrivilegeError,
    UnsupportedPlatformError,
)

__all__ = [
    "TunerLogger",
    "CapabilityUnavailableError",
    "CommandFailedError",
    "ConfigValueValidationError",
    "HubTuneError",
    "InsufficientPrivilegeError",
    "UnsupportedPlatformError",
]
