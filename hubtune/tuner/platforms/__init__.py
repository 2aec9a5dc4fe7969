#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Platform-specific tuner implementations."""

from hubtune.hubtune_common import get_platform_name
from hubtune.hubtune_constants import PLATFORM_NAME_LINUX, PLATFORM_NAME_MAC
from hubtune.tuner.configs.constants.enums import OperatingSystem
from hubtune.tuner.utils.exceptions import UnsupportedPlatformError

from .base import BaseTuner, RingParameters
from .linux import LinuxTuner
from .macos import MacTuner


def operating_system_for(platform_name: str) -> OperatingSystem:
    if platform_name == PLATFORM_NAME_LINUX:
        return OperatingSystem.LINUX
    elif platform_name == PLATFORM_NAME_MAC:
        return OperatingSystem.DARWIN
    return OperatingSystem.UNSUPPORTED


def get_platform_tuner(platform_name: str = None, debug: bool = False) -> BaseTuner:
    """Determine the current host platform and return the matching tuner."""

    platform_name = platform_name or get_platform_name()
    operating_system = operating_system_for(platform_name)

    if operating_system == OperatingSystem.LINUX:
        return LinuxTuner(debug=debug)
    elif operating_system == OperatingSystem.DARWIN:
        return MacTuner(debug=debug)
    else:
        raise UnsupportedPlatformError(platform_name)


__all__ = [
    "BaseTuner",
    "LinuxTuner",
    "MacTuner",
    "RingParameters",
    "get_platform_tuner",
    "operating_system_for",
]
