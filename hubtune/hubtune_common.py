#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

import os
import platform
import sys

import psutil

from hubtune.hubtune_constants import (
    PLATFORM_NAME_LINUX,
    PLATFORM_NAME_MAC,
    PLATFORM_NAME_UNKNOWN,
    PLATFORM_NAME_WINDOWS,
)


# Platform detection utilities


def get_platform_name() -> str:
    """Determine the current host platform name.

    Returns:
        Platform name string: 'linux', 'macos', 'windows', or 'unknown'
    """
    plat = sys.platform
    if plat.startswith("linux"):
        return PLATFORM_NAME_LINUX
    elif plat == "darwin":
        return PLATFORM_NAME_MAC
    elif plat.startswith("win"):
        return PLATFORM_NAME_WINDOWS
    else:
        return PLATFORM_NAME_UNKNOWN


def cpu_cores() -> int:
    return psutil.cpu_count(logical=True) or os.cpu_count() or 1


def is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return bool(geteuid) and geteuid() == 0


def interface_exists(name: str) -> bool:
    """Return True if the named network interface is currently known to the kernel."""
    if not name:
        return False
    return name in psutil.net_if_stats()


def kernel_release() -> str:
    return platform.release()


__all__ = [
    "get_platform_name",
    "cpu_cores",
    "is_root",
    "interface_exists",
    "kernel_release",
]
