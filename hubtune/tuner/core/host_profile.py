#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Capability probe: a read-only snapshot of the host the pipeline will tune."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from hubtune.hubtune_common import cpu_cores, get_platform_name, kernel_release
from hubtune.hubtune_constants import WIRELESS_INTERFACE_PREFIX, WIRELESS_TOOL
from hubtune.tuner.configs.constants.enums import OperatingSystem
from hubtune.tuner.platforms import BaseTuner, get_platform_tuner, operating_system_for
from hubtune.tuner.utils.exceptions import UnsupportedPlatformError
from hubtune.tuner.utils.logger_utils import TunerLogger


@dataclass(frozen=True)
class HostProfile:
    """Host facts gathered once per run and never modified afterwards."""

    operating_system: OperatingSystem
    primary_interface: str = ""
    is_wireless: bool = False
    optional_tools: Mapping[str, bool] = field(default_factory=dict)
    kernel_release: str = ""
    cpu_count: int = 1

    def __post_init__(self):
        # freeze the tool map so steps can't mutate shared state through it
        object.__setattr__(self, "optional_tools", MappingProxyType(dict(self.optional_tools)))

    def has_tool(self, name: str) -> bool:
        return bool(self.optional_tools.get(name, False))


def is_wireless_interface(iface: str, has_wireless_tool: bool) -> bool:
    return bool(iface) and iface.startswith(WIRELESS_INTERFACE_PREFIX) and has_wireless_tool


def probe(platform_name: Optional[str] = None, tuner: Optional[BaseTuner] = None) -> HostProfile:
    """Inspect the running host and build its HostProfile.

    Raises UnsupportedPlatformError for anything other than Linux or macOS,
    before a tuner is created or any step can run.
    """
    platform_name = platform_name or get_platform_name()
    operating_system = operating_system_for(platform_name)
    if operating_system == OperatingSystem.UNSUPPORTED:
        raise UnsupportedPlatformError(platform_name)

    tuner = tuner or get_platform_tuner(platform_name)
    tools = {name: tuner.has_tool(name) for name in tuner.optional_tools}

    primary_interface = ""
    if operating_system == OperatingSystem.LINUX:
        primary_interface = tuner.default_route_interface()
        if not primary_interface:
            TunerLogger.warning("Could not determine the interface owning the default route")

    profile = HostProfile(
        operating_system=operating_system,
        primary_interface=primary_interface,
        is_wireless=is_wireless_interface(primary_interface, tools.get(WIRELESS_TOOL, False)),
        optional_tools=tools,
        kernel_release=kernel_release(),
        cpu_count=cpu_cores(),
    )
    TunerLogger.debug(f"Host profile: {profile}")
    return profile
