#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""macOS-specific tuner implementation (BSD sysctl and route)."""

import re
from typing import List, Tuple

from hubtune.hubtune_constants import MAC_OPTIONAL_TOOLS, PLATFORM_MAC
from hubtune.tuner.configs.constants.enums import OperatingSystem
from hubtune.tuner.utils.logger_utils import TunerLogger

from .base import BaseTuner


def parse_route_get(lines: List[str]) -> Tuple[str, str]:
    """Return (gateway, interface) from 'route -n get default' output."""
    gateway = ""
    iface = ""
    for line in lines:
        if match := re.match(r"^\s*gateway:\s*(\S+)", line):
            gateway = match.group(1)
        elif match := re.match(r"^\s*interface:\s*(\S+)", line):
            iface = match.group(1)
    return gateway, iface


class MacTuner(BaseTuner):
    """macOS-specific tuner implementation.

    Privileged writes go through non-interactive sudo when not already root.
    """

    operating_system = OperatingSystem.DARWIN
    optional_tools = MAC_OPTIONAL_TOOLS

    def __init__(self, debug: bool = False, use_sudo: bool = True):
        """Initialize the macOS tuner."""
        super().__init__(debug, use_sudo)
        if self.debug:
            TunerLogger.debug(f"{PLATFORM_MAC} tuner initialized")

    def _route_get_default(self) -> Tuple[str, str]:
        err, out = self.run_process(["route", "-n", "get", "default"], stderr=False)
        if err != 0:
            return "", ""
        return parse_route_get(out)

    def default_route_interface(self) -> str:
        return self._route_get_default()[1]

    def default_gateway(self) -> str:
        return self._route_get_default()[0]

    def add_host_route(self, host: str, gateway: str) -> None:
        self.check_process(["route", "add", "-host", host, gateway], privileged=True)

    def add_interface_route(self, network: str, iface: str) -> None:
        self.check_process(["route", "add", "-net", network, "-interface", iface], privileged=True)

    def delete_route(self, destination: str) -> bool:
        """Delete a route; returns False when there was nothing to delete."""
        err, _ = self.run_process(["route", "delete", destination], privileged=True)
        return err == 0
