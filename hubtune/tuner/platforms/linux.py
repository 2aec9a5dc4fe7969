#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Linux-specific tuner implementation (ethtool, iw, iptables, iproute2)."""

import re
from typing import List, Optional, Tuple

from hubtune.hubtune_constants import (
    LINUX_OPTIONAL_TOOLS,
    PLATFORM_LINUX,
    PROC_INTERRUPTS,
    PROC_IRQ_AFFINITY,
    ROUTE_PROBE_ADDRESS,
)
from hubtune.hubtune_utils import which
from hubtune.tuner.configs.constants.enums import OperatingSystem
from hubtune.tuner.utils.exceptions import CapabilityUnavailableError, CommandFailedError
from hubtune.tuner.utils.logger_utils import TunerLogger

from .base import BaseTuner, RingParameters

# iptables -C exits 1 when the rule is absent; anything else is a real error
IPTABLES_RULE_MISSING = 1

# ethtool exits 80 when nothing changed ("no ring parameters changed, aborting")
ETHTOOL_UNMODIFIED = 80


def parse_adaptive_coalescing(lines: List[str]) -> Tuple[bool, bool]:
    """Parse 'Adaptive RX: on  TX: off' out of ethtool -c output."""
    for line in lines:
        if match := re.search(r"Adaptive RX:\s*(\w+)\s+TX:\s*(\w+)", line):
            return match.group(1).lower() == "on", match.group(2).lower() == "on"
    raise CapabilityUnavailableError("adaptive interrupt coalescing", "driver does not report adaptive coalescing")


def parse_ring_parameters(lines: List[str]) -> RingParameters:
    """Parse ethtool -g output into maximum and current RX/TX ring sizes."""
    sections = {"max": {}, "cur": {}}
    section = None
    for line in lines:
        stripped = line.strip()
        if stripped.lower().startswith("pre-set maximums"):
            section = "max"
        elif stripped.lower().startswith("current hardware settings"):
            section = "cur"
        elif section and (match := re.match(r"^(RX|TX):\s*(\d+)$", stripped)):
            sections[section][match.group(1)] = int(match.group(2))
    try:
        return RingParameters(
            rx_max=sections["max"]["RX"],
            tx_max=sections["max"]["TX"],
            rx=sections["cur"]["RX"],
            tx=sections["cur"]["TX"],
        )
    except KeyError as e:
        raise CapabilityUnavailableError("descriptor ring sizing", f"driver does not report {e} ring size") from e


def parse_interface_irqs(lines: List[str], iface: str) -> List[int]:
    """Return IRQ numbers from /proc/interrupts lines naming the interface."""
    pattern = re.compile(rf"(?<![\w.]){re.escape(iface)}(?![\w.])")
    irqs = []
    for line in lines:
        fields = line.split()
        if not fields or not fields[0].endswith(":") or not fields[0][:-1].isdigit():
            continue
        if pattern.search(line):
            irqs.append(int(fields[0][:-1]))
    return irqs


def parse_route_get_device(lines: List[str]) -> str:
    for line in lines:
        if match := re.search(r"\bdev\s+(\S+)", line):
            return match.group(1)
    return ""


class LinuxTuner(BaseTuner):
    """Linux-specific tuner implementation."""

    operating_system = OperatingSystem.LINUX
    optional_tools = LINUX_OPTIONAL_TOOLS

    def __init__(self, debug: bool = False, use_sudo: bool = False):
        """Initialize the Linux tuner."""
        super().__init__(debug, use_sudo)
        if self.debug:
            TunerLogger.debug(f"{PLATFORM_LINUX} tuner initialized")

    def default_route_interface(self) -> str:
        """Ask the kernel which device a packet to a public address would leave by."""
        if not which("ip"):
            return ""
        err, out = self.run_process(["ip", "route", "get", ROUTE_PROBE_ADDRESS], stderr=False)
        if err == 0 and (dev := parse_route_get_device(out)):
            return dev
        err, out = self.run_process(["ip", "-o", "-4", "route", "show", "to", "default"], stderr=False)
        if err == 0:
            for line in out:
                fields = line.split()
                if "dev" in fields and fields.index("dev") + 1 < len(fields):
                    return fields[fields.index("dev") + 1]
        return ""

    def get_adaptive_coalescing(self, iface: str) -> Tuple[bool, bool]:
        self.require_tool("ethtool")
        return parse_adaptive_coalescing(self.check_process(["ethtool", "-c", iface]))

    def set_adaptive_coalescing(self, iface: str) -> None:
        self.require_tool("ethtool")
        command = ["ethtool", "-C", iface, "adaptive-rx", "on", "adaptive-tx", "on"]
        err, out = self.run_process(command, privileged=True)
        if err not in (0, ETHTOOL_UNMODIFIED):
            raise CommandFailedError(command, err, out)

    def get_ring_parameters(self, iface: str) -> RingParameters:
        self.require_tool("ethtool")
        return parse_ring_parameters(self.check_process(["ethtool", "-g", iface]))

    def set_ring_sizes(self, iface: str, rx: int, tx: int) -> None:
        self.require_tool("ethtool")
        command = ["ethtool", "-G", iface, "rx", str(rx), "tx", str(tx)]
        err, out = self.run_process(command, privileged=True)
        if err not in (0, ETHTOOL_UNMODIFIED):
            raise CommandFailedError(command, err, out)

    def get_wireless_power_save(self, iface: str) -> str:
        self.require_tool("iw")
        for line in self.check_process(["iw", "dev", iface, "get", "power_save"]):
            # "Power save: off"
            if "power save" in line.lower():
                return line.split(":", 1)[-1].strip()
        return ""

    def set_wireless_power_save(self, iface: str, enabled: bool) -> None:
        self.require_tool("iw")
        self.check_process(["iw", "dev", iface, "set", "power_save", "on" if enabled else "off"], privileged=True)

    def stop_service(self, name: str) -> bool:
        if which("systemctl"):
            err, _ = self.run_process(["systemctl", "stop", name], privileged=True)
        elif which("service"):
            err, _ = self.run_process(["service", name, "stop"], privileged=True)
        else:
            return False
        return err == 0

    def list_interface_irqs(self, iface: str) -> List[int]:
        try:
            with open(PROC_INTERRUPTS, "r") as f:
                return parse_interface_irqs(f.readlines(), iface)
        except FileNotFoundError as e:
            raise CapabilityUnavailableError("IRQ enumeration", f"{PROC_INTERRUPTS} not found") from e

    def set_irq_affinity(self, irq: int, mask: str) -> None:
        self.write_kernel_file(PROC_IRQ_AFFINITY.format(irq=irq), mask)

    def get_irq_affinity(self, irq: int) -> Optional[str]:
        return self.read_kernel_file(PROC_IRQ_AFFINITY.format(irq=irq))

    def load_kernel_module(self, name: str) -> bool:
        if not which("modprobe"):
            return False
        err, _ = self.run_process(["modprobe", name], privileged=True)
        return err == 0

    def firewall_rule_exists(self, table: str, chain: str, rule: List[str]) -> bool:
        self.require_tool("iptables")
        command = ["iptables", "-t", table, "-C", chain] + list(rule)
        err, out = self.run_process(command, privileged=True)
        if err == 0:
            return True
        elif err == IPTABLES_RULE_MISSING:
            return False
        raise CommandFailedError(command, err, out)

    def insert_firewall_rule(self, table: str, chain: str, rule: List[str]) -> None:
        self.require_tool("iptables")
        self.check_process(["iptables", "-t", table, "-I", chain] + list(rule), privileged=True)

    def append_firewall_rule(self, table: str, chain: str, rule: List[str]) -> None:
        self.require_tool("iptables")
        self.check_process(["iptables", "-t", table, "-A", chain] + list(rule), privileged=True)

    def flush_firewall_table(self, table: str) -> None:
        self.require_tool("iptables")
        self.check_process(["iptables", "-t", table, "-F"], privileged=True)

    def list_firewall_rules(self, table: str, chain: str) -> List[str]:
        self.require_tool("iptables")
        out = self.check_process(["iptables", "-t", table, "-S", chain], privileged=True, stderr=False)
        return [line.strip() for line in out if line.startswith("-A ")]

    def set_link_mtu(self, iface: str, mtu: int) -> None:
        self.require_tool("ip")
        self.check_process(["ip", "link", "set", "dev", iface, "mtu", str(mtu)], privileged=True)
