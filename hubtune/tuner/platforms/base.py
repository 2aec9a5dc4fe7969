#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Base tuner class: the capability interface every tuning step talks to.

Tuning steps never start processes or touch /proc and /sys themselves; they call
the methods here, grouped by mutation category. Platform subclasses implement
the categories their OS supports. Anything left unimplemented raises
CapabilityUnavailableError so a step can report it instead of crashing.
"""

import abc
import glob
import os
import subprocess
import tempfile
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

import psutil

from hubtune.hubtune_common import interface_exists, is_root
from hubtune.hubtune_utils import file_first_line, flatten, get_iterable, which
from hubtune.tuner.configs.constants.enums import OperatingSystem
from hubtune.tuner.utils.exceptions import (
    CapabilityUnavailableError,
    CommandFailedError,
    InsufficientPrivilegeError,
)
from hubtune.tuner.utils.logger_utils import TunerLogger

# sudo -n prints one of these when it would have needed to prompt
SUDO_PASSWORD_REQUIRED_MARKERS = ("a password is required", "a terminal is required")


@dataclass(frozen=True)
class RingParameters:
    rx_max: int
    tx_max: int
    rx: int
    tx: int


class BaseTuner(abc.ABC):
    """Abstract base class for platform-specific system tuners."""

    operating_system: OperatingSystem = OperatingSystem.UNSUPPORTED
    optional_tools: Tuple[str, ...] = ()

    def __init__(self, debug: bool = False, use_sudo: bool = False):
        """Initialize the base tuner.

        Args:
            debug: Enable debug output
            use_sudo: Escalate privileged commands with non-interactive sudo when not root
        """
        self.debug = debug
        self.use_sudo = use_sudo

    ###############################################################################################
    # process execution

    def is_privileged(self) -> bool:
        return is_root()

    def require_privilege(self, action: str):
        if not self.is_privileged():
            raise InsufficientPrivilegeError(action)

    def run_process(
        self,
        command: List[str],
        privileged: bool = False,
        stdin: str = None,
        retry: int = 0,
        retry_sleep_sec: int = 5,
        stderr: bool = True,
    ) -> Tuple[int, List[str]]:
        """Run a system process with optional privilege escalation."""
        flat_command = list(flatten(get_iterable(command)))
        escalated = False
        if privileged and not self.is_privileged():
            if self.use_sudo and which("sudo"):
                flat_command = ["sudo", "-n"] + flat_command
                escalated = True
            else:
                raise InsufficientPrivilegeError(f"run {' '.join(flat_command)}")

        retcode = -1
        output = []

        for i in range(retry + 1):
            output = []
            try:
                process = subprocess.run(
                    flat_command,
                    input=stdin if stdin else None,
                    capture_output=True,
                    check=False,
                    text=True,
                    errors="ignore",
                )
                retcode = process.returncode
                if process.stdout:
                    output.extend(process.stdout.splitlines())
                if stderr and process.stderr:
                    output.extend(process.stderr.splitlines())
                if escalated and retcode != 0 and process.stderr:
                    if any(m in process.stderr.lower() for m in SUDO_PASSWORD_REQUIRED_MARKERS):
                        raise InsufficientPrivilegeError(f"run {' '.join(flat_command[2:])}")
                if retcode == 0:
                    break
            except FileNotFoundError:
                output = [f"Command {' '.join(flat_command)} not found or unable to execute"]
                retcode = 127
                break

            if i < retry:
                TunerLogger.warning(
                    f"Command failed (attempt {i+1}/{retry+1}). Retrying in {retry_sleep_sec} seconds..."
                )
                time.sleep(retry_sleep_sec)

        if self.debug:
            TunerLogger.debug(f"Command {' '.join(flat_command)} returned {retcode}: {output}")

        return retcode, output

    def check_process(self, command: List[str], privileged: bool = False, **kwargs) -> List[str]:
        """Run a process, raising CommandFailedError when it exits non-zero."""
        err, out = self.run_process(command, privileged=privileged, **kwargs)
        if err != 0:
            raise CommandFailedError(list(flatten(get_iterable(command))), err, out)
        return out

    def has_tool(self, name: str) -> bool:
        return which(name)

    def require_tool(self, name: str):
        if not self.has_tool(name):
            raise CapabilityUnavailableError(name, f"required tool '{name}' is not installed")

    ###############################################################################################
    # kernel parameters

    def read_sysctl(self, key: str) -> str:
        out = self.check_process(["sysctl", "-n", key], stderr=False)
        return out[0].strip() if out else ""

    def write_sysctl(self, key: str, value) -> None:
        self.check_process(["sysctl", "-w", f"{key}={value}"], privileged=True)

    def read_kernel_file(self, path: str) -> Optional[str]:
        return file_first_line(path)

    def write_kernel_file(self, path: str, value: str) -> None:
        """Write a value into a procfs/sysfs knob."""
        self.require_privilege(f"write {path}")
        if not os.path.exists(path):
            raise CapabilityUnavailableError(path, f"{path} does not exist")
        try:
            with open(path, "w") as f:
                f.write(f"{value}\n")
        except PermissionError as e:
            raise InsufficientPrivilegeError(f"write {path}") from e

    def kernel_file_exists(self, path: str) -> bool:
        return os.path.exists(path)

    def list_kernel_files(self, pattern: str) -> List[str]:
        return sorted(glob.glob(pattern))

    ###############################################################################################
    # configuration files

    def directory_exists(self, path: str) -> bool:
        return os.path.isdir(path)

    def read_config_file(self, path: str) -> Optional[List[str]]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return [ln.rstrip("\n") for ln in f]
        except FileNotFoundError:
            return None

    def write_config_file(self, path: str, lines: List[str]) -> None:
        """Replace a config file's contents, leaving it world-readable."""
        with tempfile.NamedTemporaryFile(mode="w", delete=False) as tmp:
            tmp.writelines(f"{s}\n" for s in lines)
            tmp_path = tmp.name
        try:
            self.check_process(["cp", tmp_path, path], privileged=True)
            self.check_process(["chmod", "644", path], privileged=True)
        finally:
            try:
                os.unlink(tmp_path)
            except OSError as e:
                TunerLogger.warning(f"Failed to cleanup temp file {tmp_path}: {e}")

    ###############################################################################################
    # processes and interfaces

    def spawn_detached(self, command: List[str]) -> int:
        """Start a process in its own session that outlives this one; returns its PID."""
        self.require_privilege(f"start {' '.join(command)}")
        process = subprocess.Popen(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
        return process.pid

    def pid_alive(self, pid: int) -> bool:
        return psutil.pid_exists(pid)

    def pid_survives(self, pid: int, seconds: float) -> bool:
        """True if the process is still running after waiting up to the given time for it to exit."""
        try:
            psutil.Process(pid).wait(timeout=seconds)
        except psutil.TimeoutExpired:
            return True
        except psutil.NoSuchProcess:
            return False
        return False

    def interface_exists(self, name: str) -> bool:
        return interface_exists(name)

    @abc.abstractmethod
    def default_route_interface(self) -> str:
        """Return the interface carrying traffic to public addresses, or '' if unknown."""
        raise NotImplementedError

    ###############################################################################################
    # NIC hardware (ethtool-style); unsupported unless a platform overrides

    def get_adaptive_coalescing(self, iface: str) -> Tuple[bool, bool]:
        raise CapabilityUnavailableError("adaptive interrupt coalescing")

    def set_adaptive_coalescing(self, iface: str) -> None:
        raise CapabilityUnavailableError("adaptive interrupt coalescing")

    def get_ring_parameters(self, iface: str) -> RingParameters:
        raise CapabilityUnavailableError("descriptor ring sizing")

    def set_ring_sizes(self, iface: str, rx: int, tx: int) -> None:
        raise CapabilityUnavailableError("descriptor ring sizing")

    ###############################################################################################
    # radio power management

    def get_wireless_power_save(self, iface: str) -> str:
        raise CapabilityUnavailableError("wireless power management")

    def set_wireless_power_save(self, iface: str, enabled: bool) -> None:
        raise CapabilityUnavailableError("wireless power management")

    ###############################################################################################
    # services, IRQs, modules

    def stop_service(self, name: str) -> bool:
        raise CapabilityUnavailableError("service management")

    def list_interface_irqs(self, iface: str) -> List[int]:
        raise CapabilityUnavailableError("IRQ enumeration")

    def set_irq_affinity(self, irq: int, mask: str) -> None:
        raise CapabilityUnavailableError("IRQ affinity")

    def get_irq_affinity(self, irq: int) -> Optional[str]:
        raise CapabilityUnavailableError("IRQ affinity")

    def load_kernel_module(self, name: str) -> bool:
        raise CapabilityUnavailableError("kernel modules")

    ###############################################################################################
    # packet filter

    def firewall_rule_exists(self, table: str, chain: str, rule: List[str]) -> bool:
        raise CapabilityUnavailableError("packet filter")

    def insert_firewall_rule(self, table: str, chain: str, rule: List[str]) -> None:
        raise CapabilityUnavailableError("packet filter")

    def append_firewall_rule(self, table: str, chain: str, rule: List[str]) -> None:
        raise CapabilityUnavailableError("packet filter")

    def flush_firewall_table(self, table: str) -> None:
        raise CapabilityUnavailableError("packet filter")

    def list_firewall_rules(self, table: str, chain: str) -> List[str]:
        raise CapabilityUnavailableError("packet filter")

    ###############################################################################################
    # links and routes

    def set_link_mtu(self, iface: str, mtu: int) -> None:
        raise CapabilityUnavailableError("link MTU")

    def default_gateway(self) -> str:
        raise CapabilityUnavailableError("default gateway lookup")

    def add_host_route(self, host: str, gateway: str) -> None:
        raise CapabilityUnavailableError("route management")

    def add_interface_route(self, network: str, iface: str) -> None:
        raise CapabilityUnavailableError("route management")

    def delete_route(self, destination: str) -> bool:
        raise CapabilityUnavailableError("route management")
