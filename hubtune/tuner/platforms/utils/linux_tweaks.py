#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Apply and verify bodies for the Linux tuning catalog.

Each apply function takes (tuner, profile, **settings) and returns
(StepOutcome, detail). Anything unexpected is raised and turned into a
FAILED result by the executor.
"""

import os
import re
from typing import Optional, Tuple

from hubtune.hubtune_constants import (
    CPU_DMA_LATENCY_DEVICE,
    IRQBALANCE_SERVICE,
    NETWORK_MANAGER_CONF_DIR,
    NETWORK_MANAGER_POWERSAVE_CONTENT,
    NETWORK_MANAGER_POWERSAVE_FILE,
    THP_DEFRAG,
    THP_ENABLED,
)
from hubtune.hubtune_utils import cpu_mask_for_core
from hubtune.tuner.configs.constants.enums import StepOutcome
from hubtune.tuner.core.host_profile import HostProfile
from hubtune.tuner.core.latency_hold import get_latency_hold
from hubtune.tuner.platforms.base import BaseTuner
from hubtune.tuner.utils.exceptions import (
    CapabilityUnavailableError,
    CommandFailedError,
    HubTuneError,
    InsufficientPrivilegeError,
)
from hubtune.tuner.utils.logger_utils import TunerLogger

from .sysctl_tweaks import SysctlSetting, apply_sysctl_settings, read_first_setting

THP_MODE_ALWAYS = "always"
CONNTRACK_BYPASS_RULE = ["-p", "udp", "-j", "NOTRACK"]
CONNTRACK_BYPASS_CHAINS = ("OUTPUT", "PREROUTING")


def _require_interface(profile: HostProfile) -> str:
    if not profile.primary_interface:
        raise CapabilityUnavailableError("primary interface", "no interface owns the default route")
    return profile.primary_interface


def parse_thp_mode(line: Optional[str]) -> Optional[str]:
    """'always [madvise] never' -> 'madvise'"""
    if not line:
        return None
    if match := re.search(r"\[(\w+)\]", line):
        return match.group(1)
    return line.strip()


###################################################################################################
# NIC hardware


def apply_adaptive_coalescing(tuner: BaseTuner, profile: HostProfile) -> Tuple[StepOutcome, str]:
    iface = _require_interface(profile)
    try:
        rx, tx = tuner.get_adaptive_coalescing(iface)
        if rx and tx:
            return StepOutcome.APPLIED, f"adaptive RX/TX already enabled on {iface}"
    except CommandFailedError as e:
        # some drivers only implement the set half
        TunerLogger.debug(f"Could not query coalescing on {iface}: {e}")
    tuner.set_adaptive_coalescing(iface)
    return StepOutcome.APPLIED, f"adaptive RX/TX enabled on {iface}"


def verify_adaptive_coalescing(tuner: BaseTuner, profile: HostProfile) -> str:
    rx, tx = tuner.get_adaptive_coalescing(profile.primary_interface)
    return f"rx={'on' if rx else 'off'} tx={'on' if tx else 'off'}"


def apply_ring_expansion(tuner: BaseTuner, profile: HostProfile, ring_size: int) -> Tuple[StepOutcome, str]:
    iface = _require_interface(profile)
    ring = tuner.get_ring_parameters(iface)
    rx_target = min(ring_size, ring.rx_max)
    tx_target = min(ring_size, ring.tx_max)
    if (ring.rx, ring.tx) == (rx_target, tx_target):
        return StepOutcome.SKIPPED, f"already at maximum (rx={ring.rx}, tx={ring.tx})"
    tuner.set_ring_sizes(iface, rx_target, tx_target)
    return StepOutcome.APPLIED, f"{iface} rings rx {ring.rx}->{rx_target}, tx {ring.tx}->{tx_target}"


def verify_ring_expansion(tuner: BaseTuner, profile: HostProfile) -> str:
    ring = tuner.get_ring_parameters(profile.primary_interface)
    return f"rx={ring.rx} tx={ring.tx}"


###################################################################################################
# radio power management


def apply_wireless_power_save(tuner: BaseTuner, profile: HostProfile) -> Tuple[StepOutcome, str]:
    actions = []
    radio_error = None
    if profile.is_wireless:
        try:
            tuner.set_wireless_power_save(profile.primary_interface, False)
            actions.append(f"power save off on {profile.primary_interface}")
        except InsufficientPrivilegeError:
            raise
        except HubTuneError as e:
            # the override below still has to be written
            TunerLogger.warning(f"Could not disable power save on {profile.primary_interface}: {e}")
            radio_error = e

    if tuner.directory_exists(NETWORK_MANAGER_CONF_DIR):
        path = os.path.join(NETWORK_MANAGER_CONF_DIR, NETWORK_MANAGER_POWERSAVE_FILE)
        if tuner.read_config_file(path) == NETWORK_MANAGER_POWERSAVE_CONTENT:
            actions.append(f"{path} already in place")
        else:
            tuner.write_config_file(path, NETWORK_MANAGER_POWERSAVE_CONTENT)
            actions.append(f"wrote {path}")

    if radio_error is not None:
        return StepOutcome.FAILED, "; ".join([str(radio_error)] + actions)
    if not actions:
        return StepOutcome.SKIPPED, "no wireless interface and no NetworkManager"
    return StepOutcome.APPLIED, "; ".join(actions)


def verify_wireless_power_save(tuner: BaseTuner, profile: HostProfile) -> Optional[str]:
    if not profile.is_wireless:
        return None
    return tuner.get_wireless_power_save(profile.primary_interface)


###################################################################################################
# kernel packet processing


def napi_budget_settings(netdev_budget: int, netdev_budget_usecs: int):
    return (
        SysctlSetting("net.core.netdev_budget", netdev_budget),
        SysctlSetting("net.core.netdev_budget_usecs", netdev_budget_usecs, optional=True),
    )


def kernel_buffer_settings(netdev_max_backlog: int, socket_buffer_max: int, busy_poll_usecs: int):
    return (
        SysctlSetting("net.core.netdev_max_backlog", netdev_max_backlog),
        SysctlSetting("net.core.rmem_max", socket_buffer_max),
        SysctlSetting("net.core.wmem_max", socket_buffer_max),
        SysctlSetting("net.core.busy_read", busy_poll_usecs, optional=True),
        SysctlSetting("net.core.busy_poll", busy_poll_usecs, optional=True),
    )


def apply_sysctl_step(tuner: BaseTuner, profile: HostProfile, settings) -> Tuple[StepOutcome, str]:
    return apply_sysctl_settings(tuner, settings)


def verify_sysctl_step(tuner: BaseTuner, profile: HostProfile, settings) -> str:
    return read_first_setting(tuner, settings)


def apply_irq_affinity(tuner: BaseTuner, profile: HostProfile, irq_core: int) -> Tuple[StepOutcome, str]:
    iface = _require_interface(profile)
    if irq_core >= profile.cpu_count:
        return StepOutcome.SKIPPED, f"core {irq_core} does not exist ({profile.cpu_count} CPUs)"

    if not tuner.stop_service(IRQBALANCE_SERVICE):
        TunerLogger.debug(f"{IRQBALANCE_SERVICE} was not stopped (not installed or not running)")

    irqs = tuner.list_interface_irqs(iface)
    if not irqs:
        return StepOutcome.SKIPPED, f"no IRQs found for {iface}"

    mask = cpu_mask_for_core(irq_core)
    pinned = []
    rejected = []
    for irq in irqs:
        try:
            tuner.set_irq_affinity(irq, mask)
            pinned.append(irq)
        except InsufficientPrivilegeError:
            raise
        except (OSError, HubTuneError) as e:
            # managed IRQs refuse affinity changes
            TunerLogger.warning(f"IRQ {irq} affinity unchanged: {e}")
            rejected.append(irq)

    if not pinned:
        raise CapabilityUnavailableError("IRQ affinity", f"kernel refused affinity for every IRQ of {iface}")
    detail = f"IRQs {', '.join(map(str, pinned))} pinned to core {irq_core}"
    if rejected:
        detail += f" ({len(rejected)} refused)"
    return StepOutcome.APPLIED, detail


def verify_irq_affinity(tuner: BaseTuner, profile: HostProfile) -> Optional[str]:
    irqs = tuner.list_interface_irqs(profile.primary_interface)
    return tuner.get_irq_affinity(irqs[0]) if irqs else None


def apply_conntrack_bypass(tuner: BaseTuner, profile: HostProfile) -> Tuple[StepOutcome, str]:
    if not profile.has_tool("iptables"):
        return StepOutcome.SKIPPED, "iptables is not installed"
    inserted = []
    for chain in CONNTRACK_BYPASS_CHAINS:
        if not tuner.firewall_rule_exists("raw", chain, CONNTRACK_BYPASS_RULE):
            tuner.insert_firewall_rule("raw", chain, CONNTRACK_BYPASS_RULE)
            inserted.append(chain)
    if not inserted:
        return StepOutcome.APPLIED, "UDP NOTRACK rules already present"
    return StepOutcome.APPLIED, f"UDP NOTRACK inserted in raw {', '.join(inserted)}"


###################################################################################################
# memory and latency


def apply_transparent_hugepages(tuner: BaseTuner, profile: HostProfile) -> Tuple[StepOutcome, str]:
    knobs = [path for path in (THP_ENABLED, THP_DEFRAG) if tuner.kernel_file_exists(path)]
    if not knobs:
        return StepOutcome.SKIPPED, "kernel has no transparent hugepage support"
    changed = []
    for path in knobs:
        if parse_thp_mode(tuner.read_kernel_file(path)) != THP_MODE_ALWAYS:
            tuner.write_kernel_file(path, THP_MODE_ALWAYS)
            changed.append(os.path.basename(path))
    if not changed:
        return StepOutcome.APPLIED, f"already '{THP_MODE_ALWAYS}'"
    return StepOutcome.APPLIED, f"{', '.join(changed)} set to '{THP_MODE_ALWAYS}'"


def verify_transparent_hugepages(tuner: BaseTuner, profile: HostProfile) -> Optional[str]:
    return parse_thp_mode(tuner.read_kernel_file(THP_ENABLED))


def apply_latency_hold(tuner: BaseTuner, profile: HostProfile, latency_marker: str) -> Tuple[StepOutcome, str]:
    return get_latency_hold(latency_marker, CPU_DMA_LATENCY_DEVICE).acquire(tuner)


def apply_congestion_control(
    tuner: BaseTuner,
    profile: HostProfile,
    congestion_control: str,
    queue_discipline: str,
) -> Tuple[StepOutcome, str]:
    module = f"tcp_{congestion_control}"
    if not tuner.load_kernel_module(module):
        TunerLogger.debug(f"{module} not loaded (may be built in)")
    tuner.write_sysctl("net.core.default_qdisc", queue_discipline)
    try:
        tuner.write_sysctl("net.ipv4.tcp_congestion_control", congestion_control)
    except CommandFailedError as e:
        active = verify_congestion_control(tuner, profile)
        raise CapabilityUnavailableError(
            f"{congestion_control} congestion control",
            f"kernel rejected {congestion_control} (active: {active or 'unknown'})",
        ) from e
    return StepOutcome.APPLIED, f"qdisc {queue_discipline}, congestion control {congestion_control}"


def verify_congestion_control(tuner: BaseTuner, profile: HostProfile) -> Optional[str]:
    try:
        return tuner.read_sysctl("net.ipv4.tcp_congestion_control")
    except CommandFailedError:
        return None
