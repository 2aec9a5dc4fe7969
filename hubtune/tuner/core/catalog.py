#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""The fixed, ordered tuning catalogs for Linux and macOS."""

from functools import partial
from typing import Optional, Tuple

from hubtune.tuner.configs.constants.enums import OperatingSystem
from hubtune.tuner.configs.constants.step_ids import (
    STEP_ADAPTIVE_COALESCING,
    STEP_CONGESTION_CONTROL,
    STEP_CONNTRACK_BYPASS,
    STEP_DEAD_CONNECTION_DETECTION,
    STEP_IRQ_AFFINITY,
    STEP_KERNEL_BUFFERS,
    STEP_LATENCY_HOLD,
    STEP_NAPI_BUDGET,
    STEP_RING_EXPANSION,
    STEP_SOCKET_BUFFER_CEILING,
    STEP_TRANSPARENT_HUGEPAGES,
    STEP_UDP_BUFFERS,
    STEP_WIRELESS_POWER_SAVE,
)
from hubtune.tuner.configs.tuning_settings import TuningSettings
from hubtune.tuner.core.step import DARWIN_ONLY, LINUX_ONLY, TuningStep
from hubtune.tuner.platforms.utils import linux_tweaks, macos_tweaks

Catalog = Tuple[TuningStep, ...]


def _sysctl_step(step_id, platforms, description, settings, apply, verify) -> TuningStep:
    return TuningStep(
        id=step_id,
        platforms=platforms,
        description=description,
        fatal_on_failure=False,
        apply=partial(apply, settings=settings),
        verify=partial(verify, settings=settings),
        expected=str(settings[0].value),
    )


def build_linux_catalog(settings: Optional[TuningSettings] = None) -> Catalog:
    s = settings or TuningSettings()
    return (
        TuningStep(
            id=STEP_ADAPTIVE_COALESCING,
            platforms=LINUX_ONLY,
            description="Enable adaptive RX/TX interrupt coalescing",
            fatal_on_failure=True,
            apply=linux_tweaks.apply_adaptive_coalescing,
            verify=linux_tweaks.verify_adaptive_coalescing,
            expected="rx=on tx=on",
        ),
        TuningStep(
            id=STEP_RING_EXPANSION,
            platforms=LINUX_ONLY,
            description="Expand NIC descriptor rings",
            fatal_on_failure=False,
            apply=partial(linux_tweaks.apply_ring_expansion, ring_size=s.ring_size),
            verify=linux_tweaks.verify_ring_expansion,
        ),
        TuningStep(
            id=STEP_WIRELESS_POWER_SAVE,
            platforms=LINUX_ONLY,
            description="Disable wireless power saving",
            fatal_on_failure=False,
            apply=linux_tweaks.apply_wireless_power_save,
            verify=linux_tweaks.verify_wireless_power_save,
            expected="off",
        ),
        _sysctl_step(
            STEP_NAPI_BUDGET,
            LINUX_ONLY,
            "Raise the NAPI polling budget",
            linux_tweaks.napi_budget_settings(s.netdev_budget, s.netdev_budget_usecs),
            linux_tweaks.apply_sysctl_step,
            linux_tweaks.verify_sysctl_step,
        ),
        TuningStep(
            id=STEP_IRQ_AFFINITY,
            platforms=LINUX_ONLY,
            description="Pin NIC interrupts to one core",
            fatal_on_failure=False,
            apply=partial(linux_tweaks.apply_irq_affinity, irq_core=s.irq_core),
            verify=linux_tweaks.verify_irq_affinity,
        ),
        _sysctl_step(
            STEP_KERNEL_BUFFERS,
            LINUX_ONLY,
            "Grow kernel backlog and socket buffers",
            linux_tweaks.kernel_buffer_settings(s.netdev_max_backlog, s.socket_buffer_max, s.busy_poll_usecs),
            linux_tweaks.apply_sysctl_step,
            linux_tweaks.verify_sysctl_step,
        ),
        TuningStep(
            id=STEP_CONNTRACK_BYPASS,
            platforms=LINUX_ONLY,
            description="Exempt UDP from connection tracking",
            fatal_on_failure=False,
            apply=linux_tweaks.apply_conntrack_bypass,
        ),
        TuningStep(
            id=STEP_TRANSPARENT_HUGEPAGES,
            platforms=LINUX_ONLY,
            description="Force transparent hugepages",
            fatal_on_failure=False,
            apply=linux_tweaks.apply_transparent_hugepages,
            verify=linux_tweaks.verify_transparent_hugepages,
            expected=linux_tweaks.THP_MODE_ALWAYS,
        ),
        TuningStep(
            id=STEP_LATENCY_HOLD,
            platforms=LINUX_ONLY,
            description="Hold the CPU DMA latency at zero",
            fatal_on_failure=False,
            apply=partial(linux_tweaks.apply_latency_hold, latency_marker=s.latency_marker),
        ),
        TuningStep(
            id=STEP_CONGESTION_CONTROL,
            platforms=LINUX_ONLY,
            description="Switch TCP congestion control",
            fatal_on_failure=False,
            apply=partial(
                linux_tweaks.apply_congestion_control,
                congestion_control=s.congestion_control,
                queue_discipline=s.queue_discipline,
            ),
            verify=linux_tweaks.verify_congestion_control,
            expected=s.congestion_control,
            observe_on_failure=True,
        ),
    )


def build_darwin_catalog(settings: Optional[TuningSettings] = None) -> Catalog:
    s = settings or TuningSettings()
    return (
        _sysctl_step(
            STEP_SOCKET_BUFFER_CEILING,
            DARWIN_ONLY,
            "Raise the socket buffer ceiling",
            macos_tweaks.socket_buffer_settings(s.darwin_maxsockbuf),
            macos_tweaks.apply_bsd_sysctls,
            macos_tweaks.verify_bsd_sysctls,
        ),
        _sysctl_step(
            STEP_UDP_BUFFERS,
            DARWIN_ONLY,
            "Grow UDP receive space and datagram size",
            macos_tweaks.udp_buffer_settings(s.darwin_udp_recvspace, s.darwin_udp_maxdgram),
            macos_tweaks.apply_bsd_sysctls,
            macos_tweaks.verify_bsd_sysctls,
        ),
        _sysctl_step(
            STEP_DEAD_CONNECTION_DETECTION,
            DARWIN_ONLY,
            "Shorten the TCP connect timeout",
            macos_tweaks.dead_connection_settings(s.darwin_tcp_keepinit),
            macos_tweaks.apply_bsd_sysctls,
            macos_tweaks.verify_bsd_sysctls,
        ),
    )


def catalog_for(operating_system: OperatingSystem, settings: Optional[TuningSettings] = None) -> Catalog:
    if operating_system == OperatingSystem.LINUX:
        return build_linux_catalog(settings)
    elif operating_system == OperatingSystem.DARWIN:
        return build_darwin_catalog(settings)
    return ()
