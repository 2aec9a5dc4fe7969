#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""macOS tuning: BSD sysctl knobs for socket buffers and connection timeouts."""

from hubtune.tuner.core.host_profile import HostProfile
from hubtune.tuner.platforms.base import BaseTuner

from .sysctl_tweaks import SysctlSetting, apply_sysctl_settings, read_first_setting


def socket_buffer_settings(maxsockbuf: int):
    return (SysctlSetting("kern.ipc.maxsockbuf", maxsockbuf),)


def udp_buffer_settings(recvspace: int, maxdgram: int):
    return (
        SysctlSetting("net.inet.udp.recvspace", recvspace),
        SysctlSetting("net.inet.udp.maxdgram", maxdgram),
    )


def dead_connection_settings(keepinit: int):
    return (SysctlSetting("net.inet.tcp.keepinit", keepinit),)


def apply_bsd_sysctls(tuner: BaseTuner, profile: HostProfile, settings):
    return apply_sysctl_settings(tuner, settings)


def verify_bsd_sysctls(tuner: BaseTuner, profile: HostProfile, settings) -> str:
    return read_first_setting(tuner, settings)
