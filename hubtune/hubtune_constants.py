#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

###################################################################################################
HUBTUNE_VERSION = "0.4.1"

###################################################################################################
PLATFORM_MAC = "Darwin"
PLATFORM_LINUX = "Linux"

PLATFORM_NAME_LINUX = "linux"
PLATFORM_NAME_MAC = "macos"
PLATFORM_NAME_WINDOWS = "windows"
PLATFORM_NAME_UNKNOWN = "unknown"

###################################################################################################
# external tools probed for on each platform
LINUX_OPTIONAL_TOOLS = (
    "ethtool",
    "ip",
    "iptables",
    "iw",
    "modprobe",
    "service",
    "sysctl",
    "systemctl",
)
MAC_OPTIONAL_TOOLS = (
    "route",
    "sudo",
    "sysctl",
)

# interface name prefix used by wireless NICs (wlan0, wlp3s0, ...)
WIRELESS_INTERFACE_PREFIX = "wl"
WIRELESS_TOOL = "iw"

# address used to ask the kernel which device carries public traffic
ROUTE_PROBE_ADDRESS = "8.8.8.8"

###################################################################################################
# files and devices touched by the tuning catalog
NETWORK_MANAGER_CONF_DIR = "/etc/NetworkManager/conf.d"
NETWORK_MANAGER_POWERSAVE_FILE = "default-wifi-powersave-on.conf"
NETWORK_MANAGER_POWERSAVE_CONTENT = ["[connection]", "wifi.powersave=2"]

PROC_INTERRUPTS = "/proc/interrupts"
PROC_IRQ_AFFINITY = "/proc/irq/{irq}/smp_affinity"
PROC_RP_FILTER_GLOB = "/proc/sys/net/ipv4/conf/*/rp_filter"
THP_ENABLED = "/sys/kernel/mm/transparent_hugepage/enabled"
THP_DEFRAG = "/sys/kernel/mm/transparent_hugepage/defrag"
CPU_DMA_LATENCY_DEVICE = "/dev/cpu_dma_latency"
LATENCY_MARKER_DEFAULT = "/tmp/latency_lock"
# how long a freshly spawned latency holder must stay up to count as started
LATENCY_HOLDER_STARTUP_SEC = 0.5

IRQBALANCE_SERVICE = "irqbalance"

###################################################################################################
# gateway mode defaults
GATEWAY_INTERNAL_INTERFACE_DEFAULT = "m13hub0"
GATEWAY_INTERNAL_SUBNET_DEFAULT = "10.0.0.0/24"
GATEWAY_MTU_DEFAULT = 1280
GATEWAY_MTU_MIN = 576
GATEWAY_MTU_MAX = 9000

# node mode: the two halves of the IPv4 space routed through the tunnel
NODE_SPLIT_DEFAULT_ROUTES = ("0.0.0.0/1", "128.0.0.0/1")

###################################################################################################
# process exit codes
EXIT_SUCCESS = 0
EXIT_ABORTED = 1
EXIT_UNSUPPORTED = 2
EXIT_PERMISSION = 77
EXIT_CANCELLED = 130
