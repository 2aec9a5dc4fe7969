#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Identifiers for every step in the fixed catalogs."""

# Linux performance catalog, in execution order
STEP_ADAPTIVE_COALESCING = "adaptive-coalescing"
STEP_RING_EXPANSION = "ring-expansion"
STEP_WIRELESS_POWER_SAVE = "wireless-power-save"
STEP_NAPI_BUDGET = "napi-budget"
STEP_IRQ_AFFINITY = "irq-affinity"
STEP_KERNEL_BUFFERS = "kernel-buffers"
STEP_CONNTRACK_BYPASS = "conntrack-bypass"
STEP_TRANSPARENT_HUGEPAGES = "transparent-hugepages"
STEP_LATENCY_HOLD = "latency-hold"
STEP_CONGESTION_CONTROL = "congestion-control"

# macOS performance catalog
STEP_SOCKET_BUFFER_CEILING = "socket-buffer-ceiling"
STEP_UDP_BUFFERS = "udp-buffers"
STEP_DEAD_CONNECTION_DETECTION = "dead-connection-detection"

# gateway mode switch
STEP_IP_FORWARDING = "ip-forwarding"
STEP_RP_FILTER_RELAX = "rp-filter-relax"
STEP_WAN_INTERFACE = "wan-interface"
STEP_NAT_MASQUERADE = "nat-masquerade"
STEP_FORWARD_ACCEPT = "forward-accept"
STEP_MTU_CLAMP = "mtu-clamp"

# node route switch
STEP_DEFAULT_GATEWAY = "default-gateway"
STEP_HUB_HOST_ROUTE = "hub-host-route"
STEP_SPLIT_DEFAULT_ROUTES = "split-default-routes"
STEP_REMOVE_SPLIT_ROUTES = "remove-split-routes"

# reasons used in SKIPPED results
SKIP_PLATFORM_MISMATCH = "platform-mismatch"
SKIP_DRY_RUN = "dry-run"
