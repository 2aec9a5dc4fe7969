#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Unit tests for parsing ethtool, /proc/interrupts and route output."""

import os
import sys
import unittest

# Add the project root directory to the Python path
sys.path.insert(
    0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "..", ".."))
)

from hubtune.hubtune_utils import cpu_mask_for_core
from hubtune.tuner.platforms.linux import (
    parse_adaptive_coalescing,
    parse_interface_irqs,
    parse_ring_parameters,
    parse_route_get_device,
)
from hubtune.tuner.platforms.macos import parse_route_get
from hubtune.tuner.utils.exceptions import CapabilityUnavailableError

ETHTOOL_G = """Ring parameters for eth0:
Pre-set maximums:
RX:		4096
RX Mini:	n/a
RX Jumbo:	n/a
TX:		2048
Current hardware settings:
RX:		512
RX Mini:	n/a
RX Jumbo:	n/a
TX:		512
""".splitlines()

ETHTOOL_C = """Coalesce parameters for eth0:
Adaptive RX: off  TX: on
stats-block-usecs: 0
rx-usecs: 3
""".splitlines()

PROC_INTERRUPTS = """           CPU0       CPU1
  0:         22          0   IO-APIC   2-edge      timer
 24:     120034          0   PCI-MSI 524288-edge      eth0-TxRx-0
 25:          0      88121   PCI-MSI 524289-edge      eth0-TxRx-1
 26:          2          0   PCI-MSI 524290-edge      eth0
 27:          9          0   PCI-MSI 1048576-edge     eth01
 28:          1          0   PCI-MSI 1572864-edge     wlan0
NMI:          0          0   Non-maskable interrupts
""".splitlines()

MAC_ROUTE_GET = """   route to: default
destination: default
       mask: default
    gateway: 192.168.1.1
  interface: en0
      flags: <UP,GATEWAY,DONE,STATIC,PRCLONING>
""".splitlines()


class TestLinuxParsers(unittest.TestCase):
    def test_ring_parameters(self):
        ring = parse_ring_parameters(ETHTOOL_G)
        self.assertEqual((ring.rx_max, ring.tx_max, ring.rx, ring.tx), (4096, 2048, 512, 512))

    def test_ring_parameters_unreported(self):
        with self.assertRaises(CapabilityUnavailableError):
            parse_ring_parameters(["Ring parameters for lo:", "Cannot get device ring settings"])

    def test_adaptive_coalescing(self):
        self.assertEqual(parse_adaptive_coalescing(ETHTOOL_C), (False, True))

    def test_adaptive_coalescing_unreported(self):
        with self.assertRaises(CapabilityUnavailableError):
            parse_adaptive_coalescing(["rx-usecs: 3"])

    def test_interface_irqs_match_whole_name(self):
        self.assertEqual(parse_interface_irqs(PROC_INTERRUPTS, "eth0"), [24, 25, 26])
        self.assertEqual(parse_interface_irqs(PROC_INTERRUPTS, "wlan0"), [28])
        self.assertEqual(parse_interface_irqs(PROC_INTERRUPTS, "eth1"), [])

    def test_route_get_device(self):
        line = ["8.8.8.8 via 192.168.1.1 dev enp3s0 src 192.168.1.20 uid 1000"]
        self.assertEqual(parse_route_get_device(line), "enp3s0")
        self.assertEqual(parse_route_get_device(["unreachable"]), "")

    def test_cpu_mask(self):
        self.assertEqual(cpu_mask_for_core(0), "1")
        self.assertEqual(cpu_mask_for_core(5), "20")
        with self.assertRaises(ValueError):
            cpu_mask_for_core(-1)


class TestMacParsers(unittest.TestCase):
    def test_route_get(self):
        self.assertEqual(parse_route_get(MAC_ROUTE_GET), ("192.168.1.1", "en0"))

    def test_route_get_no_gateway(self):
        self.assertEqual(parse_route_get(["route: writing to routing socket: not in table"]), ("", ""))


if __name__ == "__main__":
    unittest.main()
