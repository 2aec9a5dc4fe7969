#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Unit tests for the host capability probe."""

import os
import sys
import unittest
from unittest.mock import patch

# Add the project root directory to the Python path
sys.path.insert(
    0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "..", ".."))
)

from hubtune.hubtune_constants import PLATFORM_NAME_LINUX, PLATFORM_NAME_MAC, PLATFORM_NAME_WINDOWS
from hubtune.tuner.configs.constants.enums import OperatingSystem
from hubtune.tuner.core.host_profile import HostProfile, is_wireless_interface, probe
from hubtune.tuner.tests.mock.test_framework import MockTuner
from hubtune.tuner.utils.exceptions import UnsupportedPlatformError
from hubtune.tuner.utils.logger_utils import TunerLogger


class TestHostProfile(unittest.TestCase):
    def setUp(self):
        TunerLogger.set_console_output(False)
        self.tuner = MockTuner()
        self.tuner.optional_tools = ("ethtool", "iw", "iptables")

    def tearDown(self):
        TunerLogger.set_console_output(True)

    def test_unsupported_platform_raises_before_tuner(self):
        with patch("hubtune.tuner.core.host_profile.get_platform_tuner") as factory:
            with self.assertRaises(UnsupportedPlatformError):
                probe(PLATFORM_NAME_WINDOWS)
            factory.assert_not_called()

    def test_linux_probe(self):
        profile = probe(PLATFORM_NAME_LINUX, self.tuner)
        self.assertEqual(profile.operating_system, OperatingSystem.LINUX)
        self.assertEqual(profile.primary_interface, "eth0")
        self.assertFalse(profile.is_wireless)
        self.assertTrue(profile.has_tool("ethtool"))
        self.assertFalse(profile.has_tool("nft"))

    def test_wireless_requires_iw(self):
        self.tuner.default_iface = "wlp3s0"
        self.assertTrue(probe(PLATFORM_NAME_LINUX, self.tuner).is_wireless)
        self.tuner.tools.discard("iw")
        self.assertFalse(probe(PLATFORM_NAME_LINUX, self.tuner).is_wireless)

    def test_missing_default_route_is_not_an_error(self):
        self.tuner.default_iface = ""
        profile = probe(PLATFORM_NAME_LINUX, self.tuner)
        self.assertEqual(profile.primary_interface, "")

    def test_darwin_probe_leaves_interface_empty(self):
        profile = probe(PLATFORM_NAME_MAC, MockTuner(OperatingSystem.DARWIN))
        self.assertEqual(profile.operating_system, OperatingSystem.DARWIN)
        self.assertEqual(profile.primary_interface, "")

    def test_profile_is_read_only(self):
        profile = HostProfile(OperatingSystem.LINUX, optional_tools={"iw": True})
        with self.assertRaises(TypeError):
            profile.optional_tools["iw"] = False
        with self.assertRaises(AttributeError):
            profile.primary_interface = "eth1"

    def test_is_wireless_interface(self):
        self.assertTrue(is_wireless_interface("wlan0", True))
        self.assertFalse(is_wireless_interface("wlan0", False))
        self.assertFalse(is_wireless_interface("eth0", True))
        self.assertFalse(is_wireless_interface("", True))


if __name__ == "__main__":
    unittest.main()
