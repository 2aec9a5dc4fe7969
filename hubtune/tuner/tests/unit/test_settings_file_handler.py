#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Unit tests for loading YAML/JSON settings files."""

import json
import os
import shutil
import sys
import tempfile
import unittest
from ipaddress import IPv4Network

# Add the project root directory to the Python path
sys.path.insert(
    0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "..", ".."))
)

from hubtune.tuner.configs.tuning_settings import TuningSettings
from hubtune.tuner.utils.exceptions import ConfigValueValidationError, FileOperationError
from hubtune.tuner.utils.logger_utils import TunerLogger
from hubtune.tuner.utils.settings_file_handler import SettingsFileHandler


class TestSettingsFileHandler(unittest.TestCase):
    def setUp(self):
        TunerLogger.set_console_output(False)
        self.temp_dir = tempfile.mkdtemp()
        self.handler = SettingsFileHandler()

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)
        TunerLogger.set_console_output(True)

    def write(self, name: str, content: str) -> str:
        path = os.path.join(self.temp_dir, name)
        with open(path, "w") as f:
            f.write(content)
        return path

    def test_defaults_without_file(self):
        self.assertEqual(self.handler.tuning_settings(), TuningSettings())
        config = self.handler.gateway_config()
        self.assertEqual(config.internal_interface, "m13hub0")
        self.assertEqual(config.internal_subnet, IPv4Network("10.0.0.0/24"))
        self.assertEqual(config.mtu, 1280)

    def test_yaml_file(self):
        path = self.write(
            "settings.yml",
            "tuning:\n  ring_size: 2048\n  congestion_control: cubic\n"
            "gateway:\n  internal_subnet: 10.8.0.0/16\n  mtu: 1400\n",
        )
        unknown = self.handler.load_from_file(path)
        self.assertEqual(unknown, [])
        settings = self.handler.tuning_settings()
        self.assertEqual(settings.ring_size, 2048)
        self.assertEqual(settings.congestion_control, "cubic")
        self.assertEqual(settings.netdev_budget, 600)
        self.assertEqual(self.handler.gateway_config().internal_subnet, IPv4Network("10.8.0.0/16"))

    def test_json_file(self):
        path = self.write("settings.json", json.dumps({"tuning": {"irq_core": 3}}))
        self.handler.load_from_file(path)
        self.assertEqual(self.handler.tuning_settings().irq_core, 3)

    def test_cli_overrides_file(self):
        path = self.write("settings.yaml", "gateway:\n  mtu: 1400\n  internal_interface: tun9\n")
        self.handler.load_from_file(path)
        config = self.handler.gateway_config(mtu=1300, internal_interface=None, internal_subnet="10.1.0.0/24")
        self.assertEqual(config.mtu, 1300)
        self.assertEqual(config.internal_interface, "tun9")
        self.assertEqual(config.internal_subnet, IPv4Network("10.1.0.0/24"))

    def test_unknown_keys_are_reported(self):
        path = self.write("settings.yaml", "tuning:\n  warp_factor: 9\nextras: {}\n")
        self.assertEqual(sorted(self.handler.load_from_file(path)), ["extras", "tuning.warp_factor"])

    def test_invalid_values_raise(self):
        cases = (
            "tuning:\n  ring_size: big\n",
            "tuning:\n  ring_size: 0\n",
            "tuning:\n  irq_core: -1\n",
            "tuning:\n  latency_marker: relative/lock\n",
            "tuning:\n  queue_discipline: 'fq; reboot'\n",
            "gateway:\n  mtu: 100\n",
            "gateway:\n  internal_subnet: not-a-subnet\n",
        )
        for content in cases:
            with self.subTest(content=content):
                handler = SettingsFileHandler()
                with self.assertRaises(ConfigValueValidationError):
                    handler.load_from_file(self.write("bad.yaml", content))

    def test_missing_file(self):
        with self.assertRaises(FileOperationError):
            self.handler.load_from_file(os.path.join(self.temp_dir, "nope.yaml"))

    def test_unparseable_file(self):
        with self.assertRaises(FileOperationError):
            self.handler.load_from_file(self.write("broken.json", "{not json"))

    def test_non_mapping_root(self):
        with self.assertRaises(FileOperationError):
            self.handler.load_from_file(self.write("list.yaml", "- a\n- b\n"))


if __name__ == "__main__":
    unittest.main()
