#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Individual Linux tuning steps against the mock host."""

import os
import sys
import unittest

# Add the project root directory to the Python path
sys.path.insert(
    0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "..", ".."))
)

from hubtune.hubtune_constants import (
    NETWORK_MANAGER_CONF_DIR,
    NETWORK_MANAGER_POWERSAVE_CONTENT,
    NETWORK_MANAGER_POWERSAVE_FILE,
    THP_DEFRAG,
    THP_ENABLED,
)
from hubtune.tuner.configs.constants.enums import StepOutcome
from hubtune.tuner.platforms.base import RingParameters
from hubtune.tuner.platforms.utils import linux_tweaks
from hubtune.tuner.tests.mock.test_framework import BaseTunerTest, linux_profile
from hubtune.tuner.utils.exceptions import (
    CapabilityUnavailableError,
    CommandFailedError,
    InsufficientPrivilegeError,
)

NM_FILE = os.path.join(NETWORK_MANAGER_CONF_DIR, NETWORK_MANAGER_POWERSAVE_FILE)


class TestLinuxTweaks(BaseTunerTest):
    def test_coalescing_already_enabled_is_applied(self):
        self.mock_tuner.coalescing["eth0"] = (True, True)
        status, detail = linux_tweaks.apply_adaptive_coalescing(self.mock_tuner, self.profile)
        self.assertEqual(status, StepOutcome.APPLIED)
        self.assertIn("already", detail)
        self.assert_no_command_executed("ethtool -C")

    def test_coalescing_unsupported_raises(self):
        self.mock_tuner.unsupported.add("adaptive interrupt coalescing")
        with self.assertRaises(CapabilityUnavailableError):
            linux_tweaks.apply_adaptive_coalescing(self.mock_tuner, self.profile)

    def test_ring_expansion_clamps_to_hardware_maximum(self):
        self.mock_tuner.rings["eth0"] = RingParameters(rx_max=1024, tx_max=512, rx=256, tx=256)
        status, _ = linux_tweaks.apply_ring_expansion(self.mock_tuner, self.profile, ring_size=4096)
        self.assertEqual(status, StepOutcome.APPLIED)
        self.assert_command_executed("ethtool -G eth0 rx 1024 tx 512", privileged=True)

    def test_ring_expansion_at_target_is_skipped(self):
        self.mock_tuner.rings["eth0"] = RingParameters(rx_max=1024, tx_max=1024, rx=1024, tx=1024)
        status, detail = linux_tweaks.apply_ring_expansion(self.mock_tuner, self.profile, ring_size=4096)
        self.assertEqual(status, StepOutcome.SKIPPED)
        self.assertIn("already at maximum", detail)

    def test_wireless_power_save_wired_without_network_manager_skips(self):
        status, _ = linux_tweaks.apply_wireless_power_save(self.mock_tuner, self.profile)
        self.assertEqual(status, StepOutcome.SKIPPED)

    def test_wireless_power_save_off_and_persisted(self):
        self.enable_network_manager()
        profile = linux_profile(primary_interface="wlan0", is_wireless=True)
        status, _ = linux_tweaks.apply_wireless_power_save(self.mock_tuner, profile)
        self.assertEqual(status, StepOutcome.APPLIED)
        self.assertEqual(self.mock_tuner.power_save["wlan0"], "off")
        self.assertEqual(self.mock_tuner.config_files[NM_FILE], NETWORK_MANAGER_POWERSAVE_CONTENT)

    def test_radio_failure_still_persists_network_manager_override(self):
        self.enable_network_manager()
        self.mock_tuner.failing_commands.add("iw dev")
        profile = linux_profile(primary_interface="wlan0", is_wireless=True)
        status, detail = linux_tweaks.apply_wireless_power_save(self.mock_tuner, profile)
        self.assertEqual(status, StepOutcome.FAILED)
        self.assertIn("iw dev wlan0 set power_save off", detail)
        self.assertIn(f"wrote {NM_FILE}", detail)
        self.assertEqual(self.mock_tuner.config_files[NM_FILE], NETWORK_MANAGER_POWERSAVE_CONTENT)

    def test_radio_without_privilege_raises(self):
        self.enable_network_manager()
        self.mock_tuner.privileged = False
        profile = linux_profile(primary_interface="wlan0", is_wireless=True)
        with self.assertRaises(InsufficientPrivilegeError):
            linux_tweaks.apply_wireless_power_save(self.mock_tuner, profile)

    def test_network_manager_file_not_rewritten_when_identical(self):
        self.enable_network_manager()
        self.mock_tuner.config_files[NM_FILE] = list(NETWORK_MANAGER_POWERSAVE_CONTENT)
        status, _ = linux_tweaks.apply_wireless_power_save(self.mock_tuner, self.profile)
        self.assertEqual(status, StepOutcome.APPLIED)
        self.assert_no_command_executed(f"cp - {NM_FILE}")

    def test_irq_affinity_uses_core_mask(self):
        status, _ = linux_tweaks.apply_irq_affinity(self.mock_tuner, self.profile, irq_core=2)
        self.assertEqual(status, StepOutcome.APPLIED)
        self.assertEqual(self.mock_tuner.get_irq_affinity(24), "4")
        self.assertEqual(self.mock_tuner.get_irq_affinity(26), "4")
        self.assertNotIn("irqbalance", self.mock_tuner.services_running)

    def test_irq_affinity_without_irqs_skips(self):
        self.mock_tuner.irqs = {}
        status, _ = linux_tweaks.apply_irq_affinity(self.mock_tuner, self.profile, irq_core=0)
        self.assertEqual(status, StepOutcome.SKIPPED)

    def test_irq_affinity_core_out_of_range_skips(self):
        status, _ = linux_tweaks.apply_irq_affinity(self.mock_tuner, self.profile, irq_core=64)
        self.assertEqual(status, StepOutcome.SKIPPED)

    def test_napi_budget_optional_usecs(self):
        self.mock_tuner.rejected_sysctls.add("net.core.netdev_budget_usecs")
        settings = linux_tweaks.napi_budget_settings(600, 4000)
        status, detail = linux_tweaks.apply_sysctl_step(self.mock_tuner, self.profile, settings=settings)
        self.assertEqual(status, StepOutcome.APPLIED)
        self.assertIn("netdev_budget_usecs", detail)
        self.assertEqual(self.mock_tuner.sysctls["net.core.netdev_budget"], "600")

    def test_napi_budget_required_rejected(self):
        self.mock_tuner.rejected_sysctls.add("net.core.netdev_budget")
        settings = linux_tweaks.napi_budget_settings(600, 4000)
        with self.assertRaises(CommandFailedError):
            linux_tweaks.apply_sysctl_step(self.mock_tuner, self.profile, settings=settings)

    def test_conntrack_bypass_without_iptables_skips(self):
        profile = linux_profile(optional_tools={"iptables": False})
        status, _ = linux_tweaks.apply_conntrack_bypass(self.mock_tuner, profile)
        self.assertEqual(status, StepOutcome.SKIPPED)
        self.assert_no_command_executed("iptables")

    def test_transparent_hugepages(self):
        status, _ = linux_tweaks.apply_transparent_hugepages(self.mock_tuner, self.profile)
        self.assertEqual(status, StepOutcome.APPLIED)
        self.assertEqual(linux_tweaks.verify_transparent_hugepages(self.mock_tuner, self.profile), "always")
        self.assertEqual(self.mock_tuner.kernel_files[THP_DEFRAG], "always")

    def test_transparent_hugepages_missing_skips(self):
        del self.mock_tuner.kernel_files[THP_ENABLED]
        del self.mock_tuner.kernel_files[THP_DEFRAG]
        status, _ = linux_tweaks.apply_transparent_hugepages(self.mock_tuner, self.profile)
        self.assertEqual(status, StepOutcome.SKIPPED)

    def test_parse_thp_mode(self):
        self.assertEqual(linux_tweaks.parse_thp_mode("always [madvise] never"), "madvise")
        self.assertEqual(linux_tweaks.parse_thp_mode("[always] madvise never"), "always")
        self.assertIsNone(linux_tweaks.parse_thp_mode(None))

    def test_congestion_control(self):
        status, _ = linux_tweaks.apply_congestion_control(
            self.mock_tuner, self.profile, congestion_control="bbr", queue_discipline="fq"
        )
        self.assertEqual(status, StepOutcome.APPLIED)
        self.assertIn("tcp_bbr", self.mock_tuner.modules)
        self.assertEqual(self.mock_tuner.sysctls["net.core.default_qdisc"], "fq")
        self.assertEqual(linux_tweaks.verify_congestion_control(self.mock_tuner, self.profile), "bbr")


if __name__ == "__main__":
    unittest.main()
