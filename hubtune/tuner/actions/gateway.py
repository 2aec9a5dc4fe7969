#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Gateway mode: route and masquerade the hub's internal tunnel subnet out the WAN interface."""

import re
import threading
from dataclasses import dataclass
from functools import partial
from ipaddress import IPv4Network
from typing import Optional, Tuple, Union

from hubtune.hubtune_constants import (
    GATEWAY_INTERNAL_INTERFACE_DEFAULT,
    GATEWAY_INTERNAL_SUBNET_DEFAULT,
    GATEWAY_MTU_DEFAULT,
    GATEWAY_MTU_MAX,
    GATEWAY_MTU_MIN,
    PROC_RP_FILTER_GLOB,
)
from hubtune.tuner.configs.constants.enums import ControlFlow, OperatingSystem, StepOutcome
from hubtune.tuner.configs.constants.step_ids import (
    STEP_FORWARD_ACCEPT,
    STEP_IP_FORWARDING,
    STEP_MTU_CLAMP,
    STEP_NAT_MASQUERADE,
    STEP_RP_FILTER_RELAX,
    STEP_WAN_INTERFACE,
)
from hubtune.tuner.core.host_profile import HostProfile
from hubtune.tuner.core.pipeline import PipelineRunner, RunReport
from hubtune.tuner.core.step import LINUX_ONLY, TuningStep
from hubtune.tuner.platforms.base import BaseTuner
from hubtune.tuner.utils.exceptions import (
    CapabilityUnavailableError,
    ConfigValueValidationError,
    HubTuneError,
    InsufficientPrivilegeError,
    UnsupportedPlatformError,
)
from hubtune.tuner.utils.logger_utils import TunerLogger

# IFNAMSIZ - 1
MAX_INTERFACE_NAME_LENGTH = 15
INTERFACE_NAME_RE = re.compile(r"^[A-Za-z0-9_.:-]+$")


def validate_interface_name(key: str, name: str) -> str:
    if not name or len(name) > MAX_INTERFACE_NAME_LENGTH or not INTERFACE_NAME_RE.match(name):
        raise ConfigValueValidationError(key, name, "not a valid network interface name")
    return name


@dataclass(frozen=True)
class GatewayConfig:
    internal_interface: str = GATEWAY_INTERNAL_INTERFACE_DEFAULT
    internal_subnet: Union[IPv4Network, str] = IPv4Network(GATEWAY_INTERNAL_SUBNET_DEFAULT)
    mtu: int = GATEWAY_MTU_DEFAULT

    def __post_init__(self):
        validate_interface_name("internal_interface", self.internal_interface)
        if not isinstance(self.internal_subnet, IPv4Network):
            try:
                subnet = IPv4Network(str(self.internal_subnet))
            except ValueError as e:
                raise ConfigValueValidationError("internal_subnet", self.internal_subnet, str(e)) from e
            object.__setattr__(self, "internal_subnet", subnet)
        if isinstance(self.mtu, bool) or not isinstance(self.mtu, int):
            raise ConfigValueValidationError("mtu", self.mtu, "must be an integer")
        if not GATEWAY_MTU_MIN <= self.mtu <= GATEWAY_MTU_MAX:
            raise ConfigValueValidationError("mtu", self.mtu, f"must be between {GATEWAY_MTU_MIN} and {GATEWAY_MTU_MAX}")


class GatewaySwitch:
    """The gateway steps for one configuration.

    The WAN interface is resolved by one step and consumed by the later ones,
    so the steps are bound methods sharing this object's state.
    """

    def __init__(self, config: GatewayConfig):
        self.config = config
        self.wan_interface: Optional[str] = None

    def masquerade_rule(self):
        return ["-s", str(self.config.internal_subnet), "-o", self.wan_interface, "-j", "MASQUERADE"]

    def forward_rules(self):
        iface = self.config.internal_interface
        return (["-i", iface, "-j", "ACCEPT"], ["-o", iface, "-j", "ACCEPT"])

    def enable_forwarding(self, tuner: BaseTuner, profile: HostProfile) -> Tuple[StepOutcome, str]:
        tuner.write_sysctl("net.ipv4.ip_forward", 1)
        return StepOutcome.APPLIED, "net.ipv4.ip_forward=1"

    def relax_rp_filter(self, tuner: BaseTuner, profile: HostProfile) -> Tuple[StepOutcome, str]:
        paths = tuner.list_kernel_files(PROC_RP_FILTER_GLOB)
        if not paths:
            return StepOutcome.SKIPPED, "no rp_filter knobs found"
        relaxed = []
        refused = []
        for path in paths:
            if tuner.read_kernel_file(path) == "0":
                continue
            try:
                tuner.write_kernel_file(path, "0")
                relaxed.append(path)
            except InsufficientPrivilegeError:
                raise
            except (OSError, HubTuneError) as e:
                TunerLogger.warning(f"Could not relax {path}: {e}")
                refused.append(path)
        if refused and not relaxed:
            raise CapabilityUnavailableError("reverse path filter", f"kernel refused {len(refused)} rp_filter writes")
        if not relaxed and not refused:
            return StepOutcome.SKIPPED, "rp_filter already relaxed"
        return StepOutcome.APPLIED, f"rp_filter=0 on {len(relaxed)} of {len(paths)} knobs"

    def resolve_wan(self, tuner: BaseTuner, profile: HostProfile) -> Tuple[StepOutcome, str]:
        self.wan_interface = tuner.default_route_interface() or profile.primary_interface
        if not self.wan_interface:
            raise CapabilityUnavailableError("WAN interface", "could not detect the WAN interface")
        if self.wan_interface == self.config.internal_interface:
            raise ConfigValueValidationError(
                "internal_interface", self.config.internal_interface, "the default route already leaves through it"
            )
        return StepOutcome.APPLIED, f"WAN interface {self.wan_interface}"

    def _require_wan(self) -> str:
        if not self.wan_interface:
            raise CapabilityUnavailableError("WAN interface", "WAN interface has not been resolved")
        return self.wan_interface

    def masquerade(self, tuner: BaseTuner, profile: HostProfile) -> Tuple[StepOutcome, str]:
        self._require_wan()
        # flushing first keeps exactly one masquerade rule across repeated runs
        tuner.flush_firewall_table("nat")
        tuner.append_firewall_rule("nat", "POSTROUTING", self.masquerade_rule())
        return StepOutcome.APPLIED, f"masquerading {self.config.internal_subnet} out {self.wan_interface}"

    def verify_masquerade(self, tuner: BaseTuner, profile: HostProfile) -> str:
        return str(len([r for r in tuner.list_firewall_rules("nat", "POSTROUTING") if "MASQUERADE" in r]))

    def allow_forwarding(self, tuner: BaseTuner, profile: HostProfile) -> Tuple[StepOutcome, str]:
        added = []
        for rule in self.forward_rules():
            if not tuner.firewall_rule_exists("filter", "FORWARD", rule):
                tuner.append_firewall_rule("filter", "FORWARD", rule)
                added.append(" ".join(rule[:2]))
        if not added:
            return StepOutcome.APPLIED, "FORWARD rules already present"
        return StepOutcome.APPLIED, f"FORWARD accepts {', '.join(added)}"

    def clamp_mtu(self, tuner: BaseTuner, profile: HostProfile) -> Tuple[StepOutcome, str]:
        iface = self.config.internal_interface
        if not tuner.interface_exists(iface):
            return StepOutcome.SKIPPED, f"MTU deferred: {iface} is not up yet"
        tuner.set_link_mtu(iface, self.config.mtu)
        return StepOutcome.APPLIED, f"{iface} mtu {self.config.mtu}"

    def catalog(self) -> Tuple[TuningStep, ...]:
        step = partial(TuningStep, platforms=LINUX_ONLY)
        return (
            step(
                id=STEP_IP_FORWARDING,
                description="Enable IPv4 forwarding",
                fatal_on_failure=True,
                apply=self.enable_forwarding,
                verify=lambda tuner, profile: tuner.read_sysctl("net.ipv4.ip_forward"),
                expected="1",
            ),
            step(
                id=STEP_RP_FILTER_RELAX,
                description="Relax reverse path filtering",
                fatal_on_failure=False,
                apply=self.relax_rp_filter,
            ),
            step(
                id=STEP_WAN_INTERFACE,
                description="Detect the WAN interface",
                fatal_on_failure=True,
                apply=self.resolve_wan,
            ),
            step(
                id=STEP_NAT_MASQUERADE,
                description="Masquerade the internal subnet",
                fatal_on_failure=True,
                apply=self.masquerade,
                verify=self.verify_masquerade,
                expected="1",
            ),
            step(
                id=STEP_FORWARD_ACCEPT,
                description="Accept forwarding to and from the internal interface",
                fatal_on_failure=True,
                apply=self.allow_forwarding,
            ),
            step(
                id=STEP_MTU_CLAMP,
                description="Clamp the internal interface MTU",
                fatal_on_failure=False,
                apply=self.clamp_mtu,
            ),
        )


def enable_gateway(
    config: GatewayConfig,
    tuner: BaseTuner,
    profile: HostProfile,
    control_flow: ControlFlow = ControlFlow.APPLY,
    cancel_event: Optional[threading.Event] = None,
) -> RunReport:
    """Turn this Linux host into a NAT gateway for the internal subnet."""
    if profile.operating_system != OperatingSystem.LINUX:
        raise UnsupportedPlatformError(profile.operating_system.value, "Gateway mode is only supported on Linux")
    TunerLogger.info(
        control_flow.would(f"enable gateway mode for {config.internal_subnet} on {config.internal_interface}")
    )
    return PipelineRunner(tuner, control_flow, cancel_event).run(GatewaySwitch(config).catalog(), profile)
