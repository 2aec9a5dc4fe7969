#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Node mode (macOS): send all IPv4 traffic through the tunnel while keeping the hub itself reachable."""

import threading
from dataclasses import dataclass
from functools import partial
from typing import Optional, Tuple

from hubtune.hubtune_constants import NODE_SPLIT_DEFAULT_ROUTES
from hubtune.tuner.configs.constants.enums import ControlFlow, OperatingSystem, StepOutcome
from hubtune.tuner.configs.constants.step_ids import (
    STEP_DEFAULT_GATEWAY,
    STEP_HUB_HOST_ROUTE,
    STEP_REMOVE_SPLIT_ROUTES,
    STEP_SPLIT_DEFAULT_ROUTES,
)
from hubtune.tuner.core.host_profile import HostProfile
from hubtune.tuner.core.pipeline import PipelineRunner, RunReport
from hubtune.tuner.core.step import DARWIN_ONLY, TuningStep
from hubtune.tuner.platforms.base import BaseTuner
from hubtune.tuner.utils.exceptions import (
    CapabilityUnavailableError,
    ConfigValueValidationError,
    UnsupportedPlatformError,
)
from hubtune.tuner.utils.logger_utils import TunerLogger

from .gateway import validate_interface_name


def parse_hub_address(value: str) -> str:
    """'203.0.113.7:443' -> '203.0.113.7'; bracketed IPv6 and bare hosts are accepted too."""
    value = (value or "").strip()
    if value.startswith("[") and "]" in value:
        host = value[1 : value.index("]")]
    elif value.count(":") == 1:
        host, port = value.split(":")
        if not port.isdigit() or not 0 < int(port) < 65536:
            raise ConfigValueValidationError("hub", value, "port must be between 1 and 65535")
    else:
        host = value
    if not host or any(c.isspace() for c in host):
        raise ConfigValueValidationError("hub", value, "expected HOST or HOST:PORT")
    return host


@dataclass(frozen=True)
class NodeRouteConfig:
    hub_host: str
    tunnel_interface: str

    def __post_init__(self):
        object.__setattr__(self, "hub_host", parse_hub_address(self.hub_host))
        validate_interface_name("tunnel_interface", self.tunnel_interface)


class NodeRouteSwitch:
    def __init__(self, config: NodeRouteConfig):
        self.config = config
        self.gateway: Optional[str] = None

    def resolve_gateway(self, tuner: BaseTuner, profile: HostProfile) -> Tuple[StepOutcome, str]:
        self.gateway = tuner.default_gateway()
        if not self.gateway:
            raise CapabilityUnavailableError("default gateway", "no default gateway is configured")
        return StepOutcome.APPLIED, f"default gateway {self.gateway}"

    def pin_hub_route(self, tuner: BaseTuner, profile: HostProfile) -> Tuple[StepOutcome, str]:
        if not self.gateway:
            raise CapabilityUnavailableError("default gateway", "default gateway has not been resolved")
        # replace whatever route the hub had, it may point at a stale gateway
        tuner.delete_route(self.config.hub_host)
        tuner.add_host_route(self.config.hub_host, self.gateway)
        return StepOutcome.APPLIED, f"{self.config.hub_host} via {self.gateway}"

    def install_split_routes(self, tuner: BaseTuner, profile: HostProfile) -> Tuple[StepOutcome, str]:
        for network in NODE_SPLIT_DEFAULT_ROUTES:
            tuner.delete_route(network)
            tuner.add_interface_route(network, self.config.tunnel_interface)
        return StepOutcome.APPLIED, f"{', '.join(NODE_SPLIT_DEFAULT_ROUTES)} via {self.config.tunnel_interface}"

    def catalog(self) -> Tuple[TuningStep, ...]:
        step = partial(TuningStep, platforms=DARWIN_ONLY, fatal_on_failure=True)
        return (
            step(id=STEP_DEFAULT_GATEWAY, description="Find the current default gateway", apply=self.resolve_gateway),
            step(id=STEP_HUB_HOST_ROUTE, description="Pin the hub route to the physical gateway", apply=self.pin_hub_route),
            step(
                id=STEP_SPLIT_DEFAULT_ROUTES,
                description="Route both IPv4 halves through the tunnel",
                apply=self.install_split_routes,
            ),
        )


def remove_split_routes(tuner: BaseTuner, profile: HostProfile) -> Tuple[StepOutcome, str]:
    removed = [network for network in NODE_SPLIT_DEFAULT_ROUTES if tuner.delete_route(network)]
    if not removed:
        return StepOutcome.SKIPPED, "split routes already absent"
    return StepOutcome.APPLIED, f"removed {', '.join(removed)}"


CLEANUP_CATALOG = (
    TuningStep(
        id=STEP_REMOVE_SPLIT_ROUTES,
        platforms=DARWIN_ONLY,
        description="Remove the tunnel split routes",
        fatal_on_failure=False,
        apply=remove_split_routes,
    ),
)


def _require_darwin(profile: HostProfile):
    if profile.operating_system != OperatingSystem.DARWIN:
        raise UnsupportedPlatformError(profile.operating_system.value, "Node routing is only supported on macOS")


def enable_node_routes(
    config: NodeRouteConfig,
    tuner: BaseTuner,
    profile: HostProfile,
    control_flow: ControlFlow = ControlFlow.APPLY,
    cancel_event: Optional[threading.Event] = None,
) -> RunReport:
    _require_darwin(profile)
    TunerLogger.info(control_flow.would(f"route all IPv4 traffic through {config.tunnel_interface}"))
    return PipelineRunner(tuner, control_flow, cancel_event).run(NodeRouteSwitch(config).catalog(), profile)


def cleanup_node_routes(
    tuner: BaseTuner,
    profile: HostProfile,
    control_flow: ControlFlow = ControlFlow.APPLY,
    cancel_event: Optional[threading.Event] = None,
) -> RunReport:
    _require_darwin(profile)
    return PipelineRunner(tuner, control_flow, cancel_event).run(CLEANUP_CATALOG, profile)
