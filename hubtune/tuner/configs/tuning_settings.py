#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Tunable targets for the performance catalogs."""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict

from hubtune.hubtune_constants import LATENCY_MARKER_DEFAULT


@dataclass(frozen=True)
class TuningSettings:
    # linux
    ring_size: int = 4096
    irq_core: int = 0
    netdev_budget: int = 600
    netdev_budget_usecs: int = 4000
    netdev_max_backlog: int = 10000
    socket_buffer_max: int = 16777216
    busy_poll_usecs: int = 50
    congestion_control: str = "bbr"
    queue_discipline: str = "fq"
    latency_marker: str = LATENCY_MARKER_DEFAULT

    # macos
    darwin_maxsockbuf: int = 8388608
    darwin_udp_recvspace: int = 4194304
    darwin_udp_maxdgram: int = 65535
    darwin_tcp_keepinit: int = 10000

    @classmethod
    def field_types(cls) -> Dict[str, type]:
        return {f.name: f.type for f in fields(cls)}

    def with_overrides(self, **overrides: Any) -> "TuningSettings":
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
