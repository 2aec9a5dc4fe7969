#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.


from enum import Enum, auto


class OperatingSystem(Enum):
    """Host operating system families the tuner knows about."""

    LINUX = "linux"
    DARWIN = "darwin"
    UNSUPPORTED = "unsupported"


# Used primarily for getting status from discrete tuning steps and subsequently logging
class StepOutcome(Enum):
    """Outcome of a single tuning step."""

    APPLIED = auto()
    SKIPPED = auto()
    FAILED = auto()


class RunOutcome(Enum):
    """Overall outcome of a pipeline run."""

    SUCCESS = auto()
    PARTIAL_SUCCESS = auto()
    ABORTED = auto()
    CANCELLED = auto()


class ErrorKind(Enum):
    """Classification of a failed step's cause, for reporting and exit codes."""

    NONE = auto()
    PERMISSION = auto()
    CAPABILITY = auto()
    ERROR = auto()


# top-level control flow for the tuner
class ControlFlow(Enum):
    """High-level control over what the tuner should do.

    - DRYRUN: probe and filter the catalog; make no changes
    - APPLY: execute every applicable step
    """

    DRYRUN = auto()
    APPLY = auto()

    # query helpers
    def is_dry_run(self) -> bool:
        return self is ControlFlow.DRYRUN

    def should_apply(self) -> bool:
        """returns True only when system-changing steps should run"""
        return self is ControlFlow.APPLY

    # logging helpers
    def would(self, action: str) -> str:
        """formats an action string appropriately for the current mode"""
        return ("Dry run: would " + action) if self is ControlFlow.DRYRUN else action
