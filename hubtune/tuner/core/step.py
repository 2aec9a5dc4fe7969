#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Tuning step descriptors and the result records produced by running them."""

from dataclasses import dataclass
from typing import Callable, FrozenSet, Optional, Tuple

from hubtune.tuner.configs.constants.enums import ErrorKind, OperatingSystem, StepOutcome

# apply(tuner, profile) -> (outcome, human readable detail)
ApplyFunc = Callable[..., Tuple[StepOutcome, str]]
# verify(tuner, profile) -> observed value (or None when there is nothing to read back)
VerifyFunc = Callable[..., Optional[str]]

LINUX_ONLY = frozenset({OperatingSystem.LINUX})
DARWIN_ONLY = frozenset({OperatingSystem.DARWIN})


@dataclass(frozen=True)
class TuningStep:
    """An immutable catalog entry."""

    id: str
    platforms: FrozenSet[OperatingSystem]
    description: str
    fatal_on_failure: bool
    apply: ApplyFunc
    verify: Optional[VerifyFunc] = None
    expected: Optional[str] = None
    # read back and record the observed value even when apply fails
    observe_on_failure: bool = False

    def supports(self, operating_system: OperatingSystem) -> bool:
        return operating_system in self.platforms


@dataclass(frozen=True)
class StepResult:
    """The recorded outcome of one step in one run."""

    step_id: str
    outcome: StepOutcome
    reason: str = ""
    observed_value: Optional[str] = None
    fatal: bool = False
    error_kind: ErrorKind = ErrorKind.NONE

    @property
    def is_fatal_failure(self) -> bool:
        return self.outcome == StepOutcome.FAILED and self.fatal

    @classmethod
    def applied(cls, step_id: str, detail: str = "", observed_value: Optional[str] = None) -> "StepResult":
        return cls(step_id, StepOutcome.APPLIED, detail, observed_value)

    @classmethod
    def skipped(cls, step_id: str, reason: str) -> "StepResult":
        return cls(step_id, StepOutcome.SKIPPED, reason)

    @classmethod
    def failed(
        cls,
        step_id: str,
        cause: str,
        fatal: bool,
        error_kind: ErrorKind = ErrorKind.ERROR,
        observed_value: Optional[str] = None,
    ) -> "StepResult":
        return cls(step_id, StepOutcome.FAILED, cause, observed_value, fatal, error_kind)
