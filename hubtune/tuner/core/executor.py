#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Step executor: applies one TuningStep and captures everything that happens as a StepResult."""

import traceback

from hubtune.tuner.configs.constants.enums import ControlFlow, ErrorKind, StepOutcome
from hubtune.tuner.configs.constants.step_ids import SKIP_DRY_RUN, SKIP_PLATFORM_MISMATCH
from hubtune.tuner.core.host_profile import HostProfile
from hubtune.tuner.core.step import StepResult, TuningStep
from hubtune.tuner.platforms.base import BaseTuner
from hubtune.tuner.utils.exceptions import (
    CapabilityUnavailableError,
    InsufficientPrivilegeError,
    VerificationMismatch,
)
from hubtune.tuner.utils.logger_utils import TunerLogger


def classify_error(e: Exception) -> ErrorKind:
    if isinstance(e, InsufficientPrivilegeError):
        return ErrorKind.PERMISSION
    elif isinstance(e, CapabilityUnavailableError):
        return ErrorKind.CAPABILITY
    return ErrorKind.ERROR


def _verify(step: TuningStep, tuner: BaseTuner, profile: HostProfile):
    """Read back a step's resulting state. Problems are logged, never escalated."""
    try:
        observed = step.verify(tuner, profile)
    except Exception as e:
        TunerLogger.warning(str(VerificationMismatch(step.id, step.expected, f"unreadable ({e})")))
        return None
    if observed is not None:
        observed = str(observed).strip()
        if step.expected is not None and observed != step.expected:
            TunerLogger.warning(str(VerificationMismatch(step.id, step.expected, observed)))
    return observed


def _read_back(step: TuningStep, tuner: BaseTuner, profile: HostProfile):
    try:
        observed = step.verify(tuner, profile)
    except Exception as e:
        TunerLogger.debug(f"{step.id} read-back after failure raised: {e}")
        return None
    return str(observed).strip() if observed is not None else None


def execute(
    step: TuningStep,
    profile: HostProfile,
    tuner: BaseTuner,
    control_flow: ControlFlow = ControlFlow.APPLY,
) -> StepResult:
    """Apply a single step against the host. Never raises."""
    if not step.supports(profile.operating_system):
        return StepResult.skipped(step.id, SKIP_PLATFORM_MISMATCH)

    if control_flow.is_dry_run():
        TunerLogger.info(control_flow.would(f"{step.description.lower()} ({step.id})"))
        return StepResult.skipped(step.id, SKIP_DRY_RUN)

    TunerLogger.start(step.id)
    try:
        outcome, detail = step.apply(tuner, profile)
    except Exception as e:
        error_kind = classify_error(e)
        if error_kind == ErrorKind.ERROR:
            TunerLogger.debug(f"{step.id} raised:\n{traceback.format_exc()}")
        observed = _read_back(step, tuner, profile) if step.verify and step.observe_on_failure else None
        result = StepResult.failed(step.id, str(e) or type(e).__name__, step.fatal_on_failure, error_kind, observed)
        message = f"{'FATAL: ' if result.fatal else ''}{result.reason}"
        if observed is not None:
            message = f"{message} (observed: {observed})"
        TunerLogger.end(step.id, result.outcome, message)
        return result

    if outcome == StepOutcome.APPLIED:
        observed = _verify(step, tuner, profile) if step.verify else None
        result = StepResult.applied(step.id, detail, observed)
    elif outcome == StepOutcome.SKIPPED:
        result = StepResult.skipped(step.id, detail)
    else:
        observed = _read_back(step, tuner, profile) if step.verify and step.observe_on_failure else None
        result = StepResult.failed(step.id, detail, step.fatal_on_failure, observed_value=observed)

    message = result.reason
    if result.observed_value is not None:
        message = f"{message} (observed: {result.observed_value})" if message else f"observed: {result.observed_value}"
    TunerLogger.end(step.id, result.outcome, message)
    return result
