#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Pipeline runner: executes a catalog in order and aggregates the outcome."""

import threading
from typing import List, Optional, Sequence

from hubtune.tuner.configs.constants.enums import ControlFlow, ErrorKind, RunOutcome, StepOutcome
from hubtune.tuner.core.executor import execute
from hubtune.tuner.core.host_profile import HostProfile
from hubtune.tuner.core.step import StepResult, TuningStep
from hubtune.tuner.platforms.base import BaseTuner
from hubtune.tuner.utils.exceptions import ConfigValueValidationError
from hubtune.tuner.utils.logger_utils import TunerLogger


class RunReport:
    """Ordered step results plus the aggregate outcome of one run."""

    def __init__(self):
        self._results: List[StepResult] = []
        self.outcome: Optional[RunOutcome] = None
        self.aborted_step: Optional[str] = None

    @property
    def results(self) -> Sequence[StepResult]:
        return tuple(self._results)

    @property
    def finalized(self) -> bool:
        return self.outcome is not None

    def append(self, result: StepResult):
        if self.finalized:
            raise RuntimeError("Cannot append to a finalized run report")
        self._results.append(result)

    def result_for(self, step_id: str) -> Optional[StepResult]:
        return next((r for r in self._results if r.step_id == step_id), None)

    def finalize(self, cancelled: bool = False) -> "RunReport":
        if self.finalized:
            return self
        fatal = next((r for r in self._results if r.is_fatal_failure), None)
        if fatal:
            self.outcome = RunOutcome.ABORTED
            self.aborted_step = fatal.step_id
        elif cancelled:
            self.outcome = RunOutcome.CANCELLED
        elif any(r.outcome == StepOutcome.FAILED for r in self._results):
            self.outcome = RunOutcome.PARTIAL_SUCCESS
        else:
            self.outcome = RunOutcome.SUCCESS
        return self

    @property
    def aborted_for_permission(self) -> bool:
        if self.outcome != RunOutcome.ABORTED:
            return False
        aborting = self.result_for(self.aborted_step)
        return aborting is not None and aborting.error_kind == ErrorKind.PERMISSION

    def counts(self):
        return {outcome: sum(1 for r in self._results if r.outcome == outcome) for outcome in StepOutcome}


def check_unique_ids(catalog: Sequence[TuningStep]):
    seen = set()
    for step in catalog:
        if step.id in seen:
            raise ValueError(f"Duplicate step id '{step.id}' in catalog")
        seen.add(step.id)


def filter_catalog(catalog: Sequence[TuningStep], profile: HostProfile) -> List[TuningStep]:
    """The steps that would actually be attempted on this host, in order."""
    return [step for step in catalog if step.supports(profile.operating_system)]


class PipelineRunner:
    def __init__(
        self,
        tuner: BaseTuner,
        control_flow: ControlFlow = ControlFlow.APPLY,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.tuner = tuner
        self.control_flow = control_flow
        self.cancel_event = cancel_event or threading.Event()

    def run(self, catalog: Sequence[TuningStep], profile: HostProfile) -> RunReport:
        """Run every step in order, stopping at the first fatal failure or a cancellation."""
        check_unique_ids(catalog)
        report = RunReport()
        cancelled = False
        for step in catalog:
            if self.cancel_event.is_set():
                TunerLogger.warning(f"Cancelled before {step.id}; steps already applied remain in place")
                cancelled = True
                break
            result = execute(step, profile, self.tuner, self.control_flow)
            report.append(result)
            if result.is_fatal_failure:
                TunerLogger.error(f"Aborting: {step.id} is required and failed")
                break
        return report.finalize(cancelled=cancelled)


def select_steps(catalog: Sequence[TuningStep], step_ids: Sequence[str]) -> List[TuningStep]:
    """Restrict a catalog to the named steps, keeping catalog order."""
    wanted = set(step_ids)
    known = {step.id for step in catalog}
    unknown = sorted(wanted - known)
    if unknown:
        raise ConfigValueValidationError("only", ", ".join(unknown), f"unknown step id (known: {', '.join(sorted(known))})")
    return [step for step in catalog if step.id in wanted]
