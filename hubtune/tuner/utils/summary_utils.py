#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.


"""Build and format run summaries for console display."""

from typing import List, Tuple

from hubtune.tuner.configs.constants.enums import RunOutcome, StepOutcome
from hubtune.tuner.core.pipeline import RunReport
from hubtune.tuner.core.step import StepResult

STATUS_LABELS = {
    StepOutcome.APPLIED: "applied",
    StepOutcome.SKIPPED: "skipped",
    StepOutcome.FAILED: "FAILED",
}

OUTCOME_LABELS = {
    RunOutcome.SUCCESS: "Success",
    RunOutcome.PARTIAL_SUCCESS: "Partial success",
    RunOutcome.ABORTED: "Aborted",
    RunOutcome.CANCELLED: "Cancelled",
}


def format_step_detail(result: StepResult) -> str:
    """The text after a step's status: reason, plus the read-back value when there is one."""
    detail = result.reason or ""
    if result.observed_value is not None:
        detail = f"{detail} [observed: {result.observed_value}]" if detail else f"[observed: {result.observed_value}]"
    if result.outcome == StepOutcome.FAILED and result.fatal:
        detail = f"(fatal) {detail}"
    return detail


def build_summary_items(report: RunReport) -> List[Tuple[str, str, str]]:
    """(step id, status, detail) for each recorded step, in execution order."""
    return [(r.step_id, STATUS_LABELS[r.outcome], format_step_detail(r)) for r in report.results]


def format_outcome(report: RunReport) -> str:
    if report.outcome is None:
        return "Not finished"
    label = OUTCOME_LABELS[report.outcome]
    if report.outcome == RunOutcome.ABORTED:
        return f"{label} at {report.aborted_step}"
    return label


def format_run_summary(report: RunReport, title: str = "Tuning summary") -> str:
    items = build_summary_items(report)
    width = max([len(step_id) for step_id, _, _ in items] + [len("Step")])
    lines = [title, "=" * len(title)]
    for step_id, status, detail in items:
        lines.append(f"{step_id.ljust(width)}  {status.ljust(7)}  {detail}".rstrip())
    counts = report.counts()
    lines.append("")
    lines.append(
        f"{format_outcome(report)}: {counts[StepOutcome.APPLIED]} applied, "
        f"{counts[StepOutcome.SKIPPED]} skipped, {counts[StepOutcome.FAILED]} failed"
    )
    return "\n".join(lines)
