#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Unit tests for run summary formatting."""

import os
import sys
import unittest

# Add the project root directory to the Python path
sys.path.insert(
    0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "..", ".."))
)

from hubtune.tuner.configs.constants.enums import ErrorKind, RunOutcome
from hubtune.tuner.core.pipeline import RunReport
from hubtune.tuner.core.step import StepResult
from hubtune.tuner.utils.summary_utils import (
    build_summary_items,
    format_outcome,
    format_run_summary,
    format_step_detail,
)


class TestSummaryUtils(unittest.TestCase):
    def make_report(self, *results):
        report = RunReport()
        for r in results:
            report.append(r)
        return report.finalize()

    def test_step_detail(self):
        self.assertEqual(format_step_detail(StepResult.applied("a", "done", "bbr")), "done [observed: bbr]")
        self.assertEqual(format_step_detail(StepResult.applied("a", "", "1")), "[observed: 1]")
        self.assertEqual(format_step_detail(StepResult.failed("a", "boom", fatal=True)), "(fatal) boom")

    def test_aborting_step_is_last(self):
        report = self.make_report(
            StepResult.applied("first", "ok"),
            StepResult.failed("second", "denied", fatal=True, error_kind=ErrorKind.PERMISSION),
        )
        items = build_summary_items(report)
        self.assertEqual([i[0] for i in items], ["first", "second"])
        self.assertEqual(items[-1][1], "FAILED")
        self.assertEqual(format_outcome(report), "Aborted at second")

    def test_run_summary(self):
        report = self.make_report(
            StepResult.applied("ring-expansion", "rx 256->4096"),
            StepResult.skipped("latency-hold", "dry-run"),
            StepResult.failed("napi-budget", "rejected", fatal=False),
        )
        self.assertEqual(report.outcome, RunOutcome.PARTIAL_SUCCESS)
        text = format_run_summary(report, "Tuning summary")
        self.assertTrue(text.startswith("Tuning summary\n=============="))
        self.assertIn("ring-expansion  applied  rx 256->4096", text)
        self.assertIn("Partial success: 1 applied, 1 skipped, 1 failed", text)

    def test_unfinished_report(self):
        self.assertEqual(format_outcome(RunReport()), "Not finished")


if __name__ == "__main__":
    unittest.main()
