#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Arguments for the platform performance tuning subcommand
"""

from hubtune.tuner.args.basic_args import add_dry_run_arg


def add_tune_args(subparsers):
    parser = subparsers.add_parser(
        "tune",
        help="Apply the network performance catalog for this platform",
        description="Apply the ordered network performance tweaks for Linux or macOS",
    )
    add_dry_run_arg(parser)
    parser.add_argument(
        "--only",
        dest="onlySteps",
        metavar="step-id",
        action="append",
        default=None,
        help="Run only the named step (may be repeated); catalog order is preserved",
    )
    return parser
