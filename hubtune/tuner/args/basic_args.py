#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Global arguments shared by every hubtune subcommand
"""


def add_basic_args(parser):
    """
    Add global options to the top-level parser

    Args:
        parser: ArgumentParser to add arguments to
    """
    basicArgGroup = parser.add_argument_group("Global Options")

    basicArgGroup.add_argument(
        "--debug",
        "--verbose",
        dest="debug",
        action="store_true",
        default=False,
        help="Enable debug output including command traces",
    )
    basicArgGroup.add_argument(
        "--quiet",
        "--silent",
        action="store_true",
        dest="quiet",
        default=False,
        help="Suppress console logging output (the final summary is still printed)",
    )
    basicArgGroup.add_argument(
        "--log-to-file",
        dest="logToFile",
        metavar="filename",
        nargs="?",
        const="",
        default=None,
        help="Log output to file. If no filename provided, creates timestamped log file.",
    )
    basicArgGroup.add_argument(
        "--settings-file",
        dest="settingsFile",
        metavar="filename",
        default=None,
        help="YAML or JSON file with 'tuning' and 'gateway' sections overriding built-in defaults",
    )


def add_dry_run_arg(parser):
    parser.add_argument(
        "--dry-run",
        dest="dryRun",
        action="store_true",
        default=False,
        help="Probe the host and log planned steps without making system changes",
    )
