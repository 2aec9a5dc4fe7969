#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""hubtune command line: host network tuning, gateway mode and node routing."""

import argparse
import signal
import sys
import threading

from hubtune.hubtune_common import get_platform_name
from hubtune.hubtune_constants import (
    EXIT_ABORTED,
    EXIT_CANCELLED,
    EXIT_PERMISSION,
    EXIT_SUCCESS,
    EXIT_UNSUPPORTED,
    HUBTUNE_VERSION,
)
from hubtune.tuner.actions.gateway import enable_gateway
from hubtune.tuner.actions.node_routes import NodeRouteConfig, cleanup_node_routes, enable_node_routes
from hubtune.tuner.args import add_basic_args, add_gateway_args, add_node_args, add_tune_args
from hubtune.tuner.configs.constants.enums import ControlFlow, RunOutcome
from hubtune.tuner.core.catalog import catalog_for
from hubtune.tuner.core.host_profile import probe
from hubtune.tuner.core.pipeline import PipelineRunner, RunReport, filter_catalog, select_steps
from hubtune.tuner.platforms import get_platform_tuner
from hubtune.tuner.utils.exceptions import (
    ConfigValueValidationError,
    FileOperationError,
    UnsupportedPlatformError,
)
from hubtune.tuner.utils.logger_utils import TunerLogger
from hubtune.tuner.utils.settings_file_handler import SettingsFileHandler
from hubtune.tuner.utils.summary_utils import format_run_summary


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hubtune", description="Hub/node network tuning")
    parser.add_argument("--version", action="version", version=f"%(prog)s {HUBTUNE_VERSION}")
    add_basic_args(parser)
    subparsers = parser.add_subparsers(dest="command", metavar="{tune,gateway,node}")
    subparsers.required = True
    add_tune_args(subparsers)
    add_gateway_args(subparsers)
    add_node_args(subparsers)
    return parser


def exit_code_for(report: RunReport) -> int:
    if report.outcome in (RunOutcome.SUCCESS, RunOutcome.PARTIAL_SUCCESS):
        return EXIT_SUCCESS
    elif report.outcome == RunOutcome.CANCELLED:
        return EXIT_CANCELLED
    elif report.aborted_for_permission:
        return EXIT_PERMISSION
    return EXIT_ABORTED


def install_interrupt_handler(cancel_event: threading.Event):
    """First Ctrl-C stops the run between steps; a second one interrupts immediately."""

    def _handler(signum, frame):
        if cancel_event.is_set():
            raise KeyboardInterrupt
        TunerLogger.warning("Interrupt received; stopping after the current step (Ctrl-C again to abort now)")
        cancel_event.set()

    signal.signal(signal.SIGINT, _handler)


def setup_logging(parsed_args):
    if parsed_args.quiet:
        TunerLogger.set_console_output(False)
    if parsed_args.debug:
        TunerLogger.set_debug_enabled(True)
    if parsed_args.logToFile is not None:
        if parsed_args.logToFile == "":
            log_filename = TunerLogger.generate_timestamped_filename()
            TunerLogger.info(f"No log filename specified, using: {log_filename}")
        else:
            log_filename = parsed_args.logToFile
        TunerLogger.set_log_file(log_filename)
        TunerLogger.info(f"Logging to file: {log_filename}")


def run_tune(parsed_args, settings_handler, tuner, profile, control_flow, cancel_event) -> RunReport:
    catalog = catalog_for(profile.operating_system, settings_handler.tuning_settings())
    if parsed_args.onlySteps:
        catalog = select_steps(catalog, parsed_args.onlySteps)
    if control_flow.is_dry_run():
        planned = filter_catalog(catalog, profile)
        TunerLogger.info(control_flow.would(f"run {len(planned)} steps: {', '.join(s.id for s in planned)}"))
    return PipelineRunner(tuner, control_flow, cancel_event).run(catalog, profile)


def run_gateway(parsed_args, settings_handler, tuner, profile, control_flow, cancel_event) -> RunReport:
    config = settings_handler.gateway_config(
        internal_subnet=parsed_args.subnet,
        mtu=parsed_args.mtu,
        internal_interface=parsed_args.internalInterface,
    )
    return enable_gateway(config, tuner, profile, control_flow, cancel_event)


def run_node(parsed_args, settings_handler, tuner, profile, control_flow, cancel_event) -> RunReport:
    config = NodeRouteConfig(hub_host=parsed_args.hub, tunnel_interface=parsed_args.tunnelInterface)
    if parsed_args.cleanup:
        return cleanup_node_routes(tuner, profile, control_flow, cancel_event)
    return enable_node_routes(config, tuner, profile, control_flow, cancel_event)


COMMANDS = {
    "tune": (run_tune, "Tuning summary"),
    "gateway": (run_gateway, "Gateway summary"),
    "node": (run_node, "Node routing summary"),
}


def main(argv=None) -> int:
    parser = build_arg_parser()
    parsed_args = parser.parse_args(argv)
    setup_logging(parsed_args)

    TunerLogger.debug(f"Arguments: {parsed_args}")

    control_flow = ControlFlow.DRYRUN if parsed_args.dryRun else ControlFlow.APPLY
    cancel_event = threading.Event()
    install_interrupt_handler(cancel_event)

    command, title = COMMANDS[parsed_args.command]
    try:
        settings_handler = SettingsFileHandler()
        if parsed_args.settingsFile:
            settings_handler.load_from_file(parsed_args.settingsFile)

        platform_name = get_platform_name()
        tuner = get_platform_tuner(platform_name, debug=parsed_args.debug)
        profile = probe(platform_name, tuner)
        if control_flow.should_apply() and not tuner.is_privileged():
            TunerLogger.warning("Not running as root; privileged steps will fail unless sudo -n is allowed")

        report = command(parsed_args, settings_handler, tuner, profile, control_flow, cancel_event)
    except UnsupportedPlatformError as e:
        TunerLogger.error(str(e))
        return EXIT_UNSUPPORTED
    except (ConfigValueValidationError, FileOperationError) as e:
        TunerLogger.error(f"Invalid configuration: {e}")
        return EXIT_UNSUPPORTED
    except KeyboardInterrupt:
        TunerLogger.error("Interrupted")
        return EXIT_CANCELLED

    print(format_run_summary(report, title))
    return exit_code_for(report)


if __name__ == "__main__":
    sys.exit(main())
