#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

import sys
from datetime import datetime
from typing import Optional

from colorama import init as ColoramaInit, Fore, Style

from hubtune.tuner.configs.constants.enums import StepOutcome

ColoramaInit()


class TunerLogger:
    """A static logger for tuning steps with color-coded, simplified console output."""

    _console_output_enabled = True
    _main_log_file: Optional[str] = None
    _debug_enabled = False

    def __init__(self):
        """Constructor disabled - use static methods only."""
        raise NotImplementedError("TunerLogger is entirely static. Use static methods directly.")

    @classmethod
    def set_console_output(cls, enabled: bool):
        cls._console_output_enabled = enabled

    @classmethod
    def set_log_file(cls, main_log_file: Optional[str]):
        """Set the main log file for all logging operations."""
        cls._main_log_file = main_log_file

    @classmethod
    def set_debug_enabled(cls, enabled: bool):
        """Enable or disable debug-level logging."""
        cls._debug_enabled = enabled

    @classmethod
    def is_debug_enabled(cls) -> bool:
        return cls._debug_enabled

    @classmethod
    def generate_timestamped_filename(cls, base_name: str = "hubtune") -> str:
        """Generate a timestamped filename for logging."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return f"{base_name}_{timestamp}.log"

    @staticmethod
    def _log(label: str, color: str, message: str, file: object = None):
        """Log a message to console or file based on configuration."""
        timestamp = f"[{TunerLogger._timestamp()}]"

        if TunerLogger._main_log_file:
            formatted_message = f"{timestamp} ({label}) {message}\n"
            try:
                with open(TunerLogger._main_log_file, "a", encoding="utf-8") as f:
                    f.write(formatted_message)
            except OSError as e:
                # fall back to the console rather than losing the message
                print(f"{timestamp} (ERROR) Could not write log file: {e}", file=sys.stderr)
                print(f"{timestamp} ({label}) {message}", file=sys.stderr)
        elif TunerLogger._console_output_enabled:
            print(
                f"{timestamp} {color}({label}){Style.RESET_ALL} {message}",
                file=file or sys.stdout,
            )

    @staticmethod
    def start(label: str):
        """Log the start of a given step."""
        TunerLogger._log("START", Fore.BLUE, f"[{label}]")

    @staticmethod
    def end(label: str, status: StepOutcome, message: Optional[str] = None):
        """Log the end of a given step."""
        log_message = f"[{label}]"
        if message:
            log_message += f": {message}"

        if status == StepOutcome.APPLIED:
            TunerLogger._log("SUCCESS", Fore.GREEN, log_message)
        elif status == StepOutcome.SKIPPED:
            TunerLogger._log("SKIP", Fore.MAGENTA, log_message)
        else:  # FAILED
            TunerLogger._log("FAIL", Fore.RED, log_message, file=sys.stderr)

    @staticmethod
    def _timestamp() -> str:
        return datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    @staticmethod
    def info(message: str):
        """Log a simple info message."""
        TunerLogger._log("info", "", message)

    @staticmethod
    def warning(message: str):
        """Log a simple warning message."""
        TunerLogger._log("WARNING", Fore.YELLOW, message, file=sys.stderr)

    @staticmethod
    def error(message: str):
        """Log a simple error message."""
        TunerLogger._log("ERROR", Fore.RED, message, file=sys.stderr)

    @staticmethod
    def debug(message: str):
        """Log a debug message - only shown when debug is enabled."""
        if TunerLogger._debug_enabled:
            TunerLogger._log("DEBUG", Fore.CYAN, message)
