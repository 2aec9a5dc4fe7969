#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Custom exceptions for the hub tuner."""

from typing import List, Optional


class HubTuneError(Exception):
    """Base class for tuner errors."""

    pass


class UnsupportedPlatformError(HubTuneError):
    """Raised when the host OS is neither Linux nor macOS."""

    def __init__(self, platform_name: str, message: Optional[str] = None):
        super().__init__(message or f"Platform '{platform_name}' is not supported")
        self.platform_name = platform_name


class InsufficientPrivilegeError(HubTuneError, PermissionError):
    """Raised when a mutation needs elevated privileges the process does not have."""

    def __init__(self, action: str):
        super().__init__(f"Elevated privileges required to {action}")
        self.action = action


class CapabilityUnavailableError(HubTuneError):
    """Raised when hardware, driver, kernel or tooling does not support a request."""

    def __init__(self, capability: str, message: Optional[str] = None):
        super().__init__(message or f"{capability} is not available on this host")
        self.capability = capability


class CommandFailedError(HubTuneError):
    """Raised when an external tool exits non-zero."""

    def __init__(self, command: List[str], retcode: int, output: Optional[List[str]] = None):
        self.command = list(command)
        self.retcode = retcode
        self.output = list(output or [])
        detail = "; ".join(line for line in self.output if line.strip())
        super().__init__(
            f"{' '.join(self.command)} returned {retcode}" + (f": {detail}" if detail else "")
        )


class VerificationMismatch(HubTuneError):
    """Informational: a read-back value differs from the requested one. Never escalated."""

    def __init__(self, step_id: str, expected: Optional[str], observed: Optional[str]):
        super().__init__(f"{step_id}: requested '{expected}', observed '{observed}'")
        self.step_id = step_id
        self.expected = expected
        self.observed = observed


class ConfigValueValidationError(HubTuneError):
    """Raised when a configuration value fails validation."""

    def __init__(self, key: str, value: any, message: str):
        super().__init__(f"Invalid value for '{key}': {message} (value was '{value}').")
        self.key = key
        self.value = value


class FileOperationError(HubTuneError):
    """Raised for errors during settings file operations (load/save)."""

    pass
