#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Shared handling for steps that are nothing more than a list of sysctl writes."""

from dataclasses import dataclass
from typing import Sequence, Tuple, Union

from hubtune.tuner.configs.constants.enums import StepOutcome
from hubtune.tuner.platforms.base import BaseTuner
from hubtune.tuner.utils.exceptions import CommandFailedError
from hubtune.tuner.utils.logger_utils import TunerLogger


@dataclass(frozen=True)
class SysctlSetting:
    key: str
    value: Union[int, str]
    # an optional knob may be missing from older kernels; rejection is not a failure
    optional: bool = False

    def __str__(self) -> str:
        return f"{self.key}={self.value}"


def apply_sysctl_settings(tuner: BaseTuner, settings: Sequence[SysctlSetting]) -> Tuple[StepOutcome, str]:
    """Write each setting in order.

    A rejected required knob raises CommandFailedError out of the step. A rejected
    optional knob is noted in the detail; if every knob was optional and every
    write was rejected the step is SKIPPED.
    """
    applied = []
    rejected = []
    for setting in settings:
        try:
            tuner.write_sysctl(setting.key, setting.value)
            applied.append(str(setting))
        except CommandFailedError as e:
            if not setting.optional:
                raise
            TunerLogger.warning(f"Kernel rejected optional {setting.key}, skipping it: {e}")
            rejected.append(setting.key)

    if not applied:
        return StepOutcome.SKIPPED, f"kernel does not support {', '.join(rejected)}"

    detail = ", ".join(applied)
    if rejected:
        detail += f" (skipped unsupported: {', '.join(rejected)})"
    return StepOutcome.APPLIED, detail


def read_first_setting(tuner: BaseTuner, settings: Sequence[SysctlSetting]) -> str:
    return tuner.read_sysctl(settings[0].key)
