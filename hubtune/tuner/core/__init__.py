#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Core components for hubtune.

The host probe, step and result types, the step executor and the pipeline
runner. The platform catalogs live in catalog.py and are imported directly.
"""

from .host_profile import HostProfile, probe
from .step import StepResult, TuningStep
from .executor import execute
from .pipeline import PipelineRunner, RunReport, filter_catalog

__all__ = [
    "HostProfile",
    "probe",
    "StepResult",
    "TuningStep",
    "execute",
    "PipelineRunner",
    "RunReport",
    "filter_catalog",
]
