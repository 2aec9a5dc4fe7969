#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

from .basic_args import add_basic_args, add_dry_run_arg
from .gateway_args import add_gateway_args
from .node_args import add_node_args
from .tune_args import add_tune_args

__all__ = [
    "add_basic_args",
    "add_dry_run_arg",
    "add_gateway_args",
    "add_node_args",
    "add_tune_args",
]
