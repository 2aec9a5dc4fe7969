#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Host preparation pipeline for high-throughput relay hubs and nodes."""

from hubtune.hubtune_constants import HUBTUNE_VERSION

__version__ = HUBTUNE_VERSION
