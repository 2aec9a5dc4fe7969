#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

import os
import sys

from collections.abc import Iterable


###################################################################################################
# print to stderr
def eprint(*args, **kwargs):
    filtered = [x for x in args if x is not None]
    print(*filtered, file=sys.stderr, **kwargs)
    sys.stderr.flush()


###################################################################################################
# flatten a collection, but don't split strings
def flatten(coll):
    for i in coll:
        if isinstance(i, Iterable) and not isinstance(i, str):
            for subc in flatten(i):
                yield subc
        else:
            yield i


###################################################################################################
# if the object is an iterable, return it, otherwise return a tuple with it as a single element.
# useful if you want to user either a scalar or an array in a loop, etc.
def get_iterable(x):
    if isinstance(x, Iterable) and not isinstance(x, str):
        return x
    else:
        return (x,)


###################################################################################################
# read the first line of a (proc/sys) file, stripped, or None if it can't be read
def file_first_line(filename):
    try:
        with open(filename, "r") as f:
            return f.readline().strip()
    except OSError:
        return None


###################################################################################################
# determine if a program/script exists and is executable in the system path
def which(cmd, debug=False):
    result = any(
        os.access(os.path.join(path, cmd), os.X_OK)
        for path in os.environ.get("PATH", "").split(os.pathsep)
        if path
    )
    if debug:
        eprint(f"which {cmd} returned {result}")
    return result


###################################################################################################
# the CPU affinity mask (hex string, no prefix) selecting exactly one core
def cpu_mask_for_core(core: int) -> str:
    if core < 0:
        raise ValueError(f"CPU core must be non-negative (got {core})")
    return format(1 << core, "x")
