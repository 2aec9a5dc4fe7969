#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Arguments for node routing mode (macOS)
"""

from hubtune.tuner.args.basic_args import add_dry_run_arg


def add_node_args(subparsers):
    parser = subparsers.add_parser(
        "node",
        help="Route all IPv4 traffic through the tunnel interface (macOS)",
        description="Pin the hub route to the physical gateway and split the default route over the tunnel",
    )
    add_dry_run_arg(parser)
    nodeArgGroup = parser.add_argument_group("Node Options")
    nodeArgGroup.add_argument(
        "--hub",
        dest="hub",
        metavar="HOST[:PORT]",
        required=True,
        help="Hub address; the port, if given, is ignored for routing",
    )
    nodeArgGroup.add_argument(
        "--tunnel-interface",
        dest="tunnelInterface",
        metavar="NAME",
        required=True,
        help="Tunnel interface carrying the split default routes (e.g. utun4)",
    )
    nodeArgGroup.add_argument(
        "--cleanup",
        dest="cleanup",
        action="store_true",
        default=False,
        help="Remove the split default routes instead of installing them",
    )
    return parser
