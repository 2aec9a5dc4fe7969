#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Arguments for gateway mode (Linux hub)
"""

from hubtune.tuner.args.basic_args import add_dry_run_arg


def add_gateway_args(subparsers):
    parser = subparsers.add_parser(
        "gateway",
        help="Enable NAT gateway mode for the hub's internal subnet (Linux)",
        description="Forward and masquerade the internal tunnel subnet out the WAN interface",
    )
    add_dry_run_arg(parser)
    gatewayArgGroup = parser.add_argument_group("Gateway Options")
    gatewayArgGroup.add_argument(
        "--subnet",
        dest="subnet",
        metavar="CIDR",
        required=True,
        help="Internal IPv4 subnet to masquerade (e.g. 10.0.0.0/24)",
    )
    gatewayArgGroup.add_argument(
        "--mtu",
        dest="mtu",
        metavar="N",
        type=int,
        default=None,
        help="MTU for the internal interface (default 1280)",
    )
    gatewayArgGroup.add_argument(
        "--internal-interface",
        dest="internalInterface",
        metavar="NAME",
        default=None,
        help="Internal tunnel interface (default m13hub0)",
    )
    return parser
