"""Command line harness: resolve each argument and print the result.

Example:
  $ echodns --suffix .example.com 1.1.1.1 a2-3-4-5 example.org
  1.1.1.1: a1-1-1-1.example.com/1.1.1.1
  a2-3-4-5: a2-3-4-5.example.com/2.3.4.5
  Unknown host: example.org
"""

from __future__ import annotations

import argparse
import ipaddress
import logging
import sys
from typing import List, Optional, TextIO

from .config.config_parser import build_resolver, parse_config_file
from .config.logging_config import init_logging
from .errors import ConfigurationError, UnknownHostError
from .resolver import EchoResolver

logger = logging.getLogger("echodns.cli")

# Marks a host name that is not a canonical name for its address.
NOT_CANONICAL = "[!c]"


def describe(resolver: EchoResolver, arg: str) -> str:
    """Brief: Resolve one argument and format it as ``arg: name/address``.

    Inputs:
      - resolver: EchoResolver to query.
      - arg: Host name or IP literal.

    Outputs:
      - str result line.

    Raises:
      - UnknownHostError: when arg is a name nothing can resolve.
    """

    try:
        address = ipaddress.ip_address(arg)
    except ValueError:
        first = resolver.resolve_forward(arg)[0]
        address, hostname = first.address, first.hostname
    else:
        hostname = str(address)

    canonical = resolver.resolve_reverse(address)
    if canonical is None:
        canonical = hostname + NOT_CANONICAL
    return f"{arg}: {canonical}/{address}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="echodns",
        description="Resolve host names and addresses through the echodns canonical-name resolver",
    )
    parser.add_argument("names", nargs="+", metavar="NAME", help="Host names or IP addresses")
    parser.add_argument("--config", help="Path to YAML config")
    parser.add_argument(
        "--suffix",
        default=None,
        help="Suffix appended to canonical names (overrides ECHODNS_SUFFIX and the config file)",
    )
    parser.add_argument(
        "--delegate",
        action="append",
        default=[],
        metavar="ALIAS",
        help="Append a delegate resolver (alias or dotted class path); repeatable",
    )
    parser.add_argument(
        "--no-native",
        action="store_true",
        help="Do not consult the system resolver for the local host name",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level: debug, info, warn, error, crit",
    )
    return parser


def main(argv: Optional[List[str]] = None, out: Optional[TextIO] = None) -> int:
    """
    Entry point for the echodns command.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).
        out: Stream receiving result lines (defaults to sys.stdout).

    Returns:
        0 when every argument resolved, 1 when any did not, 2 on invalid
        configuration.
    """
    args = build_parser().parse_args(argv)
    out = out or sys.stdout

    try:
        cfg = parse_config_file(args.config) if args.config else {}
        log_cfg = dict(cfg.get("logging") or {})
        if args.log_level:
            log_cfg["level"] = args.log_level
        init_logging(log_cfg)
        if args.no_native:
            cfg.setdefault("echodns", {})["native"] = False
        resolver = build_resolver(
            cfg, cli_suffix=args.suffix, extra_delegates=args.delegate
        )
    except ConfigurationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    return report(resolver, args.names, out)


def report(resolver: EchoResolver, names: List[str], out: TextIO) -> int:
    """Brief: Print one result line per name.

    Inputs:
      - resolver: EchoResolver to query.
      - names: Host names or IP literals, in order.
      - out: Stream receiving the lines.

    Outputs:
      - int: 0 when every name resolved, 1 otherwise.
    """

    status = 0
    for arg in names:
        try:
            line = describe(resolver, arg)
        except UnknownHostError as exc:
            logger.debug("%s", exc)
            line = f"Unknown host: {arg}"
            status = 1
        print(line, file=out)
    return status
