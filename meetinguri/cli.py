"""Command-line entry point for parsing and building meeting URIs."""

from __future__ import annotations

import argparse
from dataclasses import asdict
import json
import logging
import sys

from meetinguri.config import get_settings
from meetinguri.meeting import parse_uri_string
from meetinguri.properties import URLPropertiesError
from meetinguri.scheme import fix_uri_scheme
from meetinguri.standard import parse_standard_uri_string
from meetinguri.stringify import URIJoinError, url_object_to_string

logger = logging.getLogger("meetinguri.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="meetinguri", description="Parse and build meeting URIs")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Print the parsed fields of a URI as JSON")
    parse_cmd.add_argument("uri")
    parse_cmd.add_argument(
        "--standard",
        action="store_true",
        help="Skip scheme fixing and room extraction",
    )

    fix_cmd = subparsers.add_parser("fix-scheme", help="Print a URI with its scheme fixed")
    fix_cmd.add_argument("uri")

    stringify_cmd = subparsers.add_parser(
        "stringify", help="Build a URI from a JSON property bag"
    )
    stringify_cmd.add_argument(
        "properties",
        nargs="?",
        help="JSON object (read from stdin when omitted)",
    )
    return parser


def _run_parse(args: argparse.Namespace, indent: int | None) -> int:
    if args.standard:
        record = parse_standard_uri_string(args.uri)
    else:
        record = parse_uri_string(args.uri)
    print(json.dumps(asdict(record), indent=indent))
    return 0


def _run_stringify(args: argparse.Namespace) -> int:
    raw = args.properties if args.properties is not None else sys.stdin.read()
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        print(f"error: invalid JSON: {exc}", file=sys.stderr)
        return 1
    if not isinstance(payload, dict):
        print("error: properties must be a JSON object", file=sys.stderr)
        return 1

    try:
        uri = url_object_to_string(payload)
    except URLPropertiesError as exc:
        for error in exc.errors:
            print(f"error: {error['field']}: {error['message']}", file=sys.stderr)
        return 1
    except URIJoinError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if uri is None:
        print("error: no URI could be built", file=sys.stderr)
        return 1
    print(uri)
    return 0


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.WARNING),
        format=settings.log_format,
    )

    args = build_parser().parse_args(argv)
    logger.debug("command=%s", args.command)

    if args.command == "parse":
        return _run_parse(args, settings.json_indent)
    if args.command == "fix-scheme":
        print(fix_uri_scheme(args.uri))
        return 0
    return _run_stringify(args)


if __name__ == "__main__":
    raise SystemExit(main())
