"""
Mantissa Attribution CLI entry point.

This module provides the command-line interface for Attribution.
"""

from __future__ import annotations

import argparse
import logging
import sys

from attribution import __version__
from attribution.cli_notice import (
    add_notice_parser,
    add_resolve_parser,
    add_views_parser,
    cmd_notice,
    cmd_resolve,
    cmd_views,
)


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="attribution",
        description="Mantissa Attribution - License resolution and NOTICE generation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"attribution {__version__}",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be repeated)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    add_resolve_parser(subparsers)
    add_notice_parser(subparsers)
    add_views_parser(subparsers)

    subparsers.add_parser("version", help="Show version information")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Configure logging based on verbosity
    if args.verbose:
        level = logging.DEBUG if args.verbose > 1 else logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "version":
        print(f"Mantissa Attribution version {__version__}")
        return 0

    # Route to command handlers
    command_handlers = {
        "resolve": cmd_resolve,
        "notice": cmd_notice,
        "views": cmd_views,
    }

    handler = command_handlers.get(args.command)
    if handler:
        return handler(args)

    print(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
