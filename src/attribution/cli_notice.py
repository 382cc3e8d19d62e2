"""
CLI commands for license resolution and NOTICE generation.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from attribution.analysis import AnalysisInput
from attribution.config import NoticeConfiguration, load_configuration
from attribution.errors import AttributionError
from attribution.licenses import LICENSE_VIEWS, LicenseInfoResolver, LicenseView
from attribution.licenses.resolver import BatchResolution
from attribution.notice import DirectoryLicenseTextProvider, NoticeBuilder

logger = logging.getLogger(__name__)


def add_resolve_parser(subparsers: Any) -> None:
    """Add the resolve command to the CLI."""
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Resolve the licenses of all packages",
        description="Resolve licenses and copyrights of every package in an analysis input file.",
    )
    resolve_parser.add_argument(
        "input",
        help="Analysis input file (JSON or YAML)",
    )
    resolve_parser.add_argument(
        "--config",
        "-c",
        help="Configuration file with curations, path excludes and copyright garbage",
    )
    resolve_parser.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format",
    )


def add_notice_parser(subparsers: Any) -> None:
    """Add the notice command to the CLI."""
    notice_parser = subparsers.add_parser(
        "notice",
        help="Generate a NOTICE document",
        description="Generate a plain-text NOTICE document from an analysis input file.",
    )
    notice_parser.add_argument(
        "input",
        help="Analysis input file (JSON or YAML)",
    )
    notice_parser.add_argument(
        "--config",
        "-c",
        help="Configuration file with curations, path excludes and copyright garbage",
    )
    notice_parser.add_argument(
        "--output",
        "-o",
        help="Output file path (default: stdout)",
    )
    notice_parser.add_argument(
        "--license-texts",
        nargs="+",
        metavar="DIR",
        help="Directories containing license text files named by SPDX identifier",
    )
    notice_parser.add_argument(
        "--view",
        choices=sorted(LICENSE_VIEWS),
        type=str.upper,
        help="License view selecting the reported license sources (default: ALL)",
    )
    notice_parser.add_argument(
        "--include-excluded",
        action="store_true",
        help="Keep excluded locations and copyrights in the notice",
    )


def add_views_parser(subparsers: Any) -> None:
    """Add the views command to the CLI."""
    subparsers.add_parser(
        "views",
        help="List available license views",
    )


def _load(args: argparse.Namespace) -> tuple[AnalysisInput, NoticeConfiguration]:
    config = load_configuration(getattr(args, "config", None))
    analysis = AnalysisInput.from_file(args.input)
    return analysis, config


def _resolve(analysis: AnalysisInput, config: NoticeConfiguration) -> BatchResolution:
    resolver = LicenseInfoResolver(
        analysis.license_infos,
        curations=config.curations,
        path_excludes=config.path_excludes,
        copyright_garbage=config.copyright_garbage,
    )
    return resolver.resolve_all(max_workers=config.max_workers, timeout=config.timeout)


def cmd_resolve(args: argparse.Namespace) -> int:
    """Resolve the licenses of all packages and print them."""
    try:
        analysis, config = _load(args)
        batch = _resolve(analysis, config)
    except AttributionError as e:
        print(f"Error resolving licenses: {e}", file=sys.stderr)
        return 1

    if args.json:
        output = {
            "packages": [info.to_dict() for info in batch.results.values()],
            "errors": {
                id.to_coordinates(): str(error) for id, error in batch.errors.items()
            },
            "license_file_errors": {
                id.to_coordinates(): str(error)
                for id, error in analysis.license_file_errors.items()
            },
        }
        print(json.dumps(output, indent=2))
    else:
        for id, info in batch.results.items():
            excluded = " (excluded)" if id in analysis.excluded_ids else ""
            print(f"\n{id}{excluded}:")
            print("-" * 50)
            if not info.licenses:
                print("  No licenses found")
            for resolved in info:
                sources = ", ".join(sorted(s.value for s in resolved.sources))
                print(f"  {resolved.license} [{sources}]")
                for copyright in resolved.get_copyrights():
                    print(f"    {copyright}")

        for id, error in batch.errors.items():
            print(f"\n{id}: FAILED - {error.reason}")
        for id, error in analysis.license_file_errors.items():
            print(f"\n{id}: INVALID LICENSE FILES - {error.reason}")

        print()
        print(batch.summary())

    return 0 if batch.is_success and not analysis.license_file_errors else 1


def cmd_notice(args: argparse.Namespace) -> int:
    """Generate a NOTICE document."""
    try:
        analysis, config = _load(args)
        config = config.with_overrides(
            license_view=args.view,
            license_text_dirs=tuple(args.license_texts) if args.license_texts else None,
            omit_excluded=False if args.include_excluded else None,
        )
        batch = _resolve(analysis, config)
    except AttributionError as e:
        print(f"Error generating notice: {e}", file=sys.stderr)
        return 1

    builder = NoticeBuilder(
        DirectoryLicenseTextProvider(config.license_text_dirs),
        license_view=config.license_view,
        omit_excluded=config.omit_excluded,
        headers=config.report.headers,
        footers=config.report.footers,
    )
    document = builder.build(
        batch.results.values(),
        excluded_ids=analysis.excluded_ids | set(config.excluded_packages),
        license_files=analysis.license_files,
    )

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8", newline="\n") as f:
            f.write(document.text)
        print(f"Notice written to {args.output}")
        print(f"Licenses: {len(document.licenses)}")
        if document.warnings:
            print(f"Missing license texts: {len(document.warnings)}")
    else:
        sys.stdout.write(document.text)

    for id, error in batch.errors.items():
        print(f"Failed to resolve {id}: {error.reason}", file=sys.stderr)
    for id, error in analysis.license_file_errors.items():
        print(f"Ignored license files of {id}: {error.reason}", file=sys.stderr)

    return 0 if batch.is_success and not analysis.license_file_errors else 1


def cmd_views(args: argparse.Namespace) -> int:
    """List the available license views."""
    for name in LICENSE_VIEWS:
        view = LicenseView.by_name(name)
        source_sets = " -> ".join(
            "+".join(sorted(s.value for s in sources)) for sources in view.source_sets
        )
        print(f"  {name:<36} {source_sets}")
    return 0
