"""
Pytest configuration and fixtures for Mantissa Attribution tests.

This module provides common fixtures used across unit and integration tests.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from attribution.models import (
    CopyrightFinding,
    CopyrightGarbage,
    Findings,
    Identifier,
    LicenseFinding,
    LicenseFindingCuration,
    LicenseInfo,
    PathExclude,
    PathExcludeReason,
    Provenance,
    ProvenanceKind,
    TextLocation,
)
from attribution.notice import MappingLicenseTextProvider


MIT_TEXT = "Permission is hereby granted, free of charge, to any person.\n"
APACHE_TEXT = "Licensed under the Apache License, Version 2.0.\n"
BSD_TEXT = "Redistribution and use in source and binary forms are permitted.\n"


# Helpers


def _license_finding(license: str, path: str, start_line: int = 1, end_line: int = 2) -> LicenseFinding:
    """Create a detected license finding."""
    return LicenseFinding(license, TextLocation(path, start_line, end_line))


def _copyright_finding(statement: str, path: str, start_line: int = 1, end_line: int = 1) -> CopyrightFinding:
    """Create a detected copyright finding."""
    return CopyrightFinding(statement, TextLocation(path, start_line, end_line))


# Sample data fixtures


@pytest.fixture
def provenance() -> Provenance:
    """Return an artifact provenance for testing."""
    return Provenance(
        kind=ProvenanceKind.ARTIFACT,
        url="https://registry.example.org/pkg-1.0.0.tgz",
        hash="0123abcd",
    )


@pytest.fixture
def repository_provenance() -> Provenance:
    """Return a repository provenance for testing."""
    return Provenance(
        kind=ProvenanceKind.REPOSITORY,
        url="https://github.com/example/pkg.git",
        revision="v1.0.0",
    )


@pytest.fixture
def package_id() -> Identifier:
    """Return a sample package identifier."""
    return Identifier("NPM", "", "pkg", "1.0.0")


@pytest.fixture
def other_package_id() -> Identifier:
    """Return a second package identifier."""
    return Identifier("Maven", "org.example", "lib", "2.1")


@pytest.fixture
def mit_license_info(package_id: Identifier, provenance: Provenance) -> LicenseInfo:
    """Return license info with one MIT finding and one copyright in the same file."""
    return LicenseInfo(
        id=package_id,
        detected=(
            Findings(
                provenance=provenance,
                licenses=(_license_finding("MIT", "a.txt", 1, 2),),
                copyrights=(_copyright_finding("Copyright 2020 Alice", "a.txt", 1, 1),),
            ),
        ),
    )


@pytest.fixture
def rich_license_info(package_id: Identifier, provenance: Provenance) -> LicenseInfo:
    """Return license info mixing declared, detected and concluded evidence."""
    return LicenseInfo(
        id=package_id,
        declared_licenses=("The MIT License", "Apache-2.0"),
        concluded_license="MIT",
        detected=(
            Findings(
                provenance=provenance,
                licenses=(
                    _license_finding("MIT", "LICENSE", 1, 20),
                    _license_finding("BSD-3-Clause", "vendor/lib.c", 1, 30),
                    _license_finding("GPL-2.0-only", "test/fixture.c", 3, 5),
                ),
                copyrights=(
                    _copyright_finding("Copyright (c) 2019-2020 Alice", "LICENSE", 1),
                    _copyright_finding("Copyright 2019, 2020 Alice.", "LICENSE", 2),
                    _copyright_finding("Copyright 2001 Bob", "vendor/lib.c", 1),
                    _copyright_finding("Copyright (c) <year> <owner>", "vendor/lib.c", 2),
                    _copyright_finding("Copyright 2015 Carol", "README.md", 10),
                ),
            ),
        ),
    )


@pytest.fixture
def path_exclude_tests() -> PathExclude:
    """Return a path exclude for test directories."""
    return PathExclude(
        pattern="**/test/**",
        reason=PathExcludeReason.TEST_OF,
        comment="Test data is not distributed.",
    )


@pytest.fixture
def copyright_garbage() -> CopyrightGarbage:
    """Return garbage containing a template placeholder statement."""
    return CopyrightGarbage.of(["Copyright (c) <year> <owner>"])


@pytest.fixture
def remove_gpl_curation() -> LicenseFindingCuration:
    """Return a curation removing a GPL false positive."""
    return LicenseFindingCuration(
        path="test/fixture.c",
        concluded_license=None,
        detected_license="GPL-2.0-only",
        comment="Test fixture text, not a license.",
    )


@pytest.fixture
def license_texts() -> MappingLicenseTextProvider:
    """Return a license text provider with a few well-known licenses."""
    return MappingLicenseTextProvider(
        {
            "MIT": MIT_TEXT,
            "Apache-2.0": APACHE_TEXT,
            "BSD-3-Clause": BSD_TEXT,
        }
    )


@pytest.fixture
def license_text_dir(tmp_path: Path) -> Path:
    """Return a directory with license text files."""
    directory = tmp_path / "license-texts"
    directory.mkdir()
    (directory / "MIT").write_text(MIT_TEXT, encoding="utf-8")
    (directory / "Apache-2.0.txt").write_text(APACHE_TEXT, encoding="utf-8")
    return directory


@pytest.fixture
def analysis_data() -> dict[str, Any]:
    """Return a sample analysis input as a dictionary."""
    return {
        "packages": [
            {
                "id": "NPM::left-pad:1.3.0",
                "declared_licenses": ["MIT"],
                "findings": [
                    {
                        "provenance": {"kind": "artifact", "url": "https://example.org/left-pad.tgz"},
                        "licenses": [
                            {"license": "MIT", "location": {"path": "LICENSE", "start_line": 1, "end_line": 21}},
                        ],
                        "copyrights": [
                            {"statement": "Copyright (c) 2018 Jane Doe", "location": {"path": "LICENSE", "start_line": 3}},
                        ],
                    }
                ],
            },
            {
                "id": "Maven:org.example:lib:2.1",
                "declared_licenses": ["Apache License, Version 2.0"],
                "concluded_license": "Apache-2.0",
            },
            {
                "id": "NPM::dev-only:0.1.0",
                "declared_licenses": ["BSD-3-Clause"],
                "excluded": True,
            },
        ]
    }


@pytest.fixture
def analysis_file(tmp_path: Path, analysis_data: dict[str, Any]) -> Path:
    """Write the sample analysis input to a JSON file."""
    path = tmp_path / "analysis.json"
    path.write_text(json.dumps(analysis_data), encoding="utf-8")
    return path


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Write a sample YAML configuration file."""
    path = tmp_path / "config.yml"
    path.write_text(
        "\n".join(
            [
                "curations:",
                "  - path: 'test/**'",
                "    concluded_license: NONE",
                "    reason: code",
                "path_excludes:",
                "  - pattern: 'docs/**'",
                "    reason: documentation_of",
                "copyright_garbage:",
                "  - 'Copyright (c) <year> <owner>'",
                "excluded_packages:",
                "  - 'NPM::ignored:1.0'",
                "resolution:",
                "  max_workers: 2",
                "  timeout: 30",
                "report:",
                "  license_view: concluded_or_rest",
                "  omit_excluded: true",
                "  footers:",
                "    - 'Generated for release 1.0.'",
                "",
            ]
        ),
        encoding="utf-8",
    )
    return path
