"""
Data models for Mantissa Attribution.

This package contains the core data models used throughout the
attribution pipeline:
- Identifier, Provenance, TextLocation: keys for packages and findings
- LicenseFinding, CopyrightFinding, Findings, LicenseInfo: raw evidence
- LicenseFindingCuration, PathExclude, CopyrightGarbage: operator rules
"""

from __future__ import annotations

from attribution.models.identifier import (
    Identifier,
    Provenance,
    ProvenanceKind,
    TextLocation,
    UNKNOWN_LINE,
)
from attribution.models.finding import (
    LicenseSource,
    LicenseFinding,
    CopyrightFinding,
    Findings,
    LicenseInfo,
)
from attribution.models.config import (
    NONE_LICENSE,
    PathExcludeReason,
    PathExclude,
    LicenseFindingCurationReason,
    LicenseFindingCuration,
    CopyrightGarbage,
)

__all__ = [
    # Identity
    "Identifier",
    "Provenance",
    "ProvenanceKind",
    "TextLocation",
    "UNKNOWN_LINE",
    # Findings
    "LicenseSource",
    "LicenseFinding",
    "CopyrightFinding",
    "Findings",
    "LicenseInfo",
    # Rules
    "NONE_LICENSE",
    "PathExcludeReason",
    "PathExclude",
    "LicenseFindingCurationReason",
    "LicenseFindingCuration",
    "CopyrightGarbage",
]
