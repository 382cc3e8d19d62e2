"""
Mantissa Attribution - License resolution and NOTICE generation

Resolves the licenses and copyrights of packages from declared metadata,
scanner findings and concluded licenses, and compiles them into a
reproducible NOTICE document.

Key Features:
- SPDX license expressions parsed and normalized
- License finding curations, path excludes and copyright garbage
- Equivalent copyright statements merged across years and spelling
- Byte-identical NOTICE output for identical inputs

Quick Start:
    >>> from attribution.licenses import LicenseInfoResolver
    >>> from attribution.notice import MappingLicenseTextProvider, NoticeBuilder
    >>>
    >>> batch = LicenseInfoResolver(license_infos).resolve_all()
    >>> builder = NoticeBuilder(MappingLicenseTextProvider({"MIT": mit_text}))
    >>> print(builder.build(batch.results.values()).text)
"""

from __future__ import annotations

__version__ = "0.1.0"
__author__ = "Mantissa"

from attribution.errors import (
    AttributionError,
    ConfigurationError,
    InvalidArgumentError,
    InvalidLicenseExpressionError,
    ResolutionTimeoutError,
)
from attribution.models import (
    CopyrightFinding,
    CopyrightGarbage,
    Findings,
    Identifier,
    LicenseFinding,
    LicenseFindingCuration,
    LicenseInfo,
    LicenseSource,
    PathExclude,
    Provenance,
    TextLocation,
)

__all__ = [
    "__version__",
    # Errors
    "AttributionError",
    "ConfigurationError",
    "InvalidArgumentError",
    "InvalidLicenseExpressionError",
    "ResolutionTimeoutError",
    # Models
    "CopyrightFinding",
    "CopyrightGarbage",
    "Findings",
    "Identifier",
    "LicenseFinding",
    "LicenseFindingCuration",
    "LicenseInfo",
    "LicenseSource",
    "PathExclude",
    "Provenance",
    "TextLocation",
]
