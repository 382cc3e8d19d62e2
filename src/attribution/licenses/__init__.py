"""
License resolution for Mantissa Attribution.

Resolves the final licenses and copyrights of packages from declared,
detected and concluded evidence.

Key Components:
- SpdxExpressionParser: Parses and normalizes SPDX license expressions
- CopyrightStatementsNormalizer: Groups equivalent copyright statements
- PathExcludeMatcher: Matches paths against path excludes
- LicenseFindingCurator: Applies curations to detected license findings
- CopyrightGarbageFilter: Discards known-noise copyright statements
- LicenseResolver: Resolves the license info of a single package
- LicenseInfoResolver: Resolves many packages with caching and error collection
- merge_licenses: Merges resolved licenses across packages

Example:
    from attribution.licenses import LicenseInfoResolver, merge_by_license

    resolver = LicenseInfoResolver(license_infos, curations, path_excludes, garbage)
    batch = resolver.resolve_all()

    for id, info in batch.results.items():
        for resolved in info:
            print(id, resolved.license, resolved.get_copyrights())
"""

from attribution.licenses.spdx import (
    SpdxExpression,
    SpdxLicense,
    SpdxWithException,
    SpdxCompound,
    SpdxExpressionParser,
    parse_expression,
    normalize_expression,
    is_valid_expression,
)
from attribution.licenses.declared import (
    LICENSE_ALIASES,
    DeclaredLicenseProcessor,
    ProcessedDeclaredLicense,
)
from attribution.licenses.copyright import (
    CopyrightStatementsNormalizer,
    normalize_statements,
)
from attribution.licenses.excludes import (
    PathExcludeMatcher,
    glob_matches,
)
from attribution.licenses.curations import (
    CurationResult,
    LicenseFindingCurator,
    apply_curations,
)
from attribution.licenses.garbage import CopyrightGarbageFilter
from attribution.licenses.resolved import (
    ResolvedCopyrightFinding,
    ResolvedCopyright,
    ResolvedLicenseLocation,
    ResolvedLicense,
    ResolvedLicenseInfo,
)
from attribution.licenses.views import (
    LicenseView,
    LICENSE_VIEWS,
)
from attribution.licenses.merge import (
    merge_licenses,
    merge_by_license,
)
from attribution.licenses.license_files import (
    ResolvedLicenseFile,
    ResolvedLicenseFileInfo,
    licenses_not_in_license_files,
)
from attribution.licenses.resolver import (
    LicenseResolver,
    LicenseInfoResolver,
    BatchResolution,
    resolve_license_info,
)

__all__ = [
    # SPDX
    "SpdxExpression",
    "SpdxLicense",
    "SpdxWithException",
    "SpdxCompound",
    "SpdxExpressionParser",
    "parse_expression",
    "normalize_expression",
    "is_valid_expression",
    # Declared licenses
    "LICENSE_ALIASES",
    "DeclaredLicenseProcessor",
    "ProcessedDeclaredLicense",
    # Copyrights
    "CopyrightStatementsNormalizer",
    "normalize_statements",
    "CopyrightGarbageFilter",
    # Excludes and curations
    "PathExcludeMatcher",
    "glob_matches",
    "CurationResult",
    "LicenseFindingCurator",
    "apply_curations",
    # Resolved model
    "ResolvedCopyrightFinding",
    "ResolvedCopyright",
    "ResolvedLicenseLocation",
    "ResolvedLicense",
    "ResolvedLicenseInfo",
    "LicenseView",
    "LICENSE_VIEWS",
    # Merge
    "merge_licenses",
    "merge_by_license",
    # License files
    "ResolvedLicenseFile",
    "ResolvedLicenseFileInfo",
    "licenses_not_in_license_files",
    # Resolver
    "LicenseResolver",
    "LicenseInfoResolver",
    "BatchResolution",
    "resolve_license_info",
]
