"""
License finding curation for Mantissa Attribution.

Applies location-scoped corrections to detected license findings.

When several curations match the same finding, the one with the most
specific path pattern wins, measured by the length of the literal
prefix of the pattern (the text before its first wildcard). Curations
with equally long prefixes are ranked by declaration order and the
first one wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from attribution.errors import InvalidLicenseExpressionError
from attribution.licenses.excludes import glob_matches
from attribution.licenses.spdx import normalize_expression
from attribution.models import LicenseFinding, LicenseFindingCuration, Provenance

logger = logging.getLogger(__name__)

_GLOB_CHARS = "*?["


def literal_prefix(pattern: str) -> str:
    """Return the part of a glob pattern before its first wildcard."""
    positions = [pattern.find(char) for char in _GLOB_CHARS if char in pattern]
    if not positions:
        return pattern
    return pattern[: min(positions)]


@dataclass(frozen=True)
class CurationResult:
    """
    Result of curating a license finding.

    Attributes:
        license: Resulting license expression, None if the finding was removed
        applied_curation: Curation that was applied, if any
        original_license: License expression before curation
    """

    license: str | None
    applied_curation: LicenseFindingCuration | None
    original_license: str

    @property
    def is_removed(self) -> bool:
        """Check if the finding was removed by a curation."""
        return self.license is None

    @property
    def is_changed(self) -> bool:
        """Check if a curation changed the license text."""
        return self.applied_curation is not None and self.license != self.original_license


class LicenseFindingCurator:
    """
    Applies license finding curations to detected license findings.

    A curation matches a finding if:
    - its provenance scope is unset or equal to the finding's provenance
    - its path pattern matches the finding's path
    - start_lines, if set, contains the finding's start line
    - line_count, if set, equals the finding's line count
    - detected_license, if set, equals the finding's license
    """

    def __init__(self, curations: Iterable[LicenseFindingCuration] = ()):
        """
        Initialize the curator.

        Args:
            curations: Curations in declaration order
        """
        self._curations = tuple(curations)

    @property
    def curations(self) -> tuple[LicenseFindingCuration, ...]:
        """Get configured curations."""
        return self._curations

    def matching_curations(
        self,
        finding: LicenseFinding,
        provenance: Provenance,
    ) -> list[LicenseFindingCuration]:
        """
        Find all curations matching a finding.

        Args:
            finding: Detected license finding
            provenance: Provenance of the finding

        Returns:
            Matching curations in declaration order
        """
        license = normalize_expression(finding.license)
        return [
            curation
            for curation in self._curations
            if self._matches(curation, finding, license, provenance)
        ]

    def select(
        self,
        finding: LicenseFinding,
        provenance: Provenance,
    ) -> LicenseFindingCuration | None:
        """
        Select the curation to apply to a finding.

        Returns:
            Most specific matching curation, or None if none match
        """
        selected: LicenseFindingCuration | None = None
        selected_prefix = -1

        for curation in self.matching_curations(finding, provenance):
            prefix = len(literal_prefix(curation.path))
            if prefix > selected_prefix:
                selected = curation
                selected_prefix = prefix

        return selected

    def apply(
        self,
        finding: LicenseFinding,
        provenance: Provenance | None = None,
    ) -> CurationResult:
        """
        Apply curations to a finding.

        Args:
            finding: Detected license finding
            provenance: Provenance of the finding (defaults to unknown)

        Returns:
            CurationResult with the resulting license and applied curation

        Raises:
            InvalidLicenseExpressionError: If a license expression is invalid
        """
        provenance = provenance if provenance is not None else Provenance.unknown()
        original = normalize_expression(finding.license)
        curation = self.select(finding, provenance)

        if curation is None:
            return CurationResult(license=original, applied_curation=None, original_license=original)

        if curation.removes_finding:
            logger.debug(
                f"Curation for '{curation.path}' removes {original} at {finding.location}"
            )
            return CurationResult(license=None, applied_curation=curation, original_license=original)

        curated = normalize_expression(curation.concluded_license or "")
        logger.debug(
            f"Curation for '{curation.path}' changes {original} to {curated} at {finding.location}"
        )
        return CurationResult(license=curated, applied_curation=curation, original_license=original)

    def _matches(
        self,
        curation: LicenseFindingCuration,
        finding: LicenseFinding,
        license: str,
        provenance: Provenance,
    ) -> bool:
        if curation.provenance is not None and curation.provenance != provenance:
            return False
        if not glob_matches(curation.path, finding.location.path):
            return False
        if curation.start_lines and finding.location.start_line not in curation.start_lines:
            return False
        if curation.line_count is not None and curation.line_count != finding.location.line_count:
            return False
        if curation.detected_license is not None:
            return self._same_license(curation.detected_license, license)
        return True

    def _same_license(self, expected: str, license: str) -> bool:
        try:
            return normalize_expression(expected) == license
        except InvalidLicenseExpressionError:
            return expected.strip() == license


def apply_curations(
    finding: LicenseFinding,
    curations: Iterable[LicenseFindingCuration],
    provenance: Provenance | None = None,
) -> CurationResult:
    """
    Apply curations to a finding.

    Convenience function for one-off curation.
    """
    return LicenseFindingCurator(curations).apply(finding, provenance)
