"""
Resolved license models for Mantissa Attribution.

The resolved model is the result of applying curations, path excludes,
garbage filtering and copyright normalization to the raw findings of a
package. It is a pure function of its inputs and keeps links back to
every original finding for audit purposes.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Iterator

from attribution.errors import InvalidArgumentError
from attribution.models import (
    CopyrightFinding,
    Identifier,
    LicenseFindingCuration,
    LicenseInfo,
    LicenseSource,
    PathExclude,
    Provenance,
    TextLocation,
)

if TYPE_CHECKING:
    from attribution.licenses.views import LicenseView


@dataclass(frozen=True)
class ResolvedCopyrightFinding:
    """
    A copyright finding with the path excludes matching its location.

    Attributes:
        statement: Original copyright statement
        location: Where the statement was found
        matching_path_excludes: Path excludes matching the location
    """

    statement: str
    location: TextLocation
    matching_path_excludes: tuple[PathExclude, ...] = ()

    @property
    def is_excluded(self) -> bool:
        """Check if the finding is hidden from non-audit views."""
        return bool(self.matching_path_excludes)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "statement": self.statement,
            "location": self.location.to_dict(),
            "matching_path_excludes": [e.to_dict() for e in self.matching_path_excludes],
        }


@dataclass(frozen=True)
class ResolvedCopyright:
    """
    A canonical copyright statement and the findings normalized to it.

    The statements of the findings can differ from the canonical
    statement in formatting only.
    """

    statement: str
    findings: frozenset[ResolvedCopyrightFinding] = field(default_factory=frozenset)

    @property
    def is_excluded(self) -> bool:
        """Check if every finding of this copyright is excluded."""
        return all(f.is_excluded for f in self.findings)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "statement": self.statement,
            "findings": [
                f.to_dict()
                for f in sorted(self.findings, key=lambda f: (f.location, f.statement))
            ],
        }


@dataclass(frozen=True)
class ResolvedLicenseLocation:
    """
    A text location a license was found at.

    Attributes:
        provenance: Provenance of the file
        location: Text location of the finding
        applied_curation: Curation applied to the finding, if any
        matching_path_excludes: Path excludes matching the location
        copyrights: Copyrights associated with this location
    """

    provenance: Provenance
    location: TextLocation
    applied_curation: LicenseFindingCuration | None = None
    matching_path_excludes: tuple[PathExclude, ...] = ()
    copyrights: frozenset[ResolvedCopyright] = field(default_factory=frozenset)

    @property
    def is_excluded(self) -> bool:
        return bool(self.matching_path_excludes)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "provenance": self.provenance.to_dict(),
            "location": self.location.to_dict(),
            "applied_curation": self.applied_curation.to_dict() if self.applied_curation else None,
            "matching_path_excludes": [e.to_dict() for e in self.matching_path_excludes],
            "copyrights": [
                c.to_dict() for c in sorted(self.copyrights, key=lambda c: c.statement)
            ],
        }


def _location_sort_key(location: ResolvedLicenseLocation) -> tuple[str, TextLocation]:
    return str(location.provenance), location.location


@dataclass(frozen=True)
class ResolvedLicense:
    """
    Resolved information for a single license expression.

    Attributes:
        license: Canonical license expression
        sources: Evidence tiers the license was found in
        original_declared_licenses: Original strings that were processed
                                    or curated into this license, empty
                                    if the text was never changed
        locations: All text locations the license was found at
    """

    license: str
    sources: frozenset[LicenseSource] = field(default_factory=frozenset)
    original_declared_licenses: frozenset[str] = field(default_factory=frozenset)
    locations: frozenset[ResolvedLicenseLocation] = field(default_factory=frozenset)

    @property
    def is_detected_excluded(self) -> bool:
        """True if the license was detected and all its locations are excluded."""
        return LicenseSource.DETECTED in self.sources and all(
            location.matching_path_excludes for location in self.locations
        )

    def get_copyrights(self, omit_excluded: bool = False) -> list[str]:
        """
        Get the copyright statements of all locations.

        Args:
            omit_excluded: Skip copyrights whose findings are all excluded

        Returns:
            Sorted, unique copyright statements
        """
        statements: set[str] = set()
        for location in self.locations:
            for copyright in location.copyrights:
                if omit_excluded and copyright.is_excluded:
                    continue
                statements.add(copyright.statement)
        return sorted(statements)

    def sorted_locations(self) -> list[ResolvedLicenseLocation]:
        """Get locations sorted by provenance and text location."""
        return sorted(self.locations, key=_location_sort_key)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "license": self.license,
            "sources": sorted(s.value for s in self.sources),
            "original_declared_licenses": sorted(self.original_declared_licenses),
            "locations": [location.to_dict() for location in self.sorted_locations()],
            "is_detected_excluded": self.is_detected_excluded,
        }


def _findings_to_dict(
    findings: dict[Provenance, frozenset[CopyrightFinding]],
) -> list[dict[str, Any]]:
    return [
        {
            "provenance": provenance.to_dict(),
            "findings": [
                f.to_dict() for f in sorted(items, key=lambda f: (f.location, f.statement))
            ],
        }
        for provenance, items in sorted(findings.items(), key=lambda item: str(item[0]))
    ]


@dataclass(frozen=True)
class ResolvedLicenseInfo:
    """
    Resolved license information about a package or project.

    Attributes:
        id: Package or project identifier
        license_info: Raw license info the result was derived from
        licenses: One resolved license per distinct license expression,
                  sorted by license
        copyright_garbage: Copyright findings discarded as garbage, by provenance
        unmatched_copyrights: Copyright findings not associated with any
                              license location, by provenance
        unmapped_declared_licenses: Declared licenses that could not be
                                    mapped to an SPDX expression
    """

    id: Identifier
    license_info: LicenseInfo
    licenses: tuple[ResolvedLicense, ...] = ()
    copyright_garbage: dict[Provenance, frozenset[CopyrightFinding]] = field(default_factory=dict)
    unmatched_copyrights: dict[Provenance, frozenset[CopyrightFinding]] = field(default_factory=dict)
    unmapped_declared_licenses: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for resolved in self.licenses:
            if resolved.license in seen:
                raise InvalidArgumentError(
                    f"Duplicate resolved license '{resolved.license}' for {self.id}"
                )
            seen.add(resolved.license)

    def __iter__(self) -> Iterator[ResolvedLicense]:
        return iter(self.licenses)

    def __len__(self) -> int:
        return len(self.licenses)

    def get(self, license: str) -> ResolvedLicense | None:
        """Get the resolved license for a license expression."""
        for resolved in self.licenses:
            if resolved.license == license:
                return resolved
        return None

    def with_licenses(self, licenses: list[ResolvedLicense]) -> ResolvedLicenseInfo:
        """Return a copy with a different list of licenses."""
        return replace(self, licenses=tuple(sorted(licenses, key=lambda r: r.license)))

    def filter(self, license_view: "LicenseView") -> ResolvedLicenseInfo:
        """Return a copy containing only the licenses visible in a view."""
        return license_view.filter(self)

    def filter_location(self, provenance: Provenance, path: str) -> list[ResolvedLicense]:
        """Get all licenses with a location in a file of a provenance."""
        return [
            resolved
            for resolved in self.licenses
            if any(
                location.provenance == provenance and location.location.path == path
                for location in resolved.locations
            )
        ]

    def filter_excluded(self) -> ResolvedLicenseInfo:
        """
        Return a copy without excluded evidence.

        Excluded locations are removed. A license that loses all its
        locations keeps its other sources, and is dropped entirely if it
        was only detected.
        """
        licenses: list[ResolvedLicense] = []

        for resolved in self.licenses:
            locations = frozenset(
                location for location in resolved.locations if not location.is_excluded
            )
            sources = resolved.sources
            if LicenseSource.DETECTED in sources and not locations:
                sources = sources - {LicenseSource.DETECTED}
            if not sources:
                continue
            licenses.append(replace(resolved, sources=sources, locations=locations))

        return self.with_licenses(licenses)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id.to_coordinates(),
            "licenses": [r.to_dict() for r in self.licenses],
            "copyright_garbage": _findings_to_dict(self.copyright_garbage),
            "unmatched_copyrights": _findings_to_dict(self.unmatched_copyrights),
            "unmapped_declared_licenses": list(self.unmapped_declared_licenses),
        }
