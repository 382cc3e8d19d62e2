"""
Raw license and copyright findings for Mantissa Attribution.

Findings are produced once by an external analysis or scan phase and
are immutable inputs to license resolution. LicenseInfo bundles all
findings of a single package or project.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from attribution.models.identifier import Identifier, Provenance, TextLocation


class LicenseSource(Enum):
    """Evidence tier a license was taken from."""

    DECLARED = "declared"  # Package metadata
    DETECTED = "detected"  # Scanner findings
    CONCLUDED = "concluded"  # Manually concluded

    @property
    def trust_rank(self) -> int:
        """Rank of the source when deciding which licenses are authoritative."""
        return _TRUST_RANKS[self]

    @classmethod
    def from_string(cls, value: str) -> LicenseSource:
        """
        Create LicenseSource from string value.

        Args:
            value: String representation (case-insensitive)

        Returns:
            Matching LicenseSource enum value

        Raises:
            ValueError: If value is not a valid source
        """
        value_lower = value.lower()
        for source in cls:
            if source.value == value_lower:
                return source
        raise ValueError(f"Invalid license source: {value}")


_TRUST_RANKS = {
    LicenseSource.DETECTED: 1,
    LicenseSource.DECLARED: 2,
    LicenseSource.CONCLUDED: 3,
}


@dataclass(frozen=True)
class LicenseFinding:
    """A single detected license expression at a text location."""

    license: str
    location: TextLocation

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"license": self.license, "location": self.location.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LicenseFinding:
        """Create from dictionary."""
        return cls(
            license=data["license"],
            location=TextLocation.from_dict(data.get("location", {})),
        )


@dataclass(frozen=True)
class CopyrightFinding:
    """A single detected copyright statement at a text location."""

    statement: str
    location: TextLocation

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"statement": self.statement, "location": self.location.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CopyrightFinding:
        """Create from dictionary."""
        return cls(
            statement=data["statement"],
            location=TextLocation.from_dict(data.get("location", {})),
        )


@dataclass(frozen=True)
class Findings:
    """
    Detected license and copyright findings of a single provenance.

    Attributes:
        provenance: Source snapshot all locations are relative to
        licenses: Detected license findings
        copyrights: Detected copyright findings
    """

    provenance: Provenance
    licenses: tuple[LicenseFinding, ...] = ()
    copyrights: tuple[CopyrightFinding, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "provenance": self.provenance.to_dict(),
            "licenses": [f.to_dict() for f in self.licenses],
            "copyrights": [f.to_dict() for f in self.copyrights],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Findings:
        """Create from dictionary."""
        return cls(
            provenance=Provenance.from_dict(data.get("provenance")),
            licenses=tuple(LicenseFinding.from_dict(f) for f in data.get("licenses", [])),
            copyrights=tuple(
                CopyrightFinding.from_dict(f) for f in data.get("copyrights", [])
            ),
        )


@dataclass(frozen=True)
class LicenseInfo:
    """
    Unresolved license information about a package or project.

    Attributes:
        id: Package or project identifier
        declared_licenses: Raw declared license strings from metadata
        detected: Detected findings, one entry per provenance
        concluded_license: Manually concluded license expression
    """

    id: Identifier
    declared_licenses: tuple[str, ...] = ()
    detected: tuple[Findings, ...] = ()
    concluded_license: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id.to_coordinates(),
            "declared_licenses": list(self.declared_licenses),
            "findings": [f.to_dict() for f in self.detected],
            "concluded_license": self.concluded_license,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LicenseInfo:
        """Create from dictionary."""
        return cls(
            id=Identifier.from_coordinates(data["id"]),
            declared_licenses=tuple(data.get("declared_licenses", [])),
            detected=tuple(Findings.from_dict(f) for f in data.get("findings", [])),
            concluded_license=data.get("concluded_license"),
        )
