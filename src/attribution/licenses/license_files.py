"""
License file information for Mantissa Attribution.

A package may ship verbatim license files (LICENSE, COPYING, NOTICE).
When those texts are included in a notice, the licenses they already
cover do not need to be listed again.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from attribution.licenses.resolved import ResolvedLicense, ResolvedLicenseInfo
from attribution.licenses.spdx import normalize_expression
from attribution.models import Identifier, Provenance


@dataclass(frozen=True)
class ResolvedLicenseFile:
    """
    A license file of a package.

    Attributes:
        provenance: Provenance the file was taken from
        path: Path of the file within the provenance
        licenses: Licenses the license file parser attributed to the file
        text: Verbatim file content
    """

    provenance: Provenance
    path: str
    licenses: tuple[str, ...] = ()
    text: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "provenance": self.provenance.to_dict(),
            "path": self.path,
            "licenses": list(self.licenses),
            "text": self.text,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResolvedLicenseFile:
        """Create from dictionary."""
        return cls(
            provenance=Provenance.from_dict(data.get("provenance")),
            path=data["path"],
            licenses=tuple(normalize_expression(lic) for lic in data.get("licenses", [])),
            text=data.get("text", ""),
        )


@dataclass(frozen=True)
class ResolvedLicenseFileInfo:
    """All license files of a package or project."""

    id: Identifier
    files: tuple[ResolvedLicenseFile, ...] = ()

    @property
    def licenses(self) -> set[str]:
        """Licenses covered by any of the files."""
        return {license for f in self.files for license in f.licenses}


def licenses_not_in_license_files(
    info: ResolvedLicenseInfo,
    license_files: ResolvedLicenseFileInfo | None,
) -> list[ResolvedLicense]:
    """
    Get the licenses of a package that no license file covers.

    Useful when the raw texts of the license files are included in a
    notice and only the remaining licenses shall be listed separately.
    """
    if license_files is None:
        return list(info.licenses)
    covered = license_files.licenses
    return [resolved for resolved in info.licenses if resolved.license not in covered]
