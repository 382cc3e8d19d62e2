"""
Curation, exclusion and garbage rules for Mantissa Attribution.

These are the operator-authored rules applied during license
resolution. They are loaded and validated by the configuration layer
and handed to the resolver as immutable value objects, so a single
instance can be shared by concurrent resolutions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from attribution.models.identifier import Provenance

# Concluded license value that removes a finding.
NONE_LICENSE = "NONE"


class PathExcludeReason(Enum):
    """Why a path is out of scope for compliance."""

    BUILD_TOOL_OF = "build_tool_of"
    DATA_FILE_OF = "data_file_of"
    DOCUMENTATION_OF = "documentation_of"
    EXAMPLE_OF = "example_of"
    OPTIONAL_COMPONENT_OF = "optional_component_of"
    OTHER = "other"
    PROVIDED_BY = "provided_by"
    TEST_OF = "test_of"


class LicenseFindingCurationReason(Enum):
    """Why a detected license finding was corrected."""

    CODE = "code"  # Matched text is code, not a license
    DATA_OF = "data_of"  # Matched text is data, e.g. a license list
    DOCUMENTATION_OF = "documentation_of"
    INCORRECT = "incorrect"  # Scanner detected the wrong license
    NOT_DETECTED = "not_detected"  # Scanner missed part of the license
    REFERENCE = "reference"  # Text only references a license


@dataclass(frozen=True)
class PathExclude:
    """
    Marks matching paths as excluded while keeping them for audit.

    Attributes:
        pattern: Glob pattern matched against paths
        reason: Why the paths are excluded
        comment: Free-text justification
        provenance: Restrict the rule to one provenance (None = any)
    """

    pattern: str
    reason: PathExcludeReason = PathExcludeReason.OTHER
    comment: str = ""
    provenance: Provenance | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "pattern": self.pattern,
            "reason": self.reason.value,
            "comment": self.comment,
            "provenance": self.provenance.to_dict() if self.provenance else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PathExclude:
        """Create from dictionary."""
        provenance = data.get("provenance")
        return cls(
            pattern=data["pattern"],
            reason=PathExcludeReason(data.get("reason", "other").lower()),
            comment=data.get("comment", ""),
            provenance=Provenance.from_dict(provenance) if provenance else None,
        )


@dataclass(frozen=True)
class LicenseFindingCuration:
    """
    Rewrites or removes detected license findings at matching locations.

    Attributes:
        path: Glob pattern for the file path
        concluded_license: Replacement license, None removes the finding
        detected_license: Only match findings of this license (None = any)
        start_lines: Only match findings starting on one of these lines
        line_count: Only match findings spanning this many lines
        reason: Why the curation is needed
        comment: Free-text justification
        provenance: Restrict the curation to one provenance (None = any)
    """

    path: str
    concluded_license: str | None
    detected_license: str | None = None
    start_lines: tuple[int, ...] = ()
    line_count: int | None = None
    reason: LicenseFindingCurationReason = LicenseFindingCurationReason.INCORRECT
    comment: str = ""
    provenance: Provenance | None = None

    @property
    def removes_finding(self) -> bool:
        """Check if the curation removes matching findings."""
        if self.concluded_license is None:
            return True
        return self.concluded_license.strip().upper() == NONE_LICENSE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "path": self.path,
            "concluded_license": self.concluded_license or NONE_LICENSE,
            "detected_license": self.detected_license,
            "start_lines": list(self.start_lines),
            "line_count": self.line_count,
            "reason": self.reason.value,
            "comment": self.comment,
            "provenance": self.provenance.to_dict() if self.provenance else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LicenseFindingCuration:
        """Create from dictionary."""
        concluded = data.get("concluded_license")
        if concluded is not None and concluded.strip().upper() == NONE_LICENSE:
            concluded = None

        start_lines = data.get("start_lines", [])
        if isinstance(start_lines, (int, str)):
            start_lines = [start_lines]

        provenance = data.get("provenance")
        return cls(
            path=data["path"],
            concluded_license=concluded,
            detected_license=data.get("detected_license"),
            start_lines=tuple(int(line) for line in start_lines),
            line_count=data.get("line_count"),
            reason=LicenseFindingCurationReason(data.get("reason", "incorrect").lower()),
            comment=data.get("comment", ""),
            provenance=Provenance.from_dict(provenance) if provenance else None,
        )


@dataclass(frozen=True)
class CopyrightGarbage:
    """Copyright statements to discard unconditionally."""

    items: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def of(cls, statements: Iterable[str]) -> CopyrightGarbage:
        """Create from any iterable of statements."""
        return cls(items=frozenset(statements))

    def __contains__(self, statement: object) -> bool:
        return statement in self.items

    def __len__(self) -> int:
        return len(self.items)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"items": sorted(self.items)}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | list[str]) -> CopyrightGarbage:
        """Create from dictionary or a plain list of statements."""
        if isinstance(data, list):
            return cls.of(data)
        return cls.of(data.get("items", []))
