"""
Identity and location models for Mantissa Attribution.

This module defines the immutable keys every finding is tied to:
the Identifier of a package or project, the Provenance of the scanned
source code, and the TextLocation of a finding within that source.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


@dataclass(frozen=True, order=True)
class Identifier:
    """
    Stable key for a package or project.

    Attributes:
        type: Package manager or project type (e.g. NPM, Maven, PyPI)
        namespace: Group, scope or organization of the package
        name: Package name
        version: Package version
    """

    type: str = ""
    namespace: str = ""
    name: str = ""
    version: str = ""

    @classmethod
    def from_coordinates(cls, coordinates: str) -> Identifier:
        """
        Create an Identifier from its "type:namespace:name:version" form.

        Missing trailing components are treated as empty strings.

        Args:
            coordinates: Colon separated coordinates

        Returns:
            Parsed Identifier
        """
        parts = coordinates.strip().split(":", 3)
        parts += [""] * (4 - len(parts))
        return cls(type=parts[0], namespace=parts[1], name=parts[2], version=parts[3])

    def to_coordinates(self) -> str:
        """Return the "type:namespace:name:version" form."""
        return f"{self.type}:{self.namespace}:{self.name}:{self.version}"

    def __str__(self) -> str:
        return self.to_coordinates()


class ProvenanceKind(Enum):
    """Kind of source snapshot a provenance refers to."""

    ARTIFACT = "artifact"  # Source or binary archive
    REPOSITORY = "repository"  # VCS clone at a revision
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Provenance:
    """
    Origin of the source code a finding's location is relative to.

    Two findings are only comparable if their provenances are equal.

    Attributes:
        kind: Kind of snapshot
        url: Artifact URL or repository URL
        revision: Resolved VCS revision (repositories only)
        hash: Artifact checksum (artifacts only)
    """

    kind: ProvenanceKind = ProvenanceKind.UNKNOWN
    url: str = ""
    revision: str = ""
    hash: str = ""

    @classmethod
    def unknown(cls) -> Provenance:
        """Provenance used for declared and concluded licenses."""
        return cls()

    @property
    def is_unknown(self) -> bool:
        return self.kind == ProvenanceKind.UNKNOWN

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "url": self.url,
            "revision": self.revision,
            "hash": self.hash,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Provenance:
        """Create from dictionary."""
        if not data:
            return cls.unknown()
        return cls(
            kind=ProvenanceKind(data.get("kind", "unknown")),
            url=data.get("url", ""),
            revision=data.get("revision", ""),
            hash=data.get("hash", ""),
        )

    def __str__(self) -> str:
        if self.is_unknown:
            return "unknown"
        if self.revision:
            return f"{self.url}@{self.revision}"
        return self.url


UNKNOWN_LINE = -1


@dataclass(frozen=True, order=True)
class TextLocation:
    """
    A line range within a file of a provenance.

    Attributes:
        path: File path relative to the provenance root
        start_line: First line (1-based)
        end_line: Last line (inclusive)
    """

    path: str
    start_line: int = UNKNOWN_LINE
    end_line: int = UNKNOWN_LINE

    @classmethod
    def unknown(cls) -> TextLocation:
        """Location used for findings without a file, like declared licenses."""
        return cls(path="")

    @property
    def line_count(self) -> int:
        """Number of lines covered, or 0 for unknown lines."""
        if self.start_line == UNKNOWN_LINE or self.end_line == UNKNOWN_LINE:
            return 0
        return self.end_line - self.start_line + 1

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "path": self.path,
            "start_line": self.start_line,
            "end_line": self.end_line,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TextLocation:
        """Create from dictionary."""
        start_line = int(data.get("start_line", UNKNOWN_LINE))
        return cls(
            path=data.get("path", ""),
            start_line=start_line,
            end_line=int(data.get("end_line", start_line)),
        )

    def __str__(self) -> str:
        if self.start_line == UNKNOWN_LINE:
            return self.path
        return f"{self.path}:{self.start_line}-{self.end_line}"
