"""
Path exclude matching for Mantissa Attribution.

Matches file paths of a provenance against configured path excludes.
"""

from __future__ import annotations

import fnmatch
from typing import Iterable

from attribution.models import PathExclude, Provenance


def glob_matches(pattern: str, path: str) -> bool:
    """
    Match a path against a glob pattern.

    Uses fnmatch semantics, where "*" also matches "/". A leading "**/"
    additionally matches zero directories, so "**/test/**" matches both
    "test/a.c" and "src/test/a.c".
    """
    path = path.lstrip("/")
    if fnmatch.fnmatchcase(path, pattern):
        return True
    while pattern.startswith("**/"):
        pattern = pattern[3:]
        if fnmatch.fnmatchcase(path, pattern):
            return True
    return False


class PathExcludeMatcher:
    """
    Matches paths against path excludes.

    An exclude applies if its provenance scope is unset or equal to the
    provenance of the path, and its pattern matches the path.

    Patterns follow glob_matches: "*" is not limited to one path segment,
    so "*.md" excludes "README.md" as well as "docs/api/index.md". Use
    a literal directory prefix such as "docs/*.md" to narrow a pattern.
    """

    def __init__(self, excludes: Iterable[PathExclude] = ()):
        """
        Initialize the matcher.

        Args:
            excludes: Path excludes to match against
        """
        self._excludes = tuple(excludes)

    @property
    def excludes(self) -> tuple[PathExclude, ...]:
        """Get configured excludes."""
        return self._excludes

    def matches(self, provenance: Provenance, path: str) -> list[PathExclude]:
        """
        Find all excludes matching a path.

        Args:
            provenance: Provenance the path is relative to
            path: File path

        Returns:
            Matching excludes in declaration order, empty if none match
        """
        return [
            exclude
            for exclude in self._excludes
            if (exclude.provenance is None or exclude.provenance == provenance)
            and glob_matches(exclude.pattern, path)
        ]

    def is_excluded(self, provenance: Provenance, path: str) -> bool:
        """Check if any exclude matches a path."""
        return bool(self.matches(provenance, path))
