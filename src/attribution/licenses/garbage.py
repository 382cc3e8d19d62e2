"""
Copyright garbage filtering for Mantissa Attribution.

Garbage lists are authored against raw scanner output, so statements
are compared verbatim after trimming surrounding whitespace. No other
normalization is applied.
"""

from __future__ import annotations

from typing import Iterable

from attribution.models import CopyrightFinding, CopyrightGarbage


class CopyrightGarbageFilter:
    """Discards copyright statements listed as garbage."""

    def __init__(self, garbage: CopyrightGarbage | None = None):
        """
        Initialize the filter.

        Args:
            garbage: Statements to discard
        """
        self._garbage = frozenset(
            item.strip() for item in (garbage.items if garbage else ())
        )

    def keep(self, statement: str) -> bool:
        """
        Check if a statement should be kept.

        Args:
            statement: Copyright statement

        Returns:
            True if the statement is not garbage
        """
        return statement.strip() not in self._garbage

    def partition(
        self,
        findings: Iterable[CopyrightFinding],
    ) -> tuple[list[CopyrightFinding], list[CopyrightFinding]]:
        """
        Split findings into kept and discarded findings.

        Returns:
            Tuple of (kept, discarded) findings, in input order
        """
        kept: list[CopyrightFinding] = []
        discarded: list[CopyrightFinding] = []

        for finding in findings:
            if self.keep(finding.statement):
                kept.append(finding)
            else:
                discarded.append(finding)

        return kept, discarded
