"""
Copyright statement normalization for Mantissa Attribution.

Groups copyright statements that only differ in formatting into one
canonical statement. Two statements are equivalent when they contain
the same words (ignoring case, punctuation and the "(c)" / "©" marks)
and cover the same set of years, with year ranges expanded, so
"Copyright (c) 2010-2012 Alice" and "copyright 2010, 2011, 2012 Alice."
fall into the same group.
"""

from __future__ import annotations

import re
from typing import Iterable

# Year ranges like "2010-2012", "2010 - 12" or "2010–2012".
_YEAR_RANGE_PATTERN = re.compile(r"\b((?:19|20)\d{2})\s*[-–—]\s*((?:19|20)?\d{2})\b")
_YEAR_PATTERN = re.compile(r"\b(?:19|20)\d{2}\b")
_COPYRIGHT_MARK_PATTERN = re.compile(r"\(c\)|©", re.IGNORECASE)
_WORD_PATTERN = re.compile(r"\w+")

EquivalenceKey = tuple[str, frozenset[int]]


def _expand_range(start: str, end: str) -> set[int]:
    first = int(start)
    if len(end) == 2:
        last = first // 100 * 100 + int(end)
    else:
        last = int(end)
    if last < first:
        return {first, last}
    return set(range(first, last + 1))


def extract_years(statement: str) -> tuple[frozenset[int], str]:
    """
    Extract all years mentioned in a statement.

    Args:
        statement: Copyright statement

    Returns:
        Tuple of the expanded years and the statement with years removed
    """
    years: set[int] = set()

    for match in _YEAR_RANGE_PATTERN.finditer(statement):
        years |= _expand_range(match.group(1), match.group(2))
    remainder = _YEAR_RANGE_PATTERN.sub(" ", statement)

    years |= {int(year) for year in _YEAR_PATTERN.findall(remainder)}
    remainder = _YEAR_PATTERN.sub(" ", remainder)

    return frozenset(years), remainder


def equivalence_key(statement: str) -> EquivalenceKey:
    """Return the key under which equivalent statements compare equal."""
    years, remainder = extract_years(statement)
    remainder = _COPYRIGHT_MARK_PATTERN.sub(" ", remainder)
    words = _WORD_PATTERN.findall(remainder.casefold())
    return " ".join(words), years


class CopyrightStatementsNormalizer:
    """
    Groups equivalent copyright statements.

    Grouping is by equality of the equivalence key, which is transitive,
    so the result does not depend on input order. The representative of
    each group is its shortest statement, ties broken lexicographically.
    """

    def normalize(self, statements: Iterable[str]) -> dict[str, set[str]]:
        """
        Group statements by equivalence.

        Args:
            statements: Raw copyright statements

        Returns:
            Canonical statement mapped to the original statements, sorted
            by canonical statement
        """
        groups: dict[EquivalenceKey, set[str]] = {}

        for statement in sorted(set(statements)):
            if not statement.strip():
                continue
            groups.setdefault(equivalence_key(statement), set()).add(statement)

        result: dict[str, set[str]] = {}
        for originals in groups.values():
            representative = min((s.strip() for s in originals), key=lambda s: (len(s), s))
            result.setdefault(representative, set()).update(originals)

        return dict(sorted(result.items()))

    def are_equivalent(self, first: str, second: str) -> bool:
        """Check if two statements normalize to the same canonical statement."""
        return equivalence_key(first) == equivalence_key(second)


def normalize_statements(statements: Iterable[str]) -> dict[str, set[str]]:
    """
    Group equivalent copyright statements.

    Convenience function for one-off normalization.
    """
    return CopyrightStatementsNormalizer().normalize(statements)
